"""HTTP binding for browser and backend callers.

Endpoints:
    GET  /                    → server info + tool descriptors
    POST /                    → {"method": "tools/list" | "tools/call", "params": {...}}
    GET  /tools               → tool descriptors
    POST /tools/{name}        → invoke tool with JSON arguments body
    GET  /tools/{name}/schema → one tool descriptor
    *    /mcp                 → MCP streamable HTTP (when an endpoint is given)

Tool calls always answer 200 with a result envelope; isError tells success
from failure. Non-200 statuses are reserved for malformed requests.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

import orjson
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import ASGIApp

from ifrcgo.runtime.observability import get_logger

from .dispatcher import Dispatcher, envelope

log = get_logger("ifrcgo.http")

Lifespan = Callable[[Starlette], AbstractAsyncContextManager[None]]

SERVER_DESCRIPTION = "MCP server for IFRC GO Admin API access"


class _BadBody(Exception):
    def __init__(self, message: str) -> None:
        self.response = JSONResponse({"error": message}, status_code=400)
        super().__init__(message)


async def _json_body(request: Request, *, empty: Any = None) -> Any:
    raw = await request.body()
    if not raw.strip():
        return empty
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise _BadBody(f"Invalid JSON body: {e}") from e


def create_http_app(
    dispatcher: Dispatcher,
    *,
    name: str,
    version: str,
    mcp_endpoint: ASGIApp | None = None,
    lifespan: Lifespan | None = None,
) -> Starlette:
    """Starlette app exposing the dispatcher's tools, with permissive CORS."""
    
    async def server_info(request: Request) -> JSONResponse:
        return JSONResponse({
            "server": {"name": name, "version": version, "description": SERVER_DESCRIPTION},
            "tools": dispatcher.list_tools(),
        })
    
    async def rpc(request: Request) -> JSONResponse:
        try:
            body = await _json_body(request)
        except _BadBody as e:
            return e.response
        if not isinstance(body, dict):
            return JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)
        
        params = body.get("params") or {}
        match body.get("method"):
            case "tools/list":
                return JSONResponse({"tools": dispatcher.list_tools()})
            case "tools/call" if isinstance(params, dict) and isinstance(params.get("name"), str):
                arguments = params.get("arguments") or {}
                if not isinstance(arguments, dict):
                    return JSONResponse({"error": "Tool arguments must be a JSON object"}, status_code=400)
                return JSONResponse(envelope(await dispatcher.call(params["name"], arguments)))
            case "tools/call":
                return JSONResponse({"error": "Tool name is required"}, status_code=400)
            case method:
                log.debug("unsupported method", method=method)
                return JSONResponse({"error": "Unsupported method"}, status_code=400)
    
    async def list_tools(request: Request) -> JSONResponse:
        return JSONResponse({"server": name, "tools": dispatcher.list_tools()})
    
    async def invoke_tool(request: Request) -> JSONResponse:
        try:
            arguments = await _json_body(request, empty={})
        except _BadBody as e:
            return e.response
        if not isinstance(arguments, dict):
            return JSONResponse({"error": "Tool arguments must be a JSON object"}, status_code=400)
        result = await dispatcher.call(request.path_params["name"], arguments)
        return JSONResponse(envelope(result))
    
    async def get_tool_schema(request: Request) -> JSONResponse:
        tool_name = request.path_params["name"]
        tool = dispatcher.registry.get(tool_name)
        if tool is None:
            return JSONResponse({"error": f"Tool '{tool_name}' not found"}, status_code=404)
        return JSONResponse(tool.descriptor())
    
    routes = [
        Route("/", server_info, methods=["GET"]),
        Route("/", rpc, methods=["POST"]),
        Route("/tools", list_tools, methods=["GET"]),
        Route("/tools/{name}", invoke_tool, methods=["POST"]),
        Route("/tools/{name}/schema", get_tool_schema, methods=["GET"]),
    ]
    if mcp_endpoint is not None:
        routes.append(Route("/mcp", endpoint=mcp_endpoint))
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Mcp-Protocol-Version"],
        ),
    ]
    return Starlette(routes=routes, middleware=middleware, lifespan=lifespan)
