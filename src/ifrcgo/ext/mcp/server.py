"""Tool servers for the IFRC GO tools.

Both adapters share one wiring: client -> registry -> dispatcher -> an MCP
`Server` from the official SDK, which owns the handshake, version negotiation
and message framing.

1. **stdio** - MCP clients that spawn the server (Claude Desktop, Cursor)
2. **HTTP** - Starlette app for browser and backend callers plus MCP
   streamable HTTP at /mcp, served by uvicorn

Example:
    >>> from ifrcgo.ext.mcp import create_server
    >>> create_server().run()                        # stdio, from IFRCGO_* env
    >>> create_server(transport="http").run(port=8080)
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Literal

import uvicorn
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

from ifrcgo import __version__
from ifrcgo.client import GoApiClient
from ifrcgo.foundation.config import GoSettings, get_settings
from ifrcgo.runtime.observability import get_logger
from ifrcgo.tools import build_registry

from .dispatcher import Dispatcher
from .http import SERVER_DESCRIPTION, create_http_app

if TYPE_CHECKING:
    import anyio
    from starlette.applications import Starlette
    from starlette.types import Receive, Scope, Send

    from ifrcgo.foundation.registry import ToolRegistry

Transport = Literal["stdio", "http"]

log = get_logger("ifrcgo.server")


def build_mcp_server(dispatcher: Dispatcher, *, name: str, version: str = __version__) -> Server:
    """MCP server whose tools/list and tools/call go through the dispatcher.
    
    Input validation is left to the dispatcher so invalid arguments come back
    as the same isError envelope on every transport.
    """
    server: Server = Server(name, version=version, instructions=SERVER_DESCRIPTION)
    
    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.tools()
    
    @server.call_tool(validate_input=False)
    async def call_tool(tool_name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await dispatcher.call(tool_name, arguments)
    
    return server


class StreamableHTTPEndpoint:
    """ASGI endpoint handing requests to the SDK's session manager."""
    
    __slots__ = ("_sessions",)
    
    def __init__(self, sessions: StreamableHTTPSessionManager) -> None:
        self._sessions = sessions
    
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._sessions.handle_request(scope, receive, send)


# ═══════════════════════════════════════════════════════════════════════════════
# Abstract Server
# ═══════════════════════════════════════════════════════════════════════════════


class ToolServer(ABC):
    """Owns the API client and exposes its tools over one transport."""
    
    __slots__ = ("_name", "_client", "_registry", "_dispatcher", "_mcp")
    
    def __init__(self, name: str, client: GoApiClient) -> None:
        self._name = name
        self._client = client
        self._registry = build_registry(client)
        self._dispatcher = Dispatcher(self._registry)
        self._mcp = build_mcp_server(self._dispatcher, name=name)
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def client(self) -> GoApiClient:
        return self._client
    
    @property
    def registry(self) -> ToolRegistry:
        return self._registry
    
    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher
    
    @property
    def mcp(self) -> Server:
        """Underlying MCP SDK server."""
        return self._mcp
    
    @abstractmethod
    def run(self, **kwargs: object) -> None:
        """Start the server (blocking)."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Adapters
# ═══════════════════════════════════════════════════════════════════════════════


class StdioToolServer(ToolServer):
    """MCP over stdin/stdout."""
    
    __slots__ = ()
    
    async def serve(
        self,
        stdin: anyio.AsyncFile[str] | None = None,
        stdout: anyio.AsyncFile[str] | None = None,
    ) -> None:
        """Serve until stdin closes; the streams default to the process's own."""
        log.info("serving", server=self._name, transport="stdio", tools=len(self._registry))
        try:
            async with stdio_server(stdin=stdin, stdout=stdout) as (read_stream, write_stream):
                await self._mcp.run(read_stream, write_stream, self._mcp.create_initialization_options())
        finally:
            await self._client.aclose()
    
    def run(self, **kwargs: object) -> None:
        asyncio.run(self.serve())


class HTTPToolServer(ToolServer):
    """HTTP endpoints with CORS, plus stateless MCP streamable HTTP at /mcp.
    
    Example:
        >>> server = HTTPToolServer("ifrc-go", GoApiClient())
        >>> server.run(host="0.0.0.0", port=8000)
    """
    
    __slots__ = ("_sessions", "_app")
    
    def __init__(self, name: str, client: GoApiClient) -> None:
        super().__init__(name, client)
        self._sessions = StreamableHTTPSessionManager(app=self._mcp, json_response=True, stateless=True)
        self._app = create_http_app(
            self._dispatcher,
            name=name,
            version=__version__,
            mcp_endpoint=StreamableHTTPEndpoint(self._sessions),
            lifespan=self._lifespan,
        )
    
    @asynccontextmanager
    async def _lifespan(self, app: Starlette) -> AsyncIterator[None]:
        log.info("serving", server=self._name, transport="http", tools=len(self._registry))
        try:
            async with self._sessions.run():
                yield
        finally:
            await self._client.aclose()
    
    @property
    def app(self) -> Starlette:
        """ASGI app for embedding in larger applications."""
        return self._app
    
    def run(self, host: str = "127.0.0.1", port: int = 8000, **kwargs: object) -> None:
        uvicorn.run(self._app, host=host, port=port, log_level="warning")


# ═══════════════════════════════════════════════════════════════════════════════
# Factory Functions
# ═══════════════════════════════════════════════════════════════════════════════


def create_server(
    settings: GoSettings | None = None,
    *,
    transport: Transport | None = None,
    client: GoApiClient | None = None,
) -> ToolServer:
    """Build a server from settings; transport defaults to settings.server.transport."""
    settings = settings or get_settings()
    client = client or GoApiClient.from_settings(settings)
    match transport or settings.server.transport:
        case "stdio":
            return StdioToolServer(settings.server.name, client)
        case "http":
            return HTTPToolServer(settings.server.name, client)
        case other:
            raise ValueError(f"Unknown transport: {other!r}")


def create_http_app_from_settings(settings: GoSettings | None = None) -> Starlette:
    """ASGI app for `uvicorn ifrcgo.ext.mcp:create_http_app_from_settings --factory`."""
    settings = settings or get_settings()
    return HTTPToolServer(settings.server.name, GoApiClient.from_settings(settings)).app
