"""Generic tool dispatch: lookup, validate, invoke, wrap.

The dispatcher is the error boundary. Whatever goes wrong inside a call
(unknown tool, invalid arguments, upstream failure, a bug in a handler) comes
back as a CallToolResult with isError=true; nothing propagates to the
transport.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

import orjson
from mcp import types
from pydantic import ValidationError

from ifrcgo.foundation.errors import ErrorCode, GoApiError, ToolError, format_validation_error
from ifrcgo.foundation.registry import ToolRegistry
from ifrcgo.runtime.observability import get_logger

log = get_logger("ifrcgo.dispatcher")


def to_json_text(payload: Any) -> str:
    """Pretty-printed JSON (2-space indent) for the envelope text block."""
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS).decode()


def success(text: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)], isError=False)


def failure(error: ToolError) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=error.render())], isError=True)


def envelope(result: types.CallToolResult) -> dict[str, Any]:
    """Wire form of a result: {"content": [{"type": "text", "text": ...}], "isError": bool}."""
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


class Dispatcher:
    """Stateless bridge between protocol requests and the tool registry."""
    
    __slots__ = ("_registry",)
    
    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry
    
    @property
    def registry(self) -> ToolRegistry:
        return self._registry
    
    def list_tools(self) -> list[dict[str, Any]]:
        """Tool descriptors: name, description, inputSchema."""
        return self._registry.descriptors()
    
    def tools(self) -> list[types.Tool]:
        return [types.Tool.model_validate(d) for d in self.list_tools()]
    
    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> types.CallToolResult:
        """Invoke a tool by name. Never raises for tool-level failures."""
        tool = self._registry.get(name)
        if tool is None:
            log.warning("unknown tool", tool=name)
            return failure(ToolError.create(
                name.strip() or "unknown", f"Unknown tool: '{name}'", ErrorCode.NOT_FOUND, recoverable=False,
            ))
        
        tool_log = log.bind_tool(name)
        try:
            params = tool.validate(arguments)
        except ValidationError as e:
            tool_log.info("invalid arguments", errors=e.error_count())
            return failure(ToolError.create(
                name, format_validation_error(e), ErrorCode.INVALID_PARAMS, recoverable=False,
            ))
        
        start = time.perf_counter()
        try:
            payload = await tool.invoke(params)
            text = to_json_text(payload)
        except GoApiError as e:
            tool_log.warning("tool failed", error=str(e), code=e.code, duration_ms=_elapsed(start))
            return failure(e.to_tool_error(name))
        except Exception as e:
            tool_log.exception("tool crashed", duration_ms=_elapsed(start))
            return failure(ToolError.from_exception(name, e, "Execution failed", recoverable=False))
        
        tool_log.info("tool completed", duration_ms=_elapsed(start))
        return success(text)


def _elapsed(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
