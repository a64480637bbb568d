"""MCP integration: dispatcher, SDK-backed MCP server and stdio/HTTP adapters."""

from .dispatcher import Dispatcher, envelope, failure, success, to_json_text
from .http import create_http_app
from .server import (
    HTTPToolServer,
    StdioToolServer,
    StreamableHTTPEndpoint,
    ToolServer,
    Transport,
    build_mcp_server,
    create_http_app_from_settings,
    create_server,
)

__all__ = [
    "Dispatcher", "envelope", "success", "failure", "to_json_text",
    "build_mcp_server", "StreamableHTTPEndpoint", "create_http_app",
    "ToolServer", "StdioToolServer", "HTTPToolServer", "Transport",
    "create_server", "create_http_app_from_settings",
]
