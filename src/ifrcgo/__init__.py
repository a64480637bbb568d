"""ifrcgo - IFRC GO humanitarian data as MCP tools.

Exposes the IFRC GO Admin API (DREF operations, appeals, emergencies,
country data, surge personnel, Emergency Response Units) as a catalogue of
validated, cached tools served over MCP stdio or HTTP.

Quick Start:
    >>> from ifrcgo import GoApiClient, build_registry, Dispatcher
    >>> 
    >>> client = GoApiClient()
    >>> dispatcher = Dispatcher(build_registry(client))
    >>> result = await dispatcher.call("search_drefs_by_country", {"country_iso": "BD", "limit": 5})
    >>> result.isError
    False

Configuration (environment):
    IFRCGO_API_TOKEN=...          # sent only to endpoints that need it
    IFRCGO_CACHE_TTL=300          # seconds
    IFRCGO_LOG_FORMAT=json        # console | json | none
"""

from __future__ import annotations

__version__ = "1.0.0"

from ifrcgo.client import EruTypeMapping, GoApiClient, RequestDescriptor
from ifrcgo.ext.mcp import Dispatcher, build_mcp_server, create_server
from ifrcgo.foundation.config import GoSettings, get_settings
from ifrcgo.foundation.errors import ErrorCode, GoApiError, ToolError
from ifrcgo.foundation.registry import ToolRegistry
from ifrcgo.io.cache import MemoryCache
from ifrcgo.runtime.observability import configure_logging, get_logger
from ifrcgo.tools import CATALOG, build_registry

__all__ = [
    "__version__",
    # Client
    "GoApiClient", "RequestDescriptor", "EruTypeMapping", "MemoryCache",
    # Tools
    "CATALOG", "build_registry", "ToolRegistry",
    # Protocol
    "Dispatcher", "build_mcp_server", "create_server",
    # Errors
    "ErrorCode", "ToolError", "GoApiError",
    # Config & logging
    "GoSettings", "get_settings", "configure_logging", "get_logger",
]
