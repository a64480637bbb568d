"""Foundation - Core building blocks for ifrcgo.

Contains: tool records, error handling, registry, config.
"""

from __future__ import annotations

__all__ = [
    # Core
    "Tool", "ToolMetadata",
    # Errors
    "ErrorCode", "ToolError", "classify_exception", "format_validation_error",
    "GoApiError", "UpstreamHTTPError", "UpstreamFetchError", "UnknownEruTypeError",
    # Registry
    "ToolRegistry",
    # Config
    "GoSettings", "get_settings", "clear_settings_cache",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("Tool", "ToolMetadata"):
        from . import core
        return getattr(core, name)
    
    if name in ("ErrorCode", "ToolError", "classify_exception", "format_validation_error",
                "GoApiError", "UpstreamHTTPError", "UpstreamFetchError", "UnknownEruTypeError"):
        from . import errors
        return getattr(errors, name)
    
    if name == "ToolRegistry":
        from . import registry
        return registry.ToolRegistry
    
    if name in ("GoSettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)
    
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
