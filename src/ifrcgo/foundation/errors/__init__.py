"""Unified error handling for ifrcgo.

- ErrorCode: Standard error codes for tool failures
- ToolError: Structured error envelope rendered for agents
- GoApiError and subclasses: failures raised by the upstream client
"""

from .errors import (
    ErrorCode,
    GoApiError,
    ToolError,
    UnknownEruTypeError,
    UpstreamFetchError,
    UpstreamHTTPError,
    classify_exception,
    classify_status,
    format_validation_error,
)

__all__ = [
    # Core errors
    "ErrorCode", "ToolError", "classify_exception", "format_validation_error",
    # Upstream errors
    "GoApiError", "UpstreamHTTPError", "UpstreamFetchError", "UnknownEruTypeError", "classify_status",
]
