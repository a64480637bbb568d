"""Standardized error handling for tools.

Provides error codes, structured error responses for agent feedback, and the
exception types raised while talking to the IFRC GO API. Every failure is
eventually rendered through ToolError so callers see one uniform shape.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING, Annotated, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pydantic import ValidationError


class ErrorCode(StrEnum):
    """Standard error codes for tool failures.
    
    Used for programmatic error handling and log classification.
    """
    API_KEY_INVALID = "API_KEY_INVALID"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_PARAMS = "INVALID_PARAMS"
    PARSE_ERROR = "PARSE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


# Flattened pattern -> code mapping, checked in insertion order
_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "timed out": ErrorCode.TIMEOUT,
    "connect": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "dns": ErrorCode.NETWORK_ERROR,
    "rate": ErrorCode.RATE_LIMITED,
    "auth": ErrorCode.API_KEY_INVALID,
    "permission": ErrorCode.PERMISSION_DENIED,
    "forbidden": ErrorCode.PERMISSION_DENIED,
    "parse": ErrorCode.PARSE_ERROR,
    "json": ErrorCode.PARSE_ERROR,
    "decode": ErrorCode.PARSE_ERROR,
    "validation": ErrorCode.INVALID_PARAMS,
    "notfound": ErrorCode.NOT_FOUND,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    """Cached classification by exception signature."""
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXTERNAL_SERVICE_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via pattern matching on name/message."""
    return _classify_cached(f"{type(exc).__name__} {exc}")


# HTTP status -> code for upstream failures
_STATUS_CODES: dict[int, ErrorCode] = {
    401: ErrorCode.API_KEY_INVALID,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    429: ErrorCode.RATE_LIMITED,
}


def classify_status(status: int) -> ErrorCode:
    """Map an upstream HTTP status to an error code."""
    return _STATUS_CODES.get(status, ErrorCode.EXTERNAL_SERVICE_ERROR)


def format_validation_error(exc: ValidationError) -> str:
    """Render a pydantic ValidationError as one line per offending field."""
    lines = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        lines.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "Invalid arguments:\n" + "\n".join(f"  - {line}" for line in lines)


class ToolError(BaseModel):
    """Structured error response for tool failures.
    
    Attributes:
        tool_name: Name of the tool that failed
        message: Human-readable error message
        code: Machine-readable error code for programmatic handling
        recoverable: Whether the error might succeed on retry
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Tool Error",
            "description": "Structured error from tool execution",
            "examples": [{
                "tool_name": "get_appeals",
                "message": "HTTP 503: Service Unavailable",
                "code": "EXTERNAL_SERVICE_ERROR",
                "recoverable": True,
            }],
        },
    )

    tool_name: Annotated[str, Field(
        min_length=1,
        description="Name of the tool that produced the error",
    )]
    message: Annotated[str, Field(
        min_length=1,
        description="Human-readable error message",
    )]
    code: ErrorCode = Field(
        default=ErrorCode.UNKNOWN,
        description="Machine-readable error classification",
    )
    recoverable: bool = Field(
        default=True,
        description="Whether retry might succeed",
    )
    
    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v
    
    @classmethod
    def create(
        cls,
        tool_name: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        recoverable: bool = True,
    ) -> Self:
        """Factory method for construction."""
        return cls(tool_name=tool_name, message=message, code=code, recoverable=recoverable)

    @classmethod
    def from_exception(
        cls,
        tool_name: str,
        exc: Exception,
        context: str = "",
        *,
        recoverable: bool = True,
    ) -> Self:
        """Create from exception with auto-classification."""
        return cls(
            tool_name=tool_name,
            message=f"{context}: {exc}" if context else (str(exc) or type(exc).__name__),
            code=classify_exception(exc),
            recoverable=recoverable,
        )

    def render(self) -> str:
        """Format error for LLM consumption."""
        parts = [f"**Tool Error ({self.tool_name}):** {self.message}"]
        if self.recoverable:
            parts.append("\n_This error may be recoverable - consider retrying or trying an alternative approach._")
        return "".join(parts)

    __str__ = render


# ═══════════════════════════════════════════════════════════════════════════════
# Upstream API Errors
# ═══════════════════════════════════════════════════════════════════════════════


class GoApiError(Exception):
    """Base for failures raised by the IFRC GO client.
    
    Carries an ErrorCode so the dispatcher can render it without knowing the
    concrete failure. The client has no notion of tool names; the dispatcher
    attaches one via to_tool_error().
    """

    code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR
    recoverable: bool = True

    def to_tool_error(self, tool_name: str) -> ToolError:
        return ToolError.create(tool_name, str(self), self.code, recoverable=self.recoverable)


class UpstreamHTTPError(GoApiError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status: int, reason: str, url: str = "") -> None:
        self.status = status
        self.reason = reason
        self.url = url
        self.code = classify_status(status)
        self.recoverable = status >= 500 or status == 429
        super().__init__(f"HTTP {status}: {reason}" if reason else f"HTTP {status}")


class UpstreamFetchError(GoApiError):
    """Transport-level failure: timeout, DNS, reset connection, undecodable body."""

    def __init__(self, message: str, *, code: ErrorCode = ErrorCode.NETWORK_ERROR) -> None:
        self.code = code
        super().__init__(f"Failed to fetch data from IFRC GO API: {message}")

    @classmethod
    def from_exc(cls, exc: BaseException) -> Self:
        return cls(str(exc) or type(exc).__name__, code=classify_exception(exc))


class UnknownEruTypeError(GoApiError):
    """An ERU type label that matches neither a catalogue label nor an alias."""

    code = ErrorCode.INVALID_PARAMS
    recoverable = False

    def __init__(self, value: str, known: Iterable[str]) -> None:
        self.value = value
        self.known = sorted(known)
        listed = ", ".join(self.known) if self.known else "(catalogue is empty)"
        super().__init__(f"Unknown ERU type '{value}'. Known types: {listed}")
