"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from ifrcgo.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.cache.ttl
    300.0
    >>> settings.api.base_url
    'https://goadmin.ifrc.org/api/v2'
    
    # Or with environment variables:
    # IFRCGO_API_TOKEN=abc123
    # IFRCGO_CACHE_TTL=60
    # IFRCGO_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import (
    Field,
    PositiveFloat,
    PositiveInt,
    SecretStr,
    computed_field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ifrcgo import __version__

DEFAULT_BASE_URL = "https://goadmin.ifrc.org/api/v2"


class ApiSettings(BaseSettings):
    """Upstream IFRC GO API configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="IFRCGO_API_",
        extra="ignore",
    )
    
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API root, without trailing slash")
    token: SecretStr | None = Field(default=None, description="Token sent to endpoints that require auth")
    auth_scheme: str = Field(default="Token", description="Authorization header scheme (Token or Bearer)")
    timeout: PositiveFloat = Field(default=30.0, le=300.0, description="Request timeout in seconds")
    user_agent: str = f"ifrcgo-mcp/{__version__}"
    
    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")
    
    @field_validator("token", mode="before")
    @classmethod
    def _blank_token_is_none(cls, v: object) -> object:
        """Treat an empty environment variable as no token."""
        return None if isinstance(v, str) and not v.strip() else v
    
    @computed_field
    @property
    def authenticated(self) -> bool:
        return self.token is not None


class CacheSettings(BaseSettings):
    """Response cache configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="IFRCGO_CACHE_",
        extra="ignore",
    )
    
    ttl: PositiveFloat = Field(default=300.0, description="Entry lifetime in seconds")
    max_entries: PositiveInt = Field(default=1000, description="Max cache entries before LRU eviction")


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="IFRCGO_LOG_",
        extra="ignore",
    )
    
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    
    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ServerSettings(BaseSettings):
    """Transport configuration for the tool server."""
    
    model_config = SettingsConfigDict(
        env_prefix="IFRCGO_SERVER_",
        extra="ignore",
    )
    
    name: str = "ifrc-go-admin-mcp-server"
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: PositiveInt = Field(default=8000, le=65535)


class GoSettings(BaseSettings):
    """Root settings for the IFRC GO tool server.
    
    Loads configuration from environment variables with IFRCGO_ prefix.
    Supports nested configuration and .env files.
    
    Example environment variables:
        IFRCGO_API_TOKEN=...
        IFRCGO_API_TIMEOUT=10
        IFRCGO_CACHE_TTL=120
        IFRCGO_LOG_FORMAT=json
        IFRCGO_SERVER_TRANSPORT=http
    """
    
    model_config = SettingsConfigDict(
        env_prefix="IFRCGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )
    
    api: ApiSettings = Field(default_factory=ApiSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


@lru_cache(maxsize=1)
def get_settings() -> GoSettings:
    """Get the global settings instance (cached)."""
    return GoSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).
    
    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
