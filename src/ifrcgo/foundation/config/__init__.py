"""Configuration loaded from IFRCGO_* environment variables."""

from .settings import (
    DEFAULT_BASE_URL,
    ApiSettings,
    CacheSettings,
    GoSettings,
    LoggingSettings,
    ServerSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "GoSettings", "ApiSettings", "CacheSettings", "LoggingSettings", "ServerSettings",
    "get_settings", "clear_settings_cache", "DEFAULT_BASE_URL",
]
