"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from ifrcgo import __version__
from ifrcgo.foundation.config import DEFAULT_BASE_URL, GoSettings, get_settings


def test_defaults() -> None:
    settings = GoSettings()
    assert settings.api.base_url == DEFAULT_BASE_URL
    assert settings.api.token is None
    assert settings.api.authenticated is False
    assert settings.api.user_agent == f"ifrcgo-mcp/{__version__}"
    assert settings.cache.ttl == 300
    assert settings.cache.max_entries == 1000
    assert settings.server.name == "ifrc-go-admin-mcp-server"
    assert settings.server.transport == "stdio"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IFRCGO_API_TOKEN", "abc")
    monkeypatch.setenv("IFRCGO_API_BASE_URL", "https://staging.example.org/api/v2/")
    monkeypatch.setenv("IFRCGO_CACHE_TTL", "60")
    monkeypatch.setenv("IFRCGO_LOG_LEVEL", "debug")
    monkeypatch.setenv("IFRCGO_SERVER_TRANSPORT", "http")
    settings = GoSettings()
    assert settings.api.token is not None
    assert settings.api.token.get_secret_value() == "abc"
    assert settings.api.authenticated is True
    assert settings.api.base_url == "https://staging.example.org/api/v2"
    assert settings.cache.ttl == 60
    assert settings.logging.level == "DEBUG"
    assert settings.server.transport == "http"


def test_blank_token_means_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IFRCGO_API_TOKEN", "  ")
    assert GoSettings().api.token is None


def test_token_not_in_repr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IFRCGO_API_TOKEN", "supersecret")
    assert "supersecret" not in repr(GoSettings())


def test_invalid_values_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IFRCGO_CACHE_TTL", "-5")
    with pytest.raises(ValueError):
        GoSettings()


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
