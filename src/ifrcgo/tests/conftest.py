"""Shared fixtures: a recording fake of the IFRC GO API and a controllable clock."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from ifrcgo.client import GoApiClient
from ifrcgo.foundation.config import ApiSettings, clear_settings_cache
from ifrcgo.io.cache import MemoryCache
from ifrcgo.runtime.observability import configure_logging

BASE_URL = "https://go.test/api/v2"

ERU_CATALOGUE = {
    "count": 5,
    "results": [
        {"key": 1, "value": "Basecamp"},
        {"key": 2, "value": "IT & Telecom"},
        {"key": 3, "value": "Logistics"},
        {"key": 4, "value": "WASH - Water Supply and Sanitation"},
        {"key": 5, "value": "Emergency Hospital"},
    ],
}


def page(*results: dict[str, Any], count: int | None = None) -> dict[str, Any]:
    """Listing payload in the upstream {count, next, previous, results} shape."""
    return {"count": len(results) if count is None else count, "next": None, "previous": None, "results": list(results)}


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


Responder = Callable[[httpx.Request], httpx.Response]


class FakeGoApi:
    """Routes requests by path (relative to the API root) and records them."""
    
    def __init__(self) -> None:
        self.routes: dict[str, Responder | Any] = {}
        self.requests: list[httpx.Request] = []
    
    def add(self, path: str, payload: Any = None, *, status: int = 200, responder: Responder | None = None) -> None:
        self.routes[path] = responder or (lambda request: httpx.Response(status, json=payload))
    
    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v2/")
        if path not in self.routes:
            return httpx.Response(404, json={"detail": "Not found."})
        return self.routes[path](request)
    
    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.removeprefix("/api/v2/") == path]
    
    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def quiet_logging() -> object:
    configure_logging("none")
    yield
    configure_logging("none")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Isolate tests from IFRCGO_* variables in the developer's environment."""
    import os
    for key in [k for k in os.environ if k.startswith("IFRCGO_")]:
        monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api() -> FakeGoApi:
    return FakeGoApi()


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings(base_url=BASE_URL)


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(ttl=300, max_entries=100, clock=clock)


@pytest.fixture
def client(api: FakeGoApi, api_settings: ApiSettings, cache: MemoryCache) -> GoApiClient:
    return GoApiClient(api_settings, cache, transport=api.transport)
