"""Tests for the Starlette HTTP binding."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from starlette.testclient import TestClient

from ifrcgo.client import GoApiClient
from ifrcgo.ext.mcp import HTTPToolServer

from conftest import FakeGoApi, page


@pytest.fixture
def http(client: GoApiClient) -> Iterator[TestClient]:
    server = HTTPToolServer("ifrc-go-test", client)
    with TestClient(server.app) as test_client:
        yield test_client


class TestDiscovery:
    def test_root_lists_server_and_tools(self, http: TestClient) -> None:
        body = http.get("/").json()
        assert body["server"]["name"] == "ifrc-go-test"
        assert body["server"]["description"] == "MCP server for IFRC GO Admin API access"
        assert len(body["tools"]) == 28
    
    def test_tools_endpoint(self, http: TestClient) -> None:
        body = http.get("/tools").json()
        assert body["server"] == "ifrc-go-test"
        assert {t["name"] for t in body["tools"]} >= {"get_appeals", "get_eru_types"}
    
    def test_schema_endpoint(self, http: TestClient) -> None:
        body = http.get("/tools/search_drefs_by_country/schema").json()
        assert body["inputSchema"]["required"] == ["country_iso"]
        assert http.get("/tools/nope/schema").status_code == 404


class TestInvocation:
    def test_tools_call_form(self, http: TestClient, api: FakeGoApi) -> None:
        api.add("appeal/", page({"id": 1}))
        response = http.post("/", json={"method": "tools/call", "params": {"name": "get_appeals", "arguments": {"limit": 1}}})
        assert response.status_code == 200
        assert response.json()["isError"] is False
        assert api.calls("appeal/")[0].url.params["limit"] == "1"
    
    def test_tools_list_form(self, http: TestClient) -> None:
        body = http.post("/", json={"method": "tools/list"}).json()
        assert len(body["tools"]) == 28
    
    def test_tool_failure_is_an_envelope(self, http: TestClient) -> None:
        response = http.post("/", json={"method": "tools/call", "params": {"name": "nope_tool"}})
        assert response.status_code == 200
        assert response.json()["isError"] is True
    
    def test_missing_tool_name(self, http: TestClient) -> None:
        response = http.post("/", json={"method": "tools/call", "params": {"arguments": {}}})
        assert response.status_code == 400
    
    def test_unsupported_method(self, http: TestClient) -> None:
        response = http.post("/", json={"method": "resources/list"})
        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported method"}
    
    def test_malformed_handshake_is_a_client_error(self, http: TestClient) -> None:
        response = http.post("/", json={"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {"clientInfo": "cli"}})
        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported method"}
    
    def test_invalid_json(self, http: TestClient) -> None:
        response = http.post("/", content=b"{oops", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid JSON body")
    
    def test_rest_invoke(self, http: TestClient, api: FakeGoApi) -> None:
        api.add("dref/", page())
        response = http.post("/tools/search_drefs_by_country", json={"country_iso": "BD"})
        assert response.status_code == 200
        assert response.json()["isError"] is False
    
    def test_rest_invoke_failure_is_envelope(self, http: TestClient) -> None:
        response = http.post("/tools/search_drefs_by_country", json={"country_iso": "B"})
        assert response.status_code == 200
        assert response.json()["isError"] is True
    
    def test_rest_invoke_without_body(self, http: TestClient, api: FakeGoApi) -> None:
        api.add("eru_owner/", page())
        assert http.post("/tools/get_eru_owners").json()["isError"] is False


def test_cors_preflight(http: TestClient) -> None:
    response = http.options("/", headers={
        "Origin": "https://example.org",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "Content-Type",
    })
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


class TestStreamableHTTP:
    HEADERS = {"Accept": "application/json, text/event-stream"}
    
    def test_tools_list(self, http: TestClient) -> None:
        response = http.post("/mcp", headers=self.HEADERS, json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 1
        assert len(body["result"]["tools"]) == 28
    
    def test_tools_call(self, http: TestClient, api: FakeGoApi) -> None:
        api.add("region/", page({"id": 2}))
        response = http.post("/mcp", headers=self.HEADERS, json={
            "jsonrpc": "2.0", "id": 2, "method": "tools/call",
            "params": {"name": "get_regions", "arguments": {}},
        })
        result = response.json()["result"]
        assert result["isError"] is False
        assert '"id": 2' in result["content"][0]["text"]
