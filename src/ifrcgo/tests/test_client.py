"""Tests for GoApiClient: request construction, caching, headers and failures."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from pydantic import SecretStr

from ifrcgo.client import GoApiClient, RequestDescriptor
from ifrcgo.foundation.config import ApiSettings
from ifrcgo.foundation.errors import ErrorCode, UpstreamFetchError, UpstreamHTTPError
from ifrcgo.io.cache import MemoryCache

from conftest import BASE_URL, FakeClock, FakeGoApi, page


# ─────────────────────────────────────────────────────────────────────────────
# Request Construction
# ─────────────────────────────────────────────────────────────────────────────


class TestRequests:
    @pytest.mark.asyncio
    async def test_limit_and_offset_verbatim(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page())
        await client.get_completed_drefs(limit=1000, offset=7)
        assert str(api.requests[0].url) == f"{BASE_URL}/completed_dref/?limit=1000&offset=7"
    
    @pytest.mark.asyncio
    async def test_search_by_country(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("dref/", page())
        await client.search_drefs_by_country("bd", limit=10)
        assert api.requests[0].url.params["country__iso"] == "BD"
        assert "offset" not in api.requests[0].url.params
    
    @pytest.mark.asyncio
    async def test_search_by_disaster_type_encodes(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("dref/", page())
        await client.search_drefs_by_disaster_type("flash flood")
        url = str(api.requests[0].url)
        assert "disaster_type__name__icontains=flash%20flood&limit=50" in url
    
    @pytest.mark.asyncio
    async def test_country_profile_has_no_pagination(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("country/12/", {"id": 12, "iso": "BD"})
        result = await client.get_country_profile(12)
        assert result["iso"] == "BD"
        assert str(api.requests[0].url) == f"{BASE_URL}/country/12/"
    
    @pytest.mark.asyncio
    async def test_date_range_query(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("event/", page())
        await client.search_operations_by_date_range("2023-01-01", "2023-06-30", limit=5)
        assert api.requests[0].url.query.decode() == (
            "disaster_start_date__gte=2023-01-01&disaster_start_date__lte=2023-06-30&limit=5&offset=0"
        )
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize(("method", "path", "filter_name"), [
        ("get_country_emergencies", "event/", "countries__iso"),
        ("get_country_operations", "appeal/", "country__iso"),
        ("get_country_field_reports", "field_report/", "countries__iso"),
        ("get_country_situation_reports", "situation_report/", "event__countries__iso"),
        ("get_country_personnel", "personnel/", "country_to__iso"),
        ("get_country_projects", "project/", "country_iso"),
        ("get_country_flash_updates", "flash-update/", "countries__iso"),
        ("get_erus_by_country", "eru/", "deployed_to__iso"),
    ])
    async def test_country_scoped_filters(
        self, client: GoApiClient, api: FakeGoApi, method: str, path: str, filter_name: str,
    ) -> None:
        api.add(path, page())
        await getattr(client, method)("KE")
        params = api.requests[0].url.params
        assert params[filter_name] == "KE"
        assert params["limit"] == "50"
        assert params["offset"] == "0"


# ─────────────────────────────────────────────────────────────────────────────
# Caching
# ─────────────────────────────────────────────────────────────────────────────


class TestCaching:
    @pytest.mark.asyncio
    async def test_identical_calls_fetch_once(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page({"id": 1}))
        first = await client.get_completed_drefs(limit=5, offset=0)
        second = await client.get_completed_drefs(limit=5, offset=0)
        assert first == second
        assert len(api.requests) == 1
    
    @pytest.mark.asyncio
    async def test_different_arguments_are_different_keys(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page())
        await client.get_completed_drefs(limit=5)
        await client.get_completed_drefs(limit=6)
        assert len(api.requests) == 2
    
    @pytest.mark.asyncio
    async def test_refetch_after_ttl(self, client: GoApiClient, api: FakeGoApi, clock: FakeClock) -> None:
        api.add("appeal/", page())
        await client.get_appeals()
        clock.advance(299)
        await client.get_appeals()
        assert len(api.requests) == 1
        clock.advance(1)
        await client.get_appeals()
        assert len(api.requests) == 2
    
    @pytest.mark.asyncio
    async def test_errors_are_not_cached(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("appeal/", {"detail": "boom"}, status=503)
        for _ in range(2):
            with pytest.raises(UpstreamHTTPError):
                await client.get_appeals()
        assert len(api.requests) == 2
        assert client.cache.size == 0  # type: ignore[attr-defined]
    
    @pytest.mark.asyncio
    async def test_cache_is_per_client_instance(self, api: FakeGoApi, api_settings: ApiSettings) -> None:
        api.add("region/", page())
        a = GoApiClient(api_settings, MemoryCache(), transport=api.transport)
        b = GoApiClient(api_settings, MemoryCache(), transport=api.transport)
        await a.get_regions()
        await b.get_regions()
        assert len(api.requests) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Headers and Auth
# ─────────────────────────────────────────────────────────────────────────────


class TestHeaders:
    @pytest.mark.asyncio
    async def test_default_headers(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("event/", page())
        await client.get_emergencies()
        headers = api.requests[0].headers
        assert headers["accept"] == "application/json"
        assert headers["user-agent"].startswith("ifrcgo-mcp/")
        assert "authorization" not in headers
    
    @pytest.mark.asyncio
    async def test_token_sent_only_to_auth_endpoints(self, api: FakeGoApi) -> None:
        settings = ApiSettings(base_url=BASE_URL, token=SecretStr("s3cret"))
        client = GoApiClient(settings, MemoryCache(), transport=api.transport)
        api.add("personnel/", page())
        api.add("event/", page())
        await client.get_personnel_by_type("rdrt")
        await client.get_emergencies()
        assert api.calls("personnel/")[0].headers["authorization"] == "Token s3cret"
        assert "authorization" not in api.calls("event/")[0].headers
    
    @pytest.mark.asyncio
    async def test_auth_scheme_configurable(self, api: FakeGoApi) -> None:
        settings = ApiSettings(base_url=BASE_URL, token=SecretStr("abc"), auth_scheme="Bearer")
        client = GoApiClient(settings, MemoryCache(), transport=api.transport)
        api.add("eru_readiness/", page())
        await client.get_eru_readiness()
        assert api.requests[0].headers["authorization"] == "Bearer abc"
    
    @pytest.mark.asyncio
    async def test_auth_endpoint_without_token_goes_unauthenticated(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("flash-update/", page())
        await client.get_country_flash_updates("PH")
        assert "authorization" not in api.requests[0].headers


# ─────────────────────────────────────────────────────────────────────────────
# Failures
# ─────────────────────────────────────────────────────────────────────────────


class TestFailures:
    @pytest.mark.asyncio
    async def test_http_error_carries_status(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("eru/", None, status=404)
        with pytest.raises(UpstreamHTTPError) as exc_info:
            await client.get_erus()
        assert str(exc_info.value) == "HTTP 404: Not Found"
        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert exc_info.value.recoverable is False
    
    @pytest.mark.asyncio
    async def test_server_error_is_recoverable(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("eru/", None, status=502)
        with pytest.raises(UpstreamHTTPError) as exc_info:
            await client.get_erus()
        assert exc_info.value.recoverable is True
        assert exc_info.value.code == ErrorCode.EXTERNAL_SERVICE_ERROR
    
    @pytest.mark.asyncio
    async def test_network_failure_is_wrapped(self, client: GoApiClient, api: FakeGoApi) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)
        
        api.add("region/", responder=refuse)
        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.get_regions()
        assert str(exc_info.value).startswith("Failed to fetch data from IFRC GO API:")
        assert "connection refused" in str(exc_info.value)
        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
    
    @pytest.mark.asyncio
    async def test_timeout_is_wrapped(self, client: GoApiClient, api: FakeGoApi) -> None:
        def stall(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read operation timed out on socket 7", request=request)
        
        api.add("region/", responder=stall)
        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.get_regions()
        assert exc_info.value.code == ErrorCode.TIMEOUT
        assert "read operation timed out on socket 7" in str(exc_info.value)
    
    @pytest.mark.asyncio
    async def test_invalid_json_is_wrapped(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("region/", responder=lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.get_regions()
        assert exc_info.value.code == ErrorCode.PARSE_ERROR
        assert client.cache.size == 0  # type: ignore[attr-defined]


# ─────────────────────────────────────────────────────────────────────────────
# Statistics
# ─────────────────────────────────────────────────────────────────────────────


class TestStatistics:
    @pytest.mark.asyncio
    async def test_reduces_both_listings(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page({"amount_requested": 100, "amount_funded": 50}))
        api.add("dref/", page({"amount_requested": 200, "amount_funded": 200}))
        stats = await client.get_dref_statistics()
        assert stats == {
            "total_operations": 2,
            "total_requested": 300,
            "total_funded": 250,
            "active_operations": 1,
        }
        for path in ("completed_dref/", "dref/"):
            params = api.calls(path)[0].url.params
            assert (params["limit"], params["offset"]) == ("1000", "0")
    
    @pytest.mark.asyncio
    async def test_missing_amounts_count_as_zero(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page({"amount_requested": None}, {"amount_funded": 10}))
        api.add("dref/", page({}))
        stats = await client.get_dref_statistics()
        assert stats == {"total_operations": 3, "total_requested": 0, "total_funded": 10, "active_operations": 1}
    
    @pytest.mark.asyncio
    async def test_fails_when_either_fetch_fails(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page({"amount_requested": 1}))
        api.add("dref/", None, status=500)
        with pytest.raises(UpstreamHTTPError):
            await client.get_dref_statistics()
    
    @pytest.mark.asyncio
    async def test_listing_without_results_fails(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", {"detail": "oops"})
        api.add("dref/", {"detail": "oops"})
        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.get_dref_statistics()
        assert exc_info.value.code == ErrorCode.PARSE_ERROR
        assert "missing results list" in str(exc_info.value)
    
    @pytest.mark.asyncio
    async def test_one_malformed_listing_fails_the_whole(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page({"amount_requested": 5}))
        api.add("dref/", [{"amount_requested": 5}])
        with pytest.raises(UpstreamFetchError):
            await client.get_dref_statistics()
    
    @pytest.mark.asyncio
    async def test_fetches_run_concurrently(self, api_settings: ApiSettings) -> None:
        in_flight = 0
        peak = 0
        
        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return httpx.Response(200, json={"count": 0, "results": []})
        
        client = GoApiClient(api_settings, MemoryCache(), transport=httpx.MockTransport(handler))
        await client.get_dref_statistics()
        await client.aclose()
        assert peak == 2
    
    @pytest.mark.asyncio
    async def test_uses_the_shared_cache(self, client: GoApiClient, api: FakeGoApi) -> None:
        api.add("completed_dref/", page())
        api.add("dref/", page())
        await client.get_completed_drefs(1000, 0)
        await client.get_dref_statistics()
        assert len(api.calls("completed_dref/")) == 1


@pytest.mark.asyncio
async def test_fetch_and_close(client: GoApiClient, api: FakeGoApi) -> None:
    api.add("disaster_type/", page({"id": 12, "name": "Flood"}))
    async with client:
        payload = await client.fetch(RequestDescriptor.build("disaster_type/", limit=1))
    assert payload["results"][0]["name"] == "Flood"
