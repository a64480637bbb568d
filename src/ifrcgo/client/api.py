"""Async client for the IFRC GO API with cached, canonical GET requests.

Every logical operation builds a RequestDescriptor and goes through fetch(),
which consults the response cache before touching the network. Only decoded
2xx bodies are cached; failures always propagate as GoApiError subclasses.

Example:
    >>> async with GoApiClient() as client:
    ...     drefs = await client.search_drefs_by_country("BD", limit=10)
    ...     stats = await client.get_dref_statistics()
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import httpx

from ifrcgo.foundation.config import ApiSettings
from ifrcgo.foundation.errors import ErrorCode, UpstreamFetchError, UpstreamHTTPError
from ifrcgo.io.cache import MemoryCache, ResponseCache
from ifrcgo.runtime.observability import get_logger, timed

from .eru import EruTypeMapping, parse_catalogue
from .request import RequestDescriptor

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from ifrcgo.foundation.config import GoSettings

log = get_logger("ifrcgo.client")

DEFAULT_LIMIT = 50
STATISTICS_LIMIT = 1000

ERU_TYPES = RequestDescriptor.build("eru_type/")
_MAPPING_SUFFIX = "#mapping"


def _results(payload: Any, path: str) -> list[Any]:
    """The `results` list of a paginated listing; anything else is a malformed body."""
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        raise UpstreamFetchError(f"Malformed response from {path}: missing results list", code=ErrorCode.PARSE_ERROR)
    return results


def _amount(value: Any) -> float | int:
    """Numeric amount, with missing or unparsable values counted as zero."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0
    return 0


def _total(operations: list[Any], field: str) -> float | int:
    return sum(_amount(op.get(field)) for op in operations if isinstance(op, dict))


class GoApiClient:
    """Cached read-only client for goadmin.ifrc.org.
    
    The httpx client is created lazily on first use so a GoApiClient can be
    built outside a running event loop. Pass transport= to stub the network.
    """
    
    __slots__ = ("_settings", "_cache", "_transport", "_client")
    
    def __init__(
        self,
        settings: ApiSettings | None = None,
        cache: ResponseCache | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or ApiSettings()
        self._cache = cache if cache is not None else MemoryCache()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
    
    @classmethod
    def from_settings(cls, settings: GoSettings, *, transport: httpx.AsyncBaseTransport | None = None) -> GoApiClient:
        cache = MemoryCache(ttl=settings.cache.ttl, max_entries=settings.cache.max_entries)
        return cls(settings.api, cache, transport=transport)
    
    @property
    def settings(self) -> ApiSettings:
        return self._settings
    
    @property
    def cache(self) -> ResponseCache:
        return self._cache
    
    # ─────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────
    
    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client
    
    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
    
    async def __aenter__(self) -> Self:
        return self
    
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
    
    def key_for(self, request: RequestDescriptor) -> str:
        """Cache key of a request: its absolute URL. Credentials never take part."""
        return request.url(self._settings.base_url)
    
    def headers_for(self, request: RequestDescriptor) -> dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": self._settings.user_agent}
        token = self._settings.token
        if request.requires_auth and token is not None:
            headers["Authorization"] = f"{self._settings.auth_scheme} {token.get_secret_value()}"
        return headers
    
    async def fetch(self, request: RequestDescriptor) -> Any:
        """GET a descriptor, serving fresh cached bodies without a network call."""
        key = self.key_for(request)
        if (cached := self._cache.get(key)) is not None:
            log.debug("cache hit", request=str(request))
            return cached
        log.debug("cache miss", request=str(request))
        
        try:
            response = await self._get_client().get(key, headers=self.headers_for(request))
        except httpx.TimeoutException as e:
            raise UpstreamFetchError(f"Request timed out after {self._settings.timeout}s: {e}", code=ErrorCode.TIMEOUT) from e
        except httpx.NetworkError as e:
            raise UpstreamFetchError(f"Network error: {e}", code=ErrorCode.NETWORK_ERROR) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UpstreamFetchError.from_exc(e) from e
        
        if not response.is_success:
            log.warning("upstream error", request=str(request), status=response.status_code)
            raise UpstreamHTTPError(response.status_code, response.reason_phrase, key)
        
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Invalid JSON in response: {e}", code=ErrorCode.PARSE_ERROR) from e
        
        self._cache.set(key, payload)
        return payload
    
    async def _list(self, path: str, limit: int, offset: int | None, *, requires_auth: bool = False, **filters: object) -> Any:
        """Paginated listing; filters precede limit and offset in the query."""
        request = RequestDescriptor.build(path, requires_auth=requires_auth, **filters, limit=limit, offset=offset)
        return await self.fetch(request)
    
    # ─────────────────────────────────────────────────────────────────
    # DREF, Appeals and Emergencies
    # ─────────────────────────────────────────────────────────────────
    
    async def get_completed_drefs(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("completed_dref/", limit, offset)
    
    async def get_ongoing_drefs(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("dref/", limit, offset)
    
    async def get_appeals(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("appeal/", limit, offset)
    
    async def get_emergencies(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("event/", limit, offset)
    
    async def search_drefs_by_country(self, country_iso: str, limit: int = DEFAULT_LIMIT) -> Any:
        return await self._list("dref/", limit, None, country__iso=country_iso.upper())
    
    async def search_drefs_by_disaster_type(self, disaster_type: str, limit: int = DEFAULT_LIMIT) -> Any:
        return await self._list("dref/", limit, None, disaster_type__name__icontains=disaster_type)
    
    @timed(log, level="debug", event="dref statistics computed")
    async def get_dref_statistics(self) -> dict[str, Any]:
        """Totals over the first 1000 completed and 1000 ongoing DREFs.
        
        Both listings are fetched concurrently and either failing fails the
        whole aggregation. Missing or null amounts count as zero.
        """
        completed, ongoing = await asyncio.gather(
            self.get_completed_drefs(STATISTICS_LIMIT, 0),
            self.get_ongoing_drefs(STATISTICS_LIMIT, 0),
        )
        active = _results(ongoing, "dref/")
        operations = [*_results(completed, "completed_dref/"), *active]
        return {
            "total_operations": len(operations),
            "total_requested": _total(operations, "amount_requested"),
            "total_funded": _total(operations, "amount_funded"),
            "active_operations": len(active),
        }
    
    # ─────────────────────────────────────────────────────────────────
    # Reference Data
    # ─────────────────────────────────────────────────────────────────
    
    async def get_countries(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("country/", limit, offset)
    
    async def get_country_profile(self, country_id: int) -> Any:
        return await self.fetch(RequestDescriptor.build(f"country/{country_id}/"))
    
    async def get_regions(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("region/", limit, offset)
    
    async def get_disaster_types(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("disaster_type/", limit, offset)
    
    async def search_operations_by_date_range(
        self, start_date: str, end_date: str, limit: int = DEFAULT_LIMIT, offset: int = 0,
    ) -> Any:
        return await self._list(
            "event/", limit, offset,
            disaster_start_date__gte=start_date, disaster_start_date__lte=end_date,
        )
    
    # ─────────────────────────────────────────────────────────────────
    # Country Scoped
    # ─────────────────────────────────────────────────────────────────
    
    async def get_country_emergencies(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("event/", limit, offset, countries__iso=country_iso.upper())
    
    async def get_country_operations(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("appeal/", limit, offset, country__iso=country_iso.upper())
    
    async def get_country_field_reports(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("field_report/", limit, offset, countries__iso=country_iso.upper())
    
    async def get_field_reports(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("field_report/", limit, offset)
    
    async def get_country_situation_reports(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("situation_report/", limit, offset, event__countries__iso=country_iso.upper())
    
    async def get_country_personnel(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("personnel/", limit, offset, requires_auth=True, country_to__iso=country_iso.upper())
    
    async def get_country_projects(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("project/", limit, offset, country_iso=country_iso.upper())
    
    async def get_country_flash_updates(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("flash-update/", limit, offset, requires_auth=True, countries__iso=country_iso.upper())
    
    # ─────────────────────────────────────────────────────────────────
    # Surge and Personnel
    # ─────────────────────────────────────────────────────────────────
    
    async def get_personnel_by_type(self, personnel_type: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("personnel/", limit, offset, requires_auth=True, type=personnel_type)
    
    async def get_surge_deployments(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("surge_alert/", limit, offset)
    
    # ─────────────────────────────────────────────────────────────────
    # Emergency Response Units
    # ─────────────────────────────────────────────────────────────────
    
    async def get_erus(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("eru/", limit, offset)
    
    async def get_erus_by_country(self, country_iso: str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("eru/", limit, offset, deployed_to__iso=country_iso.upper())
    
    async def eru_type_mapping(self) -> EruTypeMapping:
        """Label/alias -> id table, cached next to the catalogue response it came from."""
        key = self.key_for(ERU_TYPES) + _MAPPING_SUFFIX
        if (cached := self._cache.get(key)) is not None:
            return cached
        mapping = EruTypeMapping.from_catalogue(await self.fetch(ERU_TYPES))
        self._cache.set(key, mapping)
        return mapping
    
    async def resolve_eru_type(self, eru_type: int | str) -> int:
        """Numeric ids pass through; labels and aliases go via the catalogue."""
        if isinstance(eru_type, int) and not isinstance(eru_type, bool):
            return eru_type
        text = str(eru_type).strip()
        if text.isascii() and text.isdigit():
            return int(text)
        return (await self.eru_type_mapping()).resolve(text)
    
    async def get_erus_by_type(self, eru_type: int | str, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        type_id = await self.resolve_eru_type(eru_type)
        return await self._list("eru/", limit, offset, type=type_id)
    
    async def get_eru_readiness(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("eru_readiness/", limit, offset, requires_auth=True)
    
    async def get_eru_owners(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Any:
        return await self._list("eru_owner/", limit, offset)
    
    async def get_eru_types(self) -> dict[str, Any]:
        """The upstream type catalogue plus the label/alias mapping built from it."""
        catalogue = await self.fetch(ERU_TYPES)
        mapping = await self.eru_type_mapping()
        return {
            "types": [{"id": ident, "label": label} for ident, label in parse_catalogue(catalogue)],
            "aliases": mapping.aliases,
        }
