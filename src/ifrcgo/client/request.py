"""Canonical request descriptors for the IFRC GO API.

A descriptor is the identity of an upstream request: endpoint path, ordered
query parameters and whether the endpoint wants the auth token. Its URL form
is the cache key, so parameter order is the builder's insertion order and
never depends on incidental dict ordering of caller arguments.

Example:
    >>> req = RequestDescriptor.build("dref/", country__iso="BD", limit=50)
    >>> req.query
    'country__iso=BD&limit=50'
    >>> req.url("https://goadmin.ifrc.org/api/v2")
    'https://goadmin.ifrc.org/api/v2/dref/?country__iso=BD&limit=50'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote, urlencode

QueryPairs = tuple[tuple[str, str], ...]


def _stringify(value: object) -> str:
    """Render a query value the way the upstream API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _normalize_path(path: str) -> str:
    path = path.strip().strip("/")
    if not path:
        raise ValueError("Request path cannot be empty")
    return f"{path}/"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Identity of one GET request against the API root."""
    
    path: str
    params: QueryPairs = ()
    requires_auth: bool = field(default=False, compare=False)
    
    @classmethod
    def build(cls, path: str, *, requires_auth: bool = False, **params: object) -> RequestDescriptor:
        """Build a descriptor; params keep keyword order and None values are dropped."""
        pairs = tuple((name, _stringify(value)) for name, value in params.items() if value is not None)
        return cls(path=_normalize_path(path), params=pairs, requires_auth=requires_auth)
    
    @property
    def query(self) -> str:
        return urlencode(self.params, quote_via=quote)
    
    def url(self, base_url: str) -> str:
        """Compose the absolute request URL (also the cache key)."""
        url = f"{base_url.rstrip('/')}/{self.path}"
        return f"{url}?{self.query}" if self.params else url
    
    def get(self, name: str) -> str | None:
        """Value of the first query parameter called name."""
        return next((v for k, v in self.params if k == name), None)
    
    def __str__(self) -> str:
        return f"{self.path}?{self.query}" if self.params else self.path
