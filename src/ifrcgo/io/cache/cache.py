"""Response caching with TTL support.

Provides in-memory caching to prevent repeated upstream calls for identical
requests. Keys are canonical request identities (the composed request URL);
values are parsed JSON payloads.

Entries are never swept proactively: an entry older than the TTL is treated as
absent and dropped on the lookup that finds it. The map is capacity-bounded
with least-recently-used eviction so a long-lived server cannot grow without
limit.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_TTL: float = 300.0  # 5 minutes
DEFAULT_MAX_ENTRIES: int = 1000

Clock = Callable[[], float]


@dataclass(slots=True)
class CacheEntry:
    """A cached payload with its creation instant."""
    value: Any
    created_at: float
    
    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.created_at < ttl


class ResponseCache(ABC):
    """Abstract base for response caches."""
    
    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Get cached value if present and fresh, else None."""
        ...
    
    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous entry."""
        ...
    
    @abstractmethod
    def invalidate(self, key: str) -> bool:
        """Remove specific entry from cache."""
        ...
    
    @abstractmethod
    def clear(self) -> None:
        """Clear entire cache."""
        ...


class MemoryCache(ResponseCache):
    """Thread-safe in-memory cache with TTL-based staleness and LRU capacity.
    
    Uses RLock for synchronization, safe under concurrent access from
    overlapping tool calls. Two concurrent misses on the same key may both
    populate it; the last write wins.
    
    Args:
        ttl: Lifetime of an entry in seconds
        max_entries: Maximum number of entries before LRU eviction
        clock: Time source, monotonic by default (injectable for tests)
    
    Example:
        >>> cache = MemoryCache(ttl=60)
        >>> cache.set("https://goadmin.ifrc.org/api/v2/dref/?limit=5", {"count": 0})
        >>> cache.get("https://goadmin.ifrc.org/api/v2/dref/?limit=5")
        {'count': 0}
    """
    
    __slots__ = ("_entries", "_ttl", "_max_entries", "_clock", "_lock", "_hits", "_misses")
    
    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
    
    @property
    def ttl(self) -> float:
        return self._ttl
    
    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if not entry.is_fresh(self._clock(), self._ttl):
                del self._entries[key]
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value
    
    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
    
    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None
    
    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = self._misses = 0
    
    def __contains__(self, key: str) -> bool:
        """Whether key holds a fresh entry (does not touch stats or LRU order)."""
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.is_fresh(self._clock(), self._ttl)
    
    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)
    
    def stats(self) -> dict[str, object]:
        """Get cache statistics for monitoring."""
        with self._lock:
            now = self._clock()
            expired = sum(1 for e in self._entries.values() if not e.is_fresh(now, self._ttl))
            return {
                "total_entries": len(self._entries),
                "expired_entries": expired,
                "active_entries": len(self._entries) - expired,
                "hits": self._hits,
                "misses": self._misses,
                "ttl": self._ttl,
                "max_entries": self._max_entries,
            }
