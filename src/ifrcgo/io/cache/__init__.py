"""Upstream response caching with TTL support.

Backends:
    - MemoryCache: Thread-safe in-memory with LRU capacity bound (default)
"""

from .cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL,
    CacheEntry,
    MemoryCache,
    ResponseCache,
)

__all__ = [
    "ResponseCache",
    "MemoryCache",
    "CacheEntry",
    "DEFAULT_TTL",
    "DEFAULT_MAX_ENTRIES",
]
