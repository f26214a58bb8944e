from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Protocol

from cachetools import LRUCache, TTLCache

from postcode_anywhere.core.models import CacheEntry

CACHE_TABLE = "paAddress"
CACHE_KEY_COLUMN = "postcode"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheAdapter(Protocol):
    def find(self, table: str, key: str, key_column: str) -> CacheEntry | None: ...

    def upsert(self, key: str, content: str) -> None: ...


class MemoryCache:
    """
    In-process postcode cache.

    Rows are kept in a cachetools LRUCache, or a TTLCache when ``ttl_seconds``
    is given. Eviction is this adapter's business, freshness is not.
    """

    def __init__(
        self,
        *,
        maxsize: int = 20000,
        ttl_seconds: int | None = None,
        table: str = CACHE_TABLE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if ttl_seconds:
            self._cache: LRUCache[str, CacheEntry] = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        else:
            self._cache = LRUCache(maxsize=maxsize)
        self._table = table
        self._clock = clock
        # cachetools caches are not thread-safe
        self._lock = threading.Lock()

    def find(self, table: str, key: str, key_column: str = CACHE_KEY_COLUMN) -> CacheEntry | None:
        if table != self._table or key_column != CACHE_KEY_COLUMN:
            return None
        with self._lock:
            return self._cache.get(key)

    def upsert(self, key: str, content: str) -> None:
        entry = CacheEntry(postcode=key, content=content, created=self._clock())
        with self._lock:
            self._cache[key] = entry

    def __len__(self) -> int:
        return len(self._cache)
