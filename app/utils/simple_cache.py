"""In-memory TTL cache with LRU eviction.

Backs the contact rate limiter (client key -> counter) and the public page
cache (path -> response payload). Thread-safe and bounded.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class CacheItem:
    """Container for cached values with expiration metadata."""

    value: Any
    expires_at: float


class SimpleTTLCache:
    """Thread-safe, in-memory TTL cache with LRU eviction.

    Every entry expires ``ttl_seconds`` after it was set; reads never extend
    an entry's lifetime. When ``max_entries`` is exceeded the least recently
    used entry is dropped.

    Attributes:
        ttl_seconds: Time-to-live applied to all entries.
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_entries: int | None = 1024,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"SimpleTTLCache(ttl_seconds={self._ttl}, max_entries={self._max_entries}, "
            f"size={len(self._store)}, hits={self._hits}, misses={self._misses}, "
            f"evictions={self._evictions})"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _now(self) -> float:
        return self._clock() if self._clock else time.time()

    def get(self, key: str) -> Any | None:
        """Retrieve a cached value if it exists and is not expired.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """

        with self._lock:
            item = self._store.get(key)
            if item is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key[:32], "reason": "not_found"})
                return None

            if self._is_expired(item):
                self._evict_single(key)
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key[:32], "reason": "expired"})
                return None

            self._hits += 1
            self._store.move_to_end(key)
            return item.value

    def set(self, key: str, value: Any) -> None:
        """Store a value with TTL, evicting as needed."""

        with self._lock:
            self._evict_expired_locked()
            self._store[key] = CacheItem(value=value, expires_at=self._now() + self._ttl)
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

            logger.debug(
                "cache.set",
                extra={
                    "cache_key": key[:32],
                    "size": len(self._store),
                    "ttl_s": self._ttl,
                },
            )

    def delete(self, key: str) -> bool:
        """Remove a single entry. Returns True if it was present."""

        with self._lock:
            return self._store.pop(key, None) is not None

    def keys(self) -> list[str]:
        """Snapshot of the live (non-expired) keys, oldest first."""

        with self._lock:
            self._evict_expired_locked()
            return list(self._store.keys())

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | float | None]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "ttl_seconds": self._ttl,
                "max_entries": self._max_entries,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _evict_single(self, key: str) -> None:
        if key in self._store:
            self._store.pop(key, None)
            self._evictions += 1

    def _evict_expired_locked(self) -> None:
        now = self._now()
        expired_keys = [k for k, item in self._store.items() if item.expires_at <= now]
        for key in expired_keys:
            self._evict_single(key)

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # popitem(last=False) removes the least recently used entry
            self._store.popitem(last=False)
            self._evictions += 1

    def _is_expired(self, item: CacheItem) -> bool:
        return self._now() >= item.expires_at
