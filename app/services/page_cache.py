"""Cache of public blog responses, invalidated by path or by tag."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable

from app.utils.simple_cache import SimpleTTLCache

logger = logging.getLogger(__name__)


class PageCache:
    """Path-keyed response cache with tag-based invalidation.

    Entries expire after ``ttl_seconds`` regardless of tags. A tag groups the
    paths whose content depends on the same data (``posts``, ``categories``),
    so one admin mutation can drop every affected page at once.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 256,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._cache = SimpleTTLCache(ttl_seconds=ttl_seconds, max_entries=max_entries, clock=clock)
        self._tags: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Any | None:
        return self._cache.get(path)

    def set(self, path: str, value: Any, tags: Iterable[str] = ()) -> None:
        self._cache.set(path, value)
        live = set(self._cache.keys())
        with self._lock:
            for tag in tags:
                self._tags.setdefault(tag, set()).add(path)
            self._prune_locked(live)

    def _prune_locked(self, live: set[str]) -> None:
        # Tag index only references paths still held by the cache
        for tag in list(self._tags):
            paths = self._tags[tag] & live
            if paths:
                self._tags[tag] = paths
            else:
                del self._tags[tag]

    def revalidate_path(self, path: str) -> int:
        """Drop the cached response for ``path``. Returns the number dropped."""
        purged = int(self._cache.delete(path))
        logger.info("page_cache.revalidate_path", extra={"path": path, "purged": purged})
        return purged

    def revalidate_tag(self, tag: str) -> int:
        """Drop every cached response tagged with ``tag``."""
        with self._lock:
            paths = self._tags.pop(tag, set())
        purged = sum(int(self._cache.delete(path)) for path in paths)
        logger.info("page_cache.revalidate_tag", extra={"tag": tag, "purged": purged})
        return purged

    def clear(self) -> None:
        with self._lock:
            self._tags.clear()
        self._cache.clear()

    def stats(self) -> dict[str, Any]:
        return {**self._cache.stats(), "tags": len(self._tags)}
