"""In-memory per-client request counter backed by a bounded TTL cache.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- The first request from a client opens a window of ``interval_seconds``;
  the counter disappears when its cache entry expires. This is a fixed
  window per client, not a sliding window.
- At most ``max_clients`` keys are tracked; the least recently used client is
  forgotten first, which resets its counter.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.utils.simple_cache import SimpleTTLCache


@dataclass
class _TokenCount:
    count: int


class InMemoryTokenRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per client key inside an LRU TTL cache."""

    def __init__(
        self,
        *,
        limit: int,
        interval_seconds: float,
        max_clients: int = 500,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum requests a client may make per interval.
            interval_seconds: Lifetime of a client's counter.
            max_clients: Capacity of the underlying cache.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If any bound is invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        if max_clients < 1:
            raise ValueError("max_clients must be >= 1")

        self._limit = limit
        self._interval_seconds = interval_seconds
        self._clock = clock
        self._tokens = SimpleTTLCache(
            ttl_seconds=interval_seconds,
            max_entries=max_clients,
            clock=clock,
        )

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    def _result(self, *, success: bool, remaining: int) -> RateLimitResult:
        now = self._clock()
        return RateLimitResult(
            success=success,
            reset=int((now + self._interval_seconds) * 1000),
            limit=self._limit,
            remaining=remaining,
            retry_after_seconds=None if success else int(math.ceil(self._interval_seconds)),
        )

    def check(self, key: str) -> RateLimitResult:
        """Count one request for ``key``.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        # get + increment is not atomic; callers must not await in between.
        token_count = self._tokens.get(key)

        if token_count is None:
            self._tokens.set(key, _TokenCount(count=1))
            return self._result(success=True, remaining=self._limit - 1)

        if token_count.count >= self._limit:
            return self._result(success=False, remaining=0)

        token_count.count += 1
        return self._result(success=True, remaining=self._limit - token_count.count)
