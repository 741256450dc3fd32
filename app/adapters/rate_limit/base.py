"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
storage backend can be swapped later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    Attributes:
        success: Whether the request is allowed to proceed.
        reset: UNIX epoch milliseconds after which the client may retry.
        limit: Max requests per client per interval.
        remaining: Requests left for this client in its current window.
        retry_after_seconds: Suggested wait in seconds when blocked.
    """

    success: bool
    reset: int
    limit: int
    remaining: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, key: str) -> RateLimitResult:
        """Count one request for ``key`` and report whether it is allowed.

        Args:
            key: Client identifier (IP address or "unknown").

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError
