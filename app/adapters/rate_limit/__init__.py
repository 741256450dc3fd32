"""Rate limiting adapters.

Starts with an in-memory limiter; a shared store (e.g., Redis) can implement
the same interface without changing the API layer.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.in_memory import InMemoryTokenRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryTokenRateLimiter",
    "RateLimitResult",
]
