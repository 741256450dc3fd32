"""Rate limiting dependency for the contact endpoint.

The limiter is built once by the app factory and stored on
``app.state.contact_limiter``; this module only reads it from the request.

Clients are keyed by the first address in ``X-Forwarded-For``, then
``X-Real-IP``. Requests carrying neither share the ``"unknown"`` bucket.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryTokenRateLimiter
from app.core.config import settings
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"
RATE_LIMIT_MESSAGE = "너무 많은 요청이 발생했습니다. 잠시 후 다시 시도해주세요."


def build_contact_limiter() -> AbstractRateLimiter:
    """Create the contact limiter from settings."""
    return InMemoryTokenRateLimiter(
        limit=settings.app.rate_limit_requests,
        interval_seconds=settings.app.rate_limit_interval_seconds,
        max_clients=settings.app.rate_limit_max_clients,
    )


def client_key(request: Request) -> str:
    """Identify the caller by proxy headers.

    Args:
        request: FastAPI request.

    Returns:
        str: Client IP as reported by the proxy, or ``"unknown"``.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return UNKNOWN_CLIENT


def get_contact_limiter(request: Request) -> AbstractRateLimiter:
    return request.app.state.contact_limiter


async def enforce_contact_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the contact form rate limit.

    Raises:
        HTTPException: 429 Too Many Requests when the client exceeded its
            budget for the current interval.
    """
    if not settings.app.rate_limit_enabled:
        return

    limiter = get_contact_limiter(request)
    key = client_key(request)
    key_hash = hash_identifier(key)

    result = limiter.check(key)
    if result.success:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "unknown_client": key == UNKNOWN_CLIENT,
            "limit": result.limit,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset)

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=RATE_LIMIT_MESSAGE,
        headers=headers or None,
    )
