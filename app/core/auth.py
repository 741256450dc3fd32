"""Admin API key and shared-token checks.

Admin endpoints take an ``X-API-Key`` header validated against a
comma-separated list from the environment. The revalidate and debug
endpoints take a shared token in the query string. All comparisons are
constant-time.
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Header, HTTPException, status

from app.core.config import settings
from app.core.errors import AuthenticationAppError
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Args:
        keys_string: Comma-separated string of API keys, or None.

    Returns:
        Set of trimmed, non-empty API keys.

    Examples:
        >>> sorted(parse_api_keys("key1, key2 , key3 "))
        ['key1', 'key2', 'key3']
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()

    return {key.strip() for key in keys_string.split(",") if key.strip()}


def _constant_time_equals(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode(), expected.encode())


def validate_api_key(provided_key: str) -> None:
    """Validate an admin API key against the configured keys.

    Args:
        provided_key: API key to validate.

    Raises:
        AuthenticationAppError: If the key is invalid, or authentication is
            required but no keys are configured.
    """
    if not settings.app.admin_api_key_required:
        return

    valid_keys = parse_api_keys(settings.app.admin_api_keys)

    if not valid_keys:
        logger.error(
            "api_key_validation_failed",
            extra={
                "reason": "api_keys_not_configured",
                "auth_required": settings.app.admin_api_key_required,
            },
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={
                "hint": (
                    "Set APP_ADMIN_API_KEYS or disable auth with "
                    "APP_ADMIN_API_KEY_REQUIRED=false"
                ),
            },
        )

    # Check every key so timing does not depend on which one matched
    matched = [_constant_time_equals(provided_key or "", key) for key in valid_keys]
    if not any(matched):
        logger.warning(
            "api_key_validation_failed",
            extra={
                "reason": "invalid_api_key",
                "api_key_hash": hash_identifier(provided_key or ""),
            },
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_admin_api_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency guarding the admin routes.

    Usage:
        router = APIRouter(dependencies=[Depends(verify_admin_api_key)])

    Raises:
        HTTPException: 403 Forbidden if authentication fails.
    """
    if not settings.app.admin_api_key_required:
        logger.debug("auth.skipped", extra={"reason": "auth_required_false"})
        return

    if not x_api_key:
        logger.warning("auth.missing_key", extra={"api_key_present": False})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Missing API key. Provide X-API-Key header.",
        )

    try:
        validate_api_key(x_api_key)
    except AuthenticationAppError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=exc.message,
        ) from exc

    logger.info("auth.success", extra={"api_key_hash": hash_identifier(x_api_key)})


def verify_shared_token(provided: str | None, expected: str | None, *, purpose: str) -> None:
    """Check a shared-secret query token.

    A missing token, a wrong token and an unconfigured secret all produce the
    same error so callers cannot tell which one happened.

    Raises:
        AuthenticationAppError: Token rejected (mapped to HTTP 401).
    """
    if provided and expected and _constant_time_equals(provided, expected):
        return

    logger.warning(
        "auth.token_rejected",
        extra={
            "purpose": purpose,
            "token_present": bool(provided),
            "token_configured": bool(expected),
        },
    )
    raise AuthenticationAppError(
        code="invalid_token",
        message="Authentication failed: invalid token.",
    )
