"""Application-level exception types.

Domain errors raised by services and adapters. The global exception handlers
turn them into consistent JSON responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    fields: dict[str, str]
    status_code: int
    table: str
    slug: str
    post_id: str
    category_id: str
    provider: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when a key or token check fails."""


class NotFoundAppError(AppError):
    """Raised when a post or category does not exist."""


class ContentStoreAppError(AppError):
    """Raised when a hosted database call fails."""
