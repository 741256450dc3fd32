"""Content store interface.

Services depend on this abstraction, not on a concrete hosted database, so
tests and local development can swap in the in-memory store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal

from app.schemas.content import Category, Post, PostStatus

SlugMatchMode = Literal["exact", "contains", "prefix"]


@dataclass(frozen=True)
class SlugMatch:
    """One slug lookup, independent of the query language of the store.

    Attributes:
        mode: ``exact`` (equality), ``contains`` (substring) or ``prefix``.
        value: Slug or slug fragment to match.
        case_sensitive: Whether letter case must match (LIKE vs ILIKE).
    """

    mode: SlugMatchMode
    value: str
    case_sensitive: bool = True

    def matches(self, slug: str) -> bool:
        value, candidate = self.value, slug
        if not self.case_sensitive:
            value, candidate = value.lower(), candidate.lower()
        if self.mode == "exact":
            return candidate == value
        if self.mode == "contains":
            return value in candidate
        return candidate.startswith(value)


class AbstractContentStore(ABC):
    """Posts and categories in a hosted relational database.

    Every method raises ``ContentStoreAppError`` when the backend call fails.
    Lists of posts come back newest ``created_at`` first unless stated.
    """

    @abstractmethod
    async def find_published_posts_by_slug(
        self,
        match: SlugMatch,
        *,
        limit: int | None = None,
    ) -> list[Post]:
        """Published posts whose slug satisfies ``match``, newest first."""
        ...

    @abstractmethod
    async def list_posts(
        self,
        *,
        status: PostStatus | None = None,
        search: str | None = None,
        category_id: str | None = None,
        order_by: str = "created_at",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Post]:
        """Posts filtered by status, title substring and category, newest ``order_by`` first."""
        ...

    @abstractmethod
    async def count_posts(
        self,
        *,
        status: PostStatus | None = None,
        search: str | None = None,
    ) -> int:
        ...

    @abstractmethod
    async def get_post(self, post_id: str) -> Post | None:
        ...

    @abstractmethod
    async def create_post(self, data: dict[str, Any]) -> Post:
        ...

    @abstractmethod
    async def update_post(self, post_id: str, data: dict[str, Any]) -> Post | None:
        """Apply ``data`` and return the updated post, or None if it does not exist."""
        ...

    @abstractmethod
    async def delete_post(self, post_id: str) -> None:
        ...

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """All categories ordered by name."""
        ...

    @abstractmethod
    async def count_categories(self) -> int:
        ...

    @abstractmethod
    async def get_category(self, category_id: str) -> Category | None:
        ...

    @abstractmethod
    async def get_category_by_slug(self, slug: str) -> Category | None:
        ...

    @abstractmethod
    async def create_category(self, data: dict[str, Any]) -> Category:
        ...

    @abstractmethod
    async def update_category(self, category_id: str, data: dict[str, Any]) -> Category | None:
        ...

    @abstractmethod
    async def delete_category(self, category_id: str) -> None:
        ...

    @abstractmethod
    async def clear_post_category(self, category_id: str) -> int:
        """Set ``category_id`` to null on every post in the category.

        Returns:
            Number of posts updated.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources, if any."""
        return None
