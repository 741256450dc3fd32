"""Admin CRUD for posts and categories.

Every successful mutation revalidates the affected page cache tags. Store
errors propagate as ``ContentStoreAppError``; nothing is retried.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Literal

from app.adapters.content_store.base import AbstractContentStore
from app.core.config import settings
from app.core.errors import NotFoundAppError, ValidationAppError
from app.schemas.content import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    ContentIssue,
    Pagination,
    Post,
    PostCreate,
    PostListResponse,
    PostStatus,
    PostUpdate,
)
from app.services.blog_service import CATEGORIES_TAG, POSTS_TAG
from app.services.page_cache import PageCache
from app.utils.preprocessors import analyze_markdown_content, extract_text_from_markdown
from app.utils.slug_utils import SEPARATOR, generate_slug, normalize_slug, unique_suffix

logger = logging.getLogger(__name__)

StatusFilter = Literal["all", "published", "draft"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _with_suffix(slug: str) -> str:
    """Append a fresh id suffix; slugs are not unique at the database level."""
    suffix = unique_suffix()
    return f"{slug}{SEPARATOR}{suffix}" if slug else suffix


def _derive_excerpt(content: str) -> str:
    return extract_text_from_markdown(content)[: settings.app.excerpt_chars]


def _category_not_found(category_id: str) -> NotFoundAppError:
    return NotFoundAppError(
        code="category_not_found",
        message="Category not found",
        details={"category_id": category_id},
    )


class AdminService:
    """Editor operations over the content store."""

    def __init__(self, store: AbstractContentStore, page_cache: PageCache) -> None:
        self.store = store
        self.page_cache = page_cache

    def _revalidate(self, *tags: str) -> None:
        for tag in tags:
            self.page_cache.revalidate_tag(tag)

    # Posts

    async def list_posts(
        self,
        *,
        page: int = 1,
        status: StatusFilter = "all",
        search: str | None = None,
    ) -> PostListResponse:
        """One page of posts, newest first, with pagination metadata."""
        limit = settings.app.posts_per_page
        page = max(page, 1)
        status_filter = None if status == "all" else PostStatus(status)
        search = search.strip() if search else None

        posts = await self.store.list_posts(
            status=status_filter,
            search=search,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = await self.store.count_posts(status=status_filter, search=search)

        return PostListResponse(
            posts=posts,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit) if total else 0,
            ),
        )

    async def get_post(self, post_id: str) -> Post:
        post = await self.store.get_post(post_id)
        if post is None:
            raise NotFoundAppError(
                code="post_not_found",
                message="Post not found",
                details={"post_id": post_id},
            )
        return post

    async def create_post(self, data: PostCreate) -> Post:
        """Create a post.

        The slug is taken from ``data.slug`` or derived from the title, then
        always gets a fresh id suffix. A blank excerpt is derived from the
        content. ``published_at`` is set when the post is created published.

        Raises:
            ValidationAppError: Title or content is blank.
        """
        title = data.title.strip()
        content = data.content.strip()
        missing = {
            field: "required"
            for field, value in (("title", title), ("content", content))
            if not value
        }
        if missing:
            raise ValidationAppError(
                code="post_missing_fields",
                message="Title and content are required",
                details={"fields": missing},
            )

        base_slug = normalize_slug(data.slug or "") or generate_slug(title, add_unique_id=False)
        now = _now()
        payload: dict[str, Any] = {
            **data.model_dump(mode="json"),
            "title": title,
            "content": data.content,
            "slug": _with_suffix(base_slug),
            "excerpt": data.excerpt or _derive_excerpt(data.content),
            "created_at": now,
            "updated_at": now,
            "published_at": now if data.status == PostStatus.PUBLISHED else None,
        }

        post = await self.store.create_post(payload)
        logger.info(
            "admin.post_created",
            extra={"post_id": post.id, "slug": post.slug, "status": post.status.value},
        )
        self._revalidate(POSTS_TAG)
        return post

    async def update_post(self, post_id: str, data: PostUpdate) -> Post:
        """Apply a partial update.

        A changed slug gets a fresh id suffix; an unchanged one is kept as is.
        Moving from draft to published sets ``published_at``.
        """
        existing = await self.get_post(post_id)
        changes = data.model_dump(mode="json", exclude_unset=True)

        for field in ("title", "content"):
            if field in changes and not (changes[field] or "").strip():
                raise ValidationAppError(
                    code="post_missing_fields",
                    message="Title and content are required",
                    details={"fields": {field: "required"}, "post_id": post_id},
                )

        if "slug" in changes:
            requested = normalize_slug(changes["slug"] or "") or generate_slug(
                changes.get("title") or existing.title,
                add_unique_id=False,
            )
            changes["slug"] = existing.slug if requested == existing.slug else _with_suffix(requested)

        if "excerpt" in changes and not changes["excerpt"]:
            changes["excerpt"] = _derive_excerpt(changes.get("content") or existing.content)

        if data.status == PostStatus.PUBLISHED and existing.status != PostStatus.PUBLISHED:
            changes["published_at"] = _now()

        changes["updated_at"] = _now()

        post = await self.store.update_post(post_id, changes)
        if post is None:
            raise NotFoundAppError(
                code="post_not_found",
                message="Post not found",
                details={"post_id": post_id},
            )

        logger.info(
            "admin.post_updated",
            extra={"post_id": post_id, "fields": sorted(changes)},
        )
        self._revalidate(POSTS_TAG)
        return post

    async def delete_post(self, post_id: str) -> None:
        await self.get_post(post_id)
        await self.store.delete_post(post_id)
        logger.info("admin.post_deleted", extra={"post_id": post_id})
        self._revalidate(POSTS_TAG)

    async def content_issues(self, post_id: str) -> list[ContentIssue]:
        """Invalid image URLs and empty links in the post body."""
        post = await self.get_post(post_id)
        return analyze_markdown_content(post.content)

    # Categories

    async def list_categories(self) -> list[Category]:
        return await self.store.list_categories()

    async def create_category(self, data: CategoryCreate) -> Category:
        name = data.name.strip()
        if not name:
            raise ValidationAppError(
                code="category_missing_name",
                message="Category name is required",
                details={"fields": {"name": "required"}},
            )

        payload = {
            "name": name,
            "slug": normalize_slug(data.slug or "") or generate_slug(name),
            "description": data.description,
        }
        category = await self.store.create_category(payload)
        logger.info(
            "admin.category_created",
            extra={"category_id": category.id, "slug": category.slug},
        )
        self._revalidate(CATEGORIES_TAG)
        return category

    async def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        existing = await self.store.get_category(category_id)
        if existing is None:
            raise _category_not_found(category_id)

        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationAppError(
                code="category_missing_name",
                message="Category name is required",
                details={"fields": {"name": "required"}, "category_id": category_id},
            )
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        if "slug" in changes:
            changes["slug"] = normalize_slug(changes["slug"] or "") or generate_slug(
                changes.get("name") or existing.name,
            )

        category = await self.store.update_category(category_id, changes)
        if category is None:
            raise _category_not_found(category_id)

        logger.info("admin.category_updated", extra={"category_id": category_id})
        self._revalidate(POSTS_TAG, CATEGORIES_TAG)
        return category

    async def delete_category(self, category_id: str) -> int:
        """Delete a category after detaching its posts.

        Returns:
            Number of posts whose category was cleared.
        """
        if await self.store.get_category(category_id) is None:
            raise _category_not_found(category_id)

        detached = await self.store.clear_post_category(category_id)
        await self.store.delete_category(category_id)
        logger.info(
            "admin.category_deleted",
            extra={"category_id": category_id, "detached_posts": detached},
        )
        self._revalidate(POSTS_TAG, CATEGORIES_TAG)
        return detached
