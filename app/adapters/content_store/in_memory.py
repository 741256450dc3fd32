"""In-memory content store for local development and tests.

Mirrors the query semantics of the PostgREST adapter: LIKE is case-sensitive,
ILIKE is not, listings are newest first and embedded category refs are
resolved from the category table.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from app.adapters.content_store.base import AbstractContentStore, SlugMatch
from app.schemas.content import Category, CategoryRef, Post, PostStatus

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryContentStore(AbstractContentStore):
    """Dict-backed store. Not shared between processes."""

    def __init__(
        self,
        posts: Iterable[Post] | None = None,
        categories: Iterable[Category] | None = None,
    ) -> None:
        self._posts: dict[str, Post] = {p.id: p for p in posts or []}
        self._categories: dict[str, Category] = {c.id: c for c in categories or []}

    def _with_category(self, post: Post) -> Post:
        category = self._categories.get(post.category_id) if post.category_id else None
        ref = CategoryRef(name=category.name, slug=category.slug) if category else None
        return post.model_copy(update={"categories": ref})

    @staticmethod
    def _newest_first(posts: Iterable[Post], order_by: str = "created_at") -> list[Post]:
        return sorted(posts, key=lambda p: getattr(p, order_by) or _EPOCH, reverse=True)

    async def find_published_posts_by_slug(
        self,
        match: SlugMatch,
        *,
        limit: int | None = None,
    ) -> list[Post]:
        found = [
            p for p in self._posts.values()
            if p.status == PostStatus.PUBLISHED and match.matches(p.slug)
        ]
        ordered = self._newest_first(found)
        if limit is not None:
            ordered = ordered[:limit]
        return [self._with_category(p) for p in ordered]

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
        posts = list(self._filter(status=status, search=search))
        if category_id is not None:
            posts = [p for p in posts if p.category_id == category_id]
        ordered = self._newest_first(posts, order_by)
        end = None if limit is None else offset + limit
        return [self._with_category(p) for p in ordered[offset:end]]

    def _filter(self, *, status: PostStatus | None, search: str | None) -> Iterable[Post]:
        for post in self._posts.values():
            if status is not None and post.status != status:
                continue
            if search and search.lower() not in post.title.lower():
                continue
            yield post

    async def count_posts(
        self,
        *,
        status: PostStatus | None = None,
        search: str | None = None,
    ) -> int:
        return sum(1 for _ in self._filter(status=status, search=search))

    async def get_post(self, post_id: str) -> Post | None:
        post = self._posts.get(post_id)
        return self._with_category(post) if post else None

    async def create_post(self, data: dict[str, Any]) -> Post:
        now = datetime.now(timezone.utc)
        values = {"created_at": now, "updated_at": now, **data}
        values.setdefault("id", str(uuid.uuid4()))
        post = Post.model_validate(values)
        self._posts[post.id] = post
        return self._with_category(post)

    async def update_post(self, post_id: str, data: dict[str, Any]) -> Post | None:
        post = self._posts.get(post_id)
        if post is None:
            return None
        updated = Post.model_validate({**post.model_dump(), **data})
        self._posts[post_id] = updated
        return self._with_category(updated)

    async def delete_post(self, post_id: str) -> None:
        self._posts.pop(post_id, None)

    async def list_categories(self) -> list[Category]:
        return sorted(self._categories.values(), key=lambda c: c.name)

    async def count_categories(self) -> int:
        return len(self._categories)

    async def get_category(self, category_id: str) -> Category | None:
        return self._categories.get(category_id)

    async def get_category_by_slug(self, slug: str) -> Category | None:
        return next((c for c in self._categories.values() if c.slug == slug), None)

    async def create_category(self, data: dict[str, Any]) -> Category:
        values = dict(data)
        values.setdefault("id", str(uuid.uuid4()))
        category = Category.model_validate(values)
        self._categories[category.id] = category
        return category

    async def update_category(self, category_id: str, data: dict[str, Any]) -> Category | None:
        category = self._categories.get(category_id)
        if category is None:
            return None
        updated = Category.model_validate({**category.model_dump(), **data})
        self._categories[category_id] = updated
        return updated

    async def delete_category(self, category_id: str) -> None:
        self._categories.pop(category_id, None)

    async def clear_post_category(self, category_id: str) -> int:
        cleared = 0
        for post_id, post in list(self._posts.items()):
            if post.category_id == category_id:
                self._posts[post_id] = post.model_copy(update={"category_id": None})
                cleared += 1
        return cleared
