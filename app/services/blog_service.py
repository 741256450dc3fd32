"""Public blog reads: listing, post detail and category pages.

Responses are cached per path in the page cache and tagged so that admin
mutations and the revalidate endpoint can drop them.
"""

from __future__ import annotations

import logging

from app.adapters.content_store.base import AbstractContentStore
from app.core.config import settings
from app.core.errors import NotFoundAppError
from app.schemas.content import CategoryPostsResponse, Post, PostStatus
from app.services.page_cache import PageCache
from app.services.slug_resolver import SlugResolver, default_stages
from app.utils.preprocessors import (
    fix_all_markdown_images,
    preprocess_blog_post,
    preprocess_blog_posts,
)
from app.utils.slug_utils import cleanup_slug

logger = logging.getLogger(__name__)

BLOG_PATH = "/blog"
POSTS_TAG = "posts"
CATEGORIES_TAG = "categories"


class BlogService:
    """Read side of the blog, backed by a content store and a page cache."""

    def __init__(
        self,
        store: AbstractContentStore,
        page_cache: PageCache,
        resolver: SlugResolver | None = None,
    ) -> None:
        self.store = store
        self.page_cache = page_cache
        self.resolver = resolver or SlugResolver(
            store,
            default_stages(word_fallback=settings.app.slug_word_fallback_enabled),
        )

    async def list_published_posts(self) -> list[Post]:
        """Published posts, most recently published first."""
        cached = self.page_cache.get(BLOG_PATH)
        if cached is not None:
            return cached

        posts = await self.store.list_posts(
            status=PostStatus.PUBLISHED,
            order_by="published_at",
        )
        result = preprocess_blog_posts(posts)
        self.page_cache.set(BLOG_PATH, result, tags=[POSTS_TAG])
        return result

    async def get_post_by_slug(self, raw_slug: str) -> Post:
        """Resolve a URL slug to a published post.

        Raises:
            NotFoundAppError: When no stage of the slug cascade matches.
        """
        path = f"{BLOG_PATH}/{cleanup_slug(raw_slug)}"
        cached = self.page_cache.get(path)
        if cached is not None:
            return cached

        post = await self.resolver.resolve(raw_slug)
        if post is None:
            raise NotFoundAppError(
                code="post_not_found",
                message="Post not found",
                details={"slug": raw_slug},
            )

        # Repair image markup before URL normalization
        repaired = post.model_copy(update={"content": fix_all_markdown_images(post.content)})
        result = preprocess_blog_post(repaired)
        self.page_cache.set(path, result, tags=[POSTS_TAG])
        return result

    async def get_category_page(self, slug: str) -> CategoryPostsResponse:
        """Category, its published posts and the full category list.

        Raises:
            NotFoundAppError: When no category has this slug.
        """
        path = f"{BLOG_PATH}/category/{slug}"
        cached = self.page_cache.get(path)
        if cached is not None:
            return cached

        category = await self.store.get_category_by_slug(slug)
        if category is None:
            raise NotFoundAppError(
                code="category_not_found",
                message="Category not found",
                details={"slug": slug},
            )

        posts = await self.store.list_posts(
            status=PostStatus.PUBLISHED,
            category_id=category.id,
            order_by="published_at",
        )
        categories = await self.store.list_categories()

        result = CategoryPostsResponse(
            category=category,
            posts=preprocess_blog_posts(posts),
            categories=categories,
        )
        self.page_cache.set(path, result, tags=[POSTS_TAG, CATEGORIES_TAG])
        return result
