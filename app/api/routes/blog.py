from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_blog_service
from app.schemas.content import CategoryPostsResponse, Post
from app.services.blog_service import BlogService

router = APIRouter(prefix="/blog", tags=["Blog"])

BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]


@router.get("", response_model=list[Post])
async def list_posts(service: BlogServiceDep) -> list[Post]:
    """Published columns, most recently published first."""
    return await service.list_published_posts()


@router.get("/category/{slug}", response_model=CategoryPostsResponse)
async def category_page(slug: str, service: BlogServiceDep) -> CategoryPostsResponse:
    """A category with its published posts and the full category list.

    Raises:
        NotFoundAppError: 404 for an unknown category slug.
    """
    return await service.get_category_page(slug)


@router.get("/{slug}", response_model=Post)
async def get_post(slug: str, service: BlogServiceDep) -> Post:
    """Look up a published post by slug.

    The slug does not have to match exactly: duplicated separators, a
    missing or different id suffix and old links are resolved to the newest
    plausible post.

    Raises:
        NotFoundAppError: 404 when nothing matches.
    """
    return await service.get_post_by_slug(slug)
