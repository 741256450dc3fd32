"""Pydantic schemas for blog posts and categories."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class CategoryRef(BaseModel):
    """Category fields embedded on a post (``categories(name, slug)``)."""

    name: str
    slug: str


class Category(BaseModel):
    """Blog category."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str | None = None


class Post(BaseModel):
    """Blog post ("column") as stored in the ``posts`` table.

    Slugs are neither unique nor canonical: editors may have saved duplicated
    separators or near-duplicates of other posts.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str = ""
    excerpt: str | None = None
    slug: str
    featured_image: str | None = None
    author_id: str | None = None
    category_id: str | None = None
    status: PostStatus = PostStatus.DRAFT
    created_at: datetime
    updated_at: datetime | None = None
    published_at: datetime | None = None
    external_url: str | None = None
    categories: CategoryRef | None = None


class PostCreate(BaseModel):
    """Admin input for a new post."""

    title: str = Field("", description="Post title (required).")
    content: str = Field("", description="Markdown body (required).")
    excerpt: str | None = Field(None, description="Summary; derived from content when blank.")
    slug: str | None = Field(None, description="Slug; derived from the title when blank.")
    featured_image: str | None = None
    category_id: str | None = None
    status: PostStatus = PostStatus.DRAFT
    external_url: str | None = None
    author_id: str | None = None


class PostUpdate(BaseModel):
    """Admin partial update for a post. Omitted fields are left unchanged."""

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    slug: str | None = None
    featured_image: str | None = None
    category_id: str | None = None
    status: PostStatus | None = None
    external_url: str | None = None


class CategoryCreate(BaseModel):
    name: str = Field("", description="Display name (required).")
    slug: str | None = Field(None, description="Slug; derived from the name when blank.")
    description: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PostListResponse(BaseModel):
    """Paginated admin post listing."""

    posts: list[Post]
    pagination: Pagination


class CategoryPostsResponse(BaseModel):
    """Category page: the category, its published posts and all categories."""

    category: Category
    posts: list[Post]
    categories: list[Category]


class ContentIssue(BaseModel):
    """A problem found in a post's markdown body."""

    type: str
    issue: str
    original: str


class DeleteResponse(BaseModel):
    deleted: bool = True
    id: str
