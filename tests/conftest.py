"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so no .env file is loaded, and points the app at the
in-memory content store.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("CONTENT_STORE_PROVIDER", "memory")
os.environ.setdefault("APP_ADMIN_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_ADMIN_API_KEYS", "test-admin-key-123,test-admin-key-456")
os.environ.setdefault("APP_REVALIDATE_TOKEN", "test-revalidate-token")
os.environ.setdefault("APP_DEBUG_TOKEN", "test-debug-token")
os.environ.setdefault("APP_SITE_URL", "https://example.com")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.adapters.content_store.in_memory import InMemoryContentStore  # noqa: E402
from app.adapters.rate_limit.in_memory import InMemoryTokenRateLimiter  # noqa: E402
from app.core.app_factory import create_app  # noqa: E402
from app.schemas.content import Category, Post, PostStatus  # noqa: E402

ADMIN_HEADERS = {"X-API-Key": "test-admin-key-123"}

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_post(
    post_id: str,
    slug: str,
    *,
    title: str | None = None,
    status: PostStatus = PostStatus.PUBLISHED,
    days: int = 0,
    category_id: str | None = None,
    content: str = "본문 내용입니다.",
    featured_image: str | None = None,
) -> Post:
    """Post created ``days`` after BASE_TIME (larger is newer)."""
    created = BASE_TIME + timedelta(days=days)
    return Post(
        id=post_id,
        title=title or slug.replace("-", " ").title(),
        content=content,
        slug=slug,
        status=status,
        category_id=category_id,
        featured_image=featured_image,
        created_at=created,
        updated_at=created,
        published_at=created if status == PostStatus.PUBLISHED else None,
    )


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="cat-career", name="커리어", slug="career"),
        Category(id="cat-leadership", name="리더십", slug="leadership"),
    ]


@pytest.fixture
def posts() -> list[Post]:
    return [
        make_post("p1", "career-coaching-tips-lj3fh2", days=1, category_id="cat-career"),
        make_post("p2", "career-coaching-tips-9xk2ab", days=5, category_id="cat-career"),
        make_post("p3", "leadership-basics", days=3, category_id="cat-leadership"),
        make_post("p4", "draft-only-post", status=PostStatus.DRAFT, days=10),
    ]


@pytest.fixture
def store(posts: list[Post], categories: list[Category]) -> InMemoryContentStore:
    return InMemoryContentStore(posts=posts, categories=categories)


@pytest.fixture
def limiter() -> InMemoryTokenRateLimiter:
    return InMemoryTokenRateLimiter(limit=2, interval_seconds=60)


@pytest.fixture
def app(store: InMemoryContentStore, limiter: InMemoryTokenRateLimiter) -> FastAPI:
    return create_app(content_store=store, contact_limiter=limiter)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
