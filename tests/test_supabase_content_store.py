"""Tests for the Supabase (PostgREST) content store adapter.

Requests are captured with ``httpx.MockTransport``; no network access.
"""

from __future__ import annotations

import json

import httpx
import pytest

from app.adapters.content_store.base import SlugMatch
from app.adapters.content_store.supabase_client import (
    POST_SELECT,
    SupabaseContentStore,
    _parse_count,
    slug_filter,
)
from app.core.errors import ContentStoreAppError
from app.schemas.content import PostStatus

POST_ROW = {
    "id": "p1",
    "title": "커리어 코칭 팁",
    "content": "본문",
    "slug": "career-coaching-tips",
    "status": "published",
    "created_at": "2024-03-01T09:00:00+00:00",
    "categories": {"name": "커리어", "slug": "career"},
}

CATEGORY_ROW = {"id": "cat-career", "name": "커리어", "slug": "career", "description": None}


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _store(recorder: Recorder) -> SupabaseContentStore:
    return SupabaseContentStore(
        "https://abc.supabase.co/",
        "service-key",
        transport=httpx.MockTransport(recorder),
    )


@pytest.mark.parametrize(
    ("match", "expected"),
    [
        (SlugMatch(mode="exact", value="a-b"), "eq.a-b"),
        (SlugMatch(mode="contains", value="a-b"), "like.*a-b*"),
        (SlugMatch(mode="contains", value="a-b", case_sensitive=False), "ilike.*a-b*"),
        (SlugMatch(mode="prefix", value="a-b", case_sensitive=False), "ilike.a-b*"),
        (SlugMatch(mode="prefix", value="a-b"), "like.a-b*"),
    ],
)
def test_slug_filter(match, expected):
    assert slug_filter(match) == expected


@pytest.mark.parametrize(
    ("header", "expected"),
    [("0-9/42", 42), ("*/0", 0), ("0-0/*", 0), (None, 0), ("", 0)],
)
def test_parse_count(header, expected):
    assert _parse_count(header) == expected


@pytest.mark.asyncio
async def test_auth_headers_and_base_url():
    recorder = Recorder(httpx.Response(200, json=[POST_ROW]))
    store = _store(recorder)

    await store.get_post("p1")
    await store.aclose()

    request = recorder.last
    assert str(request.url).startswith("https://abc.supabase.co/rest/v1/posts?")
    assert request.headers["apikey"] == "service-key"
    assert request.headers["Authorization"] == "Bearer service-key"
    assert request.url.params["id"] == "eq.p1"


@pytest.mark.asyncio
async def test_find_published_posts_by_slug_builds_filters():
    recorder = Recorder(httpx.Response(200, json=[POST_ROW]))
    store = _store(recorder)

    posts = await store.find_published_posts_by_slug(
        SlugMatch(mode="prefix", value="career", case_sensitive=False),
        limit=1,
    )

    params = recorder.last.url.params
    assert params["slug"] == "ilike.career*"
    assert params["status"] == "eq.published"
    assert params["order"] == "created_at.desc"
    assert params["limit"] == "1"
    assert params["select"] == POST_SELECT
    assert posts[0].slug == "career-coaching-tips"
    assert posts[0].categories is not None
    assert posts[0].categories.slug == "career"


@pytest.mark.asyncio
async def test_list_posts_filters_and_paging():
    recorder = Recorder(httpx.Response(200, json=[]))
    store = _store(recorder)

    await store.list_posts(
        status=PostStatus.DRAFT,
        search="코칭",
        category_id="cat-career",
        order_by="published_at",
        limit=10,
        offset=20,
    )

    params = recorder.last.url.params
    assert params["status"] == "eq.draft"
    assert params["title"] == "ilike.*코칭*"
    assert params["category_id"] == "eq.cat-career"
    assert params["order"] == "published_at.desc.nullslast"
    assert params["limit"] == "10"
    assert params["offset"] == "20"


@pytest.mark.asyncio
async def test_count_posts_reads_content_range():
    recorder = Recorder(httpx.Response(200, json=[{"id": "p1"}], headers={"Content-Range": "0-0/37"}))
    store = _store(recorder)

    total = await store.count_posts(status=PostStatus.PUBLISHED)

    assert total == 37
    assert recorder.last.headers["Prefer"] == "count=exact"
    assert recorder.last.url.params["status"] == "eq.published"


@pytest.mark.asyncio
async def test_create_post_requests_representation():
    recorder = Recorder(httpx.Response(201, json=[POST_ROW]))
    store = _store(recorder)

    post = await store.create_post({"title": "커리어 코칭 팁", "slug": "career-coaching-tips"})

    request = recorder.last
    assert request.method == "POST"
    assert request.headers["Prefer"] == "return=representation"
    assert json.loads(request.content)["slug"] == "career-coaching-tips"
    assert post.id == "p1"


@pytest.mark.asyncio
async def test_update_post_returns_none_when_nothing_matched():
    recorder = Recorder(httpx.Response(200, json=[]))
    store = _store(recorder)

    assert await store.update_post("missing", {"title": "x"}) is None
    assert recorder.last.method == "PATCH"


@pytest.mark.asyncio
async def test_get_category_by_slug():
    recorder = Recorder(httpx.Response(200, json=[CATEGORY_ROW]))
    store = _store(recorder)

    category = await store.get_category_by_slug("career")

    assert category is not None
    assert category.name == "커리어"
    assert recorder.last.url.params["slug"] == "eq.career"


@pytest.mark.asyncio
async def test_clear_post_category_counts_rows():
    recorder = Recorder(httpx.Response(200, json=[{"id": "p1"}, {"id": "p2"}]))
    store = _store(recorder)

    cleared = await store.clear_post_category("cat-career")

    request = recorder.last
    assert cleared == 2
    assert request.url.params["category_id"] == "eq.cat-career"
    assert json.loads(request.content) == {"category_id": None}


@pytest.mark.asyncio
async def test_error_status_raises_content_store_error():
    recorder = Recorder(
        httpx.Response(
            400,
            json={"code": "42703", "message": "column posts.foo does not exist"},
        )
    )
    store = _store(recorder)

    with pytest.raises(ContentStoreAppError) as exc_info:
        await store.list_categories()

    assert exc_info.value.code == "content_store_query_failed"
    assert exc_info.value.message == "column posts.foo does not exist"
    assert exc_info.value.details == {"table": "categories", "status_code": 400}


@pytest.mark.asyncio
async def test_error_without_json_body_uses_status_message():
    recorder = Recorder(httpx.Response(503, text="upstream unavailable"))
    store = _store(recorder)

    with pytest.raises(ContentStoreAppError) as exc_info:
        await store.count_categories()

    assert "HTTP 503" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_error_raises_content_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = SupabaseContentStore(
        "https://abc.supabase.co",
        "service-key",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(ContentStoreAppError) as exc_info:
        await store.get_category("cat-career")

    assert exc_info.value.code == "content_store_unavailable"
