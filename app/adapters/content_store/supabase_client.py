"""Supabase content store adapter.

Talks to the PostgREST API that Supabase exposes under ``/rest/v1`` using
``httpx``. Each call is a single request/response round trip: no retries,
no backoff, no client-side transactions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.adapters.content_store.base import AbstractContentStore, SlugMatch
from app.core.errors import ContentStoreAppError
from app.schemas.content import Category, Post, PostStatus

logger = logging.getLogger(__name__)

POST_SELECT = "*,categories(name,slug)"
CATEGORY_SELECT = "id,name,slug,description"


def slug_filter(match: SlugMatch) -> str:
    """Translate a SlugMatch into a PostgREST filter value.

    >>> slug_filter(SlugMatch(mode="contains", value="growth"))
    'like.*growth*'
    >>> slug_filter(SlugMatch(mode="prefix", value="growth", case_sensitive=False))
    'ilike.growth*'
    """
    if match.mode == "exact":
        return f"eq.{match.value}"
    operator = "like" if match.case_sensitive else "ilike"
    if match.mode == "contains":
        return f"{operator}.*{match.value}*"
    return f"{operator}.{match.value}*"


def _parse_count(content_range: str | None) -> int:
    # Content-Range looks like "0-9/42" or "*/0"
    if not content_range or "/" not in content_range:
        return 0
    total = content_range.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else 0


class SupabaseContentStore(AbstractContentStore):
    """Content store backed by a Supabase project."""

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create the HTTP client.

        Args:
            url: Supabase project URL (``https://<ref>.supabase.co``).
            api_key: Service role or anon key.
            timeout_seconds: Per-request timeout.
            transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        """
        self.client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self.client.request(
                method,
                f"/{table}",
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.error(
                "content_store.transport_error",
                extra={"table": table, "method": method, "error_type": type(exc).__name__},
            )
            raise ContentStoreAppError(
                code="content_store_unavailable",
                message=f"Content store request failed: {exc}",
                details={"table": table},
            ) from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("message") if isinstance(body, dict) else None
            logger.error(
                "content_store.query_failed",
                extra={
                    "table": table,
                    "method": method,
                    "status_code": response.status_code,
                    "pg_code": body.get("code") if isinstance(body, dict) else None,
                },
            )
            raise ContentStoreAppError(
                code="content_store_query_failed",
                message=message or f"Content store returned HTTP {response.status_code}",
                details={"table": table, "status_code": response.status_code},
            )

        return response

    async def _select_posts(self, params: dict[str, Any]) -> list[Post]:
        response = await self._request("GET", "posts", params={"select": POST_SELECT, **params})
        return [Post.model_validate(row) for row in response.json()]

    async def find_published_posts_by_slug(
        self,
        match: SlugMatch,
        *,
        limit: int | None = None,
    ) -> list[Post]:
        params: dict[str, Any] = {
            "slug": slug_filter(match),
            "status": f"eq.{PostStatus.PUBLISHED.value}",
            "order": "created_at.desc",
        }
        if limit is not None:
            params["limit"] = limit
        return await self._select_posts(params)

    def _post_filters(
        self,
        status: PostStatus | None,
        search: str | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if status is not None:
            params["status"] = f"eq.{status.value}"
        if search:
            params["title"] = f"ilike.*{search}*"
        return params

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
        params = self._post_filters(status, search)
        params["order"] = f"{order_by}.desc.nullslast"
        if category_id is not None:
            params["category_id"] = f"eq.{category_id}"
        if limit is not None:
            params["limit"] = limit
        if offset:
            params["offset"] = offset
        return await self._select_posts(params)

    async def count_posts(
        self,
        *,
        status: PostStatus | None = None,
        search: str | None = None,
    ) -> int:
        params = {"select": "id", "limit": 1, **self._post_filters(status, search)}
        response = await self._request("GET", "posts", params=params, prefer="count=exact")
        return _parse_count(response.headers.get("Content-Range"))

    async def get_post(self, post_id: str) -> Post | None:
        posts = await self._select_posts({"id": f"eq.{post_id}", "limit": 1})
        return posts[0] if posts else None

    async def create_post(self, data: dict[str, Any]) -> Post:
        response = await self._request(
            "POST",
            "posts",
            params={"select": POST_SELECT},
            json=data,
            prefer="return=representation",
        )
        return Post.model_validate(response.json()[0])

    async def update_post(self, post_id: str, data: dict[str, Any]) -> Post | None:
        response = await self._request(
            "PATCH",
            "posts",
            params={"id": f"eq.{post_id}", "select": POST_SELECT},
            json=data,
            prefer="return=representation",
        )
        rows = response.json()
        return Post.model_validate(rows[0]) if rows else None

    async def delete_post(self, post_id: str) -> None:
        await self._request("DELETE", "posts", params={"id": f"eq.{post_id}"})

    async def list_categories(self) -> list[Category]:
        response = await self._request(
            "GET",
            "categories",
            params={"select": CATEGORY_SELECT, "order": "name.asc"},
        )
        return [Category.model_validate(row) for row in response.json()]

    async def count_categories(self) -> int:
        response = await self._request(
            "GET",
            "categories",
            params={"select": "id", "limit": 1},
            prefer="count=exact",
        )
        return _parse_count(response.headers.get("Content-Range"))

    async def _get_category_where(self, column: str, value: str) -> Category | None:
        response = await self._request(
            "GET",
            "categories",
            params={"select": CATEGORY_SELECT, column: f"eq.{value}", "limit": 1},
        )
        rows = response.json()
        return Category.model_validate(rows[0]) if rows else None

    async def get_category(self, category_id: str) -> Category | None:
        return await self._get_category_where("id", category_id)

    async def get_category_by_slug(self, slug: str) -> Category | None:
        return await self._get_category_where("slug", slug)

    async def create_category(self, data: dict[str, Any]) -> Category:
        response = await self._request(
            "POST",
            "categories",
            params={"select": CATEGORY_SELECT},
            json=data,
            prefer="return=representation",
        )
        return Category.model_validate(response.json()[0])

    async def update_category(self, category_id: str, data: dict[str, Any]) -> Category | None:
        response = await self._request(
            "PATCH",
            "categories",
            params={"id": f"eq.{category_id}", "select": CATEGORY_SELECT},
            json=data,
            prefer="return=representation",
        )
        rows = response.json()
        return Category.model_validate(rows[0]) if rows else None

    async def delete_category(self, category_id: str) -> None:
        await self._request("DELETE", "categories", params={"id": f"eq.{category_id}"})

    async def clear_post_category(self, category_id: str) -> int:
        response = await self._request(
            "PATCH",
            "posts",
            params={"category_id": f"eq.{category_id}", "select": "id"},
            json={"category_id": None},
            prefer="return=representation",
        )
        return len(response.json())
