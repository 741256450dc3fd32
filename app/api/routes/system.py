"""Cache revalidation and diagnostics endpoints.

Both are protected by a shared token passed as ``?token=``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.adapters.content_store.base import AbstractContentStore
from app.api.dependencies import get_content_store, get_page_cache
from app.core.auth import verify_shared_token
from app.core.config import settings
from app.core.errors import ContentStoreAppError
from app.schemas.system import DatabaseStatus, DebugResponse, EnvironmentInfo, RevalidateResponse
from app.services.blog_service import BLOG_PATH
from app.services.page_cache import PageCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["System"])

CONFIGURED = "configured"
NOT_CONFIGURED = "not configured"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _configured(value: str | None) -> str:
    return CONFIGURED if value else NOT_CONFIGURED


@router.get(
    "/revalidate",
    response_model=RevalidateResponse,
    responses={401: {"description": "Missing or invalid token."}},
)
async def revalidate(
    page_cache: Annotated[PageCache, Depends(get_page_cache)],
    token: str | None = Query(None),
    path: str = Query(BLOG_PATH, description="Path to revalidate when no tag is given."),
    tag: str | None = Query(None, description="Cache tag to revalidate; wins over path."),
) -> RevalidateResponse:
    """Drop cached blog responses by tag or by path."""
    verify_shared_token(token, settings.app.revalidate_token, purpose="revalidate")

    if tag:
        purged = page_cache.revalidate_tag(tag)
    else:
        purged = page_cache.revalidate_path(path)

    return RevalidateResponse(
        revalidated=True,
        now=_utc_now(),
        path=path,
        tag=tag,
        purged=purged,
    )


async def _database_status(store: AbstractContentStore) -> DatabaseStatus:
    try:
        posts_count = await store.count_posts()
        categories_count = await store.count_categories()
    except ContentStoreAppError as exc:
        return DatabaseStatus(connected=False, message=f"Database query failed: {exc.message}")

    return DatabaseStatus(
        connected=True,
        message="Database connection OK",
        posts_count=posts_count,
        categories_count=categories_count,
    )


@router.get(
    "/debug",
    response_model=DebugResponse,
    responses={401: {"description": "Missing or invalid token."}},
)
async def debug(
    store: Annotated[AbstractContentStore, Depends(get_content_store)],
    token: str | None = Query(None),
) -> DebugResponse:
    """Report which settings are present and whether the database answers.

    Secret values are never returned, only whether they are configured.
    """
    verify_shared_token(token, settings.app.debug_token, purpose="debug")

    environment = EnvironmentInfo(
        timestamp=_utc_now(),
        app_env=settings.app_env,
        content_store_provider=settings.content_store.provider,
        content_store_url=_configured(settings.content_store.url),
        content_store_api_key=_configured(settings.content_store.api_key),
        revalidate_token=_configured(settings.app.revalidate_token),
    )
    database = await _database_status(store)
    logger.info("debug.report", extra={"db_connected": database.connected})

    return DebugResponse(environment=environment, database=database)
