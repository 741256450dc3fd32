"""Application factory for FastAPI app.

Centralizes app construction (state, middleware, handlers, routers) so tests
can build isolated instances with their own content store and limiter.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.adapters.content_store.base import AbstractContentStore
from app.adapters.content_store.factory import create_content_store
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.api.routes import (
    admin_router,
    blog_router,
    contact_router,
    health_router,
    system_router,
)
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware, security_headers_middleware
from app.core.openapi import apply_openapi_customizations
from app.core.rate_limit import build_contact_limiter
from app.services.page_cache import PageCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "app.startup",
        extra={
            "app_env": settings.app_env,
            "content_store_provider": settings.content_store.provider,
        },
    )
    yield
    await app.state.content_store.aclose()
    logger.info("app.shutdown")


def create_app(
    *,
    content_store: AbstractContentStore | None = None,
    contact_limiter: AbstractRateLimiter | None = None,
    page_cache: PageCache | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        content_store: Store to use instead of the configured provider.
        contact_limiter: Limiter to use instead of one built from settings.
        page_cache: Page cache to use instead of one built from settings.

    Returns:
        Configured FastAPI app with state, middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Coaching Site API",
        description=(
            "Backend for a coaching and consulting marketing site: published "
            "columns with tolerant slug lookup, a rate-limited contact form, "
            "admin CRUD for posts and categories, and cache revalidation."
        ),
        version="0.1.0",
        lifespan=_lifespan,
    )

    # Process-wide state
    app.state.content_store = content_store or create_content_store()
    app.state.contact_limiter = contact_limiter or build_contact_limiter()
    app.state.page_cache = page_cache or PageCache(
        ttl_seconds=settings.app.page_cache_ttl_seconds,
        max_entries=settings.app.page_cache_max_entries,
    )

    # Middleware (last registered runs first)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(blog_router)
    app.include_router(contact_router)
    app.include_router(system_router)
    app.include_router(admin_router)

    apply_openapi_customizations(app)

    return app
