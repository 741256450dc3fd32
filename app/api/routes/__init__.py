from __future__ import annotations

from app.api.routes.admin import router as admin_router
from app.api.routes.blog import router as blog_router
from app.api.routes.contact import router as contact_router
from app.api.routes.health import router as health_router
from app.api.routes.system import router as system_router

__all__ = [
    "admin_router",
    "blog_router",
    "contact_router",
    "health_router",
    "system_router",
]
