"""Request-scoped accessors for the objects the app factory puts on ``app.state``."""

from __future__ import annotations

from fastapi import Request

from app.adapters.content_store.base import AbstractContentStore
from app.services.admin_service import AdminService
from app.services.blog_service import BlogService
from app.services.contact_service import ContactService
from app.services.page_cache import PageCache


def get_content_store(request: Request) -> AbstractContentStore:
    return request.app.state.content_store


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


def get_blog_service(request: Request) -> BlogService:
    return BlogService(store=get_content_store(request), page_cache=get_page_cache(request))


def get_admin_service(request: Request) -> AdminService:
    return AdminService(store=get_content_store(request), page_cache=get_page_cache(request))


def get_contact_service() -> ContactService:
    return ContactService()
