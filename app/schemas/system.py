"""Pydantic schemas for the revalidation and debug endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RevalidateResponse(BaseModel):
    revalidated: bool
    now: str = Field(..., description="ISO-8601 UTC timestamp of the revalidation.")
    path: str | None = None
    tag: str | None = None
    purged: int = Field(0, description="Number of cached responses dropped.")


class EnvironmentInfo(BaseModel):
    """Which settings are configured. Values are never echoed."""

    timestamp: str
    app_env: str
    content_store_provider: str
    content_store_url: str
    content_store_api_key: str
    revalidate_token: str


class DatabaseStatus(BaseModel):
    connected: bool = False
    message: str = ""
    posts_count: int = 0
    categories_count: int = 0


class DebugResponse(BaseModel):
    success: bool = True
    environment: EnvironmentInfo
    database: DatabaseStatus
