from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_admin_service
from app.core.auth import verify_admin_api_key
from app.schemas.content import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    ContentIssue,
    DeleteResponse,
    Post,
    PostCreate,
    PostListResponse,
    PostUpdate,
)
from app.services.admin_service import AdminService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(verify_admin_api_key)],
)

AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]


@router.get("/posts", response_model=PostListResponse)
async def list_posts(
    service: AdminServiceDep,
    page: int = Query(1, ge=1),
    status: Literal["all", "published", "draft"] = Query("all"),
    search: str | None = Query(None, description="Title substring, case-insensitive."),
) -> PostListResponse:
    return await service.list_posts(page=page, status=status, search=search)


@router.post("/posts", response_model=Post, status_code=201)
async def create_post(data: PostCreate, service: AdminServiceDep) -> Post:
    """Create a post. The stored slug always gets a fresh id suffix."""
    return await service.create_post(data)


@router.get("/posts/{post_id}", response_model=Post)
async def get_post(post_id: str, service: AdminServiceDep) -> Post:
    return await service.get_post(post_id)


@router.put("/posts/{post_id}", response_model=Post)
async def update_post(post_id: str, data: PostUpdate, service: AdminServiceDep) -> Post:
    """Partial update; omitted fields are left unchanged."""
    return await service.update_post(post_id, data)


@router.delete("/posts/{post_id}", response_model=DeleteResponse)
async def delete_post(post_id: str, service: AdminServiceDep) -> DeleteResponse:
    await service.delete_post(post_id)
    return DeleteResponse(id=post_id)


@router.get("/posts/{post_id}/content-issues", response_model=list[ContentIssue])
async def post_content_issues(post_id: str, service: AdminServiceDep) -> list[ContentIssue]:
    """Invalid image URLs and empty links in the post body."""
    return await service.content_issues(post_id)


@router.get("/categories", response_model=list[Category])
async def list_categories(service: AdminServiceDep) -> list[Category]:
    return await service.list_categories()


@router.post("/categories", response_model=Category, status_code=201)
async def create_category(data: CategoryCreate, service: AdminServiceDep) -> Category:
    return await service.create_category(data)


@router.put("/categories/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    service: AdminServiceDep,
) -> Category:
    return await service.update_category(category_id, data)


@router.delete("/categories/{category_id}", response_model=DeleteResponse)
async def delete_category(category_id: str, service: AdminServiceDep) -> DeleteResponse:
    """Delete a category. Its posts are kept and lose their category."""
    await service.delete_category(category_id)
    return DeleteResponse(id=category_id)
