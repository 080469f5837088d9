"""Blog Routes — authenticated CRUD over the caller's blogs.

Invariants:
    - Every route requires a valid session cookie (get_current_user_id)
    - Owner is ALWAYS the authenticated user; request bodies never carry user_id
    - Wrong owner and missing blog are indistinguishable (404)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from blog_api.api.dependencies import get_blog_repository, get_current_user_id
from blog_api.core.domain_types import BlogId, UserId
from blog_api.schemas.account import MessageResponse
from blog_api.schemas.blog import (
    BlogCreate, BlogListResponse, BlogResponse, BlogUpdate,
)
from blog_api.services.blog_repository import SqlBlogRepository

router = APIRouter(prefix="/api/v1/blogs", tags=["blogs"])


@router.post(
    "", response_model=BlogResponse, status_code=status.HTTP_201_CREATED,
)
async def create_blog(
    body: BlogCreate,
    user_id: UserId = Depends(get_current_user_id),
    blogs: SqlBlogRepository = Depends(get_blog_repository),
):
    blog = await blogs.create(user_id, body.to_draft())
    return BlogResponse.model_validate(blog)


@router.get("", response_model=BlogListResponse)
async def list_blogs(
    term: str | None = Query(None, max_length=100),
    user_id: UserId = Depends(get_current_user_id),
    blogs: SqlBlogRepository = Depends(get_blog_repository),
):
    """Caller's visible blogs, optionally filtered by a search term."""
    found = await blogs.list_by_owner(user_id, term)
    return BlogListResponse(
        blogs=[BlogResponse.model_validate(b) for b in found],
        count=len(found),
    )


@router.get("/{blog_id}", response_model=BlogResponse)
async def get_blog(
    blog_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    blogs: SqlBlogRepository = Depends(get_blog_repository),
):
    blog = await blogs.get_by_id(BlogId(blog_id))
    return BlogResponse.model_validate(blog)


@router.patch("/{blog_id}", response_model=MessageResponse)
async def update_blog(
    blog_id: UUID,
    body: BlogUpdate,
    user_id: UserId = Depends(get_current_user_id),
    blogs: SqlBlogRepository = Depends(get_blog_repository),
):
    await blogs.update(user_id, BlogId(blog_id), body.to_patch())
    return MessageResponse(message="Blog updated")


@router.delete("/soft/{blog_id}", response_model=MessageResponse)
async def soft_delete_blog(
    blog_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    blogs: SqlBlogRepository = Depends(get_blog_repository),
):
    await blogs.soft_delete(user_id, BlogId(blog_id))
    return MessageResponse(message="Blog moved to trash")


@router.delete("/delete/{blog_id}", response_model=MessageResponse)
async def hard_delete_blog(
    blog_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    blogs: SqlBlogRepository = Depends(get_blog_repository),
):
    await blogs.hard_delete(user_id, BlogId(blog_id))
    return MessageResponse(message="Blog permanently deleted")
