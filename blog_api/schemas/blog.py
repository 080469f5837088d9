"""Blog Schemas — request/response models for the blog endpoints.

Invariants:
    - Request models check SHAPE only (types, presence); length bounds are enforced
      by core/enforce_blog.py so one response lists every violated field
    - BlogUpdate: every field optional; None means "leave unchanged"
    - BlogResponse.tags is the list of tag names, never tag ids
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from blog_api.core.domain_types import BlogDraft, BlogPatch


class BlogCreate(BaseModel):
    title: str
    description: str
    content: str
    category: str
    tags: list[str]

    def to_draft(self) -> BlogDraft:
        return BlogDraft(
            title=self.title,
            description=self.description,
            content=self.content,
            category=self.category,
            tags=list(self.tags),
        )


class BlogUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    content: str | None = None
    category: str | None = None
    tags: list[str] | None = None

    def to_patch(self) -> BlogPatch:
        return BlogPatch(
            title=self.title,
            description=self.description,
            content=self.content,
            category=self.category,
            tags=list(self.tags) if self.tags is not None else None,
        )


class BlogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    content: str
    category: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def tag_names(cls, v):
        return [t if isinstance(t, str) else t.name for t in v]


class BlogListResponse(BaseModel):
    blogs: list[BlogResponse]
    count: int
