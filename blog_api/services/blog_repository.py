"""Blog Repository — ownership-scoped CRUD with tag resolution and soft/hard delete.

Invariants:
    - Every read/update/soft-delete filters deleted_at IS NULL; only hard_delete bypasses it
    - update/soft_delete/hard_delete match on BOTH id and owner; zero affected rows
      raises ResourceNotFoundError (wrong owner, wrong id, already deleted look the same)
    - user_id is set once at create() and never written again
    - create()/update() validate first and report every violated field at once
    - get_by_id is not owner-scoped: any authenticated caller may read a visible blog
    - list_by_owner returns [] when nothing matches; search is a case-insensitive
      substring match over title, description and category
"""

import logging
from collections.abc import Sequence

from sqlalchemy import ColumnElement, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.domain_types import (
    BlogDraft, BlogId, BlogPatch, Clock, UserId, utc_now,
)
from blog_api.core.enforce_blog import (
    clean_draft, clean_patch, validate_blog_draft, validate_blog_patch,
)
from blog_api.core.errors import ResourceNotFoundError, ValidationError
from blog_api.models.blog import Blog
from blog_api.models.tag import blog_tags
from blog_api.models.user import User
from blog_api.services.tag_resolver import resolve_tags

logger = logging.getLogger(__name__)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _visible() -> ColumnElement[bool]:
    return Blog.deleted_at.is_(None)


def _owned(owner_id: UserId, blog_id: BlogId) -> ColumnElement[bool]:
    return (Blog.id == blog_id) & (Blog.user_id == owner_id)


class SqlBlogRepository:
    """Blog persistence bound to one request's session."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self._clock = clock

    async def create(self, owner_id: UserId, draft: BlogDraft) -> Blog:
        violations = validate_blog_draft(draft)
        if violations:
            raise ValidationError(violations)
        draft = clean_draft(draft)

        if await self.db.get(User, owner_id) is None:
            raise ResourceNotFoundError("User", str(owner_id))

        tags = await resolve_tags(self.db, draft.tags)
        now = self._clock()
        blog = Blog(
            user_id=owner_id,
            title=draft.title,
            description=draft.description,
            content=draft.content,
            category=draft.category,
            tags=tags,
            created_at=now,
            updated_at=now,
        )
        self.db.add(blog)
        await self.db.commit()
        logger.info(
            "Blog created", extra={"user_id": owner_id, "blog_id": blog.id},
        )
        return blog

    async def get_by_id(self, blog_id: BlogId) -> Blog:
        result = await self.db.execute(
            select(Blog).where(Blog.id == blog_id, _visible()),
        )
        blog = result.scalar_one_or_none()
        if blog is None:
            raise ResourceNotFoundError("Blog", str(blog_id))
        return blog

    async def list_by_owner(
        self, owner_id: UserId, search_term: str | None = None,
    ) -> Sequence[Blog]:
        query = select(Blog).where(Blog.user_id == owner_id, _visible())
        term = (search_term or "").strip()
        if term:
            pattern = _like_pattern(term)
            query = query.where(or_(
                Blog.title.ilike(pattern, escape="\\"),
                Blog.description.ilike(pattern, escape="\\"),
                Blog.category.ilike(pattern, escape="\\"),
            ))
        query = query.order_by(Blog.created_at.desc())
        result = await self.db.execute(query)
        return result.scalars().all()

    async def update(
        self, owner_id: UserId, blog_id: BlogId, patch: BlogPatch,
    ) -> None:
        violations = validate_blog_patch(patch)
        if violations:
            raise ValidationError(violations)
        patch = clean_patch(patch)

        result = await self.db.execute(
            update(Blog)
            .where(_owned(owner_id, blog_id), _visible())
            .values(**patch.scalar_changes(), updated_at=self._clock()),
        )
        if result.rowcount == 0:
            raise ResourceNotFoundError("Blog", str(blog_id))

        if patch.tags is not None:
            blog = await self.db.scalar(select(Blog).where(Blog.id == blog_id))
            blog.tags = await resolve_tags(self.db, patch.tags)

        await self.db.commit()
        logger.info(
            "Blog updated", extra={"user_id": owner_id, "blog_id": blog_id},
        )

    async def soft_delete(self, owner_id: UserId, blog_id: BlogId) -> None:
        result = await self.db.execute(
            update(Blog)
            .where(_owned(owner_id, blog_id), _visible())
            .values(deleted_at=self._clock()),
        )
        if result.rowcount == 0:
            raise ResourceNotFoundError("Blog", str(blog_id))
        await self.db.commit()
        logger.info(
            "Blog soft-deleted", extra={"user_id": owner_id, "blog_id": blog_id},
        )

    async def hard_delete(self, owner_id: UserId, blog_id: BlogId) -> None:
        """Remove the row permanently, whether or not it was soft-deleted."""
        owned_ids = select(Blog.id).where(_owned(owner_id, blog_id))
        await self.db.execute(
            delete(blog_tags).where(blog_tags.c.blog_id.in_(owned_ids)),
        )
        result = await self.db.execute(
            delete(Blog).where(_owned(owner_id, blog_id)),
        )
        if result.rowcount == 0:
            raise ResourceNotFoundError("Blog", str(blog_id))
        await self.db.commit()
        logger.info(
            "Blog permanently deleted",
            extra={"user_id": owner_id, "blog_id": blog_id},
        )
