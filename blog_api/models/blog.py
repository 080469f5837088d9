"""Blog ORM — owned post with tags and a soft-delete marker.

Invariants:
    - user_id is required and never changes after creation
    - deleted_at IS NULL means visible; every non-"hard" query filters on it
    - tags is a set by identity (blog_tags composite primary key)

Design Decisions:
    - tags loaded with selectin: async sessions cannot lazy-load on attribute access
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_api.db.base import Base
from blog_api.models.tag import blog_tags


class Blog(Base):
    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )

    owner: Mapped["User"] = relationship("User", back_populates="blogs")
    tags: Mapped[list["Tag"]] = relationship(
        "Tag", secondary=blog_tags, back_populates="blogs", lazy="selectin",
    )
