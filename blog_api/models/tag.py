"""Tag ORM — globally unique label shared by many blogs.

Invariants:
    - name is unique (uq_tags_name); resolution relies on this constraint,
      not on in-process locking
    - names are stored normalized (trimmed, lower-case)
"""

import uuid

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_api.db.base import Base


blog_tags = Table(
    "blog_tags",
    Base.metadata,
    Column(
        "blog_id", UUID(as_uuid=True),
        ForeignKey("blogs.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "tag_id", UUID(as_uuid=True),
        ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    blogs: Mapped[list["Blog"]] = relationship(
        "Blog", secondary=blog_tags, back_populates="tags",
    )
