"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root for blogs; tags are shared across users

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from blog_api.models.user import User  # noqa: F401
from blog_api.models.tag import Tag, blog_tags  # noqa: F401
from blog_api.models.blog import Blog  # noqa: F401
