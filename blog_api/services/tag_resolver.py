"""Tag Resolution — idempotent get-or-create of tags by unique name.

Invariants:
    - Same name always maps to the same Tag row, never duplicated
    - Safe under concurrent creation: relies on the unique constraint on
      tags.name via INSERT ... ON CONFLICT DO NOTHING, then re-reads
    - Result preserves the caller's order and contains each name once

Design Decisions:
    - Dialect-specific insert (postgresql / sqlite): both support ON CONFLICT,
      so no savepoint or retry loop is needed
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core.enforce_blog import normalize_tag_names
from blog_api.models.tag import Tag

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    try:
        return _INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Tag resolution not supported on {dialect}")


async def resolve_tags(db: AsyncSession, names: list[str]) -> list[Tag]:
    """Get-or-create one Tag per distinct normalized name. Does not commit."""
    wanted = normalize_tag_names(names)
    if not wanted:
        return []

    insert = _insert_for(db)
    stmt = (
        insert(Tag)
        .values([{"id": uuid.uuid4(), "name": name} for name in wanted])
        .on_conflict_do_nothing(index_elements=["name"])
    )
    await db.execute(stmt)

    result = await db.execute(select(Tag).where(Tag.name.in_(wanted)))
    by_name = {tag.name: tag for tag in result.scalars().all()}
    return [by_name[name] for name in wanted]
