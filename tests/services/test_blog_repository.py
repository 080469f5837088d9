"""Blog Repository — ownership scoping, tags and soft/hard delete against a real DB session.

Tests cover:
    - create resolves tags idempotently (three distinct names -> three rows total)
    - validation reports every violated field; unknown owner is NotFound
    - list/get exclude soft-deleted rows; list is owner-scoped and searchable
    - update/soft_delete/hard_delete match id AND owner; zero rows -> NotFound
    - hard_delete works on soft-deleted rows and removes tag links, not tags
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from blog_api.core.domain_types import BlogDraft, BlogPatch, as_utc
from blog_api.core.errors import ResourceNotFoundError, ValidationError
from blog_api.models.blog import Blog
from blog_api.models.tag import Tag, blog_tags


def _draft(**overrides):
    fields = dict(
        title="Async SQLAlchemy",
        description="Notes on sessions and pools",
        content="Use expire_on_commit=False with async sessions.",
        category="Databases",
        tags=["python", "sqlalchemy"],
    )
    fields.update(overrides)
    return BlogDraft(**fields)


def _names(blog):
    return {t.name for t in blog.tags}


@pytest.fixture
async def owner(make_user):
    return await make_user("owner@example.com")


@pytest.fixture
async def stranger(make_user):
    return await make_user("stranger@example.com")


# ─── create ─────────────────────────────────────────────────────

async def test_create_persists_blog_with_tags(blog_repo, owner, clock):
    blog = await blog_repo.create(owner.id, _draft())
    assert blog.user_id == owner.id
    assert _names(blog) == {"python", "sqlalchemy"}
    assert as_utc(blog.created_at) == clock.now
    assert blog.deleted_at is None


async def test_tags_are_shared_between_blogs(blog_repo, owner, test_db):
    await blog_repo.create(owner.id, _draft(tags=["python", "async"]))
    await blog_repo.create(owner.id, _draft(tags=["Python", "databases"]))
    assert await test_db.scalar(select(func.count()).select_from(Tag)) == 3


async def test_overlapping_tags_resolve_to_one_row(blog_repo, owner, test_db):
    first = await blog_repo.create(owner.id, _draft(tags=["go", "web"]))
    second = await blog_repo.create(owner.id, _draft(tags=["go", "cli"]))

    names = (await test_db.scalars(select(Tag.name))).all()
    assert sorted(names) == ["cli", "go", "web"]
    go_first = next(t for t in first.tags if t.name == "go")
    go_second = next(t for t in second.tags if t.name == "go")
    assert go_first.id == go_second.id


async def test_create_normalizes_text_and_tags(blog_repo, owner):
    blog = await blog_repo.create(
        owner.id, _draft(title="  Padded title  ", tags=["A", "a", " B "]),
    )
    assert blog.title == "Padded title"
    assert _names(blog) == {"a", "b"}


async def test_create_reports_every_violation(blog_repo, owner):
    with pytest.raises(ValidationError) as exc_info:
        await blog_repo.create(owner.id, _draft(title="x", category="", tags=[]))
    assert {v.field for v in exc_info.value.violations} == {
        "title", "category", "tags",
    }


async def test_create_for_unknown_owner_not_found(blog_repo):
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.create(uuid4(), _draft())


# ─── get_by_id / list_by_owner ──────────────────────────────────

async def test_get_by_id_returns_visible_blog(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    assert (await blog_repo.get_by_id(blog.id)).id == blog.id


async def test_get_by_id_unknown_not_found(blog_repo):
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.get_by_id(uuid4())


async def test_get_by_id_hides_soft_deleted(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.soft_delete(owner.id, blog.id)
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.get_by_id(blog.id)


async def test_list_is_owner_scoped(blog_repo, owner, stranger):
    mine = await blog_repo.create(owner.id, _draft())
    await blog_repo.create(stranger.id, _draft())
    assert [b.id for b in await blog_repo.list_by_owner(owner.id)] == [mine.id]


async def test_list_without_blogs_is_empty(blog_repo, owner):
    assert list(await blog_repo.list_by_owner(owner.id)) == []


async def test_list_excludes_soft_deleted(blog_repo, owner):
    kept = await blog_repo.create(owner.id, _draft())
    trashed = await blog_repo.create(owner.id, _draft(title="Old post"))
    await blog_repo.soft_delete(owner.id, trashed.id)
    assert [b.id for b in await blog_repo.list_by_owner(owner.id)] == [kept.id]


@pytest.mark.parametrize("term", ["async", "SESSIONS", "databases", "  sqlalchemy "])
async def test_search_matches_title_description_category(blog_repo, owner, term):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.create(owner.id, _draft(
        title="Gardening", description="Tomatoes all summer", category="Outdoors",
    ))
    found = await blog_repo.list_by_owner(owner.id, term)
    assert [b.id for b in found] == [blog.id]


async def test_search_without_match_is_empty(blog_repo, owner):
    await blog_repo.create(owner.id, _draft())
    assert list(await blog_repo.list_by_owner(owner.id, "kubernetes")) == []


async def test_search_treats_wildcards_literally(blog_repo, owner):
    await blog_repo.create(owner.id, _draft())
    assert list(await blog_repo.list_by_owner(owner.id, "%")) == []
    assert list(await blog_repo.list_by_owner(owner.id, "_")) == []


async def test_blank_search_lists_everything(blog_repo, owner):
    await blog_repo.create(owner.id, _draft())
    await blog_repo.create(owner.id, _draft(title="Second post"))
    assert len(await blog_repo.list_by_owner(owner.id, "   ")) == 2


# ─── update ─────────────────────────────────────────────────────

async def test_update_changes_only_given_fields(blog_repo, owner, clock):
    blog = await blog_repo.create(owner.id, _draft())
    clock.advance(minutes=5)
    await blog_repo.update(owner.id, blog.id, BlogPatch(title="Renamed post"))

    updated = await blog_repo.get_by_id(blog.id)
    assert updated.title == "Renamed post"
    assert updated.category == "Databases"
    assert _names(updated) == {"python", "sqlalchemy"}
    assert as_utc(updated.updated_at) == clock.now


async def test_update_replaces_tags(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.update(owner.id, blog.id, BlogPatch(tags=["Rust", "wasm"]))
    assert _names(await blog_repo.get_by_id(blog.id)) == {"rust", "wasm"}


async def test_update_by_other_user_not_found(blog_repo, owner, stranger):
    blog = await blog_repo.create(owner.id, _draft())
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.update(stranger.id, blog.id, BlogPatch(title="Hijacked"))
    assert (await blog_repo.get_by_id(blog.id)).title == "Async SQLAlchemy"


async def test_update_soft_deleted_not_found(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.soft_delete(owner.id, blog.id)
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.update(owner.id, blog.id, BlogPatch(title="Revived"))


async def test_empty_update_is_validation_error(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    with pytest.raises(ValidationError):
        await blog_repo.update(owner.id, blog.id, BlogPatch())


async def test_update_reports_invalid_fields(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    with pytest.raises(ValidationError) as exc_info:
        await blog_repo.update(owner.id, blog.id, BlogPatch(title="x", tags=[]))
    assert {v.field for v in exc_info.value.violations} == {"title", "tags"}


# ─── soft_delete / hard_delete ──────────────────────────────────

async def test_soft_delete_twice_not_found(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.soft_delete(owner.id, blog.id)
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.soft_delete(owner.id, blog.id)


async def test_soft_delete_by_other_user_not_found(blog_repo, owner, stranger):
    blog = await blog_repo.create(owner.id, _draft())
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.soft_delete(stranger.id, blog.id)
    assert (await blog_repo.get_by_id(blog.id)).id == blog.id


async def test_soft_delete_keeps_row(blog_repo, owner, test_db, clock):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.soft_delete(owner.id, blog.id)
    stored = await test_db.scalar(select(Blog).where(Blog.id == blog.id))
    assert as_utc(stored.deleted_at) == clock.now


async def test_hard_delete_after_soft_delete(blog_repo, owner, test_db):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.soft_delete(owner.id, blog.id)
    await blog_repo.hard_delete(owner.id, blog.id)

    assert await test_db.scalar(select(Blog).where(Blog.id == blog.id)) is None
    links = await test_db.scalar(
        select(func.count()).select_from(blog_tags)
        .where(blog_tags.c.blog_id == blog.id),
    )
    assert links == 0
    assert await test_db.scalar(select(func.count()).select_from(Tag)) == 2


async def test_hard_delete_by_other_user_not_found(blog_repo, owner, stranger):
    blog = await blog_repo.create(owner.id, _draft())
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.hard_delete(stranger.id, blog.id)
    assert _names(await blog_repo.get_by_id(blog.id)) == {"python", "sqlalchemy"}


async def test_hard_delete_twice_not_found(blog_repo, owner):
    blog = await blog_repo.create(owner.id, _draft())
    await blog_repo.hard_delete(owner.id, blog.id)
    with pytest.raises(ResourceNotFoundError):
        await blog_repo.hard_delete(owner.id, blog.id)
