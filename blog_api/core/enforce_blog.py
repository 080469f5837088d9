"""Blog Content Enforcement — field constraints and tag-name normalization.

Invariants:
    - validate_* are PURE: they return every violation found, never the first only
    - An empty violation list means the input is acceptable
    - Tag names are trimmed and lower-cased; duplicates collapse, first occurrence wins
    - FIELD_BOUNDS is the single source of truth for length limits
"""

from dataclasses import replace

from blog_api.core.domain_types import BlogDraft, BlogPatch
from blog_api.core.errors import FieldViolation


FIELD_BOUNDS: dict[str, tuple[int, int]] = {
    "title": (3, 255),
    "description": (3, 500),
    "content": (3, 3000),
    "category": (3, 100),
}
TAG_NAME_MAX_LENGTH: int = 50
MIN_TAGS: int = 1


def normalize_tag_names(names: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for name in names:
        key = name.strip().lower()
        if key:
            seen.setdefault(key, None)
    return list(seen)


def clean_draft(draft: BlogDraft) -> BlogDraft:
    """Strip surrounding whitespace from text fields and normalize tags."""
    return BlogDraft(
        title=draft.title.strip(),
        description=draft.description.strip(),
        content=draft.content.strip(),
        category=draft.category.strip(),
        tags=normalize_tag_names(draft.tags),
    )


def clean_patch(patch: BlogPatch) -> BlogPatch:
    return replace(
        patch,
        **{k: v.strip() for k, v in patch.scalar_changes().items()},
        tags=normalize_tag_names(patch.tags) if patch.tags is not None else None,
    )


def _check_length(name: str, value: str) -> FieldViolation | None:
    low, high = FIELD_BOUNDS[name]
    if len(value) < low:
        return FieldViolation(name, f"must be at least {low} characters")
    if len(value) > high:
        return FieldViolation(name, f"must be at most {high} characters")
    return None


def _check_tags(raw: list[str]) -> list[FieldViolation]:
    violations = []
    too_long = [t for t in raw if len(t.strip()) > TAG_NAME_MAX_LENGTH]
    if too_long:
        violations.append(FieldViolation(
            "tags", f"tag names must be at most {TAG_NAME_MAX_LENGTH} characters",
        ))
    if len(normalize_tag_names(raw)) < MIN_TAGS:
        violations.append(FieldViolation("tags", "at least one tag is required"))
    return violations


def validate_blog_draft(draft: BlogDraft) -> list[FieldViolation]:
    violations = []
    for name in FIELD_BOUNDS:
        v = _check_length(name, getattr(draft, name).strip())
        if v:
            violations.append(v)
    violations.extend(_check_tags(draft.tags))
    return violations


def validate_blog_patch(patch: BlogPatch) -> list[FieldViolation]:
    """Only fields present in the patch are checked."""
    if not patch.scalar_changes() and patch.tags is None:
        return [FieldViolation("body", "at least one field must be provided")]
    violations = []
    for name, value in patch.scalar_changes().items():
        v = _check_length(name, value.strip())
        if v:
            violations.append(v)
    if patch.tags is not None:
        violations.extend(_check_tags(patch.tags))
    return violations
