"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId and BlogId wrap UUIDs — never use bare UUID in domain logic
    - Account states encoded as Enums — no raw string matching
    - Clock is the only source of "now" in core; shell injects it

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import NewType, Protocol
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
BlogId = NewType("BlogId", UUID)


# ─── Time ────────────────────────────────────────────────────────

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ─── Enums ───────────────────────────────────────────────────────

class AccountState(str, Enum):
    """Account lifecycle: Unregistered -> PendingVerification -> Verified."""
    UNREGISTERED = "unregistered"
    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"


class OtpStatus(str, Enum):
    """Sub-condition of PendingVerification."""
    ACTIVE = "active"
    EXPIRED = "expired"


# ─── Structural contracts ───────────────────────────────────────

class OtpHolder(Protocol):
    """Anything carrying the verification fields of a User (ORM row or test double)."""
    verified: bool
    otp: str | None
    otp_expires_at: datetime | None


@dataclass(frozen=True)
class BlogDraft:
    """Blog content as submitted for creation."""
    title: str
    description: str
    content: str
    category: str
    tags: list[str]


@dataclass(frozen=True)
class BlogPatch:
    """Partial blog update. None means "leave unchanged"."""
    title: str | None = None
    description: str | None = None
    content: str | None = None
    category: str | None = None
    tags: list[str] | None = None

    def scalar_changes(self) -> dict[str, str]:
        """Column values to write, excluding tags."""
        values = {
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "category": self.category,
        }
        return {k: v for k, v in values.items() if v is not None}
