"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the pure functions in core that
      decide what to do are never async themselves
"""

from datetime import datetime
from typing import Protocol

from blog_api.core.domain_types import UserId


class UserLike(Protocol):
    """Structural contract for User rows handed to AccountLifecycle."""
    id: UserId
    email: str
    first_name: str
    last_name: str
    avatar_url: str
    password_hash: str
    verified: bool
    otp: str | None
    otp_expires_at: datetime | None

    @property
    def display_name(self) -> str: ...


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def get_by_email(self, email: str) -> UserLike | None: ...
    async def create(self, **fields: object) -> UserLike: ...
    async def save(self, user: UserLike) -> None: ...


class MailSender(Protocol):
    """Outbound verification mail. Raises DeliveryError on any failure."""
    async def send(self, otp_code: str, to_email: str, display_name: str) -> None: ...
