"""Account Lifecycle — registration, OTP verification, resend and login.

Invariants:
    - The user row (with its new OTP) is committed BEFORE the mail is sent;
      a DeliveryError propagates and the pending user remains
    - A fresh OTP is never issued while the previous one is still active (TooSoonError)
    - Verified accounts never regain an OTP; verify() clears otp and otp_expires_at
    - login() rehashes the password when the stored hash uses outdated cost parameters
    - Argon2 hash/verify run in a worker thread (asyncio.to_thread), off the event loop

Design Decisions:
    - Depends on the UserRepository/MailSender protocols, not on SQLAlchemy or SMTP
    - Both account policies come from AuthConfig, so tests flip them without env vars
"""

import asyncio
import logging
from datetime import datetime

from blog_api.core.account_state import resolve_account_state
from blog_api.core.auth_config import AuthConfig
from blog_api.core.credential_hasher import CredentialHasher
from blog_api.core.domain_types import AccountState, Clock, utc_now
from blog_api.core.errors import (
    AlreadyVerifiedError,
    ConflictError,
    InvalidCredentialsError,
    InvalidOtpError,
    ResourceNotFoundError,
    TooSoonError,
    UnverifiedAccountError,
)
from blog_api.core.otp import issue_otp, resend_wait_seconds, validate_otp
from blog_api.core.repository_protocols import MailSender, UserLike, UserRepository
from blog_api.core.session_token import SessionTokenService

logger = logging.getLogger(__name__)


class AccountLifecycle:
    """Drives a user through Unregistered -> PendingVerification -> Verified."""

    def __init__(
        self,
        users: UserRepository,
        mail: MailSender,
        hasher: CredentialHasher,
        tokens: SessionTokenService,
        config: AuthConfig,
        clock: Clock = utc_now,
    ):
        self.users = users
        self.mail = mail
        self.hasher = hasher
        self.tokens = tokens
        self.config = config
        self._clock = clock

    # ─── Registration ───────────────────────────────────────────

    async def register(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        avatar_url: str = "",
    ) -> UserLike:
        """Create a pending account (or resume one) and mail its verification code."""
        existing = await self.users.get_by_email(email)
        state = resolve_account_state(existing)
        now = self._clock()

        if state is AccountState.VERIFIED:
            raise ConflictError("An account with this email already exists")

        if state is AccountState.PENDING_VERIFICATION:
            if not self.config.allow_pending_reregistration:
                raise ConflictError(
                    "This email is awaiting verification; request a new code instead",
                )
            self._ensure_can_issue(existing, now)
            existing.first_name = first_name
            existing.last_name = last_name
            existing.avatar_url = avatar_url
            existing.password_hash = await asyncio.to_thread(self.hasher.hash, password)
            existing.otp, existing.otp_expires_at = issue_otp(
                now, self.config.otp_ttl_seconds,
            )
            await self.users.save(existing)
            user = existing
            logger.info("Pending registration resumed", extra={"user_id": user.id})
        else:
            otp, expires_at = issue_otp(now, self.config.otp_ttl_seconds)
            password_hash = await asyncio.to_thread(self.hasher.hash, password)
            user = await self.users.create(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password_hash=password_hash,
                avatar_url=avatar_url,
                verified=False,
                otp=otp,
                otp_expires_at=expires_at,
            )
            logger.info("User registered", extra={"user_id": user.id})

        await self._send_code(user)
        return user

    async def resend_code(self, email: str) -> None:
        user = await self._require_user(email)
        if user.verified:
            raise AlreadyVerifiedError()
        now = self._clock()
        self._ensure_can_issue(user, now)
        user.otp, user.otp_expires_at = issue_otp(now, self.config.otp_ttl_seconds)
        await self.users.save(user)
        logger.info("Verification code rotated", extra={"user_id": user.id})
        await self._send_code(user)

    # ─── Verification ───────────────────────────────────────────

    async def verify(self, email: str, otp: str) -> UserLike:
        user = await self._require_user(email)
        if user.verified:
            raise AlreadyVerifiedError()
        if not validate_otp(otp, user, self._clock()):
            logger.info("Rejected verification code", extra={"user_id": user.id})
            raise InvalidOtpError()
        user.verified = True
        user.otp = None
        user.otp_expires_at = None
        await self.users.save(user)
        logger.info("User verified", extra={"user_id": user.id})
        return user

    # ─── Login ──────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> tuple[UserLike, str]:
        """Check credentials and return the user with a fresh session token."""
        user = await self._require_user(email)
        if not await asyncio.to_thread(
            self.hasher.verify, user.password_hash, password,
        ):
            logger.info("Failed login", extra={"user_id": user.id})
            raise InvalidCredentialsError()
        if self.config.require_verified_login and not user.verified:
            raise UnverifiedAccountError()

        if self.hasher.needs_rehash(user.password_hash):
            user.password_hash = await asyncio.to_thread(self.hasher.hash, password)
            await self.users.save(user)
            logger.info("Password hash upgraded", extra={"user_id": user.id})

        token = self.tokens.issue(user.id)
        logger.info("User logged in", extra={"user_id": user.id})
        return user, token

    # ─── Helpers ────────────────────────────────────────────────

    async def _require_user(self, email: str) -> UserLike:
        user = await self.users.get_by_email(email)
        if user is None:
            raise ResourceNotFoundError("User", email)
        return user

    def _ensure_can_issue(self, user: UserLike, now: datetime) -> None:
        wait = resend_wait_seconds(user, now)
        if wait > 0:
            raise TooSoonError(wait)

    async def _send_code(self, user: UserLike) -> None:
        await self.mail.send(user.otp, user.email, user.display_name)
        logger.info("Verification code sent", extra={"user_id": user.id})
