"""Request Dependencies — wires settings, services and the session cookie into routes.

Invariants:
    - get_current_user_id is the ONLY place a session cookie is read and verified
    - Missing cookie -> AuthError(MISSING); rejected token -> AuthError from SessionTokenService
    - Process-wide collaborators (hasher, mail sender) are built once (lru_cache)

Design Decisions:
    - Every collaborator is its own dependency so tests swap one via
      app.dependency_overrides without touching the rest
"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.config import Settings, get_settings
from blog_api.core.auth_config import AuthConfig
from blog_api.core.credential_hasher import CredentialHasher
from blog_api.core.domain_types import Clock, UserId, utc_now
from blog_api.core.errors import AuthError, AuthFailure
from blog_api.core.repository_protocols import MailSender
from blog_api.core.session_token import SessionTokenService
from blog_api.infrastructure.database import get_db
from blog_api.infrastructure.mail_sender import SmtpMailSender
from blog_api.services.account_lifecycle import AccountLifecycle
from blog_api.services.blog_repository import SqlBlogRepository
from blog_api.services.user_store import SqlUserStore


def get_clock() -> Clock:
    return utc_now


def get_auth_config(settings: Settings = Depends(get_settings)) -> AuthConfig:
    return settings.auth_config()


def get_token_service(
    config: AuthConfig = Depends(get_auth_config),
    clock: Clock = Depends(get_clock),
) -> SessionTokenService:
    return SessionTokenService(config, clock)


@lru_cache
def _hasher(time_cost: int, memory_cost: int, parallelism: int) -> CredentialHasher:
    return CredentialHasher(time_cost, memory_cost, parallelism)


def get_credential_hasher(
    settings: Settings = Depends(get_settings),
) -> CredentialHasher:
    return _hasher(
        settings.argon2_time_cost,
        settings.argon2_memory_cost,
        settings.argon2_parallelism,
    )


@lru_cache
def _smtp_sender() -> SmtpMailSender:
    return SmtpMailSender(get_settings())


def get_mail_sender() -> MailSender:
    return _smtp_sender()


def get_current_user_id(
    request: Request,
    settings: Settings = Depends(get_settings),
    tokens: SessionTokenService = Depends(get_token_service),
) -> UserId:
    """Authenticated caller's id from the session cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise AuthError(AuthFailure.MISSING)
    return tokens.verify(token)


def get_account_lifecycle(
    db: AsyncSession = Depends(get_db),
    mail: MailSender = Depends(get_mail_sender),
    hasher: CredentialHasher = Depends(get_credential_hasher),
    tokens: SessionTokenService = Depends(get_token_service),
    config: AuthConfig = Depends(get_auth_config),
    clock: Clock = Depends(get_clock),
) -> AccountLifecycle:
    return AccountLifecycle(SqlUserStore(db), mail, hasher, tokens, config, clock)


def get_blog_repository(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SqlBlogRepository:
    return SqlBlogRepository(db, clock)
