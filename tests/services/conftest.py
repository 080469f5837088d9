"""Service test fixtures — async DB, fake collaborators and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db, get_clock, get_mail_sender and get_credential_hasher are overridden
      for route tests; services get the same fakes by constructor
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency; tag get-or-create uses the
      sqlite ON CONFLICT insert
    - base_url is https so the Secure session cookie round-trips through httpx
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import blog_api.infrastructure.database as db_module
from blog_api.api.dependencies import (
    get_clock, get_credential_hasher, get_mail_sender,
)
from blog_api.config import get_settings
from blog_api.core.auth_config import AuthConfig
from blog_api.core.credential_hasher import CredentialHasher
from blog_api.core.errors import DeliveryError
from blog_api.core.session_token import SessionTokenService
from blog_api.db.base import Base
from blog_api.infrastructure.database import DatabaseSessionManager, get_db
from blog_api.main import app
from blog_api.models.user import User
from blog_api.services.account_lifecycle import AccountLifecycle
from blog_api.services.blog_repository import SqlBlogRepository
from blog_api.services.user_store import SqlUserStore

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable "now" shared by services, tokens and routes."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


class FakeMailSender:
    """Records every verification mail; fails on demand."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, otp_code: str, to_email: str, display_name: str) -> None:
        if self.fail:
            raise DeliveryError("smtp unreachable")
        self.sent.append(
            {"otp": otp_code, "to": to_email, "display_name": display_name},
        )

    @property
    def last_code(self) -> str:
        return self.sent[-1]["otp"]


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mail():
    return FakeMailSender()


@pytest.fixture
def hasher():
    return CredentialHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def auth_config():
    return AuthConfig(jwt_secret=get_settings().jwt_secret)


@pytest.fixture
def tokens(auth_config, clock):
    return SessionTokenService(auth_config, clock)


@pytest.fixture
def make_lifecycle(test_db, mail, hasher, clock):
    """Build an AccountLifecycle, optionally under non-default policies."""
    def _make(**policy) -> AccountLifecycle:
        config = AuthConfig(jwt_secret=get_settings().jwt_secret, **policy)
        return AccountLifecycle(
            SqlUserStore(test_db), mail, hasher,
            SessionTokenService(config, clock), config, clock,
        )
    return _make


@pytest.fixture
def lifecycle(make_lifecycle):
    return make_lifecycle()


@pytest.fixture
def blog_repo(test_db, clock):
    return SqlBlogRepository(test_db, clock)


@pytest.fixture
def make_user(test_db, hasher):
    """Insert a user row directly (bypassing registration)."""
    async def _make(email: str = "ada@example.com", verified: bool = True) -> User:
        user = User(
            first_name="Ada",
            last_name="Lovelace",
            email=email,
            password_hash=hasher.hash("correct-horse"),
            avatar_url="",
            verified=verified,
        )
        test_db.add(user)
        await test_db.commit()
        return user
    return _make


@pytest.fixture
async def client(test_engine, test_session_factory, clock, mail, hasher):
    """FastAPI test client with DB, clock, mail and hasher overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_mail_sender] = lambda: mail
    app.dependency_overrides[get_credential_hasher] = lambda: hasher

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="https://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def auth_headers(tokens):
    """Cookie header carrying a session token for the given user."""
    def _headers(user: User) -> dict:
        return {"Cookie": f"{get_settings().session_cookie_name}={tokens.issue(user.id)}"}
    return _headers
