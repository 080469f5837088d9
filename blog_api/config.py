"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded for production)
    - get_settings() is cached (lru_cache) — single instance per process
    - Core never reads Settings; it receives the frozen AuthConfig from auth_config()

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blog_api.core.auth_config import AuthConfig


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://blog:blog@db:5432/blog"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Session tokens
    jwt_secret: str = "change-me-0123456789abcdef0123456789abcdef"
    session_ttl_seconds: int = 7 * 24 * 3600
    session_cookie_name: str = "token"
    session_cookie_secure: bool = True

    # Verification codes
    otp_ttl_seconds: int = 300

    # Account policies
    allow_pending_reregistration: bool = True
    require_verified_login: bool = False

    # Password hashing (Argon2id)
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 4

    # Mail (SMTP)
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = "noreply@example.com"
    smtp_password: str = ""
    smtp_from_name: str = "NAX Blogs"
    smtp_starttls: bool = True
    smtp_ssl_tls: bool = False
    mail_timeout_seconds: float = 10.0

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def auth_config(self) -> AuthConfig:
        return AuthConfig(
            jwt_secret=self.jwt_secret,
            session_ttl_seconds=self.session_ttl_seconds,
            otp_ttl_seconds=self.otp_ttl_seconds,
            allow_pending_reregistration=self.allow_pending_reregistration,
            require_verified_login=self.require_verified_login,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
