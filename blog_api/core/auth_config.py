"""Auth Configuration — immutable settings snapshot for token, OTP and account policies.

Invariants:
    - Frozen: built once from Settings at startup, shared read-only across requests
    - Core and services receive it by constructor, never read environment themselves
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthConfig:
    jwt_secret: str
    session_ttl_seconds: int = 7 * 24 * 3600
    otp_ttl_seconds: int = 300
    # PendingVerification e-mails may register again (profile replaced, OTP rotated)
    allow_pending_reregistration: bool = True
    require_verified_login: bool = False
