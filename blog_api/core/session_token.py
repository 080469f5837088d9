"""Session Tokens — stateless HS256 JWTs binding a user id to an expiry.

Invariants:
    - Claims are exactly {sub: str(user_id), iat: int, exp: int}
    - verify() checks signature and algorithm BEFORE expiry: a forged expired
      token reports BadSignature, not Expired
    - Expiry is judged against the injected clock, never the wall clock
    - Tokens are unrevocable before exp; logout only deletes the client cookie

Failure mapping:
    - wrong algorithm / bad signature       -> AuthError(BAD_SIGNATURE)
    - undecodable, missing or mistyped claim -> AuthError(MALFORMED)
    - now >= exp                             -> AuthError(EXPIRED)
"""

from datetime import timedelta
from uuid import UUID

import jwt

from blog_api.core.auth_config import AuthConfig
from blog_api.core.domain_types import Clock, UserId, as_utc, utc_now
from blog_api.core.errors import AuthError, AuthFailure

ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _is_timestamp(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SessionTokenService:
    """Issues and verifies session tokens with a process-wide signing key."""

    def __init__(self, config: AuthConfig, clock: Clock = utc_now):
        self._secret = config.jwt_secret
        self._ttl = timedelta(seconds=config.session_ttl_seconds)
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, user_id: UserId) -> str:
        now = as_utc(self._clock())
        claims = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> UserId:
        claims = self._decode(token)

        exp = claims["exp"]
        if not (_is_timestamp(exp) and _is_timestamp(claims["iat"])):
            raise AuthError(AuthFailure.MALFORMED)
        if as_utc(self._clock()).timestamp() >= exp:
            raise AuthError(AuthFailure.EXPIRED)

        try:
            return UserId(UUID(claims["sub"]))
        except (TypeError, ValueError, AttributeError):
            raise AuthError(AuthFailure.MALFORMED)

    def _decode(self, token: str) -> dict:
        if not token:
            raise AuthError(AuthFailure.MALFORMED)
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": _REQUIRED_CLAIMS,
                    # exp/iat judged against the injected clock in verify()
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError):
            raise AuthError(AuthFailure.BAD_SIGNATURE)
        except jwt.InvalidTokenError:
            raise AuthError(AuthFailure.MALFORMED)
