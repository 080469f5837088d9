"""OTP Lifecycle — issuance, validation and resend throttling of e-mail verification codes.

Invariants:
    - Codes are exactly OTP_LENGTH decimal digits, zero-padded, uniform over 0..10^6-1
    - validate_otp is true iff code matches AND now < expiry AND user unverified;
      it never raises
    - A new code may not be issued while the previous one is unexpired
      (resend_wait_seconds > 0)
    - All functions are pure: "now" is always passed in
"""

import hmac
import math
import secrets
from datetime import datetime, timedelta

from blog_api.core.domain_types import OtpHolder, OtpStatus, as_utc


OTP_LENGTH: int = 6
DEFAULT_OTP_TTL_SECONDS: int = 300


def generate_otp() -> str:
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def issue_otp(now: datetime, ttl_seconds: int = DEFAULT_OTP_TTL_SECONDS) -> tuple[str, datetime]:
    """New code plus its expiry timestamp."""
    return generate_otp(), as_utc(now) + timedelta(seconds=ttl_seconds)


def otp_status(user: OtpHolder, now: datetime) -> OtpStatus:
    if not user.otp or user.otp_expires_at is None:
        return OtpStatus.EXPIRED
    if as_utc(now) < as_utc(user.otp_expires_at):
        return OtpStatus.ACTIVE
    return OtpStatus.EXPIRED


def validate_otp(submitted_code: str, user: OtpHolder, now: datetime) -> bool:
    if user.verified or not user.otp or not submitted_code:
        return False
    if otp_status(user, now) is not OtpStatus.ACTIVE:
        return False
    return hmac.compare_digest(submitted_code.encode(), user.otp.encode())


def resend_wait_seconds(user: OtpHolder, now: datetime) -> int:
    """Seconds until a new code may be issued; 0 when issuance is allowed."""
    if otp_status(user, now) is not OtpStatus.ACTIVE:
        return 0
    remaining = (as_utc(user.otp_expires_at) - as_utc(now)).total_seconds()
    return max(1, math.ceil(remaining))
