"""Account State — resolves where a user sits in the verification state machine.

States: Unregistered -> PendingVerification(OtpActive | OtpExpired) -> Verified.

Invariants:
    - Pure: no IO; `user is None` means Unregistered
    - Verified is terminal; OTP sub-status (otp.otp_status) only matters while pending
"""

from blog_api.core.domain_types import AccountState, OtpHolder


def resolve_account_state(user: OtpHolder | None) -> AccountState:
    if user is None:
        return AccountState.UNREGISTERED
    if user.verified:
        return AccountState.VERIFIED
    return AccountState.PENDING_VERIFICATION
