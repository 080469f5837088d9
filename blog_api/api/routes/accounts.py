"""Account Routes — registration, e-mail verification, login and logout.

Invariants:
    - login sets the session cookie (HttpOnly, Secure per settings, Max-Age = token TTL)
    - logout only deletes the client cookie; issued tokens stay valid until exp
    - Domain errors propagate to the global BlogApiError handler
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from blog_api.api.dependencies import get_account_lifecycle
from blog_api.config import Settings, get_settings
from blog_api.schemas.account import (
    AuthResponse, LoginRequest, MessageResponse, RegisterRequest,
    ResendCodeRequest, UserResponse, VerifyRequest,
)
from blog_api.services.account_lifecycle import AccountLifecycle

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["accounts"])


@router.post(
    "/register", response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    accounts: AccountLifecycle = Depends(get_account_lifecycle),
):
    """Create a pending account and e-mail its verification code."""
    user = await accounts.register(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password=body.password,
        avatar_url=body.avatar_url,
    )
    return AuthResponse(
        message="Verification code sent",
        user=UserResponse.model_validate(user),
    )


@router.post("/resend-code", response_model=MessageResponse)
async def resend_code(
    body: ResendCodeRequest,
    accounts: AccountLifecycle = Depends(get_account_lifecycle),
):
    await accounts.resend_code(body.email)
    return MessageResponse(message="Verification code sent")


@router.post("/verify", response_model=AuthResponse)
async def verify(
    body: VerifyRequest,
    accounts: AccountLifecycle = Depends(get_account_lifecycle),
):
    user = await accounts.verify(body.email, body.otp)
    return AuthResponse(
        message="Email verified", user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    accounts: AccountLifecycle = Depends(get_account_lifecycle),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and set the session cookie."""
    user, token = await accounts.login(body.email, body.password)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=accounts.tokens.ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return AuthResponse(
        message="Logged in", user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response, settings: Settings = Depends(get_settings),
):
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message="Logged out")
