"""Account Schemas — request/response models for registration, verification and login.

Invariants:
    - RegisterRequest.first_name: 3-30 chars; last_name: at most 30 chars (may be empty);
      avatar_url required
    - password: 8-128 chars, never echoed back in any response
    - e-mail addresses validated by EmailStr (email-validator)
    - otp: exactly six decimal digits

Design Decisions:
    - Text is stripped in a "before" validator so length bounds apply to trimmed input
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """New account — profile, credentials and avatar."""
    first_name: str = Field(min_length=3, max_length=30)
    last_name: str = Field("", max_length=30)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    avatar_url: str = Field(min_length=1, max_length=2048)

    @field_validator("first_name", "last_name", "avatar_url", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class VerifyRequest(BaseModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{6}$")


class ResendCodeRequest(BaseModel):
    email: EmailStr


class UserResponse(BaseModel):
    """Public account data — no hash, no OTP."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    avatar_url: str
    verified: bool


class MessageResponse(BaseModel):
    message: str


class AuthResponse(BaseModel):
    """Login/registration outcome with the account it concerns."""
    message: str
    user: UserResponse
