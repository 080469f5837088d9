"""Error Hierarchy — typed, categorized exceptions for all blog API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope consumed by api/error_handlers.py
    - No internal details leaked in user-facing messages (no hashes, no OTP codes)

Design Decisions:
    - Single hierarchy with BlogApiError base: one global handler catches all
    - Validation failures carry a list of FieldViolation instead of a free-form
      string, so callers never inspect exception types to find the failing fields
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


class AuthFailure(str, Enum):
    """Why a session token was rejected."""
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"
    MALFORMED = "malformed"
    MISSING = "missing"


@dataclass(frozen=True)
class FieldViolation:
    """One violated field constraint."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_id: str | None = None
    details: list[dict[str, Any]] | None = None
    retry_after_seconds: int | None = None


class BlogApiError(Exception):
    """Base exception for all blog API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.context.details:
            body["details"] = self.context.details
        if self.context.retry_after_seconds is not None:
            body["retry_after_seconds"] = self.context.retry_after_seconds
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(BlogApiError):
    """Input violates one or more field constraints."""
    def __init__(
        self, violations: list[FieldViolation], context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.details = [v.to_dict() for v in violations]
        fields = ", ".join(sorted({v.field for v in violations}))
        super().__init__(
            f"Invalid fields: {fields}", "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, ctx, 400,
        )
        self.violations = violations


class ConflictError(BlogApiError):
    """Uniqueness violation (e.g. e-mail already registered)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class ResourceNotFoundError(BlogApiError):
    """No matching visible (and, where applicable, owned) row."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type


class AuthError(BlogApiError):
    """Session token missing or rejected."""
    _MESSAGES = {
        AuthFailure.EXPIRED: "Session token has expired",
        AuthFailure.BAD_SIGNATURE: "Session token signature is invalid",
        AuthFailure.MALFORMED: "Session token is malformed",
        AuthFailure.MISSING: "Authentication required",
    }

    def __init__(self, reason: AuthFailure, context: ErrorContext | None = None):
        super().__init__(
            self._MESSAGES[reason], f"TOKEN_{reason.name}",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 401,
        )
        self.reason = reason


class InvalidCredentialsError(BlogApiError):
    """Password does not match the stored hash."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid credentials", "INVALID_CREDENTIALS",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 401,
        )


class InvalidOtpError(BlogApiError):
    """Submitted verification code is wrong or expired."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid or expired verification code", "INVALID_OTP",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.WARNING, context, 400,
        )


class AlreadyVerifiedError(BlogApiError):
    """Account has already completed e-mail verification."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "User already verified", "ALREADY_VERIFIED",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.INFO, context, 400,
        )


class UnverifiedAccountError(BlogApiError):
    """Login attempted before e-mail verification (require-verified policy only)."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Email address has not been verified", "EMAIL_NOT_VERIFIED",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.WARNING, context, 403,
        )


class TooSoonError(BlogApiError):
    """A verification code is still active; a new one cannot be issued yet."""
    def __init__(self, retry_after_seconds: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_seconds = retry_after_seconds
        super().__init__(
            f"A verification code was sent recently. "
            f"Try again in {retry_after_seconds} second(s).",
            "TOO_SOON", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx, 429,
        )
        self.retry_after_seconds = retry_after_seconds


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DeliveryError(BlogApiError):
    """Outbound e-mail could not be delivered. Never rolls back the caller's mutation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Email delivery failed: {message}", "DELIVERY_FAILED",
            ErrorCategory.EXTERNAL_API, ErrorSeverity.ERROR, context, 502,
        )


class HashError(BlogApiError):
    """Password hashing failed (entropy or allocation failure)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Password hashing failed: {message}", "HASH_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(BlogApiError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
