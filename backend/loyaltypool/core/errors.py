"""Error Hierarchy — typed, categorized exceptions for all loyalty pool failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - message is the exact user-visible string; discount responses return it verbatim
    - Authorization/validation errors are terminal and never retried
    - StoreError is the only error allowed to reach the transport as a hard failure

Design Decisions:
    - Single hierarchy with LoyaltyPoolError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


TOKEN_EXPIRED_MESSAGE = "Not authorized / Token expired."
INVALID_TOKEN_EXPIRY_MESSAGE = "Not authorized / Invalid token expiry date."
MALFORMED_PAYLOAD_MESSAGE = (
    "Invalid phone_number_amount format. Expected 'phone,amount'."
)
INVALID_RATING_MESSAGE = "Rating must be between 1 and 5"
MISSING_FEEDBACK_FIELD_MESSAGE = "Missing rating, note, or phone"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    STORE = "store"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    business_name: str | None = None
    ledger_key: str | None = None
    debug_info: dict[str, Any] | None = None


class LoyaltyPoolError(Exception):
    """Base exception for all loyalty pool errors."""

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
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "business_name": self.context.business_name,
                    "ledger_key": self.context.ledger_key,
                },
            }
        }


# ─── Authorization Errors (401) ─────────────────────────────────

class AuthorizationError(LoyaltyPoolError):
    """Token missing, mismatched, expired, or malformed."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class TokenExpiredError(AuthorizationError):
    """Token absent, scoped to another business, or past its expiry day."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(TOKEN_EXPIRED_MESSAGE, "TOKEN_EXPIRED", context)


class InvalidTokenExpiryError(AuthorizationError):
    """Stored token record carries an expiry that does not parse."""
    def __init__(self, expiry: str, context: ErrorContext | None = None):
        super().__init__(INVALID_TOKEN_EXPIRY_MESSAGE, "INVALID_TOKEN_EXPIRY", context)
        self.expiry = expiry


# ─── Validation Errors (400) ────────────────────────────────────

class ValidationError(LoyaltyPoolError):
    """Request payload has the wrong shape or content."""
    def __init__(
        self, message: str, code: str, field: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class MalformedPayloadError(ValidationError):
    """phone_number_amount is not exactly 'phone,amount'."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            MALFORMED_PAYLOAD_MESSAGE, "MALFORMED_PAYLOAD",
            "phone_number_amount", context,
        )


class InvalidPhoneNumberError(ValidationError):
    """Phone number is not exactly 10 ASCII digits."""
    def __init__(self, phone: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid phone number: {phone}. Must be 10 digits.",
            "INVALID_PHONE_NUMBER", "phone_number", context,
        )
        self.phone = phone


class InvalidRatingError(ValidationError):
    """Feedback rating outside 1..5."""
    def __init__(self, rating: int, context: ErrorContext | None = None):
        super().__init__(
            INVALID_RATING_MESSAGE, "INVALID_RATING", "rating", context,
        )
        self.rating = rating


class MissingFeedbackFieldError(ValidationError):
    """Feedback submitted without a phone number or comment."""
    def __init__(self, field: str, context: ErrorContext | None = None):
        super().__init__(
            MISSING_FEEDBACK_FIELD_MESSAGE, "MISSING_FEEDBACK_FIELD", field, context,
        )


# ─── Infrastructure Errors (503) ────────────────────────────────

class StoreError(LoyaltyPoolError):
    """Ledger Store unreachable or returned an error."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Ledger store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
