"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.

Token-level errors (InvalidTokenError and friends) come out of the
TokenIssuer. The flows translate them into the flow-level errors below
so callers only ever see one message per failure kind.
"""

from typing import TYPE_CHECKING, Optional

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from .models import AuthResult


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid, malformed, or has the wrong purpose."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(InvalidTokenError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message)
        self.code = "TOKEN_EXPIRED"


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class UserAlreadyExistsError(ConflictError):
    """Raised when registering an email that is already taken."""

    def __init__(self):
        super().__init__("User already exists", code="ALREADY_EXISTS")


class InvalidCredentialsError(AuthenticationError):
    """Raised on login failure. Never says whether email or password was wrong."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class InvalidOrExpiredTokenError(ValidationError):
    """Raised when a verification or reset token cannot be redeemed."""

    def __init__(self):
        super().__init__("Invalid or expired token", code="INVALID_OR_EXPIRED_TOKEN")


class InvalidRefreshTokenError(AuthenticationError):
    """Raised when a refresh token is invalid, expired, or already used."""

    def __init__(self):
        super().__init__("Invalid or expired refresh token", code="INVALID_REFRESH_TOKEN")


class UserNotFoundError(NotFoundError):
    """Raised when the user a flow refers to doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class AlreadyVerifiedError(ValidationError):
    """Raised when resending verification for an already verified user."""

    def __init__(self, user_id: str):
        super().__init__(
            "Email is already verified",
            code="ALREADY_VERIFIED",
            details={"user_id": user_id},
        )


class DeliveryFailedError(ExternalServiceError):
    """
    Raised when a verification or reset email could not be sent.

    The state change that preceded the send is not rolled back. For
    registration the already-built result rides along in `result`.
    """

    def __init__(self, kind: str, result: Optional["AuthResult"] = None):
        super().__init__(
            f"Failed to send {kind} email",
            service="notifications",
            code="DELIVERY_FAILED",
            details={"kind": kind},
        )
        self.result = result
