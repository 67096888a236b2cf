"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


def normalize_email(email: str) -> str:
    """Canonical form of an email address for lookups and inserts."""
    return email.strip().lower()


class SubscriptionTier(str, Enum):
    """User subscription tiers."""

    FREE = "free"
    PREMIUM = "premium"
    PRO = "pro"


class TokenPurpose(str, Enum):
    """What a token may be redeemed for."""

    ACCESS = "access"    # Bearer credential for API calls
    REFRESH = "refresh"  # Exchanged for a new access/refresh pair
    VERIFY = "verify"    # Proves control of an email address
    RESET = "reset"      # Authorizes one password change


class User(BaseModel):
    """
    A user row as held by the credential store.

    Carries the password hash, so it must never be returned to callers
    directly; use to_public() for anything leaving the service.
    """

    id: str = Field(..., description="User ID (UUID)")
    email: str = Field(..., description="Normalized email address")
    password_hash: str = Field(..., description="bcrypt hash")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    subscription_tier: SubscriptionTier = Field(default=SubscriptionTier.FREE)
    is_email_verified: bool = Field(default=False)
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Last update time")

    def to_public(self) -> "PublicUser":
        """Strip the password hash."""
        return PublicUser(**self.model_dump(exclude={"password_hash"}))


class PublicUser(BaseModel):
    """User profile safe to hand to the transport layer."""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    is_email_verified: bool = False
    created_at: datetime
    updated_at: datetime


class NewUser(BaseModel):
    """Fields needed to insert a user."""

    email: str
    password_hash: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    is_email_verified: bool = False

    @field_validator("email")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_email(value)


class TokenClaims(BaseModel):
    """Decoded and verified token payload."""

    sub: str = Field(..., description="Subject (user ID)")
    purpose: TokenPurpose = Field(..., description="Purpose tag")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")
    jti: str = Field(..., description="Unique token ID")
    nonce: Optional[str] = Field(None, description="Reset tokens only")

    model_config = {"frozen": True, "extra": "ignore"}


class TokenPair(BaseModel):
    """Access and refresh token issued together."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    refresh_expires_at: Optional[datetime] = Field(
        None, description="When the refresh token stops being redeemable"
    )


class AuthResult(BaseModel):
    """Result of register and login."""

    user: PublicUser
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


# -----------------------------------------------------------------------------
# Wire-level request models
# -----------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request to create an account."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    """Request to sign in with email and password."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    """Request a password reset link."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Redeem a reset token for a new password."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, max_length=128)


class VerifyEmailRequest(BaseModel):
    """Redeem an email verification token."""

    token: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    """Exchange a refresh token for a new pair."""

    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    """Revoke a refresh token."""

    refresh_token: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class VerifyEmailResponse(BaseModel):
    """Result of email verification."""

    user: PublicUser
