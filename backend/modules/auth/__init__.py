"""
Authentication module.

Turns email/password credentials into sessions and manages the token
lifecycle: access, refresh (rotated, revocable), email verification and
password reset tokens.

Public API:
- IAuthService: Interface for auth flows
- ICredentialStore: Interface for the user record store
- IRefreshTokenRegistry: Interface for refresh-token revocation
- User, PublicUser, AuthResult, TokenPair, TokenPurpose: Models
- Auth exceptions: UserAlreadyExistsError, InvalidCredentialsError, etc.
"""

from .interfaces import IAuthService, ICredentialStore
from .registry import IRefreshTokenRegistry, InMemoryRefreshTokenRegistry
from .models import (
    User,
    PublicUser,
    NewUser,
    AuthResult,
    TokenPair,
    TokenClaims,
    TokenPurpose,
    SubscriptionTier,
)
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    UserAlreadyExistsError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidRefreshTokenError,
    UserNotFoundError,
    AlreadyVerifiedError,
    DeliveryFailedError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "ICredentialStore",
    "IRefreshTokenRegistry",
    "InMemoryRefreshTokenRegistry",
    # Models
    "User",
    "PublicUser",
    "NewUser",
    "AuthResult",
    "TokenPair",
    "TokenClaims",
    "TokenPurpose",
    "SubscriptionTier",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "UserAlreadyExistsError",
    "InvalidCredentialsError",
    "InvalidOrExpiredTokenError",
    "InvalidRefreshTokenError",
    "UserNotFoundError",
    "AlreadyVerifiedError",
    "DeliveryFailedError",
]
