"""
Authentication module interfaces.

Other modules should depend on IAuthService, not the concrete implementation.
The service itself depends on ICredentialStore and IRefreshTokenRegistry,
so storage can be swapped (Supabase, in-memory for tests, Redis, ...).
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import AuthResult, NewUser, PublicUser, TokenPair, User
from .registry import IRefreshTokenRegistry


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Typed gateway over the persistent user store.

    Every operation is atomic at the row level. Emails are passed in
    normalized form.
    """

    async def find_by_email(self, email: str) -> Optional[User]:
        """Return the user with this email, or None."""
        ...

    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with this ID, or None."""
        ...

    async def insert(self, new_user: NewUser) -> User:
        """
        Create a user row.

        Raises:
            UserAlreadyExistsError: On any uniqueness violation
        """
        ...

    async def update_password_hash(self, user_id: str, password_hash: str) -> Optional[User]:
        """Overwrite the password hash. Returns None if the user is gone."""
        ...

    async def set_verified(self, user_id: str) -> Optional[User]:
        """Flip the email-verified flag. Returns None if the user is gone."""
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def register(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> AuthResult:
        """
        Create an unverified account and sign it in.

        Raises:
            UserAlreadyExistsError: If the email is taken
            DeliveryFailedError: If the verification email could not be sent
                (the account exists; the result is attached to the error)
        """
        ...

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        ...

    async def logout(self, refresh_token: str, user_id: Optional[str] = None) -> None:
        """Revoke a refresh token. Idempotent."""
        ...

    async def forgot_password(self, email: str) -> None:
        """Send a reset link if the account exists. Never reveals whether it does."""
        ...

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Redeem a reset token.

        Raises:
            InvalidOrExpiredTokenError: If the token cannot be redeemed
        """
        ...

    async def verify_email(self, token: str) -> PublicUser:
        """
        Redeem a verification token.

        Raises:
            InvalidOrExpiredTokenError: If the token cannot be redeemed
            UserNotFoundError: If the token's subject no longer exists
        """
        ...

    async def resend_verification(self, user_id: str) -> None:
        """
        Send a fresh verification email.

        Raises:
            UserNotFoundError: If the user doesn't exist
            AlreadyVerifiedError: If the email is already verified
            DeliveryFailedError: If the email could not be sent
        """
        ...

    async def refresh(self, refresh_token: str) -> TokenPair:
        """
        Rotate a refresh token into a new pair.

        Raises:
            InvalidRefreshTokenError: Invalid, expired, revoked or already used
        """
        ...

    async def get_profile(self, user_id: str) -> PublicUser:
        """
        Get a user's profile.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        ...

    async def authenticate(self, access_token: Optional[str]) -> AuthenticatedUser:
        """
        Validate an access token and return the caller.

        Raises:
            MissingTokenError, ExpiredTokenError, InvalidTokenError
        """
        ...


__all__ = ["ICredentialStore", "IAuthService", "IRefreshTokenRegistry"]
