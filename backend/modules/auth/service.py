"""
Authentication service implementation.

Orchestrates the account flows (register, login, logout, password reset,
email verification, token refresh) on top of the credential store, the
password hasher, the token issuer, the refresh-token registry and the
notification channel.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser
from modules.notifications.exceptions import NotificationDeliveryError
from modules.notifications.interfaces import INotificationChannel

from .interfaces import IAuthService, ICredentialStore
from .registry import IRefreshTokenRegistry
from .passwords import PasswordHasher
from .tokens import TokenIssuer
from .models import (
    AuthResult,
    NewUser,
    PublicUser,
    TokenClaims,
    TokenPair,
    TokenPurpose,
    User,
    normalize_email,
)
from .exceptions import (
    AlreadyVerifiedError,
    DeliveryFailedError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    MissingTokenError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Holds no mutable state of its own; the only shared state is the
    injected refresh-token registry.
    """

    def __init__(
        self,
        store: ICredentialStore,
        registry: IRefreshTokenRegistry,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        notifier: INotificationChannel,
    ):
        self._store = store
        self._registry = registry
        self._hasher = hasher
        self._issuer = issuer
        self._notifier = notifier
        self._dummy_hash: Optional[str] = None

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def register(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> AuthResult:
        email = normalize_email(email)
        if await self._store.find_by_email(email) is not None:
            raise UserAlreadyExistsError()

        password_hash = await self._hash(password)
        user = await self._store.insert(
            NewUser(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
            )
        )
        logger.info(f"Registered user {user.id}")

        result = await self._sign_in(user)

        verification_failed = False
        try:
            await self._notifier.send_verification(user.email, self._issuer.issue_verify(user.id))
        except NotificationDeliveryError:
            logger.error(f"Verification email for new user {user.id} was not delivered")
            verification_failed = True

        try:
            await self._notifier.send_welcome(user.email, first_name)
        except NotificationDeliveryError:
            logger.warning(f"Welcome email for user {user.id} was not delivered")

        if verification_failed:
            raise DeliveryFailedError("verification", result=result)
        return result

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self._store.find_by_email(normalize_email(email))
        if user is None:
            # Burn the same hashing time as a real check.
            await asyncio.to_thread(self._hasher.verify, password, await self._get_dummy_hash())
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(self._hasher.verify, password, user.password_hash):
            raise InvalidCredentialsError()

        if self._hasher.needs_rehash(user.password_hash):
            await self._store.update_password_hash(user.id, await self._hash(password))
            logger.info(f"Upgraded password hash cost for user {user.id}")

        return await self._sign_in(user)

    async def logout(self, refresh_token: str, user_id: Optional[str] = None) -> None:
        removed = await self._registry.remove(refresh_token)
        logger.debug(f"Logout for user {user_id or 'unknown'} (token was registered: {removed})")

    async def refresh(self, refresh_token: str) -> TokenPair:
        try:
            claims = self._issuer.verify(refresh_token, TokenPurpose.REFRESH)
        except (InvalidTokenError, MissingTokenError):
            if refresh_token:
                await self._registry.remove(refresh_token)
            raise InvalidRefreshTokenError()

        # remove() is the atomic check: only one concurrent redemption wins.
        if not await self._registry.remove(refresh_token):
            logger.warning(f"Rejected unregistered refresh token for user {claims.sub}")
            raise InvalidRefreshTokenError()

        return await self._issue_pair(claims.sub)

    async def authenticate(self, access_token: Optional[str]) -> AuthenticatedUser:
        claims = self._issuer.verify(access_token, TokenPurpose.ACCESS)
        return AuthenticatedUser(
            id=claims.sub,
            token_id=claims.jti or None,
            issued_at=datetime.fromtimestamp(claims.iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims.exp, tz=timezone.utc),
        )

    # -------------------------------------------------------------------------
    # Passwords
    # -------------------------------------------------------------------------

    async def forgot_password(self, email: str) -> None:
        """
        Send a reset link if the account exists.

        Returns normally in every case, delivery failures included, so the
        outcome never tells the caller whether the email is registered.
        """
        user = await self._store.find_by_email(normalize_email(email))
        if user is None:
            logger.debug("Password reset requested for unknown email")
            return

        token = self._issuer.issue_reset(user.id)
        try:
            await self._notifier.send_password_reset(user.email, token)
        except NotificationDeliveryError:
            logger.error(f"Password reset email for user {user.id} was not delivered")

    async def reset_password(self, token: str, new_password: str) -> None:
        claims = self._redeem(token, TokenPurpose.RESET)

        password_hash = await self._hash(new_password)
        if await self._store.update_password_hash(claims.sub, password_hash) is None:
            raise InvalidOrExpiredTokenError()
        logger.info(f"Password reset for user {claims.sub}")

    # -------------------------------------------------------------------------
    # Email verification
    # -------------------------------------------------------------------------

    async def verify_email(self, token: str) -> PublicUser:
        claims = self._redeem(token, TokenPurpose.VERIFY)

        user = await self._store.set_verified(claims.sub)
        if user is None:
            raise UserNotFoundError(claims.sub)
        logger.info(f"Email verified for user {user.id}")
        return user.to_public()

    async def resend_verification(self, user_id: str) -> None:
        user = await self._store.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        if user.is_email_verified:
            raise AlreadyVerifiedError(user_id)

        try:
            await self._notifier.send_verification(user.email, self._issuer.issue_verify(user.id))
        except NotificationDeliveryError:
            logger.error(f"Verification email for user {user.id} was not delivered")
            raise DeliveryFailedError("verification")

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    async def get_profile(self, user_id: str) -> PublicUser:
        user = await self._store.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user.to_public()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self._hasher.hash, password)

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self._hash("not-a-real-password")
        return self._dummy_hash

    def _redeem(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        """Verify a single-purpose token, collapsing every failure into one error."""
        try:
            return self._issuer.verify(token, purpose)
        except (InvalidTokenError, MissingTokenError):
            raise InvalidOrExpiredTokenError()

    async def _issue_pair(self, user_id: str) -> TokenPair:
        pair = self._issuer.issue_pair(user_id)
        await self._registry.add(pair.refresh_token, pair.refresh_expires_at)
        return pair

    async def _sign_in(self, user: User) -> AuthResult:
        pair = await self._issue_pair(user.id)
        return AuthResult(
            user=user.to_public(),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )


def build_auth_service(
    store: ICredentialStore,
    registry: IRefreshTokenRegistry,
    notifier: INotificationChannel,
    settings: Optional[Settings] = None,
) -> AuthService:
    """Wire an AuthService with hasher and issuer taken from settings."""
    settings = settings or get_settings()
    return AuthService(
        store=store,
        registry=registry,
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        issuer=TokenIssuer.from_settings(settings),
        notifier=notifier,
    )
