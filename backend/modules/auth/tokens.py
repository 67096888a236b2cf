"""
Token issuing and verification.

Four token classes share one JWT shape and are told apart by the
`purpose` claim. Refresh tokens are signed with their own secret;
access, verify and reset tokens share the access secret, which is why
the purpose check on every verification is mandatory.
"""

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import jwt

from shared.config import Settings

from .exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from .models import TokenClaims, TokenPair, TokenPurpose

_REQUIRED_CLAIMS = ["sub", "purpose", "exp", "iat"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """
    Creates and verifies signed, purpose-tagged tokens.

    Args:
        access_secret: Signs access, verify and reset tokens
        refresh_secret: Signs refresh tokens
        lifetimes: Token lifetime per purpose
        algorithm: JWT signing algorithm
        clock: Source of the current time (overridable in tests)
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        lifetimes: dict[TokenPurpose, timedelta],
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secrets = {
            TokenPurpose.ACCESS: access_secret,
            TokenPurpose.REFRESH: refresh_secret,
            TokenPurpose.VERIFY: access_secret,
            TokenPurpose.RESET: access_secret,
        }
        self._lifetimes = lifetimes
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        """Build an issuer from application settings."""
        settings.validate_secrets()
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            lifetimes={
                TokenPurpose.ACCESS: timedelta(seconds=settings.access_token_ttl_seconds),
                TokenPurpose.REFRESH: timedelta(seconds=settings.refresh_token_ttl_seconds),
                TokenPurpose.VERIFY: timedelta(seconds=settings.verify_token_ttl_seconds),
                TokenPurpose.RESET: timedelta(seconds=settings.reset_token_ttl_seconds),
            },
            algorithm=settings.jwt_algorithm,
        )

    def secret_for(self, purpose: TokenPurpose) -> str:
        """Signing secret used for a token purpose."""
        return self._secrets[purpose]

    def _issue(self, user_id: str, purpose: TokenPurpose, **extra: Any) -> tuple[str, datetime]:
        now = self._clock()
        expires_at = now + self._lifetimes[purpose]
        payload = {
            "sub": user_id,
            "purpose": purpose.value,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid.uuid4().hex,
            **extra,
        }
        token = jwt.encode(payload, self.secret_for(purpose), algorithm=self._algorithm)
        return token, expires_at

    def issue_access(self, user_id: str) -> str:
        """Short-lived bearer token."""
        return self._issue(user_id, TokenPurpose.ACCESS)[0]

    def issue_refresh(self, user_id: str) -> str:
        """Long-lived token; the caller must register it before handing it out."""
        return self._issue(user_id, TokenPurpose.REFRESH)[0]

    def issue_verify(self, user_id: str) -> str:
        """Email verification token."""
        return self._issue(user_id, TokenPurpose.VERIFY)[0]

    def issue_reset(self, user_id: str) -> str:
        """Password reset token. The nonce makes every issuance distinct."""
        return self._issue(user_id, TokenPurpose.RESET, nonce=secrets.token_hex(32))[0]

    def issue_pair(self, user_id: str) -> TokenPair:
        """Access and refresh token for one sign-in."""
        access_token = self.issue_access(user_id)
        refresh_token, refresh_expires_at = self._issue(user_id, TokenPurpose.REFRESH)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            refresh_expires_at=refresh_expires_at,
        )

    def verify(
        self,
        token: Optional[str],
        expected_purpose: TokenPurpose,
        secret: Optional[str] = None,
    ) -> TokenClaims:
        """
        Verify signature, expiry and purpose of a token.

        Args:
            token: Encoded JWT
            expected_purpose: Purpose the caller is about to redeem it for
            secret: Override for the purpose's signing secret

        Returns:
            Verified TokenClaims

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError: If token has expired
            InvalidTokenError: On a bad signature, malformed token, or purpose mismatch
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                secret or self.secret_for(expected_purpose),
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))

        if payload.get("purpose") != expected_purpose.value:
            raise InvalidTokenError(f"Token is not a {expected_purpose.value} token")

        payload.setdefault("jti", "")
        return TokenClaims(**payload)
