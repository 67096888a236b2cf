"""Tests for the token issuer."""

import pytest
import jwt
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from modules.auth.exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from modules.auth.models import TokenPurpose
from modules.auth.tokens import TokenIssuer
from shared.config import Settings
from tests.conftest import (
    TEST_ACCESS_SECRET,
    TEST_LIFETIMES,
    TEST_REFRESH_SECRET,
    create_test_token,
)


def _decode(token: str, secret: str) -> dict:
    return jwt.decode(token, secret, algorithms=["HS256"])


class TestIssue:
    def test_access_token_claims(self, issuer):
        """Access tokens carry subject, purpose and a 15 minute lifetime."""
        payload = _decode(issuer.issue_access("user-1"), TEST_ACCESS_SECRET)
        assert payload["sub"] == "user-1"
        assert payload["purpose"] == "access"
        assert payload["exp"] - payload["iat"] == 15 * 60

    def test_refresh_token_uses_refresh_secret(self, issuer):
        token = issuer.issue_refresh("user-1")
        payload = _decode(token, TEST_REFRESH_SECRET)
        assert payload["purpose"] == "refresh"
        assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60
        with pytest.raises(jwt.InvalidSignatureError):
            _decode(token, TEST_ACCESS_SECRET)

    def test_verify_token_claims(self, issuer):
        payload = _decode(issuer.issue_verify("user-1"), TEST_ACCESS_SECRET)
        assert payload["purpose"] == "verify"
        assert payload["exp"] - payload["iat"] == 24 * 60 * 60

    def test_reset_token_has_nonce(self, issuer):
        payload = _decode(issuer.issue_reset("user-1"), TEST_ACCESS_SECRET)
        assert payload["purpose"] == "reset"
        assert payload["exp"] - payload["iat"] == 60 * 60
        assert len(payload["nonce"]) == 64

    def test_reset_tokens_are_unique(self, issuer):
        """Two reset tokens issued back to back must differ."""
        assert issuer.issue_reset("user-1") != issuer.issue_reset("user-1")

    def test_refresh_tokens_are_unique(self, issuer):
        assert issuer.issue_refresh("user-1") != issuer.issue_refresh("user-1")

    def test_issue_pair(self, issuer):
        pair = issuer.issue_pair("user-1")
        assert issuer.verify(pair.access_token, TokenPurpose.ACCESS).sub == "user-1"
        assert issuer.verify(pair.refresh_token, TokenPurpose.REFRESH).sub == "user-1"
        assert pair.token_type == "bearer"
        assert pair.refresh_expires_at > datetime.now(timezone.utc) + timedelta(days=6)


class TestVerify:
    def test_round_trip(self, issuer):
        claims = issuer.verify(issuer.issue_access("user-1"), TokenPurpose.ACCESS)
        assert claims.sub == "user-1"
        assert claims.purpose == TokenPurpose.ACCESS
        assert claims.jti

    def test_verify_token_rejected_as_reset(self, issuer):
        """A verification token must never be redeemable as a reset token."""
        token = issuer.issue_verify("user-1")
        with pytest.raises(InvalidTokenError):
            issuer.verify(token, TokenPurpose.RESET)

    def test_reset_token_rejected_as_verify(self, issuer):
        token = issuer.issue_reset("user-1")
        with pytest.raises(InvalidTokenError):
            issuer.verify(token, TokenPurpose.VERIFY)

    def test_access_token_rejected_as_refresh(self, issuer):
        """Different secret, so this fails on the signature."""
        with pytest.raises(InvalidTokenError):
            issuer.verify(issuer.issue_access("user-1"), TokenPurpose.REFRESH)

    def test_refresh_token_rejected_as_access(self, issuer):
        with pytest.raises(InvalidTokenError):
            issuer.verify(issuer.issue_refresh("user-1"), TokenPurpose.ACCESS)

    def test_refresh_secret_override_still_checks_purpose(self, issuer):
        """Even with the right secret, a mismatched purpose is rejected."""
        token = create_test_token(purpose="access", secret=TEST_REFRESH_SECRET)
        with pytest.raises(InvalidTokenError):
            issuer.verify(token, TokenPurpose.REFRESH)

    def test_explicit_secret(self, issuer):
        token = create_test_token(purpose="verify", secret="other-secret")
        claims = issuer.verify(token, TokenPurpose.VERIFY, secret="other-secret")
        assert claims.purpose == TokenPurpose.VERIFY

    def test_expired_token(self, issuer):
        token = create_test_token(purpose="access", expired=True)
        with pytest.raises(ExpiredTokenError):
            issuer.verify(token, TokenPurpose.ACCESS)

    def test_expired_is_an_invalid_token(self):
        assert issubclass(ExpiredTokenError, InvalidTokenError)

    def test_expired_via_clock(self):
        """Tokens issued long enough ago are expired."""
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        old_issuer = TokenIssuer(
            TEST_ACCESS_SECRET, TEST_REFRESH_SECRET, TEST_LIFETIMES, clock=lambda: past
        )
        token = old_issuer.issue_reset("user-1")
        with pytest.raises(ExpiredTokenError):
            old_issuer.verify(token, TokenPurpose.RESET)

    def test_wrong_secret(self, issuer):
        token = create_test_token(purpose="access", secret="wrong-secret")
        with pytest.raises(InvalidTokenError):
            issuer.verify(token, TokenPurpose.ACCESS)

    def test_malformed_token(self, issuer):
        with pytest.raises(InvalidTokenError):
            issuer.verify("not-a-valid-token", TokenPurpose.ACCESS)

    @pytest.mark.parametrize("token", ["", None])
    def test_missing_token(self, issuer, token):
        with pytest.raises(MissingTokenError):
            issuer.verify(token, TokenPurpose.ACCESS)

    def test_missing_purpose_claim(self, issuer):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "user-1", "iat": now, "exp": now + timedelta(hours=1)},
            TEST_ACCESS_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            issuer.verify(token, TokenPurpose.ACCESS)

    def test_rejects_unsigned_token(self, issuer):
        """alg=none tokens must not be accepted."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "user-1", "purpose": "access", "iat": now, "exp": now + timedelta(hours=1)},
            None,
            algorithm="none",
        )
        with pytest.raises(InvalidTokenError):
            issuer.verify(token, TokenPurpose.ACCESS)


class TestFromSettings:
    def test_builds_from_settings(self):
        settings = Settings(
            jwt_access_secret="a-secret",
            jwt_refresh_secret="r-secret",
            access_token_ttl_seconds=60,
        )
        issuer = TokenIssuer.from_settings(settings)
        payload = _decode(issuer.issue_access("user-1"), "a-secret")
        assert payload["exp"] - payload["iat"] == 60
        assert issuer.secret_for(TokenPurpose.REFRESH) == "r-secret"
        assert issuer.secret_for(TokenPurpose.RESET) == "a-secret"

    def test_validates_secrets(self):
        settings = MagicMock()
        settings.validate_secrets.side_effect = RuntimeError("missing")
        with pytest.raises(RuntimeError):
            TokenIssuer.from_settings(settings)
