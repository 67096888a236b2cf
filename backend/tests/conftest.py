"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
an in-memory credential store, a notification channel that records what it
was asked to send, and a fully wired AuthService on top of them.
"""

import uuid
from datetime import datetime, timezone, timedelta
from typing import Optional

import jwt  # PyJWT
import pytest

from api.dependencies import reset_container
from modules.auth.exceptions import UserAlreadyExistsError
from modules.auth.models import NewUser, TokenPurpose, User, normalize_email
from modules.auth.passwords import PasswordHasher
from modules.auth.registry import InMemoryRefreshTokenRegistry
from modules.auth.service import AuthService
from modules.auth.tokens import TokenIssuer
from modules.notifications.exceptions import NotificationDeliveryError


# Test JWT secrets (only for testing)
TEST_ACCESS_SECRET = "test-access-secret-for-testing-only"
TEST_REFRESH_SECRET = "test-refresh-secret-for-testing-only"

# Lowest bcrypt cost, keeps hashing tests fast
TEST_BCRYPT_ROUNDS = 4

TEST_LIFETIMES = {
    TokenPurpose.ACCESS: timedelta(minutes=15),
    TokenPurpose.REFRESH: timedelta(days=7),
    TokenPurpose.VERIFY: timedelta(hours=24),
    TokenPurpose.RESET: timedelta(hours=1),
}


def create_test_token(
    user_id: str = "test-user-123",
    purpose: str = "access",
    expired: bool = False,
    secret: str = TEST_ACCESS_SECRET,
) -> str:
    """
    Create a signed token without going through the issuer.

    Args:
        user_id: Subject of the token
        purpose: Purpose claim
        expired: If True, creates an expired token
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "purpose": purpose,
        "jti": uuid.uuid4().hex,
        "exp": int(exp.timestamp()),
        "iat": int((now - timedelta(hours=2)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class InMemoryCredentialStore:
    """ICredentialStore backed by a dict, for tests."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def seed(
        self,
        email: str,
        password_hash: str,
        verified: bool = False,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> User:
        """Insert a user synchronously."""
        now = datetime.now(timezone.utc)
        user = User(
            id=str(uuid.uuid4()),
            email=normalize_email(email),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            is_email_verified=verified,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    async def insert(self, new_user: NewUser) -> User:
        if await self.find_by_email(new_user.email) is not None:
            raise UserAlreadyExistsError()
        now = datetime.now(timezone.utc)
        user = User(id=str(uuid.uuid4()), created_at=now, updated_at=now, **new_user.model_dump())
        self.users[user.id] = user
        return user

    async def update_password_hash(self, user_id: str, password_hash: str) -> Optional[User]:
        return self._update(user_id, password_hash=password_hash)

    async def set_verified(self, user_id: str) -> Optional[User]:
        return self._update(user_id, is_email_verified=True)

    def _update(self, user_id: str, **fields) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        user = user.model_copy(update={**fields, "updated_at": datetime.now(timezone.utc)})
        self.users[user_id] = user
        return user


class RecordingNotificationChannel:
    """INotificationChannel that records sends and can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.failing: set[str] = set()

    async def send_verification(self, email: str, token: str) -> None:
        self._record("verification", email, token)

    async def send_password_reset(self, email: str, token: str) -> None:
        self._record("password reset", email, token)

    async def send_welcome(self, email: str, first_name: str) -> None:
        self._record("welcome", email, first_name)

    def _record(self, kind: str, email: str, payload: str) -> None:
        if kind in self.failing:
            raise NotificationDeliveryError(kind, email, "simulated failure")
        self.sent.append((kind, email, payload))

    def of_kind(self, kind: str) -> list[tuple[str, str, str]]:
        return [s for s in self.sent if s[0] == kind]

    def last_token(self, kind: str) -> str:
        return self.of_kind(kind)[-1][2]


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TEST_ACCESS_SECRET, TEST_REFRESH_SECRET, TEST_LIFETIMES)


@pytest.fixture
def registry() -> InMemoryRefreshTokenRegistry:
    return InMemoryRefreshTokenRegistry()


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def notifier() -> RecordingNotificationChannel:
    return RecordingNotificationChannel()


@pytest.fixture
def auth_service(store, registry, hasher, issuer, notifier) -> AuthService:
    """AuthService wired to in-memory collaborators."""
    return AuthService(
        store=store,
        registry=registry,
        hasher=hasher,
        issuer=issuer,
        notifier=notifier,
    )


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def auth_token(issuer: TokenIssuer, test_user_id: str) -> str:
    """Create a valid access token for testing."""
    return issuer.issue_access(test_user_id)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
