"""
Password hashing.

bcrypt with a fixed cost factor. Hashing is CPU bound, so the auth
service runs it in a worker thread rather than on the event loop.

bcrypt only reads the first 72 bytes of its input, so the password is
first reduced to a base64-encoded SHA-256 digest (44 bytes). Every byte of
the password then affects the hash.
"""

import base64
import hashlib
import logging

import bcrypt

logger = logging.getLogger(__name__)


def _encode(password: str) -> bytes:
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


class PasswordHasher:
    """Bcrypt password hashing utility."""

    def __init__(self, rounds: int = 12) -> None:
        """Initialize with bcrypt rounds (cost factor)."""
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a password against a stored hash.

        A malformed hash yields False instead of raising.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification against malformed hash: {e}")
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """True when the stored hash was made with fewer rounds than configured."""
        parts = password_hash.split("$")
        if len(parts) < 3 or not parts[2].isdigit():
            return False
        return int(parts[2]) < self.rounds
