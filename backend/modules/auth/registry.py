"""
Refresh-token registry.

Signature validity alone never makes a refresh token redeemable: it must
also be present here. Tokens leave the registry on logout, on rotation,
or once they expire.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class IRefreshTokenRegistry(Protocol):
    """Server-side record of currently redeemable refresh tokens."""

    async def add(self, token: str, expires_at: Optional[datetime] = None) -> None:
        """Mark a token as redeemable until expires_at (or until removed)."""
        ...

    async def remove(self, token: str) -> bool:
        """
        Revoke a token.

        Returns:
            True if the token was present, False otherwise. Never raises
            for an unknown token.
        """
        ...

    async def contains(self, token: str) -> bool:
        """Whether the token is currently redeemable."""
        ...


class InMemoryRefreshTokenRegistry(IRefreshTokenRegistry):
    """
    Process-local registry backed by a dict of token -> expiry.

    All access goes through an asyncio.Lock, so concurrent flows see a
    consistent view. Expired entries are dropped when looked up and by a
    full sweep that add() runs at most once per sweep_interval seconds.
    """

    def __init__(
        self,
        sweep_interval: float = 300.0,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._tokens: dict[str, Optional[datetime]] = {}
        self._lock = asyncio.Lock()
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._last_sweep = time.monotonic()

    def _is_expired(self, expires_at: Optional[datetime], now: datetime) -> bool:
        return expires_at is not None and expires_at <= now

    def _sweep_locked(self) -> int:
        now = self._clock()
        expired = [t for t, exp in self._tokens.items() if self._is_expired(exp, now)]
        for token in expired:
            del self._tokens[token]
        self._last_sweep = time.monotonic()
        return len(expired)

    async def add(self, token: str, expires_at: Optional[datetime] = None) -> None:
        async with self._lock:
            self._tokens[token] = expires_at
            if time.monotonic() - self._last_sweep >= self._sweep_interval:
                evicted = self._sweep_locked()
                if evicted:
                    logger.debug(f"Evicted {evicted} expired refresh tokens")

    async def remove(self, token: str) -> bool:
        async with self._lock:
            if token not in self._tokens:
                return False
            del self._tokens[token]
            return True

    async def contains(self, token: str) -> bool:
        async with self._lock:
            if token not in self._tokens:
                return False
            if self._is_expired(self._tokens[token], self._clock()):
                del self._tokens[token]
                return False
            return True

    async def prune_expired(self) -> int:
        """Drop every expired entry now. Returns how many were dropped."""
        async with self._lock:
            return self._sweep_locked()

    async def size(self) -> int:
        """Number of tracked tokens, expired ones included until swept."""
        async with self._lock:
            return len(self._tokens)
