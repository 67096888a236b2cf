"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and the deadline applied to every blocking query.
"""

import asyncio
from typing import Any, Callable, Generic, TypeVar

from supabase import Client

from .exceptions import ExternalServiceError


T = TypeVar("T")
R = TypeVar("R")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _run() to execute a blocking query off the event loop with a deadline

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class UserRepository(BaseRepository[User]):
            async def find_by_id(self, user_id: str) -> Optional[User]:
                result = await self._run(
                    lambda: self._db.table("users").select("*").eq("id", user_id).execute()
                )
                if not result.data:
                    return None
                return self._map_to_user(result.data[0])
    """

    service_name = "database"

    def __init__(self, db: Client, timeout: float = 10.0) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
            timeout: Seconds a single query may take before it is abandoned.
        """
        self._db = db
        self._timeout = timeout

    async def _run(self, query: Callable[[], R]) -> R:
        """
        Run a blocking Supabase call in a worker thread.

        Raises:
            ExternalServiceError: If the call does not finish within the deadline
        """
        try:
            return await asyncio.wait_for(asyncio.to_thread(query), self._timeout)
        except asyncio.TimeoutError:
            raise ExternalServiceError(
                f"{self.service_name} did not respond within {self._timeout}s",
                service=self.service_name,
                code="TIMEOUT",
            )

    @staticmethod
    def _first(rows: Any) -> Any:
        """Return the first row of a result set, or None."""
        if not rows:
            return None
        return rows[0]
