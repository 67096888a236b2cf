"""
Credential store backed by the Supabase `users` table.

Maps rows to User models and translates unique-constraint violations
into UserAlreadyExistsError without saying which constraint fired.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.repository import BaseRepository

from .exceptions import UserAlreadyExistsError
from .interfaces import ICredentialStore
from .models import NewUser, SubscriptionTier, User, normalize_email

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseCredentialStore(BaseRepository[User], ICredentialStore):
    """
    Repository for user credential rows.

    Note: This repository does NOT perform authorization checks or
    password handling. It stores whatever hash it is given.
    """

    service_name = "credential_store"

    def __init__(self, db: Client, table: str = "users", timeout: float = 10.0) -> None:
        super().__init__(db, timeout)
        self._table = table

    async def find_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        result = await self._run(
            lambda: self._db.table(self._table).select("*").eq("email", email).limit(1).execute()
        )
        row = self._first(result.data)
        return self._map_to_user(row) if row else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        result = await self._run(
            lambda: self._db.table(self._table).select("*").eq("id", user_id).limit(1).execute()
        )
        row = self._first(result.data)
        return self._map_to_user(row) if row else None

    async def insert(self, new_user: NewUser) -> User:
        data = {
            "email": new_user.email,
            "password_hash": new_user.password_hash,
            "first_name": new_user.first_name,
            "last_name": new_user.last_name,
            "subscription_tier": new_user.subscription_tier.value,
            "is_email_verified": new_user.is_email_verified,
        }
        try:
            result = await self._run(lambda: self._db.table(self._table).insert(data).execute())
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise UserAlreadyExistsError()
            raise
        return self._map_to_user(result.data[0])

    async def update_password_hash(self, user_id: str, password_hash: str) -> Optional[User]:
        return await self._update(user_id, {"password_hash": password_hash})

    async def set_verified(self, user_id: str) -> Optional[User]:
        return await self._update(user_id, {"is_email_verified": True})

    async def _update(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        fields = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = await self._run(
            lambda: self._db.table(self._table).update(fields).eq("id", user_id).execute()
        )
        row = self._first(result.data)
        return self._map_to_user(row) if row else None

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    def _map_to_user(self, data: dict[str, Any]) -> User:
        """Map a database row to a User model."""
        return User(
            id=str(data["id"]),
            email=data["email"],
            password_hash=data["password_hash"],
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            subscription_tier=SubscriptionTier(data.get("subscription_tier") or "free"),
            is_email_verified=bool(data.get("is_email_verified")),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
