"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The refresh-token registry lives here rather than inside the auth
service, so there is exactly one per process and tests can swap it.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService, ICredentialStore
    from modules.auth.registry import IRefreshTokenRegistry
    from modules.notifications.interfaces import INotificationChannel


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None
        self._credential_store: "ICredentialStore | None" = None
        self._refresh_registry: "IRefreshTokenRegistry | None" = None
        self._notifications: "INotificationChannel | None" = None

    @property
    def credential_store(self) -> "ICredentialStore":
        """Get the credential store instance."""
        if self._credential_store is None:
            from modules.auth.repository import SupabaseCredentialStore
            from shared.config import get_settings
            from shared.database import get_supabase_client
            settings = get_settings()
            self._credential_store = SupabaseCredentialStore(
                get_supabase_client(),
                table=settings.users_table,
                timeout=settings.external_call_timeout_seconds,
            )
        return self._credential_store

    @property
    def refresh_registry(self) -> "IRefreshTokenRegistry":
        """Get the refresh-token registry instance."""
        if self._refresh_registry is None:
            from modules.auth.registry import InMemoryRefreshTokenRegistry
            from shared.config import get_settings
            self._refresh_registry = InMemoryRefreshTokenRegistry(
                sweep_interval=get_settings().refresh_registry_sweep_seconds,
            )
        return self._refresh_registry

    @property
    def notifications(self) -> "INotificationChannel":
        """Get the notification channel instance."""
        if self._notifications is None:
            from modules.notifications.service import SmtpNotificationChannel
            self._notifications = SmtpNotificationChannel()
        return self._notifications

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import build_auth_service
            self._auth_service = build_auth_service(
                store=self.credential_store,
                registry=self.refresh_registry,
                notifier=self.notifications,
            )
        return self._auth_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None
        self._credential_store = None
        self._refresh_registry = None
        self._notifications = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth
