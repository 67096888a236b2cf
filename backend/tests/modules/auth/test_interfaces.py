import pytest

from modules.auth.interfaces import IAuthService, ICredentialStore, IRefreshTokenRegistry
from modules.auth.registry import InMemoryRefreshTokenRegistry
from modules.auth.service import AuthService
from modules.notifications.interfaces import INotificationChannel
from tests.conftest import InMemoryCredentialStore, RecordingNotificationChannel

AUTH_METHODS = [
    "register",
    "login",
    "logout",
    "forgot_password",
    "reset_password",
    "verify_email",
    "resend_verification",
    "refresh",
    "get_profile",
    "authenticate",
]

STORE_METHODS = ["find_by_email", "find_by_id", "insert", "update_password_hash", "set_verified"]


class TestAuthInterface:
    def test_interface_methods_exist(self):
        """IAuthService should define every flow."""
        for method in AUTH_METHODS:
            assert hasattr(IAuthService, method)

    def test_auth_service_has_interface_methods(self):
        """AuthService should have all IAuthService methods."""
        for method in AUTH_METHODS:
            assert callable(getattr(AuthService, method))

    def test_interfaces_are_runtime_checkable(self):
        for protocol in (IAuthService, ICredentialStore, IRefreshTokenRegistry, INotificationChannel):
            assert getattr(protocol, "_is_runtime_protocol", False)


class TestCollaboratorInterfaces:
    def test_store_interface_methods(self):
        for method in STORE_METHODS:
            assert hasattr(ICredentialStore, method)

    @pytest.mark.parametrize(
        "instance, protocol",
        [
            (InMemoryCredentialStore(), ICredentialStore),
            (InMemoryRefreshTokenRegistry(), IRefreshTokenRegistry),
            (RecordingNotificationChannel(), INotificationChannel),
        ],
    )
    def test_fakes_satisfy_protocols(self, instance, protocol):
        assert isinstance(instance, protocol)
