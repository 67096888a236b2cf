"""
Notification channel interface.

The auth flows only produce a token and ask for it to be sent; how the
message reaches the user is up to the implementation.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class INotificationChannel(Protocol):
    """Outbound channel for account emails. Each send may fail independently."""

    async def send_verification(self, email: str, token: str) -> None:
        """
        Send an email verification link.

        Raises:
            NotificationDeliveryError: If the message could not be sent
        """
        ...

    async def send_password_reset(self, email: str, token: str) -> None:
        """
        Send a password reset link.

        Raises:
            NotificationDeliveryError: If the message could not be sent
        """
        ...

    async def send_welcome(self, email: str, first_name: str) -> None:
        """
        Send the welcome email.

        Raises:
            NotificationDeliveryError: If the message could not be sent
        """
        ...
