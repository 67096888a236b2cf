"""
Notifications module exceptions.
"""

from shared.exceptions import ExternalServiceError


class NotificationDeliveryError(ExternalServiceError):
    """Raised when an email could not be handed to the mail server."""

    def __init__(self, kind: str, recipient: str, reason: str = ""):
        super().__init__(
            f"Failed to send {kind} email",
            service="smtp",
            code="NOTIFICATION_DELIVERY_FAILED",
            details={"kind": kind, "recipient": recipient, "reason": reason},
        )
        self.kind = kind
