"""
Notifications module.

Delivers account emails (verification, password reset, welcome).

Public API:
- INotificationChannel: Interface for sending account emails
- SmtpNotificationChannel (in .service): SMTP implementation
- NotificationDeliveryError: Raised when a message could not be sent
"""

from .interfaces import INotificationChannel
from .exceptions import NotificationDeliveryError

__all__ = [
    "INotificationChannel",
    "NotificationDeliveryError",
]
