"""
SMTP notification channel.

Messages are built with email.message and sent with smtplib in a worker
thread so the event loop is never blocked on the mail server.
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from shared.config import Settings, get_settings

from .exceptions import NotificationDeliveryError
from .interfaces import INotificationChannel
from . import templates

logger = logging.getLogger(__name__)


class SmtpNotificationChannel(INotificationChannel):
    """
    Sends account emails through an SMTP server.

    Uses implicit TLS when smtp_secure is set (port 465), STARTTLS otherwise.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    async def send_verification(self, email: str, token: str) -> None:
        subject, html = templates.verification_email(self._settings.frontend_url, token)
        await self._send("verification", email, subject, html)

    async def send_password_reset(self, email: str, token: str) -> None:
        subject, html = templates.password_reset_email(self._settings.frontend_url, token)
        await self._send("password reset", email, subject, html)

    async def send_welcome(self, email: str, first_name: str) -> None:
        subject, html = templates.welcome_email(self._settings.frontend_url, first_name)
        await self._send("welcome", email, subject, html)

    def build_message(self, recipient: str, subject: str, html: str) -> EmailMessage:
        """Assemble a multipart message with a plain-text fallback."""
        msg = EmailMessage()
        msg["From"] = formataddr((self._settings.from_name, self._settings.from_email))
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content("Please view this message in an HTML-capable email client.")
        msg.add_alternative(html, subtype="html")
        return msg

    async def _send(self, kind: str, recipient: str, subject: str, html: str) -> None:
        msg = self.build_message(recipient, subject, html)
        timeout = self._settings.external_call_timeout_seconds
        try:
            await asyncio.wait_for(asyncio.to_thread(self._send_sync, msg), timeout)
        except asyncio.TimeoutError:
            logger.error(f"Timed out sending {kind} email")
            raise NotificationDeliveryError(kind, recipient, "timeout")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send {kind} email: {e}")
            raise NotificationDeliveryError(kind, recipient, str(e))

        logger.info(f"Sent {kind} email")

    def _send_sync(self, msg: EmailMessage) -> None:
        """Synchronous send (called in a worker thread)."""
        s = self._settings
        timeout = s.external_call_timeout_seconds
        if s.smtp_secure:
            server = smtplib.SMTP_SSL(
                s.smtp_host, s.smtp_port, timeout=timeout, context=ssl.create_default_context()
            )
        else:
            server = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=timeout)

        with server:
            if not s.smtp_secure:
                server.starttls(context=ssl.create_default_context())
            if s.smtp_user and s.smtp_password:
                server.login(s.smtp_user, s.smtp_password)
            server.send_message(msg)
