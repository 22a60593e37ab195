"""Outbound email delivery over SMTP."""
from __future__ import annotations
import logging
from email.message import EmailMessage
from typing import Optional, Protocol
import aiosmtplib
from schemas import OutboundMessage
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

class Notifier(Protocol):
    async def send(self, message: OutboundMessage) -> bool: ...

class SmtpNotifier:
    """Sends HTML mail through one configured SMTP account.

    ``send`` reports delivery as a boolean; connection errors, refusals,
    timeouts and unsendable messages (bad headers, no sender configured) are
    logged and come back as ``False``.
    """

    def __init__(self, settings: Settings):
        self.sender = settings.EMAIL_USER
        self.password = settings.EMAIL_PASS
        self.hostname = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.timeout = settings.SMTP_TIMEOUT

    def _connection_options(self) -> dict:
        # STARTTLS is mandatory; certificates are not validated
        return {
            "hostname": self.hostname,
            "port": self.port,
            "start_tls": True,
            "validate_certs": False,
            "timeout": self.timeout,
        }

    def build_email(self, message: OutboundMessage) -> EmailMessage:
        email = EmailMessage()
        email["From"] = self.sender
        email["To"] = message.recipient
        email["Subject"] = message.subject
        email.set_content(message.body, subtype="html")
        return email

    async def verify(self) -> bool:
        smtp = aiosmtplib.SMTP(**self._connection_options())
        try:
            async with smtp:
                await smtp.login(self.sender, self.password)
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Error with mailer configuration: %s", exc)
            return False
        logger.info("Server is ready to take our messages")
        return True

    async def send(self, message: OutboundMessage) -> bool:
        try:
            await aiosmtplib.send(
                self.build_email(message),
                username=self.sender,
                password=self.password,
                **self._connection_options(),
            )
        except (aiosmtplib.SMTPException, OSError, ValueError) as exc:
            logger.error("Failed to send %r to %s: %s", message.subject, message.recipient, exc)
            return False
        logger.info("Sent %r to %s", message.subject, message.recipient)
        return True

_notifier: Optional[SmtpNotifier] = None

def get_notifier() -> Notifier:
    global _notifier
    if _notifier is None:
        _notifier = SmtpNotifier(get_settings())
    return _notifier
