"""
Outgoing notification email.

Every send is best effort: failures are logged and swallowed so that a
mail outage never fails a registration or an entry submission.  When
``SMTP_HOST`` is not configured the message is only logged.  The SMTP
exchange runs in a worker thread so request handlers are not blocked.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from eodsa_api.app.core.config import settings


logger = logging.getLogger(__name__)


class EmailService:
    """Compose and deliver notification emails."""

    @classmethod
    def _deliver(cls, message: EmailMessage) -> None:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=15) as server:
            server.starttls()
            if settings.smtp_username:
                server.login(settings.smtp_username, settings.smtp_password)
            server.send_message(message)

    @classmethod
    async def send(cls, to: str, subject: str, body: str) -> bool:
        """Send a plain-text email.  Returns ``True`` if it was handed to SMTP."""
        if not settings.smtp_host:
            logger.info("SMTP not configured, skipping email '%s' to %s", subject, to)
            return False
        try:
            message = EmailMessage()
            message["From"] = settings.mail_from
            message["To"] = to
            message["Subject"] = subject
            message.set_content(body)
            await asyncio.to_thread(cls._deliver, message)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            logger.error("Failed to send email '%s' to %s: %s", subject, to, exc)
            return False
        logger.info("Email '%s' sent to %s", subject, to)
        return True

    @classmethod
    async def send_dancer_registration(cls, name: str, email: str, eodsa_id: str) -> bool:
        body = (
            f"Dear {name},\n\n"
            f"Thank you for registering with EODSA. Your E-O-D-S-A ID is {eodsa_id}.\n"
            "Your registration is awaiting admin approval. Once approved you can apply "
            "to studios and enter competitions.\n"
        )
        return await cls.send(email, "EODSA registration received", body)

    @classmethod
    async def send_studio_registration(cls, name: str, email: str, registration_number: str) -> bool:
        body = (
            f"Dear {name},\n\n"
            f"Your studio has been registered. Registration number: {registration_number}.\n"
        )
        return await cls.send(email, "EODSA studio registration", body)

    @classmethod
    async def send_entry_confirmation(
        cls, name: str, email: str, event_name: str, item_name: str, fee: float
    ) -> bool:
        body = (
            f"Dear {name},\n\n"
            f"Your entry '{item_name}' for {event_name} has been received.\n"
            f"Entry fee: R{fee:.2f} (payment pending).\n"
        )
        return await cls.send(email, f"Entry received: {event_name}", body)

    @classmethod
    async def send_password_reset(cls, email: str, token: str) -> bool:
        body = (
            "A password reset was requested for your EODSA account.\n\n"
            f"Reset token: {token}\n\n"
            f"The token expires in {settings.password_reset_expire_minutes} minutes. "
            "If you did not request a reset you can ignore this message.\n"
        )
        return await cls.send(email, "EODSA password reset", body)
