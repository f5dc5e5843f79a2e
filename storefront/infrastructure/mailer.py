"""SMTP Mailer — aiosmtplib-backed MailTransport for order notifications.

Invariants:
    - One connection per message (stateless per call)
    - Plain text always attached; HTML attached as the preferred alternative when given
    - Any SMTP/connection failure raised as NotificationError (core/errors.py)

Design Decisions:
    - aiosmtplib over smtplib: delivery runs on the event loop, never blocks a request
    - Credentials only sent when both username and password are configured
"""

import logging
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from storefront.config import Settings
from storefront.core.errors import NotificationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpConfig:
    """Connection and sender settings for SmtpMailer."""
    host: str
    port: int
    username: str = ""
    password: str = ""
    use_tls: bool = False
    start_tls: bool = True
    timeout_seconds: int = 30
    from_email: str = "noreply@storefront.local"
    from_name: str = "Storefront"

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpConfig":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            start_tls=settings.smtp_start_tls,
            timeout_seconds=settings.smtp_timeout_seconds,
            from_email=settings.mail_from_email,
            from_name=settings.mail_from_name,
        )


class SmtpMailer:
    """Sends multipart/alternative mail through an SMTP relay."""

    def __init__(self, config: SmtpConfig):
        self.config = config

    def build_message(
        self, to: str, subject: str, text: str, html: str | None = None,
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.config.from_name} <{self.config.from_email}>"
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(text, "plain", "utf-8"))
        if html:
            message.attach(MIMEText(html, "html", "utf-8"))
        return message

    async def send(
        self, to: str, subject: str, text: str, html: str | None = None,
    ) -> None:
        message = self.build_message(to, subject, text, html)
        credentials = {}
        if self.config.username and self.config.password:
            credentials = {
                "username": self.config.username,
                "password": self.config.password,
            }
        try:
            await aiosmtplib.send(
                message,
                hostname=self.config.host,
                port=self.config.port,
                use_tls=self.config.use_tls,
                start_tls=self.config.start_tls and not self.config.use_tls,
                timeout=self.config.timeout_seconds,
                **credentials,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise NotificationError(to, str(e)) from e
        logger.info(f"Email sent to {to}: {subject}", extra={"recipient": to})
