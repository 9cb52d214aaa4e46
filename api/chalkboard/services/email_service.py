"""
Transactional email over an SMTP relay.
"""
import logging
import smtplib
from email.message import EmailMessage
from functools import lru_cache
from typing import Optional

from chalkboard.core.config import settings
from chalkboard.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Mailer:
    """Sends plain-text + HTML messages through one SMTP relay (STARTTLS)."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        sender: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.timeout = timeout

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)
        logger.info(f"Sent '{subject}' email to {to}")

    def send_otp(self, to: str, code: str, expiry_minutes: int) -> None:
        """Deliver a sign-in code."""
        text = (
            f"Your verification code is {code}.\n\n"
            f"It expires in {expiry_minutes} minutes. If you did not request it, you can ignore this email."
        )
        html = (
            f"<p>Your verification code is</p><h2 style=\"letter-spacing:4px\">{code}</h2>"
            f"<p>It expires in {expiry_minutes} minutes. If you did not request it, you can ignore this email.</p>"
        )
        self.send(to, "Your verification code", text, html)


@lru_cache(maxsize=1)
def get_mailer() -> Mailer:
    """Dependency returning the process-wide mailer."""
    if not settings.smtp_host:
        raise ConfigurationError("SMTP relay is not configured (SMTP_HOST)")
    return Mailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_password,
        sender=settings.smtp_from or None,
    )
