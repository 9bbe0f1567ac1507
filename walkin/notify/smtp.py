"""Email notifier over SMTP."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from .base import Notifier, NotifyResult, render_message

logger = logging.getLogger(__name__)


class SmtpNotifier(Notifier):
    """Sends position notices by email.

    When disabled or missing credentials it logs and reports failure
    without raising, so the shop keeps working before email is set up.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 587,
        user: str = "",
        password: str = "",
        from_email: str = "noreply@walkin.local",
        from_name: str = "Walk-in Queue",
        enabled: bool = False,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.enabled = enabled
        self.timeout = timeout

    def send(self, address: str, position: int) -> NotifyResult:
        if not self.enabled:
            logger.warning("Email disabled - skipping notice to %s", address)
            return NotifyResult(success=False, error="email disabled")

        if self.user and not self.password:
            logger.error("SMTP_PASSWORD not configured")
            return NotifyResult(success=False, error="SMTP_PASSWORD missing")

        subject, text, html = render_message(position)
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = address
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                if self.user:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            return NotifyResult(success=False, error=str(e) or "email error")

        logger.info("Sent position %d notice to %s", position, address)
        return NotifyResult(success=True)
