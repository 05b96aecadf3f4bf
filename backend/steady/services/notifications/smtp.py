"""SMTP mail provider."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage as MimeMessage
from email.utils import formatdate

from steady.core.errors import MailDeliveryError
from steady.services.notifications.base import MailSender, NotificationResult


logger = logging.getLogger(__name__)


class SmtpMailSender(MailSender):
    provider_name = "smtp"

    def __init__(
        self,
        *,
        host: str,
        port: int,
        from_address: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, *, to: str, subject: str, body: str) -> NotificationResult:
        message = MimeMessage()
        message["Subject"] = subject
        message["From"] = self.from_address
        message["To"] = to
        message["Date"] = formatdate(localtime=False)
        message.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(f"SMTP delivery to {to} failed: {exc}") from exc

        logger.info("Email sent via %s:%s to=%s subject=%r", self.host, self.port, to, subject)
        return NotificationResult(status="sent", reason="delivered to smtp relay")
