"""No-op mail provider (logs only)."""
from __future__ import annotations

import logging

from steady.services.notifications.base import MailSender, NotificationResult


logger = logging.getLogger(__name__)


class NoopMailSender(MailSender):
    provider_name = "noop"

    def send(self, *, to: str, subject: str, body: str) -> NotificationResult:
        logger.info("Email queued (noop) to=%s subject=%r chars=%s", to, subject, len(body))
        return NotificationResult(status="noop", reason="mail provider is noop")
