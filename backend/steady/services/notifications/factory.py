"""Mail sender factory."""
from __future__ import annotations

import logging

from steady.core.config import Settings, settings
from steady.services.notifications.base import MailSender
from steady.services.notifications.noop import NoopMailSender
from steady.services.notifications.smtp import SmtpMailSender

logger = logging.getLogger(__name__)


def build_mail_sender(config: Settings = settings) -> MailSender:
    provider = config.mail_provider.lower()
    if provider == "smtp":
        return SmtpMailSender(
            host=config.smtp_host,
            port=config.smtp_port,
            from_address=config.mail_from,
            username=config.smtp_user,
            password=config.smtp_password,
            use_tls=config.smtp_use_tls,
        )
    if provider != "noop":
        logger.warning("Unknown mail provider %r; falling back to noop", config.mail_provider)
    return NoopMailSender()
