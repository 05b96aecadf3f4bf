"""FastAPI dependencies for external collaborators and cron authorization."""
from __future__ import annotations

import hmac
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException, status

from steady.core.config import settings
from steady.services.ai_client import TextGenerator, build_text_generator
from steady.services.notifications.base import MailSender
from steady.services.notifications.factory import build_mail_sender


@lru_cache
def get_text_generator() -> Optional[TextGenerator]:
    return build_text_generator(settings)


@lru_cache
def get_mail_sender() -> MailSender:
    return build_mail_sender(settings)


def get_now() -> datetime:
    return datetime.now(timezone.utc)


def require_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Reject digest triggers that do not carry ``Authorization: Bearer <CRON_SECRET>``."""
    if not settings.cron_secret:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Cron secret not configured")
    expected = f"Bearer {settings.cron_secret}"
    if not authorization or not hmac.compare_digest(authorization, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
