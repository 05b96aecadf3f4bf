"""Notification configuration routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from steady.api.deps import get_mail_sender
from steady.core.config import settings
from steady.observability.tracing import trace
from steady.services.notifications.base import MailSender


router = APIRouter()


@router.get("/notifications/config", tags=["notifications"])
def get_notifications_config(request: Request, mailer: MailSender = Depends(get_mail_sender)) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace(
        "notifications.config",
        metadata={"provider": mailer.provider_name},
        request_id=request_id,
    ):
        return {
            "provider": mailer.provider_name,
            "from": settings.mail_from,
            "ai_enabled": bool(settings.openai_api_key),
            "request_id": request_id or "",
        }
