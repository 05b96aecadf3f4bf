"""Digest endpoints invoked by an external time-based trigger."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from steady.api.deps import get_mail_sender, get_now, get_text_generator, require_cron_secret
from steady.db.deps import get_db
from steady.observability.tracing import trace
from steady.services.ai_client import TextGenerator
from steady.services.digest_runner import CHECKIN_JOB, WEEKLY_SUMMARY_JOB, run_digest_job
from steady.services.notifications.base import MailSender

router = APIRouter(prefix="/cron", dependencies=[Depends(require_cron_secret)])


@router.get("/check-in", tags=["cron"])
def cron_check_in(
    request: Request,
    db: Session = Depends(get_db),
    mailer: MailSender = Depends(get_mail_sender),
    now: datetime = Depends(get_now),
) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("cron.check_in", request_id=request_id):
        result = run_digest_job(db, CHECKIN_JOB, generator=None, mailer=mailer, now=now)
    return {
        "sent": result.sent,
        "skipped": result.skipped,
        "failed": result.failed,
        "request_id": request_id or "",
    }


@router.get("/weekly-summary", tags=["cron"])
def cron_weekly_summary(
    request: Request,
    db: Session = Depends(get_db),
    generator: Optional[TextGenerator] = Depends(get_text_generator),
    mailer: MailSender = Depends(get_mail_sender),
    now: datetime = Depends(get_now),
) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("cron.weekly_summary", request_id=request_id):
        result = run_digest_job(db, WEEKLY_SUMMARY_JOB, generator=generator, mailer=mailer, now=now)
    return {
        "processed": result.sent,
        "skipped": result.skipped,
        "failed": result.failed,
        "request_id": request_id or "",
    }
