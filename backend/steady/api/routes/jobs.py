"""Operational endpoints for scheduler jobs."""
from __future__ import annotations

from datetime import datetime
from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from steady.api.deps import get_mail_sender, get_now, get_text_generator
from steady.api.schemas.jobs import JobRunRequest, JobRunResponse, UserOutcomePayload
from steady.core.config import settings
from steady.db.deps import get_db
from steady.observability.metrics import log_metric
from steady.observability.tracing import trace
from steady.services.ai_client import TextGenerator
from steady.services.digest_runner import run_digest_job
from steady.services.notifications.base import MailSender

router = APIRouter()


@router.get("/jobs", tags=["jobs"])
def get_jobs_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("jobs.config", metadata={"request_id": request_id}, request_id=request_id):
        data = {
            "scheduler_enabled": settings.scheduler_enabled,
            "schedule": {
                "timezone": settings.scheduler_timezone,
                "checkin_time": f"{settings.checkin_job_hour:02d}:{settings.checkin_job_minute:02d}",
                "weekly_day": settings.weekly_job_day,
                "weekly_time": f"{settings.weekly_job_hour:02d}:{settings.weekly_job_minute:02d}",
            },
        }
    return {**data, "request_id": request_id or ""}


@router.post("/jobs/run-now", response_model=JobRunResponse, tags=["jobs"])
def run_job_now(
    request: Request,
    payload: JobRunRequest,
    db: Session = Depends(get_db),
    generator: Optional[TextGenerator] = Depends(get_text_generator),
    mailer: MailSender = Depends(get_mail_sender),
    now: datetime = Depends(get_now),
) -> JobRunResponse:
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Run-now only allowed in debug mode")

    request_id = getattr(request.state, "request_id", None)
    metadata = {"job": payload.job, "request_id": request_id}
    start = perf_counter()
    with trace("jobs.run_now", metadata=metadata, request_id=request_id):
        result = run_digest_job(
            db,
            payload.job,
            generator=generator,
            mailer=mailer,
            now=now,
            user_ids=[payload.user_id] if payload.user_id else None,
        )

    log_metric("jobs.run_now.latency_ms", (perf_counter() - start) * 1000, metadata={"job": payload.job})

    return JobRunResponse(
        job=payload.job,
        users_considered=result.users_considered,
        sent=result.sent,
        skipped=result.skipped,
        failed=result.failed,
        outcomes=[
            UserOutcomePayload(user_id=outcome.user_id, status=outcome.status.value, reason=outcome.reason)
            for outcome in result.outcomes
        ],
        request_id=request_id or "",
    )
