"""Dashboard and weekly summary API routes."""
from __future__ import annotations

from datetime import datetime
from time import perf_counter
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from steady.api.deps import get_now
from steady.api.schemas.dashboard import DashboardResponse, WeeklySummaryListResponse
from steady.db.deps import get_db
from steady.observability.metrics import log_metric
from steady.observability.tracing import trace
from steady.services.dashboard_service import get_dashboard_data, list_weekly_summaries

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse, tags=["dashboard"])
def get_dashboard(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> DashboardResponse:
    request_id = getattr(http_request.state, "request_id", None)
    start = perf_counter()

    with trace(
        "dashboard.get",
        metadata={"user_id": str(user_id), "request_id": request_id},
        user_id=str(user_id),
        request_id=request_id,
    ):
        data = get_dashboard_data(db, user_id, now=now)

    metadata = {"user_id": str(user_id)}
    log_metric("dashboard.get.reminders_count", len(data.reminders), metadata=metadata)
    log_metric("dashboard.get.latency_ms", (perf_counter() - start) * 1000, metadata=metadata)

    return DashboardResponse(
        user_id=user_id,
        check_in_frequency=data.check_in_frequency,
        active_resolutions=data.active,
        archived_resolutions=data.archived,
        reminders=data.reminders,
        latest_weekly_summary=data.latest_summary,
        request_id=request_id or "",
    )


@router.get("/weekly-summaries", response_model=WeeklySummaryListResponse, tags=["dashboard"])
def get_weekly_summaries(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    limit: int = Query(10, ge=1, le=52),
    db: Session = Depends(get_db),
) -> WeeklySummaryListResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("weekly_summaries.list", user_id=str(user_id), request_id=request_id):
        summaries = list_weekly_summaries(db, user_id, limit=limit)
    return WeeklySummaryListResponse(user_id=user_id, summaries=summaries, request_id=request_id or "")
