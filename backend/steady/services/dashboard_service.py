"""Aggregation helpers for the dashboard and resolution list endpoints."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from steady.api.schemas.dashboard import ReminderBanner, WeeklySummaryPayload
from steady.api.schemas.resolution import ResolutionPayload, ResolutionSummary
from steady.db.enums import CheckInFrequency, ResolutionStatus
from steady.db.models.resolution import Resolution
from steady.db.models.weekly_summary import WeeklySummary
from steady.services.activity_service import LogMeta, log_meta_by_resolution
from steady.services.preferences_service import get_or_create_preferences
from steady.services.reminders import find_overdue
from steady.services.resolution_service import list_resolutions


@dataclass
class DashboardData:
    check_in_frequency: CheckInFrequency
    active: List[ResolutionSummary]
    archived: List[ResolutionSummary]
    reminders: List[ReminderBanner]
    latest_summary: Optional[WeeklySummaryPayload]


def summarize_resolution(resolution: Resolution, meta: Optional[LogMeta]) -> ResolutionSummary:
    payload = ResolutionPayload.model_validate(resolution).model_dump()
    return ResolutionSummary(
        **payload,
        last_log_at=meta.last_log_at if meta else None,
        log_count=meta.log_count if meta else 0,
    )


def list_resolution_summaries(db: Session, user_id: UUID) -> List[ResolutionSummary]:
    resolutions = list_resolutions(db, user_id)
    meta = log_meta_by_resolution(db, [resolution.id for resolution in resolutions])
    return [summarize_resolution(resolution, meta.get(resolution.id)) for resolution in resolutions]


def get_dashboard_data(db: Session, user_id: UUID, *, now: datetime) -> DashboardData:
    prefs = get_or_create_preferences(db, user_id)
    frequency = CheckInFrequency(prefs.check_in_frequency)
    summaries = list_resolution_summaries(db, user_id)

    active = [entry for entry in summaries if entry.status is ResolutionStatus.ACTIVE]
    archived = [entry for entry in summaries if entry.status is not ResolutionStatus.ACTIVE]
    overdue = find_overdue(((entry.id, entry.title, entry.last_log_at) for entry in active), frequency, now)

    return DashboardData(
        check_in_frequency=frequency,
        active=active,
        archived=archived,
        reminders=[
            ReminderBanner(resolution_id=item.id, title=item.title, days_since_last_log=item.days_since_last_log)
            for item in overdue
        ],
        latest_summary=next(iter(list_weekly_summaries(db, user_id, limit=1)), None),
    )


def list_weekly_summaries(db: Session, user_id: UUID, *, limit: int = 10) -> List[WeeklySummaryPayload]:
    rows = (
        db.query(WeeklySummary)
        .filter(WeeklySummary.user_id == user_id)
        .order_by(desc(WeeklySummary.created_at))
        .limit(limit)
        .all()
    )
    return [WeeklySummaryPayload.model_validate(row) for row in rows]
