"""Schemas for dashboard and weekly summary endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from steady.api.schemas.resolution import ResolutionSummary
from steady.db.enums import CheckInFrequency


class ReminderBanner(BaseModel):
    resolution_id: UUID
    title: str
    days_since_last_log: Optional[int]


class WeeklySummaryPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    summary: str
    created_at: datetime


class DashboardResponse(BaseModel):
    user_id: UUID
    check_in_frequency: CheckInFrequency
    active_resolutions: List[ResolutionSummary]
    archived_resolutions: List[ResolutionSummary]
    reminders: List[ReminderBanner]
    latest_weekly_summary: Optional[WeeklySummaryPayload]
    request_id: str


class WeeklySummaryListResponse(BaseModel):
    user_id: UUID
    summaries: List[WeeklySummaryPayload]
    request_id: str
