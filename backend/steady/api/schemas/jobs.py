"""Schemas for digest job endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class JobRunRequest(BaseModel):
    job: Literal["checkin", "weekly_summary"]
    user_id: Optional[UUID] = None


class UserOutcomePayload(BaseModel):
    user_id: UUID
    status: Literal["sent", "skipped", "failed"]
    reason: str


class JobRunResponse(BaseModel):
    job: str
    users_considered: int
    sent: int
    skipped: int
    failed: int
    outcomes: List[UserOutcomePayload] = []
    request_id: str
