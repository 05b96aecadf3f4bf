"""Schemas for resolution and progress log APIs."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from steady.db.enums import ResolutionCategory, ResolutionStatus, Sentiment


class ResolutionCreateRequest(BaseModel):
    user_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    target_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def trim_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("title must not be blank")
        return cleaned

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class ResolutionStatusUpdateRequest(BaseModel):
    user_id: UUID
    status: ResolutionStatus


class ResolutionPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: Optional[str]
    category: Optional[ResolutionCategory]
    ai_framing: Optional[str]
    target_date: Optional[date]
    status: ResolutionStatus
    created_at: datetime


class ResolutionSummary(ResolutionPayload):
    last_log_at: Optional[datetime] = None
    log_count: int = 0


class ResolutionResponse(BaseModel):
    resolution: ResolutionPayload
    request_id: str


class ResolutionListResponse(BaseModel):
    user_id: UUID
    resolutions: List[ResolutionSummary]
    request_id: str


class ProgressLogCreateRequest(BaseModel):
    user_id: UUID
    note: str = Field(..., min_length=1, max_length=2000)

    @field_validator("note")
    @classmethod
    def trim_note(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("note must not be blank")
        return cleaned


class ProgressLogPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    resolution_id: UUID
    note: str
    ai_sentiment: Optional[Sentiment]
    ai_progress_estimate: Optional[int]
    ai_feedback: Optional[str]
    created_at: datetime


class ProgressLogResponse(BaseModel):
    log: ProgressLogPayload
    request_id: str


class ProgressLogListResponse(BaseModel):
    resolution_id: UUID
    logs: List[ProgressLogPayload]
    request_id: str


class ResolutionDetailResponse(BaseModel):
    resolution: ResolutionSummary
    logs: List[ProgressLogPayload]
    request_id: str
