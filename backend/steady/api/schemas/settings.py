"""Schemas for the reminder settings API."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from steady.db.enums import CheckInFrequency


class SettingsPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    name: Optional[str]
    check_in_frequency: CheckInFrequency
    email_checkins_enabled: bool
    email_summary_enabled: bool


class SettingsUpdateRequest(BaseModel):
    user_id: UUID
    name: Optional[str] = Field(default=None, max_length=120)
    check_in_frequency: Optional[CheckInFrequency] = None
    email_checkins_enabled: Optional[bool] = None
    email_summary_enabled: Optional[bool] = None


class SettingsResponse(BaseModel):
    settings: SettingsPayload
    request_id: str
