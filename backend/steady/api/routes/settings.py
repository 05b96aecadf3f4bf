"""Reminder settings API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from steady.api.schemas.settings import SettingsPayload, SettingsResponse, SettingsUpdateRequest
from steady.core.errors import NotFound
from steady.db.deps import get_db
from steady.observability.metrics import log_metric
from steady.observability.tracing import trace
from steady.services.preferences_service import get_or_create_preferences, update_preferences

router = APIRouter()


@router.get("/settings", response_model=SettingsResponse, tags=["settings"])
def get_settings_endpoint(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> SettingsResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("settings.get", user_id=str(user_id), request_id=request_id):
        prefs = get_or_create_preferences(db, user_id)
    return SettingsResponse(settings=SettingsPayload.model_validate(prefs), request_id=request_id or "")


@router.put("/settings", response_model=SettingsResponse, tags=["settings"])
def update_settings_endpoint(
    payload: SettingsUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> SettingsResponse:
    request_id = getattr(http_request.state, "request_id", None)
    changes = payload.model_dump(exclude={"user_id"}, exclude_unset=True)
    with trace("settings.update", metadata={"fields": sorted(changes)}, user_id=str(payload.user_id), request_id=request_id):
        try:
            prefs = update_preferences(db, payload.user_id, changes)
        except NotFound:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings not found for user")

    log_metric("settings.update.success", 1, metadata={"fields": ",".join(sorted(changes))})
    return SettingsResponse(settings=SettingsPayload.model_validate(prefs), request_id=request_id or "")
