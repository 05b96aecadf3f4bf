"""Progress log API routes."""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from steady.api.deps import get_now, get_text_generator
from steady.api.schemas.resolution import (
    ProgressLogCreateRequest,
    ProgressLogListResponse,
    ProgressLogPayload,
    ProgressLogResponse,
)
from steady.core.errors import NotFound
from steady.db.deps import get_db
from steady.observability.tracing import annotate, trace
from steady.services.ai_client import TextGenerator
from steady.services.progress_service import create_progress_log, list_logs
from steady.services.resolution_service import get_resolution_for_user

router = APIRouter()


@router.post(
    "/resolutions/{resolution_id}/logs",
    response_model=ProgressLogResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["progress"],
)
def create_progress_log_endpoint(
    resolution_id: UUID,
    payload: ProgressLogCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    generator: Optional[TextGenerator] = Depends(get_text_generator),
    now: datetime = Depends(get_now),
) -> ProgressLogResponse:
    """Record a progress note; AI feedback is attached when the model answers sensibly."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "progress_log.create",
        metadata={"resolution_id": str(resolution_id), "note_length": len(payload.note)},
        user_id=str(payload.user_id),
        request_id=request_id,
    ) as span:
        try:
            log = create_progress_log(
                db,
                user_id=payload.user_id,
                resolution_id=resolution_id,
                note=payload.note,
                generator=generator,
                now=now,
            )
        except NotFound:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resolution not found")
        annotate(span, sentiment=log.ai_sentiment or "none")

    return ProgressLogResponse(log=ProgressLogPayload.model_validate(log), request_id=request_id or "")


@router.get("/resolutions/{resolution_id}/logs", response_model=ProgressLogListResponse, tags=["progress"])
def list_progress_logs_endpoint(
    resolution_id: UUID,
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> ProgressLogListResponse:
    request_id = getattr(http_request.state, "request_id", None)
    try:
        get_resolution_for_user(db, resolution_id, user_id)
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resolution not found")
    logs = list_logs(db, resolution_id)
    return ProgressLogListResponse(
        resolution_id=resolution_id,
        logs=[ProgressLogPayload.model_validate(log) for log in logs],
        request_id=request_id or "",
    )
