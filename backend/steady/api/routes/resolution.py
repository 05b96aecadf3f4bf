"""Resolution API routes."""
from __future__ import annotations

from time import perf_counter
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from steady.api.deps import get_text_generator
from steady.api.schemas.resolution import (
    ResolutionCreateRequest,
    ResolutionDetailResponse,
    ResolutionListResponse,
    ResolutionPayload,
    ResolutionResponse,
    ResolutionStatusUpdateRequest,
    ProgressLogPayload,
)
from steady.core.errors import NotFound
from steady.db.deps import get_db
from steady.observability.metrics import log_metric
from steady.observability.tracing import annotate, trace
from steady.services.activity_service import log_meta_by_resolution
from steady.services.ai_client import TextGenerator
from steady.services.dashboard_service import list_resolution_summaries, summarize_resolution
from steady.services.progress_service import list_logs
from steady.services.resolution_service import (
    create_resolution,
    get_resolution_for_user,
    update_resolution_status,
)

router = APIRouter()


@router.post("/resolutions", response_model=ResolutionResponse, status_code=status.HTTP_201_CREATED, tags=["resolutions"])
def create_resolution_endpoint(
    payload: ResolutionCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    generator: Optional[TextGenerator] = Depends(get_text_generator),
) -> ResolutionResponse:
    """Store a new resolution, with an AI category suggestion when available."""
    request_id = getattr(http_request.state, "request_id", None)
    start = perf_counter()
    success = False
    try:
        with trace(
            "resolution.create",
            metadata={"route": "/resolutions", "title_length": len(payload.title)},
            user_id=str(payload.user_id),
            request_id=request_id,
        ) as span:
            try:
                resolution = create_resolution(
                    db,
                    user_id=payload.user_id,
                    title=payload.title,
                    description=payload.description,
                    target_date=payload.target_date,
                    generator=generator,
                )
            except IntegrityError as exc:
                db.rollback()
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Failed to save resolution",
                ) from exc
            success = True
            annotate(span, category=resolution.category or "none")
    finally:
        metadata = {"user_id": str(payload.user_id)}
        log_metric("resolution.create.success", 1 if success else 0, metadata=metadata)
        log_metric("resolution.create.latency_ms", (perf_counter() - start) * 1000, metadata=metadata)

    return ResolutionResponse(
        resolution=ResolutionPayload.model_validate(resolution),
        request_id=request_id or "",
    )


@router.get("/resolutions", response_model=ResolutionListResponse, tags=["resolutions"])
def list_resolutions_endpoint(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> ResolutionListResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("resolution.list", user_id=str(user_id), request_id=request_id):
        entries = list_resolution_summaries(db, user_id)
    return ResolutionListResponse(user_id=user_id, resolutions=entries, request_id=request_id or "")


@router.get("/resolutions/{resolution_id}", response_model=ResolutionDetailResponse, tags=["resolutions"])
def get_resolution_endpoint(
    resolution_id: UUID,
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> ResolutionDetailResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("resolution.get", metadata={"resolution_id": str(resolution_id)}, user_id=str(user_id), request_id=request_id):
        try:
            resolution = get_resolution_for_user(db, resolution_id, user_id)
        except NotFound:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resolution not found")
        meta = log_meta_by_resolution(db, [resolution.id])
        logs = list_logs(db, resolution.id)

    return ResolutionDetailResponse(
        resolution=summarize_resolution(resolution, meta.get(resolution.id)),
        logs=[ProgressLogPayload.model_validate(log) for log in logs],
        request_id=request_id or "",
    )


@router.patch("/resolutions/{resolution_id}/status", response_model=ResolutionResponse, tags=["resolutions"])
def update_resolution_status_endpoint(
    resolution_id: UUID,
    payload: ResolutionStatusUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> ResolutionResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "resolution.update_status",
        metadata={"resolution_id": str(resolution_id), "status": payload.status.value},
        user_id=str(payload.user_id),
        request_id=request_id,
    ):
        try:
            resolution = update_resolution_status(
                db,
                resolution_id=resolution_id,
                user_id=payload.user_id,
                status=payload.status,
            )
        except NotFound:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resolution not found")

    log_metric("resolution.status_changed", 1, metadata={"status": resolution.status})
    return ResolutionResponse(
        resolution=ResolutionPayload.model_validate(resolution),
        request_id=request_id or "",
    )
