"""Resolution lifecycle: creation with AI category suggestion, listing, status changes."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from steady.core.errors import DeliveryFailure, MalformedResponse, NotFound
from steady.db.enums import ResolutionStatus
from steady.db.models.resolution import Resolution
from steady.observability.metrics import log_metric
from steady.services.ai_client import TextGenerator
from steady.services.ai_coach import suggest_category
from steady.services.ai_normalizer import CategoryResult
from steady.services.user_service import get_or_create_user

logger = logging.getLogger(__name__)


def create_resolution(
    db: Session,
    *,
    user_id: UUID,
    title: str,
    description: Optional[str],
    target_date: Optional[date],
    generator: Optional[TextGenerator],
) -> Resolution:
    """Persist a new active resolution; the AI suggestion never blocks creation."""
    get_or_create_user(db, user_id)
    suggestion = _suggest_category_best_effort(generator, title=title, description=description)

    resolution = Resolution(
        user_id=user_id,
        title=title,
        description=description or None,
        category=suggestion.category.value if suggestion and suggestion.category else None,
        ai_framing=(suggestion.framing or None) if suggestion else None,
        target_date=target_date,
        status=ResolutionStatus.ACTIVE.value,
    )
    db.add(resolution)
    db.commit()
    db.refresh(resolution)
    return resolution


def list_resolutions(db: Session, user_id: UUID) -> List[Resolution]:
    return (
        db.query(Resolution)
        .filter(Resolution.user_id == user_id)
        .order_by(desc(Resolution.created_at))
        .all()
    )


def active_resolutions(db: Session, user_id: UUID) -> List[Resolution]:
    return (
        db.query(Resolution)
        .filter(Resolution.user_id == user_id, Resolution.status == ResolutionStatus.ACTIVE.value)
        .order_by(Resolution.created_at.asc())
        .all()
    )


def get_resolution_for_user(db: Session, resolution_id: UUID, user_id: UUID) -> Resolution:
    """Fetch a resolution scoped to its owner; a foreign row is reported as missing."""
    resolution = db.get(Resolution, resolution_id)
    if not resolution or resolution.user_id != user_id:
        raise NotFound("resolution", resolution_id)
    return resolution


def update_resolution_status(
    db: Session,
    *,
    resolution_id: UUID,
    user_id: UUID,
    status: ResolutionStatus,
) -> Resolution:
    resolution = get_resolution_for_user(db, resolution_id, user_id)
    previous = resolution.status
    resolution.status = ResolutionStatus(status).value
    db.commit()
    db.refresh(resolution)
    logger.info("Resolution %s status %s -> %s", resolution_id, previous, resolution.status)
    return resolution


def _suggest_category_best_effort(
    generator: Optional[TextGenerator],
    *,
    title: str,
    description: Optional[str],
) -> Optional[CategoryResult]:
    if generator is None:
        return None
    try:
        suggestion = suggest_category(generator, title=title, description=description)
    except MalformedResponse as exc:
        logger.warning("Category suggestion was not a JSON object: %s", exc)
        log_metric("ai.category.malformed", 1)
        return None
    except DeliveryFailure as exc:
        logger.warning("Category suggestion unavailable: %s", exc)
        log_metric("ai.category.failed", 1)
        return None
    log_metric("ai.category.success", 1, metadata={"category": suggestion.category.value if suggestion.category else None})
    return suggestion
