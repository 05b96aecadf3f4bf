"""Progress log creation with best-effort AI enrichment."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from steady.core.errors import DeliveryFailure, MalformedResponse
from steady.db.models.progress_log import ProgressLog
from steady.observability.metrics import log_metric
from steady.services.ai_client import TextGenerator
from steady.services.ai_coach import RECENT_LOG_CONTEXT, LogContext, enrich_progress_log
from steady.services.ai_normalizer import EnrichmentResult
from steady.services.reminders import ensure_aware
from steady.services.resolution_service import get_resolution_for_user

logger = logging.getLogger(__name__)


def create_progress_log(
    db: Session,
    *,
    user_id: UUID,
    resolution_id: UUID,
    note: str,
    generator: Optional[TextGenerator],
    now: datetime,
) -> ProgressLog:
    """Store a note against an owned resolution; AI annotations are left empty if enrichment fails."""
    resolution = get_resolution_for_user(db, resolution_id, user_id)
    recent = list_logs(db, resolution_id, limit=RECENT_LOG_CONTEXT)

    enrichment: Optional[EnrichmentResult] = None
    if generator is not None:
        try:
            enrichment = enrich_progress_log(
                generator,
                resolution_title=resolution.title,
                resolution_description=resolution.description,
                recent_logs=[LogContext(note=log.note, created_at=ensure_aware(log.created_at)) for log in reversed(recent)],
                new_note=note,
            )
        except MalformedResponse as exc:
            logger.warning("Enrichment for resolution %s was not a JSON object: %s", resolution_id, exc)
            log_metric("ai.enrichment.malformed", 1)
        except DeliveryFailure as exc:
            logger.warning("Enrichment for resolution %s unavailable: %s", resolution_id, exc)
            log_metric("ai.enrichment.failed", 1)

    log = ProgressLog(
        resolution_id=resolution.id,
        user_id=user_id,
        note=note,
        ai_sentiment=enrichment.sentiment.value if enrichment else None,
        ai_progress_estimate=enrichment.progress_estimate if enrichment else None,
        ai_feedback=enrichment.feedback if enrichment else None,
        created_at=now,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    log_metric("progress_log.created", 1, metadata={"enriched": enrichment is not None})
    return log


def list_logs(db: Session, resolution_id: UUID, *, limit: Optional[int] = None) -> List[ProgressLog]:
    """Logs for a resolution, newest first."""
    query = (
        db.query(ProgressLog)
        .filter(ProgressLog.resolution_id == resolution_id)
        .order_by(desc(ProgressLog.created_at))
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()
