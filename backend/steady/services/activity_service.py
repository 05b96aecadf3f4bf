"""Read-only projections over progress logs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from steady.db.models.progress_log import ProgressLog
from steady.db.models.resolution import Resolution
from steady.services.reminders import ensure_aware


@dataclass(frozen=True)
class LogMeta:
    last_log_at: Optional[datetime]
    log_count: int


def log_meta_by_resolution(db: Session, resolution_ids: Iterable[UUID]) -> Dict[UUID, LogMeta]:
    """Latest log timestamp and log count per resolution in a single grouped query."""
    ids = list(resolution_ids)
    if not ids:
        return {}
    rows = (
        db.query(
            ProgressLog.resolution_id,
            func.max(ProgressLog.created_at),
            func.count(ProgressLog.id),
        )
        .filter(ProgressLog.resolution_id.in_(ids))
        .group_by(ProgressLog.resolution_id)
        .all()
    )
    meta = {
        resolution_id: LogMeta(last_log_at=ensure_aware(last) if last else None, log_count=count)
        for resolution_id, last, count in rows
    }
    for resolution_id in ids:
        meta.setdefault(resolution_id, LogMeta(last_log_at=None, log_count=0))
    return meta


def logs_since(db: Session, user_id: UUID, since: datetime) -> List[tuple[ProgressLog, str]]:
    """User's logs created at or after ``since`` with their resolution title, oldest first."""
    return (
        db.query(ProgressLog, Resolution.title)
        .join(Resolution, Resolution.id == ProgressLog.resolution_id)
        .filter(ProgressLog.user_id == user_id, ProgressLog.created_at >= since)
        .order_by(ProgressLog.created_at.asc())
        .all()
    )
