"""Reminder-due policy for resolutions that have gone quiet."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from steady.db.enums import CheckInFrequency

THRESHOLD_HOURS = {
    CheckInFrequency.DAILY: 24,
    CheckInFrequency.EVERY_3_DAYS: 72,
    CheckInFrequency.WEEKLY: 168,
}


@dataclass(frozen=True)
class OverdueItem:
    id: UUID
    title: str
    days_since_last_log: Optional[int]


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps (SQLite round-trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def needs_reminder(
    last_activity_at: Optional[datetime],
    frequency: CheckInFrequency | str,
    now: datetime,
) -> bool:
    """Return True when no log exists or the threshold for ``frequency`` has elapsed (inclusive)."""
    if last_activity_at is None:
        return True
    threshold = timedelta(hours=THRESHOLD_HOURS[CheckInFrequency(frequency)])
    return ensure_aware(now) - ensure_aware(last_activity_at) >= threshold


def days_since(last_activity_at: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole days elapsed since the last log, or None when never logged."""
    if last_activity_at is None:
        return None
    elapsed = ensure_aware(now) - ensure_aware(last_activity_at)
    return max(0, elapsed // timedelta(days=1))


def find_overdue(
    items: Iterable[Tuple[UUID, str, Optional[datetime]]],
    frequency: CheckInFrequency | str,
    now: datetime,
) -> List[OverdueItem]:
    """Project ``(id, title, last_activity_at)`` triples to the overdue subset, preserving order."""
    overdue: List[OverdueItem] = []
    for item_id, title, last_activity_at in items:
        if needs_reminder(last_activity_at, frequency, now):
            overdue.append(
                OverdueItem(id=item_id, title=title, days_since_last_log=days_since(last_activity_at, now))
            )
    return overdue
