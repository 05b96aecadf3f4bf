"""Read and update per-user reminder preferences."""
from __future__ import annotations

import logging
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.orm import Session

from steady.core.errors import NotFound
from steady.db.enums import CheckInFrequency
from steady.db.models.user_preferences import UserPreferences
from steady.services.user_service import get_or_create_user

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "check_in_frequency", "email_checkins_enabled", "email_summary_enabled")


def get_or_create_preferences(db: Session, user_id: UUID) -> UserPreferences:
    """Return the preferences row, creating one with defaults (and the user) on first access."""
    prefs = db.get(UserPreferences, user_id)
    if prefs:
        return prefs
    get_or_create_user(db, user_id)
    prefs = UserPreferences(
        user_id=user_id,
        check_in_frequency=CheckInFrequency.DAILY.value,
        email_checkins_enabled=True,
        email_summary_enabled=True,
    )
    db.add(prefs)
    db.commit()
    db.refresh(prefs)
    return prefs


def update_preferences(db: Session, user_id: UUID, changes: Dict[str, Any]) -> UserPreferences:
    """Apply a partial update; raises ``NotFound`` when the user has no preferences row."""
    prefs = db.get(UserPreferences, user_id)
    if not prefs:
        raise NotFound("preferences", user_id)

    for field in UPDATABLE_FIELDS:
        if field not in changes or changes[field] is None:
            continue
        value = changes[field]
        if isinstance(value, CheckInFrequency):
            value = value.value
        setattr(prefs, field, value)

    db.commit()
    db.refresh(prefs)
    logger.info("Updated preferences for user %s (%s)", user_id, ", ".join(sorted(changes)))
    return prefs
