"""Helpers for working with users."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from steady.db.models.user import User


def get_or_create_user(db: Session, user_id: UUID, *, email: Optional[str] = None) -> User:
    """Fetch an existing user or create a new row safely; backfills a missing email."""
    user = db.get(User, user_id)
    if user:
        if email and not user.email:
            user.email = email
        return user

    user = User(id=user_id, email=email)
    db.add(user)
    try:
        db.flush()
        return user
    except IntegrityError:
        db.rollback()
        existing = db.get(User, user_id)
        if existing:
            return existing
        raise
