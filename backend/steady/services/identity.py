"""Resolve a deliverable email address for a user."""
from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from steady.db.models.user import User


class IdentityResolver(Protocol):
    def resolve_email(self, user_id: UUID) -> Optional[str]:
        ...


class DatabaseIdentityResolver:
    """Reads the address mirrored onto ``users.email`` by the auth provider."""

    def __init__(self, db: Session):
        self._db = db

    def resolve_email(self, user_id: UUID) -> Optional[str]:
        user = self._db.get(User, user_id)
        if not user or not user.email:
            return None
        email = user.email.strip()
        return email or None
