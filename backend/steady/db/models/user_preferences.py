"""User preferences ORM model."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from steady.db.base import Base
from steady.db.enums import CheckInFrequency


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(Text, nullable=True)
    check_in_frequency = Column(
        String(length=20),
        nullable=False,
        default=CheckInFrequency.DAILY.value,
        server_default=sa_text("'daily'"),
    )
    email_checkins_enabled = Column(Boolean, nullable=False, default=True, server_default=sa_text("true"))
    email_summary_enabled = Column(Boolean, nullable=False, default=True, server_default=sa_text("true"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
