"""Progress log ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from steady.db.base import Base


class ProgressLog(Base):
    __tablename__ = "progress_logs"
    __table_args__ = (
        Index("ix_progress_logs_resolution_created", "resolution_id", "created_at"),
        Index("ix_progress_logs_user_created", "user_id", "created_at"),
        CheckConstraint(
            "ai_progress_estimate IS NULL OR (ai_progress_estimate >= 0 AND ai_progress_estimate <= 100)",
            name="ck_progress_logs_estimate_range",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    resolution_id = Column(
        UUID(as_uuid=True),
        ForeignKey("resolutions.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    note = Column(Text, nullable=False)
    ai_sentiment = Column(String(length=20), nullable=True)
    ai_progress_estimate = Column(Integer, nullable=True)
    ai_feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
