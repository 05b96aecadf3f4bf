"""Resolution ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from steady.db.base import Base
from steady.db.enums import ResolutionStatus


class Resolution(Base):
    __tablename__ = "resolutions"
    __table_args__ = (
        Index("ix_resolutions_user_id", "user_id"),
        Index("ix_resolutions_user_status", "user_id", "status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(length=50), nullable=True)
    ai_framing = Column(Text, nullable=True)
    target_date = Column(Date, nullable=True)
    status = Column(
        String(length=50),
        nullable=False,
        default=ResolutionStatus.ACTIVE.value,
        server_default=sa_text("'active'"),
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
