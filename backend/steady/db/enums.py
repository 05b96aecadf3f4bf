"""Enumerations stored as plain strings in the database."""
from __future__ import annotations

from enum import Enum


class CheckInFrequency(str, Enum):
    DAILY = "daily"
    EVERY_3_DAYS = "every_3_days"
    WEEKLY = "weekly"


class ResolutionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class ResolutionCategory(str, Enum):
    HEALTH = "Health"
    FINANCE = "Finance"
    LEARNING = "Learning"
    RELATIONSHIPS = "Relationships"
    CAREER = "Career"
    PERSONAL = "Personal"
