"""ORM models exposed for metadata discovery."""
from steady.db.models.progress_log import ProgressLog
from steady.db.models.resolution import Resolution
from steady.db.models.user import User
from steady.db.models.user_preferences import UserPreferences
from steady.db.models.weekly_summary import WeeklySummary

__all__ = [
    "ProgressLog",
    "Resolution",
    "User",
    "UserPreferences",
    "WeeklySummary",
]
