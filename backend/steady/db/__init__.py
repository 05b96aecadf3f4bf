"""Database utilities and models."""

from steady.db.base import Base
from steady.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
