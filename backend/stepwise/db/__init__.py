"""Database utilities and models."""

from stepwise.db.base import Base
from stepwise.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
