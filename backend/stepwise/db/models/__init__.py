"""ORM models exposed for metadata discovery."""
from stepwise.db.models.goal import Goal
from stepwise.db.models.task import Task
from stepwise.db.models.user import User

__all__ = [
    "Goal",
    "Task",
    "User",
]
