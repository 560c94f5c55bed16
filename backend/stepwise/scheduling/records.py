"""Validated task record shared by the scheduler and analytics."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_day(value: date | datetime) -> date:
    """Return the calendar day of a date or (naive or aware) datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


class TaskRecord(BaseModel):
    """
    One dated unit of work.

    Accepts the camelCase keys emitted by the breakdown model (``dueDate``,
    ``isCompleted``, ``estimatedDuration``) as well as the field names.
    Records are immutable; transformations return copies.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    title: str = Field(..., min_length=1)
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    is_completed: bool = Field(default=False, alias="isCompleted")
    estimated_duration: Optional[str] = Field(default=None, alias="estimatedDuration")
    is_bundle: bool = Field(default=False, alias="isBundle")

    @field_validator("due_date", mode="before")
    @classmethod
    def truncate_to_day(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            # "2025-10-25T09:00:00Z" -> "2025-10-25"
            return value.strip().split("T")[0].split(" ")[0]
        return value

    @field_validator("estimated_duration", mode="before")
    @classmethod
    def blank_duration_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def completion_rate(tasks: Iterable[TaskRecord]) -> float:
    """Share of completed tasks; 0.0 for an empty collection."""
    items = list(tasks)
    if not items:
        return 0.0
    done = sum(1 for task in items if task.is_completed)
    return done / len(items)
