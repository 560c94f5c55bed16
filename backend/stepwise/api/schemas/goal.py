"""Schemas for goal creation and breakdown."""
from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from stepwise.api.schemas.activity import DateWindow
from stepwise.api.schemas.task import TaskSummary


class GoalCreateRequest(BaseModel):
    user_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    deadline: Optional[date] = None

    @field_validator("title")
    @classmethod
    def trim_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("title must not be blank")
        return cleaned

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class GoalSummary(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str]
    deadline: Optional[date]
    tasks_total: int
    tasks_completed: int
    completion_rate: float


class GoalResponse(GoalSummary):
    request_id: str


class BreakdownRequest(BaseModel):
    user_id: UUID
    today: Optional[date] = Field(default=None, description="Override for the first schedulable day.")


class BreakdownResponse(BaseModel):
    goal_id: UUID
    chat_reply: str
    window: DateWindow
    fallback_used: bool
    tasks: List[TaskSummary]
    request_id: str
