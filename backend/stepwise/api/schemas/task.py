"""Schemas for task listing and completion."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class TaskSummary(BaseModel):
    id: UUID
    goal_id: Optional[UUID]
    title: str
    due_date: Optional[date]
    estimated_duration: Optional[str]
    completed: bool
    completed_at: Optional[datetime]
    is_bundle: bool


class TaskUpdateRequest(BaseModel):
    user_id: UUID
    completed: bool


class TaskUpdateResponse(BaseModel):
    id: UUID
    completed: bool
    completed_at: Optional[datetime]
    request_id: str
