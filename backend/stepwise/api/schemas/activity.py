"""Schemas for activity analytics endpoints."""
from __future__ import annotations

from datetime import date
from typing import List, Literal
from uuid import UUID

from pydantic import BaseModel, Field


class DateWindow(BaseModel):
    start: date
    end: date


class ActivityMetricsPayload(BaseModel):
    completed: int
    failed: int
    success_rate: float = Field(..., ge=0, le=1)
    best_streak_days: int


class ActivityMetricsResponse(BaseModel):
    user_id: UUID
    period: Literal["week", "month"]
    offset: int
    title: str
    window: DateWindow
    range_label: str
    metrics: ActivityMetricsPayload
    request_id: str


class ActivityHistogramResponse(BaseModel):
    user_id: UUID
    period: Literal["week", "month"]
    starts: List[date]
    counts: List[int]
    labels: List[str]
    highest: int
    request_id: str
