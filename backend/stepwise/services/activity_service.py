"""Activity analytics over a user's stored tasks."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from stepwise.scheduling import (
    ActivityMetrics,
    Histogram,
    Period,
    PeriodType,
    TaskRecord,
    build_histogram,
    compute_metrics,
    period_title,
    range_label,
    resolve_date_range,
)
from stepwise.services.task_service import load_task_records


@dataclass
class ActivitySummary:
    period_type: PeriodType
    offset: int
    title: str
    period: Period
    range_label: str
    metrics: ActivityMetrics


def summarize_activity(
    records: List[TaskRecord],
    *,
    period_type: PeriodType,
    offset: int,
    today: date,
    week_start: int,
) -> ActivitySummary:
    period = resolve_date_range(period_type, offset, today, week_start=week_start)
    return ActivitySummary(
        period_type=period_type,
        offset=offset,
        title=period_title(period_type, offset),
        period=period,
        range_label=range_label(period),
        metrics=compute_metrics(records, period, today),
    )


def get_activity_summary(
    db: Session,
    user_id: UUID,
    *,
    period_type: PeriodType,
    offset: int,
    today: date,
    week_start: int,
) -> ActivitySummary:
    """Metrics for the selected week/month of a user, judged as of ``today``."""
    records = load_task_records(db, user_id)
    return summarize_activity(records, period_type=period_type, offset=offset, today=today, week_start=week_start)


def get_activity_histogram(
    db: Session,
    user_id: UUID,
    *,
    period_type: PeriodType,
    count: int,
    until: date,
    week_start: int,
) -> Histogram:
    records = load_task_records(db, user_id)
    return build_histogram(records, period_type, count, until, week_start=week_start)
