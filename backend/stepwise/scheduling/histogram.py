"""Completed-task counts bucketed by week or month."""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List

from stepwise.scheduling.periods import PeriodType, period_start, periods_between, shift_period
from stepwise.scheduling.records import TaskRecord


@dataclass(frozen=True)
class Histogram:
    """Index 0 is the oldest bucket; the last one holds the anchor period."""

    period_type: PeriodType
    starts: List[date] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    @property
    def highest(self) -> int:
        return max(self.counts, default=0)


def bucket_label(period_type: PeriodType, start: date) -> str:
    """Week buckets read "Mar 3", month buckets "Mar 2025"."""
    month = calendar.month_abbr[start.month]
    if period_type is PeriodType.WEEK:
        return f"{month} {start.day}"
    return f"{month} {start.year}"


def build_histogram(
    tasks: Iterable[TaskRecord],
    period_type: PeriodType | str,
    count: int,
    until: date | datetime,
    *,
    week_start: int = calendar.MONDAY,
) -> Histogram:
    """
    Count completed tasks per period for the ``count`` periods ending with ``until``'s.

    Completed tasks older than the first bucket land in bucket 0 and those
    newer than the last land in the last bucket. Tasks without a due date are
    ignored.
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    kind = PeriodType(period_type)
    first = shift_period(kind, period_start(kind, until, week_start=week_start), -(count - 1))

    counts = [0] * count
    for task in tasks:
        if not task.is_completed or task.due_date is None:
            continue
        index = periods_between(kind, first, task.due_date)
        counts[min(max(index, 0), count - 1)] += 1

    starts = [shift_period(kind, first, index) for index in range(count)]
    return Histogram(
        period_type=kind,
        starts=starts,
        counts=counts,
        labels=[bucket_label(kind, start) for start in starts],
    )
