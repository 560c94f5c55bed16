"""Completion metrics for a calendar window."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List

from stepwise.scheduling.periods import Period
from stepwise.scheduling.records import TaskRecord, as_day


@dataclass(frozen=True)
class ActivityMetrics:
    completed: int = 0
    failed: int = 0
    success_rate: float = 0.0
    best_streak_days: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def fully_completed_days(tasks: Iterable[TaskRecord]) -> List[date]:
    """Sorted days on which every task due that day is completed."""
    by_day: Dict[date, List[bool]] = defaultdict(list)
    for task in tasks:
        if task.due_date is not None:
            by_day[task.due_date].append(task.is_completed)
    return sorted(day for day, states in by_day.items() if all(states))


def longest_daily_run(days: List[date]) -> int:
    """Length of the longest run of consecutive calendar days in a sorted list."""
    best = 0
    current = 0
    previous: date | None = None
    for day in days:
        if previous is not None and day == previous + timedelta(days=1):
            current += 1
        else:
            current = 1
        best = max(best, current)
        previous = day
    return max(best, current)


def compute_metrics(tasks: Iterable[TaskRecord], period: Period, now: date | datetime) -> ActivityMetrics:
    """
    Summarise the tasks due inside ``period`` as seen on ``now``.

    Completed tasks count as successes. Incomplete tasks count as failures
    only once their due day is strictly before ``now``'s day; anything still
    pending is left out of the success rate. The best streak counts
    consecutive calendar days on which every due task was completed.
    """
    today = as_day(now)
    in_range = [task for task in tasks if task.due_date is not None and period.contains(task.due_date)]

    completed = sum(1 for task in in_range if task.is_completed)
    failed = sum(1 for task in in_range if not task.is_completed and task.due_date < today)
    success_rate = completed / max(1, completed + failed)

    return ActivityMetrics(
        completed=completed,
        failed=failed,
        success_rate=success_rate,
        best_streak_days=longest_daily_run(fully_completed_days(in_range)),
    )
