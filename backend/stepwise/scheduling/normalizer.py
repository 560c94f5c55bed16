"""Clamp generated tasks into a date window and enforce a per-day cap."""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Sequence

from stepwise.scheduling.duration import format_duration_minutes, parse_duration_minutes
from stepwise.scheduling.records import TaskRecord, as_day

logger = logging.getLogger(__name__)

BUNDLE_PREFIX = "Bundle: "
BUNDLE_SEPARATOR = "; "
DEFAULT_TASK_MINUTES = 30


def clamp_day(day: date, window_start: date, window_end: date) -> date:
    return min(max(day, window_start), window_end)


def bundle_tasks(tasks: Sequence[TaskRecord], day: date, *, default_minutes: int = DEFAULT_TASK_MINUTES) -> TaskRecord:
    """
    Merge ``tasks`` into one synthetic entry due on ``day``.

    The bundle's duration is the sum of the parsed durations, counting
    ``default_minutes`` for every task whose duration is missing or unreadable.
    """
    total = 0
    for task in tasks:
        minutes = parse_duration_minutes(task.estimated_duration)
        total += default_minutes if minutes is None else minutes

    return TaskRecord(
        title=BUNDLE_PREFIX + BUNDLE_SEPARATOR.join(task.title for task in tasks),
        due_date=day,
        is_completed=False,
        estimated_duration=format_duration_minutes(total),
        is_bundle=True,
    )


def normalize_tasks(
    tasks: Iterable[TaskRecord],
    window_start: date | datetime,
    window_end: date | datetime,
    max_per_day: int,
    *,
    default_minutes: int = DEFAULT_TASK_MINUTES,
) -> List[TaskRecord]:
    """
    Return a schedule where every task is due inside the window and no day is over capacity.

    Missing due dates move to ``window_end``; dates outside the window snap to
    the nearest edge. Every task is reset to not completed. A day holding more
    than ``max_per_day`` tasks keeps its first ``max_per_day - 1`` tasks in
    input order and folds the rest into a single bundle. The result is sorted
    by due date, then title.
    """
    if max_per_day < 1:
        raise ValueError("max_per_day must be at least 1")
    start = as_day(window_start)
    end = as_day(window_end)
    if end < start:
        raise ValueError("window_end must not precede window_start")

    by_day: Dict[date, List[TaskRecord]] = defaultdict(list)
    for task in tasks:
        due = end if task.due_date is None else clamp_day(task.due_date, start, end)
        by_day[due].append(task.model_copy(update={"due_date": due, "is_completed": False}))

    keep_count = max_per_day - 1
    scheduled: List[TaskRecord] = []
    bundles = 0
    for day in sorted(by_day):
        day_tasks = by_day[day]
        if len(day_tasks) <= max_per_day:
            scheduled.extend(day_tasks)
            continue
        scheduled.extend(day_tasks[:keep_count])
        scheduled.append(bundle_tasks(day_tasks[keep_count:], day, default_minutes=default_minutes))
        bundles += 1

    if bundles:
        logger.debug("Folded overflow into %d bundle(s) across %d day(s)", bundles, len(by_day))

    scheduled.sort(key=lambda task: (task.due_date, task.title))
    return scheduled
