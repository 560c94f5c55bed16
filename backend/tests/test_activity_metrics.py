"""Tests for completion metrics over a calendar window."""
from __future__ import annotations

from datetime import date, datetime

import pytest

from stepwise.scheduling.metrics import ActivityMetrics, compute_metrics, longest_daily_run
from stepwise.scheduling.periods import Period
from stepwise.scheduling.records import TaskRecord

JANUARY = Period(start=date(2025, 1, 1), end=date(2025, 1, 31))
NOW = date(2025, 1, 20)


def _task(day: int | None, done: bool, month: int = 1) -> TaskRecord:
    due = date(2025, month, day) if day is not None else None
    return TaskRecord(title=f"Task {month}-{day}", due_date=due, is_completed=done)


def test_success_rate_ignores_pending_tasks() -> None:
    tasks = [
        _task(2, True),
        _task(3, True),
        _task(4, True),
        _task(10, True),
        _task(5, False),
        _task(12, False),
        _task(25, False),
    ]

    metrics = compute_metrics(tasks, JANUARY, NOW)

    assert metrics.completed == 4
    assert metrics.failed == 2
    assert metrics.success_rate == pytest.approx(4 / 6)


def test_tasks_outside_window_or_undated_are_ignored() -> None:
    tasks = [_task(2, True), _task(2, True, month=2), _task(None, True), _task(None, False)]

    metrics = compute_metrics(tasks, JANUARY, NOW)

    assert metrics.completed == 1
    assert metrics.failed == 0


def test_window_bounds_are_inclusive() -> None:
    metrics = compute_metrics([_task(1, True), _task(31, True)], JANUARY, date(2025, 2, 5))

    assert metrics.completed == 2


def test_task_due_today_is_not_failed_yet() -> None:
    metrics = compute_metrics([_task(20, False)], JANUARY, datetime(2025, 1, 20, 23, 59))

    assert metrics.failed == 0
    assert metrics.success_rate == 0.0


def test_empty_window() -> None:
    assert compute_metrics([], JANUARY, NOW) == ActivityMetrics(0, 0, 0.0, 0)


def test_best_streak_counts_consecutive_fully_completed_days() -> None:
    tasks = [_task(1, True), _task(2, True), _task(3, True), _task(4, False), _task(5, True)]

    assert compute_metrics(tasks, JANUARY, NOW).best_streak_days == 3


def test_day_without_tasks_breaks_a_streak() -> None:
    tasks = [_task(1, True), _task(2, True), _task(3, True), _task(5, True)]

    assert compute_metrics(tasks, JANUARY, NOW).best_streak_days == 3


def test_partially_completed_day_does_not_count() -> None:
    tasks = [_task(6, True), _task(6, False), _task(7, True)]

    assert compute_metrics(tasks, JANUARY, NOW).best_streak_days == 1


def test_success_rate_stays_in_unit_interval() -> None:
    tasks = [_task(day, day % 3 == 0) for day in range(1, 31)]

    metrics = compute_metrics(tasks, JANUARY, NOW)

    assert 0.0 <= metrics.success_rate <= 1.0
    assert metrics.to_dict()["completed"] == metrics.completed


def test_longest_daily_run() -> None:
    assert longest_daily_run([]) == 0
    assert longest_daily_run([date(2025, 1, 1)]) == 1
    assert longest_daily_run([date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 9), date(2025, 1, 10)]) == 2
