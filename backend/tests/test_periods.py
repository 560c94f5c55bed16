"""Tests for calendar-aligned week and month windows."""
from __future__ import annotations

import calendar
from datetime import date, datetime

import pytest

from stepwise.scheduling.periods import (
    Period,
    PeriodType,
    period_title,
    periods_between,
    range_label,
    resolve_date_range,
)

# 2025-01-01 is a Wednesday.
WEDNESDAY = date(2025, 1, 1)


def test_current_week_starts_on_monday_by_default() -> None:
    period = resolve_date_range(PeriodType.WEEK, 0, WEDNESDAY)

    assert period == Period(start=date(2024, 12, 30), end=date(2025, 1, 5))
    assert period.days == 7


def test_week_start_is_configurable() -> None:
    period = resolve_date_range("week", 0, WEDNESDAY, week_start=calendar.SUNDAY)

    assert period.start == date(2024, 12, 29)
    assert period.end == date(2025, 1, 4)


def test_anchor_on_first_day_of_week_is_its_own_start() -> None:
    assert resolve_date_range("week", 0, date(2024, 12, 30)).start == date(2024, 12, 30)


@pytest.mark.parametrize(
    "offset, start, end",
    [
        (-1, date(2024, 12, 23), date(2024, 12, 29)),
        (-4, date(2024, 12, 2), date(2024, 12, 8)),
        (1, date(2025, 1, 6), date(2025, 1, 12)),
    ],
)
def test_week_offsets(offset: int, start: date, end: date) -> None:
    assert resolve_date_range("week", offset, WEDNESDAY) == Period(start=start, end=end)


@pytest.mark.parametrize(
    "anchor, offset, start, end",
    [
        (date(2025, 3, 15), 0, date(2025, 3, 1), date(2025, 3, 31)),
        (date(2025, 3, 15), -1, date(2025, 2, 1), date(2025, 2, 28)),
        (date(2024, 3, 10), -1, date(2024, 2, 1), date(2024, 2, 29)),
        (date(2025, 2, 10), -3, date(2024, 11, 1), date(2024, 11, 30)),
        (date(2025, 12, 5), 1, date(2026, 1, 1), date(2026, 1, 31)),
    ],
)
def test_month_windows(anchor: date, offset: int, start: date, end: date) -> None:
    assert resolve_date_range(PeriodType.MONTH, offset, anchor) == Period(start=start, end=end)


def test_datetime_anchor_uses_its_calendar_day() -> None:
    assert resolve_date_range("week", 0, datetime(2025, 1, 5, 23, 59)) == resolve_date_range(
        "week", 0, date(2025, 1, 5)
    )


def test_unknown_period_type_is_rejected() -> None:
    with pytest.raises(ValueError):
        resolve_date_range("year", 0, WEDNESDAY)


def test_window_end_covers_the_whole_last_day() -> None:
    period = Period(start=date(2024, 12, 30), end=date(2025, 1, 5))

    assert period.ends_at == datetime(2025, 1, 5, 23, 59, 59, 999999)
    assert period.starts_at == datetime(2024, 12, 30)
    assert period.contains(datetime(2025, 1, 5, 23, 0))
    assert not period.contains(date(2025, 1, 6))


def test_periods_between() -> None:
    start = date(2024, 12, 30)

    assert periods_between("week", start, date(2025, 1, 5)) == 0
    assert periods_between("week", start, date(2025, 1, 6)) == 1
    assert periods_between("week", start, date(2024, 12, 29)) == -1
    assert periods_between("month", date(2024, 11, 1), date(2025, 2, 28)) == 3


@pytest.mark.parametrize(
    "kind, offset, expected",
    [
        ("week", 0, "This week"),
        ("week", -2, "2 week(s) ago"),
        ("month", -1, "1 month(s) ago"),
        ("month", 3, "In 3 month(s)"),
    ],
)
def test_period_title(kind: str, offset: int, expected: str) -> None:
    assert period_title(kind, offset) == expected


def test_range_label() -> None:
    assert range_label(Period(start=date(2025, 1, 5), end=date(2025, 1, 11))) == "Jan 5 - Jan 11"
    assert range_label(Period(start=date(2024, 12, 30), end=date(2025, 1, 5))) == "Dec 30 - Jan 5"
