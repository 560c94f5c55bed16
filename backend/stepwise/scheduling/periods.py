"""Calendar-aligned week and month windows."""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta

from stepwise.scheduling.records import as_day


class PeriodType(str, Enum):
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class Period:
    """Inclusive calendar window; ``end`` is never before ``start``."""

    start: date
    end: date

    def contains(self, day: date | datetime) -> bool:
        return self.start <= as_day(day) <= self.end

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.start, time.min)

    @property
    def ends_at(self) -> datetime:
        """Last instant of the final day."""
        return datetime.combine(self.end, time.max)

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


def _coerce_period_type(period_type: PeriodType | str) -> PeriodType:
    try:
        return PeriodType(period_type)
    except ValueError:
        raise ValueError(f"Unknown period type: {period_type!r}") from None


def period_start(period_type: PeriodType | str, day: date | datetime, *, week_start: int = calendar.MONDAY) -> date:
    """First day of the week or month containing ``day``."""
    kind = _coerce_period_type(period_type)
    current = as_day(day)
    if kind is PeriodType.WEEK:
        return current - timedelta(days=(current.weekday() - week_start) % 7)
    return current.replace(day=1)


def shift_period(period_type: PeriodType | str, start: date, offset: int) -> date:
    """Move a period start by ``offset`` whole weeks or months."""
    kind = _coerce_period_type(period_type)
    if kind is PeriodType.WEEK:
        return start + timedelta(weeks=offset)
    return start + relativedelta(months=offset)


def periods_between(period_type: PeriodType | str, start: date, day: date | datetime) -> int:
    """
    Whole periods elapsed from ``start`` (a period start) to ``day``.

    Negative when ``day`` precedes ``start``.
    """
    kind = _coerce_period_type(period_type)
    current = as_day(day)
    if kind is PeriodType.WEEK:
        return (current - start).days // 7
    return (current.year - start.year) * 12 + (current.month - start.month)


def resolve_date_range(
    period_type: PeriodType | str,
    offset: int,
    anchor: date | datetime,
    *,
    week_start: int = calendar.MONDAY,
) -> Period:
    """
    Window for the period ``offset`` steps away from the one containing ``anchor``.

    ``offset == 0`` is the anchor's own week/month, negative offsets go back in
    time and positive ones forward.
    """
    kind = _coerce_period_type(period_type)
    start = shift_period(kind, period_start(kind, anchor, week_start=week_start), offset)
    if kind is PeriodType.WEEK:
        end = start + timedelta(days=6)
    else:
        end = start + relativedelta(months=1, days=-1)
    return Period(start=start, end=end)


def period_title(period_type: PeriodType | str, offset: int) -> str:
    """Pager heading such as "This week" or "2 month(s) ago"."""
    kind = _coerce_period_type(period_type)
    if offset == 0:
        return f"This {kind.value}"
    if offset < 0:
        return f"{-offset} {kind.value}(s) ago"
    return f"In {offset} {kind.value}(s)"


def range_label(period: Period) -> str:
    """Short span label, e.g. "Jan 5 - Jan 11"."""
    return f"{_month_day(period.start)} - {_month_day(period.end)}"


def _month_day(day: date) -> str:
    return f"{calendar.month_abbr[day.month]} {day.day}"
