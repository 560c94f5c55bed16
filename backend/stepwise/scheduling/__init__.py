"""Pure scheduling and analytics core.

Nothing in this package performs I/O or reads the wall clock; callers pass
"today" explicitly.
"""
from stepwise.scheduling.duration import format_duration_minutes, parse_duration_minutes
from stepwise.scheduling.histogram import Histogram, build_histogram
from stepwise.scheduling.metrics import ActivityMetrics, compute_metrics
from stepwise.scheduling.normalizer import normalize_tasks
from stepwise.scheduling.periods import Period, PeriodType, period_title, range_label, resolve_date_range
from stepwise.scheduling.records import TaskRecord, completion_rate

__all__ = [
    "ActivityMetrics",
    "Histogram",
    "Period",
    "PeriodType",
    "TaskRecord",
    "build_histogram",
    "completion_rate",
    "compute_metrics",
    "format_duration_minutes",
    "normalize_tasks",
    "parse_duration_minutes",
    "period_title",
    "range_label",
    "resolve_date_range",
]
