"""Free-text task durations <-> whole minutes."""
from __future__ import annotations

import math
import re
from typing import Optional

_RANGE_MINUTES = re.compile(r"(\d+)\s*[-–]\s*(\d+)\s*min")
# Trailing minutes let formatted values such as "1 hour 5 minutes" parse back.
_HOURS = re.compile(r"(\d+(?:\.\d+)?)\s*hours?(?:\s*(\d+)\s*min)?")
_MINUTES = re.compile(r"(\d+)\s*min")


def parse_duration_minutes(text: Optional[str]) -> Optional[int]:
    """
    Convert a duration such as "25-35 minutes", "1.5 hours" or "45 min" to minutes.

    The first matching form wins: a minute range (upper bound is used), then a
    decimal hour count, then a single minute count. Returns None when the text
    is missing or matches none of them.
    """
    if not text:
        return None
    lowered = text.lower()

    match = _RANGE_MINUTES.search(lowered)
    if match:
        return int(match.group(2))

    match = _HOURS.search(lowered)
    if match:
        minutes = math.floor(float(match.group(1)) * 60 + 0.5)
        if match.group(2):
            minutes += int(match.group(2))
        return minutes

    match = _MINUTES.search(lowered)
    if match:
        return int(match.group(1))
    return None


def format_duration_minutes(minutes: int) -> str:
    """Render minutes as "45 minutes", "2 hours" or "1 hour 5 minutes"."""
    if minutes < 60:
        return f"{minutes} minutes"
    hours, remainder = divmod(minutes, 60)
    hour_label = "hours" if hours > 1 else "hour"
    if remainder == 0:
        return f"{hours} {hour_label}"
    return f"{hours} {hour_label} {remainder} minutes"
