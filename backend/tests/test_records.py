"""Tests for task record ingestion and small collection helpers."""
from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from stepwise.scheduling.records import TaskRecord, completion_rate


def test_accepts_generated_camel_case_payload() -> None:
    record = TaskRecord.model_validate(
        {
            "title": "  Draft outline  ",
            "isCompleted": False,
            "dueDate": "2025-10-25",
            "estimatedDuration": "30 minutes",
        }
    )

    assert record.title == "Draft outline"
    assert record.due_date == date(2025, 10, 25)
    assert record.estimated_duration == "30 minutes"
    assert record.is_completed is False
    assert record.is_bundle is False
    assert record.id is not None


def test_datetime_values_are_truncated_to_day() -> None:
    from_string = TaskRecord.model_validate({"title": "Read", "dueDate": "2025-10-25T21:30:00Z"})
    from_object = TaskRecord(title="Read", due_date=datetime(2025, 10, 25, 23, 59, tzinfo=timezone.utc))

    assert from_string.due_date == date(2025, 10, 25)
    assert from_object.due_date == date(2025, 10, 25)


def test_missing_and_blank_optional_fields_become_none() -> None:
    record = TaskRecord.model_validate({"title": "Read", "dueDate": "", "estimatedDuration": "   "})

    assert record.due_date is None
    assert record.estimated_duration is None


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "   "},
        {"dueDate": "2025-10-25"},
        {"title": "Read", "dueDate": "next tuesday"},
        {"title": "Read", "isCompleted": "maybe"},
    ],
)
def test_malformed_payloads_are_rejected(payload) -> None:
    with pytest.raises(ValidationError):
        TaskRecord.model_validate(payload)


def test_records_are_immutable() -> None:
    record = TaskRecord(title="Read")

    with pytest.raises(ValidationError):
        record.title = "Write"  # type: ignore[misc]


def test_completion_rate() -> None:
    tasks = [
        TaskRecord(title="a", is_completed=True),
        TaskRecord(title="b"),
        TaskRecord(title="c", is_completed=True),
        TaskRecord(title="d"),
    ]

    assert completion_rate(tasks) == 0.5
    assert completion_rate([]) == 0.0
