"""Tests for request-id aware logging."""
from __future__ import annotations

import logging

from stepwise.core.context import bind_request_id, reset_request_id
from stepwise.core.logging import RequestIdFilter


def _record() -> logging.LogRecord:
    return logging.LogRecord("stepwise.test", logging.INFO, __file__, 1, "hello", None, None)


def test_filter_uses_placeholder_outside_requests() -> None:
    record = _record()

    assert RequestIdFilter().filter(record) is True
    assert record.request_id == "-"


def test_filter_attaches_active_request_id() -> None:
    token = bind_request_id("req-42")
    try:
        record = _record()
        RequestIdFilter().filter(record)
    finally:
        reset_request_id(token)

    assert record.request_id == "req-42"
