"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib
from typing import Any, Dict

import pytest

from stepwise.observability import client as client_module
from stepwise.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any] | None):
        self.name = name
        self.metadata = metadata or {}
        self.updates: list[dict] = []
        self.ended = False

    def update(self, **kwargs) -> None:
        self.updates.append(kwargs)

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        handle = _DummyTrace(name, metadata)
        self.traces.append(handle)
        return handle


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import stepwise.core.config as core_config
    import stepwise.main as main_module

    importlib.reload(core_config)
    importlib.reload(client_module)
    reloaded_app = importlib.reload(main_module)

    assert hasattr(reloaded_app, "app")
    assert client_module.get_opik_client() is None


def test_enabled_without_api_key_stays_off(monkeypatch) -> None:
    monkeypatch.setattr(client_module.settings, "opik_enabled", True)
    monkeypatch.setattr(client_module.settings, "opik_api_key", None)
    client_module.reset_opik_client()
    try:
        assert client_module.init_opik() is None
    finally:
        client_module.reset_opik_client()


def test_trace_is_a_no_op_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    with tracing.trace("demo") as handle:
        assert handle is None


def test_trace_drops_empty_metadata_and_tags_request(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with tracing.trace("demo", metadata={"route": "/x", "skip": None}, user_id="u-1", request_id="r-1"):
        pass

    recorded = dummy_client.traces[0]
    assert recorded.metadata == {"route": "/x", "user_id": "u-1", "request_id": "r-1"}
    assert recorded.ended is True


def test_trace_records_errors_and_reraises(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with pytest.raises(RuntimeError):
        with tracing.trace("failing"):
            raise RuntimeError("boom")

    recorded = dummy_client.traces[0]
    assert recorded.updates == [{"error_info": {"message": "boom", "type": "RuntimeError"}}]
    assert recorded.ended is True


class _DummyOpik(_DummyClient):
    def __init__(self, *args, **kwargs):
        super().__init__()
        self.kwargs = kwargs


def test_breakdown_is_traced_when_opik_is_enabled(monkeypatch) -> None:
    from datetime import date

    from stepwise.services import goal_breakdown

    monkeypatch.setattr(client_module.settings, "opik_enabled", True)
    monkeypatch.setattr(client_module.settings, "opik_api_key", "test-key")
    monkeypatch.setattr(client_module.settings, "opik_project", "stepwise-test")
    monkeypatch.setattr(client_module, "Opik", _DummyOpik)
    monkeypatch.setattr(goal_breakdown.settings, "openai_api_key", None)
    client_module.reset_opik_client()
    try:
        opik_client = client_module.get_opik_client()
        assert isinstance(opik_client, _DummyOpik)
        assert opik_client.kwargs["project_name"] == "stepwise-test"

        goal_breakdown.breakdown_goal("Plant tomatoes", today=date(2025, 4, 1), deadline=date(2025, 4, 3))

        names = [handle.name for handle in opik_client.traces]
        assert "goal.breakdown" in names
        assert "metric:goal.breakdown.tasks_count" in names
        assert all(handle.ended for handle in opik_client.traces)
    finally:
        client_module.reset_opik_client()
