# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for sequencer event adapters."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import structlog
from structlog.testing import capture_logs

from pyrewind.sequencer.events import (
    CompositeEventsAdapter,
    LoggerEventsAdapter,
    SequencerEventsPort,
    notify,
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> None:
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# LoggerEventsAdapter
# ---------------------------------------------------------------------------


class TestLoggerEventsAdapter:
    """LoggerEventsAdapter logs sequencer lifecycle events."""

    @pytest.fixture
    def adapter(self) -> LoggerEventsAdapter:
        return LoggerEventsAdapter()

    def test_satisfies_port(self, adapter: LoggerEventsAdapter) -> None:
        assert isinstance(adapter, SequencerEventsPort)

    def test_on_start(self, adapter: LoggerEventsAdapter) -> None:
        with capture_logs() as logs:
            adapter.on_start("make-widget", "run-1", "FACTORY", 4)

        assert logs == [{
            "event": "sequence_started",
            "log_level": "info",
            "sequence": "make-widget",
            "run_id": "run-1",
            "mode": "FACTORY",
            "steps": 4,
        }]

    def test_step_failure_logs_warning(self, adapter: LoggerEventsAdapter) -> None:
        with capture_logs() as logs:
            adapter.on_step_failed("w", "run-1", 3, "D", RuntimeError("boom"), 1.234)

        assert logs[0]["log_level"] == "warning"
        assert logs[0]["event"] == "step_failed"
        assert logs[0]["step"] == "D"
        assert logs[0]["error"] == "boom"
        assert logs[0]["latency_ms"] == 1.2

    def test_validation_failure_logs_warning(self, adapter: LoggerEventsAdapter) -> None:
        with capture_logs() as logs:
            adapter.on_validation_failed("w", "run-1", "var_1 invalid")

        assert logs[0]["log_level"] == "warning"
        assert logs[0]["reason"] == "var_1 invalid"

    def test_compensation_levels(self, adapter: LoggerEventsAdapter) -> None:
        with capture_logs() as logs:
            adapter.on_compensated("w", "run-1", 2, "C", None)
            adapter.on_compensated("w", "run-1", 1, "B", OSError("busy"))

        assert [(e["event"], e["log_level"]) for e in logs] == [
            ("step_compensated", "info"),
            ("compensation_failed", "error"),
        ]

    def test_core_and_completion(self, adapter: LoggerEventsAdapter) -> None:
        with capture_logs() as logs:
            adapter.on_step_success("w", "run-1", 0, "A", 0.5)
            adapter.on_core_executed("w", "run-1", None, 2.0)
            adapter.on_core_executed("w", "run-1", ValueError("bad"), 2.0)
            adapter.on_completed("w", "run-1", True)

        assert [e["event"] for e in logs] == [
            "step_succeeded",
            "core_executed",
            "core_failed",
            "sequence_completed",
        ]
        assert logs[-1]["success"] is True


# ---------------------------------------------------------------------------
# CompositeEventsAdapter
# ---------------------------------------------------------------------------


class TestCompositeEventsAdapter:
    def test_broadcasts_to_every_adapter(self) -> None:
        first, second = MagicMock(), MagicMock()
        composite = CompositeEventsAdapter(first, second)

        composite.on_start("w", "run-1", "SCOPED", 2)
        composite.on_compensated("w", "run-1", 1, "B", None)

        for adapter in (first, second):
            adapter.on_start.assert_called_once_with("w", "run-1", mode="SCOPED", step_count=2)
            adapter.on_compensated.assert_called_once_with("w", "run-1", 1, "B", error=None)

    def test_failing_adapter_does_not_silence_others(self) -> None:
        broken, healthy = MagicMock(), MagicMock()
        broken.on_completed.side_effect = RuntimeError("sink down")
        composite = CompositeEventsAdapter(broken, healthy)

        with capture_logs() as logs:
            composite.on_completed("w", "run-1", False)

        healthy.on_completed.assert_called_once_with("w", "run-1", success=False)
        assert logs[0]["event"] == "events_adapter_failed"
        assert logs[0]["method"] == "on_completed"
        assert logs[0]["log_level"] == "error"

    def test_satisfies_port(self) -> None:
        assert isinstance(CompositeEventsAdapter(), SequencerEventsPort)


# ---------------------------------------------------------------------------
# notify
# ---------------------------------------------------------------------------


class TestNotify:
    def test_delivers_event(self) -> None:
        port = MagicMock()

        notify(port, "on_validation_failed", "w", "run-1", "bad inputs")

        port.on_validation_failed.assert_called_once_with("w", "run-1", "bad inputs")

    def test_no_port_is_a_no_op(self) -> None:
        notify(None, "on_start", "w", "run-1", "FACTORY", 0)

    def test_failing_port_is_logged_not_raised(self) -> None:
        port = MagicMock()
        port.on_step_success.side_effect = RuntimeError("sink down")

        with capture_logs() as logs:
            notify(port, "on_step_success", "w", "run-1", 0, "a", 1.0)

        assert [entry["event"] for entry in logs] == ["events_adapter_failed"]
        assert logs[0]["method"] == "on_step_success"
