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
"""Lifecycle events emitted by the sequencer.

:class:`SequencerEventsPort` is the outbound boundary between the engine and
whatever observes it.  Two adapters ship with the library:

* :class:`LoggerEventsAdapter` -- writes structured structlog events for
  every lifecycle transition.
* :class:`CompositeEventsAdapter` -- fans out each event to an ordered
  sequence of child adapters, absorbing individual adapter failures so that
  one broken sink never interrupts a run.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import structlog

_logger = structlog.get_logger("pyrewind.sequencer.events")


@runtime_checkable
class SequencerEventsPort(Protocol):
    """Port for observing a run's state transitions."""

    def on_start(self, name: str, run_id: str, mode: str, step_count: int) -> None:
        """Fired before validation."""
        ...

    def on_validation_failed(self, name: str, run_id: str, reason: str) -> None:
        """Fired when the inputs are rejected; no step has run."""
        ...

    def on_step_success(
        self, name: str, run_id: str, index: int, step_name: str, latency_ms: float
    ) -> None:
        """Fired when a step's forward action succeeds."""
        ...

    def on_step_failed(
        self,
        name: str,
        run_id: str,
        index: int,
        step_name: str,
        error: BaseException,
        latency_ms: float,
    ) -> None:
        """Fired when a step's forward action fails."""
        ...

    def on_core_executed(
        self, name: str, run_id: str, error: BaseException | None, latency_ms: float
    ) -> None:
        """Fired after the core computation; *error* is set if it raised."""
        ...

    def on_compensated(
        self,
        name: str,
        run_id: str,
        index: int,
        step_name: str,
        error: BaseException | None,
    ) -> None:
        """Fired after a compensation; *error* is set if it raised."""
        ...

    def on_completed(self, name: str, run_id: str, success: bool) -> None:
        """Fired when the run reaches Success or Failure."""
        ...


# ---------------------------------------------------------------------------
# LoggerEventsAdapter
# ---------------------------------------------------------------------------


class LoggerEventsAdapter:
    """Logs sequencer lifecycle events through structlog.

    Successful transitions log at ``info``; step failures and rejected
    inputs at ``warning``; a failed compensation at ``error``.
    """

    def on_start(self, name: str, run_id: str, mode: str, step_count: int) -> None:
        _logger.info(
            "sequence_started", sequence=name, run_id=run_id, mode=mode, steps=step_count,
        )

    def on_validation_failed(self, name: str, run_id: str, reason: str) -> None:
        _logger.warning("validation_failed", sequence=name, run_id=run_id, reason=reason)

    def on_step_success(
        self, name: str, run_id: str, index: int, step_name: str, latency_ms: float
    ) -> None:
        _logger.info(
            "step_succeeded",
            sequence=name,
            run_id=run_id,
            index=index,
            step=step_name,
            latency_ms=round(latency_ms, 1),
        )

    def on_step_failed(
        self,
        name: str,
        run_id: str,
        index: int,
        step_name: str,
        error: BaseException,
        latency_ms: float,
    ) -> None:
        _logger.warning(
            "step_failed",
            sequence=name,
            run_id=run_id,
            index=index,
            step=step_name,
            error=str(error),
            latency_ms=round(latency_ms, 1),
        )

    def on_core_executed(
        self, name: str, run_id: str, error: BaseException | None, latency_ms: float
    ) -> None:
        if error is None:
            _logger.info(
                "core_executed", sequence=name, run_id=run_id, latency_ms=round(latency_ms, 1),
            )
        else:
            _logger.warning(
                "core_failed", sequence=name, run_id=run_id, error=str(error),
            )

    def on_compensated(
        self,
        name: str,
        run_id: str,
        index: int,
        step_name: str,
        error: BaseException | None,
    ) -> None:
        if error is None:
            _logger.info(
                "step_compensated", sequence=name, run_id=run_id, index=index, step=step_name,
            )
        else:
            _logger.error(
                "compensation_failed",
                sequence=name,
                run_id=run_id,
                index=index,
                step=step_name,
                error=str(error),
            )

    def on_completed(self, name: str, run_id: str, success: bool) -> None:
        _logger.info("sequence_completed", sequence=name, run_id=run_id, success=success)


# ---------------------------------------------------------------------------
# CompositeEventsAdapter
# ---------------------------------------------------------------------------


class CompositeEventsAdapter:
    """Broadcasts sequencer events to multiple :class:`SequencerEventsPort` adapters.

    If an individual adapter raises an exception, the error is logged and
    the remaining adapters still receive the event.

    Args:
        *adapters: One or more :class:`SequencerEventsPort` implementations
            to broadcast events to.
    """

    def __init__(self, *adapters: SequencerEventsPort) -> None:
        self._adapters: Sequence[SequencerEventsPort] = adapters

    # -- internal broadcast helper ------------------------------------------

    def _broadcast(self, method: str, *args: object, **kwargs: object) -> None:
        for adapter in self._adapters:
            notify(adapter, method, *args, **kwargs)

    # -- SequencerEventsPort interface ---------------------------------------

    def on_start(self, name: str, run_id: str, mode: str, step_count: int) -> None:
        self._broadcast("on_start", name, run_id, mode=mode, step_count=step_count)

    def on_validation_failed(self, name: str, run_id: str, reason: str) -> None:
        self._broadcast("on_validation_failed", name, run_id, reason=reason)

    def on_step_success(
        self, name: str, run_id: str, index: int, step_name: str, latency_ms: float
    ) -> None:
        self._broadcast(
            "on_step_success", name, run_id, index, step_name, latency_ms=latency_ms,
        )

    def on_step_failed(
        self,
        name: str,
        run_id: str,
        index: int,
        step_name: str,
        error: BaseException,
        latency_ms: float,
    ) -> None:
        self._broadcast(
            "on_step_failed",
            name,
            run_id,
            index,
            step_name,
            error=error,
            latency_ms=latency_ms,
        )

    def on_core_executed(
        self, name: str, run_id: str, error: BaseException | None, latency_ms: float
    ) -> None:
        self._broadcast("on_core_executed", name, run_id, error=error, latency_ms=latency_ms)

    def on_compensated(
        self,
        name: str,
        run_id: str,
        index: int,
        step_name: str,
        error: BaseException | None,
    ) -> None:
        self._broadcast("on_compensated", name, run_id, index, step_name, error=error)

    def on_completed(self, name: str, run_id: str, success: bool) -> None:
        self._broadcast("on_completed", name, run_id, success=success)


def notify(
    port: SequencerEventsPort | None, method: str, *args: object, **kwargs: object
) -> None:
    """Deliver one event to *port*.

    An observer that raises is logged as ``events_adapter_failed`` and
    otherwise ignored; a broken sink never stops a run or an unwind.
    """
    if port is None:
        return
    try:
        getattr(port, method)(*args, **kwargs)
    except Exception:
        _logger.error(
            "events_adapter_failed",
            adapter=repr(port),
            method=method,
            exc_info=True,
        )
