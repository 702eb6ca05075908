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
"""Immutable result types: StepOutcome and Outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pyrewind.sequencer.report import FailureReport
from pyrewind.sequencer.types import Mode, StepStatus


@dataclass(frozen=True)
class StepOutcome:
    """Immutable snapshot of how a single step ended.

    Fields
    ------
    index:
        Position of the step in the run.
    name:
        Step name.
    status:
        Final lifecycle status.  ``DONE`` means the effect is still live.
    result:
        Value returned by ``attempt()``, or ``None``.
    error:
        Exception raised by ``attempt()``, or ``None``.
    latency_ms:
        Duration of the forward action in milliseconds.
    compensated:
        Whether the step's effect was unwound.
    """

    index: int
    name: str
    status: StepStatus
    result: Any = None
    error: BaseException | None = None
    latency_ms: float = 0.0
    compensated: bool = False


@dataclass(frozen=True)
class Outcome:
    """Two-valued result of a run: Success or Failure.

    ``success`` is ``True`` if and only if validation passed, every step's
    forward action succeeded and the core computation executed.  Data
    computed by the core travels separately in ``value``; the outcome itself
    only communicates whether the run succeeded.
    """

    name: str
    run_id: str
    mode: Mode
    success: bool
    started_at: datetime
    completed_at: datetime
    value: Any = None
    failure: FailureReport | None = None
    steps: tuple[StepOutcome, ...] = field(default_factory=tuple)
    compensation_order: tuple[int, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.success

    # ── query helpers ─────────────────────────────────────────

    def step(self, key: int | str) -> StepOutcome | None:
        """Return the outcome for the step at index *key* or named *key*."""
        if isinstance(key, int):
            if 0 <= key < len(self.steps):
                return self.steps[key]
            return None
        for outcome in self.steps:
            if outcome.name == key:
                return outcome
        return None

    def result_of(self, key: int | str) -> Any | None:
        """Return the value produced by a step, or ``None`` if absent."""
        outcome = self.step(key)
        if outcome is None:
            return None
        return outcome.result

    def failed_step(self) -> StepOutcome | None:
        """Return the step whose forward action failed, if any."""
        for outcome in self.steps:
            if outcome.status == StepStatus.FAILED:
                return outcome
        return None

    def compensated_steps(self) -> list[StepOutcome]:
        """Return every step whose effect was unwound, in unwind order."""
        return [self.steps[index] for index in self.compensation_order]

    def live_steps(self) -> list[StepOutcome]:
        """Return every step whose effect is still live after the run."""
        return [s for s in self.steps if s.status == StepStatus.DONE]
