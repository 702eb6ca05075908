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
"""RunContext: mutable runtime state carrier for one sequencer run."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from pyrewind.sequencer.step import Effect
from pyrewind.sequencer.types import Mode, StepStatus


@dataclass
class RunContext:
    """Mutable bag of state threaded through every step of one run.

    The live effects form a stack: a successful attempt pushes, a
    compensation pops.  The set of live step indices is therefore always a
    contiguous prefix ``[0..cursor]`` of the step list.  A context belongs to
    exactly one run and must not be shared.
    """

    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    mode: Mode = Mode.FACTORY
    inputs: Any = None
    variables: dict[str, Any] = field(default_factory=dict)
    effects: list[Effect] = field(default_factory=list)
    step_statuses: dict[int, StepStatus] = field(default_factory=dict)
    step_results: dict[int, Any] = field(default_factory=dict)
    step_errors: dict[int, BaseException] = field(default_factory=dict)
    step_latencies_ms: dict[int, float] = field(default_factory=dict)
    compensated: list[int] = field(default_factory=list)

    # ── cursor / liveness ─────────────────────────────────────

    @property
    def cursor(self) -> int:
        """Index of the highest live effect, or ``-1`` when nothing is live."""
        return len(self.effects) - 1

    def live_indices(self) -> list[int]:
        """Indices whose effects have not been compensated, lowest first."""
        return [effect.index for effect in self.effects]

    def push_effect(self, effect: Effect) -> None:
        """Record *effect* as live; it must extend the live prefix by one."""
        if effect.index != len(self.effects):
            msg = (
                f"Effect for index {effect.index} does not extend the live "
                f"prefix (cursor={self.cursor})"
            )
            raise ValueError(msg)
        self.effects.append(effect)
        self.step_results[effect.index] = effect.value

    def peek_effect(self) -> Effect | None:
        """Return the effect at the cursor without removing it."""
        return self.effects[-1] if self.effects else None

    def pop_effect(self) -> Effect:
        """Remove the effect at the cursor and mark its step compensated."""
        effect = self.effects.pop()
        self.compensated.append(effect.index)
        self.step_statuses[effect.index] = StepStatus.COMPENSATED
        return effect

    # ── status / result helpers ───────────────────────────────

    def set_status(self, index: int, status: StepStatus) -> None:
        self.step_statuses[index] = status

    def get_result(self, index: int) -> Any | None:
        """Return the value produced by step *index*, or ``None`` if absent."""
        return self.step_results.get(index)

    # ── variable helpers ──────────────────────────────────────

    def get_variable(self, key: str) -> Any | None:
        """Return the run-level variable *key*, or ``None`` if absent."""
        return self.variables.get(key)

    def set_variable(self, key: str, value: Any) -> None:
        """Store *value* under run-level variable *key*."""
        self.variables[key] = value
