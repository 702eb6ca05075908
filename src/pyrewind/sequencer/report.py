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
"""FailureReport: immutable diagnostic record produced when a run fails."""

from __future__ import annotations

from dataclasses import dataclass, field

from pyrewind.sequencer.types import FailureKind


@dataclass(frozen=True)
class FailureReport:
    """Immutable record summarising why a run failed and what was undone.

    Fields
    ------
    kind:
        Phase that rejected the run (validation, a step, or the core).
    reason:
        Human-readable description of the failure.
    step_index:
        Position of the failing step; ``None`` for validation failures.  For
        a failing core this is the number of steps (the position after the
        last step).
    step_name:
        Name of the failing step, ``"core"`` for the core computation, or
        ``None`` for validation failures.
    error:
        The exception raised by the failing phase, if any.
    completed_steps:
        Indices whose forward action succeeded before the failure.
    compensated_steps:
        Indices compensated during unwind, in call order (strictly decreasing).
    """

    kind: FailureKind
    reason: str
    step_index: int | None = None
    step_name: str | None = None
    error: BaseException | None = None
    completed_steps: list[int] = field(default_factory=list)
    compensated_steps: list[int] = field(default_factory=list)
