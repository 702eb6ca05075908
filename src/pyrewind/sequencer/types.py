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
"""Shared enumerations for the sequencer."""

from __future__ import annotations

from enum import StrEnum


class Mode(StrEnum):
    """What happens to step effects once the core computation has run.

    * ``FACTORY`` -- effects stay live; the run durably constructs something.
    * ``SCOPED`` -- every effect is unwound in reverse order before returning.
    """

    FACTORY = "FACTORY"
    SCOPED = "SCOPED"

    @classmethod
    def parse(cls, value: Mode | str) -> Mode:
        """Return the Mode named by *value* (case-insensitive)."""
        if isinstance(value, Mode):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown sequencer mode: '{value}'. "
                f"Available modes: {', '.join(m.value for m in cls)}"
            ) from None


class StepStatus(StrEnum):
    """Lifecycle status of a single step within one run."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    DONE = "DONE"
    FAILED = "FAILED"
    COMPENSATED = "COMPENSATED"


class FailureKind(StrEnum):
    """Which phase rejected the run."""

    VALIDATION = "VALIDATION"
    STEP = "STEP"
    CORE = "CORE"
