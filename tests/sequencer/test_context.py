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
"""Tests for RunContext: cursor and live-prefix bookkeeping."""

from __future__ import annotations

import pytest

from pyrewind.sequencer.context import RunContext
from pyrewind.sequencer.step import Effect
from pyrewind.sequencer.types import Mode, StepStatus


class TestCursor:
    def test_starts_with_nothing_live(self) -> None:
        ctx = RunContext()

        assert ctx.cursor == -1
        assert ctx.live_indices() == []
        assert ctx.peek_effect() is None

    def test_push_advances_cursor(self) -> None:
        ctx = RunContext()

        ctx.push_effect(Effect(0, "a", "x"))
        ctx.push_effect(Effect(1, "b", "y"))

        assert ctx.cursor == 1
        assert ctx.live_indices() == [0, 1]
        assert ctx.get_result(1) == "y"

    def test_push_must_extend_prefix(self) -> None:
        ctx = RunContext()
        ctx.push_effect(Effect(0, "a"))

        with pytest.raises(ValueError, match="does not extend"):
            ctx.push_effect(Effect(2, "c"))

    def test_pop_marks_compensated(self) -> None:
        ctx = RunContext()
        ctx.push_effect(Effect(0, "a"))
        ctx.push_effect(Effect(1, "b", "y"))

        popped = ctx.pop_effect()

        assert popped.index == 1
        assert ctx.cursor == 0
        assert ctx.compensated == [1]
        assert ctx.step_statuses[1] == StepStatus.COMPENSATED
        assert ctx.get_result(1) == "y"


class TestDefaults:
    def test_run_ids_are_unique(self) -> None:
        assert RunContext().run_id != RunContext().run_id

    def test_default_mode_is_factory(self) -> None:
        assert RunContext().mode is Mode.FACTORY

    def test_variables(self) -> None:
        ctx = RunContext()
        ctx.set_variable("tmpdir", "/tmp/x")

        assert ctx.get_variable("tmpdir") == "/tmp/x"
        assert ctx.get_variable("missing") is None
