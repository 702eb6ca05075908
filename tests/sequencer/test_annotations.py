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
"""Tests for sequence annotations and SequenceDefinition.from_bean."""

from __future__ import annotations

from typing import Any

import pytest

from pyrewind.kernel.exceptions import SequenceValidationError
from pyrewind.sequencer.annotations import (
    SEQUENCE_ATTR,
    STEP_ATTR,
    sequence,
    sequence_core,
    sequence_step,
    sequence_validator,
)
from pyrewind.sequencer.context import RunContext
from pyrewind.sequencer.definition import SequenceDefinition
from pyrewind.sequencer.engine import Sequencer
from pyrewind.sequencer.types import Mode


@sequence("provision", mode="scoped")
class _Provision:
    def __init__(self, fail_at: str | None = None) -> None:
        self.fail_at = fail_at
        self.log: list[str] = []

    @sequence_validator
    def check(self, inputs: dict[str, Any]) -> bool:
        return bool(inputs.get("owner"))

    @sequence_step("mkdir", compensate="rmdir")
    def mkdir(self, ctx: RunContext) -> str:
        return self._do("mkdir", f"/srv/{ctx.inputs['owner']}")

    def rmdir(self, path: str) -> None:
        self.log.append(f"rmdir {path}")

    @sequence_step(compensate="release")
    def reserve(self) -> str:
        return self._do("reserve", "slot-1")

    def release(self, slot: str) -> None:
        self.log.append(f"release {slot}")

    @sequence_step()
    def notify(self) -> None:
        self._do("notify", None)

    @sequence_core
    def register(self, ctx: RunContext) -> str:
        self.log.append("register")
        return f"registered {ctx.get_result(0)}"

    def _do(self, name: str, value: Any) -> Any:
        if name == self.fail_at:
            raise RuntimeError(f"{name} failed")
        self.log.append(name)
        return value


class TestDecorators:
    def test_sequence_sets_metadata(self) -> None:
        assert getattr(_Provision, SEQUENCE_ATTR) == {"name": "provision", "mode": Mode.SCOPED}

    def test_step_name_defaults_to_method_name(self) -> None:
        assert getattr(_Provision.reserve, STEP_ATTR)["name"] == "reserve"

    def test_unknown_mode_fails_at_decoration(self) -> None:
        with pytest.raises(ValueError):
            sequence("bad", mode="sometimes")


class TestFromBean:
    def test_collects_steps_in_definition_order(self) -> None:
        definition = SequenceDefinition.from_bean(_Provision())

        assert definition.name == "provision"
        assert definition.mode is Mode.SCOPED
        assert [s.name for s in definition.steps] == ["mkdir", "reserve", "notify"]
        assert definition.validate is not None
        assert definition.core is not None

    def test_scoped_run_releases_everything(self) -> None:
        bean = _Provision()

        outcome = Sequencer().execute(SequenceDefinition.from_bean(bean), {"owner": "ana"})

        assert outcome.success
        assert outcome.value == "registered /srv/ana"
        assert bean.log == [
            "mkdir",
            "reserve",
            "notify",
            "register",
            "release slot-1",
            "rmdir /srv/ana",
        ]

    def test_failure_unwinds_completed_steps(self) -> None:
        bean = _Provision(fail_at="notify")

        outcome = SequenceDefinition.from_bean(bean).run({"owner": "ana"})

        assert not outcome.success
        assert bean.log == ["mkdir", "reserve", "release slot-1", "rmdir /srv/ana"]

    def test_validator_rejects(self) -> None:
        bean = _Provision()

        outcome = SequenceDefinition.from_bean(bean).run({"owner": ""})

        assert not outcome.success
        assert bean.log == []

    def test_undecorated_class_is_rejected(self) -> None:
        class _Plain:
            pass

        with pytest.raises(SequenceValidationError, match="not decorated"):
            SequenceDefinition.from_bean(_Plain())

    def test_missing_compensation_method(self) -> None:
        @sequence("broken")
        class _Broken:
            @sequence_step(compensate="nope")
            def a(self) -> None: ...

        with pytest.raises(SequenceValidationError, match="'nope' not found"):
            SequenceDefinition.from_bean(_Broken())

    def test_two_cores_are_rejected(self) -> None:
        @sequence("two-cores")
        class _Two:
            @sequence_core
            def first(self) -> None: ...

            @sequence_core
            def second(self) -> None: ...

        with pytest.raises(SequenceValidationError, match="more than one core"):
            SequenceDefinition.from_bean(_Two())

    def test_compensable_core(self) -> None:
        @sequence("lease", mode=Mode.SCOPED)
        class _Lease:
            def __init__(self) -> None:
                self.log: list[str] = []

            @sequence_step(compensate="unlock")
            def lock(self) -> str:
                return "lock"

            def unlock(self, value: str) -> None:
                self.log.append(f"unlock {value}")

            @sequence_core(compensate="revoke")
            def grant(self) -> str:
                return "lease"

            def revoke(self, value: str) -> None:
                self.log.append(f"revoke {value}")

        bean = _Lease()
        definition = SequenceDefinition.from_bean(bean)
        outcome = definition.run()

        assert [s.name for s in definition.steps] == ["lock", "core"]
        assert outcome.value == "lease"
        assert bean.log == ["revoke lease", "unlock lock"]

    def test_subclass_inherits_steps(self) -> None:
        @sequence("provision-v2")
        class _V2(_Provision):
            pass

        definition = SequenceDefinition.from_bean(_V2())

        assert definition.name == "provision-v2"
        assert [s.name for s in definition.steps] == ["mkdir", "reserve", "notify"]
