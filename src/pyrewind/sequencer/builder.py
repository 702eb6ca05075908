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
"""Sequence builder: fluent DSL for programmatic sequence creation.

Example::

    definition = (
        SequenceBuilder("make-archive")
        .validate(lambda inputs: inputs["size"] > 0)
        .step("alloc").action(alloc_buffer).compensate(free_buffer).add()
        .step("open").action(open_file).compensate(close_and_unlink).add()
        .core(write_archive)
        .factory()
        .build()
    )
    outcome = definition.run(inputs={"size": 4096})
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pyrewind.kernel.exceptions import SequenceValidationError
from pyrewind.sequencer.definition import SequenceDefinition
from pyrewind.sequencer.step import FunctionStep, Step
from pyrewind.sequencer.types import Mode


class StepBuilder:
    """Builder for one :class:`FunctionStep`.

    Call :meth:`add` to finalise the step and return the parent
    :class:`SequenceBuilder` for continued chaining.
    """

    def __init__(self, name: str, parent: SequenceBuilder) -> None:
        self._name = name
        self._parent = parent
        self._action_fn: Callable[..., Any] | None = None
        self._compensate_fn: Callable[..., Any] | None = None
        self._fail_on_false = False

    # ── Fluent setters ────────────────────────────────────────

    def action(self, func: Callable[..., Any]) -> StepBuilder:
        """Set the forward action."""
        self._action_fn = func
        return self

    def compensate(self, func: Callable[..., Any]) -> StepBuilder:
        """Set the compensating action."""
        self._compensate_fn = func
        return self

    def fail_on_false(self, enabled: bool = True) -> StepBuilder:
        """Treat an action result of exactly ``False`` as failure."""
        self._fail_on_false = enabled
        return self

    # ── Finalisation ──────────────────────────────────────────

    def add(self) -> SequenceBuilder:
        """Finalise this step and return the parent builder for chaining."""
        if self._action_fn is None:
            msg = f"Step '{self._name}' in sequence '{self._parent.name}' must have an action"
            raise SequenceValidationError(msg)
        self._parent.add_step(FunctionStep(
            name=self._name,
            action=self._action_fn,
            undo=self._compensate_fn,
            fail_on_false=self._fail_on_false,
        ))
        return self._parent


class SequenceBuilder:
    """Fluent builder for a :class:`SequenceDefinition`.

    Steps keep the order in which they are added.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._steps: list[Step] = []
        self._validate: Callable[..., bool] | None = None
        self._core: Callable[..., Any] | None = None
        self._core_compensate: Callable[..., Any] | None = None
        self._mode: Mode = Mode.FACTORY

    @property
    def name(self) -> str:
        return self._name

    # ── Steps ─────────────────────────────────────────────────

    def step(self, name: str) -> StepBuilder:
        """Begin configuring a new step called *name*."""
        return StepBuilder(name, self)

    def add_step(self, step: Step) -> SequenceBuilder:
        """Append an existing :class:`Step` implementation."""
        if any(existing.name == step.name for existing in self._steps):
            msg = f"Step '{step.name}' already exists in sequence '{self._name}'"
            raise SequenceValidationError(msg)
        self._steps.append(step)
        return self

    # ── Sequence-level configuration ──────────────────────────

    def validate(self, predicate: Callable[..., bool]) -> SequenceBuilder:
        """Set the predicate checked against the inputs before any step."""
        self._validate = predicate
        return self

    def core(
        self,
        func: Callable[..., Any],
        compensate: Callable[..., Any] | None = None,
    ) -> SequenceBuilder:
        """Set the core computation.

        With *compensate* the core becomes the final step, so a failing
        core unwinds like any step and scoped runs undo it too.
        """
        self._core = func
        self._core_compensate = compensate
        return self

    def mode(self, mode: Mode | str) -> SequenceBuilder:
        self._mode = Mode.parse(mode)
        return self

    def factory(self) -> SequenceBuilder:
        """Keep every effect live after a successful run."""
        return self.mode(Mode.FACTORY)

    def scoped(self) -> SequenceBuilder:
        """Unwind every effect after a successful run."""
        return self.mode(Mode.SCOPED)

    # ── Build ─────────────────────────────────────────────────

    def build(self) -> SequenceDefinition:
        """Validate and produce the final :class:`SequenceDefinition`.

        Raises:
            SequenceValidationError: Step names collide (including with the
                folded ``"core"`` step).
        """
        return SequenceDefinition.create(
            name=self._name,
            steps=self._steps,
            validate=self._validate,
            core=self._core,
            core_compensate=self._core_compensate,
            mode=self._mode,
        )
