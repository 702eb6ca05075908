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
"""Sequence definition: immutable description of a reusable run."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pyrewind.kernel.exceptions import SequenceValidationError
from pyrewind.sequencer.annotations import (
    CORE_ATTR,
    SEQUENCE_ATTR,
    STEP_ATTR,
    VALIDATOR_ATTR,
)
from pyrewind.sequencer.engine import CORE_STEP_NAME, Sequencer
from pyrewind.sequencer.step import FunctionStep, Step
from pyrewind.sequencer.types import Mode

if TYPE_CHECKING:
    from pyrewind.sequencer.result import Outcome


@dataclass(frozen=True)
class SequenceDefinition:
    """Everything a run needs except the caller's inputs.

    Attributes:
        name: Sequence name.
        steps: Ordered steps.
        validate: Input predicate, or ``None``.
        core: Core computation, or ``None`` when the core was folded into
            ``steps`` as a compensable final step.
        mode: Mode applied on success.
    """

    name: str
    steps: tuple[Step, ...] = ()
    validate: Callable[..., bool] | None = None
    core: Callable[..., Any] | None = None
    mode: Mode = Mode.FACTORY

    @classmethod
    def create(
        cls,
        name: str,
        steps: Iterable[Step],
        validate: Callable[..., bool] | None = None,
        core: Callable[..., Any] | None = None,
        core_compensate: Callable[..., Any] | None = None,
        mode: Mode | str = Mode.FACTORY,
    ) -> SequenceDefinition:
        """Validate the parts and assemble a definition.

        A *core* with *core_compensate* becomes the final step named
        ``"core"``, so a failing core is unwound like any other step.

        Raises:
            SequenceValidationError: Step names are not unique, or
                *core_compensate* is given without *core*.
        """
        step_list = list(steps)
        if core_compensate is not None:
            if core is None:
                msg = f"Sequence '{name}' has a core compensation but no core"
                raise SequenceValidationError(msg)
            step_list.append(FunctionStep(name=CORE_STEP_NAME, action=core, undo=core_compensate))
            core = None

        seen: set[str] = set()
        for step in step_list:
            if step.name in seen:
                msg = f"Step '{step.name}' already exists in sequence '{name}'"
                raise SequenceValidationError(msg)
            seen.add(step.name)

        return cls(
            name=name,
            steps=tuple(step_list),
            validate=validate,
            core=core,
            mode=Mode.parse(mode),
        )

    @classmethod
    def from_bean(cls, bean: Any) -> SequenceDefinition:
        """Build a definition from an instance of a ``@sequence`` class.

        Raises:
            SequenceValidationError: The class is not decorated, declares
                more than one validator or core, or names a compensation
                method that does not exist.
        """
        bean_cls = type(bean)
        meta = getattr(bean_cls, SEQUENCE_ATTR, None)
        if meta is None:
            msg = f"{bean_cls.__name__} is not decorated with @sequence"
            raise SequenceValidationError(msg)
        name = meta["name"]

        # Definition order, base classes first; overrides keep their slot.
        members: dict[str, Any] = {}
        for klass in reversed(bean_cls.__mro__):
            members.update(vars(klass))

        steps: list[Step] = []
        validate: Callable[..., bool] | None = None
        core: Callable[..., Any] | None = None
        core_compensate: Callable[..., Any] | None = None

        for attr_name, member in members.items():
            if not callable(member):
                continue
            if getattr(member, VALIDATOR_ATTR, False):
                if validate is not None:
                    msg = f"Sequence '{name}' declares more than one validator"
                    raise SequenceValidationError(msg)
                validate = getattr(bean, attr_name)
            step_meta = getattr(member, STEP_ATTR, None)
            if step_meta is not None:
                steps.append(FunctionStep(
                    name=step_meta["name"],
                    action=getattr(bean, attr_name),
                    undo=cls._resolve(bean, name, step_meta["compensate"]),
                    fail_on_false=step_meta["fail_on_false"],
                ))
            core_meta = getattr(member, CORE_ATTR, None)
            if core_meta is not None:
                if core is not None:
                    msg = f"Sequence '{name}' declares more than one core"
                    raise SequenceValidationError(msg)
                core = getattr(bean, attr_name)
                core_compensate = cls._resolve(bean, name, core_meta["compensate"])

        return cls.create(
            name=name,
            steps=steps,
            validate=validate,
            core=core,
            core_compensate=core_compensate,
            mode=meta["mode"],
        )

    @staticmethod
    def _resolve(bean: Any, name: str, method_name: str | None) -> Callable[..., Any] | None:
        if method_name is None:
            return None
        method = getattr(bean, method_name, None)
        if method is None or not callable(method):
            msg = f"Compensation method '{method_name}' not found on sequence '{name}'"
            raise SequenceValidationError(msg)
        return method

    def run(self, inputs: Any = None, sequencer: Sequencer | None = None) -> Outcome:
        """Run this definition with *sequencer* (a default one if omitted)."""
        return (sequencer or Sequencer()).execute(self, inputs)
