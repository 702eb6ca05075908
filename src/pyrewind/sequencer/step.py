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
"""Step abstraction: a fallible forward action paired with its compensation.

A :class:`Step` never sees its own effect directly: the engine wraps the
value returned by :meth:`Step.attempt` in an :class:`Effect` and only ever
passes that Effect back to :meth:`Step.compensate`.  A compensation can
therefore only run against an effect that was actually produced.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pyrewind.kernel.exceptions import StepFailedError

if TYPE_CHECKING:
    from pyrewind.sequencer.context import RunContext


@dataclass(frozen=True)
class Effect:
    """Live side effect of one successful :meth:`Step.attempt`.

    Attributes:
        index: Position of the producing step in the run.
        step_name: Name of the producing step.
        value: Whatever ``attempt()`` returned (a handle, a path, ``None``...).
    """

    index: int
    step_name: str
    value: Any = None


@runtime_checkable
class Step(Protocol):
    """Structural contract for a sequenced step.

    ``attempt`` signals failure by raising.  ``compensate`` is called at most
    once, and only with the Effect produced by this same step's successful
    ``attempt``.  It must not depend on anything but the steps before it
    still being live.
    """

    name: str

    def attempt(self, ctx: RunContext) -> Any: ...

    def compensate(self, effect: Effect, ctx: RunContext) -> None: ...


def _positional_arity(func: Callable[..., Any]) -> int:
    """Number of positional arguments *func* accepts (``-1`` for ``*args``)."""
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return 1
    count = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return -1
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def call_with_arity(func: Callable[..., Any], *candidates: Any) -> Any:
    """Call *func* with as many leading *candidates* as it accepts."""
    arity = _positional_arity(func)
    if arity < 0:
        return func(*candidates)
    return func(*candidates[:arity])


@dataclass(frozen=True)
class FunctionStep:
    """A :class:`Step` built from plain callables.

    The forward *action* is called as ``action()`` or ``action(ctx)``.  The
    optional *undo* is called as ``undo()``, ``undo(value)`` or
    ``undo(value, ctx)``, where ``value`` is what the action returned.
    A step without *undo* is a no-op on unwind.

    With ``fail_on_false=True`` an action returning exactly ``False`` is
    reported as a failure, for operations that signal failure by return
    value instead of raising.
    """

    name: str
    action: Callable[..., Any]
    undo: Callable[..., Any] | None = None
    fail_on_false: bool = False

    @property
    def has_compensation(self) -> bool:
        return self.undo is not None

    def attempt(self, ctx: RunContext) -> Any:
        result = call_with_arity(self.action, ctx)
        if self.fail_on_false and result is False:
            raise StepFailedError(
                f"Step '{self.name}' reported failure", step_name=self.name,
            )
        return result

    def compensate(self, effect: Effect, ctx: RunContext) -> None:
        if self.undo is not None:
            call_with_arity(self.undo, effect.value, ctx)


def step(
    name: str,
    action: Callable[..., Any],
    compensate: Callable[..., Any] | None = None,
    *,
    fail_on_false: bool = False,
) -> FunctionStep:
    """Shorthand for ``FunctionStep(name, action, compensate, fail_on_false)``."""
    return FunctionStep(
        name=name, action=action, undo=compensate, fail_on_false=fail_on_false,
    )
