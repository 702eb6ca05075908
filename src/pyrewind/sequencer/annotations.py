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
"""Sequence annotations: decorators for declaring a sequence on a class.

Class-level decorator:
    @sequence            marks a class as a sequence definition

Method-level decorators:
    @sequence_step       marks a method as the next step, in definition order
    @sequence_validator  marks the predicate checked before any step runs
    @sequence_core       marks the core computation

Example::

    @sequence("provision-workspace", mode=Mode.FACTORY)
    class ProvisionWorkspace:
        @sequence_validator
        def check(self, inputs) -> bool:
            return bool(inputs.get("owner"))

        @sequence_step("mkdir", compensate="rmdir")
        def mkdir(self, ctx): ...

        def rmdir(self, path): ...

        @sequence_core
        def register(self, ctx): ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pyrewind.sequencer.types import Mode

T = TypeVar("T", bound=type)
F = TypeVar("F", bound=Callable[..., Any])

SEQUENCE_ATTR = "__pyrewind_sequence__"
STEP_ATTR = "__pyrewind_sequence_step__"
VALIDATOR_ATTR = "__pyrewind_sequence_validator__"
CORE_ATTR = "__pyrewind_sequence_core__"


def sequence(name: str, mode: Mode | str = Mode.FACTORY) -> Callable[[T], T]:
    """Mark a class as a sequence definition.

    Sets ``__pyrewind_sequence__`` on the class with the keys ``name`` and
    ``mode``.

    Args:
        name: Sequence name used in events, logs and errors.
        mode: ``FACTORY`` or ``SCOPED``. Defaults to ``FACTORY``.
    """
    resolved_mode = Mode.parse(mode)

    def decorator(cls: T) -> T:
        setattr(cls, SEQUENCE_ATTR, {"name": name, "mode": resolved_mode})
        return cls

    return decorator


def sequence_step(
    name: str | None = None,
    compensate: str | None = None,
    fail_on_false: bool = False,
) -> Callable[[F], F]:
    """Mark a method as a step.

    Steps run in the order their methods are defined in the class body.

    Args:
        name: Step name. Defaults to the method name.
        compensate: Name of the method on the same class that undoes this
            step.  It receives the step's return value.
        fail_on_false: Treat a return value of exactly ``False`` as failure.
    """

    def decorator(func: F) -> F:
        setattr(func, STEP_ATTR, {
            "name": name or func.__name__,
            "compensate": compensate,
            "fail_on_false": fail_on_false,
        })
        return func

    return decorator


def sequence_validator(func: F) -> F:
    """Mark a method as the input predicate of the sequence."""
    setattr(func, VALIDATOR_ATTR, True)
    return func


def sequence_core(
    func: F | None = None, *, compensate: str | None = None
) -> F | Callable[[F], F]:
    """Mark a method as the core computation.

    Usable bare (``@sequence_core``) or with a compensation method name
    (``@sequence_core(compensate="undo_register")``), in which case the core
    runs as the final step of the sequence.
    """

    def decorator(f: F) -> F:
        setattr(f, CORE_ATTR, {"compensate": compensate})
        return f

    if func is not None:
        return decorator(func)
    return decorator
