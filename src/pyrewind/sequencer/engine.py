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
"""Sequencer engine: runs ordered steps, the core computation and the mode policy.

A run moves through ``Validating -> Attempting(i) -> CoreExecuting`` and ends
in ``Success`` or ``Failure``; any failure after the first successful step
passes through ``Unwinding(cursor .. 0)`` first.  No state is revisited.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pyrewind.kernel.exceptions import (
    CompensationFailedError,
    SequenceValidationError,
    ValidationException,
)
from pyrewind.logging import configure_logging
from pyrewind.sequencer.compensator import Compensator
from pyrewind.sequencer.context import RunContext
from pyrewind.sequencer.events import LoggerEventsAdapter, SequencerEventsPort, notify
from pyrewind.sequencer.properties import SequencerProperties
from pyrewind.sequencer.report import FailureReport
from pyrewind.sequencer.result import Outcome, StepOutcome
from pyrewind.sequencer.step import Effect, Step, call_with_arity
from pyrewind.sequencer.types import FailureKind, Mode, StepStatus

if TYPE_CHECKING:
    from pyrewind.core.config import Config
    from pyrewind.sequencer.definition import SequenceDefinition

logger = logging.getLogger(__name__)

CORE_STEP_NAME = "core"


class Sequencer:
    """Transactional step sequencer.

    Args:
        events_port: Optional observer of lifecycle events.
        default_mode: Mode used when :meth:`run` is not given one.
    """

    def __init__(
        self,
        events_port: SequencerEventsPort | None = None,
        default_mode: Mode | str = Mode.FACTORY,
    ) -> None:
        self._events_port = events_port
        self._default_mode = Mode.parse(default_mode)
        self._compensator = Compensator(events_port)

    @classmethod
    def from_config(cls, config: Config) -> Sequencer:
        """Build a sequencer from the ``pyrewind.sequencer`` config section.

        Also applies ``pyrewind.logging`` (see :func:`configure_logging`).
        """
        configure_logging(config)
        props = config.bind(SequencerProperties)
        events_port = LoggerEventsAdapter() if props.events_enabled else None
        return cls(events_port=events_port, default_mode=props.default_mode)

    @property
    def default_mode(self) -> Mode:
        return self._default_mode

    def execute(self, definition: SequenceDefinition, inputs: Any = None) -> Outcome:
        """Run a prepared :class:`SequenceDefinition` against *inputs*."""
        return self.run(
            definition.validate,
            definition.steps,
            definition.core,
            definition.mode,
            name=definition.name,
            inputs=inputs,
        )

    def run(
        self,
        validate: Callable[..., bool] | None,
        steps: Iterable[Step],
        core: Callable[..., Any] | None,
        mode: Mode | str | None = None,
        *,
        name: str = "sequence",
        inputs: Any = None,
        run_id: str | None = None,
    ) -> Outcome:
        """Validate, attempt every step in order, run *core*, then apply *mode*.

        Args:
            validate: Predicate over *inputs* (or a zero-argument callable).
                ``None`` always passes.  Raising
                :class:`ValidationException` rejects with its message.
            steps: Ordered steps.  Position is identity; a step instance may
                appear only once.
            core: The computation the steps exist to protect, called as
                ``core()`` or ``core(ctx)``.  Its return value becomes
                :attr:`Outcome.value`.  ``None`` means the last step's effect
                value is reported instead.
            mode: ``FACTORY`` keeps effects live on success, ``SCOPED``
                unwinds them all.  Defaults to the engine's default mode.
            name: Logical name used in events, logs and errors.
            inputs: Caller arguments handed to *validate* and exposed as
                ``ctx.inputs``.
            run_id: Optional run identifier (auto-generated if omitted).

        Returns:
            The run's :class:`Outcome`.  Validation and step failures are
            fully unwound and reported here, never raised.

        Raises:
            CompensationFailedError: A compensating action raised, here or in
                a sequence run by one of the steps or the core.  This is
                never reported as an ordinary Failure.
            SequenceValidationError: *steps* is malformed.
        """
        step_list = tuple(steps)
        self._check_steps(name, step_list)

        ctx = RunContext(
            run_id=run_id or str(uuid.uuid4()),
            name=name,
            mode=Mode.parse(mode) if mode is not None else self._default_mode,
            inputs=inputs,
        )
        started_at = datetime.now(UTC)
        success = False
        value: Any = None
        failure: FailureReport | None = None

        self._emit("on_start", name, ctx.run_id, str(ctx.mode), len(step_list))

        try:
            success, value, failure = self._execute(ctx, validate, step_list, core)
        finally:
            self._emit("on_completed", name, ctx.run_id, success)

        return self._build_outcome(ctx, step_list, started_at, success, value, failure)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _execute(
        self,
        ctx: RunContext,
        validate: Callable[..., bool] | None,
        steps: Sequence[Step],
        core: Callable[..., Any] | None,
    ) -> tuple[bool, Any, FailureReport | None]:
        # 1. Validating
        rejection = self._validate(validate, ctx.inputs)
        if rejection is not None:
            reason, error = rejection
            logger.debug("Sequence '%s' (run_id=%s) rejected inputs: %s", ctx.name, ctx.run_id, reason)
            self._emit("on_validation_failed", ctx.name, ctx.run_id, reason)
            return False, None, FailureReport(
                kind=FailureKind.VALIDATION, reason=reason, error=error,
            )

        # 2. Attempting(i)
        for index, step in enumerate(steps):
            ctx.set_status(index, StepStatus.RUNNING)
            start = time.monotonic()
            try:
                effect_value = step.attempt(ctx)
            except CompensationFailedError:
                raise
            except Exception as exc:
                latency = (time.monotonic() - start) * 1000
                ctx.set_status(index, StepStatus.FAILED)
                ctx.step_errors[index] = exc
                ctx.step_latencies_ms[index] = latency
                self._emit("on_step_failed", ctx.name, ctx.run_id, index, step.name, exc, latency)
                return False, None, self._fail(ctx, steps, FailureKind.STEP, index, step.name, exc)

            latency = (time.monotonic() - start) * 1000
            ctx.push_effect(Effect(index=index, step_name=step.name, value=effect_value))
            ctx.set_status(index, StepStatus.DONE)
            ctx.step_latencies_ms[index] = latency
            self._emit("on_step_success", ctx.name, ctx.run_id, index, step.name, latency)

        # 3. CoreExecuting
        if core is None:
            value = ctx.get_result(len(steps) - 1) if steps else None
        else:
            start = time.monotonic()
            try:
                value = call_with_arity(core, ctx)
            except CompensationFailedError:
                raise
            except Exception as exc:
                self._emit("on_core_executed", ctx.name, ctx.run_id, exc, (time.monotonic() - start) * 1000)
                return False, None, self._fail(ctx, steps, FailureKind.CORE, len(steps), CORE_STEP_NAME, exc)
            self._emit("on_core_executed", ctx.name, ctx.run_id, None, (time.monotonic() - start) * 1000)

        # 4. Mode policy
        if ctx.mode is Mode.SCOPED:
            logger.debug("Sequence '%s' (run_id=%s) is scoped; releasing all effects", ctx.name, ctx.run_id)
            self._compensator.unwind(ctx, steps)

        return True, value, None

    def _fail(
        self,
        ctx: RunContext,
        steps: Sequence[Step],
        kind: FailureKind,
        index: int,
        step_name: str,
        error: BaseException,
    ) -> FailureReport:
        """Unwind ``index-1 .. 0`` and describe the failure."""
        completed = ctx.live_indices()
        logger.debug(
            "Sequence '%s' (run_id=%s) failed at %s '%s': %s. Unwinding %s.",
            ctx.name,
            ctx.run_id,
            kind.lower(),
            step_name,
            error,
            completed,
        )
        compensated = self._compensator.unwind(ctx, steps, original_error=error)
        return FailureReport(
            kind=kind,
            reason=str(error) or type(error).__name__,
            step_index=index,
            step_name=step_name,
            error=error,
            completed_steps=completed,
            compensated_steps=compensated,
        )

    @staticmethod
    def _validate(
        validate: Callable[..., bool] | None, inputs: Any
    ) -> tuple[str, BaseException | None] | None:
        """Return ``(reason, error)`` when the inputs are rejected, else ``None``."""
        if validate is None:
            return None
        try:
            accepted = call_with_arity(validate, inputs)
        except ValidationException as exc:
            return str(exc), exc
        if not accepted:
            name = getattr(validate, "__name__", "validate")
            return f"Inputs rejected by '{name}'", None
        return None

    @staticmethod
    def _check_steps(name: str, steps: Sequence[Step]) -> None:
        seen: set[int] = set()
        for index, step in enumerate(steps):
            if not isinstance(step, Step):
                msg = f"Item {index} of sequence '{name}' is not a Step: {step!r}"
                raise SequenceValidationError(msg)
            if id(step) in seen:
                msg = f"Step '{step.name}' appears more than once in sequence '{name}'"
                raise SequenceValidationError(msg)
            seen.add(id(step))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, method: str, *args: Any) -> None:
        notify(self._events_port, method, *args)

    @staticmethod
    def _build_outcome(
        ctx: RunContext,
        steps: Sequence[Step],
        started_at: datetime,
        success: bool,
        value: Any,
        failure: FailureReport | None,
    ) -> Outcome:
        compensated = set(ctx.compensated)
        outcomes = tuple(
            StepOutcome(
                index=index,
                name=step.name,
                status=ctx.step_statuses.get(index, StepStatus.PENDING),
                result=ctx.step_results.get(index),
                error=ctx.step_errors.get(index),
                latency_ms=ctx.step_latencies_ms.get(index, 0.0),
                compensated=index in compensated,
            )
            for index, step in enumerate(steps)
        )
        return Outcome(
            name=ctx.name,
            run_id=ctx.run_id,
            mode=ctx.mode,
            success=success,
            started_at=started_at,
            completed_at=datetime.now(UTC),
            value=value,
            failure=failure,
            steps=outcomes,
            compensation_order=tuple(ctx.compensated),
        )
