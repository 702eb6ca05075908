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
"""Compensator -- unwinds live step effects in strict reverse order.

The same routine serves both unwind paths:

* failure path -- step *i* failed, so effects ``i-1 .. 0`` are unwound;
  the failing step produced no effect and is never compensated.
* success path (scoped mode) -- effects ``n-1 .. 0`` are unwound after the
  core computation.

Unwinding stops at the first compensation that raises; the error is
re-raised as :class:`CompensationFailedError` and never folded into an
ordinary failure outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pyrewind.kernel.exceptions import CompensationFailedError
from pyrewind.sequencer.events import SequencerEventsPort, notify

if TYPE_CHECKING:
    from pyrewind.sequencer.context import RunContext
    from pyrewind.sequencer.step import Step

logger = logging.getLogger(__name__)


class Compensator:
    """Executes compensation for every live effect, highest index first."""

    def __init__(self, events_port: SequencerEventsPort | None = None) -> None:
        self._events_port = events_port

    def unwind(
        self,
        ctx: RunContext,
        steps: Sequence[Step],
        original_error: BaseException | None = None,
    ) -> list[int]:
        """Compensate effects from ``ctx.cursor`` down to ``0``.

        Returns:
            The indices compensated by this call, in call order.

        Raises:
            CompensationFailedError: A compensating action raised.  The
                effect it was reversing stays live.
        """
        unwound: list[int] = []
        logger.debug(
            "Unwinding sequence '%s' (run_id=%s) from cursor %d",
            ctx.name,
            ctx.run_id,
            ctx.cursor,
        )

        while (effect := ctx.peek_effect()) is not None:
            step = steps[effect.index]
            try:
                step.compensate(effect, ctx)
            except Exception as exc:
                self._emit_compensated(ctx, effect.index, step.name, exc)
                raise CompensationFailedError(
                    sequence_name=ctx.name,
                    step_index=effect.index,
                    step_name=step.name,
                    compensated=list(ctx.compensated),
                    live=ctx.live_indices(),
                    original_error=original_error,
                ) from exc

            ctx.pop_effect()
            unwound.append(effect.index)
            self._emit_compensated(ctx, effect.index, step.name, None)

        return unwound

    def _emit_compensated(
        self,
        ctx: RunContext,
        index: int,
        step_name: str,
        error: BaseException | None,
    ) -> None:
        notify(self._events_port, "on_compensated", ctx.name, ctx.run_id, index, step_name, error)
