"""Unified exception hierarchy for PyRewind.

All library exceptions inherit from RewindException, enabling unified
error handling across modules.

Categories:
- ValidationException: caller inputs rejected before any step runs
- SequenceValidationError: a sequence definition is malformed
- StepFailedError: a step's forward action reported failure
- CompensationFailedError: a compensating action failed (unrecoverable)
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class RewindException(Exception):
    """Base exception for all PyRewind errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "VALIDATION_ERROR").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Recoverable Exceptions
# =============================================================================


class ValidationException(RewindException):
    """Input validation failures."""


class SequenceValidationError(RewindException):
    """A sequence definition is invalid (duplicate names, missing actions, shared steps)."""


class StepFailedError(RewindException):
    """Raised by (or on behalf of) a step whose forward action failed."""

    def __init__(
        self,
        message: str,
        step_name: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code="STEP_FAILED", context=context)
        self.step_name = step_name


# =============================================================================
# Unrecoverable Exceptions
# =============================================================================


class CompensationFailedError(RewindException):
    """A compensating action raised while unwinding.

    This is never folded into an ordinary Failure outcome: once a
    compensation fails the "no residual side effect" guarantee no longer
    holds, and the remaining live effects are reported so the caller can
    escalate.

    Args:
        sequence_name: Name of the run being unwound.
        step_index: Position of the step whose compensation failed.
        step_name: Name of that step.
        compensated: Indices compensated before the failure, in call order.
        live: Indices whose effects are still live (includes *step_index*).
        original_error: The step or core error that started the unwind,
            or ``None`` when unwinding on the success path.
    """

    def __init__(
        self,
        sequence_name: str,
        step_index: int,
        step_name: str,
        compensated: list[int],
        live: list[int],
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"Compensation of step '{step_name}' (index {step_index}) failed "
            f"in sequence '{sequence_name}'; live effects remain at {live}",
            code="COMPENSATION_FAILED",
            context={
                "sequence_name": sequence_name,
                "step_index": step_index,
                "step_name": step_name,
                "compensated": list(compensated),
                "live": list(live),
            },
        )
        self.sequence_name = sequence_name
        self.step_index = step_index
        self.step_name = step_name
        self.compensated = list(compensated)
        self.live = list(live)
        self.original_error = original_error
