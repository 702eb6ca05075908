"""Validation predicates for the sequencer's pre-flight check.

A run's ``validate`` argument is a predicate over the caller's inputs.  The
helpers here build such predicates from Pydantic models or combine several
argument checks into one.  Rejections raise :class:`ValidationException`,
whose message the sequencer reports as the failure reason.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from pyrewind.kernel.exceptions import ValidationException
from pyrewind.sequencer.step import call_with_arity

M = TypeVar("M", bound=BaseModel)
Predicate = Callable[..., bool]


def validate_model(model: type[M], inputs: Any) -> M:
    """Parse *inputs* as *model*.

    Raises:
        ValidationException: ``Inputs rejected by <Model>: <field>: <msg>; ...``
            with the Pydantic error list under ``context["errors"]``.
    """
    try:
        return model.model_validate(inputs)
    except ValidationError as exc:
        errors = exc.errors()
        fields = "; ".join(
            f"{'.'.join(map(str, err['loc'])) or '<inputs>'}: {err['msg']}" for err in errors
        )
        raise ValidationException(
            f"Inputs rejected by {model.__name__}: {fields}",
            code="VALIDATION_ERROR",
            context={"model": model.__name__, "errors": errors},
        ) from exc


def model_predicate(model: type[BaseModel]) -> Predicate:
    """Predicate that accepts inputs valid for *model*."""

    def _predicate(inputs: Any) -> bool:
        validate_model(model, inputs)
        return True

    _predicate.__name__ = f"valid_{model.__name__}"
    return _predicate


def all_of(*predicates: Predicate, message: str = "Validation failed") -> Predicate:
    """Predicate that passes only when every one of *predicates* passes.

    Predicates are evaluated left to right and short-circuit on the first
    rejection.  Each may take the inputs or no argument at all.
    """

    def _predicate(inputs: Any = None) -> bool:
        for index, predicate in enumerate(predicates):
            if not call_with_arity(predicate, inputs):
                name = getattr(predicate, "__name__", f"predicate[{index}]")
                raise ValidationException(
                    f"{message}: {name}",
                    code="VALIDATION_ERROR",
                    context={"predicate": name},
                )
        return True

    return _predicate
