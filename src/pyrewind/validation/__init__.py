"""PyRewind Validation: Pydantic integration and input predicates."""

from pyrewind.validation.predicates import all_of, model_predicate, validate_model

__all__ = [
    "all_of",
    "model_predicate",
    "validate_model",
]
