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
"""Tests for validation helpers and input predicates."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from pyrewind.kernel.exceptions import ValidationException
from pyrewind.sequencer import FailureKind, Sequencer, step
from pyrewind.validation import all_of, model_predicate, validate_model


class _Transfer(BaseModel):
    source: str
    amount: int = Field(gt=0)


# ── validate_model ───────────────────────────────────────────


class TestValidateModel:
    def test_returns_model(self) -> None:
        transfer = validate_model(_Transfer, {"source": "acc-1", "amount": 5})

        assert transfer.amount == 5

    def test_raises_with_field_detail(self) -> None:
        with pytest.raises(ValidationException, match="amount") as exc_info:
            validate_model(_Transfer, {"source": "acc-1", "amount": 0})

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.context["errors"][0]["loc"] == ("amount",)
        assert exc_info.value.context["model"] == "_Transfer"
        assert str(exc_info.value).startswith("Inputs rejected by _Transfer: amount:")


# ── Predicates ───────────────────────────────────────────────


class TestModelPredicate:
    def test_accepts_valid_inputs(self) -> None:
        predicate = model_predicate(_Transfer)

        assert predicate({"source": "a", "amount": 1}) is True
        assert predicate.__name__ == "valid__Transfer"

    def test_rejects_invalid_inputs(self) -> None:
        with pytest.raises(ValidationException):
            model_predicate(_Transfer)({"amount": 1})

    def test_rejection_reason_reaches_outcome(self) -> None:
        attempted: list[str] = []
        s = step("debit", lambda: attempted.append("debit"))

        outcome = Sequencer().run(
            model_predicate(_Transfer), [s], None, inputs={"source": "a", "amount": -1}
        )

        assert not outcome.success
        assert outcome.failure.kind is FailureKind.VALIDATION
        assert outcome.failure.reason.startswith("Inputs rejected by _Transfer: amount:")
        assert attempted == []


class TestAllOf:
    def test_all_pass(self) -> None:
        predicate = all_of(lambda inputs: inputs > 0, lambda: True)

        assert predicate(3) is True

    def test_names_first_rejecting_predicate(self) -> None:
        calls: list[str] = []

        def positive(inputs: int) -> bool:
            calls.append("positive")
            return inputs > 0

        def even(inputs: int) -> bool:
            calls.append("even")
            return inputs % 2 == 0

        predicate = all_of(positive, even, message="Bad amount")

        with pytest.raises(ValidationException, match="Bad amount: positive") as exc_info:
            predicate(-2)

        assert calls == ["positive"]
        assert exc_info.value.context == {"predicate": "positive"}

    def test_empty_always_passes(self) -> None:
        assert all_of()() is True
