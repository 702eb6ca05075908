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
"""PyRewind: transactional step sequencer.

Runs an ordered list of fallible steps; when one fails, every effect already
committed is compensated in strict reverse order, leaving no partial state.
"""

from pyrewind.kernel.exceptions import (
    CompensationFailedError,
    RewindException,
    SequenceValidationError,
    StepFailedError,
    ValidationException,
)
from pyrewind.sequencer import (
    Effect,
    FailureKind,
    FailureReport,
    FunctionStep,
    Mode,
    Outcome,
    RunContext,
    SequenceBuilder,
    SequenceDefinition,
    Sequencer,
    Step,
    StepOutcome,
    StepStatus,
    sequence,
    sequence_core,
    sequence_step,
    sequence_validator,
    step,
)

__version__ = "0.1.0"

__all__ = [
    "CompensationFailedError",
    "Effect",
    "FailureKind",
    "FailureReport",
    "FunctionStep",
    "Mode",
    "Outcome",
    "RewindException",
    "RunContext",
    "SequenceBuilder",
    "SequenceDefinition",
    "SequenceValidationError",
    "Sequencer",
    "Step",
    "StepFailedError",
    "StepOutcome",
    "StepStatus",
    "ValidationException",
    "__version__",
    "sequence",
    "sequence_core",
    "sequence_step",
    "sequence_validator",
    "step",
]
