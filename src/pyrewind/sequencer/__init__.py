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
"""PyRewind Sequencer: ordered steps with reverse-order compensation."""

from __future__ import annotations

from pyrewind.sequencer.annotations import (
    sequence,
    sequence_core,
    sequence_step,
    sequence_validator,
)
from pyrewind.sequencer.builder import SequenceBuilder, StepBuilder
from pyrewind.sequencer.compensator import Compensator
from pyrewind.sequencer.context import RunContext
from pyrewind.sequencer.definition import SequenceDefinition
from pyrewind.sequencer.engine import Sequencer
from pyrewind.sequencer.events import (
    CompositeEventsAdapter,
    LoggerEventsAdapter,
    SequencerEventsPort,
)
from pyrewind.sequencer.properties import SequencerProperties
from pyrewind.sequencer.report import FailureReport
from pyrewind.sequencer.result import Outcome, StepOutcome
from pyrewind.sequencer.step import Effect, FunctionStep, Step, step
from pyrewind.sequencer.types import FailureKind, Mode, StepStatus

__all__ = [
    "Compensator",
    "CompositeEventsAdapter",
    "Effect",
    "FailureKind",
    "FailureReport",
    "FunctionStep",
    "LoggerEventsAdapter",
    "Mode",
    "Outcome",
    "RunContext",
    "SequenceBuilder",
    "SequenceDefinition",
    "Sequencer",
    "SequencerEventsPort",
    "SequencerProperties",
    "Step",
    "StepBuilder",
    "StepOutcome",
    "StepStatus",
    "sequence",
    "sequence_core",
    "sequence_step",
    "sequence_validator",
    "step",
]
