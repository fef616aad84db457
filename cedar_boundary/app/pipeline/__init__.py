"""
Staged validation pipeline.

Each operation parses its raw inputs through a fixed sequence of stage gates:

- stages: the code/tag table, one entry per rejection point.
- gates: parse-or-reject for one input, built from engine parse steps.
- results: ``Parsed`` / ``StageFailure`` values and the gated argument map.
- orchestrator: runs an operation's gates in order and stops at the first
  failure.
"""

from .gates import GateStep, StageGate, decode_json
from .orchestrator import PipelineOrchestrator, build_pipelines
from .results import Parsed, ParsedArguments, StageFailure, StageResult
from .stages import STAGE_TABLE, Stage

__all__ = [
    "GateStep",
    "Parsed",
    "ParsedArguments",
    "PipelineOrchestrator",
    "STAGE_TABLE",
    "Stage",
    "StageFailure",
    "StageGate",
    "StageResult",
    "build_pipelines",
    "decode_json",
]
