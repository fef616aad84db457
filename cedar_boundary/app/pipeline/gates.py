"""
Stage gates: parse one raw input or reject it with a stage-specific code.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from shared.errors import EngineRejection
from .results import Parsed, StageFailure, StageResult
from .stages import Stage


def decode_json(raw: str) -> Any:
    """Turn raw text into a structured value, reporting the decoder's own error."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise EngineRejection(str(e)) from e


@dataclass(frozen=True)
class GateStep:
    """One parse step and the stage that reports its rejection."""
    stage: Stage
    parse: Callable[[Any], Any]


class StageGate:
    """Parse-or-reject for one input field.

    A gate runs its steps in order, each on the previous step's output. The
    first ``EngineRejection`` stops the gate and becomes a ``StageFailure``
    carrying the rejection text unchanged.
    """

    def __init__(self, name: str, steps: Sequence[GateStep]):
        if not steps:
            raise ValueError(f"gate {name!r} needs at least one step")
        self.name = name
        self.steps = tuple(steps)

    @classmethod
    def single(cls, name: str, stage: Stage, parse: Callable[[Any], Any]) -> "StageGate":
        """Gate with one parse step."""
        return cls(name, [GateStep(stage, parse)])

    @classmethod
    def decoded(
        cls,
        name: str,
        stage: Stage,
        parse: Callable[[Any], Any],
        decode_stage: Optional[Stage] = None
    ) -> "StageGate":
        """Gate that decodes JSON text before handing it to ``parse``."""
        return cls(name, [GateStep(decode_stage or stage, decode_json), GateStep(stage, parse)])

    def run(self, raw: str) -> StageResult:
        """Parse ``raw`` through every step."""
        if not isinstance(raw, str):
            raise TypeError(f"{self.name} must be str, not {type(raw).__name__}")

        value: Any = raw
        for step in self.steps:
            try:
                value = step.parse(value)
            except EngineRejection as e:
                return StageFailure(stage=step.stage, detail=e.message)
        return Parsed(value)
