"""
Pipeline orchestrator: runs an operation's gates in their fixed order.
"""

from typing import Dict, Sequence, Union

from shared.logging import get_logger
from ..engine.base import PolicyEngine
from .gates import StageGate
from .results import ParsedArguments, StageFailure
from . import stages


class PipelineOrchestrator:
    """Fail-fast runner for one operation.

    Gate ``i`` parses raw input ``i``. The first rejection ends the run;
    later inputs are never inspected, so a call reports at most one failure.
    """

    def __init__(self, operation: str, gates: Sequence[StageGate]):
        self.operation = operation
        self.gates = tuple(gates)
        self.logger = get_logger("cedar_boundary.pipeline")

    def run(self, raw_inputs: Sequence[str]) -> Union[ParsedArguments, StageFailure]:
        """Run every gate or stop at the first failure."""
        if len(raw_inputs) != len(self.gates):
            raise TypeError(
                f"{self.operation} takes {len(self.gates)} inputs, got {len(raw_inputs)}"
            )

        values = {}
        for gate, raw in zip(self.gates, raw_inputs):
            result = gate.run(raw)
            if isinstance(result, StageFailure):
                self.logger.debug(
                    "Stage gate rejected input",
                    operation=self.operation,
                    stage=result.stage.name,
                    code=result.code
                )
                return result
            values[gate.name] = result.value

        return ParsedArguments(values)


def build_pipelines(engine: PolicyEngine) -> Dict[str, PipelineOrchestrator]:
    """Wire every operation's gates to an engine's parse capabilities."""
    return {
        stages.IS_AUTHORIZED: PipelineOrchestrator(stages.IS_AUTHORIZED, [
            StageGate.single("principal", stages.PRINCIPAL, engine.parse_entity_uid),
            StageGate.single("action", stages.ACTION, engine.parse_entity_uid),
            StageGate.single("resource", stages.RESOURCE, engine.parse_entity_uid),
            StageGate.decoded("context", stages.CONTEXT, engine.parse_context),
            StageGate.single("policies", stages.POLICIES, engine.parse_policy_set),
            StageGate.decoded("entities", stages.ENTITIES, engine.parse_entities),
        ]),
        stages.VALIDATE: PipelineOrchestrator(stages.VALIDATE, [
            StageGate.decoded("schema", stages.VALIDATE_SCHEMA_STAGE, engine.parse_schema),
            StageGate.single("policies", stages.VALIDATE_POLICIES, engine.parse_policy_set),
        ]),
        stages.POLICY_TO_JSON: PipelineOrchestrator(stages.POLICY_TO_JSON, [
            StageGate.single("policy", stages.POLICY_TEXT, engine.parse_policy),
        ]),
        stages.POLICY_FROM_JSON: PipelineOrchestrator(stages.POLICY_FROM_JSON, [
            StageGate.decoded(
                "policy", stages.POLICY_SHAPE, engine.policy_from_json, decode_stage=stages.POLICY_JSON
            ),
        ]),
        stages.VALIDATE_SCHEMA: PipelineOrchestrator(stages.VALIDATE_SCHEMA, [
            StageGate.decoded("schema", stages.SCHEMA, engine.parse_schema),
        ]),
    }
