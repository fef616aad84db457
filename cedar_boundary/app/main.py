"""
Cedar policy boundary.

Public entry points. Every operation takes raw strings and returns one JSON
document: a success envelope, or a failure envelope naming the first input
a stage gate rejected. Only engine faults on already gated input escape as
exceptions (``ContractViolation``).
"""

import time
from functools import lru_cache
from typing import Any, Callable, Dict, Optional, Sequence

from shared.config import BoundaryConfig, get_config
from shared.errors import ContractViolation, EngineRejection
from shared.logging import clear_context, ensure_logging, get_logger, set_call_context
from shared.metrics import MetricsCollector, get_metrics_collector

from . import envelope
from .diagnostics import collect_diagnostics
from .engine import PolicyEngine, create_engine
from .engine.types import NO_FINDINGS
from .pipeline import ParsedArguments, StageFailure, build_pipelines
from .pipeline import stages
from .version import resolve_version


class PolicyBoundary:
    """The five boundary operations over one policy engine."""

    def __init__(
        self,
        engine: PolicyEngine,
        config: Optional[BoundaryConfig] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        self.engine = engine
        self.config = config or get_config()
        ensure_logging()
        self.logger = get_logger("cedar_boundary.boundary")
        if metrics is None and self.config.enable_metrics:
            metrics = get_metrics_collector("cedar_boundary")
        self.metrics = metrics
        self.pipelines = build_pipelines(engine)
        self._version: Optional[str] = None

    def get_cedar_version(self) -> str:
        """Version identity of the engine; resolved on first use, then fixed."""
        if self._version is None:
            self._version = resolve_version(self.engine, self.config.cedar_version)
            if self.metrics:
                self.metrics.record_engine(self.engine.name, self._version)
        return self._version

    def is_authorized(
        self,
        principal: str,
        action: str,
        resource: str,
        context: str,
        policies: str,
        entities: str
    ) -> str:
        """Authorize a request against a policy set and entity set."""
        return self._call(
            stages.IS_AUTHORIZED,
            [principal, action, resource, context, policies, entities],
            self._authorize
        )

    def validate(self, schema: str, policies: str) -> str:
        """Validate a policy set against a schema."""
        return self._call(stages.VALIDATE, [schema, policies], self._validate)

    def policy_to_json(self, policy: str) -> str:
        """Convert one policy from text to its JSON form."""
        return self._call(stages.POLICY_TO_JSON, [policy], self._policy_to_json)

    def policy_from_json(self, policy_json: str) -> str:
        """Convert one policy from its JSON form to canonical text."""
        return self._call(stages.POLICY_FROM_JSON, [policy_json], self._policy_from_json)

    def validate_schema(self, schema: str) -> str:
        """Check that a schema parses."""
        return self._call(stages.VALIDATE_SCHEMA, [schema], self._validate_schema)

    def call(self, operation: str, *args: str) -> str:
        """Run an operation by its wire name, e.g. ``isAuthorized``."""
        handlers: Dict[str, Callable[..., str]] = {
            stages.GET_CEDAR_VERSION: self.get_cedar_version,
            stages.IS_AUTHORIZED: self.is_authorized,
            stages.VALIDATE: self.validate,
            stages.POLICY_TO_JSON: self.policy_to_json,
            stages.POLICY_FROM_JSON: self.policy_from_json,
            stages.VALIDATE_SCHEMA: self.validate_schema,
        }
        if operation not in handlers:
            raise KeyError(f"unknown operation: {operation}")
        return handlers[operation](*args)

    def _call(self, operation: str, raw_inputs: Sequence[str], delegate: Callable[[ParsedArguments], Any]) -> str:
        """Parse-gate, delegate, envelope."""
        set_call_context(operation)
        start_time = time.time()

        try:
            outcome = self.pipelines[operation].run(raw_inputs)

            if isinstance(outcome, StageFailure):
                if self.metrics:
                    self.metrics.record_rejection(operation, outcome.stage.name)
                result = envelope.failure(outcome)
            else:
                try:
                    data = delegate(outcome)
                except EngineRejection as e:
                    # Every input was already accepted; the engine changed its mind
                    raise ContractViolation(operation, e.message, details=e.details) from e
                result = envelope.success(data)

        except ContractViolation as e:
            self.logger.error("Engine contract violated", **e.to_dict())
            if self.metrics:
                self.metrics.record_contract_violation(operation)
            raise

        finally:
            clear_context()

        duration = time.time() - start_time
        if self.metrics:
            self.metrics.record_call(operation, result.code, duration)
        self.logger.debug(
            "Boundary call completed",
            operation=operation,
            code=result.code,
            duration_ms=duration * 1000
        )
        return envelope.render(result)

    def _authorize(self, args: ParsedArguments) -> envelope.AuthorizationData:
        request = self.engine.build_request(
            args["principal"], args["action"], args["resource"], args["context"]
        )
        response = self.engine.is_authorized(request, args["policies"], args["entities"])
        return envelope.authorization_data(response.decision, collect_diagnostics(response))

    def _validate(self, args: ParsedArguments) -> str:
        return self.engine.validate(args["schema"], args["policies"])

    def _policy_to_json(self, args: ParsedArguments) -> Dict[str, Any]:
        return self.engine.policy_to_json(args["policy"])

    def _policy_from_json(self, args: ParsedArguments) -> str:
        return self.engine.policy_to_text(args["policy"])

    def _validate_schema(self, args: ParsedArguments) -> str:
        return NO_FINDINGS


@lru_cache(maxsize=None)
def get_default_boundary() -> PolicyBoundary:
    """Boundary over the configured engine, built once per process."""
    config = get_config()
    return PolicyBoundary(create_engine(config.engine), config=config)


def get_cedar_version() -> str:
    """Version identity of the linked policy engine (not enveloped)."""
    return get_default_boundary().get_cedar_version()


def is_authorized(principal: str, action: str, resource: str, context: str, policies: str, entities: str) -> str:
    """Authorize a request. Codes 101-106."""
    return get_default_boundary().is_authorized(principal, action, resource, context, policies, entities)


def validate(schema: str, policies: str) -> str:
    """Validate policies against a schema. Codes 201-202."""
    return get_default_boundary().validate(schema, policies)


def policy_to_json(policy: str) -> str:
    """Policy text to JSON. Code 301."""
    return get_default_boundary().policy_to_json(policy)


def policy_from_json(policy_json: str) -> str:
    """Policy JSON to canonical text. Codes 401-402."""
    return get_default_boundary().policy_from_json(policy_json)


def validate_schema(schema: str) -> str:
    """Check a schema. Code 501."""
    return get_default_boundary().validate_schema(schema)


OPERATIONS: Dict[str, Callable[..., str]] = {
    stages.GET_CEDAR_VERSION: get_cedar_version,
    stages.IS_AUTHORIZED: is_authorized,
    stages.VALIDATE: validate,
    stages.POLICY_TO_JSON: policy_to_json,
    stages.POLICY_FROM_JSON: policy_from_json,
    stages.VALIDATE_SCHEMA: validate_schema,
}
