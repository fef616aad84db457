"""
Policy engine adapter backed by the ``cedarpy`` bindings of Cedar.
"""

import json
from importlib import metadata
from typing import Any, Dict, List, Optional

import cedarpy

from shared.errors import ContractViolation, EngineRejection
from shared.logging import get_logger
from .structured import StructuredEngine
from .types import (
    NO_FINDINGS, AuthorizationResponse, Context, Decision, Entities, Policy, PolicySet,
    Request, Schema
)


# Fixed request used to have Cedar judge a context or entity set on its own
_CHECK_REQUEST = {
    "principal": 'Boundary::"principal"',
    "action": 'Boundary::Action::"check"',
    "resource": 'Boundary::"resource"',
}


def _policy_set_document(policy: Dict[str, Any]) -> Dict[str, Any]:
    return {"staticPolicies": {"policy0": policy}, "templates": {}, "templateLinks": []}


class CedarpyEngine(StructuredEngine):
    """Cedar, as exposed by ``cedarpy``."""

    name = "cedarpy"

    def __init__(self):
        self.logger = get_logger("cedar_boundary.engine.cedarpy")

    def version(self) -> str:
        return metadata.version("cedarpy")

    def parse_policy_set(self, text: str) -> PolicySet:
        try:
            cedarpy.format_policies(text)
        except ValueError as e:
            raise EngineRejection(str(e)) from e
        return PolicySet(text=text)

    def parse_policy(self, text: str) -> Policy:
        try:
            converted = cedarpy.policies_to_json_str(text)
        except ValueError as e:
            raise EngineRejection(str(e)) from e

        document = json.loads(converted)
        static_policies = document.get("staticPolicies", {})
        templates = document.get("templates", {})
        if templates:
            raise EngineRejection("expected a static policy, found a template")
        if len(static_policies) != 1:
            raise EngineRejection(f"expected exactly one policy, found {len(static_policies)}")

        return Policy(est=next(iter(static_policies.values())))

    def _cedar_rejection(self, context: Any, entities: Any) -> Optional[str]:
        """Evaluate the fixed request against no policies; Cedar's error text, if any."""
        try:
            result = cedarpy.is_authorized(dict(_CHECK_REQUEST, context=context), "", entities)
        except ValueError as e:
            return str(e)

        if result.decision.value in (Decision.ALLOW.value, Decision.DENY.value):
            return None
        errors: List[str] = [str(error) for error in result.diagnostics.errors]
        return "; ".join(errors) or f"engine returned no decision: {result.decision.value}"

    def parse_context(self, value: Any, schema: Optional[Schema] = None) -> Context:
        rejection = isinstance(value, dict) and self._cedar_rejection(value, [])
        if rejection:
            raise EngineRejection(rejection)
        return super().parse_context(value, schema)

    def parse_entities(self, value: Any, schema: Optional[Schema] = None) -> Entities:
        rejection = isinstance(value, list) and self._cedar_rejection({}, value)
        if rejection:
            raise EngineRejection(rejection)
        return super().parse_entities(value, schema)

    def parse_schema(self, value: Any) -> Schema:
        try:
            result = cedarpy.validate_policies("", json.dumps(value))
        except ValueError as e:
            raise EngineRejection(str(e)) from e
        if not result.validation_passed:
            raise EngineRejection("; ".join(str(error.error) for error in result.errors))

        # Cedar accepted it; the structural check only catches what Cedar ignores
        return super().parse_schema(value)

    def is_authorized(self, request: Request, policies: PolicySet, entities: Entities) -> AuthorizationResponse:
        cedar_request = {
            "principal": str(request.principal),
            "action": str(request.action),
            "resource": str(request.resource),
            "context": request.context.values,
        }

        try:
            result = cedarpy.is_authorized(cedar_request, policies.text, list(entities.entities))
        except ValueError as e:
            raise ContractViolation("isAuthorized", str(e)) from e

        diagnostics = result.diagnostics
        try:
            decision = Decision(result.decision.value)
        except ValueError as e:
            raise ContractViolation(
                "isAuthorized",
                f"engine returned no decision: {result.decision.value}",
                details={"errors": [str(error) for error in diagnostics.errors]}
            ) from e

        self.logger.debug(
            "Request evaluated",
            decision=decision.value,
            reasons=len(diagnostics.reasons),
            errors=len(diagnostics.errors)
        )

        return AuthorizationResponse(
            decision=decision,
            reasons=tuple(diagnostics.reasons),
            errors=tuple(str(error) for error in diagnostics.errors)
        )

    def validate(self, schema: Schema, policies: PolicySet) -> str:
        try:
            result = cedarpy.validate_policies(policies.text, json.dumps(schema.document))
        except ValueError as e:
            raise ContractViolation("validate", str(e)) from e

        if result.validation_passed:
            return NO_FINDINGS
        return "\n".join(str(error.error) for error in result.errors)

    def policy_to_json(self, policy: Policy) -> Dict[str, Any]:
        return policy.est

    def policy_from_json(self, value: Any) -> Policy:
        self.check_policy_json(value)

        try:
            text = cedarpy.policies_from_json_str(json.dumps(_policy_set_document(value)))
        except ValueError as e:
            raise EngineRejection(str(e)) from e
        return Policy(est=value, text=text.strip())

    def policy_to_text(self, policy: Policy) -> str:
        if policy.text is not None:
            return policy.text

        try:
            text = cedarpy.policies_from_json_str(json.dumps(_policy_set_document(policy.est)))
        except ValueError as e:
            raise ContractViolation("policyFromJson", str(e)) from e
        return text.strip()
