"""
Structured-value capabilities shared by engine adapters.

Entity identifiers, contexts, entity sets and schema documents are checked
here in Python. Policy text and everything that evaluates policies is left to
concrete engines.
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from shared.errors import EngineRejection
from .base import PolicyEngine
from .shapes import (
    ENTITY_SET, SCHEMA_DOCUMENT, PolicyJson, describe_validation_error, find_invalid_value
)
from .types import Context, Entities, EntityUid, Request, Schema
from .uid import parse_entity_uid


class StructuredEngine(PolicyEngine):
    """Policy engine base with the JSON-format parsers implemented."""

    def parse_entity_uid(self, text: str) -> EntityUid:
        return parse_entity_uid(text)

    def parse_context(self, value: Any, schema: Optional[Schema] = None) -> Context:
        if not isinstance(value, dict):
            rendered = json.dumps(value, separators=(",", ":"))
            raise EngineRejection(f"expression is not a record: `{rendered}`")

        problem = find_invalid_value(value, [])
        if problem:
            raise EngineRejection(f"failed to build request: {problem}")
        return Context(values=value)

    def parse_entities(self, value: Any, schema: Optional[Schema] = None) -> Entities:
        try:
            ENTITY_SET.validate_python(value)
        except ValidationError as e:
            raise EngineRejection(
                f"error during entity deserialization: {describe_validation_error(e)}"
            ) from e

        for index, entity in enumerate(value):
            for field in ("attrs", "tags"):
                problem = find_invalid_value(entity.get(field, {}), [str(index), field])
                if problem:
                    raise EngineRejection(f"error during entity deserialization: {problem}")

        # The caller's own documents go to the engine, not the model dumps
        return Entities(entities=tuple(value))

    def parse_schema(self, value: Any) -> Schema:
        try:
            SCHEMA_DOCUMENT.validate_python(value)
        except ValidationError as e:
            raise EngineRejection(f"failed to parse schema: {describe_validation_error(e)}") from e
        return Schema(document=value)

    def check_policy_json(self, value: Any) -> PolicyJson:
        """Check that a decoded value has the shape of a JSON policy."""
        try:
            return PolicyJson.model_validate(value)
        except ValidationError as e:
            raise EngineRejection(describe_validation_error(e)) from e

    def build_request(
        self,
        principal: EntityUid,
        action: EntityUid,
        resource: EntityUid,
        context: Context,
        schema: Optional[Schema] = None
    ) -> Request:
        return Request(principal=principal, action=action, resource=resource, context=context)
