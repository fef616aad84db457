"""
Stage table: the stable code and tag of every rejection point.

Codes are grouped by hundreds per operation so a caller can tell which
operation and which input failed from the number alone.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

IS_AUTHORIZED = "isAuthorized"
VALIDATE = "validate"
POLICY_TO_JSON = "policyToJson"
POLICY_FROM_JSON = "policyFromJson"
VALIDATE_SCHEMA = "validateSchema"
GET_CEDAR_VERSION = "getCedarVersion"


@dataclass(frozen=True)
class Stage:
    """One coded rejection point of an operation."""
    name: str
    code: int
    tag: str

    def message(self, detail: str) -> str:
        """Tag the engine's error text for this stage."""
        return f"[{self.tag}]: {detail}"


PRINCIPAL = Stage("principal", 101, "PrincipalErr")
ACTION = Stage("action", 102, "ActionErr")
RESOURCE = Stage("resource", 103, "ResourceErr")
CONTEXT = Stage("context", 104, "ContextErr")
POLICIES = Stage("policies", 105, "PoliciesErr")
ENTITIES = Stage("entities", 106, "EntitiesErr")

VALIDATE_SCHEMA_STAGE = Stage("schema", 201, "SchemaErr")
VALIDATE_POLICIES = Stage("policies", 202, "PolicyErr")

POLICY_TEXT = Stage("policy", 301, "PolicyErr")

POLICY_JSON = Stage("policy_json", 401, "PolicyJsonErr")
POLICY_SHAPE = Stage("policy", 402, "PolicyErr")

SCHEMA = Stage("schema", 501, "SchemaErr")

STAGE_TABLE: Dict[str, Tuple[Stage, ...]] = {
    IS_AUTHORIZED: (PRINCIPAL, ACTION, RESOURCE, CONTEXT, POLICIES, ENTITIES),
    VALIDATE: (VALIDATE_SCHEMA_STAGE, VALIDATE_POLICIES),
    POLICY_TO_JSON: (POLICY_TEXT,),
    POLICY_FROM_JSON: (POLICY_JSON, POLICY_SHAPE),
    VALIDATE_SCHEMA: (SCHEMA,),
}
