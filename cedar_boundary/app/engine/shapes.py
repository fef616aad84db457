"""
Pydantic models of Cedar's JSON formats.

These check the structure of entity sets, schemas and JSON policies before
anything reaches the engine. Unknown keys are rejected the way Cedar's own
deserializers reject them.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator
)

from shared.errors import EngineRejection
from .uid import parse_entity_uid


class EntityRefJson(BaseModel):
    """Entity reference, either ``{"type", "id"}`` or ``{"__entity": {...}}``."""

    model_config = ConfigDict(extra="forbid")

    type: str
    id: str

    @model_validator(mode="before")
    @classmethod
    def unwrap_escape(cls, data: Any) -> Any:
        if isinstance(data, dict) and "__entity" in data:
            return data["__entity"]
        return data

    @field_validator("type")
    @classmethod
    def check_type_name(cls, value: str) -> str:
        try:
            parse_entity_uid(f'{value}::""')
        except EngineRejection as e:
            raise ValueError(e.message) from e
        return value


class EntityJson(BaseModel):
    """One entity in an entity set."""

    model_config = ConfigDict(extra="forbid")

    uid: EntityRefJson
    attrs: Dict[str, Any] = Field(default_factory=dict)
    parents: List[EntityRefJson] = Field(default_factory=list)
    tags: Dict[str, Any] = Field(default_factory=dict)


class TypeJson(BaseModel):
    """Type expression used by shapes, contexts and common types."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: str
    attributes: Optional[Dict[str, "TypeJson"]] = None
    element: Optional["TypeJson"] = None
    name: Optional[str] = None
    required: Optional[bool] = None
    additional_attributes: Optional[bool] = Field(default=None, alias="additionalAttributes")
    annotations: Optional[Dict[str, str]] = None


TypeJson.model_rebuild()


class EntityTypeJson(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    member_of_types: List[str] = Field(default_factory=list, alias="memberOfTypes")
    shape: Optional[TypeJson] = None
    tags: Optional[TypeJson] = None
    enum: Optional[List[str]] = None
    annotations: Optional[Dict[str, str]] = None


class ActionRefJson(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    type: Optional[str] = None


class AppliesToJson(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    principal_types: List[str] = Field(default_factory=list, alias="principalTypes")
    resource_types: List[str] = Field(default_factory=list, alias="resourceTypes")
    context: Optional[TypeJson] = None


class ActionJson(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    applies_to: Optional[AppliesToJson] = Field(default=None, alias="appliesTo")
    member_of: Optional[List[ActionRefJson]] = Field(default=None, alias="memberOf")
    attributes: Optional[Dict[str, Any]] = None
    annotations: Optional[Dict[str, str]] = None


class NamespaceJson(BaseModel):
    """One namespace of a schema document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    entity_types: Dict[str, EntityTypeJson] = Field(alias="entityTypes")
    actions: Dict[str, ActionJson]
    common_types: Dict[str, TypeJson] = Field(default_factory=dict, alias="commonTypes")
    annotations: Optional[Dict[str, str]] = None


class ScopeJson(BaseModel):
    """Principal, action or resource constraint of a JSON policy."""

    model_config = ConfigDict(extra="allow")

    op: Literal["All", "==", "in", "is"]


class PolicyJson(BaseModel):
    """Single policy in Cedar's JSON policy format."""

    model_config = ConfigDict(extra="forbid")

    effect: Literal["permit", "forbid"]
    principal: ScopeJson
    action: ScopeJson
    resource: ScopeJson
    conditions: List[Dict[str, Any]] = Field(default_factory=list)
    annotations: Dict[str, Optional[str]] = Field(default_factory=dict)


ENTITY_SET = TypeAdapter(List[EntityJson])
SCHEMA_DOCUMENT = TypeAdapter(Dict[str, NamespaceJson])


I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

_EXPECTED = {
    "list_type": "a sequence",
    "dict_type": "a map",
    "model_type": "a map",
    "model_attributes_type": "a map",
    "string_type": "a string",
    "bool_type": "a boolean",
    "bool_parsing": "a boolean",
}


def json_kind(value: Any) -> str:
    """Name a decoded JSON value the way serde reports it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"boolean `{str(value).lower()}`"
    if isinstance(value, int):
        return f"integer `{value}`"
    if isinstance(value, float):
        return f"floating point `{value}`"
    if isinstance(value, str):
        return f'string "{value}"'
    if isinstance(value, list):
        return "sequence"
    return "map"


def find_invalid_value(value: Any, location: List[str]) -> Optional[str]:
    """Describe the first JSON value Cedar cannot represent, if any.

    Cedar values are booleans, strings, 64-bit integers, sets and records.
    """
    if isinstance(value, (bool, str)):
        return None
    if isinstance(value, int):
        if I64_MIN <= value <= I64_MAX:
            return None
        problem = f"integer `{value}` does not fit in 64 bits"
    elif isinstance(value, list):
        for index, item in enumerate(value):
            found = find_invalid_value(item, location + [str(index)])
            if found:
                return found
        return None
    elif isinstance(value, dict):
        for key, item in value.items():
            found = find_invalid_value(item, location + [str(key)])
            if found:
                return found
        return None
    else:
        problem = f"{json_kind(value)} is not a Cedar value"

    if location:
        return f"{problem} at `{'.'.join(location)}`"
    return problem


def describe_validation_error(exc: ValidationError) -> str:
    """Describe the first structural problem found by pydantic.

    Messages use serde's wording, e.g.
    ``missing field `type` at `PhotoApp.commonTypes.PersonType```.
    """
    error = exc.errors(include_url=False)[0]
    location = [str(part) for part in error["loc"]]

    if error["type"] == "missing":
        message = f"missing field `{location[-1]}`"
        location = location[:-1]
    elif error["type"] == "extra_forbidden":
        message = f"unknown field `{location[-1]}`"
        location = location[:-1]
    elif error["type"] in _EXPECTED:
        message = f"invalid type: {json_kind(error['input'])}, expected {_EXPECTED[error['type']]}"
    elif error["type"] == "literal_error":
        expected = error["ctx"]["expected"].replace("'", "`")
        message = f"unknown variant `{error['input']}`, expected {expected}"
    elif error["type"] == "value_error":
        message = str(error["ctx"]["error"])
    else:
        message = error["msg"]

    if location:
        return f"{message} at `{'.'.join(location)}`"
    return message
