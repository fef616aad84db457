"""
Engine-native values produced by the stage gates.

Every value is created during one boundary call and never mutated after
creation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

NO_FINDINGS = "no errors or warnings"

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def quote_cedar_string(value: str) -> str:
    """Render ``value`` as a Cedar string literal."""
    parts = []
    for char in value:
        if char in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\u{{{ord(char):x}}}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


class Decision(str, Enum):
    """Authorization outcomes."""
    ALLOW = "Allow"
    DENY = "Deny"


@dataclass(frozen=True)
class EntityUid:
    """Entity identifier such as ``PhotoApp::User::"alice"``."""
    entity_type: str
    entity_id: str

    def __str__(self) -> str:
        return f"{self.entity_type}::{quote_cedar_string(self.entity_id)}"


@dataclass(frozen=True)
class Context:
    """Request context record."""
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Entities:
    """Entity set in Cedar's JSON entity format."""
    entities: Tuple[Dict[str, Any], ...] = ()


@dataclass(frozen=True)
class Schema:
    """Schema document in Cedar's JSON schema format."""
    document: Dict[str, Any]


@dataclass(frozen=True)
class PolicySet:
    """Policy set accepted by the engine's policy parser."""
    text: str


@dataclass(frozen=True)
class Policy:
    """A single static policy.

    ``est`` is the policy's structured JSON form. ``text`` is the canonical
    policy text when the engine has already rendered it.
    """
    est: Dict[str, Any]
    text: Optional[str] = None


@dataclass(frozen=True)
class Request:
    """Authorization request built from gated values."""
    principal: EntityUid
    action: EntityUid
    resource: EntityUid
    context: Context


@dataclass(frozen=True)
class AuthorizationResponse:
    """Decision plus the engine's diagnostics, in engine order."""
    decision: Decision
    reasons: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
