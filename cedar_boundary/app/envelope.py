"""
Envelope builder: the two wire shapes every operation returns.

``{"code": 0, "data": ...}`` on success, ``{"code": <n>, "message": "..."}``
on failure. The shapes are separate models, so no response can carry both
``data`` and ``message``.
"""

from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .diagnostics import DiagnosticSet
from .engine.types import Decision
from .pipeline.results import StageFailure


class AuthorizationData(BaseModel):
    """Success payload of ``isAuthorized``."""

    model_config = ConfigDict(frozen=True)

    decision: Decision
    reasons: List[str]
    errors: List[str]


class SuccessEnvelope(BaseModel):
    """Completed call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: Literal[0] = 0
    data: Union[AuthorizationData, Dict[str, Any], str]


class FailureEnvelope(BaseModel):
    """Call rejected by a stage gate."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: int = Field(..., gt=0)
    message: str


Envelope = Union[SuccessEnvelope, FailureEnvelope]


def success(data: Union[AuthorizationData, Dict[str, Any], str]) -> SuccessEnvelope:
    """Wrap an operation's result."""
    return SuccessEnvelope(data=data)


def failure(stage_failure: StageFailure) -> FailureEnvelope:
    """Wrap a stage gate rejection."""
    return FailureEnvelope(code=stage_failure.code, message=stage_failure.message)


def authorization_data(decision: Decision, diagnostics: DiagnosticSet) -> AuthorizationData:
    """Build the ``isAuthorized`` payload; reasons are emitted sorted."""
    return AuthorizationData(
        decision=decision,
        reasons=list(diagnostics.sorted_reasons()),
        errors=list(diagnostics.errors)
    )


def render(envelope: Envelope) -> str:
    """Serialize an envelope to compact JSON."""
    return envelope.model_dump_json()
