"""
Interface to the external policy engine.

Parse capabilities raise ``EngineRejection`` for input they refuse; the stage
gates turn that into a coded failure. Every other capability runs on values
the gates already accepted and is expected to succeed.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .types import (
    AuthorizationResponse, Context, Entities, EntityUid, Policy, PolicySet,
    Request, Schema
)


class PolicyEngine(ABC):
    """Capabilities the boundary consumes from a policy engine."""

    name: str = "engine"

    @abstractmethod
    def version(self) -> str:
        """Report the engine's version identity."""

    @abstractmethod
    def parse_entity_uid(self, text: str) -> EntityUid:
        """Parse an entity identifier literal."""

    @abstractmethod
    def parse_context(self, value: Any, schema: Optional[Schema] = None) -> Context:
        """Parse a request context from a decoded JSON value."""

    @abstractmethod
    def parse_policy_set(self, text: str) -> PolicySet:
        """Parse policy text holding any number of policies."""

    @abstractmethod
    def parse_policy(self, text: str) -> Policy:
        """Parse policy text holding exactly one policy."""

    @abstractmethod
    def parse_entities(self, value: Any, schema: Optional[Schema] = None) -> Entities:
        """Parse an entity set from a decoded JSON value."""

    @abstractmethod
    def parse_schema(self, value: Any) -> Schema:
        """Parse a schema from a decoded JSON value."""

    @abstractmethod
    def build_request(
        self,
        principal: EntityUid,
        action: EntityUid,
        resource: EntityUid,
        context: Context,
        schema: Optional[Schema] = None
    ) -> Request:
        """Construct an authorization request."""

    @abstractmethod
    def is_authorized(self, request: Request, policies: PolicySet, entities: Entities) -> AuthorizationResponse:
        """Evaluate a request against policies and entities."""

    @abstractmethod
    def validate(self, schema: Schema, policies: PolicySet) -> str:
        """Validate policies against a schema and describe the findings."""

    @abstractmethod
    def policy_to_json(self, policy: Policy) -> Dict[str, Any]:
        """Serialize a policy to its structured JSON form."""

    @abstractmethod
    def policy_from_json(self, value: Any) -> Policy:
        """Deserialize a policy from its structured JSON form."""

    @abstractmethod
    def policy_to_text(self, policy: Policy) -> str:
        """Render a policy in canonical text form."""
