"""
Fixtures for the Cedar policy boundary tests.

``ScriptedEngine`` uses the real structured-value parsers and scripts the
parts that need a Cedar policy parser: policy text is rejected when it holds
a lone ``:``, evaluation returns whatever response the test set up.
"""

import re
from typing import Any, Dict, List

import pytest

from shared.config import BoundaryConfig
from shared.errors import EngineRejection
from shared.metrics import MetricsCollector
from cedar_boundary.app.engine.structured import StructuredEngine
from cedar_boundary.app.engine.types import (
    NO_FINDINGS, AuthorizationResponse, Decision, Entities, Policy, PolicySet,
    Request, Schema
)
from cedar_boundary.app.main import PolicyBoundary

LONE_COLON = re.compile(r"(?<!:):(?!:)")


class ScriptedEngine(StructuredEngine):
    """Engine double with scripted policy handling."""

    name = "scripted"

    def __init__(self, version: str = "4.2.0"):
        self._version = version
        self.response = AuthorizationResponse(decision=Decision.DENY)
        self.findings = NO_FINDINGS
        self.requests: List[Request] = []

    def version(self) -> str:
        return self._version

    def _check_policy_text(self, text: str) -> None:
        without_strings = re.sub(r'"(?:[^"\\]|\\.)*"', '""', text)
        if LONE_COLON.search(without_strings):
            raise EngineRejection("unexpected token `:`")

    def parse_policy_set(self, text: str) -> PolicySet:
        self._check_policy_text(text)
        return PolicySet(text=text)

    def parse_policy(self, text: str) -> Policy:
        self._check_policy_text(text)
        if text.count(";") != 1:
            raise EngineRejection(f"expected exactly one policy, found {text.count(';')}")
        effect = text.strip().split("(", 1)[0].strip()
        return Policy(est={
            "effect": effect,
            "principal": {"op": "All"},
            "action": {"op": "All"},
            "resource": {"op": "All"},
            "conditions": [],
        })

    def is_authorized(self, request: Request, policies: PolicySet, entities: Entities) -> AuthorizationResponse:
        self.requests.append(request)
        return self.response

    def validate(self, schema: Schema, policies: PolicySet) -> str:
        return self.findings

    def policy_to_json(self, policy: Policy) -> Dict[str, Any]:
        return policy.est

    def policy_from_json(self, value: Any) -> Policy:
        policy = self.check_policy_json(value)
        return Policy(est=value, text=f"{policy.effect}(principal, action, resource);")

    def policy_to_text(self, policy: Policy) -> str:
        return policy.text


@pytest.fixture
def engine():
    """Create ScriptedEngine instance."""
    return ScriptedEngine()


@pytest.fixture
def metrics():
    """Create a MetricsCollector with its own registry."""
    return MetricsCollector("cedar_boundary_test")


@pytest.fixture
def config():
    """Boundary configuration without environment overrides."""
    return BoundaryConfig(_env_file=None, engine="scripted", cedar_version=None, enable_metrics=True)


@pytest.fixture
def boundary(engine, config, metrics):
    """Create PolicyBoundary over the scripted engine."""
    return PolicyBoundary(engine, config=config, metrics=metrics)


@pytest.fixture
def valid_inputs() -> Dict[str, str]:
    """Six valid isAuthorized inputs."""
    return {
        "principal": 'User::"alice"',
        "action": 'Action::"read"',
        "resource": 'Photo::"foo.jpg"',
        "context": "{}",
        "policies": """
            permit(
                principal == User::"alice",
                action    in [Action::"read", Action::"edit"],
                resource  == Photo::"foo.jpg"
            );
        """,
        "entities": "[]",
    }


@pytest.fixture
def photo_app_schema() -> str:
    """Well-formed PhotoApp schema."""
    return """
        {
            "PhotoApp": {
                "commonTypes": {
                    "PersonType": {
                        "type": "Record",
                        "attributes": {
                            "age": {"type": "Long"},
                            "name": {"type": "String"}
                        }
                    },
                    "ContextType": {
                        "type": "Record",
                        "attributes": {
                            "ip": {"type": "Extension", "name": "ipaddr"}
                        }
                    }
                },
                "entityTypes": {
                    "User": {
                        "shape": {
                            "type": "Record",
                            "attributes": {
                                "employeeId": {"type": "String", "required": true},
                                "personInfo": {"type": "PersonType"}
                            }
                        },
                        "memberOfTypes": ["UserGroup"]
                    },
                    "UserGroup": {
                        "shape": {"type": "Record", "attributes": {}}
                    },
                    "Photo": {
                        "shape": {
                            "type": "Record",
                            "attributes": {}
                        },
                        "memberOfTypes": ["Album"]
                    },
                    "Album": {
                        "shape": {"type": "Record", "attributes": {}}
                    }
                },
                "actions": {
                    "viewPhoto": {
                        "appliesTo": {
                            "principalTypes": ["User", "UserGroup"],
                            "resourceTypes": ["Photo"],
                            "context": {"type": "ContextType"}
                        }
                    },
                    "listPhotos": {
                        "appliesTo": {
                            "principalTypes": ["User", "UserGroup"],
                            "resourceTypes": ["Photo"],
                            "context": {"type": "ContextType"}
                        }
                    }
                }
            }
        }
    """

