"""
Integration tests for the boundary over the cedarpy engine.

These tests need the ``cedar`` extra and are skipped without it.
"""

import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest

cedarpy = pytest.importorskip("cedarpy")

from shared.config import BoundaryConfig
from shared.metrics import MetricsCollector
from cedar_boundary.app.engine import create_engine
from cedar_boundary.app.engine.types import PolicySet, Schema
from cedar_boundary.app.main import PolicyBoundary

POLICIES = """
    permit(
        principal == User::"alice",
        action    in [Action::"read", Action::"edit"],
        resource  == Photo::"foo.jpg"
    );
"""

JANE_POLICY = """
    permit(
        principal in PhotoApp::UserGroup::"janeFriends",
        action in [PhotoApp::Action::"viewPhoto", PhotoApp::Action::"listPhotos"],
        resource in PhotoApp::Album::"janeTrips"
    );
"""

SCHEMA = json.dumps({
    "PhotoApp": {
        "entityTypes": {
            "User": {"memberOfTypes": ["UserGroup"]},
            "UserGroup": {},
            "Photo": {"memberOfTypes": ["Album"]},
            "Album": {},
        },
        "actions": {
            "viewPhoto": {
                "appliesTo": {"principalTypes": ["User"], "resourceTypes": ["Photo", "Album"]}
            },
            "listPhotos": {
                "appliesTo": {"principalTypes": ["User"], "resourceTypes": ["Photo", "Album"]}
            },
        },
    }
})


@pytest.fixture(scope="module")
def boundary():
    """Boundary over the real engine."""
    return PolicyBoundary(
        create_engine("cedarpy"),
        config=BoundaryConfig(_env_file=None),
        metrics=MetricsCollector("cedar_boundary_integration")
    )


class TestCedarpyFlow:
    """End-to-end boundary calls against Cedar."""

    def test_version(self, boundary):
        """Test that the engine reports a version."""
        assert boundary.get_cedar_version()

    def test_allow(self, boundary):
        """Test an allowed request and its determining policy."""
        result = json.loads(boundary.is_authorized(
            'User::"alice"', 'Action::"read"', 'Photo::"foo.jpg"', "{}", POLICIES, "[]"
        ))

        assert result == {
            "code": 0,
            "data": {"decision": "Allow", "reasons": ["policy0"], "errors": []},
        }

    def test_deny(self, boundary):
        """Test a request no policy permits."""
        result = json.loads(boundary.is_authorized(
            'User::"bob"', 'Action::"read"', 'Photo::"foo.jpg"', "{}", POLICIES, "[]"
        ))

        assert result["code"] == 0
        assert result["data"]["decision"] == "Deny"
        assert result["data"]["reasons"] == []

    def test_bad_policies(self, boundary):
        """Test a policy set Cedar cannot parse."""
        result = json.loads(boundary.is_authorized(
            'User::"alice"', 'Action::"read"', 'Photo::"foo.jpg"', "{}",
            'permit(principal == User:"alice", action, resource);', "[]"
        ))

        assert result["code"] == 105
        assert result["message"].startswith("[PoliciesErr]: ")

    def test_policy_to_json(self, boundary):
        """Test converting a policy to JSON."""
        result = json.loads(boundary.policy_to_json(JANE_POLICY))

        assert result["code"] == 0
        assert result["data"]["effect"] == "permit"
        assert result["data"]["principal"] == {
            "op": "in",
            "entity": {"type": "PhotoApp::UserGroup", "id": "janeFriends"},
        }

    def test_round_trip(self, boundary):
        """Test that text from JSON converts back to the same JSON."""
        est = json.loads(boundary.policy_to_json(JANE_POLICY))["data"]

        text = json.loads(boundary.policy_from_json(json.dumps(est)))["data"]
        again = json.loads(boundary.policy_to_json(text))["data"]

        assert again == est

    def test_canonical_text_is_stable(self, boundary):
        """Test that a second round trip reproduces the same text."""
        def round_trip(policy):
            est = json.loads(boundary.policy_to_json(policy))["data"]
            return json.loads(boundary.policy_from_json(json.dumps(est)))["data"]

        first = round_trip(JANE_POLICY)

        assert round_trip(first) == first

    def test_validate_schema(self, boundary):
        """Test a schema Cedar accepts."""
        assert json.loads(boundary.validate_schema(SCHEMA)) == {"code": 0, "data": "no errors or warnings"}

    def test_validate(self, boundary):
        """Test validating policies against the schema."""
        result = json.loads(boundary.validate(SCHEMA, JANE_POLICY))

        assert result == {"code": 0, "data": "no errors or warnings"}

    def test_validate_findings(self, boundary):
        """Test that validation findings are returned as data."""
        policy = JANE_POLICY.replace("PhotoApp::UserGroup", "PhotoApp::UserGroup1")

        result = json.loads(boundary.validate(SCHEMA, policy))

        assert result["code"] == 0
        assert "PhotoApp::UserGroup1" in result["data"]
        assert "policy0" in result["data"]
        assert result["data"].count("`policy0`") == 1

    def test_validate_schema_missing_field(self, boundary):
        """Test that a schema rejection names the missing field."""
        result = json.loads(boundary.validate_schema(json.dumps({"PhotoApp": {"actions": {}}})))

        assert result["code"] == 501
        assert result["message"].startswith("[SchemaErr]: ")
        assert "entityTypes" in result["message"]


def authorize(boundary, **overrides):
    """Call isAuthorized with some valid inputs replaced."""
    inputs = {
        "principal": 'User::"alice"',
        "action": 'Action::"read"',
        "resource": 'Photo::"foo.jpg"',
        "context": "{}",
        "policies": POLICIES,
        "entities": "[]",
    }
    inputs.update(overrides)
    return json.loads(boundary.is_authorized(
        inputs["principal"], inputs["action"], inputs["resource"],
        inputs["context"], inputs["policies"], inputs["entities"]
    ))


class TestCedarpyGates:
    """Input rejections reported by each isAuthorized gate."""

    def test_principal(self, boundary):
        """Test a principal with a single colon."""
        assert authorize(boundary, principal='User:"alice"') == {
            "code": 101,
            "message": "[PrincipalErr]: unexpected token `:`",
        }

    def test_action(self, boundary):
        """Test a malformed action."""
        result = authorize(boundary, action='Action:"read"')

        assert result["code"] == 102
        assert result["message"].startswith("[ActionErr]: ")

    def test_resource(self, boundary):
        """Test a malformed resource."""
        result = authorize(boundary, resource='Photo::"foo.jpg')

        assert result["code"] == 103
        assert result["message"].startswith("[ResourceErr]: ")

    def test_first_bad_input_reported(self, boundary):
        """Test that a bad principal wins over a bad action."""
        result = authorize(boundary, principal='User:"alice"', action='Action:"read"')

        assert result["code"] == 101

    @pytest.mark.parametrize("context", [
        "[1, 2]",
        '{"x": 1.5}',
        '{"x": 99999999999999999999}',
    ])
    def test_context(self, boundary, context):
        """Test contexts Cedar cannot build a request from."""
        result = authorize(boundary, context=context)

        assert result["code"] == 104
        assert result["message"].startswith("[ContextErr]: ")

    @pytest.mark.parametrize("entities", [
        "{}",
        '[{"uid": {"type": "bad type", "id": "x"}, "attrs": {}, "parents": []}]',
        '[{"uid": {"type": "User", "id": "alice"}, "attrs": {"a": 1.5}, "parents": []}]',
    ])
    def test_entities(self, boundary, entities):
        """Test entity sets Cedar cannot deserialize."""
        result = authorize(boundary, entities=entities)

        assert result["code"] == 106
        assert result["message"].startswith("[EntitiesErr]: ")

    def test_entities_with_attributes(self, boundary):
        """Test that a well-formed entity set reaches evaluation."""
        entities = json.dumps([
            {"uid": {"type": "User", "id": "alice"}, "attrs": {"age": 30, "tags": ["a"]}, "parents": []}
        ])

        result = authorize(boundary, entities=entities, context='{"mfa": true}')

        assert result["data"]["decision"] == "Allow"


class TestCedarpyFindings:
    """Validation findings as produced by the engine adapter."""

    def test_findings_joined_without_prefix(self):
        """Test that each finding is the engine's own text."""
        engine = create_engine("cedarpy")
        findings = [
            SimpleNamespace(policy_id="policy0", error="error one on `policy0`"),
            SimpleNamespace(policy_id="policy1", error="error two on `policy1`"),
        ]
        result = SimpleNamespace(validation_passed=False, errors=findings)

        with patch.object(cedarpy, "validate_policies", return_value=result):
            data = engine.validate(Schema(document={}), PolicySet(text=""))

        assert data == "error one on `policy0`\nerror two on `policy1`"
