"""
Cedar policy boundary.

Safe, deterministic entry points to a Cedar policy engine. See
``cedar_boundary.app.main`` for the operations.
"""

from .app.main import (
    OPERATIONS,
    PolicyBoundary,
    get_cedar_version,
    get_default_boundary,
    is_authorized,
    policy_from_json,
    policy_to_json,
    validate,
    validate_schema,
)

__all__ = [
    "OPERATIONS",
    "PolicyBoundary",
    "get_cedar_version",
    "get_default_boundary",
    "is_authorized",
    "policy_from_json",
    "policy_to_json",
    "validate",
    "validate_schema",
]
