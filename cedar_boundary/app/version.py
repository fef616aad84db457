"""
Version accessor for the linked policy engine.
"""

from typing import Optional

from shared.errors import ContractViolation
from .engine.base import PolicyEngine
from .pipeline.stages import GET_CEDAR_VERSION


def resolve_version(engine: PolicyEngine, override: Optional[str] = None) -> str:
    """Return the engine's version identity, or the configured override."""
    version = override or engine.version()
    if not version:
        raise ContractViolation(GET_CEDAR_VERSION, f"engine {engine.name!r} reported an empty version")
    return version
