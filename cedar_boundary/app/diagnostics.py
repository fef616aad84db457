"""
Diagnostics collector for authorization responses.
"""

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from .engine.types import AuthorizationResponse


@dataclass(frozen=True)
class DiagnosticSet:
    """Reasons and errors reported alongside a decision.

    Reasons are a set: several policies naming the same identifier collapse
    to one entry. Errors keep the engine's order and duplicates.
    """
    reasons: FrozenSet[str]
    errors: Tuple[str, ...]

    def sorted_reasons(self) -> Tuple[str, ...]:
        return tuple(sorted(self.reasons))


def collect_diagnostics(response: AuthorizationResponse) -> DiagnosticSet:
    """Reshape an engine response into a DiagnosticSet."""
    return DiagnosticSet(
        reasons=frozenset(str(reason) for reason in response.reasons),
        errors=tuple(str(error) for error in response.errors)
    )
