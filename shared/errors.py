"""
Shared error handling for the Cedar policy boundary.

Only faults live here. Input rejected by a stage gate is reported through a
failure envelope, never raised out of an operation.
"""

from typing import Dict, Any, Optional


class BoundaryException(Exception):
    """Base exception for the policy boundary."""

    code = "BOUNDARY_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary for structured logging."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class EngineRejection(BoundaryException):
    """The policy engine refused to parse an input.

    ``message`` is the engine's own description of the problem and is passed
    through to callers verbatim.
    """

    code = "ENGINE_REJECTION"


class ContractViolation(BoundaryException):
    """The engine failed on input that every stage gate already accepted."""

    code = "CONTRACT_VIOLATION"

    def __init__(self, operation: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        super().__init__(f"{operation}: {message}", details)


class EngineUnavailable(BoundaryException):
    """The configured policy engine cannot be loaded."""

    code = "ENGINE_UNAVAILABLE"

    def __init__(self, engine: str, message: str = "Engine unavailable", details: Optional[Dict[str, Any]] = None):
        self.engine = engine
        super().__init__(f"{engine}: {message}", details)
