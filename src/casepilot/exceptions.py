"""
CasePilot Exception Hierarchy

Domain-specific exceptions for the strategic reasoning core.
All exceptions include error codes for tracking and logging.

The engine itself never raises on malformed case input; these exceptions
are raised only at the pack-loading and command-line boundaries, and by
the plan invariant checker.

Exception codes follow the pattern: CP_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CasePilotError(Exception):
    """
    Base exception for all CasePilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CP_*)
        details: Additional context about the error
        case_id: Associated case ID if applicable
    """
    message: str
    code: str = "CP_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    case_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.case_id:
            parts.append(f"(case: {self.case_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/CLI output."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.case_id:
            result["case_id"] = self.case_id
        return result


# =============================================================================
# Pack Errors
# =============================================================================

@dataclass
class PackLoadError(CasePilotError):
    """Failed to load a practice pack from file."""
    code: str = "CP_PACK_LOAD_ERROR"


@dataclass
class PackValidationError(CasePilotError):
    """Practice pack schema validation failed."""
    code: str = "CP_PACK_VALIDATION_ERROR"


@dataclass
class PackVersionMismatch(CasePilotError):
    """Pack schema version doesn't match the supported version."""
    code: str = "CP_PACK_VERSION_MISMATCH"


@dataclass
class PackNotFoundError(CasePilotError):
    """Requested practice pack not found."""
    code: str = "CP_PACK_NOT_FOUND"


# =============================================================================
# Case Input Errors
# =============================================================================

@dataclass
class CaseInputError(CasePilotError):
    """Case input file could not be read as a JSON object."""
    code: str = "CP_CASE_INPUT_ERROR"


# =============================================================================
# Invariant Errors
# =============================================================================

@dataclass
class InvariantViolation(CasePilotError):
    """A produced plan broke one of its structural guarantees."""
    code: str = "CP_INVARIANT_VIOLATION"
