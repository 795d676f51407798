"""
CasePilot Enumerations

All enumeration types used throughout the CasePilot reasoning core.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Practice Areas
# =============================================================================

class PracticeArea(str, Enum):
    """Practice areas with bundled evidence packs."""
    CRIMINAL = "criminal"
    HOUSING_DISREPAIR = "housing_disrepair"
    CLINICAL_NEGLIGENCE = "clinical_negligence"
    PERSONAL_INJURY = "personal_injury"
    OTHER = "other"


# =============================================================================
# Canonical Routes
# =============================================================================

class CanonicalRoute(str, Enum):
    """
    The closed catalog of strategy routes.

    Declaration order is the canonical output order. Routes are never
    synthesized at runtime; adding or removing a member requires a matching
    evaluator in engine.route_evaluator.
    """
    PROCEDURAL_DISCLOSURE_LEVERAGE = "procedural_disclosure_leverage"
    IDENTIFICATION_CHALLENGE = "identification_challenge"
    ACT_DENIAL = "act_denial"
    INTENT_DENIAL = "intent_denial"
    WEAPON_UNCERTAINTY_CAUSATION = "weapon_uncertainty_causation"
    SELF_DEFENCE = "self_defence"
    ALTERNATIVE_MENTAL_STATE_OFFENCE = "alternative_mental_state_offence"
    MITIGATION_EARLY_RESOLUTION = "mitigation_early_resolution"


class RouteStatus(str, Enum):
    """Viability of a route against the current evidence state."""
    VIABLE = "viable"
    RISKY = "risky"
    BLOCKED = "blocked"


# =============================================================================
# Elements and Dependencies
# =============================================================================

class SupportLevel(str, Enum):
    """How well the evidence supports a legal element."""
    NONE = "none"
    WEAK = "weak"
    SOME = "some"
    STRONG = "strong"


class DependencyStatus(str, Enum):
    """Status of an awaited disclosure/evidence item."""
    OUTSTANDING = "outstanding"
    SERVED = "served"
    UNKNOWN = "unknown"


class ProceduralSafetyStatus(str, Enum):
    """Whether the case can safely progress past a holding position."""
    SAFE = "SAFE"
    CONDITIONALLY_UNSAFE = "CONDITIONALLY_UNSAFE"
    UNSAFE_TO_PROCEED = "UNSAFE_TO_PROCEED"


# =============================================================================
# Evidence
# =============================================================================

class EvidenceCategory(str, Enum):
    """Broad category of an evidence item."""
    VISUAL = "visual"
    DOCUMENT = "document"
    PROCEDURAL = "procedural"
    MEDICAL = "medical"
    OTHER = "other"


class EvidenceUrgency(str, Enum):
    """When an outstanding item is needed by."""
    BEFORE_PTPH = "before_ptph"        # Plea and trial preparation hearing
    BEFORE_TRIAL = "before_trial"
    ANYTIME = "anytime"


class EvidencePriority(str, Enum):
    """Declared importance of a checklist entry."""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class DefenceImpact(str, Enum):
    """Net effect of an evidence item on the defence position."""
    HELPS = "helps"
    HURTS = "hurts"
    NEUTRAL = "neutral"
    DEPENDS = "depends"


class ViabilityChange(str, Enum):
    """How an evidence item moves a route's viability."""
    STRENGTHENS = "strengthens"
    WEAKENS = "weakens"
    KILLS = "kills"
    NEUTRAL = "neutral"


# =============================================================================
# Observations and Leverage
# =============================================================================

class ObservationType(str, Enum):
    """Kinds of anomaly the detector reports."""
    TIMELINE_ANOMALY = "TIMELINE_ANOMALY"
    INCONSISTENCY = "INCONSISTENCY"
    EVIDENCE_GAP = "EVIDENCE_GAP"
    GOVERNANCE_GAP = "GOVERNANCE_GAP"


class Leverage(str, Enum):
    """
    Severity scale shared by observations and move information gain.

    Ordered LOW < MEDIUM < HIGH < CRITICAL via LEVERAGE_RANK.
    """
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


LEVERAGE_RANK: dict[Leverage, int] = {
    Leverage.CRITICAL: 4,
    Leverage.HIGH: 3,
    Leverage.MEDIUM: 2,
    Leverage.LOW: 1,
}


# =============================================================================
# Moves
# =============================================================================

class MovePhase(str, Enum):
    """Phase of a move within the sequence."""
    INFORMATION_EXTRACTION = "INFORMATION_EXTRACTION"
    COMMITMENT_FORCING = "COMMITMENT_FORCING"
    ESCALATION = "ESCALATION"


class CommitmentLevel(str, Enum):
    """How much a move commits the client to a position."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# =============================================================================
# Pressure and Optics
# =============================================================================

class Tone(str, Enum):
    """Recommended correspondence tone."""
    PROBE = "PROBE"
    PRESSURE = "PRESSURE"
    STRIKE = "STRIKE"


class Optics(str, Enum):
    """How an action is likely to be perceived by the court."""
    ATTRACTIVE = "attractive"
    NEUTRAL = "neutral"
    RISKY = "risky"


class Timing(str, Enum):
    """When an action is taken relative to the procedural timetable."""
    EARLY = "early"
    ON_TIME = "on_time"
    LATE = "late"
    UNKNOWN = "unknown"


class Persistence(str, Enum):
    """How many times a request has been made."""
    FIRST_REQUEST = "first_request"
    CHASED = "chased"
    REPEATED = "repeated"
    UNKNOWN = "unknown"


class Proportionality(str, Enum):
    """Whether a request is proportionate to the issue."""
    PROPORTIONAL = "proportional"
    DISPROPORTIONATE = "disproportionate"
    UNKNOWN = "unknown"


# =============================================================================
# Probability Gate
# =============================================================================

class GateReason(str, Enum):
    """Class of reason for suppressing numeric confidence."""
    DECISION_SUPPORT_ONLY = "decision_support_only"
    PROVISIONAL = "provisional"
