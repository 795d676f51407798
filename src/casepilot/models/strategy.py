"""
CasePilot Strategy Models

Outputs of the reasoning core: route assessments, observations, moves,
optics, pressure triggers, and the probability gate decision.

Key components:
- RouteAssessment: viability of one canonical route
- Observation / InvestigationAngle: anomalies and the hypotheses they raise
- Move / MoveSequence: the ordered action plan
- OpticsResult / PressureTrigger: how moves land and how hard to push
- ProbabilityGateDecision / ProbabilityOutput: confidence gating
- StrategyPlan: the complete result for one case

The litigator decides. CasePilot recommends and documents.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .enums import (
    CanonicalRoute,
    CommitmentLevel,
    GateReason,
    Leverage,
    MovePhase,
    ObservationType,
    Optics,
    ProceduralSafetyStatus,
    RouteStatus,
    Tone,
)
from .case import ElementState
from .evidence import EvidenceImpact, EvidenceMap


# =============================================================================
# Routes
# =============================================================================

@dataclass
class RouteAssessment:
    """
    Viability of one canonical route.

    Attributes:
        route_id: Always a CanonicalRoute member
        status: viable / risky / blocked
        reasons: Ordered, human-readable drivers of the status
        required_dependencies: Evidence ids the route is waiting on
        constraints: Limits on how the route may be used
    """
    route_id: CanonicalRoute
    status: RouteStatus
    reasons: list[str] = field(default_factory=list)
    required_dependencies: list[str] = field(default_factory=list)
    constraints: list[str] = field(default_factory=list)


@dataclass
class ProceduralSafety:
    """Whether the case can progress beyond a holding position."""
    status: ProceduralSafetyStatus
    explanation: str
    outstanding_items: list[str] = field(default_factory=list)


# =============================================================================
# Observations
# =============================================================================

@dataclass
class Observation:
    """Something unusual in the bundle that may carry leverage."""
    id: str
    type: ObservationType
    description: str
    why_unusual: str
    what_should_exist: str
    leverage_potential: Leverage
    related_dates: list[date] = field(default_factory=list)
    source_document_ids: list[str] = field(default_factory=list)


@dataclass
class InvestigationAngle:
    """A testable hypothesis raised by an observation."""
    id: str
    observation_id: str
    hypothesis: str
    confirmation_condition: str
    kill_condition: str
    targeted_request: str
    expected_response: str
    leverage: Leverage = Leverage.MEDIUM


# =============================================================================
# Moves
# =============================================================================

@dataclass
class ForkPoint:
    """Where the plan branches on the opponent's response."""
    if_admit: int
    if_deny: int
    if_silence: int


@dataclass
class Move:
    """
    One step of the action plan.

    After sequencing, order values across a plan are exactly 1..N and
    every dependency is strictly smaller than the move's own order.
    """
    order: int
    phase: MovePhase
    action: str
    evidence_requested: str
    cost: int
    commitment_level: CommitmentLevel
    information_gain: Leverage
    dependencies: list[int] = field(default_factory=list)
    fork_point: Optional[ForkPoint] = None
    question_it_forces: str = ""
    expected_opponent_response: str = ""
    why_now: str = ""
    what_you_lose_if_out_of_order: str = ""
    source_observation_id: Optional[str] = None


@dataclass
class CostAnalysis:
    """Spend before expert instruction and what sequencing saves."""
    cost_before_expert: int
    expert_trigger: str
    unnecessary_spend_avoided_if_gap_confirmed: int


@dataclass
class MoveSequence:
    """Sequenced moves with warnings and cost analysis."""
    moves: list[Move] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cost_analysis: Optional[CostAnalysis] = None


# =============================================================================
# Optics and Pressure
# =============================================================================

@dataclass
class OpticsResult:
    """How an action is likely to be perceived by the court."""
    optics: Optics
    explanation: str
    factors: list[str] = field(default_factory=list)


@dataclass
class MoveOptics:
    """Optics for a sequenced move, keyed by its order."""
    order: int
    result: OpticsResult


@dataclass
class PressureTrigger:
    """A reason to adopt a given tone in correspondence."""
    trigger: str
    why_it_matters: str
    recommended_tone: Tone


# =============================================================================
# Probability Gate
# =============================================================================

@dataclass
class ProbabilityGateDecision:
    """Whether numeric confidence may be shown at all."""
    show: bool
    reason: Optional[str] = None
    reason_class: Optional[GateReason] = None


@dataclass
class ProbabilityOutput:
    """Gate decision plus the calibrated value when shown."""
    decision: ProbabilityGateDecision
    completeness: int
    critical_missing_count: int
    evidence_strength: int
    raw_probability: Optional[float] = None
    calibrated_probability: Optional[float] = None


# =============================================================================
# Strategy Plan
# =============================================================================

@dataclass
class StrategyPlan:
    """
    Complete reasoning output for one case.

    The fingerprint is the sha256 of the canonical JSON of every other
    field, so identical inputs always produce the same fingerprint.
    """
    case_id: str
    practice_area: str
    evidence_map: EvidenceMap
    procedural_safety: ProceduralSafety
    elements: list[ElementState] = field(default_factory=list)
    routes: list[RouteAssessment] = field(default_factory=list)
    evidence_impacts: list[EvidenceImpact] = field(default_factory=list)
    observations: list[Observation] = field(default_factory=list)
    angles: list[InvestigationAngle] = field(default_factory=list)
    sequence: MoveSequence = field(default_factory=MoveSequence)
    move_optics: list[MoveOptics] = field(default_factory=list)
    pressure_triggers: list[PressureTrigger] = field(default_factory=list)
    probability: Optional[ProbabilityOutput] = None
    fingerprint: str = ""
