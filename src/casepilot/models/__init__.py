"""
CasePilot Models

All domain models for the CasePilot strategic reasoning core.

Exports all models organized by category for convenient imports:

    from casepilot.models import (
        # Enums
        CanonicalRoute, RouteStatus, SupportLevel, Leverage, Tone,
        # Case input
        CaseInput, Document, TimelineEvent, ElementState, Dependency,
        # Evidence
        PracticePack, ChecklistItem, EvidenceMap, EvidenceItem, AttackPath,
        # Strategy
        RouteAssessment, Observation, Move, OpticsResult, StrategyPlan,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    LEVERAGE_RANK,
    CanonicalRoute,
    CommitmentLevel,
    DefenceImpact,
    DependencyStatus,
    EvidenceCategory,
    EvidencePriority,
    EvidenceUrgency,
    GateReason,
    Leverage,
    MovePhase,
    ObservationType,
    Optics,
    Persistence,
    PracticeArea,
    ProceduralSafetyStatus,
    Proportionality,
    RouteStatus,
    SupportLevel,
    Timing,
    Tone,
    ViabilityChange,
)

# =============================================================================
# Evidence
# =============================================================================
from .evidence import (
    AttackPath,
    CategoryCoverage,
    ChecklistItem,
    ChecklistMatch,
    CriticalDisclosureItem,
    EvidenceImpact,
    EvidenceItem,
    EvidenceMap,
    ExpectedEvidence,
    GovernanceRule,
    KillSwitch,
    PivotTrigger,
    PracticePack,
    ViabilityShift,
)

# =============================================================================
# Case Input
# =============================================================================
from .case import (
    CaseInput,
    DatedFact,
    Dependency,
    Document,
    ElementDefinition,
    ElementState,
    EvidenceRef,
    ExtractedFacts,
    OffenceDefinition,
    RecordedPosition,
    TimelineEvent,
)

# =============================================================================
# Strategy
# =============================================================================
from .strategy import (
    CostAnalysis,
    ForkPoint,
    InvestigationAngle,
    Move,
    MoveOptics,
    MoveSequence,
    Observation,
    OpticsResult,
    PressureTrigger,
    ProbabilityGateDecision,
    ProbabilityOutput,
    ProceduralSafety,
    RouteAssessment,
    StrategyPlan,
)


__all__ = [
    # Enums
    "LEVERAGE_RANK",
    "CanonicalRoute",
    "CommitmentLevel",
    "DefenceImpact",
    "DependencyStatus",
    "EvidenceCategory",
    "EvidencePriority",
    "EvidenceUrgency",
    "GateReason",
    "Leverage",
    "MovePhase",
    "ObservationType",
    "Optics",
    "Persistence",
    "PracticeArea",
    "ProceduralSafetyStatus",
    "Proportionality",
    "RouteStatus",
    "SupportLevel",
    "Timing",
    "Tone",
    "ViabilityChange",
    # Evidence
    "AttackPath",
    "CategoryCoverage",
    "ChecklistItem",
    "ChecklistMatch",
    "CriticalDisclosureItem",
    "EvidenceImpact",
    "EvidenceItem",
    "EvidenceMap",
    "ExpectedEvidence",
    "GovernanceRule",
    "KillSwitch",
    "PivotTrigger",
    "PracticePack",
    "ViabilityShift",
    # Case input
    "CaseInput",
    "DatedFact",
    "Dependency",
    "Document",
    "ElementDefinition",
    "ElementState",
    "EvidenceRef",
    "ExtractedFacts",
    "OffenceDefinition",
    "RecordedPosition",
    "TimelineEvent",
    # Strategy
    "CostAnalysis",
    "ForkPoint",
    "InvestigationAngle",
    "Move",
    "MoveOptics",
    "MoveSequence",
    "Observation",
    "OpticsResult",
    "PressureTrigger",
    "ProbabilityGateDecision",
    "ProbabilityOutput",
    "ProceduralSafety",
    "RouteAssessment",
    "StrategyPlan",
]
