"""
CasePilot Evidence Models

Models for practice-area evidence requirements, the evidence map built
against them, and the projected impact of outstanding evidence.

Key components:
- ChecklistItem / ExpectedEvidence / GovernanceRule: pack content
- PracticePack: all requirements for one practice area
- EvidenceMap: which requirements the bundle satisfies
- EvidenceItem / AttackPath: inputs to the impact mapper
- EvidenceImpact: projected strategic effect of one outstanding item
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .enums import (
    CanonicalRoute,
    DefenceImpact,
    EvidenceCategory,
    EvidencePriority,
    EvidenceUrgency,
    PracticeArea,
    ViabilityChange,
)


# =============================================================================
# Pack Content
# =============================================================================

@dataclass
class ChecklistItem:
    """
    One evidence requirement on a practice-area checklist.

    Attributes:
        id: Stable requirement identifier (e.g., "custody_record")
        label: Human-readable label
        category: Grouping used for coverage (e.g., "disclosure")
        priority: Declared importance
        detect_patterns: Lower-case substrings matched against document
            name and type
        is_core: Core items weigh double in completeness
        critical: Counted by the probability gate when missing
    """
    id: str
    label: str
    category: str
    priority: EvidencePriority = EvidencePriority.MEDIUM
    detect_patterns: list[str] = field(default_factory=list)
    is_core: bool = False
    critical: bool = False
    description: Optional[str] = None


@dataclass
class ExpectedEvidence:
    """Evidence that should exist in a well-run matter of this type."""
    id: str
    label: str
    detect_patterns: list[str] = field(default_factory=list)
    priority: EvidencePriority = EvidencePriority.MEDIUM
    when_expected: Optional[str] = None
    if_missing_means: Optional[str] = None
    probe_question: Optional[str] = None


@dataclass
class GovernanceRule:
    """A duty the opponent should be able to show compliance with."""
    rule: str
    if_violated: str


@dataclass
class CriticalDisclosureItem:
    """A disclosure item whose absence makes progress procedurally unsafe."""
    id: str
    labels: list[str] = field(default_factory=list)


@dataclass
class PracticePack:
    """All evidence requirements for one practice area."""
    practice_area: PracticeArea
    name: str
    version: str
    checklist: list[ChecklistItem] = field(default_factory=list)
    expected_evidence: list[ExpectedEvidence] = field(default_factory=list)
    governance_rules: list[GovernanceRule] = field(default_factory=list)
    critical_disclosure_items: list[CriticalDisclosureItem] = field(default_factory=list)


# =============================================================================
# Evidence Map
# =============================================================================

@dataclass
class ChecklistMatch:
    """A checklist requirement and the documents that satisfy it."""
    item: ChecklistItem
    document_ids: list[str] = field(default_factory=list)

    @property
    def present(self) -> bool:
        return bool(self.document_ids)


@dataclass
class CategoryCoverage:
    """Coverage of one checklist category."""
    category: str
    present: int = 0
    total: int = 0

    @property
    def ratio(self) -> float:
        return self.present / self.total if self.total else 0.0


@dataclass
class EvidenceMap:
    """
    Result of classifying the bundle against a checklist.

    Matches preserve checklist order; coverage preserves first-seen
    category order.
    """
    matches: list[ChecklistMatch] = field(default_factory=list)
    coverage: list[CategoryCoverage] = field(default_factory=list)

    @property
    def missing(self) -> list[ChecklistItem]:
        return [m.item for m in self.matches if not m.present]

    @property
    def missing_core(self) -> list[ChecklistItem]:
        return [m.item for m in self.matches if not m.present and m.item.is_core]

    @property
    def present_ids(self) -> set[str]:
        return {m.item.id for m in self.matches if m.present}

    def is_present(self, item_id: str) -> bool:
        return item_id in self.present_ids


# =============================================================================
# Impact Mapping
# =============================================================================

@dataclass
class EvidenceItem:
    """An outstanding piece of evidence."""
    id: str
    name: str
    category: EvidenceCategory = EvidenceCategory.OTHER
    urgency: EvidenceUrgency = EvidenceUrgency.ANYTIME


@dataclass
class AttackPath:
    """
    A concrete line of attack on the opponent's case.

    Attributes:
        id: Path identifier
        target: Element or issue under attack
        method: How the attack is made
        route: Canonical route this path serves, if any
        evidence_inputs: Evidence the path depends on (free-text names)
        expected_effect: What success looks like
        kill_switch: Condition under which the path fails
        is_hypothesis: True when the path depends on evidence not yet seen
    """
    id: str
    target: str
    method: str = ""
    route: Optional[CanonicalRoute] = None
    evidence_inputs: list[str] = field(default_factory=list)
    expected_effect: str = ""
    kill_switch: Optional[str] = None
    is_hypothesis: bool = True


@dataclass
class ViabilityShift:
    """How one route moves when an item arrives."""
    route: CanonicalRoute
    change: ViabilityChange
    explanation: str


@dataclass
class PivotTrigger:
    """A named condition that moves the recommendation to another route."""
    condition: str
    pivot_from: CanonicalRoute
    pivot_to: CanonicalRoute
    timing: str = "after_disclosure"


@dataclass
class KillSwitch:
    """A named condition under which routes collapse entirely."""
    condition: str
    routes_killed: list[CanonicalRoute] = field(default_factory=list)
    explanation: str = ""


@dataclass
class EvidenceImpact:
    """
    Projected strategic impact of one outstanding evidence item.

    Only produced when at least one attack path depends on the item.
    """
    evidence_item: EvidenceItem
    affected_attack_path_ids: list[str]
    impact_on_defence: DefenceImpact
    if_arrives_clean: str
    if_arrives_late: str
    if_arrives_adverse: str
    viability_change: list[ViabilityShift] = field(default_factory=list)
    pivot_trigger: Optional[PivotTrigger] = None
    kill_switch: Optional[KillSwitch] = None
