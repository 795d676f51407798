"""
CasePilot Bundle Metrics

Independent measures the probability gate relies on:

- completeness: how much of the checklist the bundle covers (0-100)
- critical missing count: checklist items flagged critical and absent
- evidence strength: how convincing the opposing evidence looks (0-100)

Strength is a weighted sum of factor scores, each built from explicit
marker hits in the case text. No inference beyond keyword presence.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..models import CaseInput, EvidenceMap

CORE_WEIGHT = 2
NON_CORE_WEIGHT = 1


# =============================================================================
# Completeness
# =============================================================================

def compute_bundle_completeness(evidence_map: EvidenceMap) -> int:
    """
    Weighted checklist coverage as an integer percentage.

    Core items weigh double. An empty checklist scores 0.
    """
    total = 0
    present = 0
    for match in evidence_map.matches:
        weight = CORE_WEIGHT if match.item.is_core else NON_CORE_WEIGHT
        total += weight
        if match.present:
            present += weight
    if total == 0:
        return 0
    return (present * 100) // total


def count_critical_missing(evidence_map: EvidenceMap) -> int:
    """Number of critical checklist items with no matching document."""
    return sum(1 for match in evidence_map.matches if match.item.critical and not match.present)


# =============================================================================
# Evidence Strength
# =============================================================================

@dataclass(frozen=True)
class StrengthFactor:
    """One dimension of opposing evidence strength."""
    name: str
    weight: float
    markers: tuple[tuple[tuple[str, ...], int], ...]


STRENGTH_FACTORS: tuple[StrengthFactor, ...] = (
    StrengthFactor(
        name="identification",
        weight=0.25,
        markers=(
            (("cctv", "footage"), 30),
            (("identified", "recognised", "recognized"), 25),
            (("facial recognition",), 25),
            (("viper", "identification procedure", "id parade"), 20),
        ),
    ),
    StrengthFactor(
        name="forensics",
        weight=0.25,
        markers=(
            (("weapon recovered", "knife recovered", "weapon seized"), 30),
            (("fingerprint",), 30),
            (("dna",), 20),
            (("chain of custody", "continuity"), 20),
        ),
    ),
    StrengthFactor(
        name="witnesses",
        weight=0.20,
        markers=(
            (("complainant",), 30),
            (("independent witness", "eyewitness"), 30),
            (("witness statement", "mg11"), 20),
        ),
    ),
    StrengthFactor(
        name="medical",
        weight=0.15,
        markers=(
            (("medical", "hospital", "injury", "injuries"), 50),
            (("consistent with",), 30),
        ),
    ),
    StrengthFactor(
        name="disclosure",
        weight=0.15,
        markers=(
            (("mg6", "disclosure schedule"), 50),
            (("served", "disclosed"), 30),
        ),
    ),
)


def score_factor(factor: StrengthFactor, text: str) -> int:
    """Sum the points of every marker group present in text, capped at 100."""
    points = sum(value for terms, value in factor.markers if any(term in text for term in terms))
    return min(100, points)


def compute_evidence_strength(case_input: CaseInput) -> int:
    """
    Opposing evidence strength on a 0-100 scale.

    Args:
        case_input: Parsed case; all free text and document content is scanned
    """
    text = case_input.all_text()
    if not text.strip():
        return 0
    total = sum(score_factor(factor, text) * factor.weight for factor in STRENGTH_FACTORS)
    return int(round(total))


def strength_level(strength: int) -> str:
    """Label a strength score (VERY_STRONG down to VERY_WEAK)."""
    if strength >= 80:
        return "VERY_STRONG"
    if strength >= 60:
        return "STRONG"
    if strength >= 40:
        return "MODERATE"
    if strength >= 20:
        return "WEAK"
    return "VERY_WEAK"
