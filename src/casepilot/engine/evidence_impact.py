"""
CasePilot Evidence Impact Mapper

Projects how each outstanding evidence item would move the routes in
play if it arrived clean, late, or adverse.

Key features:
- An item only produces an impact when at least one attack path depends
  on it (by name, or by category heuristic)
- Narratives are selected by evidence category and by which routes the
  item touches
- Kill switches and pivot triggers are emitted only for named
  category/route combinations; everything else leaves them empty

Deterministic: no probabilities, explicit IF-THEN tables only.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..models import (
    AttackPath,
    CanonicalRoute,
    ChecklistItem,
    DefenceImpact,
    EvidenceCategory,
    EvidenceImpact,
    EvidenceItem,
    EvidenceMap,
    EvidencePriority,
    EvidenceUrgency,
    KillSwitch,
    PivotTrigger,
    RouteAssessment,
    RouteStatus,
    ViabilityChange,
    ViabilityShift,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Category Heuristics
# =============================================================================

CATEGORY_KEYWORDS: dict[EvidenceCategory, tuple[str, ...]] = {
    EvidenceCategory.VISUAL: ("cctv", "camera", "footage", "bwv"),
    EvidenceCategory.MEDICAL: ("medical", "injury", "hospital", "report"),
    EvidenceCategory.DOCUMENT: ("mg6", "disclosure", "schedule", "unused"),
    EvidenceCategory.PROCEDURAL: ("interview", "custody", "pace"),
}

# Document gaps turn into leverage once more than this many items are missing
DOCUMENT_GAP_LEVERAGE_THRESHOLD = 2

BREACH_MARKERS = ("breach", "non-compliant")


def classify_evidence_category(name: str) -> EvidenceCategory:
    """Best-effort category for a free-text evidence name."""
    lowered = name.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return EvidenceCategory.OTHER


def matches_evidence_category(evidence_input: str, item: EvidenceItem) -> bool:
    """True if an attack path input belongs to the item's category (or names it)."""
    lowered = evidence_input.lower()
    keywords = CATEGORY_KEYWORDS.get(item.category)
    if keywords is None:
        return item.name.lower() in lowered
    return any(keyword in lowered for keyword in keywords)


def path_depends_on(path: AttackPath, item: EvidenceItem) -> bool:
    name = item.name.lower()
    return any(
        name in evidence_input.lower() or matches_evidence_category(evidence_input, item)
        for evidence_input in path.evidence_inputs
    )


# =============================================================================
# Input Derivation
# =============================================================================

_URGENCY_BY_PRIORITY = {
    EvidencePriority.CRITICAL: EvidenceUrgency.BEFORE_PTPH,
    EvidencePriority.HIGH: EvidenceUrgency.BEFORE_PTPH,
    EvidencePriority.MEDIUM: EvidenceUrgency.BEFORE_TRIAL,
    EvidencePriority.LOW: EvidenceUrgency.ANYTIME,
}


def missing_item_from_checklist(item: ChecklistItem) -> EvidenceItem:
    return EvidenceItem(
        id=item.id,
        name=item.label,
        category=classify_evidence_category(f"{item.label} {item.id}"),
        urgency=_URGENCY_BY_PRIORITY[item.priority],
    )


def missing_items_from_map(evidence_map: EvidenceMap) -> list[EvidenceItem]:
    """Outstanding evidence derived from unmatched checklist items."""
    return [missing_item_from_checklist(item) for item in evidence_map.missing]


ROUTE_EVIDENCE_INPUTS: dict[CanonicalRoute, tuple[str, ...]] = {
    CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE: (
        "MG6 disclosure schedules", "custody record", "interview recording", "CCTV continuity", "BWV",
    ),
    CanonicalRoute.IDENTIFICATION_CHALLENGE: ("CCTV footage", "BWV footage", "witness statements", "VIPER"),
    CanonicalRoute.ACT_DENIAL: ("CCTV footage", "witness statements", "scene evidence"),
    CanonicalRoute.INTENT_DENIAL: ("medical report", "injury photographs", "CCTV footage"),
    CanonicalRoute.WEAPON_UNCERTAINTY_CAUSATION: ("medical report", "forensic report", "weapon recovery"),
    CanonicalRoute.SELF_DEFENCE: ("CCTV footage", "witness statements", "defendant account"),
    CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE: ("medical report", "injury pattern"),
    CanonicalRoute.MITIGATION_EARLY_RESOLUTION: ("character references", "pre-sentence material"),
}


def attack_paths_from_routes(assessments: list[RouteAssessment]) -> list[AttackPath]:
    """One hypothesis attack path per route that is not blocked."""
    paths = []
    for assessment in assessments:
        if assessment.status == RouteStatus.BLOCKED:
            continue
        route = assessment.route_id
        paths.append(AttackPath(
            id=f"path-{route.value}",
            target=route.value,
            method=assessment.reasons[0] if assessment.reasons else "",
            route=route,
            evidence_inputs=list(ROUTE_EVIDENCE_INPUTS[route]),
            is_hypothesis=True,
        ))
    return paths


# =============================================================================
# Narrative Tables
# =============================================================================

_GENERIC_NARRATIVES = (
    "Evidence arrives complete. Reassess each affected route against its content.",
    "Late evidence compresses preparation time. Record the chase trail.",
    "Evidence is adverse to the defence account. Reassess affected routes before committing.",
)

_NARRATIVES: dict[tuple[EvidenceCategory, Optional[CanonicalRoute]], tuple[str, str, str]] = {
    (EvidenceCategory.VISUAL, CanonicalRoute.IDENTIFICATION_CHALLENGE): (
        "Footage may confirm or undermine identification. Brief or poor-quality sequence "
        "supports the challenge; clear, continuous footage weakens it.",
        "Late footage reduces time to test identification. Quality, lighting and sequence "
        "duration still need assessing.",
        "Footage shows clear identification or a prolonged sequence. The identification "
        "challenge collapses.",
    ),
    (EvidenceCategory.VISUAL, None): (
        "Footage shows the sequence of events. Test each account against it.",
        "Late footage reduces time to test the sequence before the hearing.",
        "Footage supports the prosecution sequence. Routes depending on the defence account weaken.",
    ),
    (EvidenceCategory.MEDICAL, CanonicalRoute.INTENT_DENIAL): (
        "Injury pattern distinguishes intent. A single or brief injury supports the absence "
        "of specific intent; sustained injuries support it.",
        "Late medical evidence leaves less time to instruct on injury pattern. Still assess "
        "single versus sustained injury.",
        "Medical evidence shows sustained or targeted injuries. Intent denial collapses.",
    ),
    (EvidenceCategory.MEDICAL, CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE): (
        "Injury pattern distinguishes intent. A single or brief injury supports the "
        "alternative mental state framing.",
        "Late medical evidence leaves less time to assess injury pattern for the alternative framing.",
        "Medical evidence shows sustained or targeted injuries. The alternative framing weakens.",
    ),
    (EvidenceCategory.MEDICAL, None): (
        "Medical evidence fixes the injury and its mechanism. Test causation against it.",
        "Late medical evidence reduces time to instruct on mechanism.",
        "Medical evidence confirms mechanism consistent with the prosecution case.",
    ),
    (EvidenceCategory.DOCUMENT, None): (
        "Complete disclosure allows full case assessment. May strengthen or weaken the "
        "defence depending on content.",
        "Late disclosure reduces preparation time. Document the chase trail for a potential "
        "abuse application if failures persist.",
        "Disclosure reveals a strong prosecution case. Reassess route viability.",
    ),
    (EvidenceCategory.PROCEDURAL, None): (
        "PACE compliance confirmed. No exclusion applications available.",
        "Late PACE material reduces time for exclusion applications. Assess compliance immediately.",
        "PACE breaches identified. Exclusion applications may be viable.",
    ),
}

# Routes whose presence selects a specialised narrative, in precedence order
_NARRATIVE_ROUTE_PRECEDENCE = (
    CanonicalRoute.IDENTIFICATION_CHALLENGE,
    CanonicalRoute.INTENT_DENIAL,
    CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE,
)


def _narratives(category: EvidenceCategory, routes: list[CanonicalRoute]) -> tuple[str, str, str]:
    for route in _NARRATIVE_ROUTE_PRECEDENCE:
        if route in routes and (category, route) in _NARRATIVES:
            return _NARRATIVES[(category, route)]
    return _NARRATIVES.get((category, None), _GENERIC_NARRATIVES)


# =============================================================================
# Viability Effects
# =============================================================================

def _viability_shift(
    item: EvidenceItem,
    route: CanonicalRoute,
    total_missing: int,
) -> ViabilityShift:
    category = item.category

    if route == CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE:
        if category == EvidenceCategory.DOCUMENT:
            if total_missing > DOCUMENT_GAP_LEVERAGE_THRESHOLD:
                return ViabilityShift(route, ViabilityChange.STRENGTHENS, "Disclosure gaps create leverage")
            return ViabilityShift(route, ViabilityChange.WEAKENS, "Complete disclosure may strengthen the prosecution case")
        if category == EvidenceCategory.PROCEDURAL and any(m in item.name.lower() for m in BREACH_MARKERS):
            return ViabilityShift(route, ViabilityChange.STRENGTHENS, "PACE breaches support exclusion applications")
        if category == EvidenceCategory.PROCEDURAL:
            return ViabilityShift(route, ViabilityChange.NEUTRAL, "PACE compliance determines availability of exclusion applications")
        return ViabilityShift(route, ViabilityChange.STRENGTHENS, "Outstanding material supports disclosure leverage while unserved")

    if category == EvidenceCategory.VISUAL and route in (
        CanonicalRoute.IDENTIFICATION_CHALLENGE,
        CanonicalRoute.ACT_DENIAL,
    ):
        return ViabilityShift(route, ViabilityChange.NEUTRAL, "Impact depends on identification quality and sequence duration")

    if category == EvidenceCategory.MEDICAL and route in (
        CanonicalRoute.INTENT_DENIAL,
        CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE,
    ):
        return ViabilityShift(route, ViabilityChange.NEUTRAL, "Injury pattern (single vs sustained) determines the intent distinction")

    return ViabilityShift(route, ViabilityChange.NEUTRAL, "Effect depends on content when served")


def _impact_on_defence(item: EvidenceItem, total_missing: int) -> DefenceImpact:
    if item.category == EvidenceCategory.DOCUMENT:
        return DefenceImpact.HELPS if total_missing > DOCUMENT_GAP_LEVERAGE_THRESHOLD else DefenceImpact.HURTS
    if item.category == EvidenceCategory.OTHER:
        return DefenceImpact.NEUTRAL
    return DefenceImpact.DEPENDS


def _kill_switch_and_pivot(
    item: EvidenceItem,
    routes: list[CanonicalRoute],
) -> tuple[Optional[KillSwitch], Optional[PivotTrigger]]:
    """Named collapse and pivot conditions. Anything unnamed yields (None, None)."""
    if item.category == EvidenceCategory.VISUAL and CanonicalRoute.IDENTIFICATION_CHALLENGE in routes:
        killed = [r for r in (CanonicalRoute.IDENTIFICATION_CHALLENGE, CanonicalRoute.ACT_DENIAL) if r in routes]
        return (
            KillSwitch(
                condition="CCTV shows clear identification from multiple sources under good conditions",
                routes_killed=killed,
                explanation="Strong identification evidence makes the challenge unsustainable",
            ),
            PivotTrigger(
                condition="Footage shows a prolonged or targeted sequence",
                pivot_from=CanonicalRoute.IDENTIFICATION_CHALLENGE,
                pivot_to=CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE,
            ),
        )

    if item.category == EvidenceCategory.MEDICAL and CanonicalRoute.INTENT_DENIAL in routes:
        return (
            KillSwitch(
                condition="Medical evidence shows sustained, targeted injuries consistent with specific intent",
                routes_killed=[CanonicalRoute.INTENT_DENIAL],
                explanation="Sustained injuries indicate specific intent, not recklessness",
            ),
            PivotTrigger(
                condition="Injury pattern is sustained but mechanism remains disputed",
                pivot_from=CanonicalRoute.INTENT_DENIAL,
                pivot_to=CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE,
            ),
        )

    if item.category == EvidenceCategory.PROCEDURAL and any(m in item.name.lower() for m in BREACH_MARKERS):
        others = [r for r in routes if r != CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE]
        if others:
            return None, PivotTrigger(
                condition="Served PACE material confirms a breach",
                pivot_from=others[0],
                pivot_to=CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE,
                timing="anytime",
            )

    return None, None


# =============================================================================
# Mapper
# =============================================================================

def analyze_evidence_item(
    item: EvidenceItem,
    attack_paths: list[AttackPath],
    routes_in_play: list[CanonicalRoute],
    total_missing: int,
) -> Optional[EvidenceImpact]:
    """Impact of a single item, or None if no attack path depends on it."""
    affected = [path for path in attack_paths if path_depends_on(path, item)]
    if not affected:
        return None

    affected_routes = [
        route for route in CanonicalRoute
        if route in routes_in_play and any(path.route == route for path in affected)
    ]

    clean, late, adverse = _narratives(item.category, affected_routes)
    if item.urgency == EvidenceUrgency.BEFORE_PTPH:
        late = f"Needed before PTPH. {late}"

    kill_switch, pivot = _kill_switch_and_pivot(item, affected_routes)

    return EvidenceImpact(
        evidence_item=item,
        affected_attack_path_ids=[path.id for path in affected],
        impact_on_defence=_impact_on_defence(item, total_missing),
        if_arrives_clean=clean,
        if_arrives_late=late,
        if_arrives_adverse=adverse,
        viability_change=[_viability_shift(item, route, total_missing) for route in affected_routes],
        pivot_trigger=pivot,
        kill_switch=kill_switch,
    )


def map_evidence_impact(
    missing_items: list[EvidenceItem],
    attack_paths: list[AttackPath],
    routes_in_play: list[CanonicalRoute],
) -> list[EvidenceImpact]:
    """
    Map outstanding evidence to strategic impact.

    Args:
        missing_items: Outstanding items, in priority order
        attack_paths: Declared or route-derived attack paths
        routes_in_play: Routes to project viability changes for

    Returns:
        One impact per item that at least one attack path depends on, in
        input order. Items nothing depends on are dropped.
    """
    impacts = []
    for item in missing_items or []:
        impact = analyze_evidence_item(item, attack_paths or [], routes_in_play or [], len(missing_items))
        if impact is None:
            logger.debug("No attack path depends on %s; dropped", item.id)
            continue
        impacts.append(impact)
    return impacts
