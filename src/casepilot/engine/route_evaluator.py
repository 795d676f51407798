"""
CasePilot Canonical Route Evaluator

Deterministically assesses every route in the closed CanonicalRoute
catalog against the current evidence state.

Key features:
- Exactly one assessment per canonical route, in catalog order, always
- Inapplicable routes are blocked, never omitted
- Dispatch table is checked against the enum at import time, so a route
  added to CanonicalRoute without an evaluator fails immediately
- Self-defence is blocked unless an explicit, un-negated self-defence marker
  is present
- Markers match whole words only
- Mitigation is risky unless a recorded position explicitly says otherwise

No predictions. Reasons describe the evidence state that drove each
status, never an outcome.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Optional

from ..models import (
    CanonicalRoute,
    CriticalDisclosureItem,
    Dependency,
    ElementState,
    ProceduralSafetyStatus,
    RecordedPosition,
    RouteAssessment,
    RouteStatus,
    SupportLevel,
)
from .procedural_safety import is_critical_dependency

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

HIGHER_INTENT_OFFENCE = "s18_oapa"

KEY_DISCLOSURE_DEPENDENCIES = (
    "cctv_window_2310_2330",
    "cctv_continuity",
    "bwv_arrest",
    "call_999_audio",
    "cad_log",
    "interview_recording",
)

IDENTIFICATION_UNCERTAINTY_MARKERS = (
    "poor lighting",
    "dark",
    "uncertain",
    "uncertainty",
    "not sure",
    "couldn't see clearly",
    "fast",
    "quick",
    "brief",
    "moment",
    "glimpse",
    "glimpsed",
    "hard to see",
    "difficult to identify",
)

WEAPON_HEDGE_MARKERS = (
    "believes",
    "thinks",
    "not sure",
    "unclear",
    "uncertain",
    "didn't see",
    "couldn't see",
    "unsure",
)

MEDICAL_MECHANISM_TERMS = ("fracture", "laceration", "mechanism")

# Explicit narrative only. Generic fear, "was attacked" or a complainant's
# "he attacked me" is not enough to open this route.
SELF_DEFENCE_MARKERS = (
    "self defence",
    "self-defence",
    "self defense",
    "self-defense",
    "acted in self defence",
    "defending myself",
    "defending himself",
    "defending herself",
    "attacked me first",
    "was attacked first",
)

# A marker preceded by one of these within NEGATION_WINDOW words does not count
NEGATION_WORDS = frozenset({
    "not", "no", "never", "denies", "denied", "deny", "didn't", "wasn't", "isn't", "without",
})
NEGATION_WINDOW = 4

_WORD = re.compile(r"[a-z']+")


@lru_cache(maxsize=None)
def _marker_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(marker) + r"\b")


def _is_negated(text: str, start: int) -> bool:
    preceding = _WORD.findall(text[:start])[-NEGATION_WINDOW:]
    return any(word in NEGATION_WORDS for word in preceding)


ACT_ELEMENT_IDS = ("actus_reus", "act_causation")

WEAK_OR_NONE = (SupportLevel.WEAK, SupportLevel.NONE)


# =============================================================================
# Evaluation Context
# =============================================================================

@dataclass
class RouteContext:
    """
    Everything the route rules read.

    Attributes:
        elements: Element states (supplied or synthesized)
        dependencies: Awaited disclosure with status
        offence_code: Lower-case charge code, if known
        procedural_safety: Status from engine.procedural_safety
        text: Lower-cased free text for marker scanning
        recorded_position: Explicit litigator posture, if any
        critical_items: Pack disclosure items that count as key dependencies
    """
    elements: list[ElementState] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)
    offence_code: Optional[str] = None
    procedural_safety: Optional[ProceduralSafetyStatus] = None
    text: str = ""
    recorded_position: Optional[RecordedPosition] = None
    critical_items: list[CriticalDisclosureItem] = field(default_factory=list)

    def element(self, element_id: str) -> Optional[ElementState]:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def find_element(self, predicate: Callable[[str], bool]) -> Optional[ElementState]:
        for element in self.elements:
            if predicate(element.id):
                return element
        return None

    def markers_found(self, markers: tuple[str, ...], skip_negated: bool = False) -> list[str]:
        """Markers present in the text as whole words, in declaration order."""
        found = []
        for marker in markers:
            for match in _marker_pattern(marker).finditer(self.text):
                if skip_negated and _is_negated(self.text, match.start()):
                    continue
                found.append(marker)
                break
        return found

    def is_key_disclosure(self, dependency: Dependency) -> bool:
        return (
            dependency.id in KEY_DISCLOSURE_DEPENDENCIES
            or is_critical_dependency(dependency, self.critical_items)
        )

    @property
    def is_higher_intent_charge(self) -> bool:
        return (self.offence_code or "").lower() == HIGHER_INTENT_OFFENCE


def _gap_ids(element: ElementState) -> list[str]:
    return [gap.evidence_id for gap in element.gaps]


def _assessment(
    route: CanonicalRoute,
    status: RouteStatus,
    reasons: list[str],
    required: Optional[list[str]] = None,
    constraints: Optional[list[str]] = None,
) -> RouteAssessment:
    return RouteAssessment(
        route_id=route,
        status=status,
        reasons=reasons,
        required_dependencies=required or [],
        constraints=constraints or [],
    )


def _weak_element_reasons(label: str, element: ElementState) -> list[str]:
    reasons = [f"{label} element support: {element.support.value}"]
    if element.gaps:
        reasons.append(f"Missing evidence: {', '.join(_gap_ids(element))}")
    return reasons


# =============================================================================
# Route Rules
# =============================================================================

def evaluate_procedural_disclosure_leverage(ctx: RouteContext) -> RouteAssessment:
    """Viable on unsafe procedural status or outstanding key disclosure; never blocked."""
    route = CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE

    if ctx.procedural_safety in (
        ProceduralSafetyStatus.UNSAFE_TO_PROCEED,
        ProceduralSafetyStatus.CONDITIONALLY_UNSAFE,
    ):
        return _assessment(route, RouteStatus.VIABLE, [f"Procedural safety status: {ctx.procedural_safety.value}"])

    outstanding = [
        d.id for d in ctx.dependencies
        if ctx.is_key_disclosure(d) and d.is_outstanding
    ]
    if outstanding:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            [f"{len(outstanding)} key disclosure items outstanding"],
            required=outstanding,
        )

    return _assessment(
        route,
        RouteStatus.RISKY,
        ["No outstanding key dependencies; leverage may exist from timing or procedural issues"],
    )


def evaluate_identification_challenge(ctx: RouteContext) -> RouteAssessment:
    """Blocked iff identification support is strong."""
    route = CanonicalRoute.IDENTIFICATION_CHALLENGE
    element = ctx.element("identification")

    if element is not None and element.support == SupportLevel.STRONG:
        return _assessment(route, RouteStatus.BLOCKED, ["Identification element support is strong"])

    if element is not None and element.support in WEAK_OR_NONE:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            _weak_element_reasons("Identification", element),
            required=_gap_ids(element),
        )

    found = ctx.markers_found(IDENTIFICATION_UNCERTAINTY_MARKERS)
    if found:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            [f"Extracted text indicates identification uncertainty: {', '.join(found[:3])}"],
        )

    if element is None:
        return _assessment(route, RouteStatus.RISKY, ["Identification element state not available"])
    return _assessment(route, RouteStatus.RISKY, ["Identification element support is moderate"])


def evaluate_act_denial(ctx: RouteContext) -> RouteAssessment:
    route = CanonicalRoute.ACT_DENIAL
    element = ctx.find_element(lambda element_id: element_id in ACT_ELEMENT_IDS)

    if element is not None and element.support in WEAK_OR_NONE:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            _weak_element_reasons("Actus reus", element),
            required=_gap_ids(element),
        )

    return _assessment(
        route,
        RouteStatus.RISKY,
        ["Act denial is generally risky; actus reus element support is moderate or strong"],
    )


def evaluate_intent_denial(ctx: RouteContext) -> RouteAssessment:
    route = CanonicalRoute.INTENT_DENIAL

    if not ctx.is_higher_intent_charge:
        return _assessment(route, RouteStatus.BLOCKED, ["Intent denial only relevant for s18 offences"])

    element = ctx.element("specific_intent")
    if element is None:
        return _assessment(route, RouteStatus.RISKY, ["Specific intent element state not available"])
    if element.support in WEAK_OR_NONE:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            _weak_element_reasons("Specific intent", element),
            required=_gap_ids(element),
        )
    if element.support == SupportLevel.SOME:
        return _assessment(route, RouteStatus.RISKY, ["Specific intent element support is moderate"])
    return _assessment(route, RouteStatus.BLOCKED, ["Specific intent element support is strong"])


def evaluate_weapon_uncertainty_causation(ctx: RouteContext) -> RouteAssessment:
    """Viable on weak support, hedged weapon wording or unclear mechanism; otherwise risky."""
    route = CanonicalRoute.WEAPON_UNCERTAINTY_CAUSATION
    element = ctx.find_element(lambda element_id: "weapon" in element_id or "causation" in element_id)

    if element is not None and element.support in WEAK_OR_NONE:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            _weak_element_reasons("Weapon/causation", element),
            required=_gap_ids(element),
        )

    hedges = ctx.markers_found(WEAPON_HEDGE_MARKERS)
    if hedges:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            [f"Extracted text indicates weapon uncertainty: {', '.join(hedges[:2])}"],
        )

    if ctx.markers_found(("unclear",)) and any(term in ctx.text for term in MEDICAL_MECHANISM_TERMS):
        return _assessment(route, RouteStatus.VIABLE, ["Medical mechanism or fracture confirmation is unclear"])

    return _assessment(route, RouteStatus.RISKY, ["Weapon/causation evidence is moderate or unclear"])


def evaluate_self_defence(ctx: RouteContext) -> RouteAssessment:
    """Blocked by default; only an explicit narrative marker makes it viable."""
    route = CanonicalRoute.SELF_DEFENCE
    found = ctx.markers_found(SELF_DEFENCE_MARKERS, skip_negated=True)

    if not found:
        return _assessment(
            route,
            RouteStatus.BLOCKED,
            ["Self defence is BLOCKED: no explicit evidence supports self-defence narrative"],
            constraints=["Do NOT infer self-defence; requires explicit evidence"],
        )

    return _assessment(
        route,
        RouteStatus.VIABLE,
        [f"Extracted evidence explicitly mentions self-defence: {found[0]}"],
        constraints=["Self-defence must be raised in the defence statement"],
    )


def evaluate_alternative_mental_state_offence(ctx: RouteContext) -> RouteAssessment:
    route = CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE

    if not ctx.is_higher_intent_charge:
        return _assessment(
            route,
            RouteStatus.BLOCKED,
            ["Alternative mental state only relevant when higher mental state is charged"],
        )

    element = ctx.element("specific_intent")
    if element is not None and element.support in WEAK_OR_NONE:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            [
                f"Specific intent element support is {element.support.value}; "
                "alternative mental state (s20 recklessness) may be applicable"
            ],
            required=_gap_ids(element),
            constraints=["This is alternative framing/mental state analysis, not plea advice"],
        )
    if element is not None and element.support == SupportLevel.STRONG:
        return _assessment(route, RouteStatus.BLOCKED, ["Specific intent element support is strong"])

    reason = (
        "Specific intent element support is moderate"
        if element is not None
        else "Specific intent element state not available"
    )
    return _assessment(
        route,
        RouteStatus.RISKY,
        [reason],
        constraints=["This is alternative framing/mental state analysis, not plea advice"],
    )


def evaluate_mitigation_early_resolution(ctx: RouteContext) -> RouteAssessment:
    """Risky by default; viable only on an explicit recorded position."""
    route = CanonicalRoute.MITIGATION_EARLY_RESOLUTION
    position = ctx.recorded_position

    if position is not None and position.indicates_early_resolution:
        return _assessment(
            route,
            RouteStatus.VIABLE,
            ["Recorded position indicates mitigation/early resolution focus"],
        )

    return _assessment(
        route,
        RouteStatus.RISKY,
        ["Mitigation/early resolution is risky; do NOT recommend pleading"],
        constraints=["Include only procedural prep steps if later required"],
    )


# =============================================================================
# Dispatch
# =============================================================================

ROUTE_EVALUATORS: dict[CanonicalRoute, Callable[[RouteContext], RouteAssessment]] = {
    CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE: evaluate_procedural_disclosure_leverage,
    CanonicalRoute.IDENTIFICATION_CHALLENGE: evaluate_identification_challenge,
    CanonicalRoute.ACT_DENIAL: evaluate_act_denial,
    CanonicalRoute.INTENT_DENIAL: evaluate_intent_denial,
    CanonicalRoute.WEAPON_UNCERTAINTY_CAUSATION: evaluate_weapon_uncertainty_causation,
    CanonicalRoute.SELF_DEFENCE: evaluate_self_defence,
    CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE: evaluate_alternative_mental_state_offence,
    CanonicalRoute.MITIGATION_EARLY_RESOLUTION: evaluate_mitigation_early_resolution,
}

_unhandled = set(CanonicalRoute) - set(ROUTE_EVALUATORS)
if _unhandled:
    raise RuntimeError(f"No evaluator for canonical routes: {sorted(r.value for r in _unhandled)}")


def evaluate_routes(ctx: RouteContext) -> list[RouteAssessment]:
    """
    Evaluate all canonical routes.

    Returns:
        Exactly len(CanonicalRoute) assessments in catalog order
    """
    assessments = [ROUTE_EVALUATORS[route](ctx) for route in CanonicalRoute]
    logger.debug(
        "Routes evaluated: %s",
        ", ".join(f"{a.route_id.value}={a.status.value}" for a in assessments),
    )
    return assessments
