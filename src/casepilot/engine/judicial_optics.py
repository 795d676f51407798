"""
CasePilot Judicial Optics

Tags proposed actions and attack paths by how a court is likely to
receive them:

- attractive: proportionate, early, standard case management
- neutral: defensible but unremarkable
- risky: premature, speculative or likely to irritate the court

Rules are applied in order and later rules override earlier ones, then
timing and persistence adjustments run. Every non-neutral result carries
at least one factor so the decision can be audited.
"""
from __future__ import annotations

from ..models import (
    AttackPath,
    Optics,
    OpticsResult,
    Persistence,
    Proportionality,
    Timing,
)

DISCLOSURE_REQUEST_MARKERS = (
    "disclosure request",
    "request disclosure",
    "letter requesting",
    "disclosure application",
)

BASIS_MARKERS = ("basis", "evidence", "turnbull", "pace")
SPECULATIVE_MARKERS = ("frivolous", "weak", "speculative", "unsubstantiated")


def _has_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


def _explain(factors: list[str], default: str) -> str:
    return ". ".join(factors) + "." if factors else default


def score_optics(
    action: str,
    timing: Timing = Timing.UNKNOWN,
    persistence: Persistence = Persistence.UNKNOWN,
    proportionality: Proportionality = Proportionality.UNKNOWN,
    has_chase_trail: bool = False,
) -> OpticsResult:
    """
    Score the judicial optics of a proposed action.

    Args:
        action: Free-text description of the action
        timing: When the action is taken relative to the procedural timetable
        persistence: Whether this is a first request, chased, or repeated
        proportionality: Whether the request is proportionate to the issue
        has_chase_trail: Whether earlier requests are documented

    Returns:
        OpticsResult with the ordered factors behind the result
    """
    text = (action or "").lower()
    optics = Optics.NEUTRAL
    factors: list[str] = []

    if _has_any(text, DISCLOSURE_REQUEST_MARKERS):
        if timing == Timing.EARLY and proportionality == Proportionality.PROPORTIONAL:
            optics = Optics.ATTRACTIVE
            factors.append("Early reasonable disclosure request")
            factors.append("Proportional case management")
        elif proportionality == Proportionality.PROPORTIONAL:
            optics = Optics.ATTRACTIVE
            factors.append("Proportional disclosure request")

    if "continuity" in text:
        optics = Optics.ATTRACTIVE
        factors.append("Continuity request is standard case management")

    if "written submission" in text or "case management" in text:
        optics = Optics.ATTRACTIVE
        factors.append("Structured written submissions are judicially preferred")

    if "abuse of process" in text:
        if not has_chase_trail and persistence == Persistence.FIRST_REQUEST:
            optics = Optics.RISKY
            factors.append("Abuse application without proper chase trail")
            factors.append("Premature application may irritate court")
        elif has_chase_trail:
            optics = Optics.NEUTRAL
            factors.append("Abuse application with documented chase trail")

    if "identification" in text and "challenge" in text and timing == Timing.LATE:
        optics = Optics.NEUTRAL
        factors.append("Late identification challenge should have been raised earlier")

    if "turnbull" in text and "challenge" in text and timing == Timing.EARLY:
        optics = Optics.ATTRACTIVE
        factors.append("Early Turnbull challenge with proper basis")

    if ("challenge" in text or "exclusion" in text) and not _has_any(text, BASIS_MARKERS):
        optics = Optics.RISKY
        factors.append("Unsubstantiated challenge without clear basis")

    if "application" in text and _has_any(text, SPECULATIVE_MARKERS):
        optics = Optics.RISKY
        factors.append("Frivolous or speculative application")

    if "pace" in text and "exclusion" in text:
        if has_chase_trail and timing == Timing.EARLY:
            optics = Optics.ATTRACTIVE
            factors.append("Early PACE exclusion application with documented basis")
        else:
            optics = Optics.NEUTRAL
            factors.append(
                "PACE exclusion application with documented basis" if has_chase_trail
                else "PACE exclusion application awaiting documented basis"
            )

    # Adjustments
    if timing == Timing.LATE and optics == Optics.ATTRACTIVE:
        optics = Optics.NEUTRAL
        factors.append("Action is late, reducing judicial attractiveness")

    if timing == Timing.EARLY and optics == Optics.RISKY:
        optics = Optics.NEUTRAL
        factors.append("Early timing mitigates risk")

    if persistence == Persistence.REPEATED and not has_chase_trail and optics != Optics.RISKY:
        optics = Optics.RISKY
        factors.append("Repeated requests without documented chase trail")

    if has_chase_trail and optics == Optics.RISKY:
        optics = Optics.NEUTRAL
        factors.append("Documented chase trail mitigates risk")

    return OpticsResult(optics=optics, explanation=_explain(factors, "Standard case management action."), factors=factors)


def score_attack_path_optics(
    attack_path: AttackPath,
    timing: Timing = Timing.UNKNOWN,
    has_chase_trail: bool = False,
) -> OpticsResult:
    """Optics of an attack path, judged from its method and target."""
    method = attack_path.method.lower()
    target = attack_path.target.lower()
    optics = Optics.NEUTRAL
    factors: list[str] = []

    if "turnbull" in method and "identification" in target:
        optics = Optics.ATTRACTIVE if timing == Timing.EARLY else Optics.NEUTRAL
        factors.append("Turnbull challenge with proper basis")
        if timing == Timing.LATE:
            factors.append("Late challenge reduces attractiveness")

    if "pace" in method or "exclusion" in method:
        optics = Optics.NEUTRAL if has_chase_trail else Optics.RISKY
        factors.append("PACE challenge with documented basis" if has_chase_trail else "PACE challenge without proper basis")

    if "disclosure" in method and "abuse" in method:
        optics = Optics.NEUTRAL if has_chase_trail else Optics.RISKY
        factors.append("Abuse application with chase trail" if has_chase_trail else "Abuse application without chase trail")

    if "intent" in method or "intent" in target:
        optics = Optics.ATTRACTIVE if timing == Timing.EARLY else Optics.NEUTRAL
        factors.append("Intent challenge is standard defence")
        if timing == Timing.EARLY:
            factors.append("Early intent challenge is judicially preferred")

    return OpticsResult(optics=optics, explanation=_explain(factors, "Standard attack path."), factors=factors)
