"""
CasePilot Pressure Triggers

Decides when to come in heavy and when to probe gently.

STRIKE is only ever recommended on the back of a specific observation;
with nothing specific the generator still returns a single PROBE trigger,
so the recommended tone is never silent.
"""
from __future__ import annotations

import logging

from ..models import (
    CaseInput,
    EvidenceMap,
    Leverage,
    Observation,
    ObservationType,
    PracticeArea,
    PressureTrigger,
    Tone,
)

logger = logging.getLogger(__name__)

# Gap topics that have their own, stronger rules
SPECIALISED_GAP_TOPICS = ("radiology", "escalation", "disclosure")


def _describes(observation: Observation, *terms: str) -> bool:
    description = observation.description.lower()
    return any(term in description for term in terms)


def _is_gap(observation: Observation) -> bool:
    return observation.type == ObservationType.EVIDENCE_GAP


# =============================================================================
# Practice-Area Rules
# =============================================================================

def _clinical_negligence_triggers(case_input: CaseInput, observations: list[Observation]) -> list[PressureTrigger]:
    triggers = []

    has_delay = any(o.type == ObservationType.TIMELINE_ANOMALY and _describes(o, "delay") for o in observations)
    has_deterioration = "deteriorat" in case_input.all_text() or any(
        _describes(o, "deterioration", "worsen") for o in observations
    )
    has_surgery = any(
        "surgery" in doc.name.lower() or "surgery" in (doc.extracted.summary or "").lower()
        for doc in case_input.documents
    )
    if has_delay and has_deterioration and has_surgery:
        triggers.append(PressureTrigger(
            trigger="Delay between presentation and treatment, with documented deterioration, leading to surgery",
            why_it_matters=(
                "Suggests failure to recognise deterioration and escalate promptly. The delay may have "
                "caused avoidable harm requiring surgical intervention."
            ),
            recommended_tone=Tone.PRESSURE,
        ))

    if any(
        o.id.startswith("addendum-after-complaint") or (_describes(o, "radiology") and _describes(o, "addendum", "discrepancy"))
        for o in observations
    ):
        triggers.append(PressureTrigger(
            trigger="Report has an addendum or discrepancy indicating findings changed after a complaint",
            why_it_matters=(
                "An addendum after a complaint suggests delayed recognition or retrospective correction. "
                "Strong indicator of breach if timing shows recognition only after the complaint."
            ),
            recommended_tone=Tone.STRIKE,
        ))

    if any(_is_gap(o) and _describes(o, "escalation") for o in observations):
        triggers.append(PressureTrigger(
            trigger="Escalation records missing where policy requires escalation",
            why_it_matters=(
                "Failure to escalate when red flags are present suggests systemic governance failure. "
                "Cannot be explained as oversight if policy is clear."
            ),
            recommended_tone=Tone.PRESSURE,
        ))

    return triggers


def _housing_triggers(observations: list[Observation], evidence_map: EvidenceMap) -> list[PressureTrigger]:
    breach = any(
        o.id == "awaabs-law-trigger" and o.leverage_potential in (Leverage.HIGH, Leverage.CRITICAL)
        for o in observations
    )
    if breach:
        return [PressureTrigger(
            trigger="Awaab's Law breach detected: statutory deadline exceeded",
            why_it_matters=(
                "A statutory violation that cannot be explained away. Strengthens quantum and supports "
                "urgent injunctive relief."
            ),
            recommended_tone=Tone.STRIKE,
        )]

    has_complaints = (
        any(_describes(o, "complaint") for o in observations)
        or any(match.present and "complaint" in match.item.id for match in evidence_map.matches)
    )
    repair_logs_missing = any(_is_gap(o) and _describes(o, "repair") for o in observations)
    if has_complaints and repair_logs_missing:
        return [PressureTrigger(
            trigger="Complaints documented but no repair logs or works orders",
            why_it_matters=(
                "Suggests complaints were not acted upon. The landlord cannot claim repairs were "
                "attempted if no logs exist."
            ),
            recommended_tone=Tone.PRESSURE,
        )]

    return []


def _personal_injury_triggers(case_input: CaseInput, observations: list[Observation]) -> list[PressureTrigger]:
    has_inconsistency = any(o.type == ObservationType.INCONSISTENCY for o in observations)
    has_witnesses = any(
        "witness" in doc.name.lower() or "witness" in (doc.extracted.summary or "").lower()
        for doc in case_input.documents
    )
    if has_inconsistency and has_witnesses:
        return [PressureTrigger(
            trigger="Mechanism of accident described inconsistently across witness evidence",
            why_it_matters=(
                "Inconsistencies in core facts undermine credibility. If witnesses cannot agree on "
                "mechanism, liability becomes contested."
            ),
            recommended_tone=Tone.PRESSURE,
        )]
    return []


def _criminal_triggers(observations: list[Observation]) -> list[PressureTrigger]:
    if any(_is_gap(o) and _describes(o, "disclosure") for o in observations):
        return [PressureTrigger(
            trigger="Disclosure schedules incomplete or unused material not disclosed",
            why_it_matters=(
                "Non-disclosure is a procedural breach that can lead to a stay of proceedings. "
                "A strong procedural lever."
            ),
            recommended_tone=Tone.STRIKE,
        )]
    return []


# =============================================================================
# Generator
# =============================================================================

def generate_triggers(
    case_input: CaseInput,
    observations: list[Observation],
    evidence_map: EvidenceMap,
) -> list[PressureTrigger]:
    """
    Recommended tone triggers for the case.

    Returns:
        At least one trigger. Falls back to PROBE when no practice-area
        rule fires.
    """
    observations = observations or []
    area = case_input.practice_area

    if area == PracticeArea.CLINICAL_NEGLIGENCE:
        triggers = _clinical_negligence_triggers(case_input, observations)
    elif area == PracticeArea.HOUSING_DISREPAIR:
        triggers = _housing_triggers(observations, evidence_map)
    elif area == PracticeArea.PERSONAL_INJURY:
        triggers = _personal_injury_triggers(case_input, observations)
    elif area == PracticeArea.CRIMINAL:
        triggers = _criminal_triggers(observations)
    else:
        triggers = []

    if not triggers and any(
        _is_gap(o) and o.leverage_potential == Leverage.LOW and not _describes(o, *SPECIALISED_GAP_TOPICS)
        for o in observations
    ):
        triggers.append(PressureTrigger(
            trigger="Administrative evidence gaps detected",
            why_it_matters=(
                "May indicate oversight rather than systemic failure. Test with standard requests "
                "before escalating tone."
            ),
            recommended_tone=Tone.PROBE,
        ))

    if not triggers:
        triggers.append(PressureTrigger(
            trigger="No high-leverage trigger identified",
            why_it_matters="Proceed with standard information requests and reassess as material arrives.",
            recommended_tone=Tone.PROBE,
        ))

    logger.debug("Pressure triggers: %s", [t.recommended_tone.value for t in triggers])
    return triggers
