"""
CasePilot Hypothesis Generator

Turns each observation into a testable investigation angle: what should
exist if the opponent did things properly, what would confirm or kill
that, and the targeted request that tests it.
"""
from __future__ import annotations

from typing import Optional

from ..models import (
    ExpectedEvidence,
    InvestigationAngle,
    Observation,
    ObservationType,
    PracticeArea,
    PracticePack,
)

EVIDENCE_GAP_PREFIX = "Missing expected evidence: "
GOVERNANCE_GAP_PREFIX = "Potential governance gap: "

# (criminal, other) phrasing of the expected opponent response
_EXPECTED_RESPONSES: dict[ObservationType, tuple[str, str]] = {
    ObservationType.EVIDENCE_GAP: (
        "CPS/Police should produce the material or give a clear timetable or retention "
        "explanation (CPIA/PACE context).",
        "Opponent should produce requested evidence or explain absence",
    ),
    ObservationType.TIMELINE_ANOMALY: (
        "CPS/Police should confirm what exists for the time window and disclose it (or explain absence).",
        "Opponent should produce records for the gap period or explain absence",
    ),
    ObservationType.INCONSISTENCY: (
        "CPS/Police should clarify the inconsistency via the full first-account trail "
        "(999/BWV/statement) and disclose any unused material bearing on it.",
        "Opponent should clarify contradictions or explain discrepancies",
    ),
    ObservationType.GOVERNANCE_GAP: (
        "CPS/Police should disclose compliance records or explain the gap (PACE/CPIA integrity).",
        "Opponent should produce compliance evidence or explain absence",
    ),
}


def _strip_prefix(text: str, prefix: str) -> str:
    return text[len(prefix):] if text.startswith(prefix) else text


def _matching_expected(observation: Observation, pack: Optional[PracticePack]) -> Optional[ExpectedEvidence]:
    if pack is None:
        return None
    description = observation.description.lower()
    for expected in pack.expected_evidence:
        if observation.id == f"evidence-gap-{expected.id}" or expected.label.lower() in description:
            return expected
    return None


def generate_investigation_angle(
    observation: Observation,
    practice_area: PracticeArea = PracticeArea.OTHER,
    pack: Optional[PracticePack] = None,
) -> InvestigationAngle:
    """Build the angle for a single observation."""
    criminal = practice_area == PracticeArea.CRIMINAL
    criminal_response, other_response = _EXPECTED_RESPONSES[observation.type]

    if observation.type == ObservationType.EVIDENCE_GAP:
        subject = _strip_prefix(observation.description, EVIDENCE_GAP_PREFIX)
        phrasing = "properly recorded, retained and disclosable" if criminal else "properly done and maintained"
        expected = _matching_expected(observation, pack)
        hypothesis = f"If {observation.what_should_exist} was {phrasing}, then {subject} should exist"
        confirmation = f"If {subject} is produced, it confirms the expected process or record exists"
        kill = f"If {subject} cannot be produced or is inconsistent, it raises a live gap to resolve"
        request = (expected.probe_question if expected and expected.probe_question
                   else f"Request {subject} and all related documentation")

    elif observation.type == ObservationType.TIMELINE_ANOMALY:
        hypothesis = "If events were properly documented, then activity should be recorded during the gap period"
        confirmation = "If records exist for the gap period, it confirms proper documentation"
        kill = "If no records exist for the gap period, it suggests a failure to document or act"
        if len(observation.related_dates) >= 2:
            start, end = observation.related_dates[0], observation.related_dates[-1]
            request = (
                "Request all records, communications and documentation for the period "
                f"{start.isoformat()} to {end.isoformat()}"
            )
        else:
            request = f"Request all records, communications and documentation relating to: {observation.description}"

    elif observation.type == ObservationType.INCONSISTENCY:
        hypothesis = "If the narrative is consistent, then all documents should tell the same story"
        confirmation = "If documents are consistent, it confirms a reliable narrative"
        kill = "If contradictions remain, it suggests unreliable evidence or an evolving account"
        request = "Request clarification of the contradictory statements and all related documentation"

    else:
        subject = _strip_prefix(observation.description, GOVERNANCE_GAP_PREFIX)
        hypothesis = "If governance rules were followed, then evidence of compliance should exist"
        confirmation = "If compliance evidence exists, it confirms proper governance"
        kill = "If compliance evidence is missing, it suggests a governance failure"
        request = f"Request evidence of compliance with: {subject}"

    return InvestigationAngle(
        id=f"angle-{observation.id}",
        observation_id=observation.id,
        hypothesis=hypothesis,
        confirmation_condition=confirmation,
        kill_condition=kill,
        targeted_request=request,
        expected_response=criminal_response if criminal else other_response,
        leverage=observation.leverage_potential,
    )


def generate_investigation_angles(
    observations: list[Observation],
    practice_area: PracticeArea = PracticeArea.OTHER,
    pack: Optional[PracticePack] = None,
) -> list[InvestigationAngle]:
    """One angle per observation, in observation order."""
    return [generate_investigation_angle(obs, practice_area, pack) for obs in observations]
