"""
CasePilot Practice-Area Detectors

Statutory and clinical timing checks that only make sense for one
practice area. Each detector contributes at most one observation.

- housing_disrepair: Awaab's Law deadlines for social landlords
  (investigate within 14 days of first report, start works within 7 days
  of investigation)
- clinical_negligence: addendum written shortly after a complaint, and
  presentation -> diagnosis -> treatment delays

All "today" comparisons use CaseInput.reference_date(); the wall clock is
never read.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from ..models import (
    CaseInput,
    Leverage,
    Observation,
    ObservationType,
    PracticeArea,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Awaab's Law (housing)
# =============================================================================

INVESTIGATION_DEADLINE_DAYS = 14
WORK_START_DEADLINE_DAYS = 7

SOCIAL_LANDLORD_MARKERS = ("social", "council", "housing association", "registered provider")

HAZARD_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Mould detected", ("mould", "mold")),
    ("Damp detected", ("damp", "moisture")),
    ("Excess cold/heating issues", ("cold", "heating", "boiler")),
    ("Water ingress", ("water ingress", "leak", "flood")),
)

HEALTH_MARKERS = ("asthma", "respiratory", "health", "medical", "gp ", "doctor")
EMERGENCY_MARKERS = ("category 1", "cat 1")

REPORT_MARKERS = ("complaint", "report")
INVESTIGATION_MARKERS = ("investigation", "inspection", "survey")
WORK_START_MARKERS = ("work start", "repair start", "contractor")


@dataclass
class AwaabsLawAssessment:
    """Deadline state for a social-landlord hazard case."""
    hazards: list[str] = field(default_factory=list)
    first_report: Optional[date] = None
    investigated_on: Optional[date] = None
    works_started_on: Optional[date] = None
    is_emergency: bool = False
    investigation_breached: bool = False
    work_start_breached: bool = False
    days_until_investigation_deadline: Optional[int] = None


def _is_social_landlord(case_input: CaseInput, text: str) -> bool:
    if case_input.landlord_type:
        return any(marker in case_input.landlord_type.lower() for marker in SOCIAL_LANDLORD_MARKERS)
    return any(marker in text for marker in SOCIAL_LANDLORD_MARKERS)


def _earliest_event(case_input: CaseInput, markers: tuple[str, ...], include_documents: bool = False) -> Optional[date]:
    found = [
        event.event_date for event in case_input.timeline
        if any(marker in event.description.lower() for marker in markers)
    ]
    if include_documents:
        found.extend(
            doc.created_at for doc in case_input.documents
            if doc.created_at and any(marker in doc.name.lower() for marker in markers)
        )
    return min(found) if found else None


def assess_awaabs_law(case_input: CaseInput) -> Optional[AwaabsLawAssessment]:
    """
    Awaab's Law deadline state, or None when the law does not apply.

    Applies only to social landlords with at least one qualifying hazard.
    """
    text = case_input.all_text()
    if not _is_social_landlord(case_input, text):
        return None

    hazards = [label for label, markers in HAZARD_MARKERS if any(m in text for m in markers)]
    if not hazards:
        return None

    assessment = AwaabsLawAssessment(
        hazards=hazards,
        first_report=_earliest_event(case_input, REPORT_MARKERS, include_documents=True),
        investigated_on=_earliest_event(case_input, INVESTIGATION_MARKERS),
        works_started_on=_earliest_event(case_input, WORK_START_MARKERS),
    )

    health_impact = any(marker in text for marker in HEALTH_MARKERS)
    damp_or_mould = any(label in hazards for label in ("Mould detected", "Damp detected"))
    assessment.is_emergency = any(m in text for m in EMERGENCY_MARKERS) or (health_impact and damp_or_mould)

    today = case_input.reference_date()
    if today is None or assessment.first_report is None:
        return assessment

    investigation_deadline = assessment.first_report + timedelta(days=INVESTIGATION_DEADLINE_DAYS)
    assessment.days_until_investigation_deadline = (investigation_deadline - today).days
    assessment.investigation_breached = today > investigation_deadline and assessment.investigated_on is None

    if assessment.investigated_on is not None:
        work_deadline = assessment.investigated_on + timedelta(days=WORK_START_DEADLINE_DAYS)
        assessment.work_start_breached = today > work_deadline and assessment.works_started_on is None

    return assessment


def awaabs_law_observation(assessment: AwaabsLawAssessment) -> Observation:
    """Governance observation for an Awaab's Law assessment."""
    breach_leverage = Leverage.CRITICAL if assessment.is_emergency else Leverage.HIGH
    related = [d for d in (assessment.first_report, assessment.investigated_on) if d]

    if assessment.investigation_breached:
        return Observation(
            id="awaabs-law-trigger",
            type=ObservationType.GOVERNANCE_GAP,
            description="Awaab's Law breach: investigation deadline exceeded (14 days from first report)",
            why_unusual=(
                "Social landlord failed to investigate within the statutory 14-day deadline "
                "after the hazard was first reported."
            ),
            what_should_exist=(
                "Investigation within 14 days of first report, with inspection records and "
                "assessment documentation"
            ),
            leverage_potential=breach_leverage,
            related_dates=related,
        )

    if assessment.work_start_breached:
        return Observation(
            id="awaabs-law-trigger",
            type=ObservationType.GOVERNANCE_GAP,
            description="Awaab's Law breach: work start deadline exceeded (7 days from investigation)",
            why_unusual=(
                "Social landlord failed to start remedial work within 7 days of investigation. "
                "This is a continuing breach."
            ),
            what_should_exist="Work orders and contractor records dated within 7 days of investigation",
            leverage_potential=breach_leverage,
            related_dates=related,
        )

    days_left = assessment.days_until_investigation_deadline
    if days_left is not None and 0 <= days_left <= 7:
        description = f"Awaab's Law deadline approaching: investigation due within {days_left} days"
    else:
        description = f"Awaab's Law applies: {', '.join(assessment.hazards)}"

    return Observation(
        id="awaabs-law-trigger",
        type=ObservationType.GOVERNANCE_GAP,
        description=description,
        why_unusual="Social landlords must meet statutory deadlines for qualifying hazards.",
        what_should_exist=(
            "Investigation within 14 days of first report and work start within 7 days "
            "of investigation"
        ),
        leverage_potential=Leverage.MEDIUM,
        related_dates=related,
    )


# =============================================================================
# Clinical Negligence
# =============================================================================

ADDENDUM_WINDOW_DAYS = 90
DIAGNOSIS_DELAY_DAYS = 7
DIAGNOSIS_DELAY_HIGH_DAYS = 14
TREATMENT_DELAY_DAYS = 14
TREATMENT_DELAY_HIGH_DAYS = 30

PRESENTATION_MARKERS = ("presentation", "presented", "attendance", "a&e")
DIAGNOSIS_MARKERS = ("diagnosis", "diagnosed", "confirmed")
TREATMENT_MARKERS = ("treatment", "surgery", "operation")
ADDENDUM_MARKERS = ("addendum", "amendment")


def detect_addendum_after_complaint(case_input: CaseInput) -> Optional[Observation]:
    """An addendum written within 90 days after a complaint suggests retrospective correction."""
    complaints = sorted(
        event.event_date for event in case_input.timeline
        if "complaint" in event.description.lower()
    )
    for doc in case_input.documents:
        if doc.created_at is None or not any(m in doc.name.lower() for m in ADDENDUM_MARKERS):
            continue
        for complained_on in complaints:
            days_after = (doc.created_at - complained_on).days
            if 0 < days_after < ADDENDUM_WINDOW_DAYS:
                return Observation(
                    id=f"addendum-after-complaint-{doc.id}",
                    type=ObservationType.INCONSISTENCY,
                    description=f"Addendum created {days_after} days after complaint",
                    why_unusual=(
                        f"Addendum to {doc.name} was created after the complaint, "
                        "suggesting retrospective correction"
                    ),
                    what_should_exist="Addenda created contemporaneously, not after complaints",
                    leverage_potential=Leverage.HIGH,
                    related_dates=[complained_on, doc.created_at],
                    source_document_ids=[doc.id],
                )
    return None


def _first_clinical_event(case_input: CaseInput, markers: tuple[str, ...], exclude: tuple[str, ...] = ()) -> Optional[date]:
    for event in sorted(case_input.timeline, key=lambda e: e.event_date):
        description = event.description.lower()
        if any(m in description for m in exclude):
            continue
        if any(m in description for m in markers):
            return event.event_date
    return None


def detect_treatment_delays(case_input: CaseInput) -> Optional[Observation]:
    """Presentation -> diagnosis over 7 days, or diagnosis -> treatment over 14 days."""
    presented = _first_clinical_event(case_input, PRESENTATION_MARKERS)
    diagnosed = _first_clinical_event(case_input, DIAGNOSIS_MARKERS, exclude=PRESENTATION_MARKERS)
    treated = _first_clinical_event(
        case_input, TREATMENT_MARKERS, exclude=PRESENTATION_MARKERS + DIAGNOSIS_MARKERS,
    )

    if presented and diagnosed:
        delay = (diagnosed - presented).days
        if delay > DIAGNOSIS_DELAY_DAYS:
            return Observation(
                id="treatment-delay-diagnosis",
                type=ObservationType.TIMELINE_ANOMALY,
                description=f"Delay of {delay} days between presentation and diagnosis",
                why_unusual=(
                    f"Patient presented on {presented.isoformat()} but diagnosis was not "
                    f"confirmed until {diagnosed.isoformat()}"
                ),
                what_should_exist="Prompt diagnosis after presentation, with the investigations ordered",
                leverage_potential=Leverage.HIGH if delay > DIAGNOSIS_DELAY_HIGH_DAYS else Leverage.MEDIUM,
                related_dates=[presented, diagnosed],
            )

    if diagnosed and treated:
        delay = (treated - diagnosed).days
        if delay > TREATMENT_DELAY_DAYS:
            return Observation(
                id="treatment-delay-treatment",
                type=ObservationType.TIMELINE_ANOMALY,
                description=f"Delay of {delay} days between diagnosis and treatment",
                why_unusual=(
                    f"Diagnosis confirmed on {diagnosed.isoformat()} but treatment not provided "
                    f"until {treated.isoformat()}"
                ),
                what_should_exist="Treatment within protocol timeframes after diagnosis",
                leverage_potential=Leverage.HIGH if delay > TREATMENT_DELAY_HIGH_DAYS else Leverage.MEDIUM,
                related_dates=[diagnosed, treated],
            )

    return None


# =============================================================================
# Dispatch
# =============================================================================

def detect_practice_anomaly(case_input: CaseInput) -> Optional[Observation]:
    """The single practice-area observation for the case, if any."""
    if case_input.practice_area == PracticeArea.HOUSING_DISREPAIR:
        assessment = assess_awaabs_law(case_input)
        if assessment is None:
            return None
        logger.debug(
            "Awaab's Law applies (investigation_breached=%s, emergency=%s)",
            assessment.investigation_breached,
            assessment.is_emergency,
        )
        return awaabs_law_observation(assessment)

    if case_input.practice_area == PracticeArea.CLINICAL_NEGLIGENCE:
        return detect_addendum_after_complaint(case_input) or detect_treatment_delays(case_input)

    return None
