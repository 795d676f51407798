"""
Pytest configuration and fixtures for CasePilot tests.

Provides helper factories and common fixtures matching actual model definitions.
"""
import logging
from datetime import date

import pytest

from casepilot.models import (
    AttackPath,
    CanonicalRoute,
    CaseInput,
    ChecklistItem,
    CommitmentLevel,
    DatedFact,
    Dependency,
    DependencyStatus,
    Document,
    ElementState,
    EvidenceCategory,
    EvidenceItem,
    EvidencePriority,
    EvidenceRef,
    EvidenceUrgency,
    ExpectedEvidence,
    ExtractedFacts,
    GovernanceRule,
    InvestigationAngle,
    Leverage,
    Move,
    MovePhase,
    Observation,
    ObservationType,
    PracticeArea,
    PracticePack,
    SupportLevel,
    TimelineEvent,
)
from casepilot.packs import load_builtin_pack


# =============================================================================
# Factory Helpers
# =============================================================================

def make_document(
    id: str = "doc-1",
    name: str = "Document",
    type: str = None,
    created_at: date = None,
    summary: str = None,
    key_issues: list = None,
    dates: list = None,
    search_text: str = None,
) -> Document:
    """Create a Document with extracted facts."""
    key_issues = key_issues or []
    if search_text is None:
        search_text = " ".join([*(i.lower() for i in key_issues), (summary or "").lower()]).strip()
    return Document(
        id=id,
        name=name,
        type=type,
        created_at=created_at,
        extracted=ExtractedFacts(
            summary=summary,
            key_issues=key_issues,
            dates=[DatedFact(on=d) if isinstance(d, date) else d for d in (dates or [])],
            search_text=search_text,
        ),
    )


def make_event(on: date, description: str = "Event", source_document_id: str = None) -> TimelineEvent:
    """Create a TimelineEvent."""
    return TimelineEvent(event_date=on, description=description, source_document_id=source_document_id)


def make_element(id: str, support: SupportLevel, gaps: list = None, label: str = None) -> ElementState:
    """Create an ElementState; gaps are evidence ids."""
    return ElementState(
        id=id,
        label=label or id.replace("_", " ").title(),
        support=support,
        gaps=[EvidenceRef(evidence_id=g, label=g) for g in (gaps or [])],
    )


def make_dependency(id: str, status: DependencyStatus = DependencyStatus.OUTSTANDING, label: str = None) -> Dependency:
    """Create a Dependency (outstanding by default)."""
    return Dependency(id=id, status=status, label=label)


def make_evidence_item(
    id: str,
    name: str,
    category: EvidenceCategory = EvidenceCategory.OTHER,
    urgency: EvidenceUrgency = EvidenceUrgency.ANYTIME,
) -> EvidenceItem:
    """Create an outstanding EvidenceItem."""
    return EvidenceItem(id=id, name=name, category=category, urgency=urgency)


def make_attack_path(
    id: str,
    route: CanonicalRoute = None,
    evidence_inputs: list = None,
    target: str = "",
    method: str = "",
) -> AttackPath:
    """Create an AttackPath."""
    return AttackPath(
        id=id,
        target=target or (route.value if route else id),
        method=method,
        route=route,
        evidence_inputs=evidence_inputs or [],
    )


def make_observation(
    id: str = "obs-1",
    type: ObservationType = ObservationType.EVIDENCE_GAP,
    description: str = "Missing expected evidence: Something",
    leverage: Leverage = Leverage.MEDIUM,
    related_dates: list = None,
    what_should_exist: str = "Something",
) -> Observation:
    """Create an Observation."""
    return Observation(
        id=id,
        type=type,
        description=description,
        why_unusual="Unusual",
        what_should_exist=what_should_exist,
        leverage_potential=leverage,
        related_dates=related_dates or [],
    )


def make_angle(index: int, request: str = None, leverage: Leverage = Leverage.MEDIUM) -> InvestigationAngle:
    """Create an InvestigationAngle with a distinct targeted request."""
    return InvestigationAngle(
        id=f"angle-obs-{index}",
        observation_id=f"obs-{index}",
        hypothesis=f"Hypothesis {index}",
        confirmation_condition="Confirmed",
        kill_condition="Killed",
        targeted_request=request or f"Request item {index}",
        expected_response="Opponent should produce requested evidence or explain absence",
        leverage=leverage,
    )


def make_move(
    order: int,
    phase: MovePhase = MovePhase.INFORMATION_EXTRACTION,
    evidence_requested: str = None,
    cost: int = None,
    commitment_level: CommitmentLevel = None,
    information_gain: Leverage = Leverage.MEDIUM,
    dependencies: list = None,
    what_you_lose: str = "",
) -> Move:
    """Create a Move with phase-appropriate defaults."""
    default_cost = {
        MovePhase.INFORMATION_EXTRACTION: 50,
        MovePhase.COMMITMENT_FORCING: 500,
        MovePhase.ESCALATION: 2000,
    }
    default_commitment = {
        MovePhase.INFORMATION_EXTRACTION: CommitmentLevel.LOW,
        MovePhase.COMMITMENT_FORCING: CommitmentLevel.MEDIUM,
        MovePhase.ESCALATION: CommitmentLevel.HIGH,
    }
    return Move(
        order=order,
        phase=phase,
        action=f"Action {order}",
        evidence_requested=evidence_requested or f"Evidence {order}",
        cost=default_cost[phase] if cost is None else cost,
        commitment_level=commitment_level or default_commitment[phase],
        information_gain=information_gain,
        dependencies=dependencies or [],
        what_you_lose_if_out_of_order=what_you_lose,
    )


def make_case_input(
    case_id: str = "CASE-001",
    practice_area: PracticeArea = PracticeArea.CRIMINAL,
    documents: list = None,
    timeline: list = None,
    elements: list = None,
    dependencies: list = None,
    extracted_text: str = "",
    **kwargs,
) -> CaseInput:
    """Create a CaseInput with required fields."""
    return CaseInput(
        case_id=case_id,
        practice_area=practice_area,
        documents=documents or [],
        timeline=timeline or [],
        elements=elements or [],
        dependencies=dependencies or [],
        extracted_text=extracted_text,
        **kwargs,
    )


def make_pack(
    practice_area: PracticeArea = PracticeArea.OTHER,
    checklist: list = None,
    expected_evidence: list = None,
    governance_rules: list = None,
    critical_disclosure_items: list = None,
) -> PracticePack:
    """Create a PracticePack directly, bypassing YAML."""
    return PracticePack(
        practice_area=practice_area,
        name="Test Pack",
        version="1.0.0",
        checklist=checklist or [],
        expected_evidence=expected_evidence or [],
        governance_rules=governance_rules or [],
        critical_disclosure_items=critical_disclosure_items or [],
    )


def make_checklist_item(
    id: str,
    patterns: list,
    category: str = "general",
    is_core: bool = False,
    critical: bool = False,
    priority: EvidencePriority = EvidencePriority.MEDIUM,
) -> ChecklistItem:
    """Create a ChecklistItem."""
    return ChecklistItem(
        id=id,
        label=id.replace("_", " ").title(),
        category=category,
        priority=priority,
        detect_patterns=patterns,
        is_core=is_core,
        critical=critical,
    )


def make_expected(id: str, patterns: list = None, priority: EvidencePriority = EvidencePriority.MEDIUM) -> ExpectedEvidence:
    """Create an ExpectedEvidence entry."""
    return ExpectedEvidence(
        id=id,
        label=id.replace("-", " ").title(),
        detect_patterns=patterns or [id],
        priority=priority,
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_casepilot_logger():
    """Drop handlers the CLI attaches so later tests never log to a closed capture stream."""
    yield
    logger = logging.getLogger("casepilot")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def criminal_pack():
    """The bundled criminal practice pack."""
    return load_builtin_pack("criminal")


@pytest.fixture
def housing_pack():
    """The bundled housing disrepair practice pack."""
    return load_builtin_pack("housing_disrepair")


@pytest.fixture
def minimal_pack_dict():
    """Minimal valid practice pack document."""
    return {
        "schema_version": "1.0.0",
        "practice_area": "personal_injury",
        "name": "Test PI Pack",
        "version": "0.1.0",
        "checklist": [
            {
                "id": "accident_report",
                "label": "Accident Report",
                "category": "liability",
                "priority": "HIGH",
                "is_core": True,
                "detect_patterns": ["Accident Book", "incident report"],
            }
        ],
        "expected_evidence": [
            {
                "id": "maintenance-records",
                "label": "Maintenance records",
                "detect_patterns": ["maintenance"],
            }
        ],
        "governance_rules": [
            {
                "rule": "Risk assessments must be recorded for the activity",
                "if_violated": "Foreseeable risk was not managed",
            }
        ],
    }


@pytest.fixture
def s18_case_payload():
    """Raw payload for an s18 wounding case with identification in issue."""
    return {
        "case_id": "R-v-Smith",
        "practice_area": "criminal",
        "as_of": "2024-06-01",
        "offence": {"code": "S18_OAPA", "label": "Wounding with intent"},
        "extracted_text": "Witness says the attacker was only seen for a brief moment in poor lighting.",
        "documents": [
            {
                "id": "d1",
                "name": "Charge sheet",
                "created_at": "2024-01-10",
                "extracted_json": {"summary": "Charged with s18 wounding with intent"},
            },
            {
                "id": "d2",
                "name": "MG11 witness statement - complainant",
                "created_at": "2024-01-12",
                "extracted_json": {
                    "summary": "Complainant describes a single blow in a dark alley",
                    "key_issues": ["Identification made at night"],
                },
            },
        ],
        "timeline": [
            {"event_date": "2024-01-05", "description": "Incident outside the bar"},
            {"event_date": "2024-01-10", "description": "Defendant charged"},
            {"event_date": "2024-05-20", "description": "PTPH listed"},
        ],
        "dependencies": [
            {"id": "cctv_continuity", "status": "outstanding", "label": "CCTV continuity statement"},
            {"id": "bwv_arrest", "status": "outstanding", "label": "BWV of arrest"},
        ],
        "raw_probability": 0.7,
    }
