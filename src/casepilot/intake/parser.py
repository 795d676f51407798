"""
CasePilot Intake Parser

Turns the loosely-typed payload produced by document extraction into a
typed CaseInput. This is the only place raw dictionaries are inspected;
everything downstream works on casepilot.models dataclasses.

Key features:
- Never raises: a payload that is not a mapping yields an empty case
- Each list entry is validated on its own; invalid entries are dropped
  with a warning naming the entry index and the first error
- extracted_json is reduced to summary, key issues, dates and a
  canonical lower-cased search text
"""
from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ..canon import canonical_json
from ..models import (
    AttackPath,
    CanonicalRoute,
    CaseInput,
    DatedFact,
    Dependency,
    DependencyStatus,
    Document,
    ElementDefinition,
    ElementState,
    EvidenceCategory,
    EvidenceItem,
    EvidenceRef,
    EvidenceUrgency,
    ExtractedFacts,
    OffenceDefinition,
    PracticeArea,
    RecordedPosition,
    SupportLevel,
    TimelineEvent,
)
from .schema import (
    AttackPathSchema,
    CaseEnvelopeSchema,
    DependencySchema,
    DocumentSchema,
    ElementStateSchema,
    EvidenceItemSchema,
    EvidenceRefSchema,
    OffenceElementSchema,
    OffenceSchema,
    RecordedPositionSchema,
    TimelineEventSchema,
    coerce_date,
)

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _validate_entries(
    raw: Any,
    schema_cls: type[SchemaT],
    label: str,
    case_id: str,
) -> list[SchemaT]:
    """Validate each entry of a list independently, dropping failures."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning(
            "Ignoring %s: expected a list, got %s",
            label,
            type(raw).__name__,
            extra={"case_id": case_id, "component": "intake"},
        )
        return []

    valid: list[SchemaT] = []
    for index, entry in enumerate(raw):
        try:
            valid.append(schema_cls.model_validate(entry))
        except ValidationError as e:
            first = e.errors()[0] if e.error_count() else {}
            logger.warning(
                "Dropping %s[%d]: %s at %s",
                label,
                index,
                first.get("msg", "invalid"),
                ".".join(str(p) for p in first.get("loc", ())) or "<root>",
                extra={"case_id": case_id, "component": "intake"},
            )
    return valid


def _validate_one(raw: Any, schema_cls: type[SchemaT], label: str, case_id: str) -> Optional[SchemaT]:
    if raw is None:
        return None
    entries = _validate_entries([raw], schema_cls, label, case_id)
    return entries[0] if entries else None


# =============================================================================
# Extracted Facts
# =============================================================================

def _issue_label(issue: Any) -> Optional[str]:
    if isinstance(issue, str):
        return issue.strip() or None
    if isinstance(issue, dict):
        label = issue.get("label") or issue.get("title")
        if isinstance(label, str) and label.strip():
            return label.strip()
    return None


def _dated_fact(entry: Any) -> Optional[DatedFact]:
    if isinstance(entry, dict):
        on = coerce_date(entry.get("date") or entry.get("value"))
        label = entry.get("label") or entry.get("description") or ""
        return DatedFact(on=on, label=str(label)) if on else None
    on = coerce_date(entry)
    return DatedFact(on=on) if on else None


def parse_extracted_facts(raw: Optional[dict[str, Any]]) -> ExtractedFacts:
    """Reduce an extraction payload to the fields the engine reads."""
    if not raw:
        return ExtractedFacts()

    summary = raw.get("summary")
    issues = raw.get("key_issues") or raw.get("keyIssues") or []
    dates = raw.get("dates") or []
    parties = raw.get("parties") or []

    if not isinstance(issues, list):
        issues = []
    if not isinstance(dates, list):
        dates = []
    if not isinstance(parties, list):
        parties = []

    try:
        search_text = canonical_json(raw).lower()
    except (TypeError, ValueError):
        search_text = str(raw).lower()

    party_names = []
    for party in parties:
        name = party.get("name") if isinstance(party, dict) else party
        if isinstance(name, str) and name.strip():
            party_names.append(name.strip())

    return ExtractedFacts(
        summary=summary.strip() if isinstance(summary, str) and summary.strip() else None,
        key_issues=[label for label in map(_issue_label, issues) if label],
        dates=[fact for fact in map(_dated_fact, dates) if fact],
        parties=party_names,
        search_text=search_text,
    )


# =============================================================================
# Converters
# =============================================================================

def _convert_document(schema: DocumentSchema) -> Document:
    return Document(
        id=schema.id,
        name=schema.name,
        type=schema.type,
        created_at=schema.created_at,
        extracted=parse_extracted_facts(schema.extracted_json),
    )


def _convert_gap(raw: Any) -> Optional[EvidenceRef]:
    if isinstance(raw, str) and raw.strip():
        return EvidenceRef(evidence_id=raw.strip(), label=raw.strip())
    if isinstance(raw, dict):
        try:
            ref = EvidenceRefSchema.model_validate(raw)
        except ValidationError:
            return None
        return EvidenceRef(evidence_id=ref.evidence_id, label=ref.label, note=ref.note)
    return None


def _convert_element(schema: ElementStateSchema) -> ElementState:
    return ElementState(
        id=schema.id,
        label=schema.label or schema.id.replace("_", " ").title(),
        support=SupportLevel(schema.support),
        gaps=[gap for gap in map(_convert_gap, schema.gaps) if gap],
    )


def _convert_offence(schema: OffenceSchema, case_id: str) -> OffenceDefinition:
    elements = _validate_entries(schema.elements, OffenceElementSchema, "offence.elements", case_id)
    return OffenceDefinition(
        code=schema.code,
        label=schema.label or schema.code,
        elements=[ElementDefinition(id=e.id, label=e.label or e.id) for e in elements],
    )


def _convert_attack_path(schema: AttackPathSchema) -> AttackPath:
    return AttackPath(
        id=schema.id,
        target=schema.target,
        method=schema.method,
        route=CanonicalRoute(schema.route) if schema.route else None,
        evidence_inputs=list(schema.evidence_inputs),
        expected_effect=schema.expected_effect,
        kill_switch=schema.kill_switch,
        is_hypothesis=schema.is_hypothesis,
    )


# =============================================================================
# Entry Point
# =============================================================================

def parse_case_input(data: Any) -> CaseInput:
    """
    Parse an extraction payload into a CaseInput.

    Args:
        data: Mapping with case_id, practice_area, documents, timeline,
            elements, dependencies, offence, recorded_position,
            extracted_text, missing_evidence, attack_paths, landlord_type,
            as_of and raw_probability. Every key is optional.

    Returns:
        A CaseInput; never raises.
    """
    if not isinstance(data, dict):
        logger.warning(
            "Case payload is %s, not a mapping; planning an empty case",
            type(data).__name__,
            extra={"component": "intake"},
        )
        return CaseInput(case_id="unknown")

    try:
        envelope = CaseEnvelopeSchema.model_validate(data)
    except ValidationError as e:
        logger.warning(
            "Case envelope invalid (%d errors); using defaults",
            e.error_count(),
            extra={"component": "intake"},
        )
        envelope = CaseEnvelopeSchema()

    case_id = envelope.case_id

    documents = _validate_entries(data.get("documents"), DocumentSchema, "documents", case_id)
    timeline = _validate_entries(data.get("timeline"), TimelineEventSchema, "timeline", case_id)
    elements = _validate_entries(data.get("elements"), ElementStateSchema, "elements", case_id)
    dependencies = _validate_entries(data.get("dependencies"), DependencySchema, "dependencies", case_id)
    missing = _validate_entries(data.get("missing_evidence"), EvidenceItemSchema, "missing_evidence", case_id)
    paths = _validate_entries(data.get("attack_paths"), AttackPathSchema, "attack_paths", case_id)
    offence = _validate_one(data.get("offence"), OffenceSchema, "offence", case_id)
    position = _validate_one(data.get("recorded_position"), RecordedPositionSchema, "recorded_position", case_id)

    return CaseInput(
        case_id=case_id,
        practice_area=PracticeArea(envelope.practice_area),
        documents=[_convert_document(d) for d in documents],
        timeline=[
            TimelineEvent(
                event_date=t.event_date,
                description=t.description,
                source_document_id=t.source_document_id,
            )
            for t in timeline
        ],
        elements=[_convert_element(e) for e in elements],
        dependencies=[
            Dependency(id=d.id, status=DependencyStatus(d.status), label=d.label)
            for d in dependencies
        ],
        offence=_convert_offence(offence, case_id) if offence else None,
        recorded_position=RecordedPosition(
            position_type=position.position_type,
            primary_strategy=position.primary_strategy,
            recorded_by=position.recorded_by,
            recorded_on=position.recorded_on,
        ) if position else None,
        extracted_text=envelope.extracted_text,
        missing_evidence=[
            EvidenceItem(
                id=m.id,
                name=m.name,
                category=EvidenceCategory(m.category),
                urgency=EvidenceUrgency(m.urgency),
            )
            for m in missing
        ],
        attack_paths=[_convert_attack_path(p) for p in paths],
        landlord_type=envelope.landlord_type,
        as_of=envelope.as_of,
        raw_probability=envelope.raw_probability,
    )
