"""
CasePilot Case Input Models

Typed, invariant-checked representation of the facts supplied by the
extraction layer. Everything downstream of casepilot.intake operates on
these dataclasses rather than on raw dictionaries.

Key components:
- Document / ExtractedFacts: a bundle document and what was extracted from it
- TimelineEvent: a dated event from the case chronology
- ElementState / Dependency: legal element support and awaited disclosure
- OffenceDefinition: the charge and its constituent elements
- RecordedPosition: an explicit, human-recorded case posture
- CaseInput: the complete input to the planner
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .enums import DependencyStatus, PracticeArea, SupportLevel
from .evidence import AttackPath, EvidenceItem


# =============================================================================
# Documents
# =============================================================================

@dataclass
class DatedFact:
    """A date the extraction layer found inside a document."""
    on: date
    label: str = ""


@dataclass
class ExtractedFacts:
    """
    Structured facts extracted from a single document.

    Attributes:
        summary: One-paragraph summary produced by extraction
        key_issues: Issue labels raised in the document
        dates: Dated facts mentioned in the document
        parties: Named parties
        search_text: Lower-cased serialization of the full extracted
            payload, used for pattern matching
    """
    summary: Optional[str] = None
    key_issues: list[str] = field(default_factory=list)
    dates: list[DatedFact] = field(default_factory=list)
    parties: list[str] = field(default_factory=list)
    search_text: str = ""

    def claims(self) -> list[str]:
        """Claim texts in extraction order: key issues, then summary."""
        result = [issue for issue in self.key_issues if issue]
        if self.summary:
            result.append(self.summary)
        return result


@dataclass
class Document:
    """A document in the case bundle."""
    id: str
    name: str
    type: Optional[str] = None
    created_at: Optional[date] = None
    extracted: ExtractedFacts = field(default_factory=ExtractedFacts)

    @property
    def search_text(self) -> str:
        """Lower-cased name, type and extracted content."""
        parts = [self.name.lower()]
        if self.type:
            parts.append(self.type.lower())
        if self.extracted.search_text:
            parts.append(self.extracted.search_text)
        return " ".join(parts)


@dataclass
class TimelineEvent:
    """A dated event in the case chronology."""
    event_date: date
    description: str
    source_document_id: Optional[str] = None


# =============================================================================
# Elements and Dependencies
# =============================================================================

@dataclass
class EvidenceRef:
    """Reference from an element to a piece of evidence or a gap."""
    evidence_id: str
    label: str = ""
    note: Optional[str] = None


@dataclass
class ElementState:
    """
    Support level for one legal element of the offence or claim.

    Produced upstream (or by engine.element_state for elements the caller
    did not supply). Treated as immutable by the route evaluator.
    """
    id: str
    label: str
    support: SupportLevel = SupportLevel.NONE
    gaps: list[EvidenceRef] = field(default_factory=list)


@dataclass
class Dependency:
    """An awaited disclosure or evidence item."""
    id: str
    status: DependencyStatus = DependencyStatus.UNKNOWN
    label: Optional[str] = None

    @property
    def is_outstanding(self) -> bool:
        return self.status == DependencyStatus.OUTSTANDING


@dataclass
class ElementDefinition:
    """A legally required element of an offence."""
    id: str
    label: str


@dataclass
class OffenceDefinition:
    """A charge and the elements the prosecution must prove."""
    code: str
    label: str
    elements: list[ElementDefinition] = field(default_factory=list)


@dataclass
class RecordedPosition:
    """
    An explicit case posture recorded by the litigator.

    This is the only source from which a guilty or early-resolution
    posture may be taken. It is never inferred from evidence.
    """
    position_type: Optional[str] = None
    primary_strategy: Optional[str] = None
    recorded_by: Optional[str] = None
    recorded_on: Optional[date] = None

    @property
    def indicates_early_resolution(self) -> bool:
        position = (self.position_type or "").strip().lower()
        strategy = (self.primary_strategy or "").strip().lower()
        return position == "guilty" or strategy == "outcome_management"


# =============================================================================
# Case Input
# =============================================================================

@dataclass
class CaseInput:
    """
    Everything the planner needs for one case.

    Attributes:
        case_id: Caller's case identifier
        practice_area: Which evidence pack applies
        documents: Bundle documents with extracted facts
        timeline: Case chronology
        elements: Element states supplied upstream
        dependencies: Awaited disclosure items
        offence: Charge details (criminal cases)
        recorded_position: Explicit litigator posture, if any
        extracted_text: Free text for keyword scanning (statements, summaries)
        missing_evidence: Outstanding items; derived from the evidence map
            when empty
        attack_paths: Declared attack paths; derived from routes when empty
        landlord_type: Landlord classification (housing cases)
        as_of: Reference date for recency checks; defaults to the latest
            known date in the input
        raw_probability: Externally supplied outcome probability, if any
    """
    case_id: str
    practice_area: PracticeArea = PracticeArea.OTHER
    documents: list[Document] = field(default_factory=list)
    timeline: list[TimelineEvent] = field(default_factory=list)
    elements: list[ElementState] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)
    offence: Optional[OffenceDefinition] = None
    recorded_position: Optional[RecordedPosition] = None
    extracted_text: str = ""
    missing_evidence: list[EvidenceItem] = field(default_factory=list)
    attack_paths: list[AttackPath] = field(default_factory=list)
    landlord_type: Optional[str] = None
    as_of: Optional[date] = None
    raw_probability: Optional[float] = None

    def all_text(self) -> str:
        """Lower-cased free text plus every document's searchable text."""
        parts = [self.extracted_text.lower()] if self.extracted_text else []
        parts.extend(doc.search_text for doc in self.documents)
        parts.extend(event.description.lower() for event in self.timeline)
        return "\n".join(parts)

    def known_dates(self) -> list[date]:
        """Every date present in the input, unsorted."""
        dates = [event.event_date for event in self.timeline]
        for doc in self.documents:
            if doc.created_at:
                dates.append(doc.created_at)
            dates.extend(d.on for d in doc.extracted.dates)
        return dates

    def reference_date(self) -> Optional[date]:
        """The as_of date, or the latest date found in the input."""
        if self.as_of:
            return self.as_of
        dates = self.known_dates()
        return max(dates) if dates else None
