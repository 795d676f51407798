"""
CasePilot Intake Schemas

Pydantic models for the case facts handed over by the extraction layer.

Intake is lenient: unknown keys are ignored, unrecognised enum values fall
back to a safe default, and entries that still fail validation are dropped
one at a time by casepilot.intake.parser rather than failing the case.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

SupportValue = Literal["none", "weak", "some", "strong"]
DependencyStatusValue = Literal["outstanding", "served", "unknown"]
EvidenceCategoryValue = Literal["visual", "document", "procedural", "medical", "other"]
EvidenceUrgencyValue = Literal["before_ptph", "before_trial", "anytime"]
PracticeAreaValue = Literal[
    "criminal", "housing_disrepair", "clinical_negligence", "personal_injury", "other"
]

ROUTE_IDS = (
    "procedural_disclosure_leverage",
    "identification_challenge",
    "act_denial",
    "intent_denial",
    "weapon_uncertainty_causation",
    "self_defence",
    "alternative_mental_state_offence",
    "mitigation_early_resolution",
)


def coerce_date(value: Any) -> Any:
    """
    Accept dates, datetimes and ISO strings (date part only).

    Unparseable strings become None so an optional date never sinks the
    record that carries it.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date) or value is None:
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _fallback(value: Any, allowed: tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default


# =============================================================================
# Documents and Timeline
# =============================================================================

class DocumentSchema(BaseModel):
    """A bundle document as supplied by extraction."""
    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    created_at: Optional[date] = None
    extracted_json: Optional[dict[str, Any]] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v: Any) -> Any:
        return coerce_date(v)

    @field_validator("extracted_json", mode="before")
    @classmethod
    def drop_non_mapping(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None


class TimelineEventSchema(BaseModel):
    """A dated chronology entry. Entries without a usable date are invalid."""
    model_config = {"extra": "ignore"}

    event_date: date
    description: str = ""
    source_document_id: Optional[str] = None

    @field_validator("event_date", mode="before")
    @classmethod
    def parse_event_date(cls, v: Any) -> Any:
        return coerce_date(v)


# =============================================================================
# Elements, Dependencies, Position
# =============================================================================

class EvidenceRefSchema(BaseModel):
    model_config = {"extra": "ignore"}

    evidence_id: str = Field(..., min_length=1)
    label: str = ""
    note: Optional[str] = None


class ElementStateSchema(BaseModel):
    """Upstream element support. Unrecognised support levels are invalid."""
    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1)
    label: Optional[str] = None
    support: SupportValue
    gaps: list[Any] = Field(default_factory=list)

    @field_validator("support", mode="before")
    @classmethod
    def lower_support(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class DependencySchema(BaseModel):
    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1)
    label: Optional[str] = None
    status: DependencyStatusValue = "unknown"

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> str:
        return _fallback(v, ("outstanding", "served", "unknown"), "unknown")


class OffenceElementSchema(BaseModel):
    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1)
    label: Optional[str] = None


class OffenceSchema(BaseModel):
    model_config = {"extra": "ignore"}

    code: str = Field(..., min_length=1)
    label: Optional[str] = None
    elements: list[Any] = Field(default_factory=list)

    @field_validator("code", mode="before")
    @classmethod
    def lower_code(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class RecordedPositionSchema(BaseModel):
    model_config = {"extra": "ignore"}

    position_type: Optional[str] = None
    primary_strategy: Optional[str] = None
    recorded_by: Optional[str] = None
    recorded_on: Optional[date] = None

    @field_validator("recorded_on", mode="before")
    @classmethod
    def parse_recorded_on(cls, v: Any) -> Any:
        return coerce_date(v)


# =============================================================================
# Evidence Items and Attack Paths
# =============================================================================

class EvidenceItemSchema(BaseModel):
    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: EvidenceCategoryValue = "other"
    urgency: EvidenceUrgencyValue = "anytime"

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> str:
        return _fallback(v, ("visual", "document", "procedural", "medical", "other"), "other")

    @field_validator("urgency", mode="before")
    @classmethod
    def default_urgency(cls, v: Any) -> str:
        return _fallback(v, ("before_ptph", "before_trial", "anytime"), "anytime")


class AttackPathSchema(BaseModel):
    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1)
    target: str = ""
    method: str = ""
    route: Optional[str] = None
    evidence_inputs: list[str] = Field(default_factory=list)
    expected_effect: str = ""
    kill_switch: Optional[str] = None
    is_hypothesis: bool = True

    @field_validator("route", mode="before")
    @classmethod
    def known_route(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip().lower() in ROUTE_IDS:
            return v.strip().lower()
        return None

    @field_validator("evidence_inputs", mode="before")
    @classmethod
    def strings_only(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, str)]


# =============================================================================
# Case Envelope
# =============================================================================

class CaseEnvelopeSchema(BaseModel):
    """
    Scalar fields of a case. Collections are validated entry by entry by
    the parser so one bad entry never discards its siblings.
    """
    model_config = {"extra": "ignore"}

    case_id: str = "unknown"
    practice_area: PracticeAreaValue = "other"
    extracted_text: str = ""
    landlord_type: Optional[str] = None
    as_of: Optional[date] = None
    raw_probability: Optional[float] = Field(None, ge=0.0, le=1.0)

    @field_validator("case_id", mode="before")
    @classmethod
    def stringify_case_id(cls, v: Any) -> str:
        if isinstance(v, (str, int)) and str(v).strip():
            return str(v).strip()
        return "unknown"

    @field_validator("practice_area", mode="before")
    @classmethod
    def default_area(cls, v: Any) -> str:
        return _fallback(
            v,
            ("criminal", "housing_disrepair", "clinical_negligence", "personal_injury", "other"),
            "other",
        )

    @field_validator("extracted_text", mode="before")
    @classmethod
    def text_only(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("landlord_type", mode="before")
    @classmethod
    def landlord_text(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("as_of", mode="before")
    @classmethod
    def parse_as_of(cls, v: Any) -> Any:
        return coerce_date(v)

    @field_validator("raw_probability", mode="before")
    @classmethod
    def probability_in_range(cls, v: Any) -> Optional[float]:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        return float(v) if 0.0 <= v <= 1.0 else None
