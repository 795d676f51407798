"""
CasePilot Practice Pack Schemas

Pydantic models for validating practice pack YAML/JSON files.

A practice pack declares, for one area of practice, the evidence a
well-run matter should contain: the bundle checklist, the records the
opponent should be able to produce, and the governance duties they
should be able to evidence. The schemas map to casepilot.models.evidence.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check major-version compatibility
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

PracticeAreaValue = Literal[
    "criminal", "housing_disrepair", "clinical_negligence", "personal_injury", "other"
]

PriorityValue = Literal["CRITICAL", "HIGH", "MEDIUM", "LOW"]


def _normalize_patterns(patterns: list[str]) -> list[str]:
    cleaned = [p.strip().lower() for p in patterns]
    if any(not p for p in cleaned):
        raise ValueError("detect_patterns must not contain empty strings")
    return cleaned


# =============================================================================
# Requirement Schemas
# =============================================================================

class ChecklistItemSchema(BaseModel):
    """Schema for a bundle checklist requirement."""
    model_config = {"extra": "forbid"}

    id: str = Field(..., min_length=1, description="Stable requirement identifier")
    label: str = Field(..., description="Human-readable label")
    category: str = Field(..., description="Coverage grouping (e.g., 'disclosure')")
    description: Optional[str] = Field(None, description="What the requirement covers")
    priority: PriorityValue = Field("MEDIUM", description="Declared importance")
    detect_patterns: list[str] = Field(..., min_length=1, description="Substrings matched against document name/type")
    is_core: bool = Field(False, description="Core items weigh double in completeness")
    critical: bool = Field(False, description="Counted by the probability gate when missing")

    @field_validator("detect_patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        return _normalize_patterns(v)


class ExpectedEvidenceSchema(BaseModel):
    """Schema for a record the opponent should hold."""
    model_config = {"extra": "forbid"}

    id: str = Field(..., min_length=1, description="Stable identifier")
    label: str = Field(..., description="Human-readable label")
    priority: PriorityValue = Field("MEDIUM", description="Leverage if absent")
    when_expected: Optional[str] = Field(None, description="When the record should come into existence")
    if_missing_means: Optional[str] = Field(None, description="What absence suggests")
    probe_question: Optional[str] = Field(None, description="Targeted request wording")
    detect_patterns: list[str] = Field(..., min_length=1, description="Substrings matched against document content")

    @field_validator("detect_patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        return _normalize_patterns(v)


class GovernanceRuleSchema(BaseModel):
    """Schema for a governance duty."""
    model_config = {"extra": "forbid"}

    rule: str = Field(..., min_length=20, description="The duty, stated in plain language")
    if_violated: str = Field(..., description="What a breach suggests")


class CriticalDisclosureItemSchema(BaseModel):
    """Schema for a disclosure item that gates procedural safety."""
    model_config = {"extra": "forbid"}

    id: str = Field(..., min_length=1, description="Short identifier (e.g., 'cctv')")
    labels: list[str] = Field(..., min_length=1, description="Names the item goes by")

    @field_validator("labels")
    @classmethod
    def validate_labels(cls, v: list[str]) -> list[str]:
        return _normalize_patterns(v)


# =============================================================================
# Pack Schema
# =============================================================================

class PracticePackSchema(BaseModel):
    """
    Schema for a complete practice pack.

    Reference integrity (unique ids within each list) is enforced here so
    a pack that loads is always internally consistent.
    """
    model_config = {"extra": "forbid"}

    schema_version: str = Field(SCHEMA_VERSION, description="Pack schema version")
    practice_area: PracticeAreaValue = Field(..., description="Area of practice")
    name: str = Field(..., description="Pack display name")
    version: str = Field(..., description="Pack content version")
    checklist: list[ChecklistItemSchema] = Field(default_factory=list)
    expected_evidence: list[ExpectedEvidenceSchema] = Field(default_factory=list)
    governance_rules: list[GovernanceRuleSchema] = Field(default_factory=list)
    critical_disclosure_items: list[CriticalDisclosureItemSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "PracticePackSchema":
        """Reject duplicate ids within each requirement list."""
        for list_name in ("checklist", "expected_evidence", "critical_disclosure_items"):
            seen: set[str] = set()
            for entry in getattr(self, list_name):
                if entry.id in seen:
                    raise ValueError(f"Duplicate id '{entry.id}' in {list_name}")
                seen.add(entry.id)
        return self


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_practice_pack(data: dict[str, Any]) -> PracticePackSchema:
    """
    Validate a practice pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return PracticePackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """
    Check if a practice pack's schema version is compatible.

    Only the major version has to match.
    """
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    pack_major = pack_version.split(".")[0]
    current_major = SCHEMA_VERSION.split(".")[0]
    return pack_major == current_major
