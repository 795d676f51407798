"""
CasePilot Practice Pack Loader

Loads and validates practice packs from YAML or JSON files.

Converts Pydantic schema models to CasePilot domain models.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from .. import config
from ..exceptions import PackLoadError, PackNotFoundError, PackValidationError, PackVersionMismatch
from ..models import (
    ChecklistItem,
    CriticalDisclosureItem,
    EvidencePriority,
    ExpectedEvidence,
    GovernanceRule,
    PracticeArea,
    PracticePack,
)
from .schema import (
    SCHEMA_VERSION,
    ChecklistItemSchema,
    CriticalDisclosureItemSchema,
    ExpectedEvidenceSchema,
    GovernanceRuleSchema,
    PracticePackSchema,
    check_schema_version,
    validate_practice_pack,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_checklist_item(schema: ChecklistItemSchema) -> ChecklistItem:
    """Convert ChecklistItemSchema to ChecklistItem model."""
    return ChecklistItem(
        id=schema.id,
        label=schema.label,
        category=schema.category,
        priority=EvidencePriority(schema.priority),
        detect_patterns=list(schema.detect_patterns),
        is_core=schema.is_core,
        critical=schema.critical,
        description=schema.description,
    )


def _convert_expected_evidence(schema: ExpectedEvidenceSchema) -> ExpectedEvidence:
    """Convert ExpectedEvidenceSchema to ExpectedEvidence model."""
    return ExpectedEvidence(
        id=schema.id,
        label=schema.label,
        detect_patterns=list(schema.detect_patterns),
        priority=EvidencePriority(schema.priority),
        when_expected=schema.when_expected,
        if_missing_means=schema.if_missing_means,
        probe_question=schema.probe_question,
    )


def _convert_governance_rule(schema: GovernanceRuleSchema) -> GovernanceRule:
    return GovernanceRule(rule=schema.rule, if_violated=schema.if_violated)


def _convert_critical_item(schema: CriticalDisclosureItemSchema) -> CriticalDisclosureItem:
    return CriticalDisclosureItem(id=schema.id, labels=list(schema.labels))


def _convert_practice_pack(schema: PracticePackSchema) -> PracticePack:
    """Convert a validated PracticePackSchema to a PracticePack."""
    return PracticePack(
        practice_area=PracticeArea(schema.practice_area),
        name=schema.name,
        version=schema.version,
        checklist=[_convert_checklist_item(c) for c in schema.checklist],
        expected_evidence=[_convert_expected_evidence(e) for e in schema.expected_evidence],
        governance_rules=[_convert_governance_rule(g) for g in schema.governance_rules],
        critical_disclosure_items=[_convert_critical_item(c) for c in schema.critical_disclosure_items],
    )


def empty_pack(practice_area: PracticeArea = PracticeArea.OTHER) -> PracticePack:
    """A pack with no requirements, for areas without bundled content."""
    return PracticePack(practice_area=practice_area, name="Empty pack", version="0.0.0")


# =============================================================================
# Practice Pack Loader
# =============================================================================

class PackLoader:
    """
    Loads practice packs from YAML or JSON files.

    Usage:
        loader = PackLoader()
        pack = loader.load("path/to/criminal.yaml")
        pack = loader.load_builtin(PracticeArea.HOUSING_DISREPAIR)
    """

    def __init__(self, packs_dir: Optional[Union[str, Path]] = None, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            packs_dir: Directory searched by load_builtin; defaults to
                CASEPILOT_PACKS_DIR
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.packs_dir = Path(packs_dir) if packs_dir else config.CASEPILOT_PACKS_DIR
        self.strict_version = strict_version

        self._packs: dict[PracticeArea, PracticePack] = {}

    def load(self, path: Union[str, Path]) -> PracticePack:
        """
        Load a practice pack from a file.

        Raises:
            PackLoadError: If file cannot be read
            PackValidationError: If validation fails
            PackVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise PackLoadError(
                message=f"Failed to load practice pack: {e}",
                details={"path": str(path), "error": str(e)},
            )

        pack = self.load_dict(data, source=str(path))
        self._packs[pack.practice_area] = pack
        return pack

    def load_dict(self, data: Any, source: str = "<dict>") -> PracticePack:
        """Validate and convert an already-parsed pack document."""
        if not isinstance(data, dict):
            raise PackLoadError(
                message="Practice pack must be a mapping at the top level",
                details={"path": source, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise PackVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            schema = validate_practice_pack(data)
        except ValidationError as e:
            raise PackValidationError(
                message=f"Practice pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": source},
            )

        pack = _convert_practice_pack(schema)
        logger.debug(
            "Loaded pack %s v%s (%d checklist, %d expected, %d governance)",
            pack.practice_area.value,
            pack.version,
            len(pack.checklist),
            len(pack.expected_evidence),
            len(pack.governance_rules),
        )
        return pack

    def load_builtin(self, practice_area: Union[PracticeArea, str]) -> PracticePack:
        """
        Load the pack for a practice area from packs_dir, using the cache.

        Raises:
            PackNotFoundError: If no pack file exists for the area
        """
        area = PracticeArea(practice_area)
        cached = self._packs.get(area)
        if cached is not None:
            return cached

        for suffix in (".yaml", ".yml", ".json"):
            candidate = self.packs_dir / f"{area.value}{suffix}"
            if candidate.exists():
                return self.load(candidate)

        raise PackNotFoundError(
            message=f"No practice pack for '{area.value}'",
            details={"packs_dir": str(self.packs_dir)},
        )

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)

    def get_pack(self, practice_area: PracticeArea) -> Optional[PracticePack]:
        """Get a cached pack by practice area."""
        return self._packs.get(practice_area)

    def list_packs(self) -> list[str]:
        """List practice areas of all loaded packs."""
        return [area.value for area in self._packs]


# =============================================================================
# Convenience Functions
# =============================================================================

def load_practice_pack(path: Union[str, Path]) -> PracticePack:
    """
    Load a practice pack from a file.

    Convenience function that creates a temporary loader.
    """
    return PackLoader().load(path)


def load_practice_pack_from_string(content: str, format: str = "yaml") -> PracticePack:
    """
    Load a practice pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise PackLoadError(
            message=f"Failed to parse practice pack: {e}",
            details={"format": format, "error": str(e)},
        )
    return PackLoader().load_dict(data, source=f"<{format} string>")


def load_builtin_pack(practice_area: Union[PracticeArea, str]) -> PracticePack:
    """Load the bundled pack for a practice area."""
    return PackLoader().load_builtin(practice_area)


def list_builtin_packs(packs_dir: Optional[Union[str, Path]] = None) -> list[str]:
    """Practice areas with a pack file in packs_dir, sorted."""
    directory = Path(packs_dir) if packs_dir else config.CASEPILOT_PACKS_DIR
    if not directory.is_dir():
        return []
    areas = {p.stem for p in directory.iterdir() if p.suffix.lower() in {".yaml", ".yml", ".json"}}
    return sorted(areas)
