"""
CasePilot Practice Packs

Schema validation and loading for practice packs.

Practice packs are YAML or JSON files that define, for one area of
practice, the bundle evidence checklist, the records the opponent should
hold, and the governance duties they should be able to evidence.

Usage:
    from casepilot.packs import load_builtin_pack, PackLoader

    # Load a bundled pack
    pack = load_builtin_pack("criminal")

    # Use a loader for multiple packs (caches by practice area)
    loader = PackLoader()
    criminal = loader.load_builtin("criminal")
    housing = loader.load("path/to/housing_disrepair.yaml")
"""
from __future__ import annotations

from .loader import (
    PackLoader,
    empty_pack,
    list_builtin_packs,
    load_builtin_pack,
    load_practice_pack,
    load_practice_pack_from_string,
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

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "PackLoader",
    "empty_pack",
    "list_builtin_packs",
    "load_builtin_pack",
    "load_practice_pack",
    "load_practice_pack_from_string",
    # Validation
    "check_schema_version",
    "validate_practice_pack",
    # Schemas
    "ChecklistItemSchema",
    "CriticalDisclosureItemSchema",
    "ExpectedEvidenceSchema",
    "GovernanceRuleSchema",
    "PracticePackSchema",
]
