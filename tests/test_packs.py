"""
Tests for practice pack schemas and loading.

Tests cover:
- Bundled packs load and declare the matching practice area
- Schema validation (required fields, duplicate ids, rule length)
- Major schema version compatibility
- File loading from YAML and JSON, and load errors
"""
import json

import pytest
import yaml

from casepilot.exceptions import (
    PackLoadError,
    PackNotFoundError,
    PackValidationError,
    PackVersionMismatch,
)
from casepilot.models import EvidencePriority, PracticeArea
from casepilot.packs import (
    PackLoader,
    check_schema_version,
    empty_pack,
    list_builtin_packs,
    load_builtin_pack,
    load_practice_pack_from_string,
)


BUILTIN_AREAS = ["clinical_negligence", "criminal", "housing_disrepair", "personal_injury"]


class TestBuiltinPacks:
    """Tests for the bundled packs."""

    @pytest.mark.parametrize("area", BUILTIN_AREAS)
    def test_builtin_pack_loads(self, area):
        pack = load_builtin_pack(area)

        assert pack.practice_area == PracticeArea(area)
        assert pack.checklist
        assert pack.expected_evidence

    def test_list_builtin_packs(self):
        assert list_builtin_packs() == BUILTIN_AREAS

    def test_list_missing_directory(self, tmp_path):
        assert list_builtin_packs(tmp_path / "nowhere") == []

    def test_criminal_pack_contents(self, criminal_pack):
        critical = [c.id for c in criminal_pack.checklist if c.critical]

        assert critical == ["charge_sheet", "mg6_schedules", "custody_record", "cctv_footage"]
        assert len(criminal_pack.governance_rules) == 2
        assert [c.id for c in criminal_pack.critical_disclosure_items] == ["cctv", "bwv", "999", "cad", "interview"]

    def test_unknown_area_not_found(self):
        with pytest.raises(PackNotFoundError):
            PackLoader().load_builtin("other")

    def test_loader_caches_by_area(self):
        loader = PackLoader()
        first = loader.load_builtin(PracticeArea.CRIMINAL)

        assert loader.load_builtin("criminal") is first
        assert loader.get_pack(PracticeArea.CRIMINAL) is first
        assert loader.list_packs() == ["criminal"]

    def test_empty_pack(self):
        pack = empty_pack(PracticeArea.PERSONAL_INJURY)

        assert pack.practice_area == PracticeArea.PERSONAL_INJURY
        assert pack.checklist == []
        assert pack.critical_disclosure_items == []


class TestPackValidation:
    """Tests for schema validation through PackLoader.load_dict."""

    def test_minimal_pack(self, minimal_pack_dict):
        pack = PackLoader().load_dict(minimal_pack_dict)

        assert pack.practice_area == PracticeArea.PERSONAL_INJURY
        item = pack.checklist[0]
        assert item.detect_patterns == ["accident book", "incident report"]
        assert item.priority == EvidencePriority.HIGH
        assert item.is_core is True
        assert item.critical is False
        assert pack.expected_evidence[0].priority == EvidencePriority.MEDIUM

    def test_missing_name(self, minimal_pack_dict):
        del minimal_pack_dict["name"]

        with pytest.raises(PackValidationError) as exc_info:
            PackLoader().load_dict(minimal_pack_dict)

        locations = [tuple(e["loc"]) for e in exc_info.value.details["errors"]]
        assert ("name",) in locations

    def test_duplicate_ids_rejected(self, minimal_pack_dict):
        minimal_pack_dict["checklist"].append(dict(minimal_pack_dict["checklist"][0]))

        with pytest.raises(PackValidationError):
            PackLoader().load_dict(minimal_pack_dict)

    def test_short_governance_rule_rejected(self, minimal_pack_dict):
        minimal_pack_dict["governance_rules"][0]["rule"] = "Keep records"

        with pytest.raises(PackValidationError):
            PackLoader().load_dict(minimal_pack_dict)

    def test_empty_pattern_rejected(self, minimal_pack_dict):
        minimal_pack_dict["checklist"][0]["detect_patterns"] = ["  "]

        with pytest.raises(PackValidationError):
            PackLoader().load_dict(minimal_pack_dict)

    def test_unknown_key_rejected(self, minimal_pack_dict):
        minimal_pack_dict["owner"] = "someone"

        with pytest.raises(PackValidationError):
            PackLoader().load_dict(minimal_pack_dict)

    def test_major_version_mismatch(self, minimal_pack_dict):
        minimal_pack_dict["schema_version"] = "2.0.0"

        with pytest.raises(PackVersionMismatch):
            PackLoader().load_dict(minimal_pack_dict)

    def test_version_check_can_be_relaxed(self, minimal_pack_dict):
        minimal_pack_dict["schema_version"] = "2.0.0"
        pack = PackLoader(strict_version=False).load_dict(minimal_pack_dict)
        assert pack.name == "Test PI Pack"

    def test_minor_version_compatible(self):
        assert check_schema_version({"schema_version": "1.4.2"}) is True
        assert check_schema_version({}) is True

    def test_non_mapping_rejected(self):
        with pytest.raises(PackLoadError):
            PackLoader().load_dict(["not", "a", "pack"])


class TestPackFiles:
    """Tests for loading packs from disk and strings."""

    def test_load_yaml_file(self, tmp_path, minimal_pack_dict):
        path = tmp_path / "pi.yaml"
        path.write_text(yaml.safe_dump(minimal_pack_dict), encoding="utf-8")

        pack = PackLoader().load(path)
        assert pack.name == "Test PI Pack"

    def test_load_json_file(self, tmp_path, minimal_pack_dict):
        path = tmp_path / "pi.json"
        path.write_text(json.dumps(minimal_pack_dict), encoding="utf-8")

        pack = PackLoader().load(path)
        assert pack.version == "0.1.0"

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("name: [unclosed\n", encoding="utf-8")

        with pytest.raises(PackLoadError):
            PackLoader().load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(PackLoadError) as exc_info:
            PackLoader().load(tmp_path / "absent.yaml")
        assert exc_info.value.code == "CP_PACK_LOAD_ERROR"

    def test_custom_packs_dir(self, tmp_path, minimal_pack_dict):
        (tmp_path / "personal_injury.yaml").write_text(yaml.safe_dump(minimal_pack_dict), encoding="utf-8")

        pack = PackLoader(packs_dir=tmp_path).load_builtin("personal_injury")

        assert pack.name == "Test PI Pack"
        assert list_builtin_packs(tmp_path) == ["personal_injury"]

    def test_load_from_json_string(self, minimal_pack_dict):
        pack = load_practice_pack_from_string(json.dumps(minimal_pack_dict), format="json")
        assert pack.practice_area == PracticeArea.PERSONAL_INJURY

    def test_load_from_bad_string(self):
        with pytest.raises(PackLoadError):
            load_practice_pack_from_string("{not json", format="json")
