"""
Tests for bundle metrics, procedural safety and element states.

Tests cover:
- Evidence map ordering and category coverage
- Weighted completeness and critical-missing counts
- Evidence strength from explicit markers
- Procedural safety states
- Element state synthesis (supplied states always win)
"""
import pytest

from casepilot.engine import (
    BUILTIN_OFFENCES,
    build_element_states,
    build_evidence_map,
    compute_bundle_completeness,
    compute_evidence_strength,
    compute_procedural_safety,
    count_critical_missing,
    resolve_offence,
    strength_level,
)
from casepilot.models import (
    DependencyStatus,
    EvidenceMap,
    OffenceDefinition,
    ProceduralSafetyStatus,
    SupportLevel,
)

from tests.conftest import (
    make_case_input,
    make_checklist_item,
    make_dependency,
    make_document,
    make_element,
    make_evidence_item,
)


@pytest.fixture
def checklist():
    return [
        make_checklist_item("cctv_footage", ["cctv"], category="visual", is_core=True),
        make_checklist_item("custody_record", ["custody"], category="procedure"),
        make_checklist_item("mg6_schedules", ["mg6"], category="disclosure", is_core=True, critical=True),
    ]


# =============================================================================
# Evidence Map and Completeness
# =============================================================================

class TestEvidenceMap:
    """Tests for build_evidence_map and completeness."""

    def test_matches_follow_checklist_order(self, checklist):
        documents = [make_document(id="d1", name="CCTV export"), make_document(id="d2", name="Custody Record")]
        evidence_map = build_evidence_map(documents, checklist)

        assert [m.item.id for m in evidence_map.matches] == ["cctv_footage", "custody_record", "mg6_schedules"]
        assert [m.document_ids for m in evidence_map.matches] == [["d1"], ["d2"], []]
        assert [c.category for c in evidence_map.coverage] == ["visual", "procedure", "disclosure"]
        assert [m.id for m in evidence_map.missing_core] == ["mg6_schedules"]

    def test_document_type_is_matched(self, checklist):
        documents = [make_document(id="d1", name="Exhibit 4", type="MG6C")]
        evidence_map = build_evidence_map(documents, checklist)
        assert evidence_map.is_present("mg6_schedules")

    def test_extracted_content_is_not_matched(self, checklist):
        documents = [make_document(id="d1", name="Letter", summary="Chasing the CCTV")]
        evidence_map = build_evidence_map(documents, checklist)
        assert evidence_map.present_ids == set()

    def test_completeness_weights_core_items(self, checklist):
        documents = [make_document(id="d1", name="CCTV export"), make_document(id="d2", name="Custody Record")]
        evidence_map = build_evidence_map(documents, checklist)

        assert compute_bundle_completeness(evidence_map) == 60
        assert count_critical_missing(evidence_map) == 1

    def test_empty_checklist(self):
        assert compute_bundle_completeness(EvidenceMap()) == 0
        assert count_critical_missing(EvidenceMap()) == 0

    def test_none_inputs(self):
        evidence_map = build_evidence_map(None, None)
        assert evidence_map.matches == []


class TestEvidenceStrength:
    """Tests for compute_evidence_strength and strength_level."""

    def test_empty_text(self):
        assert compute_evidence_strength(make_case_input()) == 0

    def test_weighted_markers(self):
        case = make_case_input(extracted_text="CCTV footage and a fingerprint lift")
        assert compute_evidence_strength(case) == 15

    def test_every_marker_present(self):
        text = (
            "cctv identified facial recognition viper weapon recovered fingerprint dna continuity "
            "complainant eyewitness mg11 hospital consistent with mg6 served"
        )
        assert compute_evidence_strength(make_case_input(extracted_text=text)) == 90

    @pytest.mark.parametrize("score,level", [
        (100, "VERY_STRONG"),
        (80, "VERY_STRONG"),
        (79, "STRONG"),
        (60, "STRONG"),
        (40, "MODERATE"),
        (20, "WEAK"),
        (19, "VERY_WEAK"),
        (0, "VERY_WEAK"),
    ])
    def test_strength_level(self, score, level):
        assert strength_level(score) == level


# =============================================================================
# Procedural Safety
# =============================================================================

class TestProceduralSafety:
    """Tests for compute_procedural_safety."""

    def test_no_critical_items_is_safe(self):
        safety = compute_procedural_safety([], [], [])
        assert safety.status == ProceduralSafetyStatus.SAFE

    def test_unknown_disclosure_state(self, criminal_pack):
        safety = compute_procedural_safety([], [], criminal_pack.critical_disclosure_items)

        assert safety.status == ProceduralSafetyStatus.CONDITIONALLY_UNSAFE
        assert safety.outstanding_items == []

    def test_one_outstanding(self, criminal_pack):
        missing = [make_evidence_item("cctv", "CCTV footage")]
        safety = compute_procedural_safety(missing, [], criminal_pack.critical_disclosure_items)

        assert safety.status == ProceduralSafetyStatus.CONDITIONALLY_UNSAFE
        assert safety.outstanding_items == ["CCTV"]

    def test_two_outstanding(self, criminal_pack):
        dependencies = [
            make_dependency("cctv_continuity", label="CCTV continuity statement"),
            make_dependency("bwv_arrest", label="BWV of arrest"),
        ]
        safety = compute_procedural_safety([], dependencies, criminal_pack.critical_disclosure_items)

        assert safety.status == ProceduralSafetyStatus.UNSAFE_TO_PROCEED
        assert safety.outstanding_items == ["CCTV", "BWV"]

    def test_served_dependencies_are_safe(self, criminal_pack):
        dependencies = [make_dependency("cctv", status=DependencyStatus.SERVED)]
        safety = compute_procedural_safety([], dependencies, criminal_pack.critical_disclosure_items)
        assert safety.status == ProceduralSafetyStatus.SAFE


# =============================================================================
# Element States
# =============================================================================

class TestElementStates:
    """Tests for resolve_offence and build_element_states."""

    def test_resolve_builtin_offence(self):
        offence = resolve_offence(OffenceDefinition(code="s18_oapa", label=""))

        assert [e.id for e in offence.elements] == [e.id for e in BUILTIN_OFFENCES["s18_oapa"].elements]
        assert offence.label == BUILTIN_OFFENCES["s18_oapa"].label

    def test_resolve_unknown_offence(self):
        offence = OffenceDefinition(code="s39_cja", label="Common assault")

        assert resolve_offence(offence) is offence
        assert resolve_offence(None) is None

    def test_no_offence_returns_supplied(self):
        supplied = [make_element("identification", SupportLevel.SOME)]
        assert build_element_states(make_case_input(elements=supplied), []) == supplied

    def test_supplied_states_win(self):
        case = make_case_input(
            elements=[make_element("identification", SupportLevel.STRONG)],
            offence=OffenceDefinition(code="s18_oapa", label=""),
            extracted_text="Seen in poor lighting",
        )
        states = build_element_states(case, [])

        assert [s.id for s in states] == [
            "identification", "actus_reus", "injury_threshold", "specific_intent", "causation",
        ]
        assert states[0].support == SupportLevel.STRONG

    def test_poor_lighting_weakens_identification(self):
        case = make_case_input(
            offence=OffenceDefinition(code="s18_oapa", label=""),
            extracted_text="Seen in poor lighting",
        )
        states = {s.id: s for s in build_element_states(case, [])}

        assert states["identification"].support == SupportLevel.WEAK
        assert states["specific_intent"].support == SupportLevel.WEAK
        assert states["actus_reus"].support == SupportLevel.NONE

    def test_present_document_with_weak_text(self):
        case = make_case_input(
            offence=OffenceDefinition(code="s18_oapa", label=""),
            documents=[make_document(id="d1", name="CCTV export")],
            extracted_text="Seen in poor lighting",
        )
        states = {s.id: s for s in build_element_states(case, [])}
        assert states["identification"].support == SupportLevel.SOME

    def test_outstanding_items_become_gaps(self):
        case = make_case_input(offence=OffenceDefinition(code="s18_oapa", label=""))
        states = {s.id: s for s in build_element_states(case, [make_evidence_item("cctv", "CCTV footage")])}

        identification = states["identification"]
        assert identification.support == SupportLevel.WEAK
        assert [g.evidence_id for g in identification.gaps] == ["cctv"]
        assert identification.gaps[0].note == "outstanding"
