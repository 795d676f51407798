"""
Tests for the evidence impact mapper.

Tests cover:
- Category classification of free-text evidence names
- Items no attack path depends on are dropped
- Kill switches and pivots for the named category/route combinations
- Document gaps turning into leverage past the threshold
- Deriving missing items and attack paths from upstream results
"""
import pytest

from casepilot.engine import (
    attack_paths_from_routes,
    classify_evidence_category,
    map_evidence_impact,
    missing_items_from_map,
)
from casepilot.engine.evidence_map import build_evidence_map
from casepilot.models import (
    CanonicalRoute,
    DefenceImpact,
    EvidenceCategory,
    EvidencePriority,
    EvidenceUrgency,
    RouteAssessment,
    RouteStatus,
    ViabilityChange,
)

from tests.conftest import make_attack_path, make_checklist_item, make_evidence_item


ID = CanonicalRoute.IDENTIFICATION_CHALLENGE
ACT = CanonicalRoute.ACT_DENIAL
INTENT = CanonicalRoute.INTENT_DENIAL
ALT = CanonicalRoute.ALTERNATIVE_MENTAL_STATE_OFFENCE
PDL = CanonicalRoute.PROCEDURAL_DISCLOSURE_LEVERAGE


class TestClassification:
    """Tests for evidence category heuristics."""

    @pytest.mark.parametrize("name,expected", [
        ("CCTV footage (full window)", EvidenceCategory.VISUAL),
        ("BWV of arrest", EvidenceCategory.VISUAL),
        ("Hospital discharge notes", EvidenceCategory.MEDICAL),
        ("MG6C unused material schedule", EvidenceCategory.DOCUMENT),
        ("Custody record", EvidenceCategory.PROCEDURAL),
        ("Character references", EvidenceCategory.OTHER),
    ])
    def test_classify(self, name, expected):
        assert classify_evidence_category(name) == expected


class TestImpactMapping:
    """Tests for map_evidence_impact."""

    def test_unmatched_item_is_dropped(self):
        item = make_evidence_item("cctv", "CCTV footage", EvidenceCategory.VISUAL)
        paths = [make_attack_path("p1", ID, ["witness statements"])]

        assert map_evidence_impact([item], paths, [ID]) == []

    def test_no_paths_no_impacts(self):
        item = make_evidence_item("cctv", "CCTV footage", EvidenceCategory.VISUAL)
        assert map_evidence_impact([item], [], [ID]) == []

    def test_every_impact_has_affected_paths(self):
        items = [
            make_evidence_item("cctv", "CCTV footage", EvidenceCategory.VISUAL),
            make_evidence_item("refs", "Character references"),
            make_evidence_item("med", "Medical report", EvidenceCategory.MEDICAL),
        ]
        paths = [make_attack_path("p1", INTENT, ["medical report"])]

        impacts = map_evidence_impact(items, paths, [INTENT])

        assert [i.evidence_item.id for i in impacts] == ["med"]
        assert all(i.affected_attack_path_ids for i in impacts)

    def test_visual_evidence_on_identification(self):
        item = make_evidence_item("cctv", "CCTV footage", EvidenceCategory.VISUAL, EvidenceUrgency.BEFORE_PTPH)
        paths = [
            make_attack_path("path-id", ID, ["CCTV footage"]),
            make_attack_path("path-act", ACT, ["camera stills"]),
        ]

        (impact,) = map_evidence_impact([item], paths, [ID, ACT])

        assert impact.affected_attack_path_ids == ["path-id", "path-act"]
        assert impact.impact_on_defence == DefenceImpact.DEPENDS
        assert impact.if_arrives_late.startswith("Needed before PTPH. ")
        assert "identification challenge collapses" in impact.if_arrives_adverse
        assert impact.kill_switch.routes_killed == [ID, ACT]
        assert impact.pivot_trigger.pivot_from == ID
        assert impact.pivot_trigger.pivot_to == PDL
        assert [s.change for s in impact.viability_change] == [ViabilityChange.NEUTRAL, ViabilityChange.NEUTRAL]

    def test_medical_evidence_on_intent(self):
        item = make_evidence_item("med", "Medical report", EvidenceCategory.MEDICAL, EvidenceUrgency.BEFORE_TRIAL)
        paths = [
            make_attack_path("path-intent", INTENT, ["medical report"]),
            make_attack_path("path-alt", ALT, ["injury pattern"]),
        ]

        (impact,) = map_evidence_impact([item], paths, [INTENT, ALT])

        assert impact.kill_switch.routes_killed == [INTENT]
        assert impact.pivot_trigger.pivot_from == INTENT
        assert impact.pivot_trigger.pivot_to == ALT
        assert not impact.if_arrives_late.startswith("Needed before PTPH")

    def test_unnamed_combination_has_no_kill_switch_or_pivot(self):
        item = make_evidence_item("med", "Medical report", EvidenceCategory.MEDICAL)
        paths = [make_attack_path("path-weapon", CanonicalRoute.WEAPON_UNCERTAINTY_CAUSATION, ["medical report"])]

        (impact,) = map_evidence_impact([item], paths, [CanonicalRoute.WEAPON_UNCERTAINTY_CAUSATION])

        assert impact.kill_switch is None
        assert impact.pivot_trigger is None

    def test_document_gaps_become_leverage_past_threshold(self):
        items = [
            make_evidence_item("mg6", "MG6C schedule", EvidenceCategory.DOCUMENT),
            make_evidence_item("x1", "Other item one"),
            make_evidence_item("x2", "Other item two"),
        ]
        paths = [make_attack_path("path-pdl", PDL, ["MG6 disclosure schedules"])]

        impacts = map_evidence_impact(items, paths, [PDL])

        assert impacts[0].impact_on_defence == DefenceImpact.HELPS
        assert impacts[0].viability_change[0].change == ViabilityChange.STRENGTHENS

    def test_single_document_gap_hurts(self):
        item = make_evidence_item("mg6", "MG6C schedule", EvidenceCategory.DOCUMENT)
        paths = [make_attack_path("path-pdl", PDL, ["MG6 disclosure schedules"])]

        (impact,) = map_evidence_impact([item], paths, [PDL])

        assert impact.impact_on_defence == DefenceImpact.HURTS
        assert impact.viability_change[0].change == ViabilityChange.WEAKENS

    def test_procedural_breach_pivots_to_disclosure_leverage(self):
        item = make_evidence_item("custody", "Custody record breach log", EvidenceCategory.PROCEDURAL)
        paths = [
            make_attack_path("path-pdl", PDL, ["custody record"]),
            make_attack_path("path-act", ACT, ["custody record"]),
        ]

        (impact,) = map_evidence_impact([item], paths, [PDL, ACT])

        assert impact.kill_switch is None
        assert impact.pivot_trigger.pivot_from == ACT
        assert impact.pivot_trigger.pivot_to == PDL
        assert impact.pivot_trigger.timing == "anytime"
        assert impact.viability_change[0].change == ViabilityChange.STRENGTHENS

    def test_routes_not_in_play_get_no_viability_change(self):
        item = make_evidence_item("cctv", "CCTV footage", EvidenceCategory.VISUAL)
        paths = [make_attack_path("path-sd", CanonicalRoute.SELF_DEFENCE, ["CCTV footage"])]

        (impact,) = map_evidence_impact([item], paths, [ID])

        assert impact.affected_attack_path_ids == ["path-sd"]
        assert impact.viability_change == []

    def test_input_order_preserved(self):
        items = [
            make_evidence_item("b", "BWV", EvidenceCategory.VISUAL),
            make_evidence_item("a", "CCTV", EvidenceCategory.VISUAL),
        ]
        paths = [make_attack_path("p", ID, ["footage"])]

        impacts = map_evidence_impact(items, paths, [ID])

        assert [i.evidence_item.id for i in impacts] == ["b", "a"]


class TestDerivedInputs:
    """Tests for missing items and attack paths derived from upstream results."""

    def test_missing_items_from_map(self):
        checklist = [
            make_checklist_item("cctv_footage", ["cctv"], priority=EvidencePriority.CRITICAL),
            make_checklist_item("medical_notes", ["medical"], priority=EvidencePriority.MEDIUM),
            make_checklist_item("character_refs", ["reference"], priority=EvidencePriority.LOW),
        ]
        items = missing_items_from_map(build_evidence_map([], checklist))

        assert [i.id for i in items] == ["cctv_footage", "medical_notes", "character_refs"]
        assert [i.urgency for i in items] == [
            EvidenceUrgency.BEFORE_PTPH,
            EvidenceUrgency.BEFORE_TRIAL,
            EvidenceUrgency.ANYTIME,
        ]
        assert items[0].category == EvidenceCategory.VISUAL

    def test_attack_paths_skip_blocked_routes(self):
        assessments = [
            RouteAssessment(route_id=PDL, status=RouteStatus.VIABLE, reasons=["Outstanding disclosure"]),
            RouteAssessment(route_id=ID, status=RouteStatus.BLOCKED, reasons=["Strong identification"]),
            RouteAssessment(route_id=ACT, status=RouteStatus.RISKY, reasons=[]),
        ]
        paths = attack_paths_from_routes(assessments)

        assert [p.id for p in paths] == ["path-procedural_disclosure_leverage", "path-act_denial"]
        assert paths[0].method == "Outstanding disclosure"
        assert all(p.is_hypothesis for p in paths)
