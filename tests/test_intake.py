"""
Tests for the intake parser.

Tests cover:
- parse_case_input never raises and drops invalid entries one by one
- Lenient enum handling and probability range checks
- Extracted facts reduced to summary, issues, dates and search text
"""
from datetime import date

import pytest

from casepilot.intake import parse_case_input, parse_extracted_facts
from casepilot.models import (
    CanonicalRoute,
    DependencyStatus,
    EvidenceCategory,
    EvidenceUrgency,
    PracticeArea,
    SupportLevel,
)


class TestParseCaseInput:
    """Tests for parse_case_input."""

    @pytest.mark.parametrize("payload", [None, [], "case", 42])
    def test_non_mapping_gives_empty_case(self, payload):
        case = parse_case_input(payload)

        assert case.case_id == "unknown"
        assert case.practice_area == PracticeArea.OTHER
        assert case.documents == []

    def test_full_payload(self, s18_case_payload):
        case = parse_case_input(s18_case_payload)

        assert case.case_id == "R-v-Smith"
        assert case.practice_area == PracticeArea.CRIMINAL
        assert case.as_of == date(2024, 6, 1)
        assert case.offence.code == "s18_oapa"
        assert [d.id for d in case.documents] == ["d1", "d2"]
        assert case.documents[0].created_at == date(2024, 1, 10)
        assert [e.event_date for e in case.timeline] == [
            date(2024, 1, 5), date(2024, 1, 10), date(2024, 5, 20),
        ]
        assert all(d.status == DependencyStatus.OUTSTANDING for d in case.dependencies)
        assert case.raw_probability == 0.7

    def test_invalid_timeline_entries_dropped(self):
        case = parse_case_input({
            "timeline": [
                {"event_date": "2024-01-01", "description": "Report"},
                {"event_date": "not a date", "description": "Lost"},
                {"description": "No date"},
                "junk",
            ],
        })
        assert [e.description for e in case.timeline] == ["Report"]

    def test_invalid_element_support_dropped(self):
        case = parse_case_input({
            "elements": [
                {"id": "identification", "support": "WEAK"},
                {"id": "intent", "support": "probably"},
            ],
        })

        assert [e.id for e in case.elements] == ["identification"]
        assert case.elements[0].support == SupportLevel.WEAK
        assert case.elements[0].label == "Identification"

    def test_element_gaps(self):
        case = parse_case_input({
            "elements": [{
                "id": "identification",
                "support": "some",
                "gaps": ["cctv", {"evidence_id": "bwv", "label": "BWV"}, {"label": "no id"}, 3],
            }],
        })
        assert [g.evidence_id for g in case.elements[0].gaps] == ["cctv", "bwv"]

    def test_unknown_values_fall_back(self):
        case = parse_case_input({
            "practice_area": "family",
            "dependencies": [{"id": "cctv", "status": "pending"}],
            "missing_evidence": [{"id": "m1", "name": "Custody record", "category": "paper", "urgency": "soon"}],
        })

        assert case.practice_area == PracticeArea.OTHER
        assert case.dependencies[0].status == DependencyStatus.UNKNOWN
        assert case.missing_evidence[0].category == EvidenceCategory.OTHER
        assert case.missing_evidence[0].urgency == EvidenceUrgency.ANYTIME

    @pytest.mark.parametrize("value", [1.5, -0.2, "0.5", True])
    def test_out_of_range_probability_ignored(self, value):
        assert parse_case_input({"raw_probability": value}).raw_probability is None

    def test_case_id_and_area_normalised(self):
        case = parse_case_input({"case_id": 1234, "practice_area": " Housing_Disrepair "})

        assert case.case_id == "1234"
        assert case.practice_area == PracticeArea.HOUSING_DISREPAIR

    def test_attack_path_route(self):
        case = parse_case_input({
            "attack_paths": [
                {"id": "p1", "route": "IDENTIFICATION_CHALLENGE", "evidence_inputs": ["cctv", 7]},
                {"id": "p2", "route": "made_up"},
            ],
        })

        assert case.attack_paths[0].route == CanonicalRoute.IDENTIFICATION_CHALLENGE
        assert case.attack_paths[0].evidence_inputs == ["cctv"]
        assert case.attack_paths[1].route is None

    def test_invalid_offence_ignored(self):
        case = parse_case_input({"offence": {"label": "No code"}})
        assert case.offence is None

    def test_collection_of_wrong_type_ignored(self):
        case = parse_case_input({"documents": {"id": "d1"}})
        assert case.documents == []


class TestExtractedFacts:
    """Tests for parse_extracted_facts."""

    def test_empty(self):
        facts = parse_extracted_facts(None)

        assert facts.summary is None
        assert facts.key_issues == []
        assert facts.search_text == ""

    def test_reduction(self):
        facts = parse_extracted_facts({
            "summary": "  Tenant reported MOULD  ",
            "key_issues": ["Damp in bedroom", {"label": "Repairs late"}, {"other": 1}, ""],
            "dates": [{"date": "2024-02-01", "label": "Report"}, "2024-03-01", "garbage"],
            "parties": [{"name": "Council"}, "Tenant", {"role": "x"}],
        })

        assert facts.summary == "Tenant reported MOULD"
        assert facts.key_issues == ["Damp in bedroom", "Repairs late"]
        assert [d.on for d in facts.dates] == [date(2024, 2, 1), date(2024, 3, 1)]
        assert facts.dates[0].label == "Report"
        assert facts.parties == ["Council", "Tenant"]
        assert "tenant reported mould" in facts.search_text

    def test_camel_case_issues(self):
        facts = parse_extracted_facts({"keyIssues": ["Late diagnosis"]})
        assert facts.key_issues == ["Late diagnosis"]
