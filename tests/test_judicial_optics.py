"""
Tests for judicial optics scoring.

Tests cover:
- Early proportionate disclosure requests are attractive
- Premature abuse applications are risky; a chase trail neutralises them
- Unsubstantiated challenges are risky unless early
- Timing and persistence adjustments
- Attack path optics
"""
import pytest

from casepilot.engine import score_attack_path_optics, score_optics
from casepilot.models import Optics, Persistence, Proportionality, Timing

from tests.conftest import make_attack_path


class TestScoreOptics:
    """Tests for score_optics."""

    def test_early_proportionate_disclosure_request(self):
        result = score_optics(
            "Send letter requesting: MG6C schedule",
            timing=Timing.EARLY,
            proportionality=Proportionality.PROPORTIONAL,
        )

        assert result.optics == Optics.ATTRACTIVE
        assert result.factors == ["Early reasonable disclosure request", "Proportional case management"]
        assert result.explanation == "Early reasonable disclosure request. Proportional case management."

    def test_premature_abuse_application(self):
        result = score_optics("Abuse of process application", persistence=Persistence.FIRST_REQUEST)

        assert result.optics == Optics.RISKY
        assert "Abuse application without proper chase trail" in result.factors

    def test_abuse_application_with_chase_trail(self):
        result = score_optics("Abuse of process application", has_chase_trail=True)

        assert result.optics == Optics.NEUTRAL
        assert result.factors == ["Abuse application with documented chase trail"]

    def test_unsubstantiated_challenge(self):
        result = score_optics("Challenge the identification")

        assert result.optics == Optics.RISKY
        assert result.factors == ["Unsubstantiated challenge without clear basis"]

    def test_early_timing_mitigates_risk(self):
        result = score_optics("Challenge the identification", timing=Timing.EARLY)

        assert result.optics == Optics.NEUTRAL
        assert result.factors[-1] == "Early timing mitigates risk"

    def test_early_turnbull_challenge(self):
        result = score_optics("Turnbull challenge to identification evidence", timing=Timing.EARLY)
        assert result.optics == Optics.ATTRACTIVE

    def test_late_action_loses_attractiveness(self):
        result = score_optics(
            "Disclosure application for MG6C",
            timing=Timing.LATE,
            proportionality=Proportionality.PROPORTIONAL,
        )

        assert result.optics == Optics.NEUTRAL
        assert result.factors == [
            "Proportional disclosure request",
            "Action is late, reducing judicial attractiveness",
        ]

    def test_repeated_requests_without_chase_trail(self):
        result = score_optics("Send letter requesting: CAD log", persistence=Persistence.REPEATED)

        assert result.optics == Optics.RISKY
        assert result.factors == ["Repeated requests without documented chase trail"]

    def test_speculative_application(self):
        result = score_optics("Speculative application for third party records")
        assert result.optics == Optics.RISKY

    def test_continuity_request(self):
        result = score_optics("Request CCTV continuity statement")
        assert result.optics == Optics.ATTRACTIVE

    def test_standard_action(self):
        result = score_optics("Review the file")

        assert result.optics == Optics.NEUTRAL
        assert result.factors == []
        assert result.explanation == "Standard case management action."

    @pytest.mark.parametrize("action", [None, ""])
    def test_empty_action(self, action):
        assert score_optics(action).optics == Optics.NEUTRAL

    def test_non_neutral_results_carry_factors(self):
        actions = [
            "Abuse of process application",
            "Challenge the identification",
            "Request CCTV continuity statement",
            "PACE exclusion application",
        ]
        for action in actions:
            result = score_optics(action)
            if result.optics != Optics.NEUTRAL:
                assert result.factors


class TestAttackPathOptics:
    """Tests for score_attack_path_optics."""

    def test_early_turnbull(self):
        path = make_attack_path("p1", target="identification", method="Turnbull challenge")
        assert score_attack_path_optics(path, timing=Timing.EARLY).optics == Optics.ATTRACTIVE

    def test_pace_without_basis(self):
        path = make_attack_path("p1", target="interview", method="PACE exclusion")
        result = score_attack_path_optics(path)

        assert result.optics == Optics.RISKY
        assert result.factors == ["PACE challenge without proper basis"]

    def test_pace_with_chase_trail(self):
        path = make_attack_path("p1", target="interview", method="PACE exclusion")
        assert score_attack_path_optics(path, has_chase_trail=True).optics == Optics.NEUTRAL

    def test_standard_path(self):
        path = make_attack_path("p1", target="sequence", method="Cross-examine on sequence")
        result = score_attack_path_optics(path)

        assert result.optics == Optics.NEUTRAL
        assert result.explanation == "Standard attack path."
