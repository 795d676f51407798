"""
CasePilot Probability Gate

Decides whether outcome probabilities may be shown at all, and if so
rescales an externally supplied probability downward by the strength of
the opposing evidence.

Gate policy (first matching row wins):

    completeness < 10                    hidden, decision support only
    critical missing >= 3                hidden, provisional
    completeness < 40                    hidden, provisional
    criminal, any critical missing and
      completeness < 60                  hidden, provisional
    otherwise                            shown

Calibration never raises a probability: raw * (1 - 0.5 * strength / 100),
floored at PROBABILITY_FLOOR and capped at raw.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from ..models import (
    GateReason,
    PracticeArea,
    ProbabilityGateDecision,
    ProbabilityOutput,
)

logger = logging.getLogger(__name__)

DECISION_SUPPORT_ONLY_BELOW = 10
PROVISIONAL_BELOW = 40
CRIMINAL_CRITICAL_GAP_BELOW = 60
MAX_CRITICAL_MISSING = 3

PROBABILITY_FLOOR = 0.05
MAX_STRENGTH_DISCOUNT = 0.5


def _is_valid_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _gate_inputs(completeness, critical_missing_count) -> tuple[int, int]:
    """Invalid inputs fail closed: no completeness, maximum critical gaps."""
    if not _is_valid_number(completeness):
        completeness = 0
    if not _is_valid_number(critical_missing_count):
        critical_missing_count = MAX_CRITICAL_MISSING
    return int(completeness), int(critical_missing_count)


def should_show_probabilities(
    practice_area: PracticeArea,
    completeness: int,
    critical_missing_count: int,
) -> ProbabilityGateDecision:
    """Apply the gate policy to bundle completeness and critical gaps."""
    completeness, critical_missing_count = _gate_inputs(completeness, critical_missing_count)
    if completeness < DECISION_SUPPORT_ONLY_BELOW:
        return ProbabilityGateDecision(
            show=False,
            reason=(
                f"Bundle completeness is {completeness}%. Output is decision support only; "
                "probability estimates are withheld."
            ),
            reason_class=GateReason.DECISION_SUPPORT_ONLY,
        )

    if critical_missing_count >= MAX_CRITICAL_MISSING:
        return ProbabilityGateDecision(
            show=False,
            reason=(
                f"{critical_missing_count} critical items are missing. Assessment is provisional "
                "until the bundle is complete."
            ),
            reason_class=GateReason.PROVISIONAL,
        )

    if completeness < PROVISIONAL_BELOW:
        return ProbabilityGateDecision(
            show=False,
            reason=(
                f"Bundle completeness is {completeness}%. Assessment is provisional; "
                "the bundle is incomplete."
            ),
            reason_class=GateReason.PROVISIONAL,
        )

    if (
        practice_area == PracticeArea.CRIMINAL
        and critical_missing_count > 0
        and completeness < CRIMINAL_CRITICAL_GAP_BELOW
    ):
        return ProbabilityGateDecision(
            show=False,
            reason=(
                "Critical disclosure is outstanding in a criminal matter. Assessment is provisional "
                "until it is served."
            ),
            reason_class=GateReason.PROVISIONAL,
        )

    return ProbabilityGateDecision(show=True)


def calibrate_probability(raw: Optional[float], evidence_strength: Optional[float]) -> float:
    """
    Downgrade a raw probability by opposing evidence strength.

    Invalid input (missing, non-numeric, or out of range) returns the floor.
    """
    if not _is_valid_number(raw) or not 0 <= raw <= 1:
        return PROBABILITY_FLOOR
    if not _is_valid_number(evidence_strength) or not 0 <= evidence_strength <= 100:
        return PROBABILITY_FLOOR

    scaled = raw * (1 - MAX_STRENGTH_DISCOUNT * evidence_strength / 100)
    return round(min(raw, max(PROBABILITY_FLOOR, scaled)), 4)


def build_probability_output(
    practice_area: PracticeArea,
    completeness: int,
    critical_missing_count: int,
    evidence_strength: int,
    raw_probability: Optional[float] = None,
) -> ProbabilityOutput:
    """Gate decision plus a calibrated probability when one may be shown."""
    completeness, critical_missing_count = _gate_inputs(completeness, critical_missing_count)
    decision = should_show_probabilities(practice_area, completeness, critical_missing_count)
    calibrated = None
    if decision.show and raw_probability is not None:
        calibrated = calibrate_probability(raw_probability, evidence_strength)
    logger.debug(
        "Probability gate show=%s completeness=%d critical_missing=%d",
        decision.show,
        completeness,
        critical_missing_count,
    )
    return ProbabilityOutput(
        decision=decision,
        completeness=completeness,
        critical_missing_count=critical_missing_count,
        evidence_strength=evidence_strength,
        raw_probability=raw_probability if decision.show else None,
        calibrated_probability=calibrated,
    )
