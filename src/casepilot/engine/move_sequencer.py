"""
CasePilot Move Sequencer

Turns investigation angles into an ordered action plan: cheapest,
highest-information moves first, expert-tier spend last.

Key features:
- Phase, cost and commitment assigned by angle position
- Resequencing as discrete pure steps: sort, remap, dedupe, renumber
- Fork points on information-extraction moves (admit / deny / silence)
- Out-of-order warnings and cost analysis

Every step returns new Move objects; inputs are never mutated. After
sequence_moves(), orders are exactly 1..N and every dependency is strictly
less than the order of the move that holds it.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from ..models import (
    LEVERAGE_RANK,
    CommitmentLevel,
    CostAnalysis,
    ForkPoint,
    InvestigationAngle,
    Leverage,
    Move,
    MovePhase,
    MoveSequence,
)

logger = logging.getLogger(__name__)

PHASE_COSTS = {
    MovePhase.INFORMATION_EXTRACTION: 50,
    MovePhase.COMMITMENT_FORCING: 500,
    MovePhase.ESCALATION: 2000,
}

PHASE_COMMITMENT = {
    MovePhase.INFORMATION_EXTRACTION: CommitmentLevel.LOW,
    MovePhase.COMMITMENT_FORCING: CommitmentLevel.MEDIUM,
    MovePhase.ESCALATION: CommitmentLevel.HIGH,
}

COMMITMENT_PENALTY = {
    CommitmentLevel.LOW: 0,
    CommitmentLevel.MEDIUM: 1,
    CommitmentLevel.HIGH: 2,
}

EXPENSIVE_MOVE_COST = 1000
EXPERT_TIER_COST = 5000
MATERIAL_NOTE_LENGTH = 50

EXPERT_TRIGGER = (
    "Expert instruction is justified only once targeted disclosure confirms the gap "
    "and the opponent has committed to an account."
)

_WHY_NOW = (
    "Cheapest way to test the core theory. If they cannot produce, the point is made without expert spend.",
    "Only do this if Move 1 fails or produces suspicious results. Tests whether the failure was systematic.",
    "Tests governance and compliance. Low cost, high leverage if gaps are confirmed.",
)
_WHY_NOW_LATER = (
    "Forces a formal position and creates a paper trail. Only after cheap moves have extracted what they can."
)

_WHAT_YOU_LOSE = (
    "If you skip this and go straight to expert, you spend 2000+ without knowing if key evidence exists.",
    "If you do this before Move 1, you give the opponent time to sanitize records and reveal your theory early.",
)
_WHAT_YOU_LOSE_LATER = (
    "If you escalate before information extraction, you lose the chance to get information cheaply "
    "and give the opponent time to prepare."
)


# =============================================================================
# Generation
# =============================================================================

def _phase_for(index: int) -> MovePhase:
    if index < 3:
        return MovePhase.INFORMATION_EXTRACTION
    if index < 5:
        return MovePhase.COMMITMENT_FORCING
    return MovePhase.ESCALATION


def _information_gain_for(index: int) -> Leverage:
    if index < 2:
        return Leverage.HIGH
    if index < 4:
        return Leverage.MEDIUM
    return Leverage.LOW


def _action_for(phase: MovePhase, request: str) -> str:
    if phase == MovePhase.INFORMATION_EXTRACTION:
        return f"Send letter requesting: {request}"
    if phase == MovePhase.COMMITMENT_FORCING:
        return f"Make targeted disclosure application for: {request}"
    return "Consider expert instruction or formal escalation"


def generate_moves(angles: list[InvestigationAngle]) -> list[Move]:
    """One move per angle; each move initially depends on the one before it."""
    moves = []
    for index, angle in enumerate(angles):
        phase = _phase_for(index)
        moves.append(Move(
            order=index + 1,
            phase=phase,
            action=_action_for(phase, angle.targeted_request),
            evidence_requested=angle.targeted_request,
            cost=PHASE_COSTS[phase],
            commitment_level=PHASE_COMMITMENT[phase],
            information_gain=_information_gain_for(index),
            dependencies=[index] if index > 0 else [],
            question_it_forces=angle.hypothesis,
            expected_opponent_response=angle.expected_response,
            why_now=_WHY_NOW[index] if index < len(_WHY_NOW) else _WHY_NOW_LATER,
            what_you_lose_if_out_of_order=(
                _WHAT_YOU_LOSE[index] if index < len(_WHAT_YOU_LOSE) else _WHAT_YOU_LOSE_LATER
            ),
            source_observation_id=angle.observation_id,
        ))
    return moves


# =============================================================================
# Sequencing Steps
# =============================================================================

def move_priority(move: Move) -> float:
    """
    Cost/benefit score: information gain per 100 of cost, doubled for
    extraction moves, less a commitment penalty.
    """
    cost_units = max(move.cost, 1) / 100
    multiplier = 2 if move.phase == MovePhase.INFORMATION_EXTRACTION else 1
    return LEVERAGE_RANK[move.information_gain] / cost_units * multiplier - COMMITMENT_PENALTY[move.commitment_level]


def sort_by_priority(moves: list[Move]) -> list[Move]:
    """Highest priority first; ties keep input order."""
    return sorted(moves, key=move_priority, reverse=True)


def remap_dependencies(moves: list[Move]) -> list[Move]:
    """
    Assign each move its list position as order and translate dependencies
    from old orders to new ones.

    A dependency that no longer strictly precedes its move, or that refers
    to no known move, is dropped.
    """
    new_order = {}
    for position, move in enumerate(moves, start=1):
        new_order.setdefault(move.order, position)

    remapped = []
    for position, move in enumerate(moves, start=1):
        deps = []
        for dep in move.dependencies:
            target = new_order.get(dep)
            if target is not None and target < position and target not in deps:
                deps.append(target)
        remapped.append(replace(move, order=position, dependencies=deps))
    return remapped


def dedupe_by_evidence(moves: list[Move]) -> list[Move]:
    """Keep the first move per evidence_requested; drop dependencies on removed moves."""
    seen = set()
    kept = []
    for move in moves:
        if move.evidence_requested in seen:
            continue
        seen.add(move.evidence_requested)
        kept.append(move)

    kept_orders = {move.order for move in kept}
    return [
        replace(move, dependencies=[dep for dep in move.dependencies if dep in kept_orders])
        for move in kept
    ]


def renumber(moves: list[Move]) -> list[Move]:
    """Contiguous orders 1..N in list order, dependencies remapped to match."""
    new_order = {move.order: position for position, move in enumerate(moves, start=1)}
    return [
        replace(
            move,
            order=position,
            dependencies=[new_order[dep] for dep in move.dependencies if dep in new_order and new_order[dep] < position],
        )
        for position, move in enumerate(moves, start=1)
    ]


def sequence_moves(moves: list[Move]) -> list[Move]:
    """Sort by priority, remap dependencies, dedupe, renumber."""
    return renumber(dedupe_by_evidence(remap_dependencies(sort_by_priority(moves))))


# =============================================================================
# Forks, Warnings, Cost
# =============================================================================

def add_fork_points(moves: list[Move]) -> list[Move]:
    """
    Fork points on information-extraction moves that are not last.

    Admission and silence lead to the next move; denial skips one ahead
    when there is a move to skip to.
    """
    result = []
    last = len(moves) - 1
    for index, move in enumerate(moves):
        if move.phase != MovePhase.INFORMATION_EXTRACTION or index == last:
            result.append(move)
            continue
        next_order = moves[index + 1].order
        deny_order = moves[index + 2].order if index + 2 <= last else next_order
        result.append(replace(
            move,
            fork_point=ForkPoint(if_admit=next_order, if_deny=deny_order, if_silence=next_order),
        ))
    return result


def generate_warnings(moves: list[Move]) -> list[str]:
    """Warnings about expensive or escalating moves scheduled too early."""
    warnings = []
    extraction_orders = [m.order for m in moves if m.phase == MovePhase.INFORMATION_EXTRACTION]

    if extraction_orders:
        first_info = min(extraction_orders)

        expensive = [m for m in moves if m.cost > EXPENSIVE_MOVE_COST and m.order < first_info]
        if expensive:
            move = expensive[0]
            warnings.append(
                f"Expert-tier spend (Move {move.order}) comes before information extraction "
                f"(Move {first_info}). You would spend {move.cost}+ without knowing if key evidence "
                "exists. Do cheap information extraction first."
            )

        escalations = [m.order for m in moves if m.phase == MovePhase.ESCALATION]
        if escalations and min(escalations) < first_info:
            warnings.append(
                f"Escalation (Move {min(escalations)}) comes before information extraction "
                f"(Move {first_info}). You lose the chance to get information cheaply and give the "
                "opponent time to prepare."
            )

    for move in moves:
        if move.order > 1 and len(move.what_you_lose_if_out_of_order) > MATERIAL_NOTE_LENGTH:
            warnings.append(f"Move {move.order}: {move.what_you_lose_if_out_of_order}")

    return warnings


def calculate_cost_analysis(moves: list[Move]) -> CostAnalysis:
    """Spend committed before expert instruction and what confirming the gap first saves."""
    cost_before_expert = sum(m.cost for m in moves if m.phase != MovePhase.INFORMATION_EXTRACTION)
    high_gain = any(
        m.information_gain in (Leverage.HIGH, Leverage.CRITICAL) for m in moves
    )
    avoided = max(0, EXPERT_TIER_COST - cost_before_expert) if high_gain else 0
    return CostAnalysis(
        cost_before_expert=cost_before_expert,
        expert_trigger=EXPERT_TRIGGER,
        unnecessary_spend_avoided_if_gap_confirmed=avoided,
    )


def build_move_sequence(angles: list[InvestigationAngle]) -> MoveSequence:
    """Generate, sequence and annotate moves for a list of angles."""
    moves = add_fork_points(sequence_moves(generate_moves(angles)))
    warnings = generate_warnings(moves)
    logger.debug("Sequenced %d moves with %d warnings", len(moves), len(warnings))
    return MoveSequence(moves=moves, warnings=warnings, cost_analysis=calculate_cost_analysis(moves))
