"""
CasePilot Strategy Planner

Runs every engine component in order and assembles a StrategyPlan with
a content fingerprint.

Core Principle: "The litigator decides. CasePilot recommends and documents."

Usage:
    from casepilot.engine import StrategyPlanner

    planner = StrategyPlanner()
    plan = planner.plan(case_input)

    # Or straight from a dict
    plan = plan_case({"case_id": "R-v-Smith", "practice_area": "criminal", ...})
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..canon import plan_fingerprint
from ..exceptions import InvariantViolation, PackNotFoundError
from ..intake import parse_case_input
from ..models import (
    CanonicalRoute,
    CaseInput,
    Move,
    MoveOptics,
    MovePhase,
    Persistence,
    PracticePack,
    Proportionality,
    RouteStatus,
    StrategyPlan,
    Timing,
    Tone,
)
from ..packs import PackLoader, empty_pack
from .anomaly_detector import MAX_OBSERVATIONS, detect_anomalies
from .bundle_metrics import (
    compute_bundle_completeness,
    compute_evidence_strength,
    count_critical_missing,
)
from .element_state import build_element_states
from .evidence_impact import (
    attack_paths_from_routes,
    map_evidence_impact,
    missing_items_from_map,
)
from .evidence_map import build_evidence_map
from .hypothesis import generate_investigation_angles
from .judicial_optics import score_optics
from .move_sequencer import build_move_sequence
from .pressure_triggers import generate_triggers
from .probability_gate import build_probability_output
from .procedural_safety import compute_procedural_safety
from .route_evaluator import RouteContext, evaluate_routes

logger = logging.getLogger(__name__)

_MOVE_TIMING = {
    MovePhase.INFORMATION_EXTRACTION: Timing.EARLY,
    MovePhase.COMMITMENT_FORCING: Timing.ON_TIME,
    MovePhase.ESCALATION: Timing.UNKNOWN,
}


def score_move_optics(move: Move) -> MoveOptics:
    """Optics of a sequenced move, judged as a first request at its phase's timing."""
    proportionality = (
        Proportionality.UNKNOWN if move.phase == MovePhase.ESCALATION else Proportionality.PROPORTIONAL
    )
    result = score_optics(
        move.action,
        timing=_MOVE_TIMING[move.phase],
        persistence=Persistence.FIRST_REQUEST,
        proportionality=proportionality,
        has_chase_trail=False,
    )
    return MoveOptics(order=move.order, result=result)


# =============================================================================
# Planner
# =============================================================================

@dataclass
class StrategyPlanner:
    """
    Orchestrates the reasoning core for one case at a time.

    A planner holds no per-case state. The pack loader's cache is the only
    thing that persists between calls.

    Attributes:
        pack: Fixed pack to use for every case; when None the bundled pack
            for the case's practice area is loaded
        loader: Loader used to find bundled packs
    """
    pack: Optional[PracticePack] = None
    loader: PackLoader = field(default_factory=PackLoader)

    def resolve_pack(self, case_input: CaseInput) -> PracticePack:
        """The fixed pack, the bundled pack for the case, or an empty pack."""
        if self.pack is not None:
            return self.pack
        try:
            return self.loader.load_builtin(case_input.practice_area)
        except PackNotFoundError:
            logger.debug("No bundled pack for %s; using empty pack", case_input.practice_area.value)
            return empty_pack(case_input.practice_area)

    def plan(self, case_input: CaseInput) -> StrategyPlan:
        """
        Build the strategy plan for a case.

        Args:
            case_input: Parsed case

        Returns:
            StrategyPlan with its fingerprint set
        """
        log_extra = {"case_id": case_input.case_id, "component": "planner"}
        pack = self.resolve_pack(case_input)

        # Step 1: Evidence map
        evidence_map = build_evidence_map(case_input.documents, pack.checklist)

        # Step 2: Completeness and critical gaps
        completeness = compute_bundle_completeness(evidence_map)
        critical_missing = count_critical_missing(evidence_map)

        # Step 3: Anomalies
        observations = detect_anomalies(case_input, pack)

        # Step 4: Outstanding evidence
        missing_items = case_input.missing_evidence or missing_items_from_map(evidence_map)

        # Step 5: Procedural safety
        safety = compute_procedural_safety(
            missing_items,
            case_input.dependencies,
            pack.critical_disclosure_items,
        )

        # Step 6: Element states
        elements = build_element_states(case_input, missing_items)

        # Step 7: Routes
        routes = evaluate_routes(RouteContext(
            elements=elements,
            dependencies=case_input.dependencies,
            offence_code=case_input.offence.code if case_input.offence else None,
            procedural_safety=safety.status,
            text=case_input.all_text(),
            recorded_position=case_input.recorded_position,
            critical_items=pack.critical_disclosure_items,
        ))

        # Step 8: Evidence impact against the routes still in play
        routes_in_play = [r.route_id for r in routes if r.status != RouteStatus.BLOCKED]
        attack_paths = case_input.attack_paths or attack_paths_from_routes(routes)
        impacts = map_evidence_impact(missing_items, attack_paths, routes_in_play)

        # Step 9: Angles and moves
        angles = generate_investigation_angles(observations, case_input.practice_area, pack)
        sequence = build_move_sequence(angles)
        move_optics = [score_move_optics(move) for move in sequence.moves]

        # Step 10: Tone
        triggers = generate_triggers(case_input, observations, evidence_map)

        # Step 11: Probability gate
        probability = build_probability_output(
            case_input.practice_area,
            completeness,
            critical_missing,
            compute_evidence_strength(case_input),
            case_input.raw_probability,
        )

        plan = StrategyPlan(
            case_id=case_input.case_id,
            practice_area=case_input.practice_area.value,
            evidence_map=evidence_map,
            procedural_safety=safety,
            elements=elements,
            routes=routes,
            evidence_impacts=impacts,
            observations=observations,
            angles=angles,
            sequence=sequence,
            move_optics=move_optics,
            pressure_triggers=triggers,
            probability=probability,
        )
        plan.fingerprint = plan_fingerprint(plan)

        logger.info(
            "Plan built: %d moves, %d observations, safety=%s",
            len(sequence.moves),
            len(observations),
            safety.status.value,
            extra={**log_extra, "fingerprint_short": plan.fingerprint[:12]},
        )
        return plan


def plan_case(data: Any, pack: Optional[PracticePack] = None) -> StrategyPlan:
    """Parse a raw case dict and plan it."""
    return StrategyPlanner(pack=pack).plan(parse_case_input(data))


# =============================================================================
# Invariants
# =============================================================================

def check_plan_invariants(plan: StrategyPlan) -> None:
    """
    Verify the structural guarantees of a plan.

    Raises:
        InvariantViolation: Listing every broken invariant
    """
    problems: list[str] = []

    route_ids = [r.route_id for r in plan.routes]
    if route_ids != list(CanonicalRoute):
        problems.append("routes must contain every canonical route exactly once, in catalog order")

    if len(plan.observations) > MAX_OBSERVATIONS:
        problems.append(f"{len(plan.observations)} observations exceed the cap of {MAX_OBSERVATIONS}")

    orders = [m.order for m in plan.sequence.moves]
    if orders != list(range(1, len(orders) + 1)):
        problems.append(f"move orders are not contiguous from 1: {orders}")
    for move in plan.sequence.moves:
        if any(dep >= move.order for dep in move.dependencies):
            problems.append(f"move {move.order} depends on a move that does not precede it")

    for impact in plan.evidence_impacts:
        if not impact.affected_attack_path_ids:
            problems.append(f"impact for {impact.evidence_item.id} has no affected attack paths")

    if not plan.pressure_triggers:
        problems.append("no pressure trigger emitted")
    if not plan.observations and any(t.recommended_tone == Tone.STRIKE for t in plan.pressure_triggers):
        problems.append("STRIKE recommended without a supporting observation")

    probability = plan.probability
    if probability is not None and probability.calibrated_probability is not None:
        raw = probability.raw_probability
        if raw is None or probability.calibrated_probability > raw:
            problems.append("calibrated probability exceeds the raw probability")

    if plan.fingerprint != plan_fingerprint(plan):
        problems.append("fingerprint does not match plan content")

    if problems:
        raise InvariantViolation(
            message=f"{len(problems)} plan invariant(s) violated",
            details={"problems": problems},
            case_id=plan.case_id,
        )
