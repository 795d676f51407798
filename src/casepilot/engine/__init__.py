"""
CasePilot Engine

Deterministic reasoning components for litigation strategy planning.

Key components:
- Evidence map and bundle metrics: what the bundle holds against a pack
- Route evaluator: viability of the eight canonical defence routes
- Evidence impact mapper: what each outstanding item does to those routes
- Anomaly detector and hypotheses: what looks wrong and how to test it
- Move sequencer: the order in which to ask, force and escalate
- Judicial optics and pressure triggers: how moves land and how hard to push
- Probability gate: whether numbers may be shown at all
- StrategyPlanner: runs everything and fingerprints the result

Usage:
    from casepilot.engine import StrategyPlanner

    plan = StrategyPlanner().plan(case_input)
"""
from __future__ import annotations

from .anomaly_detector import (
    MAX_OBSERVATIONS,
    detect_anomalies,
    detect_evidence_gaps,
    detect_governance_gaps,
    detect_narrative_inconsistencies,
    detect_timeline_gaps,
    rank_observations,
)
from .bundle_metrics import (
    compute_bundle_completeness,
    compute_evidence_strength,
    count_critical_missing,
    strength_level,
)
from .element_state import (
    BUILTIN_OFFENCES,
    assess_element_support,
    build_element_states,
    resolve_offence,
)
from .evidence_impact import (
    analyze_evidence_item,
    attack_paths_from_routes,
    classify_evidence_category,
    map_evidence_impact,
    matches_evidence_category,
    missing_items_from_map,
    path_depends_on,
)
from .evidence_map import build_evidence_map, matches_patterns
from .hypothesis import generate_investigation_angle, generate_investigation_angles
from .judicial_optics import score_attack_path_optics, score_optics
from .move_sequencer import (
    add_fork_points,
    build_move_sequence,
    calculate_cost_analysis,
    generate_moves,
    generate_warnings,
    move_priority,
    sequence_moves,
)
from .planner import (
    StrategyPlanner,
    check_plan_invariants,
    plan_case,
    score_move_optics,
)
from .practice_detectors import (
    AwaabsLawAssessment,
    assess_awaabs_law,
    awaabs_law_observation,
    detect_addendum_after_complaint,
    detect_practice_anomaly,
    detect_treatment_delays,
)
from .pressure_triggers import generate_triggers
from .probability_gate import (
    PROBABILITY_FLOOR,
    build_probability_output,
    calibrate_probability,
    should_show_probabilities,
)
from .procedural_safety import compute_procedural_safety, is_critical_dependency
from .route_evaluator import ROUTE_EVALUATORS, RouteContext, evaluate_routes

__all__ = [
    # Planner
    "StrategyPlanner",
    "check_plan_invariants",
    "plan_case",
    "score_move_optics",
    # Evidence map
    "build_evidence_map",
    "matches_patterns",
    "compute_bundle_completeness",
    "compute_evidence_strength",
    "count_critical_missing",
    "strength_level",
    # Procedural safety and elements
    "compute_procedural_safety",
    "is_critical_dependency",
    "BUILTIN_OFFENCES",
    "assess_element_support",
    "build_element_states",
    "resolve_offence",
    # Routes
    "ROUTE_EVALUATORS",
    "RouteContext",
    "evaluate_routes",
    # Evidence impact
    "analyze_evidence_item",
    "attack_paths_from_routes",
    "classify_evidence_category",
    "map_evidence_impact",
    "matches_evidence_category",
    "missing_items_from_map",
    "path_depends_on",
    # Anomalies
    "MAX_OBSERVATIONS",
    "detect_anomalies",
    "detect_evidence_gaps",
    "detect_governance_gaps",
    "detect_narrative_inconsistencies",
    "detect_timeline_gaps",
    "rank_observations",
    "AwaabsLawAssessment",
    "assess_awaabs_law",
    "awaabs_law_observation",
    "detect_addendum_after_complaint",
    "detect_practice_anomaly",
    "detect_treatment_delays",
    # Hypotheses and moves
    "generate_investigation_angle",
    "generate_investigation_angles",
    "add_fork_points",
    "build_move_sequence",
    "calculate_cost_analysis",
    "generate_moves",
    "generate_warnings",
    "move_priority",
    "sequence_moves",
    # Optics and tone
    "score_attack_path_optics",
    "score_optics",
    "generate_triggers",
    # Probability gate
    "PROBABILITY_FLOOR",
    "build_probability_output",
    "calibrate_probability",
    "should_show_probabilities",
]
