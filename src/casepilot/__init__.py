"""
CasePilot: Deterministic Strategic Reasoning for Litigation

Turns an extracted case bundle into a documented strategy plan: which
defence routes are viable, what outstanding evidence would change, what
looks anomalous, which moves to make in which order, how they will look
to the court, how hard to push, and whether probabilities may be shown.

Same input, same plan: every output is deterministic and carries a
content fingerprint.

Core Principle: "The litigator decides. CasePilot recommends and documents."

Usage:
    from casepilot import plan_case

    plan = plan_case({
        "case_id": "R-v-Smith",
        "practice_area": "criminal",
        "documents": [...],
        "timeline": [...],
    })
    for route in plan.routes:
        print(route.route_id.value, route.status.value)
"""
from __future__ import annotations

__version__ = "0.1.0"

from .canon import canonical_json, content_hash, plan_fingerprint
from .engine import StrategyPlanner, check_plan_invariants, plan_case
from .exceptions import (
    CaseInputError,
    CasePilotError,
    InvariantViolation,
    PackLoadError,
    PackNotFoundError,
    PackValidationError,
    PackVersionMismatch,
)
from .intake import parse_case_input
from .models import CaseInput, PracticeArea, StrategyPlan
from .packs import PackLoader, load_builtin_pack

__all__ = [
    "__version__",
    # Planning
    "StrategyPlanner",
    "check_plan_invariants",
    "parse_case_input",
    "plan_case",
    # Models
    "CaseInput",
    "PracticeArea",
    "StrategyPlan",
    # Packs
    "PackLoader",
    "load_builtin_pack",
    # Canonicalization
    "canonical_json",
    "content_hash",
    "plan_fingerprint",
    # Exceptions
    "CaseInputError",
    "CasePilotError",
    "InvariantViolation",
    "PackLoadError",
    "PackNotFoundError",
    "PackValidationError",
    "PackVersionMismatch",
]
