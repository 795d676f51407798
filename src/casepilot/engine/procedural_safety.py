"""
CasePilot Procedural Safety

Decides whether a case can safely progress beyond a holding position
given the state of critical disclosure (CCTV, body-worn video, 999 audio,
CAD log, interview recording in criminal matters).

Status rules:
- no critical item outstanding: SAFE
- one outstanding: CONDITIONALLY_UNSAFE
- two or more outstanding: UNSAFE_TO_PROCEED
- disclosure status unknown: CONDITIONALLY_UNSAFE
"""
from __future__ import annotations

import logging

from ..models import (
    CriticalDisclosureItem,
    Dependency,
    EvidenceItem,
    ProceduralSafety,
    ProceduralSafetyStatus,
)

logger = logging.getLogger(__name__)


def _mentions(text: str, labels: list[str]) -> bool:
    lowered = text.lower()
    return any(label in lowered for label in labels)


def critical_labels(item: CriticalDisclosureItem) -> list[str]:
    return [label.lower() for label in item.labels] or [item.id.lower()]


def is_critical_dependency(dependency: Dependency, critical_items: list[CriticalDisclosureItem]) -> bool:
    """True when the dependency id or label names one of the critical items."""
    text = f"{dependency.id} {dependency.label or ''}"
    return any(_mentions(text, critical_labels(item)) for item in critical_items)


def compute_procedural_safety(
    missing_items: list[EvidenceItem],
    dependencies: list[Dependency],
    critical_items: list[CriticalDisclosureItem],
) -> ProceduralSafety:
    """
    Compute procedural safety from outstanding evidence and dependencies.

    Args:
        missing_items: Evidence known to be outstanding
        dependencies: Awaited disclosure with status
        critical_items: Items whose absence blocks safe progress

    Returns:
        ProceduralSafety with the outstanding critical items in pack order
    """
    if not critical_items:
        return ProceduralSafety(
            status=ProceduralSafetyStatus.SAFE,
            explanation="No critical disclosure items are defined for this practice area.",
        )

    if not missing_items and not dependencies:
        return ProceduralSafety(
            status=ProceduralSafetyStatus.CONDITIONALLY_UNSAFE,
            explanation=(
                "Disclosure status not available. Cannot assess procedural safety "
                "without knowing what has been served."
            ),
        )

    outstanding: list[str] = []
    for item in critical_items:
        labels = critical_labels(item)
        missing = any(_mentions(f"{m.id} {m.name}", labels) for m in missing_items)
        awaited = any(
            d.is_outstanding and is_critical_dependency(d, [item])
            for d in dependencies
        )
        if missing or awaited:
            outstanding.append(labels[0].upper())

    if not outstanding:
        status = ProceduralSafetyStatus.SAFE
        explanation = "All critical disclosure items appear to be present or not applicable to this case."
    elif len(outstanding) >= 2:
        status = ProceduralSafetyStatus.UNSAFE_TO_PROCEED
        explanation = (
            "This case cannot safely progress beyond a holding position until disclosure "
            "obligations are met. Multiple critical disclosure items are outstanding."
        )
    else:
        status = ProceduralSafetyStatus.CONDITIONALLY_UNSAFE
        explanation = (
            "This case may be conditionally unsafe to proceed. At least one critical "
            "disclosure item is outstanding."
        )

    logger.debug("Procedural safety %s (%d outstanding)", status.value, len(outstanding))
    return ProceduralSafety(status=status, explanation=explanation, outstanding_items=outstanding)
