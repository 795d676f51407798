"""
CasePilot Anomaly Detector

Role-agnostic detection of "what stood out" on case review.

Key features:
- Timeline gaps and compressed timelines
- Narrative inconsistencies across documents
- Expected evidence that is absent from the bundle
- Governance rules with no sign of compliance
- One practice-area observation (Awaab's Law, clinical delays)

Output is capped at MAX_OBSERVATIONS, highest leverage first. The sort is
stable so equal-leverage observations keep detection order.

Usage:
    from casepilot.engine.anomaly_detector import detect_anomalies

    observations = detect_anomalies(case_input, pack)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..models import (
    LEVERAGE_RANK,
    CaseInput,
    Document,
    Leverage,
    Observation,
    ObservationType,
    PracticePack,
)
from .practice_detectors import detect_practice_anomaly

logger = logging.getLogger(__name__)

MAX_OBSERVATIONS = 6

GAP_THRESHOLD_DAYS = 30
GAP_MEDIUM_DAYS = 60
GAP_HIGH_DAYS = 90

RECENT_WINDOW_DAYS = 90
COMPRESSED_MIN_EVENTS = 10
COMPRESSED_MAX_SPAN_DAYS = 30

NARRATIVE_KEY_LENGTH = 50
GOVERNANCE_KEY_LENGTH = 20

_LEVERAGE_BY_PRIORITY = {
    "CRITICAL": Leverage.CRITICAL,
    "HIGH": Leverage.HIGH,
    "MEDIUM": Leverage.MEDIUM,
    "LOW": Leverage.LOW,
}


# =============================================================================
# Timeline
# =============================================================================

@dataclass
class _DatedEntry:
    on: date
    description: str


def _dated_entries(case_input: CaseInput) -> list[_DatedEntry]:
    entries = [_DatedEntry(event.event_date, event.description) for event in case_input.timeline]
    for doc in case_input.documents:
        entries.extend(_DatedEntry(d.on, d.label or doc.name) for d in doc.extracted.dates)
    # sorted() is stable, so same-day entries keep input order
    return sorted(entries, key=lambda entry: entry.on)


def _gap_leverage(days: int) -> Leverage:
    if days > GAP_HIGH_DAYS:
        return Leverage.HIGH
    if days > GAP_MEDIUM_DAYS:
        return Leverage.MEDIUM
    return Leverage.LOW


def detect_timeline_gaps(case_input: CaseInput) -> list[Observation]:
    """
    Gaps of more than 30 days between consecutive dated events, plus a
    compressed-timeline observation when activity bunches up near the
    reference date.
    """
    entries = _dated_entries(case_input)
    observations = []

    for i in range(1, len(entries)):
        before, after = entries[i - 1], entries[i]
        days = (after.on - before.on).days
        if days <= GAP_THRESHOLD_DAYS:
            continue
        observations.append(Observation(
            id=f"timeline-gap-{i}",
            type=ObservationType.TIMELINE_ANOMALY,
            description=f"Gap of {days} days between events",
            why_unusual=f'Significant time gap between "{before.description}" and "{after.description}"',
            what_should_exist=f"Activity or documentation during this {days}-day period",
            leverage_potential=_gap_leverage(days),
            related_dates=[before.on, after.on],
        ))

    reference = case_input.reference_date()
    if reference is not None:
        recent = [e for e in entries if (reference - e.on).days <= RECENT_WINDOW_DAYS]
        if len(recent) > COMPRESSED_MIN_EVENTS:
            span = (recent[-1].on - recent[0].on).days
            if span < COMPRESSED_MAX_SPAN_DAYS:
                observations.append(Observation(
                    id="timeline-compressed",
                    type=ObservationType.TIMELINE_ANOMALY,
                    description=f"Unusually high activity: {len(recent)} events in {span} days",
                    why_unusual="Events compressed into a very short timeframe may indicate delayed documentation",
                    what_should_exist="Events spread over a longer period, or contemporaneous documentation",
                    leverage_potential=Leverage.MEDIUM,
                    related_dates=[e.on for e in recent],
                ))

    return observations


# =============================================================================
# Narrative
# =============================================================================

def detect_narrative_inconsistencies(documents: list[Document]) -> list[Observation]:
    """
    Claims sharing a normalized opening but differing in their literal text.

    Claims are each document's key issues then summary, grouped by their
    lower-cased first 50 characters.
    """
    groups: dict[str, list[tuple[str, str]]] = {}
    for doc in documents:
        for claim in doc.extracted.claims():
            key = claim.lower()[:NARRATIVE_KEY_LENGTH]
            groups.setdefault(key, []).append((claim, doc.id))

    observations = []
    for key, group in groups.items():
        if len({claim for claim, _ in group}) <= 1:
            continue
        source_ids = []
        for _, doc_id in group:
            if doc_id not in source_ids:
                source_ids.append(doc_id)
        observations.append(Observation(
            id=f"narrative-inconsistency-{len(observations) + 1}",
            type=ObservationType.INCONSISTENCY,
            description=f"Contradictory statements about: {key}",
            why_unusual="Same topic described differently across documents, may indicate an evolving narrative",
            what_should_exist="Consistent narrative across all documents",
            leverage_potential=Leverage.MEDIUM,
            source_document_ids=source_ids,
        ))
    return observations


# =============================================================================
# Evidence and Governance
# =============================================================================

def detect_evidence_gaps(documents: list[Document], pack: PracticePack) -> list[Observation]:
    """Expected evidence that no document name or extracted content matches."""
    observations = []
    for expected in pack.expected_evidence:
        patterns = [p for p in expected.detect_patterns if p]
        if any(any(p in doc.search_text for p in patterns) for doc in documents):
            continue
        when = f" ({expected.when_expected})" if expected.when_expected else ""
        observations.append(Observation(
            id=f"evidence-gap-{expected.id}",
            type=ObservationType.EVIDENCE_GAP,
            description=f"Missing expected evidence: {expected.label}",
            why_unusual=expected.if_missing_means or f"{expected.label} would normally exist in this type of matter",
            what_should_exist=f"{expected.label}{when}",
            leverage_potential=_LEVERAGE_BY_PRIORITY.get(expected.priority.value, Leverage.MEDIUM),
        ))
    return observations


def detect_governance_gaps(documents: list[Document], pack: PracticePack) -> list[Observation]:
    """Governance rules whose opening words appear nowhere in the bundle."""
    observations = []
    for index, rule in enumerate(pack.governance_rules, start=1):
        probe = rule.rule.lower()[:GOVERNANCE_KEY_LENGTH]
        if any(probe in doc.search_text for doc in documents):
            continue
        observations.append(Observation(
            id=f"governance-gap-{index}",
            type=ObservationType.GOVERNANCE_GAP,
            description=f"Potential governance gap: {rule.rule}",
            why_unusual=rule.if_violated,
            what_should_exist=f"Evidence of compliance with: {rule.rule}",
            leverage_potential=Leverage.MEDIUM,
        ))
    return observations


# =============================================================================
# Merge
# =============================================================================

def rank_observations(observations: list[Observation], limit: int = MAX_OBSERVATIONS) -> list[Observation]:
    """Stable sort by leverage descending, then truncate."""
    ranked = sorted(observations, key=lambda o: LEVERAGE_RANK[o.leverage_potential], reverse=True)
    return ranked[:limit]


def detect_anomalies(case_input: CaseInput, pack: Optional[PracticePack] = None) -> list[Observation]:
    """
    Run every detector and return the top observations.

    Args:
        case_input: Parsed case
        pack: Practice-area pack supplying expected evidence and governance
            rules; without one only timeline, narrative and practice-area
            detectors run

    Returns:
        At most MAX_OBSERVATIONS observations, highest leverage first
    """
    observations: list[Observation] = []
    observations.extend(detect_timeline_gaps(case_input))
    observations.extend(detect_narrative_inconsistencies(case_input.documents))
    if pack is not None:
        observations.extend(detect_evidence_gaps(case_input.documents, pack))
        observations.extend(detect_governance_gaps(case_input.documents, pack))

    practice = detect_practice_anomaly(case_input)
    if practice is not None:
        observations.append(practice)

    ranked = rank_observations(observations)
    if len(observations) > len(ranked):
        logger.debug("Truncated %d observations to %d", len(observations), len(ranked))
    return ranked
