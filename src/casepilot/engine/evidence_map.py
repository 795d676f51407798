"""
CasePilot Evidence Map Builder

Classifies bundle documents against a practice-area checklist.

Matching is a lower-case substring test of each requirement's
detect_patterns against the document name and type. Extracted content is
deliberately not consulted: presence is only asserted when the bundle
visibly contains the document.
"""
from __future__ import annotations

from typing import Iterable

from ..models import (
    CategoryCoverage,
    ChecklistItem,
    ChecklistMatch,
    Document,
    EvidenceMap,
)


def _document_label(doc: Document) -> str:
    return f"{doc.name} {doc.type or ''}".strip().lower()


def matches_patterns(text: str, patterns: Iterable[str]) -> bool:
    """True if any pattern occurs in text (both compared lower-case)."""
    lowered = text.lower()
    return any(pattern.lower() in lowered for pattern in patterns if pattern)


def build_evidence_map(documents: list[Document], checklist: list[ChecklistItem]) -> EvidenceMap:
    """
    Build the evidence map for a bundle.

    Args:
        documents: Bundle documents in supplied order
        checklist: Requirements in pack order

    Returns:
        EvidenceMap whose matches follow checklist order and whose
        coverage lists categories in first-seen order
    """
    labels = [(doc.id, _document_label(doc)) for doc in documents or []]

    matches: list[ChecklistMatch] = []
    coverage: dict[str, CategoryCoverage] = {}

    for item in checklist or []:
        doc_ids = [doc_id for doc_id, label in labels if matches_patterns(label, item.detect_patterns)]
        matches.append(ChecklistMatch(item=item, document_ids=doc_ids))

        entry = coverage.setdefault(item.category, CategoryCoverage(category=item.category))
        entry.total += 1
        if doc_ids:
            entry.present += 1

    return EvidenceMap(matches=matches, coverage=list(coverage.values()))
