"""
CasePilot Element State Builder

Maps each legal element of the charge to a support level and its
evidence gaps.

Element states supplied upstream always win. States are synthesized only
for offence elements the caller did not supply, from two deterministic
signals:

1. Bundle coverage: documents and outstanding items whose names match the
   element's evidence patterns
2. Text markers: element-specific wording in the extracted free text
   (e.g. "poor lighting" downgrades identification)
"""
from __future__ import annotations

import logging
from typing import Optional

from ..models import (
    CaseInput,
    Document,
    ElementDefinition,
    ElementState,
    EvidenceItem,
    EvidenceRef,
    OffenceDefinition,
    SupportLevel,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Built-in Offence Definitions
# =============================================================================

BUILTIN_OFFENCES: dict[str, OffenceDefinition] = {
    "s18_oapa": OffenceDefinition(
        code="s18_oapa",
        label="Wounding / GBH with intent (s.18 OAPA 1861)",
        elements=[
            ElementDefinition("identification", "Identification of the defendant"),
            ElementDefinition("actus_reus", "Act of wounding / causing GBH"),
            ElementDefinition("injury_threshold", "Wound or really serious harm"),
            ElementDefinition("specific_intent", "Intent to cause GBH"),
            ElementDefinition("causation", "Causation / weapon mechanism"),
        ],
    ),
    "s20_oapa": OffenceDefinition(
        code="s20_oapa",
        label="Unlawful wounding / inflicting GBH (s.20 OAPA 1861)",
        elements=[
            ElementDefinition("identification", "Identification of the defendant"),
            ElementDefinition("actus_reus", "Act of wounding / inflicting GBH"),
            ElementDefinition("injury_threshold", "Wound or really serious harm"),
            ElementDefinition("recklessness", "Foresight of some harm"),
            ElementDefinition("causation", "Causation / weapon mechanism"),
        ],
    ),
    "s47_oapa": OffenceDefinition(
        code="s47_oapa",
        label="Assault occasioning ABH (s.47 OAPA 1861)",
        elements=[
            ElementDefinition("identification", "Identification of the defendant"),
            ElementDefinition("actus_reus", "Assault or battery"),
            ElementDefinition("injury", "Actual bodily harm"),
            ElementDefinition("causation", "Harm occasioned by the assault"),
        ],
    ),
}

# Name patterns linking bundle documents/outstanding items to an element
ELEMENT_EVIDENCE_PATTERNS: dict[str, tuple[str, ...]] = {
    "identification": ("identification", "cctv", "bwv", "witness", "viper"),
    "actus_reus": ("cctv", "witness", "scene"),
    "act_causation": ("cctv", "witness", "scene"),
    "injury_threshold": ("medical", "injury", "wound", "hospital"),
    "injury": ("medical", "injury", "wound", "hospital"),
    "specific_intent": ("intent", "deliberate", "targeted"),
    "recklessness": ("reckless", "aware"),
    "causation": ("medical", "mechanism", "forensic", "weapon"),
    "unlawfulness": ("unlawful", "justification"),
}

IDENTIFICATION_WEAK_MARKERS = ("poor lighting", "dark", "uncertain", "not sure", "couldn't see", "fast", "brief")
INJURY_STRONG_MARKERS = ("laceration", "fracture", "gbh", "grievous", "serious harm", "wound")
WEAPON_HEDGE_MARKERS = ("believes", "thinks", "not sure", "unclear", "didn't see")
INTENT_MARKERS = ("targeted", "sustained", "deliberate")


def resolve_offence(offence: Optional[OffenceDefinition]) -> Optional[OffenceDefinition]:
    """Fill in elements from the built-in definition when none were supplied."""
    if offence is None:
        return None
    if offence.elements:
        return offence
    builtin = BUILTIN_OFFENCES.get(offence.code)
    if builtin is None:
        return offence
    return OffenceDefinition(code=offence.code, label=offence.label or builtin.label, elements=list(builtin.elements))


# =============================================================================
# Support Assessment
# =============================================================================

def _text_support(element_id: str, text: str) -> Optional[SupportLevel]:
    """Element-specific reading of the free text, or None if silent."""
    if element_id == "identification":
        if any(marker in text for marker in IDENTIFICATION_WEAK_MARKERS):
            return SupportLevel.WEAK
        return None

    if element_id in ("injury_threshold", "injury", "injury_classification"):
        if any(marker in text for marker in INJURY_STRONG_MARKERS):
            return SupportLevel.STRONG
        if "injury" in text or "harm" in text:
            return SupportLevel.SOME
        return None

    if "weapon" in element_id or element_id == "causation":
        if any(marker in text for marker in WEAPON_HEDGE_MARKERS):
            return SupportLevel.WEAK
        if "weapon" in text:
            return SupportLevel.SOME
        return None

    if element_id == "specific_intent":
        if any(marker in text for marker in INTENT_MARKERS):
            return SupportLevel.SOME
        return SupportLevel.WEAK

    if element_id == "recklessness":
        if "reckless" in text or "aware" in text:
            return SupportLevel.SOME
        return None

    return None


def assess_element_support(
    element_id: str,
    documents: list[Document],
    missing_items: list[EvidenceItem],
    text: str,
) -> tuple[SupportLevel, list[EvidenceRef]]:
    """
    Combine bundle coverage and text markers into a support level.

    Returns:
        (support, gaps) where gaps lists outstanding items for the element
    """
    patterns = ELEMENT_EVIDENCE_PATTERNS.get(element_id, (element_id.lower(),))

    present = [
        doc for doc in documents
        if any(p in f"{doc.name} {doc.type or ''}".lower() for p in patterns)
    ]
    outstanding = [
        item for item in missing_items
        if any(p in f"{item.id} {item.name}".lower() for p in patterns)
    ]
    gaps = [EvidenceRef(evidence_id=item.id, label=item.name, note="outstanding") for item in outstanding]

    from_text = _text_support(element_id, text)

    if present and not outstanding:
        support = SupportLevel.SOME if from_text == SupportLevel.WEAK else SupportLevel.STRONG
    elif present and outstanding:
        support = from_text or SupportLevel.SOME
    elif outstanding:
        support = from_text or SupportLevel.WEAK
    else:
        support = from_text or SupportLevel.NONE

    return support, gaps


def build_element_states(case_input: CaseInput, missing_items: list[EvidenceItem]) -> list[ElementState]:
    """
    Element states for the case.

    Supplied states are returned unchanged and in supplied order; any
    offence element without a supplied state is appended, synthesized
    from the bundle.
    """
    states = list(case_input.elements)
    offence = resolve_offence(case_input.offence)
    if offence is None:
        return states

    supplied = {state.id for state in states}
    text = case_input.all_text()

    for definition in offence.elements:
        if definition.id in supplied:
            continue
        support, gaps = assess_element_support(definition.id, case_input.documents, missing_items, text)
        logger.debug("Synthesized element %s support=%s", definition.id, support.value)
        states.append(ElementState(id=definition.id, label=definition.label, support=support, gaps=gaps))

    return states
