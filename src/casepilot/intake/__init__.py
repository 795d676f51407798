"""
CasePilot Intake

Parse step at the ingestion boundary: raw extraction payloads in, typed
CaseInput out.

Usage:
    from casepilot.intake import parse_case_input

    case = parse_case_input(payload)
"""
from __future__ import annotations

from .parser import parse_case_input, parse_extracted_facts

__all__ = [
    "parse_case_input",
    "parse_extracted_facts",
]
