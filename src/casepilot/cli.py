"""
CasePilot CLI

Command-line runner for the strategic reasoning core.

Usage:
    casepilot plan --case case.json
    casepilot plan --case case.json --pack criminal --out plan.json --strict
    casepilot validate-pack --pack my_pack.yaml
    casepilot list-packs

Exit Codes:
    0   OK              - Command succeeded
    10  INPUT_INVALID   - Case file missing, unreadable or not a JSON object
    11  PACK_ERROR      - Pack not found or failed validation
    12  INVARIANT_FAIL  - Plan broke a structural invariant (--strict)
    20  INTERNAL_ERROR  - Unexpected internal error

The plan is printed as canonical JSON on stdout (or written to --out);
status messages go to stderr so the output can be piped.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from . import __version__
from .canon import canonical_json
from .config import configure_logging
from .engine import StrategyPlanner, check_plan_invariants
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
from .models import PracticeArea, PracticePack
from .packs import PackLoader, list_builtin_packs

logger = logging.getLogger(__name__)


# =============================================================================
# Exit Codes
# =============================================================================

class ExitCode:
    """Deterministic exit codes for pipeline integration."""
    OK = 0
    INPUT_INVALID = 10
    PACK_ERROR = 11
    INVARIANT_FAIL = 12
    INTERNAL_ERROR = 20


# =============================================================================
# Output Helpers
# =============================================================================

def print_error(text: str) -> None:
    print(f"[ERROR] {text}", file=sys.stderr)


def print_info(text: str) -> None:
    print(f"[INFO] {text}", file=sys.stderr)


def print_success(text: str) -> None:
    print(f"[OK] {text}", file=sys.stderr)


# =============================================================================
# Loading
# =============================================================================

def read_case_file(path: Path) -> dict[str, Any]:
    """
    Read a case JSON file.

    Raises:
        CaseInputError: If the file is missing, unreadable, or not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CaseInputError(
            message=f"Cannot read case file: {e}",
            details={"path": str(path)},
        )
    if not isinstance(data, dict):
        raise CaseInputError(
            message="Case file must contain a JSON object",
            details={"path": str(path), "type": type(data).__name__},
        )
    return data


def resolve_pack(loader: PackLoader, pack_arg: Optional[str]) -> Optional[PracticePack]:
    """
    A pack named on the command line: a bundled practice area or a file path.

    Returns None when no pack was named, leaving selection to the planner.
    """
    if not pack_arg:
        return None
    if pack_arg in {area.value for area in PracticeArea}:
        return loader.load_builtin(pack_arg)
    return loader.load(pack_arg)


# =============================================================================
# Commands
# =============================================================================

def cmd_plan(args: argparse.Namespace) -> int:
    """Plan a case and emit the canonical JSON plan."""
    try:
        data = read_case_file(Path(args.case))
    except CaseInputError as e:
        print_error(str(e))
        return ExitCode.INPUT_INVALID

    loader = PackLoader()
    try:
        pack = resolve_pack(loader, args.pack)
        case_input = parse_case_input(data)
        plan = StrategyPlanner(pack=pack, loader=loader).plan(case_input)
    except (PackNotFoundError, PackLoadError, PackValidationError, PackVersionMismatch) as e:
        print_error(str(e))
        return ExitCode.PACK_ERROR

    if args.strict:
        try:
            check_plan_invariants(plan)
        except InvariantViolation as e:
            print_error(str(e))
            for problem in e.details.get("problems", []):
                print(f"  [X] {problem}", file=sys.stderr)
            return ExitCode.INVARIANT_FAIL

    output = canonical_json(plan)
    if args.out:
        Path(args.out).write_text(output + "\n", encoding="utf-8")
        print_success(f"Plan written to {args.out} (fingerprint {plan.fingerprint[:12]})")
    else:
        print(output)
    return ExitCode.OK


def cmd_validate_pack(args: argparse.Namespace) -> int:
    """Validate a pack file against the pack schema."""
    pack_path = Path(args.pack)
    if not pack_path.exists():
        print_error(f"Pack file not found: {pack_path}")
        return ExitCode.INPUT_INVALID

    print_info(f"Validating: {pack_path}")
    try:
        pack = PackLoader().load(pack_path)
    except PackValidationError as e:
        errors = e.details.get("errors", [])
        print_error(f"Validation failed with {len(errors)} error(s):")
        for error in errors:
            location = ".".join(str(part) for part in error.get("loc", ()))
            print(f"  [X] {location}: {error.get('msg', '')}", file=sys.stderr)
        return ExitCode.PACK_ERROR
    except (PackLoadError, PackVersionMismatch) as e:
        print_error(str(e))
        return ExitCode.PACK_ERROR

    print_success(
        f"{pack.name} v{pack.version} ({pack.practice_area.value}): "
        f"{len(pack.checklist)} checklist items, {len(pack.expected_evidence)} expected, "
        f"{len(pack.governance_rules)} governance rules"
    )
    return ExitCode.OK


def cmd_list_packs(args: argparse.Namespace) -> int:
    """List bundled practice packs."""
    for name in list_builtin_packs():
        print(name)
    return ExitCode.OK


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="casepilot",
        description="CasePilot - deterministic litigation strategy planning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0   OK              Command succeeded
  10  INPUT_INVALID   Invalid case file
  11  PACK_ERROR      Pack not found or invalid
  12  INVARIANT_FAIL  Plan invariant violated (--strict)
  20  INTERNAL_ERROR  Unexpected internal error

Examples:
  casepilot plan --case case.json
  casepilot plan --case case.json --pack housing_disrepair --out plan.json
  casepilot validate-pack --pack my_pack.yaml
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Log level (default: CASEPILOT_LOG_LEVEL)")
    parser.add_argument("--log-json", action="store_true", default=None, help="Emit JSON log lines")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    plan_parser = subparsers.add_parser("plan", help="Build a strategy plan for a case")
    plan_parser.add_argument("--case", "-c", required=True, help="Case JSON file")
    plan_parser.add_argument("--pack", "-p", help="Practice area name or pack file (default: by case)")
    plan_parser.add_argument("--out", "-o", help="Write plan JSON to this file instead of stdout")
    plan_parser.add_argument("--strict", action="store_true", help="Fail if the plan breaks an invariant")
    plan_parser.set_defaults(func=cmd_plan)

    validate_parser = subparsers.add_parser("validate-pack", help="Validate a pack file")
    validate_parser.add_argument("--pack", "-p", required=True, help="Pack YAML or JSON file")
    validate_parser.set_defaults(func=cmd_validate_pack)

    list_parser = subparsers.add_parser("list-packs", help="List bundled practice packs")
    list_parser.set_defaults(func=cmd_list_packs)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.OK

    configure_logging(level=args.log_level, json_format=args.log_json)

    try:
        return args.func(args)
    except CasePilotError as e:
        logger.exception("Unhandled CasePilot error")
        print_error(str(e))
        return ExitCode.INTERNAL_ERROR
    except Exception as e:
        logger.exception("Internal error")
        print_error(f"Internal error: {e}")
        return ExitCode.INTERNAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
