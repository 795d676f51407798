"""
CasePilot Configuration

Environment-driven settings and logging setup.

Environment variables:
    CASEPILOT_LOG_LEVEL   Logging level for the casepilot logger (default INFO)
    CASEPILOT_LOG_FORMAT  "json" for structured logs, "text" otherwise
    CASEPILOT_PACKS_DIR   Directory of practice packs (default: bundled packs)

The library never touches the root logger. Call configure_logging() from
an application entry point (the CLI does).
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# =============================================================================
# Environment Configuration
# =============================================================================

CASEPILOT_LOG_LEVEL = os.getenv("CASEPILOT_LOG_LEVEL", "INFO")
CASEPILOT_LOG_FORMAT = os.getenv("CASEPILOT_LOG_FORMAT", "text").lower()

BUILTIN_PACKS_DIR = Path(__file__).parent / "packs" / "data"
CASEPILOT_PACKS_DIR = Path(os.getenv("CASEPILOT_PACKS_DIR", str(BUILTIN_PACKS_DIR)))

LOGGER_NAME = "casepilot"


# =============================================================================
# Logging
# =============================================================================

class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Add extra fields if present
        if hasattr(record, "case_id"):
            log_entry["case_id"] = record.case_id
        if hasattr(record, "component"):
            log_entry["component"] = record.component
        if hasattr(record, "fingerprint_short"):
            log_entry["fingerprint_short"] = record.fingerprint_short
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> logging.Logger:
    """
    Attach a single stream handler to the casepilot logger.

    Args:
        level: Level name; defaults to CASEPILOT_LOG_LEVEL
        json_format: Use JSONFormatter; defaults to CASEPILOT_LOG_FORMAT == "json"

    Returns:
        The configured casepilot logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, (level or CASEPILOT_LOG_LEVEL).upper(), logging.INFO))

    if json_format is None:
        json_format = CASEPILOT_LOG_FORMAT == "json"

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
