"""
Tests for canonical JSON, exceptions and logging configuration.
"""
import json
import logging
from datetime import date

from casepilot.canon import canonical_json, content_hash, content_hash_short
from casepilot.config import JSONFormatter, configure_logging
from casepilot.exceptions import CasePilotError, InvariantViolation, PackNotFoundError
from casepilot.models import Leverage

from tests.conftest import make_observation


class TestCanonicalJson:
    """Tests for canonical serialization and hashing."""

    def test_sorted_compact(self):
        assert canonical_json({"b": 1, "a": 2}) == '{"a":2,"b":1}'

    def test_dataclasses_enums_dates(self):
        obs = make_observation(leverage=Leverage.HIGH, related_dates=[date(2024, 1, 5)])
        data = json.loads(canonical_json(obs))

        assert data["leverage_potential"] == "HIGH"
        assert data["related_dates"] == ["2024-01-05"]

    def test_sets_are_sorted(self):
        assert canonical_json({"ids": {"b", "a"}}) == '{"ids":["a","b"]}'

    def test_hash_is_stable(self):
        assert content_hash({"a": 1, "b": 2}) == content_hash({"b": 2, "a": 1})
        assert len(content_hash({})) == 64
        assert content_hash_short({}) == content_hash({})[:12]


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_str_and_dict(self):
        error = InvariantViolation(message="1 plan invariant(s) violated", details={"problems": ["x"]}, case_id="C1")

        assert str(error) == "[CP_INVARIANT_VIOLATION] 1 plan invariant(s) violated (case: C1)"
        assert error.to_dict() == {
            "code": "CP_INVARIANT_VIOLATION",
            "message": "1 plan invariant(s) violated",
            "details": {"problems": ["x"]},
            "case_id": "C1",
        }

    def test_hierarchy(self):
        error = PackNotFoundError(message="No practice pack for 'other'")

        assert isinstance(error, CasePilotError)
        assert isinstance(error, Exception)
        assert error.to_dict() == {"code": "CP_PACK_NOT_FOUND", "message": "No practice pack for 'other'"}


class TestLogging:
    """Tests for logging configuration."""

    def test_json_formatter_extra_fields(self):
        record = logging.LogRecord("casepilot.engine", logging.INFO, __file__, 1, "Plan built", None, None)
        record.case_id = "C1"
        record.component = "planner"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "Plan built"
        assert entry["level"] == "INFO"
        assert entry["case_id"] == "C1"
        assert entry["component"] == "planner"
        assert "fingerprint_short" not in entry

    def test_configure_logging_single_handler(self):
        configure_logging(level="DEBUG", json_format=True)
        logger = configure_logging(level="WARNING", json_format=False)

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
