# tests/unit/test_utils.py
"""Tests for structured logging helpers."""

import json
import logging

from freezegun import freeze_time

from src.utils import ERROR_MESSAGE_MAX_LENGTH, get_iso_timestamp, log_error, log_op, truncate_error

# =============================================================================
# get_iso_timestamp
# =============================================================================


class TestGetIsoTimestamp:
    @freeze_time("2026-03-04 05:06:07")
    def test_utc_with_z_suffix(self):
        assert get_iso_timestamp() == "2026-03-04T05:06:07Z"


# =============================================================================
# log_op
# =============================================================================


class TestLogOp:
    """Tests for log_op()."""

    def test_returns_structured_json(self, caplog):
        """Logs a structured JSON dict with event_type and timestamp."""
        with caplog.at_level(logging.INFO, logger="drawio_sanitizer"):
            log_op("test_event", key="value", number=42)
        assert len(caplog.records) == 1
        output = json.loads(caplog.records[0].message)
        assert output["event_type"] == "test_event"
        assert output["key"] == "value"
        assert output["number"] == 42
        assert "timestamp" in output

    def test_logs_at_info(self, caplog):
        with caplog.at_level(logging.INFO, logger="drawio_sanitizer"):
            log_op("info_event")
        assert caplog.records[0].levelno == logging.INFO


# =============================================================================
# log_error
# =============================================================================


class TestLogError:
    """Tests for log_error()."""

    def test_returns_structured_error_dict(self, caplog):
        """Logs error type and truncated message."""
        with caplog.at_level(logging.INFO, logger="drawio_sanitizer"):
            log_error("test_error", ValueError("bad value"), extra="info")
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.ERROR
        output = json.loads(caplog.records[0].message)
        assert output["event_type"] == "test_error"
        assert output["error_type"] == "ValueError"
        assert output["error"] == "bad value"
        assert output["extra"] == "info"

    def test_truncates_long_error(self, caplog):
        """Truncates long exception messages."""
        with caplog.at_level(logging.INFO, logger="drawio_sanitizer"):
            log_error("long_error", RuntimeError("x" * 500))
        output = json.loads(caplog.records[0].message)
        assert len(output["error"]) == ERROR_MESSAGE_MAX_LENGTH
        assert output["error"].endswith("...")


# =============================================================================
# truncate_error
# =============================================================================


class TestTruncateError:
    def test_short_message_unchanged(self):
        assert truncate_error("short") == "short"

    def test_exception_converted(self):
        assert truncate_error(OSError("disk full")) == "disk full"

    def test_custom_length(self):
        assert truncate_error("abcdefghij", max_length=6) == "abc..."

    def test_exact_length_unchanged(self):
        assert truncate_error("abcdef", max_length=6) == "abcdef"
