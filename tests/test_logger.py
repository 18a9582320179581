"""Tests for the JSON logger."""

import json
import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from actiongram.core.logger import ActiongramLogger, _JsonFormatter


def make_record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="actiongram", level=logging.INFO, pathname=__file__, lineno=1,
        msg=msg, args=(), exc_info=None,
    )
    record.__dict__.update(extra)
    return record


class TestJsonFormatter:
    """Validate the single-line JSON output."""

    def test_standard_fields(self) -> None:
        entry = json.loads(_JsonFormatter().format(make_record("Polling started")))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "actiongram"
        assert entry["message"] == "Polling started"

    def test_extra_merged(self) -> None:
        entry = json.loads(_JsonFormatter().format(make_record("Update received", update_id=7, offset=8)))
        assert entry["update_id"] == 7
        assert entry["offset"] == 8

    def test_extra_does_not_override_standard_fields(self) -> None:
        entry = json.loads(_JsonFormatter().format(make_record("hi", level="custom")))
        assert entry["level"] == "INFO"


class TestActiongramLogger:
    """Validate the shared logger."""

    def test_singleton(self) -> None:
        assert ActiongramLogger.get_logger() is ActiongramLogger.get_logger()
        assert ActiongramLogger.get_logger().name == "actiongram"

    def test_set_level(self) -> None:
        logger = ActiongramLogger.get_logger()
        previous = logger.level
        try:
            ActiongramLogger.set_level("DEBUG")
            assert logger.level == logging.DEBUG
            assert all(handler.level == logging.DEBUG for handler in logger.handlers)
        finally:
            ActiongramLogger.set_level(previous)
