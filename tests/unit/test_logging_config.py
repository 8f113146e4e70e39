"""
Unit tests for logging setup.
"""

import json
import logging
import sys

from src.utils.logging_config import (
    StructuredJSONFormatter,
    configure_logging,
    json_logging_enabled
)
from src.utils.tick_context import TickContext, tick_id_filter


def make_record(msg="Pushed 2 samples", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord("src.monitoring.metrics", level, __file__, 42, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredJSONFormatter:
    """Test the JSON formatter."""

    def test_formats_core_fields(self):
        record = make_record()
        tick_id_filter(record)

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "src.monitoring.metrics"
        assert data["message"] == "Pushed 2 samples"
        assert data["line"] == 42
        assert data["tick_id"] == "-"
        assert "timestamp" in data

    def test_includes_tick_id(self):
        record = make_record()
        with TickContext("feed0001"):
            tick_id_filter(record)

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["tick_id"] == "feed0001"

    def test_includes_extra_fields(self):
        record = make_record(account="alice", duration=0.25, samples=2)

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["account"] == "alice"
        assert data["duration_seconds"] == 0.25
        assert data["samples"] == 2
        assert "reward" not in data

    def test_includes_exception(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(StructuredJSONFormatter().format(record))

        assert "ValueError: bad value" in data["exception"]


class TestConfigureLogging:
    """Test logger configuration."""

    def test_info_level_by_default(self):
        logger = configure_logging(json_logging=False)

        assert logger.name == "src"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_verbose_sets_debug(self):
        logger = configure_logging(verbose=True, json_logging=False)

        assert logger.level == logging.DEBUG

    def test_json_logging_adds_handler(self):
        logger = configure_logging(json_logging=True)

        assert len(logger.handlers) == 2
        assert isinstance(logger.handlers[1].formatter, StructuredJSONFormatter)

    def test_reconfiguring_replaces_handlers(self):
        configure_logging(json_logging=False)
        logger = configure_logging(json_logging=False)

        assert len(logger.handlers) == 1

    def test_handlers_carry_tick_filter(self):
        logger = configure_logging(json_logging=True)

        for handler in logger.handlers:
            assert tick_id_filter in handler.filters

    def test_json_logging_env_var(self, monkeypatch):
        monkeypatch.setenv("JSON_LOGGING", "true")
        assert json_logging_enabled() is True

        monkeypatch.setenv("JSON_LOGGING", "false")
        assert json_logging_enabled() is False

        monkeypatch.delenv("JSON_LOGGING")
        assert json_logging_enabled() is False
