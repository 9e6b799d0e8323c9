"""Tests for structured compliance logging."""

from __future__ import annotations

import json
import logging

import pytest

from semconv_checker.logger import (
    EVENTS_LOGGER_NAME,
    ComplianceLogger,
    JsonLineFormatter,
    configure_logging,
)
from semconv_checker.types import Section


@pytest.fixture
def entries(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=EVENTS_LOGGER_NAME)

    def _entries():
        return [
            (record.levelno, json.loads(record.getMessage()))
            for record in caplog.records
            if record.name == EVENTS_LOGGER_NAME
        ]

    return _entries


class TestComplianceLogger:
    def test_version_mismatch(self, entries):
        ComplianceLogger().version_mismatch(Section.RESOURCE, version="", expected="v1")
        [(level, entry)] = entries()
        assert level == logging.INFO
        assert entry["event"] == "version_mismatch"
        assert entry["type"] == "metrics"
        assert entry["section"] == "resource"
        assert entry["version"] == ""
        assert entry["expected"] == "v1"
        assert "scope.name" not in entry
        assert "timestamp" in entry

    def test_attributes_splits_missing_and_extra(self, entries):
        ComplianceLogger().attributes(
            Section.METRIC, ["a"], ["b", "c"], scope_name="app", name="m"
        )
        (missing_level, missing), (extra_level, extra) = entries()
        assert missing_level == logging.WARNING
        assert missing["event"] == "missing_attributes"
        assert missing["missing"] == ["a"]
        assert extra_level == logging.INFO
        assert extra["extra"] == ["b", "c"]
        assert extra["scope.name"] == "app"
        assert extra["name"] == "m"

    def test_attributes_nothing_to_report(self, entries):
        ComplianceLogger().attributes(Section.RESOURCE, [], [])
        assert entries() == []

    def test_unsupported_metric_is_warning(self, entries):
        ComplianceLogger().unsupported_metric("h", shape="summary")
        [(level, entry)] = entries()
        assert level == logging.WARNING
        assert entry["shape"] == "summary"
        assert entry["section"] == "metric"

    def test_export_checked_only_at_debug(self, caplog):
        caplog.set_level(logging.INFO, logger=EVENTS_LOGGER_NAME)
        ComplianceLogger().export_checked(1, ["a"])
        assert not [r for r in caplog.records if r.name == EVENTS_LOGGER_NAME]

    def test_custom_signal(self, entries):
        ComplianceLogger(signal="traces").unmatched_metric("x")
        [(_, entry)] = entries()
        assert entry["type"] == "traces"


class TestConfigureLogging:
    def test_json_format_handler(self):
        configure_logging("debug", "json")
        package_logger = logging.getLogger("semconv_checker")
        handlers = [h for h in package_logger.handlers if getattr(h, "_semconv_checker", False)]
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JsonLineFormatter)
        assert package_logger.level == logging.DEBUG

    def test_reconfigure_replaces_handler(self):
        configure_logging("info", "json")
        configure_logging("warning", "text")
        package_logger = logging.getLogger("semconv_checker")
        handlers = [h for h in package_logger.handlers if getattr(h, "_semconv_checker", False)]
        assert len(handlers) == 1
        assert not isinstance(handlers[0].formatter, JsonLineFormatter)

    def test_formatter_wraps_diagnostics(self):
        record = logging.LogRecord(
            "semconv_checker.server.app", logging.INFO, __file__, 1, "listening on %d", (4317,), None
        )
        entry = json.loads(JsonLineFormatter().format(record))
        assert entry["message"] == "listening on 4317"
        assert entry["logger"] == "semconv_checker.server.app"
        assert entry["level"] == "info"

    def test_formatter_passes_events_through(self):
        line = json.dumps({"event": "unmatched_metric"})
        record = logging.LogRecord(EVENTS_LOGGER_NAME, logging.INFO, __file__, 1, line, (), None)
        assert JsonLineFormatter().format(record) == line
