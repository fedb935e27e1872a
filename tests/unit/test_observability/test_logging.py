"""Tests for structured logging."""

import json
import logging

import structlog

from health_checker.config.settings import LoggingSettings, LogLevel
from health_checker.observability.logging import (
    ConsoleFormatter,
    CorrelationContext,
    JSONFormatter,
    StructuredFormatter,
    get_correlation_id,
    setup_logging_from_settings,
)
from health_checker.observability.logging.correlation import CorrelationIDProcessor


class TestFormatters:
    """Test log renderers."""

    def test_json_formatter(self):
        rendered = JSONFormatter()(
            None, "info", {"event": "Registered", "target": "http://ok/"}
        )

        payload = json.loads(rendered)
        assert payload["event"] == "Registered"
        assert payload["level"] == "INFO"
        assert payload["target"] == "http://ok/"
        assert "timestamp" in payload

    def test_console_formatter_without_colors(self):
        rendered = ConsoleFormatter(colors=False)(
            None,
            "warning",
            {"event": "Health probe failed", "logger": "probes", "error": "refused"},
        )

        assert rendered == "WARNING [probes] Health probe failed error=refused"

    def test_structured_formatter(self):
        rendered = StructuredFormatter()(
            None, "error", {"event": "Target setup failed", "targets": ["a", "b"]}
        )

        assert rendered == 'level=ERROR | message=Target setup failed | targets=["a", "b"]'


class TestCorrelation:
    """Test correlation IDs for check runs."""

    def test_context_sets_and_restores_id(self):
        assert get_correlation_id() is None

        with CorrelationContext("run-1") as context:
            assert context.correlation_id == "run-1"
            assert get_correlation_id() == "run-1"

        assert get_correlation_id() is None

    def test_processor_adds_id_inside_context(self):
        processor = CorrelationIDProcessor()

        with CorrelationContext("run-2"):
            event = processor(None, "info", {"event": "x"})

        assert event["correlation_id"] == "run-2"
        assert "correlation_id" not in processor(None, "info", {"event": "y"})


class TestSetup:
    """Test configuring logging from settings."""

    def test_setup_from_settings(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        setup_logging_from_settings(
            LoggingSettings(level=LogLevel.WARNING, format="structured")
        )
        try:
            assert structlog.is_configured()
            assert root.level == logging.WARNING
        finally:
            structlog.reset_defaults()
            root.handlers[:] = handlers
            root.setLevel(level)
