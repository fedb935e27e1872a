"""Tests for configuration management."""

import sys
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from health_checker.config.settings import (
    HealthCheckerSettings,
    LoggingSettings,
    LogLevel,
    get_settings,
)


class TestHealthCheckerSettings:
    """Test health checker settings."""

    def test_defaults(self):
        settings = HealthCheckerSettings(client_identifier="svc")

        assert settings.exchange_name == "health"
        assert settings.routing_key == "check"
        assert settings.queue_name == "health.svc"
        assert settings.table_name == "Healthcheck"
        assert settings.probe_timeout is None

    def test_client_identifier_defaults_to_program_name(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["/opt/app/bin/billing-worker.py"])

        assert HealthCheckerSettings().client_identifier == "billing-worker"

    def test_client_identifier_without_program_name(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", [""])

        assert HealthCheckerSettings().client_identifier == "python"

    def test_client_identifier_for_package_run_as_module(self, monkeypatch):
        """``python -m billing`` is identified as ``billing``, not ``__main__``."""
        monkeypatch.setattr(sys, "argv", ["/opt/app/billing/__main__.py"])
        monkeypatch.setitem(
            sys.modules,
            "__main__",
            SimpleNamespace(__spec__=SimpleNamespace(name="billing.__main__")),
        )

        assert HealthCheckerSettings().client_identifier == "billing"

    def test_client_identifier_for_main_file_without_module_spec(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["/opt/app/billing/__main__.py"])
        monkeypatch.setitem(sys.modules, "__main__", SimpleNamespace(__spec__=None))

        assert HealthCheckerSettings().client_identifier == "billing"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("HEALTH_EXCHANGE_NAME", "probes")
        monkeypatch.setenv("HEALTH_CLIENT_IDENTIFIER", "api")
        monkeypatch.setenv("HEALTH_PROBE_TIMEOUT", "2.5")

        settings = HealthCheckerSettings()

        assert settings.exchange_name == "probes"
        assert settings.queue_name == "health.api"
        assert settings.probe_timeout == 2.5

    def test_statements(self):
        settings = HealthCheckerSettings(
            table_name="Probe", client_identifier_column="Client"
        )

        assert settings.validation_statement == 'SELECT 1 FROM "Probe" WHERE 1 = 0'
        assert (
            settings.probe_statement == 'INSERT INTO "Probe" ("Client") VALUES ($1)'
        )

    @pytest.mark.parametrize(
        "overrides",
        [
            {"exchange_name": " "},
            {"client_identifier": ""},
            {"table_name": 'Health"; DROP TABLE x; --'},
            {"client_identifier_column": ""},
            {"probe_timeout": 0},
        ],
    )
    def test_invalid_values_are_rejected(self, overrides):
        with pytest.raises(ValidationError):
            HealthCheckerSettings(**overrides)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestLoggingSettings:
    """Test logging settings."""

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FORMAT", "console")

        settings = LoggingSettings()

        assert settings.level == LogLevel.DEBUG
        assert settings.format == "console"
