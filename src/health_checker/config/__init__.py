"""Configuration management."""

from .settings import HealthCheckerSettings, LoggingSettings, LogLevel, get_settings

__all__ = ["HealthCheckerSettings", "LoggingSettings", "LogLevel", "get_settings"]
