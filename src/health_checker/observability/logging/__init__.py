"""Structured logging configuration and utilities."""

from .config import LogFormat, get_logger, setup_logging, setup_logging_from_settings
from .correlation import CorrelationContext, get_correlation_id, set_correlation_id
from .formatters import ConsoleFormatter, JSONFormatter, StructuredFormatter

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "LogFormat",
    "get_logger",
    "JSONFormatter",
    "ConsoleFormatter",
    "StructuredFormatter",
    "CorrelationContext",
    "get_correlation_id",
    "set_correlation_id",
]
