"""Logging configuration and setup."""

import logging
import sys
from enum import Enum

import structlog
from structlog.stdlib import LoggerFactory

from health_checker.config.settings import LoggingSettings

from .correlation import CorrelationIDProcessor
from .formatters import ConsoleFormatter, JSONFormatter, StructuredFormatter


class LogFormat(str, Enum):
    """Logging formats."""

    JSON = "json"
    CONSOLE = "console"
    STRUCTURED = "structured"


def setup_logging(
    level: str = "INFO",
    format_type: LogFormat = LogFormat.JSON,
    log_file: str | None = None,
    enable_correlation: bool = True,
    enable_colors: bool = True,
    include_timestamps: bool = True,
) -> None:
    """Setup structured logging configuration."""

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=[
            (
                logging.StreamHandler(sys.stdout)
                if not log_file
                else logging.FileHandler(log_file)
            )
        ],
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if enable_correlation:
        processors.append(CorrelationIDProcessor())

    if include_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="ISO"))

    if format_type == LogFormat.JSON:
        processors.append(JSONFormatter())
    elif format_type == LogFormat.CONSOLE:
        processors.append(ConsoleFormatter(colors=enable_colors))
    elif format_type == LogFormat.STRUCTURED:
        processors.append(StructuredFormatter())

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: LoggingSettings) -> None:
    """Setup logging from environment-driven settings."""
    setup_logging(
        level=settings.level.value,
        format_type=LogFormat(settings.format.lower()),
        log_file=settings.file,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    logger = structlog.get_logger(name)
    return logger  # type: ignore[no-any-return]
