"""Exception hierarchy for the health checker."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes."""

    CONFIGURATION_ERROR = "configuration_error"
    SETUP_ERROR = "setup_error"
    INTERNAL_ERROR = "internal_error"


class HealthCheckerException(Exception):
    """Base exception for the health checker."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(HealthCheckerException):
    """A target could not be built from the given kind, address or options."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class SetupError(HealthCheckerException):
    """Validation of a required target failed at registration time."""

    def __init__(self, message: str, target_type: str, target_identifier: str):
        super().__init__(
            message,
            ErrorCode.SETUP_ERROR,
            {"target_type": target_type, "target_identifier": target_identifier},
        )
        self.target_type = target_type
        self.target_identifier = target_identifier


def describe_error(error: BaseException) -> str:
    """Human-readable message for an exception, never empty."""
    return str(error) or type(error).__name__
