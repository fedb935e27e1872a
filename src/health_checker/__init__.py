"""Concurrent health checks for message brokers, databases and HTTP services."""

from health_checker.config.settings import HealthCheckerSettings, get_settings
from health_checker.domain.exceptions import (
    ConfigurationError,
    ErrorCode,
    HealthCheckerException,
    SetupError,
)
from health_checker.domain.models import (
    DatabaseTarget,
    HealthCheckResult,
    HealthCheckTargetType,
    MessagingTarget,
    ServiceTarget,
    Target,
    build_target,
)
from health_checker.health import (
    HealthChecker,
    create_health_checker,
    create_health_endpoints,
    summarize,
)
from health_checker.infrastructure.database import PostgreSQLConnector, SqlConnector
from health_checker.infrastructure.messaging import AmqpBrokerClient, BrokerClient

__version__ = "0.1.0"

__all__ = [
    "HealthChecker",
    "create_health_checker",
    "create_health_endpoints",
    "summarize",
    "HealthCheckerSettings",
    "get_settings",
    "HealthCheckTargetType",
    "Target",
    "MessagingTarget",
    "DatabaseTarget",
    "ServiceTarget",
    "HealthCheckResult",
    "build_target",
    "AmqpBrokerClient",
    "BrokerClient",
    "PostgreSQLConnector",
    "SqlConnector",
    "HealthCheckerException",
    "ConfigurationError",
    "SetupError",
    "ErrorCode",
]
