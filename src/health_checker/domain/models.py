"""
Targets and results of the health checker.

A target is one of three immutable variants. The setup validator and the
probe engine dispatch on the variant with ``match``, so adding a kind means
adding a dataclass here and a case in each of them.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import httpx

from health_checker.config.settings import HealthCheckerSettings, get_settings
from health_checker.domain.exceptions import ConfigurationError
from health_checker.infrastructure.database import PostgreSQLConnector, SqlConnector
from health_checker.infrastructure.messaging import AmqpBrokerClient, BrokerClient

QUERY_OPTION = "query"
SERVICE_SCHEMES = ("http", "https")


class HealthCheckTargetType(str, Enum):
    """Kinds of dependency that can be registered."""

    RABBITMQ = "rabbitmq"
    SQL_SERVER = "sql_server"
    SERVICE = "service"

    @classmethod
    def parse(cls, value: "HealthCheckTargetType | str") -> "HealthCheckTargetType":
        """Accept an enum member or its value, case-insensitively."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigurationError(
            f"Unsupported target type: {value!r}", target_type=str(value)
        )


@dataclass(frozen=True)
class MessagingTarget:
    """A message broker reached through a broker client."""

    client: BrokerClient

    @property
    def target_type(self) -> HealthCheckTargetType:
        return HealthCheckTargetType.RABBITMQ

    @property
    def identifier(self) -> str:
        return str(self.client)


@dataclass(frozen=True)
class DatabaseTarget:
    """A relational database, optionally probed with a custom statement."""

    connector: SqlConnector
    query: str | None = None

    @property
    def target_type(self) -> HealthCheckTargetType:
        return HealthCheckTargetType.SQL_SERVER

    @property
    def identifier(self) -> str:
        return f"{self.connector.database}@{self.connector.data_source}"


@dataclass(frozen=True)
class ServiceTarget:
    """An HTTP(S) endpoint."""

    address: httpx.URL

    def __post_init__(self) -> None:
        if isinstance(self.address, str):
            object.__setattr__(self, "address", httpx.URL(self.address))
        if self.address.scheme not in SERVICE_SCHEMES or not self.address.host:
            raise ConfigurationError(
                f"Invalid service address: {self.address}", address=str(self.address)
            )

    @property
    def target_type(self) -> HealthCheckTargetType:
        return HealthCheckTargetType.SERVICE

    @property
    def identifier(self) -> str:
        return str(self.address)


Target = MessagingTarget | DatabaseTarget | ServiceTarget


def _query_option(options: Mapping[str, Any] | None) -> str | None:
    if not options or options.get(QUERY_OPTION) is None:
        return None
    query = options[QUERY_OPTION]
    if not isinstance(query, str) or not query.strip():
        raise ConfigurationError(
            "The 'query' option must be a non-empty string", option=QUERY_OPTION
        )
    return query


def apply_options(target: Target, options: Mapping[str, Any] | None) -> Target:
    """Apply recognised options to a pre-built target.

    Only database targets recognise an option (``query``), and only when the
    target was built without one.
    """
    query = _query_option(options)
    if isinstance(target, DatabaseTarget) and query and target.query is None:
        return replace(target, query=query)
    return target


def build_target(
    target_type: HealthCheckTargetType | str,
    target_data: str,
    options: Mapping[str, Any] | None = None,
    settings: HealthCheckerSettings | None = None,
) -> Target:
    """Build a target from its kind and address string.

    Args:
        target_type: Kind of target, as enum member or value
        target_data: AMQP URL, PostgreSQL DSN or service URI
        options: Recognised key is ``query`` for database targets
        settings: Supplies client connect timeouts

    Returns:
        The target variant for the kind

    Raises:
        ConfigurationError: Unknown kind, malformed address or bad option
    """
    settings = settings or get_settings()
    kind = HealthCheckTargetType.parse(target_type)
    query = _query_option(options)

    match kind:
        case HealthCheckTargetType.RABBITMQ:
            client = AmqpBrokerClient(
                target_data, connect_timeout=settings.amqp_connect_timeout
            )
            return MessagingTarget(client)
        case HealthCheckTargetType.SQL_SERVER:
            connector = PostgreSQLConnector(
                target_data, connect_timeout=settings.db_connect_timeout
            )
            return DatabaseTarget(connector, query=query)
        case HealthCheckTargetType.SERVICE:
            try:
                address = httpx.URL(target_data)
            except httpx.InvalidURL as e:
                raise ConfigurationError(
                    f"Invalid service address: {e}", address=target_data
                ) from e
            return ServiceTarget(address)


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of probing one target."""

    target_type: HealthCheckTargetType
    target_identifier: str
    response_time_ms: float
    error_info: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_healthy(self) -> bool:
        return self.error_info is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "target_type": self.target_type.value,
            "target_identifier": self.target_identifier,
            "is_healthy": self.is_healthy,
            "response_time_ms": self.response_time_ms,
            "error_info": self.error_info,
            "timestamp": self.timestamp.isoformat(),
        }
