"""
Configuration for the health checker.

Settings are read from the environment (and an optional ``.env`` file) with
pydantic-settings, so the well-known broker and database names used by the
probes can be changed per deployment without code changes.
"""

import sys
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_client_identifier() -> str:
    """Name of the running program, used to namespace queues and probe rows.

    Under ``python -m package`` the script is ``package/__main__.py``, so the
    package name is used instead of ``__main__``.
    """
    if not sys.argv or not sys.argv[0]:
        return "python"

    program = Path(sys.argv[0])
    if program.stem != "__main__":
        return program.stem or "python"

    main_spec = getattr(sys.modules.get("__main__"), "__spec__", None)
    if main_spec is not None and main_spec.name:
        return main_spec.name.removesuffix(".__main__")
    return program.parent.name or "python"



class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: str = "json"
    file: str | None = None


class HealthCheckerSettings(BaseSettings):
    """Health checker configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_", env_file=".env", extra="ignore"
    )

    # Messaging infrastructure
    exchange_name: str = "health"
    queue_prefix: str = "health"
    routing_key: str = "check"
    amqp_connect_timeout: float = 10.0

    # Database schema
    table_name: str = "Healthcheck"
    client_identifier_column: str = "ClientIdentifier"
    db_connect_timeout: float = 10.0

    # HTTP client
    http_timeout: float = 10.0
    http_follow_redirects: bool = True

    # Per-probe deadline in seconds, None leaves it to the client timeouts
    probe_timeout: float | None = None

    client_identifier: str = Field(default_factory=_default_client_identifier)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator(
        "exchange_name", "queue_prefix", "routing_key", "client_identifier"
    )
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value must not be empty")
        return v

    @field_validator("table_name", "client_identifier_column")
    @classmethod
    def validate_sql_identifier(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("SQL identifier must not be empty")
        if '"' in v:
            raise ValueError("SQL identifier must not contain double quotes")
        return v

    @field_validator("probe_timeout")
    @classmethod
    def validate_probe_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("Probe timeout must be positive")
        return v

    @property
    def queue_name(self) -> str:
        """Per-process queue bound to the health exchange."""
        return f"{self.queue_prefix}.{self.client_identifier}"

    @property
    def validation_statement(self) -> str:
        """Read-only statement proving the schema exists without reading rows."""
        return f'SELECT 1 FROM "{self.table_name}" WHERE 1 = 0'

    @property
    def probe_statement(self) -> str:
        """Write statement recording this process in the health table."""
        return (
            f'INSERT INTO "{self.table_name}" ("{self.client_identifier_column}") '
            "VALUES ($1)"
        )


@lru_cache
def get_settings() -> HealthCheckerSettings:
    """Get health checker settings from the environment."""
    return HealthCheckerSettings()
