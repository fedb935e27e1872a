"""
PostgreSQL connector used by database targets.

The connector holds connection configuration only. Every statement runs on a
fresh connection that is closed afterwards, so no connection stays open
between probes.
"""

from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

import asyncpg

from health_checker.domain.exceptions import ConfigurationError
from health_checker.observability.logging import get_logger

POSTGRES_SCHEMES = ("postgres", "postgresql")
DEFAULT_PORT = 5432


@runtime_checkable
class SqlConnector(Protocol):
    """Open a connection, run one statement, close the connection."""

    @property
    def database(self) -> str:
        """Database name."""
        ...

    @property
    def data_source(self) -> str:
        """Server the database lives on."""
        ...

    async def execute(self, statement: str, *args: Any) -> None:
        """Execute a statement on a fresh connection."""
        ...


class PostgreSQLConnector:
    """asyncpg backed connector built from a ``postgresql://`` DSN."""

    def __init__(self, dsn: str, connect_timeout: float = 10.0):
        parts = urlsplit(dsn)
        if parts.scheme not in POSTGRES_SCHEMES or not parts.hostname:
            raise ConfigurationError(
                "Invalid PostgreSQL connection string", scheme=parts.scheme
            )

        self.dsn = dsn
        self.connect_timeout = connect_timeout
        self._database = parts.path.lstrip("/") or parts.username or "postgres"
        port = parts.port or DEFAULT_PORT
        self._data_source = f"{parts.hostname}:{port}"
        self.logger = get_logger(__name__)

    @property
    def database(self) -> str:
        return self._database

    @property
    def data_source(self) -> str:
        return self._data_source

    def __str__(self) -> str:
        return f"{self.database}@{self.data_source}"

    def __repr__(self) -> str:
        return f"PostgreSQLConnector({str(self)!r})"

    async def execute(self, statement: str, *args: Any) -> None:
        """Execute a statement on a fresh connection."""
        connection = await asyncpg.connect(self.dsn, timeout=self.connect_timeout)
        try:
            status = await connection.execute(statement, *args)
            self.logger.debug("Executed statement", database=str(self), status=status)
        finally:
            await connection.close()
