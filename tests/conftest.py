"""Test configuration and fixtures."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from health_checker.config.settings import HealthCheckerSettings
from health_checker.health import HealthChecker

OK_HOST = "ok.example.com"
ERROR_HOST = "error.example.com"
UNREACHABLE_HOST = "unreachable.example.com"


class FakeBroker:
    """In-memory broker client recording every call."""

    def __init__(
        self,
        name: str = "broker",
        fail_with: Exception | None = None,
        close_fails_with: Exception | None = None,
    ):
        self.name = name
        self.fail_with = fail_with
        self.close_fails_with = close_fails_with
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.close_count = 0

    def __str__(self) -> str:
        return f"amqp://guest:***@{self.name}:5672/"

    async def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if self.fail_with is not None:
            raise self.fail_with

    async def exchange_declare(self, exchange_name: str) -> None:
        await self._record("exchange_declare", exchange_name)

    async def queue_declare(self, queue_name: str) -> None:
        await self._record("queue_declare", queue_name)

    async def queue_bind(
        self, queue_name: str, exchange_name: str, routing_key: str
    ) -> None:
        await self._record("queue_bind", queue_name, exchange_name, routing_key)

    async def publish(
        self, exchange_name: str, routing_key: str, body: bytes
    ) -> None:
        await self._record("publish", exchange_name, routing_key, body)

    async def close(self) -> None:
        self.close_count += 1
        if self.close_fails_with is not None:
            raise self.close_fails_with


class FakeConnector:
    """Connector emulating a database that may lack the health table."""

    def __init__(
        self,
        database: str = "app",
        data_source: str = "db.example.com:5432",
        has_health_table: bool = True,
        fail_with: Exception | None = None,
    ):
        self._database = database
        self._data_source = data_source
        self.has_health_table = has_health_table
        self.fail_with = fail_with
        self.statements: list[tuple[str, tuple[Any, ...]]] = []

    @property
    def database(self) -> str:
        return self._database

    @property
    def data_source(self) -> str:
        return self._data_source

    async def execute(self, statement: str, *args: Any) -> None:
        self.statements.append((statement, args))
        if self.fail_with is not None:
            raise self.fail_with
        if '"Healthcheck"' in statement and not self.has_health_table:
            raise RuntimeError('relation "Healthcheck" does not exist')


def status_handler(request: httpx.Request) -> httpx.Response:
    """Route requests by host: ok -> 200, error -> 500, unreachable -> refused."""
    if request.url.host == OK_HOST:
        return httpx.Response(200, json={"status": "ok"})
    if request.url.host == ERROR_HOST:
        return httpx.Response(500, text="boom")
    raise httpx.ConnectError("Connection refused", request=request)


@pytest.fixture
def settings() -> HealthCheckerSettings:
    """Settings with a fixed client identifier."""
    return HealthCheckerSettings(client_identifier="test-app")


@pytest.fixture
def http_handler() -> Callable[[httpx.Request], httpx.Response]:
    return status_handler


@pytest.fixture
def http_client(http_handler) -> httpx.AsyncClient:
    """HTTP client served by a mock transport."""
    return httpx.AsyncClient(transport=httpx.MockTransport(http_handler))


@pytest.fixture
def health_checker(settings, http_client) -> HealthChecker:
    """Health checker wired to the mock HTTP transport."""
    return HealthChecker(settings=settings, http_client=http_client)


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def broker_factory() -> type[FakeBroker]:
    return FakeBroker


@pytest.fixture
def connector_factory() -> type[FakeConnector]:
    return FakeConnector


@pytest.fixture
def amqp_clients(monkeypatch) -> dict[str, FakeBroker]:
    """Fake brokers built from AMQP URLs, keyed by host.

    Pre-populate a host with a configured ``FakeBroker`` to control how the
    client built for that host behaves.
    """
    brokers: dict[str, FakeBroker] = {}

    def build(url: str, connect_timeout: float = 10.0) -> FakeBroker:
        host = httpx.URL(url).host
        return brokers.setdefault(host, FakeBroker(host))

    monkeypatch.setattr("health_checker.domain.models.AmqpBrokerClient", build)
    return brokers
