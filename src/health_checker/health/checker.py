"""Target registry and concurrent health check for registered dependencies."""

import asyncio
import itertools
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from health_checker.config.settings import HealthCheckerSettings, get_settings
from health_checker.domain.exceptions import ConfigurationError
from health_checker.domain.models import (
    DatabaseTarget,
    HealthCheckResult,
    HealthCheckTargetType,
    MessagingTarget,
    ServiceTarget,
    Target,
    apply_options,
    build_target,
)
from health_checker.infrastructure.messaging import AmqpBrokerClient
from health_checker.observability.logging import CorrelationContext, get_logger

from .probes import ProbeEngine
from .validator import SetupValidator


class HealthChecker:
    """Registry of dependencies and entry point for health checks.

    Targets are kept in one ordered list per kind. Registration is not
    synchronised against itself or against :meth:`check`; register every
    target during start-up and only then serve checks.
    """

    def __init__(
        self,
        settings: HealthCheckerSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=self.settings.http_timeout,
            follow_redirects=self.settings.http_follow_redirects,
        )
        self.probes = ProbeEngine(self.settings, self.http_client)
        self.validator = SetupValidator(self.settings, self.probes)
        self.logger = get_logger(__name__)

        self._messaging_targets: list[MessagingTarget] = []
        self._database_targets: list[DatabaseTarget] = []
        self._service_targets: list[ServiceTarget] = []
        self._owned_brokers: list[AmqpBrokerClient] = []

    async def __aenter__(self) -> "HealthChecker":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    @property
    def messaging_targets(self) -> tuple[MessagingTarget, ...]:
        return tuple(self._messaging_targets)

    @property
    def database_targets(self) -> tuple[DatabaseTarget, ...]:
        return tuple(self._database_targets)

    @property
    def service_targets(self) -> tuple[ServiceTarget, ...]:
        return tuple(self._service_targets)

    @property
    def target_count(self) -> int:
        return (
            len(self._messaging_targets)
            + len(self._database_targets)
            + len(self._service_targets)
        )

    async def register(
        self,
        target: Target | HealthCheckTargetType | str,
        target_data: str | None = None,
        required: bool = True,
        options: Mapping[str, Any] | None = None,
    ) -> "HealthChecker":
        """Register a target, or build one from its kind and address.

        A required target is validated first; if validation fails the
        registry is left untouched. A broker client built here from an
        address is closed again on failure, and by :meth:`aclose` otherwise.

        Args:
            target: Target to register, or the kind of target to build
            target_data: AMQP URL, PostgreSQL DSN or service URI, when
                ``target`` is a kind
            required: Validate the target before registering it
            options: Recognised key is ``query`` for database targets

        Returns:
            This health checker, for chaining

        Raises:
            SetupError: A required target failed validation
            ConfigurationError: Unknown kind, malformed address or option
        """
        if not isinstance(target, (HealthCheckTargetType, str)):
            await self._add(apply_options(target, options), required)
            return self

        kind = HealthCheckTargetType.parse(target)
        if target_data is None:
            raise ConfigurationError(
                f"An address is required to register a {kind.value} target",
                target_type=kind.value,
            )
        built = build_target(kind, target_data, options, self.settings)
        try:
            await self._add(built, required)
        except Exception:
            if isinstance(built, MessagingTarget):
                await built.client.close()
            raise

        if isinstance(built, MessagingTarget):
            self._owned_brokers.append(built.client)  # type: ignore[arg-type]
        return self

    async def _add(self, target: Target, required: bool) -> None:
        if required:
            await self.validator.validate(target)

        match target:
            case MessagingTarget():
                self._messaging_targets.append(target)
            case DatabaseTarget():
                self._database_targets.append(target)
            case ServiceTarget():
                self._service_targets.append(target)
            case _:
                raise TypeError(f"Unsupported target: {target!r}")

        self.logger.info(
            "Registered health check target",
            target_type=target.target_type.value,
            target=target.identifier,
            required=required,
        )

    async def check(self, timeout: float | None = None) -> list[HealthCheckResult]:
        """Probe every registered target concurrently.

        Results come back grouped by kind (messaging, database, service),
        each group in registration order.

        Args:
            timeout: Per-probe deadline in seconds, overrides settings

        Returns:
            One result per registered target
        """
        timeout = timeout if timeout is not None else self.settings.probe_timeout

        with CorrelationContext():
            per_kind: Sequence[list[HealthCheckResult]] = await asyncio.gather(
                self.probes.probe_all(self.messaging_targets, timeout),
                self.probes.probe_all(self.database_targets, timeout),
                self.probes.probe_all(self.service_targets, timeout),
            )
            results = list(itertools.chain.from_iterable(per_kind))

            summary = summarize(results)
            self.logger.info(
                "Health check completed",
                total=summary["total_targets"],
                unhealthy=summary["unhealthy_targets"],
            )

        return results

    async def aclose(self) -> None:
        """Release the HTTP client and brokers this checker created."""
        try:
            for broker in self._owned_brokers:
                await broker.close()
        finally:
            if self._owns_http_client:
                await self.http_client.aclose()


def summarize(results: Sequence[HealthCheckResult]) -> dict[str, Any]:
    """Overall status and counts for a list of results."""
    unhealthy = sum(1 for result in results if not result.is_healthy)
    return {
        "status": "healthy" if unhealthy == 0 else "unhealthy",
        "total_targets": len(results),
        "healthy_targets": len(results) - unhealthy,
        "unhealthy_targets": unhealthy,
    }


def create_health_checker(
    settings: HealthCheckerSettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> HealthChecker:
    """Create a health checker to share across the process."""
    return HealthChecker(settings=settings, http_client=http_client)
