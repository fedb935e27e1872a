"""Probe engine: one health probe per registered target."""

import asyncio
import json
import time
from collections.abc import Sequence
from datetime import UTC, datetime

import httpx

from health_checker.config.settings import HealthCheckerSettings
from health_checker.domain.exceptions import describe_error
from health_checker.domain.models import (
    DatabaseTarget,
    HealthCheckResult,
    MessagingTarget,
    ServiceTarget,
    Target,
)
from health_checker.observability.logging import get_logger


class ProbeEngine:
    """Probes targets and turns every failure into an unhealthy result.

    No exception raised by a target's client escapes :meth:`probe`; one
    failing dependency therefore never hides the results of the others.
    """

    def __init__(self, settings: HealthCheckerSettings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http_client = http_client
        self.logger = get_logger(__name__)

    async def probe(
        self, target: Target, timeout: float | None = None
    ) -> HealthCheckResult:
        """Probe a single target.

        Args:
            target: Target to probe
            timeout: Deadline in seconds for this probe, None for no deadline

        Returns:
            Health check result for the target
        """
        match target:
            case MessagingTarget():
                operation = self._publish
            case DatabaseTarget():
                operation = self._write
            case ServiceTarget():
                operation = self._get
            case _:
                raise TypeError(f"Unsupported target: {target!r}")

        error_info: str | None = None
        start_time = time.perf_counter()
        deadline = asyncio.timeout(timeout)
        try:
            async with deadline:
                await operation(target)
        except TimeoutError as e:
            # Drivers raise TimeoutError for their own connect timeouts
            error_info = (
                f"Probe timed out after {timeout}s"
                if deadline.expired()
                else describe_error(e)
            )
        except Exception as e:
            error_info = describe_error(e)
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000

        if error_info is not None:
            self.logger.warning(
                "Health probe failed",
                target_type=target.target_type.value,
                target=target.identifier,
                error=error_info,
            )

        return HealthCheckResult(
            target_type=target.target_type,
            target_identifier=target.identifier,
            response_time_ms=elapsed_ms,
            error_info=error_info,
        )

    async def probe_all(
        self, targets: Sequence[Target], timeout: float | None = None
    ) -> list[HealthCheckResult]:
        """Probe targets concurrently, returning results in target order."""
        return list(
            await asyncio.gather(*(self.probe(target, timeout) for target in targets))
        )

    async def _publish(self, target: MessagingTarget) -> None:
        payload = json.dumps({"timestamp": datetime.now(UTC).isoformat()})
        await target.client.publish(
            self.settings.exchange_name,
            self.settings.routing_key,
            payload.encode(),
        )

    async def _write(self, target: DatabaseTarget) -> None:
        if target.query:
            await target.connector.execute(target.query)
        else:
            await target.connector.execute(
                self.settings.probe_statement, self.settings.client_identifier
            )

    async def _get(self, target: ServiceTarget) -> None:
        response = await self.http_client.get(target.address)
        response.raise_for_status()

