"""Registration-time validation of required targets."""

from health_checker.config.settings import HealthCheckerSettings
from health_checker.domain.exceptions import SetupError, describe_error
from health_checker.domain.models import (
    DatabaseTarget,
    MessagingTarget,
    ServiceTarget,
    Target,
)
from health_checker.observability.logging import get_logger

from .probes import ProbeEngine


class SetupValidator:
    """Proves a required target is usable before it is registered.

    Messaging targets also get the exchange, queue and binding the probe
    publishes to. Database targets run a read-only statement, unlike the
    write performed by the probe.
    """

    def __init__(self, settings: HealthCheckerSettings, probes: ProbeEngine):
        self.settings = settings
        self.probes = probes
        self.logger = get_logger(__name__)

    async def validate(self, target: Target) -> None:
        """Validate a target.

        Args:
            target: Target about to be registered

        Raises:
            SetupError: The target is unreachable or misconfigured
        """
        match target:
            case MessagingTarget():
                operation = self._provision_queue
            case DatabaseTarget():
                operation = self._assert_schema
            case ServiceTarget():
                operation = self._assert_service
            case _:
                raise TypeError(f"Unsupported target: {target!r}")

        try:
            await operation(target)
        except SetupError:
            raise
        except Exception as e:
            message = describe_error(e)
            self.logger.error(
                "Target setup failed",
                target_type=target.target_type.value,
                target=target.identifier,
                error=message,
            )
            raise SetupError(
                message, target.target_type.value, target.identifier
            ) from e

    async def _provision_queue(self, target: MessagingTarget) -> None:
        exchange = self.settings.exchange_name
        queue = self.settings.queue_name
        await target.client.exchange_declare(exchange)
        await target.client.queue_declare(queue)
        await target.client.queue_bind(queue, exchange, self.settings.routing_key)

    async def _assert_schema(self, target: DatabaseTarget) -> None:
        await target.connector.execute(
            target.query or self.settings.validation_statement
        )

    async def _assert_service(self, target: ServiceTarget) -> None:
        result = await self.probes.probe(target)
        if not result.is_healthy:
            self.logger.error(
                "Target setup failed",
                target_type=target.target_type.value,
                target=target.identifier,
                error=result.error_info,
            )
            raise SetupError(
                result.error_info or "Service is unhealthy",
                target.target_type.value,
                target.identifier,
            )
