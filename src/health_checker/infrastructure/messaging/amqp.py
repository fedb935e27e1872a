"""
AMQP broker client used by messaging targets.

The client keeps a single robust connection and channel per broker and opens
them lazily, so constructing a client never touches the network.
"""

import asyncio
from typing import Protocol, runtime_checkable
from urllib.parse import urlsplit, urlunsplit

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractRobustConnection

from health_checker.domain.exceptions import ConfigurationError
from health_checker.observability.logging import get_logger

AMQP_SCHEMES = ("amqp", "amqps")


@runtime_checkable
class BrokerClient(Protocol):
    """Broker operations needed to provision and probe the health exchange."""

    async def exchange_declare(self, exchange_name: str) -> None:
        """Declare an exchange."""
        ...

    async def queue_declare(self, queue_name: str) -> None:
        """Declare a queue."""
        ...

    async def queue_bind(
        self, queue_name: str, exchange_name: str, routing_key: str
    ) -> None:
        """Bind a queue to an exchange under a routing key."""
        ...

    async def publish(
        self, exchange_name: str, routing_key: str, body: bytes
    ) -> None:
        """Publish a message."""
        ...


def mask_url_password(url: str) -> str:
    """Return the URL with any password replaced by ``***``."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = parts.hostname or ""
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    netloc = f"{parts.username or ''}:***@{netloc}"
    return urlunsplit(parts._replace(netloc=netloc))


class AmqpBrokerClient:
    """aio-pika backed broker client."""

    def __init__(
        self,
        url: str,
        connect_timeout: float = 10.0,
        exchange_type: aio_pika.ExchangeType = aio_pika.ExchangeType.DIRECT,
    ):
        parts = urlsplit(url)
        if parts.scheme not in AMQP_SCHEMES or not parts.hostname:
            raise ConfigurationError(
                f"Invalid AMQP URL: {mask_url_password(url)}", url=mask_url_password(url)
            )

        self.url = url
        self.connect_timeout = connect_timeout
        self.exchange_type = exchange_type
        self._connection: AbstractRobustConnection | None = None
        self._channel: AbstractChannel | None = None
        self._lock = asyncio.Lock()
        self.logger = get_logger(__name__)

    def __str__(self) -> str:
        return mask_url_password(self.url)

    def __repr__(self) -> str:
        return f"AmqpBrokerClient({str(self)!r})"

    async def _get_channel(self) -> AbstractChannel:
        """Open the connection and channel on first use, reopening if closed."""
        async with self._lock:
            if self._connection is None or self._connection.is_closed:
                self._connection = await aio_pika.connect_robust(
                    self.url, timeout=self.connect_timeout
                )
                self._channel = None
                self.logger.debug("Connected to AMQP broker", broker=str(self))

            if self._channel is None or self._channel.is_closed:
                self._channel = await self._connection.channel()

            return self._channel

    async def exchange_declare(self, exchange_name: str) -> None:
        channel = await self._get_channel()
        await channel.declare_exchange(
            exchange_name, self.exchange_type, durable=True
        )

    async def queue_declare(self, queue_name: str) -> None:
        channel = await self._get_channel()
        await channel.declare_queue(queue_name, durable=True)

    async def queue_bind(
        self, queue_name: str, exchange_name: str, routing_key: str
    ) -> None:
        channel = await self._get_channel()
        queue = await channel.get_queue(queue_name)
        await queue.bind(exchange_name, routing_key=routing_key)

    async def publish(
        self, exchange_name: str, routing_key: str, body: bytes
    ) -> None:
        channel = await self._get_channel()
        # Passive lookup fails if the exchange was never provisioned
        exchange = await channel.get_exchange(exchange_name)
        await exchange.publish(
            aio_pika.Message(body=body, content_type="application/json"),
            routing_key=routing_key,
        )

    async def close(self) -> None:
        """Close the channel and connection."""
        async with self._lock:
            connection, self._connection, self._channel = self._connection, None, None
            if connection is not None and not connection.is_closed:
                await connection.close()
                self.logger.debug("Closed AMQP connection", broker=str(self))
