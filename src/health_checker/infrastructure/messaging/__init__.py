"""Message broker clients."""

from .amqp import AmqpBrokerClient, BrokerClient, mask_url_password

__all__ = ["AmqpBrokerClient", "BrokerClient", "mask_url_password"]
