"""Health checks for registered external dependencies.

Targets (message brokers, databases, HTTP services) are registered once at
start-up and probed concurrently on every check.
"""

from .checker import HealthChecker, create_health_checker, summarize
from .endpoints import create_health_endpoints
from .probes import ProbeEngine
from .validator import SetupValidator

__all__ = [
    "HealthChecker",
    "create_health_checker",
    "summarize",
    "create_health_endpoints",
    "ProbeEngine",
    "SetupValidator",
]
