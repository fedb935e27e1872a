"""Health check endpoints for FastAPI."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from health_checker.observability.logging import get_logger

from .checker import HealthChecker, summarize

logger = get_logger(__name__)


def create_health_endpoints(
    health_checker: HealthChecker,
    include_details: bool = True,
) -> APIRouter:
    """Create health check endpoints for FastAPI.

    Args:
        health_checker: Health checker holding the registered targets
        include_details: Whether to include per-target results

    Returns:
        FastAPI router with health endpoints
    """
    router = APIRouter(prefix="/health", tags=["health"])

    @router.get("/", response_model=None)
    async def health_check() -> dict[str, Any] | JSONResponse:
        """Full report across all registered targets."""
        results = await health_checker.check()
        summary = summarize(results)

        response_data: dict[str, Any] = {
            "status": summary["status"],
            "timestamp": datetime.now(UTC).isoformat(),
            "summary": summary,
        }
        if include_details:
            response_data["checks"] = [result.to_dict() for result in results]

        if summary["unhealthy_targets"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=response_data,
            )
        return response_data

    @router.get("/ready", response_model=None)
    async def readiness_check() -> dict[str, Any] | JSONResponse:
        """Ready only when every registered target is healthy."""
        results = await health_checker.check()
        unhealthy = [result for result in results if not result.is_healthy]

        response_data: dict[str, Any] = {
            "status": "not_ready" if unhealthy else "ready",
            "timestamp": datetime.now(UTC).isoformat(),
        }
        if include_details and unhealthy:
            response_data["failing"] = [result.to_dict() for result in unhealthy]

        if unhealthy:
            logger.warning(
                "Readiness check failed",
                failing=[result.target_identifier for result in unhealthy],
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=response_data,
            )
        return response_data

    @router.get("/live")
    async def liveness_check() -> dict[str, Any]:
        """Liveness only reflects that the process is serving requests."""
        return {"status": "alive", "timestamp": datetime.now(UTC).isoformat()}

    return router
