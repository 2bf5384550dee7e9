"""Health check and circuit administration endpoints for FastAPI integration."""

from typing import TYPE_CHECKING, Any

import structlog
from fastapi import APIRouter, FastAPI, HTTPException, Response, status

from ..observability.logging import CorrelationIDMiddleware
from .reporter import ServiceStats, SystemHealth

if TYPE_CHECKING:
    from ..manager import GracefulDegradation

logger = structlog.get_logger()


def create_health_router(
    degradation: "GracefulDegradation", prefix: str = "/health"
) -> APIRouter:
    """Build the health router bound to one degradation instance.

    Args:
        degradation: Facade whose registry is reported on
        prefix: URL prefix for every route

    Returns:
        Router to include in the host application
    """
    router = APIRouter(prefix=prefix, tags=["health"])

    @router.get("", response_model=SystemHealth)
    async def system_health(response: Response) -> SystemHealth:
        """Overall health; 503 while any circuit is open."""
        health = degradation.get_system_health()
        if not health.healthy:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return health

    @router.get("/circuits", response_model=dict[str, dict[str, Any]])
    async def all_circuits() -> dict[str, dict[str, Any]]:
        """Full state of every circuit breaker."""
        return {
            name: snapshot.to_dict()
            for name, snapshot in degradation.get_all_service_statuses().items()
        }

    @router.get("/circuits/{service_name}", response_model=ServiceStats)
    async def circuit_stats(service_name: str) -> ServiceStats:
        """Statistics for one circuit breaker."""
        return degradation.get_service_stats(service_name)

    @router.post("/circuits/{service_name}/reset", response_model=ServiceStats)
    async def reset_circuit(service_name: str) -> ServiceStats:
        """Force a circuit back to CLOSED."""
        if not degradation.reset_circuit_breaker(service_name):
            raise HTTPException(status_code=404, detail="Circuit breaker not found")
        logger.info("Circuit reset via API", service_name=service_name)
        return degradation.get_service_stats(service_name)

    return router


def create_app(degradation: "GracefulDegradation", title: str = "degradation") -> FastAPI:
    """Create a minimal application exposing the health router."""
    app = FastAPI(title=title)
    app.middleware("http")(CorrelationIDMiddleware())
    app.include_router(create_health_router(degradation))
    return app
