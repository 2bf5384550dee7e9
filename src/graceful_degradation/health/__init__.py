"""Health reporting for circuit-protected dependencies."""

from .endpoints import create_app, create_health_router
from .reporter import HealthReporter, ServiceHealthEntry, ServiceStats, SystemHealth

__all__ = [
    "HealthReporter",
    "ServiceStats",
    "ServiceHealthEntry",
    "SystemHealth",
    "create_health_router",
    "create_app",
]
