"""Single entry point bundling the registry, executor and health reporter."""

import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

from .circuit_breaker.breaker import CircuitBreakerSnapshot, Clock
from .circuit_breaker.config import ConfigResolver
from .circuit_breaker.decorators import circuit_protected
from .circuit_breaker.executor import ProtectedExecutor
from .circuit_breaker.observer import CircuitObserver
from .circuit_breaker.registry import CircuitBreakerRegistry
from .config.settings import DegradationSettings
from .fallback.responses import FallbackResponse
from .health.reporter import HealthReporter, ServiceStats, SystemHealth

logger = structlog.get_logger()

T = TypeVar("T")


class GracefulDegradation:
    """Owns one independent set of circuit breakers.

    Build one at process start (or one per tenant) and pass it to request
    handlers; instances never share state.
    """

    def __init__(
        self,
        resolver: ConfigResolver | None = None,
        observer: CircuitObserver | None = None,
        clock: Clock = time.monotonic,
        wall_clock: Clock = time.time,
    ):
        """Initialize graceful degradation.

        Args:
            resolver: Per-service configuration resolver
            observer: Sink for circuit notifications (structlog by default)
            clock: Monotonic source of seconds
            wall_clock: Source of epoch seconds for reported failure times
        """
        self.registry = CircuitBreakerRegistry(resolver, observer, clock, wall_clock)
        self.executor = ProtectedExecutor(self.registry)
        self.reporter = HealthReporter(self.registry)

    @classmethod
    def from_settings(
        cls,
        settings: DegradationSettings,
        observer: CircuitObserver | None = None,
    ) -> "GracefulDegradation":
        """Create an instance from settings."""
        logger.info(
            "Initializing graceful degradation",
            environment=settings.environment.value,
            default_config=settings.default_config().model_dump(),
            overridden_services=sorted(settings.service_overrides),
        )
        return cls(resolver=settings.build_resolver(), observer=observer)

    async def execute(
        self,
        service_name: str,
        operation: Callable[[], Awaitable[T]],
        fallback: T | None = None,
        *,
        fallback_factory: Callable[[], T] | None = None,
    ) -> T | None:
        """Run an operation behind its breaker; see ``ProtectedExecutor.execute``."""
        return await self.executor.execute(
            service_name, operation, fallback, fallback_factory=fallback_factory
        )

    def protect(
        self,
        service_name: str,
        fallback: Any = None,
        *,
        fallback_factory: Callable[[], Any] | None = None,
    ) -> Callable[..., Any]:
        """Decorator form of ``execute`` bound to this instance."""
        return circuit_protected(
            self.executor, service_name, fallback, fallback_factory=fallback_factory
        )

    def ensure_available(self, service_name: str) -> None:
        """Raise ``CircuitBreakerOpenException`` if the call must be skipped."""
        self.executor.ensure_available(service_name)

    def record_success(self, service_name: str) -> None:
        """Record a successful call made outside ``execute``."""
        self.registry.record_success(service_name)

    def record_failure(self, service_name: str, error: BaseException) -> None:
        """Record a failed call made outside ``execute``."""
        self.registry.record_failure(service_name, error)

    def get_service_status(self, service_name: str) -> CircuitBreakerSnapshot:
        return self.reporter.get_service_status(service_name)

    def get_all_service_statuses(self) -> dict[str, CircuitBreakerSnapshot]:
        return self.reporter.get_all_service_statuses()

    def get_service_stats(self, service_name: str) -> ServiceStats:
        return self.reporter.get_service_stats(service_name)

    def get_system_health(self) -> SystemHealth:
        return self.reporter.get_system_health()

    def get_fallback_response(
        self, service_name: str, custom_message: str | None = None
    ) -> FallbackResponse:
        return self.reporter.get_fallback_response(service_name, custom_message)

    def is_circuit_open(self, service_name: str) -> bool:
        return self.reporter.is_circuit_open(service_name)

    def is_circuit_closed(self, service_name: str) -> bool:
        return self.reporter.is_circuit_closed(service_name)

    def reset_circuit_breaker(self, service_name: str) -> bool:
        """Force a circuit back to CLOSED. Administrative use only.

        Returns:
            False if the service has never been referenced
        """
        return self.registry.reset_breaker(service_name)

    def clear_all(self) -> None:
        """Drop every breaker. Intended for test harnesses."""
        self.registry.clear_all_breakers()
