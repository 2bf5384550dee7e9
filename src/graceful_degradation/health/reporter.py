"""Read-only health and statistics derived from the circuit breaker registry."""

from pydantic import BaseModel, Field

from ..circuit_breaker.breaker import CircuitBreakerSnapshot, CircuitState
from ..circuit_breaker.registry import CircuitBreakerRegistry
from ..fallback.responses import FallbackResponse, build_fallback_response


class ServiceStats(BaseModel):
    """Statistics for one service's circuit breaker."""

    state: str = Field(description="Current circuit state")
    failure_rate: float = Field(description="Lifetime failure percentage")
    total_requests: int = Field(description="Lifetime attempted calls")
    uptime: float = Field(description="Seconds since the last state change")
    last_failure: str | None = Field(
        default=None, description="ISO-8601 time of the last failure"
    )


class ServiceHealthEntry(BaseModel):
    """Health of a single service."""

    state: str
    healthy: bool


class SystemHealth(BaseModel):
    """Aggregate health across every registered breaker."""

    healthy: bool = Field(description="False if any circuit is open")
    services: dict[str, ServiceHealthEntry] = Field(default_factory=dict)
    open_circuits: list[str] = Field(default_factory=list)


class HealthReporter:
    """Builds snapshots from the registry without mutating it.

    Names that have never been referenced are reported as fresh CLOSED
    breakers and are not added to the registry.
    """

    def __init__(self, registry: CircuitBreakerRegistry):
        """Initialize health reporter.

        Args:
            registry: Registry to report on
        """
        self.registry = registry

    def get_service_status(self, service_name: str) -> CircuitBreakerSnapshot:
        """Get a copy of one breaker's full state."""
        breaker = self.registry.peek(service_name)
        if breaker is not None:
            return breaker.snapshot()

        now = self.registry.clock()
        return CircuitBreakerSnapshot(
            name=service_name,
            state=CircuitState.CLOSED,
            failure_count=0,
            success_count=0,
            last_failure_time=0.0,
            last_state_change=now,
            total_requests=0,
            total_failures=0,
            total_successes=0,
        )

    def get_all_service_statuses(self) -> dict[str, CircuitBreakerSnapshot]:
        """Get copies of every registered breaker."""
        return self.registry.snapshots()

    def get_service_stats(self, service_name: str) -> ServiceStats:
        """Get statistics for a service's circuit breaker.

        Args:
            service_name: Name of the service

        Returns:
            Failure rate, request count, uptime and last failure time
        """
        snapshot = self.get_service_status(service_name)

        failure_rate = 0.0
        if snapshot.total_requests > 0:
            failure_rate = snapshot.total_failures / snapshot.total_requests * 100

        return ServiceStats(
            state=snapshot.state.value,
            failure_rate=round(failure_rate, 2),
            total_requests=snapshot.total_requests,
            uptime=max(0.0, self.registry.clock() - snapshot.last_state_change),
            last_failure=snapshot.last_failure,
        )

    def get_system_health(self) -> SystemHealth:
        """Get overall system health based on circuit breaker states."""
        services: dict[str, ServiceHealthEntry] = {}
        open_circuits: list[str] = []

        for name, snapshot in self.registry.snapshots().items():
            services[name] = ServiceHealthEntry(
                state=snapshot.state.value,
                healthy=snapshot.state == CircuitState.CLOSED,
            )
            if snapshot.state == CircuitState.OPEN:
                open_circuits.append(name)

        return SystemHealth(
            healthy=not open_circuits,
            services=services,
            open_circuits=open_circuits,
        )

    def get_fallback_response(
        self, service_name: str, custom_message: str | None = None
    ) -> FallbackResponse:
        """Build the caller-facing fallback payload for a service."""
        config = self.registry.resolver.resolve(service_name)
        return build_fallback_response(
            service_name, config.reset_timeout, custom_message
        )

    def is_circuit_open(self, service_name: str) -> bool:
        """Check if a circuit is currently open."""
        return self.get_service_status(service_name).state == CircuitState.OPEN

    def is_circuit_closed(self, service_name: str) -> bool:
        """Check if a circuit is currently closed (healthy)."""
        return self.get_service_status(service_name).state == CircuitState.CLOSED
