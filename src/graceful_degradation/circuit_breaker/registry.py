"""Registry owning one circuit breaker per dependency name."""

import threading
import time

import structlog

from .breaker import CircuitBreaker, CircuitBreakerSnapshot, Clock
from .config import ConfigResolver
from .observer import CircuitObserver, LoggingObserver, notify

logger = structlog.get_logger()


class CircuitBreakerRegistry:
    """Keyed store of circuit breakers, created lazily on first reference.

    The registry is the only shared mutable state of the subsystem. Construct
    one per process (or per tenant) and pass it to whoever needs it.
    """

    def __init__(
        self,
        resolver: ConfigResolver | None = None,
        observer: CircuitObserver | None = None,
        clock: Clock = time.monotonic,
        wall_clock: Clock = time.time,
    ):
        """Initialize circuit breaker registry.

        Args:
            resolver: Per-service configuration resolver
            observer: Sink notified on creation, transitions and failures
            clock: Monotonic source of seconds shared by all breakers
            wall_clock: Source of epoch seconds for reported failure times
        """
        self.resolver = resolver or ConfigResolver()
        self.observer = observer if observer is not None else LoggingObserver()
        self.clock = clock
        self.wall_clock = wall_clock
        self._breakers: dict[str, CircuitBreaker] = {}
        self._lock = threading.Lock()

    def get_breaker(self, service_name: str) -> CircuitBreaker:
        """Get or create circuit breaker for service.

        Args:
            service_name: Name of the service

        Returns:
            Circuit breaker instance
        """
        breaker = self._breakers.get(service_name)
        if breaker is not None:
            return breaker

        config = self.resolver.resolve(service_name)
        with self._lock:
            breaker = self._breakers.get(service_name)
            if breaker is not None:
                return breaker
            breaker = CircuitBreaker(
                service_name,
                config,
                observer=self.observer,
                clock=self.clock,
                wall_clock=self.wall_clock,
            )
            self._breakers[service_name] = breaker

        notify(self.observer, "on_created", service_name, config)
        return breaker

    def peek(self, service_name: str) -> CircuitBreaker | None:
        """Get a breaker only if it has already been created."""
        return self._breakers.get(service_name)

    def __contains__(self, service_name: object) -> bool:
        return service_name in self._breakers

    def __len__(self) -> int:
        return len(self._breakers)

    def get_all_breakers(self) -> dict[str, CircuitBreaker]:
        """Get all circuit breakers.

        Returns:
            Dictionary of service names to circuit breakers
        """
        with self._lock:
            return self._breakers.copy()

    def snapshots(self) -> dict[str, CircuitBreakerSnapshot]:
        """Get a snapshot of every registered breaker."""
        return {
            name: breaker.snapshot()
            for name, breaker in self.get_all_breakers().items()
        }

    def record_success(self, service_name: str) -> None:
        """Record a successful call made outside the executor."""
        self.get_breaker(service_name).record_success()

    def record_failure(self, service_name: str, error: BaseException) -> None:
        """Record a failed call made outside the executor."""
        self.get_breaker(service_name).record_failure(error)

    def reset_breaker(self, service_name: str) -> bool:
        """Force a breaker to CLOSED and zero its counters.

        Unknown names are not registered; they are already in the reset state.

        Args:
            service_name: Name of the service

        Returns:
            False if no breaker exists for the service
        """
        breaker = self.peek(service_name)
        if breaker is None:
            return False

        previous_state = breaker.state
        breaker.reset()
        logger.info(
            "Manually reset circuit breaker",
            service_name=service_name,
            previous_state=previous_state.value,
        )
        return True

    def clear_all_breakers(self) -> None:
        """Drop every breaker. Intended for test harnesses."""
        with self._lock:
            self._breakers.clear()
        logger.debug("Cleared all circuit breakers")
