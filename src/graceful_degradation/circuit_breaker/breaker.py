"""Circuit breaker state machine for a single dependency."""

import threading
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ..exceptions import OperationTimeoutException
from .config import BreakerConfig
from .observer import (
    CircuitObserver,
    FailureEvent,
    FailureKind,
    NullObserver,
    StateTransition,
    notify,
)

Clock = Callable[[], float]


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreakerMetrics:
    """Mutable counters and timestamps of one breaker.

    ``last_failure_time`` is wall-clock epoch seconds for reporting; the other
    timestamps come from the monotonic clock and only measure durations.
    """

    failure_count: int = 0
    success_count: int = 0
    last_failure_time: float = 0.0
    last_failure_at: float = 0.0
    last_state_change: float = 0.0
    total_requests: int = 0
    total_failures: int = 0
    total_successes: int = 0


@dataclass(frozen=True)
class CircuitBreakerSnapshot:
    """Point-in-time copy of a breaker, safe to hand to callers."""

    name: str
    state: CircuitState
    failure_count: int
    success_count: int
    last_failure_time: float
    last_state_change: float
    total_requests: int
    total_failures: int
    total_successes: int

    @property
    def last_failure(self) -> str | None:
        """ISO-8601 time of the last failure, or None if it never failed."""
        if self.last_failure_time <= 0:
            return None
        return datetime.fromtimestamp(self.last_failure_time, UTC).isoformat()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["state"] = self.state.value
        data["last_failure"] = self.last_failure
        return data


class CircuitBreaker:
    """Circuit breaker for one named dependency.

    All transitions are evaluated lazily when the breaker is used; there are
    no background timers. Every read-check-write sequence runs under a
    per-breaker lock and never awaits, so the breaker can be shared by threads
    and asyncio tasks alike. Observer notifications are emitted after the lock
    is released.
    """

    def __init__(
        self,
        name: str,
        config: BreakerConfig,
        observer: CircuitObserver | None = None,
        clock: Clock = time.monotonic,
        wall_clock: Clock = time.time,
    ):
        """Initialize circuit breaker.

        Args:
            name: Name of the protected service
            config: Effective configuration for the service
            observer: Sink for lifecycle notifications
            clock: Monotonic source of seconds for timeouts and uptime
            wall_clock: Source of epoch seconds for reported failure times
        """
        self.name = name
        self.config = config
        self._observer = observer or NullObserver()
        self._clock = clock
        self._wall_clock = wall_clock
        self._state = CircuitState.CLOSED
        self.metrics = CircuitBreakerMetrics(last_state_change=clock())
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        """Current state, without evaluating the reset timeout."""
        return self._state

    def snapshot(self) -> CircuitBreakerSnapshot:
        """Get a consistent copy of the breaker's state and counters."""
        with self._lock:
            return CircuitBreakerSnapshot(
                name=self.name,
                state=self._state,
                failure_count=self.metrics.failure_count,
                success_count=self.metrics.success_count,
                last_failure_time=self.metrics.last_failure_time,
                last_state_change=self.metrics.last_state_change,
                total_requests=self.metrics.total_requests,
                total_failures=self.metrics.total_failures,
                total_successes=self.metrics.total_successes,
            )

    def allow_request(self) -> bool:
        """Decide whether a call may be attempted right now.

        Moves an OPEN breaker to HALF_OPEN once the reset timeout has elapsed
        since the last failure. This is the only place HALF_OPEN is entered.

        Returns:
            False if the circuit is OPEN and the call must be skipped
        """
        with self._lock:
            event = None
            if self._state == CircuitState.OPEN and self._reset_timeout_elapsed():
                event = self._transition(
                    CircuitState.HALF_OPEN, "Reset timeout elapsed, testing service"
                )
            allowed = self._state != CircuitState.OPEN

        if event is not None:
            notify(self._observer, "on_transition", event)
        return allowed

    def retry_after(self) -> float:
        """Seconds until an OPEN breaker becomes eligible for trial calls."""
        with self._lock:
            if self._state != CircuitState.OPEN:
                return 0.0
            elapsed = self._clock() - self.metrics.last_failure_at
            return max(0.0, self.config.reset_timeout - elapsed)

    def record_success(self) -> None:
        """Record a successful operation."""
        with self._lock:
            self.metrics.total_requests += 1
            self.metrics.total_successes += 1
            event = None

            if self._state == CircuitState.HALF_OPEN:
                self.metrics.success_count += 1
                if self.metrics.success_count >= self.config.success_threshold:
                    event = self._transition(
                        CircuitState.CLOSED, "Success threshold reached"
                    )
            elif self._state == CircuitState.CLOSED:
                self.metrics.failure_count = 0

        if event is not None:
            notify(self._observer, "on_transition", event)

    def record_failure(self, error: BaseException) -> None:
        """Record a failed operation.

        Args:
            error: The error raised by the operation, or the timeout
        """
        with self._lock:
            self.metrics.total_requests += 1
            self.metrics.total_failures += 1
            self.metrics.failure_count += 1
            self.metrics.last_failure_at = self._clock()
            self.metrics.last_failure_time = self._wall_clock()

            failure = FailureEvent(
                service_name=self.name,
                state=self._state,
                kind=(
                    FailureKind.TIMEOUT
                    if isinstance(error, OperationTimeoutException)
                    else FailureKind.FAILURE
                ),
                error=error,
                failure_count=self.metrics.failure_count,
                failure_threshold=self.config.failure_threshold,
            )

            event = None
            if self._state == CircuitState.HALF_OPEN:
                event = self._transition(
                    CircuitState.OPEN, f"Failure during recovery test: {error}"
                )
            elif (
                self._state == CircuitState.CLOSED
                and self.metrics.failure_count >= self.config.failure_threshold
            ):
                event = self._transition(
                    CircuitState.OPEN,
                    f"Failure threshold reached ({self.metrics.failure_count} failures)",
                )

        notify(self._observer, "on_failure", failure)
        if event is not None:
            notify(self._observer, "on_transition", event)

    def reset(self) -> None:
        """Force the breaker to CLOSED and zero every counter."""
        with self._lock:
            event = self._transition(CircuitState.CLOSED, "Manual reset")
            self.metrics = CircuitBreakerMetrics(
                last_state_change=self.metrics.last_state_change
            )

        if event is not None:
            notify(self._observer, "on_transition", event)

    def _reset_timeout_elapsed(self) -> bool:
        elapsed = self._clock() - self.metrics.last_failure_at
        return elapsed >= self.config.reset_timeout

    def _transition(
        self, new_state: CircuitState, reason: str
    ) -> StateTransition | None:
        """Change state; the caller must hold the lock.

        Returns:
            The transition to report, or None if already in new_state
        """
        old_state = self._state
        if old_state == new_state:
            return None

        event = StateTransition(
            service_name=self.name,
            old_state=old_state,
            new_state=new_state,
            reason=reason,
            failure_count=self.metrics.failure_count,
            success_count=self.metrics.success_count,
            total_failures=self.metrics.total_failures,
        )

        self._state = new_state
        self.metrics.last_state_change = self._clock()
        self.metrics.failure_count = 0
        self.metrics.success_count = 0
        return event
