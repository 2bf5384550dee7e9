"""Test configuration and fixtures."""

import pytest

from graceful_degradation.circuit_breaker import (
    BreakerConfig,
    CircuitBreakerRegistry,
    ConfigResolver,
    FailureEvent,
    ProtectedExecutor,
    ServiceOverride,
    StateTransition,
)
from graceful_degradation.health import HealthReporter


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingObserver:
    """Observer that keeps every notification for later assertions."""

    def __init__(self):
        self.created: list[tuple[str, BreakerConfig]] = []
        self.transitions: list[StateTransition] = []
        self.failures: list[FailureEvent] = []

    def on_created(self, service_name, config):
        self.created.append((service_name, config))

    def on_transition(self, event):
        self.transitions.append(event)

    def on_failure(self, event):
        self.failures.append(event)


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def wall_clock():
    """Create a wall clock that moves independently of ``clock``."""
    return FakeClock()


@pytest.fixture
def observer():
    """Create a recording observer."""
    return RecordingObserver()


@pytest.fixture
def resolver():
    """Create a resolver with fast timeouts for testing."""
    return ConfigResolver(
        BreakerConfig(
            failure_threshold=5,
            success_threshold=3,
            reset_timeout=30.0,
            request_timeout=1.0,
        ),
        {
            "openai": ServiceOverride(failure_threshold=3, reset_timeout=20.0),
            "redis": ServiceOverride(failure_threshold=10, reset_timeout=5.0),
            "weather": ServiceOverride(
                failure_threshold=3, reset_timeout=60.0, request_timeout=0.05
            ),
        },
    )


@pytest.fixture
def registry(resolver, observer, clock):
    """Create a registry driven by the fake clock."""
    return CircuitBreakerRegistry(resolver, observer, clock, wall_clock=clock)


@pytest.fixture
def executor(registry):
    """Create a protected executor."""
    return ProtectedExecutor(registry)


@pytest.fixture
def reporter(registry):
    """Create a health reporter."""
    return HealthReporter(registry)
