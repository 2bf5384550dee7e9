"""Circuit breaker implementation for external service protection.

This module provides the per-dependency state machine, the registry that owns
breakers, and the executor that turns failures into fallback values.
"""

from .breaker import (
    CircuitBreaker,
    CircuitBreakerMetrics,
    CircuitBreakerSnapshot,
    CircuitState,
)
from .config import (
    DEFAULT_SERVICE_OVERRIDES,
    BreakerConfig,
    ConfigResolver,
    ServiceOverride,
)
from .decorators import circuit_protected
from .executor import ProtectedExecutor
from .observer import (
    CircuitObserver,
    CompositeObserver,
    FailureEvent,
    FailureKind,
    LoggingObserver,
    NullObserver,
    StateTransition,
)
from .registry import CircuitBreakerRegistry

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "CircuitBreakerMetrics",
    "CircuitBreakerSnapshot",
    "CircuitBreakerRegistry",
    "ProtectedExecutor",
    "circuit_protected",
    "BreakerConfig",
    "ServiceOverride",
    "ConfigResolver",
    "DEFAULT_SERVICE_OVERRIDES",
    "CircuitObserver",
    "LoggingObserver",
    "NullObserver",
    "CompositeObserver",
    "StateTransition",
    "FailureEvent",
    "FailureKind",
]
