"""Graceful degradation for unreliable dependencies.

Per-dependency circuit breakers decide whether to call a dependency, count
its failures, stop calling it while it is failing, test for recovery, and
hand back a fallback value instead of raising.
"""

from .circuit_breaker import (
    BreakerConfig,
    CircuitBreaker,
    CircuitBreakerRegistry,
    CircuitBreakerSnapshot,
    CircuitObserver,
    CircuitState,
    ConfigResolver,
    LoggingObserver,
    ProtectedExecutor,
    ServiceOverride,
    circuit_protected,
)
from .config import DegradationSettings, get_settings
from .exceptions import (
    CircuitBreakerOpenException,
    DegradationException,
    ErrorCode,
    InvalidConfigurationException,
    OperationFailureException,
    OperationTimeoutException,
)
from .fallback import FallbackResponse
from .health import HealthReporter, ServiceStats, SystemHealth, create_health_router
from .manager import GracefulDegradation

__version__ = "0.1.0"

__all__ = [
    "GracefulDegradation",
    "CircuitBreaker",
    "CircuitBreakerRegistry",
    "CircuitBreakerSnapshot",
    "CircuitState",
    "ProtectedExecutor",
    "circuit_protected",
    "BreakerConfig",
    "ServiceOverride",
    "ConfigResolver",
    "CircuitObserver",
    "LoggingObserver",
    "HealthReporter",
    "ServiceStats",
    "SystemHealth",
    "FallbackResponse",
    "create_health_router",
    "DegradationSettings",
    "get_settings",
    "DegradationException",
    "ErrorCode",
    "OperationFailureException",
    "OperationTimeoutException",
    "CircuitBreakerOpenException",
    "InvalidConfigurationException",
]
