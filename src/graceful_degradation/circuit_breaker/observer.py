"""Observer hooks notified on circuit breaker lifecycle events."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog

if TYPE_CHECKING:
    from .breaker import CircuitState
    from .config import BreakerConfig

logger = structlog.get_logger()


class FailureKind(str, Enum):
    """How a recorded failure came about."""

    FAILURE = "failure"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class StateTransition:
    """A single actual state change of one breaker."""

    service_name: str
    old_state: "CircuitState"
    new_state: "CircuitState"
    reason: str
    failure_count: int
    success_count: int
    total_failures: int


@dataclass(frozen=True)
class FailureEvent:
    """A failure recorded against one breaker."""

    service_name: str
    state: "CircuitState"
    kind: FailureKind
    error: BaseException
    failure_count: int
    failure_threshold: int


@runtime_checkable
class CircuitObserver(Protocol):
    """Sink for circuit breaker notifications.

    Implementations must be cheap and must not block on I/O; they are called
    synchronously right after the breaker's bookkeeping completes.
    """

    def on_created(self, service_name: str, config: "BreakerConfig") -> None: ...

    def on_transition(self, event: StateTransition) -> None: ...

    def on_failure(self, event: FailureEvent) -> None: ...


class NullObserver:
    """Observer that ignores every notification."""

    def on_created(self, service_name: str, config: "BreakerConfig") -> None:
        pass

    def on_transition(self, event: StateTransition) -> None:
        pass

    def on_failure(self, event: FailureEvent) -> None:
        pass


class LoggingObserver:
    """Observer that writes structured log events."""

    def __init__(self, logger_name: str = "graceful_degradation.circuit"):
        self._logger = structlog.get_logger(logger_name)

    def on_created(self, service_name: str, config: "BreakerConfig") -> None:
        self._logger.debug(
            "Circuit breaker created",
            service_name=service_name,
            state="closed",
            config=config.model_dump(),
        )

    def on_transition(self, event: StateTransition) -> None:
        from .breaker import CircuitState

        self._logger.warning(
            "Circuit breaker state changed",
            service_name=event.service_name,
            old_state=event.old_state.value,
            new_state=event.new_state.value,
            reason=event.reason,
            failure_count=event.failure_count,
            success_count=event.success_count,
        )
        if event.new_state == CircuitState.OPEN:
            self._logger.warning(
                "Circuit breaker opened",
                service_name=event.service_name,
                reason=event.reason,
                total_failures=event.total_failures,
            )
        elif event.new_state == CircuitState.CLOSED:
            self._logger.info(
                "Circuit breaker recovered",
                service_name=event.service_name,
                state=event.new_state.value,
            )

    def on_failure(self, event: FailureEvent) -> None:
        error = getattr(event.error, "cause", None) or event.error
        self._logger.error(
            "Circuit breaker recorded failure",
            service_name=event.service_name,
            state=event.state.value,
            failure_kind=event.kind.value,
            failure_count=event.failure_count,
            failure_threshold=event.failure_threshold,
            error_type=type(error).__name__,
            error=str(error),
        )


class CompositeObserver:
    """Fans notifications out to several observers."""

    def __init__(self, observers: Iterable[CircuitObserver]):
        self.observers = list(observers)

    def on_created(self, service_name: str, config: "BreakerConfig") -> None:
        for observer in self.observers:
            notify(observer, "on_created", service_name, config)

    def on_transition(self, event: StateTransition) -> None:
        for observer in self.observers:
            notify(observer, "on_transition", event)

    def on_failure(self, event: FailureEvent) -> None:
        for observer in self.observers:
            notify(observer, "on_failure", event)


def notify(observer: CircuitObserver, method: str, *args: object) -> None:
    """Invoke an observer hook without letting its errors escape.

    Args:
        observer: Observer to notify
        method: Name of the hook to call
        *args: Hook arguments
    """
    try:
        getattr(observer, method)(*args)
    except Exception as e:
        logger.warning(
            "Circuit observer raised, ignoring",
            observer=type(observer).__name__,
            hook=method,
            error_type=type(e).__name__,
            error=str(e),
        )
