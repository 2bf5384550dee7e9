"""Protected execution of dependency calls with fallback values."""

import asyncio
import math
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

from ..exceptions import (
    CircuitBreakerOpenException,
    DegradationException,
    OperationFailureException,
    OperationTimeoutException,
)
from .registry import CircuitBreakerRegistry

logger = structlog.get_logger()

T = TypeVar("T")


class ProtectedExecutor:
    """Runs dependency calls behind their circuit breakers.

    ``execute`` is a firewall: failures and timeouts of the wrapped operation
    are recorded against the breaker and converted into the fallback value,
    never raised to the caller. Cancellation of the calling task is not a
    dependency failure and always propagates.
    """

    def __init__(self, registry: CircuitBreakerRegistry):
        """Initialize protected executor.

        Args:
            registry: Registry owning the breakers to consult
        """
        self.registry = registry

    async def execute(
        self,
        service_name: str,
        operation: Callable[[], Awaitable[T]],
        fallback: T | None = None,
        *,
        fallback_factory: Callable[[], T] | None = None,
    ) -> T | None:
        """Execute an operation with circuit breaker protection.

        Args:
            service_name: Name of the dependency being called
            operation: Zero-argument coroutine function performing the call
            fallback: Value returned when the call is skipped or fails
            fallback_factory: Builds the fallback lazily; wins over fallback,
                which is still returned if the factory raises

        Returns:
            The operation's result, or the fallback
        """
        breaker = self.registry.get_breaker(service_name)

        if not breaker.allow_request():
            logger.warning(
                "Circuit breaker is open, returning fallback",
                service_name=service_name,
                retry_after=round(breaker.retry_after(), 3),
                reset_timeout=breaker.config.reset_timeout,
            )
            return self._fallback(service_name, fallback, fallback_factory)

        try:
            result = await self._run_with_timeout(
                service_name, operation, breaker.config.request_timeout
            )
        except Exception as e:
            failure: DegradationException = (
                e
                if isinstance(e, OperationTimeoutException)
                else OperationFailureException(service_name, e)
            )
            breaker.record_failure(failure)
            logger.warning(
                "Operation failed, returning fallback",
                service_name=service_name,
                error_code=failure.error_code.value,
                error_type=type(e).__name__,
                error=str(e),
            )
            return self._fallback(service_name, fallback, fallback_factory)

        breaker.record_success()
        return result

    def ensure_available(self, service_name: str) -> None:
        """Raise instead of skipping when the circuit is open.

        For callers that manage the call themselves and report outcomes via
        ``record_success``/``record_failure``.

        Raises:
            CircuitBreakerOpenException: If the call must not be attempted
        """
        breaker = self.registry.get_breaker(service_name)
        if not breaker.allow_request():
            raise CircuitBreakerOpenException(
                service_name, retry_after=math.ceil(breaker.retry_after())
            )

    async def _run_with_timeout(
        self,
        service_name: str,
        operation: Callable[[], Awaitable[T]],
        timeout: float | None,
    ) -> T:
        if timeout is None:
            return await operation()

        # The timeout scope cancels the awaited operation when it expires.
        scope = asyncio.timeout(timeout)
        try:
            async with scope:
                return await operation()
        except TimeoutError as e:
            if scope.expired():
                raise OperationTimeoutException(service_name, timeout) from e
            raise

    def _fallback(
        self,
        service_name: str,
        fallback: Any,
        fallback_factory: Callable[[], Any] | None,
    ) -> Any:
        if fallback_factory is None:
            return fallback

        try:
            return fallback_factory()
        except Exception as e:
            logger.error(
                "Fallback factory failed, returning fallback value",
                service_name=service_name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return fallback
