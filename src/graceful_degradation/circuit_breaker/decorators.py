"""Circuit breaker decorators for easy integration."""

import functools
from collections.abc import Awaitable, Callable
from typing import Any

from .executor import ProtectedExecutor


def circuit_protected(
    executor: ProtectedExecutor,
    service_name: str,
    fallback: Any = None,
    *,
    fallback_factory: Callable[[], Any] | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Decorator to route every call of a coroutine function through the executor.

    Args:
        executor: Executor holding the registry to use
        service_name: Name of the service to protect
        fallback: Value returned when the call is skipped or fails
        fallback_factory: Builds the fallback lazily

    Returns:
        Decorator function
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await executor.execute(
                service_name,
                lambda: func(*args, **kwargs),
                fallback,
                fallback_factory=fallback_factory,
            )

        return wrapper

    return decorator
