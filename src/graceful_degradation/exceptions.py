"""Exception hierarchy for the graceful degradation subsystem."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes."""

    OPERATION_FAILED = "operation_failed"
    TIMEOUT_ERROR = "timeout_error"
    CIRCUIT_BREAKER_OPEN = "circuit_breaker_open"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"


class DegradationException(Exception):
    """Base exception for graceful degradation."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.correlation_id = correlation_id

    def to_dict(self) -> dict[str, Any]:
        """Convert to an API-friendly dictionary."""
        return {
            "code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "correlation_id": self.correlation_id,
        }


class OperationFailureException(DegradationException):
    """A wrapped operation raised an error."""

    def __init__(
        self,
        service_name: str,
        cause: BaseException,
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"Operation failed for service: {service_name}",
            ErrorCode.OPERATION_FAILED,
            {
                "service_name": service_name,
                "error_type": type(cause).__name__,
                "error_message": str(cause),
            },
            correlation_id,
        )
        self.service_name = service_name
        self.cause = cause


class OperationTimeoutException(DegradationException):
    """A wrapped operation exceeded its request timeout."""

    def __init__(
        self,
        service_name: str,
        timeout_duration: float,
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"Operation for service {service_name} timed out after {timeout_duration}s",
            ErrorCode.TIMEOUT_ERROR,
            {"service_name": service_name, "timeout_duration": timeout_duration},
            correlation_id,
        )
        self.service_name = service_name
        self.timeout_duration = timeout_duration


class CircuitBreakerOpenException(DegradationException):
    """Circuit breaker is open exception."""

    def __init__(
        self,
        service_name: str,
        retry_after: int | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"Circuit breaker open for service: {service_name}",
            ErrorCode.CIRCUIT_BREAKER_OPEN,
            {"service_name": service_name, "retry_after": retry_after},
            correlation_id,
        )
        self.service_name = service_name
        self.retry_after = retry_after


class InvalidConfigurationException(DegradationException):
    """Circuit breaker configuration could not be built."""

    def __init__(self, message: str, service_name: str | None = None):
        super().__init__(
            message,
            ErrorCode.CONFIGURATION_ERROR,
            {"service_name": service_name} if service_name else {},
        )
        self.service_name = service_name
