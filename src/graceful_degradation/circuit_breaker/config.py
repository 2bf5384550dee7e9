"""Circuit breaker configuration models and per-service resolution."""

import threading
from collections.abc import Mapping

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import InvalidConfigurationException

logger = structlog.get_logger()


class BreakerConfig(BaseModel):
    """Effective circuit breaker configuration for a single service."""

    model_config = ConfigDict(frozen=True)

    failure_threshold: int = Field(
        default=5, gt=0, description="Consecutive failures before opening circuit"
    )
    success_threshold: int = Field(
        default=3,
        gt=0,
        description="Consecutive successes to close circuit from half-open",
    )
    reset_timeout: float = Field(
        default=30.0,
        ge=0.0,
        description="Seconds to wait after the last failure before a trial call",
    )
    request_timeout: float | None = Field(
        default=10.0,
        gt=0.0,
        description="Seconds before an in-flight call counts as failed",
    )


class ServiceOverride(BaseModel):
    """Partial configuration applied on top of the defaults for one service."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    failure_threshold: int | None = Field(default=None, gt=0)
    success_threshold: int | None = Field(default=None, gt=0)
    reset_timeout: float | None = Field(default=None, ge=0.0)
    request_timeout: float | None = Field(default=None, gt=0.0)


# Completion service fails fast, cache tolerates noise and retries quickly,
# third-party APIs get a long cooldown.
DEFAULT_SERVICE_OVERRIDES: dict[str, ServiceOverride] = {
    "openai": ServiceOverride(failure_threshold=3, reset_timeout=20.0),
    "redis": ServiceOverride(failure_threshold=10, reset_timeout=5.0),
    "weather": ServiceOverride(failure_threshold=3, reset_timeout=60.0),
}


class ConfigResolver:
    """Merges the default policy with optional per-service overrides."""

    def __init__(
        self,
        default: BreakerConfig | None = None,
        overrides: Mapping[str, ServiceOverride] | None = None,
    ):
        """Initialize config resolver.

        Args:
            default: Policy applied to every field an override leaves unset
            overrides: Per-service partial configurations
        """
        self.default = default or BreakerConfig()
        self._overrides = dict(
            DEFAULT_SERVICE_OVERRIDES if overrides is None else overrides
        )
        self._resolved: dict[str, BreakerConfig] = {}
        self._lock = threading.Lock()

    @property
    def overrides(self) -> dict[str, ServiceOverride]:
        """Return a copy of the override table."""
        return dict(self._overrides)

    def resolve(self, service_name: str) -> BreakerConfig:
        """Get the effective configuration for a service.

        Args:
            service_name: Name of the service

        Returns:
            Circuit breaker configuration

        Raises:
            InvalidConfigurationException: If the merged values are invalid
        """
        override = self._overrides.get(service_name)
        if override is None:
            return self.default

        # Only overridden names are memoised; every other name shares the default.
        with self._lock:
            config = self._resolved.get(service_name)
            if config is not None:
                return config

            merged = self.default.model_dump()
            merged.update(override.model_dump(exclude_unset=True))
            try:
                config = BreakerConfig.model_validate(merged)
            except ValidationError as e:
                raise InvalidConfigurationException(
                    f"Invalid circuit breaker configuration: {e}",
                    service_name=service_name,
                ) from e
            self._resolved[service_name] = config

        logger.debug(
            "Resolved circuit breaker override",
            service_name=service_name,
            config=config.model_dump(),
        )
        return config
