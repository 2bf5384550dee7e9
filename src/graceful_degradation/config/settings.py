"""
Configuration management for graceful degradation.

Settings are read from environment variables prefixed with ``DEGRADATION_``
(or a ``.env`` file) and turned into the immutable per-service circuit
breaker policy at start-up.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..circuit_breaker.config import (
    DEFAULT_SERVICE_OVERRIDES,
    BreakerConfig,
    ConfigResolver,
    ServiceOverride,
)
from ..observability.logging import LogFormat, LogLevel, setup_logging


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class DegradationSettings(BaseSettings):
    """Circuit breaker policy and logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DEGRADATION_", env_file=".env", extra="ignore"
    )

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.JSON

    # Default policy for every dependency
    failure_threshold: int = Field(default=5, gt=0)
    success_threshold: int = Field(default=3, gt=0)
    reset_timeout: float = Field(default=30.0, ge=0.0)
    request_timeout: float | None = Field(default=10.0, gt=0.0)

    # Per-dependency overrides, JSON when given through the environment
    service_overrides: dict[str, ServiceOverride] = Field(
        default_factory=lambda: dict(DEFAULT_SERVICE_OVERRIDES)
    )

    def default_config(self) -> BreakerConfig:
        """Get the policy applied to services without overrides."""
        return BreakerConfig(
            failure_threshold=self.failure_threshold,
            success_threshold=self.success_threshold,
            reset_timeout=self.reset_timeout,
            request_timeout=self.request_timeout,
        )

    def build_resolver(self) -> ConfigResolver:
        """Build the per-service configuration resolver."""
        return ConfigResolver(self.default_config(), self.service_overrides)

    def configure_logging(self) -> None:
        """Apply the logging settings."""
        setup_logging(
            level=self.log_level,
            format_type=self.log_format,
            enable_colors=self.environment == Environment.DEVELOPMENT,
        )


def get_settings() -> DegradationSettings:
    """Get degradation settings from the environment."""
    return DegradationSettings()
