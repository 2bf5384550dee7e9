"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from graceful_degradation.circuit_breaker import ServiceOverride
from graceful_degradation.config import DegradationSettings, Environment, get_settings
from graceful_degradation.observability import LogFormat, LogLevel


class TestDegradationSettings:
    """Test degradation settings."""

    def test_default_settings(self, monkeypatch):
        """Test default settings values."""
        monkeypatch.chdir("/")
        settings = get_settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.log_level == LogLevel.INFO
        assert settings.log_format == LogFormat.JSON
        assert settings.failure_threshold == 5
        assert settings.success_threshold == 3
        assert settings.reset_timeout == 30.0
        assert settings.request_timeout == 10.0
        assert set(settings.service_overrides) == {"openai", "redis", "weather"}

    def test_environment_variables(self, monkeypatch):
        """Test values are read with the DEGRADATION_ prefix."""
        monkeypatch.setenv("DEGRADATION_ENVIRONMENT", "production")
        monkeypatch.setenv("DEGRADATION_FAILURE_THRESHOLD", "7")
        monkeypatch.setenv("DEGRADATION_RESET_TIMEOUT", "12.5")
        monkeypatch.setenv("DEGRADATION_LOG_FORMAT", "console")
        monkeypatch.setenv(
            "DEGRADATION_SERVICE_OVERRIDES", '{"search": {"failure_threshold": 2}}'
        )

        settings = DegradationSettings()

        assert settings.environment == Environment.PRODUCTION
        assert settings.failure_threshold == 7
        assert settings.reset_timeout == 12.5
        assert settings.log_format == LogFormat.CONSOLE
        assert settings.service_overrides == {
            "search": ServiceOverride(failure_threshold=2)
        }

    def test_invalid_threshold_rejected(self):
        """Test thresholds must be positive."""
        with pytest.raises(ValidationError):
            DegradationSettings(failure_threshold=0)

    def test_build_resolver(self):
        """Test settings produce the resolver policy."""
        settings = DegradationSettings(
            failure_threshold=4,
            request_timeout=None,
            service_overrides={"search": ServiceOverride(reset_timeout=1.0)},
        )

        resolver = settings.build_resolver()

        assert resolver.resolve("anything").failure_threshold == 4
        assert resolver.resolve("anything").request_timeout is None
        search = resolver.resolve("search")
        assert search.reset_timeout == 1.0
        assert search.failure_threshold == 4
        assert resolver.resolve("openai").failure_threshold == 4

    def test_default_overrides_not_shared(self):
        """Test each settings instance owns its override table."""
        first = DegradationSettings()
        first.service_overrides["search"] = ServiceOverride(failure_threshold=1)

        assert "search" not in DegradationSettings().service_overrides
