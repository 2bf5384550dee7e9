"""Tests for the graceful degradation facade."""

import pytest
from structlog.testing import capture_logs

from graceful_degradation import (
    CircuitBreakerOpenException,
    CircuitState,
    DegradationSettings,
    GracefulDegradation,
    LoggingObserver,
    ServiceOverride,
)


@pytest.fixture
def degradation(resolver, observer, clock):
    """Create a degradation instance driven by the fake clock."""
    return GracefulDegradation(
        resolver=resolver, observer=observer, clock=clock, wall_clock=clock
    )


class TestGracefulDegradation:
    """Test the facade end to end."""

    @pytest.mark.asyncio
    async def test_openai_outage_and_recovery(self, degradation, clock):
        """Test the full open and recovery cycle for one dependency."""
        calls = []

        async def complete():
            calls.append(1)
            return "completion"

        for _ in range(3):
            degradation.record_failure("openai", ValueError("rate limited"))
        assert degradation.is_circuit_open("openai")

        assert await degradation.execute("openai", complete, "fallback") == "fallback"
        assert calls == []

        clock.advance(20.0)
        assert await degradation.execute("openai", complete, "fallback") == "completion"
        assert degradation.get_service_status("openai").state == CircuitState.HALF_OPEN

        await degradation.execute("openai", complete, "fallback")
        await degradation.execute("openai", complete, "fallback")
        assert degradation.is_circuit_closed("openai")
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_protect_decorator(self, degradation):
        """Test the bound decorator uses this instance's breakers."""

        @degradation.protect("weather", fallback="unknown")
        async def forecast():
            raise ConnectionError("unreachable")

        assert await forecast() == "unknown"
        assert degradation.get_service_stats("weather").total_requests == 1

    def test_ensure_available(self, degradation):
        """Test the strict check raises while open."""
        degradation.ensure_available("openai")
        for _ in range(3):
            degradation.record_failure("openai", ValueError("boom"))

        with pytest.raises(CircuitBreakerOpenException):
            degradation.ensure_available("openai")

    def test_reporting(self, degradation):
        """Test statistics and health through the facade."""
        for _ in range(3):
            degradation.record_success("supabase")
        degradation.record_failure("supabase", ValueError("boom"))

        stats = degradation.get_service_stats("supabase")
        assert stats.total_requests == 4
        assert stats.failure_rate == 25.0
        assert degradation.get_system_health().healthy is True
        assert set(degradation.get_all_service_statuses()) == {"supabase"}

        fallback = degradation.get_fallback_response("supabase")
        assert fallback.retry_after == 30
        assert fallback.service == "supabase"

    def test_reset_and_clear(self, degradation):
        """Test administrative operations."""
        for _ in range(3):
            degradation.record_failure("openai", ValueError("boom"))

        assert degradation.reset_circuit_breaker("openai") is True
        assert degradation.reset_circuit_breaker("never-called") is False
        assert degradation.is_circuit_closed("openai")
        assert degradation.get_service_stats("openai").total_requests == 0

        degradation.clear_all()
        assert degradation.get_all_service_statuses() == {}

    def test_instances_are_independent(self, resolver, observer, clock):
        """Test separate instances keep separate circuit state."""
        first = GracefulDegradation(resolver=resolver, observer=observer, clock=clock)
        second = GracefulDegradation(resolver=resolver, observer=observer, clock=clock)

        for _ in range(3):
            first.record_failure("openai", ValueError("boom"))

        assert first.is_circuit_open("openai")
        assert second.is_circuit_closed("openai")

    def test_from_settings(self):
        """Test building an instance from settings."""
        settings = DegradationSettings(
            failure_threshold=2,
            service_overrides={"search": ServiceOverride(failure_threshold=1)},
        )

        with capture_logs() as logs:
            degradation = GracefulDegradation.from_settings(settings)

        assert isinstance(degradation.registry.observer, LoggingObserver)
        assert degradation.registry.get_breaker("search").config.failure_threshold == 1
        assert degradation.registry.get_breaker("other").config.failure_threshold == 2
        assert logs[0]["event"] == "Initializing graceful degradation"
        assert logs[0]["overridden_services"] == ["search"]
