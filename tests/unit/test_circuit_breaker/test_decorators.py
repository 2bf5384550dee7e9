"""Tests for the circuit protection decorator."""

import pytest

from graceful_degradation.circuit_breaker import CircuitState, circuit_protected


class TestCircuitProtected:
    """Test decorator integration."""

    @pytest.mark.asyncio
    async def test_passes_arguments_through(self, executor, registry):
        """Test decorated functions receive their arguments."""

        @circuit_protected(executor, "weather", fallback={"temperature": None})
        async def get_forecast(city, units="metric"):
            return {"city": city, "units": units}

        result = await get_forecast("Oslo", units="imperial")

        assert result == {"city": "Oslo", "units": "imperial"}
        assert registry.get_breaker("weather").metrics.total_successes == 1

    @pytest.mark.asyncio
    async def test_failure_returns_fallback(self, executor):
        """Test errors from the decorated function become the fallback."""

        @circuit_protected(executor, "weather", fallback={"temperature": None})
        async def get_forecast(city):
            raise ConnectionError(city)

        assert await get_forecast("Oslo") == {"temperature": None}

    @pytest.mark.asyncio
    async def test_open_circuit_skips_call(self, executor, registry):
        """Test the decorated function is not invoked while open."""
        calls = []

        @circuit_protected(executor, "weather", fallback_factory=list)
        async def get_alerts():
            calls.append(1)
            return ["storm"]

        for _ in range(3):
            registry.record_failure("weather", ValueError("boom"))

        assert registry.get_breaker("weather").state == CircuitState.OPEN
        assert await get_alerts() == []
        assert calls == []

    def test_preserves_metadata(self, executor):
        """Test functools.wraps keeps the function's identity."""

        @circuit_protected(executor, "weather")
        async def get_forecast():
            """Fetch the forecast."""

        assert get_forecast.__name__ == "get_forecast"
        assert get_forecast.__doc__ == "Fetch the forecast."
