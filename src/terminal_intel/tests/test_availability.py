"""
Test suite for the cached local-engine availability monitor.
"""

import asyncio

import pytest

from terminal_intel.core.availability import AvailabilityMonitor
from terminal_intel.tests.fixtures.fakes import FakeProvider


class ExplodingProvider(FakeProvider):
    async def health_check(self) -> bool:
        self.health_checks += 1
        raise RuntimeError("socket closed")


class SlowProbeProvider(FakeProvider):
    """Probe that yields to the loop so callers contend for the lock."""

    async def health_check(self) -> bool:
        await asyncio.sleep(0.01)
        return await super().health_check()


@pytest.mark.unit
class TestAvailabilityMonitor:
    """Test TTL caching of probe results."""

    @pytest.mark.asyncio
    async def test_result_is_cached_within_ttl(self, clock):
        provider = FakeProvider(healthy=True)
        monitor = AvailabilityMonitor(provider, ttl=60.0, clock=clock)

        assert await monitor.is_available() is True
        clock.advance(59)
        assert await monitor.is_available() is True

        assert provider.health_checks == 1
        assert monitor.last_checked == 1000.0

    @pytest.mark.asyncio
    async def test_probe_repeats_after_ttl(self, clock):
        provider = FakeProvider(healthy=True)
        monitor = AvailabilityMonitor(provider, ttl=60.0, clock=clock)

        await monitor.is_available()
        provider.healthy = False
        clock.advance(60)

        assert await monitor.is_available() is False
        assert provider.health_checks == 2

    @pytest.mark.asyncio
    async def test_failures_are_cached_too(self, clock):
        provider = FakeProvider(healthy=False)
        monitor = AvailabilityMonitor(provider, ttl=60.0, clock=clock)

        for _ in range(5):
            assert await monitor.is_available() is False

        assert provider.health_checks == 1
        assert monitor.cached_value is False

    @pytest.mark.asyncio
    async def test_probe_exception_counts_as_unavailable(self, clock):
        provider = ExplodingProvider()
        monitor = AvailabilityMonitor(provider, clock=clock)

        assert await monitor.is_available() is False
        assert await monitor.is_available() is False
        assert provider.health_checks == 1

    @pytest.mark.asyncio
    async def test_invalidate_forces_new_probe(self, clock):
        provider = FakeProvider(healthy=True)
        monitor = AvailabilityMonitor(provider, clock=clock)

        await monitor.is_available()
        monitor.invalidate()
        assert monitor.cached_value is None
        await monitor.is_available()

        assert provider.health_checks == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_probe(self, clock):
        provider = FakeProvider(healthy=True)
        monitor = AvailabilityMonitor(provider, clock=clock)

        results = await asyncio.gather(*(monitor.is_available() for _ in range(5)))

        assert results == [True] * 5
        assert provider.health_checks == 1

    def test_monitor_survives_separate_event_loops(self, clock):
        provider = SlowProbeProvider(healthy=True)
        monitor = AvailabilityMonitor(provider, clock=clock)

        async def contend():
            return await asyncio.gather(monitor.is_available(), monitor.is_available())

        assert asyncio.run(contend()) == [True, True]
        monitor.invalidate()
        assert asyncio.run(contend()) == [True, True]
        assert provider.health_checks == 2
