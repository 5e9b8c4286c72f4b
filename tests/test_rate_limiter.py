"""Tests for the request-rate governor."""

import asyncio

import pytest

from scrybe.core.rate_limiter import (
    RateGovernor,
    get_rate_governor,
    set_rate_governor,
)


class TestRateGovernor:
    """Tests for RateGovernor."""

    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self):
        """Test the first dispatch is immediate."""
        governor = RateGovernor(min_interval=0.05)
        waited = await governor.acquire()
        assert waited == 0.0
        assert governor.last_dispatch is not None

    @pytest.mark.asyncio
    async def test_sequential_spacing(self):
        """Test consecutive dispatches are spaced."""
        governor = RateGovernor(min_interval=0.03, history_size=10)
        for _ in range(3):
            await governor.acquire()
        history = governor.history
        assert len(history) == 3
        for earlier, later in zip(history, history[1:]):
            assert later - earlier >= 0.03 - 1e-9

    @pytest.mark.asyncio
    async def test_concurrent_spacing(self):
        """Test concurrent tasks still dispatch one interval apart."""
        governor = RateGovernor(min_interval=0.02, history_size=20)
        await asyncio.gather(*(governor.acquire() for _ in range(8)))
        history = governor.history
        assert len(history) == 8
        assert history == sorted(history)
        for earlier, later in zip(history, history[1:]):
            assert later - earlier >= 0.02 - 1e-9

    @pytest.mark.asyncio
    async def test_disabled(self):
        """Test a disabled governor never waits or records."""
        governor = RateGovernor(min_interval=10, history_size=5, enabled=False)
        assert await governor.acquire() == 0.0
        assert await governor.acquire() == 0.0
        assert governor.history == []

    @pytest.mark.asyncio
    async def test_fake_clock(self):
        """Test waits are computed from the injected clock."""
        now = [100.0]
        governor = RateGovernor(min_interval=0.01, clock=lambda: now[0])
        await governor.acquire()
        now[0] = 100.05
        assert await governor.acquire() == 0.0
        assert governor.last_dispatch == 100.05

    @pytest.mark.asyncio
    async def test_cancelled_waiter_releases_lock(self):
        """Test cancelling a waiting task does not block later callers."""
        governor = RateGovernor(min_interval=0.2, history_size=5)
        await governor.acquire()
        waiter = asyncio.create_task(governor.acquire())
        await asyncio.sleep(0.01)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        assert not governor._lock.locked()
        assert len(governor.history) == 1
        governor.set_min_interval(0)
        await asyncio.wait_for(governor.acquire(), timeout=1)
        assert len(governor.history) == 2

    @pytest.mark.asyncio
    async def test_stats(self):
        """Test statistics tracking."""
        governor = RateGovernor(min_interval=0)
        await governor.acquire()
        await governor.acquire()
        stats = governor.get_stats()
        assert stats["requests"] == 2
        assert stats["avg_wait_seconds"] == 0

        governor.reset_stats()
        assert governor.get_stats()["requests"] == 0

    def test_negative_interval(self):
        """Test negative intervals are rejected."""
        with pytest.raises(ValueError):
            RateGovernor(min_interval=-1)
        governor = RateGovernor()
        with pytest.raises(ValueError):
            governor.set_min_interval(-0.5)


class TestGlobalGovernor:
    """Tests for the process-wide governor."""

    def test_singleton(self):
        """Test the same instance is returned."""
        assert get_rate_governor() is get_rate_governor()

    def test_replace(self):
        """Test replacing and resetting the global governor."""
        governor = RateGovernor(min_interval=0)
        set_rate_governor(governor)
        assert get_rate_governor() is governor
        set_rate_governor(None)
        assert get_rate_governor() is not governor

    def test_interval_from_config(self, monkeypatch):
        """Test a fresh global governor takes its interval from configuration."""
        monkeypatch.setenv("SCRYBE_RATE_LIMIT_MIN_INTERVAL_SECONDS", "0.25")
        set_rate_governor(None)
        try:
            assert get_rate_governor().min_interval == pytest.approx(0.25)
        finally:
            set_rate_governor(None)
