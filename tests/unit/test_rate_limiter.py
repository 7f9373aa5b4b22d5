"""Unit tests for the RateLimiter.

Uses a manual clock so grant times are exact and the suite never sleeps.
"""

from __future__ import annotations

import asyncio

import pytest

from pipewatch.core.errors import RateLimiterError
from pipewatch.core.rate_limiter import RateLimiter


def _grant_times(limiter: RateLimiter, clock, calls: int) -> list[float]:
    times: list[float] = []

    async def one() -> None:
        await limiter.acquire()
        times.append(clock())

    async def scenario() -> None:
        await asyncio.gather(*(one() for _ in range(calls)))

    asyncio.run(scenario())
    return times


class TestBurst:
    def test_first_count_grants_are_immediate(self, fake_clock):
        limiter = RateLimiter(5, 1.0, clock=fake_clock, sleep=fake_clock.sleep)
        times = _grant_times(limiter, fake_clock, 5)
        assert times == [0.0] * 5
        assert fake_clock.sleeps == []

    def test_sixth_grant_waits_for_first_token(self, fake_clock):
        limiter = RateLimiter(5, 1.0, clock=fake_clock, sleep=fake_clock.sleep)
        times = _grant_times(limiter, fake_clock, 6)
        assert times[5] == pytest.approx(1.0)


class TestWindow:
    """No window of one period ever holds more than ``count`` grants."""

    @pytest.mark.parametrize("calls", [6, 12, 23])
    def test_sliding_window_bound(self, fake_clock, calls):
        limiter = RateLimiter(5, 1.0, clock=fake_clock, sleep=fake_clock.sleep)
        times = _grant_times(limiter, fake_clock, calls)
        assert times == sorted(times)
        for i in range(len(times) - 5):
            assert times[i + 5] - times[i] >= 1.0 - 1e-9

    def test_tokens_return_after_period(self, fake_clock):
        limiter = RateLimiter(2, 1.0, clock=fake_clock, sleep=fake_clock.sleep)
        _grant_times(limiter, fake_clock, 2)
        assert limiter.available == 0
        fake_clock.now += 1.0
        assert limiter.available == 2

    def test_staggered_callers(self, fake_clock):
        limiter = RateLimiter(2, 1.0, clock=fake_clock, sleep=fake_clock.sleep)

        async def scenario() -> list[float]:
            times = []
            for _ in range(5):
                await limiter.acquire()
                times.append(fake_clock())
                fake_clock.now += 0.25
            return times

        times = asyncio.run(scenario())
        for i in range(len(times) - 2):
            assert times[i + 2] - times[i] >= 1.0 - 1e-9


class TestFifo:
    def test_waiters_are_served_in_arrival_order(self, fake_clock):
        limiter = RateLimiter(1, 1.0, clock=fake_clock, sleep=fake_clock.sleep)
        order: list[int] = []

        async def caller(index: int) -> None:
            await limiter.acquire()
            order.append(index)

        async def scenario() -> None:
            await asyncio.gather(*(caller(i) for i in range(6)))

        asyncio.run(scenario())
        assert order == list(range(6))


class TestFailures:
    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            RateLimiter(0, 1.0)
        with pytest.raises(ValueError):
            RateLimiter(1, 0)

    def test_clock_failure_becomes_rate_limiter_error(self):
        def broken_clock() -> float:
            raise OSError("clock unavailable")

        limiter = RateLimiter(1, 1.0, clock=broken_clock)
        with pytest.raises(RateLimiterError):
            asyncio.run(limiter.acquire())

    def test_real_clock_smoke(self):
        limiter = RateLimiter(3, 0.05)

        async def scenario() -> None:
            for _ in range(4):
                await limiter.acquire()

        asyncio.run(scenario())
