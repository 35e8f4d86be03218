"""Tests for abipacks.throttle."""

from __future__ import annotations

import asyncio

import pytest

from abipacks.models import RateLimitPolicy
from abipacks.throttle import RateLimiter


class FakeClock:
    """Deterministic clock whose sleep advances time instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_starts_are_spaced_by_policy_interval() -> None:
    clock = FakeClock()
    limiter = RateLimiter(RateLimitPolicy(rate=5, per_seconds=1.0, concurrent=1), clock=clock, sleep=clock.sleep)
    starts: list[float] = []

    async def request() -> None:
        async with limiter.slot():
            starts.append(clock.now)

    await asyncio.gather(*(request() for _ in range(6)))

    assert starts == pytest.approx([0.0, 0.2, 0.4, 0.6, 0.8, 1.0])


@pytest.mark.asyncio
async def test_never_exceeds_concurrency_ceiling() -> None:
    limiter = RateLimiter(RateLimitPolicy(rate=1000, per_seconds=1.0, concurrent=2))
    active = 0
    peak = 0

    async def request() -> None:
        nonlocal active, peak
        async with limiter.slot():
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(request() for _ in range(10)))

    assert peak == 2
    assert limiter.in_flight == 0


@pytest.mark.asyncio
async def test_real_time_spacing_for_default_policy() -> None:
    limiter = RateLimiter(RateLimitPolicy(rate=5, per_seconds=1.0, concurrent=1))
    loop = asyncio.get_running_loop()
    starts: list[float] = []
    active = 0
    peak = 0

    async def request() -> None:
        nonlocal active, peak
        async with limiter.slot():
            active += 1
            peak = max(peak, active)
            starts.append(loop.time())
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(request() for _ in range(4)))

    gaps = [later - earlier for earlier, later in zip(starts, starts[1:])]
    assert peak == 1
    assert all(gap >= 0.19 for gap in gaps)


@pytest.mark.asyncio
async def test_slot_released_when_body_raises() -> None:
    limiter = RateLimiter(RateLimitPolicy(rate=1000, per_seconds=1.0, concurrent=1))

    with pytest.raises(RuntimeError):
        async with limiter.slot():
            raise RuntimeError("boom")

    async with limiter.slot():
        assert limiter.in_flight == 1
    assert limiter.in_flight == 0


def test_policy_interval() -> None:
    assert RateLimitPolicy(rate=5, per_seconds=1.0).interval == pytest.approx(0.2)
    assert RateLimitPolicy(rate=0, per_seconds=1.0).interval == 0.0
