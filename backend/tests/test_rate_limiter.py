from __future__ import annotations

import asyncio
from types import SimpleNamespace

from app.services.rate_limiter import FixedWindowRateLimiter
from app.worker.rate_limit_sweeper import SWEEP_JOB_ID, start_sweep_scheduler, sweep_all


class _Clock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _limiter(clock: _Clock, max_requests: int = 3) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(name="test", max_requests=max_requests, window_s=60, clock=clock)


def test_allows_up_to_limit_then_rejects() -> None:
    clock = _Clock()
    limiter = _limiter(clock)

    decisions = [limiter.hit("1.2.3.4") for _ in range(3)]
    assert all(decision.allowed for decision in decisions)
    assert [decision.remaining for decision in decisions] == [2, 1, 0]

    clock.now += 15
    rejected = limiter.hit("1.2.3.4")
    assert rejected.allowed is False
    assert rejected.remaining == 0
    assert rejected.retry_after == 45
    assert 0 < rejected.retry_after <= 60


def test_identities_are_independent() -> None:
    clock = _Clock()
    limiter = _limiter(clock, max_requests=1)

    assert limiter.hit("a").allowed
    assert limiter.hit("b").allowed
    assert not limiter.hit("a").allowed


def test_window_resets_after_expiry() -> None:
    clock = _Clock()
    limiter = _limiter(clock, max_requests=1)

    assert limiter.hit("a").allowed
    assert not limiter.hit("a").allowed

    clock.now += 61
    fresh = limiter.hit("a")
    assert fresh.allowed
    assert fresh.reset_at == clock.now + 60


def test_retry_after_never_zero_at_window_edge() -> None:
    clock = _Clock()
    limiter = _limiter(clock, max_requests=1)
    limiter.hit("a")

    clock.now += 60
    assert limiter.hit("a").retry_after == 1


def test_sweep_removes_only_expired_entries() -> None:
    clock = _Clock()
    limiter = _limiter(clock)
    limiter.hit("old")
    clock.now += 30
    limiter.hit("new")

    clock.now += 31
    assert limiter.sweep() == 1
    assert len(limiter) == 1


def test_sweep_all_covers_every_group() -> None:
    clock = _Clock()
    limiters = {"analysis": _limiter(clock), "breakdown": _limiter(clock)}
    limiters["analysis"].hit("a")
    limiters["breakdown"].hit("b")

    clock.now += 61
    assert sweep_all(limiters) == 2


def test_sweep_scheduler_registers_interval_job() -> None:
    async def run() -> None:
        state = SimpleNamespace(rate_limiters={})
        scheduler = start_sweep_scheduler(state, 300)
        try:
            job = scheduler.get_job(SWEEP_JOB_ID)
            assert job is not None
            assert job.trigger.interval.total_seconds() == 300
        finally:
            scheduler.shutdown(wait=False)

    asyncio.run(run())
