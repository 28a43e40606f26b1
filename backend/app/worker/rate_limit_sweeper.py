"""Periodic cleanup of expired rate-limit windows."""
from __future__ import annotations

import asyncio
import logging
from typing import Mapping

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.services.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "rate_limit_sweep"


def sweep_all(limiters: Mapping[str, FixedWindowRateLimiter]) -> int:
    removed = sum(limiter.sweep() for limiter in limiters.values())
    if removed:
        logger.info("Rate-limit sweep removed %d expired entries", removed)
    return removed


def start_sweep_scheduler(app_state, interval_s: int) -> AsyncIOScheduler:
    """Schedule ``sweep_all`` on the running event loop.

    The job is a coroutine so it runs on the loop that serves requests, and it
    reads ``app_state.rate_limiters`` at run time so a swapped map is swept too.
    """

    async def sweep_job() -> None:
        sweep_all(app_state.rate_limiters)

    scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
    scheduler.add_job(
        sweep_job,
        trigger="interval",
        seconds=interval_s,
        id=SWEEP_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    scheduler.start()
    logger.info("Registered rate-limit sweep every %ss", interval_s)
    return scheduler
