"""Fixed-window request counting per caller identity."""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int


class FixedWindowRateLimiter:
    """Counts requests per identity; the counter resets when its window ends.

    State lives in this object only, so every process enforces its own limits.
    """

    def __init__(
        self,
        *,
        name: str,
        max_requests: int,
        window_s: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.name = name
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}

    def hit(self, identity: str) -> RateLimitDecision:
        now = self._clock()
        entry = self._entries.get(identity)
        if entry is None or now > entry.reset_at:
            entry = RateLimitEntry(count=0, reset_at=now + self.window_s)
            self._entries[identity] = entry

        entry.count += 1
        allowed = entry.count <= self.max_requests
        retry_after = 0 if allowed else max(1, math.ceil(entry.reset_at - now))
        if not allowed:
            logger.info(
                "Rate limit %s exceeded for %s (%d/%d)",
                self.name,
                identity,
                entry.count,
                self.max_requests,
            )
        return RateLimitDecision(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - entry.count),
            reset_at=entry.reset_at,
            retry_after=retry_after,
        )

    def sweep(self) -> int:
        """Drop expired windows; returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Swept %d expired %s rate-limit entries", len(expired), self.name)
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
