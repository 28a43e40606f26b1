"""Shared FastAPI dependencies for the AI endpoints."""
from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict

from fastapi import Request, Response

from app.core.config import Settings, settings
from app.core.context import client_identity
from app.observability.metrics import log_metric
from app.services.llm_gateway import LLMGateway, RetryingGateway, build_gateway
from app.services.rate_limiter import FixedWindowRateLimiter, RateLimitDecision

ANALYSIS_GROUP = "analysis"
BREAKDOWN_GROUP = "breakdown"


class RateLimitExceeded(Exception):
    def __init__(self, decision: RateLimitDecision, window_s: float) -> None:
        super().__init__("rate limit exceeded")
        self.decision = decision
        self.window_s = window_s


def build_rate_limiters(config: Settings) -> Dict[str, FixedWindowRateLimiter]:
    return {
        ANALYSIS_GROUP: FixedWindowRateLimiter(
            name=ANALYSIS_GROUP,
            max_requests=config.analysis_rate_limit,
            window_s=config.rate_limit_window_s,
        ),
        BREAKDOWN_GROUP: FixedWindowRateLimiter(
            name=BREAKDOWN_GROUP,
            max_requests=config.breakdown_rate_limit,
            window_s=config.rate_limit_window_s,
        ),
    }


def rate_limit_headers(decision: RateLimitDecision) -> Dict[str, str]:
    reset = datetime.fromtimestamp(decision.reset_at, tz=timezone.utc)
    return {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": reset.isoformat().replace("+00:00", "Z"),
    }


class RateLimit:
    """Route dependency that counts the caller against one limiter group."""

    def __init__(self, group: str) -> None:
        self.group = group

    async def __call__(self, request: Request, response: Response) -> RateLimitDecision:
        limiter: FixedWindowRateLimiter = request.app.state.rate_limiters[self.group]
        host = request.client.host if request.client else None
        decision = limiter.hit(client_identity(host))
        if not decision.allowed:
            log_metric("ai.rate_limit.rejected", 1, metadata={"group": self.group})
            raise RateLimitExceeded(decision, limiter.window_s)
        response.headers.update(rate_limit_headers(decision))
        return decision


def get_app_settings() -> Settings:
    return settings


@lru_cache
def get_llm_gateway() -> LLMGateway | RetryingGateway:
    """Process-wide gateway; tests override this dependency."""
    return build_gateway(settings)


async def close_llm_gateway() -> None:
    """Release the cached gateway's provider connections, if one was built."""
    if get_llm_gateway.cache_info().currsize:
        await get_llm_gateway().aclose()
        get_llm_gateway.cache_clear()
