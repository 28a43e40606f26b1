from __future__ import annotations

import os

# Settings are read at import time; pin a hermetic environment before app modules load.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_CREATE_ALL", "false")
os.environ.setdefault("RATE_LIMIT_SWEEP_ENABLED", "false")
os.environ.setdefault("OPIK_ENABLED", "false")
os.environ.pop("OPENROUTER_API_KEY", None)
os.environ.pop("OPENROUTER_API_KEY_FILE", None)

from typing import List  # noqa: E402

import pytest  # noqa: E402

from app.core.errors import AIServiceError  # noqa: E402
from app.services.llm_gateway import CompletionRequest  # noqa: E402


class FakeGateway:
    """Stands in for LLMGateway; records every request it receives."""

    def __init__(self, content: str | None = None, error: AIServiceError | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: List[CompletionRequest] = []

    async def complete(self, request: CompletionRequest, *, request_id: str | None = None) -> str:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.content or ""


@pytest.fixture()
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def ai_client(fake_gateway):
    """TestClient wired to the fake gateway with fresh rate-limit windows."""
    from fastapi.testclient import TestClient

    from app.api.dependencies import build_rate_limiters, get_llm_gateway
    from app.core.config import settings
    from app.main import app

    original_limiters = app.state.rate_limiters
    app.state.rate_limiters = build_rate_limiters(settings)
    app.dependency_overrides[get_llm_gateway] = lambda: fake_gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.rate_limiters = original_limiters
