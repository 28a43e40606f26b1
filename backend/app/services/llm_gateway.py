"""Chat-completion gateway for the OpenAI-compatible provider."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Tuple

import openai

from app.core.config import Settings
from app.core.errors import EmptyResponseError, LLMTimeoutError, ProviderError
from app.core.secrets import get_api_key
from app.observability.tracing import trace

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, float], Any]


@dataclass(frozen=True)
class CompletionRequest:
    system_prompt: str
    user_prompt: str
    model: str
    max_tokens: int
    timeout_s: float
    feature: str
    title: str
    temperature: float = 0.7


class CompletionGateway(Protocol):
    async def complete(self, request: CompletionRequest, *, request_id: str | None = None) -> str: ...


def default_client_factory(settings: Settings) -> ClientFactory:
    def build(api_key: str, timeout_s: float) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=api_key,
            base_url=settings.openrouter_base_url,
            timeout=timeout_s,
            max_retries=0,
        )

    return build


class LLMGateway:
    """Issue one chat completion and return the raw content text."""

    def __init__(self, settings: Settings, client_factory: Optional[ClientFactory] = None) -> None:
        self._settings = settings
        self._client_factory = client_factory or default_client_factory(settings)
        self._clients: Dict[Tuple[str, float], Any] = {}

    async def complete(self, request: CompletionRequest, *, request_id: str | None = None) -> str:
        api_key = await get_api_key(self._settings)
        client = self._client_for(api_key, request.timeout_s)

        metadata = {"model": request.model, "max_tokens": request.max_tokens, "feature": request.feature}
        with trace(f"llm.{request.feature}", metadata=metadata, request_id=request_id):
            try:
                completion = await asyncio.wait_for(
                    self._create(client, request),
                    timeout=request.timeout_s,
                )
            except (asyncio.TimeoutError, openai.APITimeoutError) as exc:
                logger.warning("Provider call exceeded %.1fs deadline (%s)", request.timeout_s, request.feature)
                raise LLMTimeoutError(f"{request.feature} request timed out after {request.timeout_s:g}s") from exc
            except openai.APIStatusError as exc:
                logger.error("Provider API error %s: %s", exc.status_code, _error_text(exc))
                raise ProviderError(
                    f"Provider API error: {exc.status_code}",
                    status_code=exc.status_code,
                ) from exc
            except openai.APIConnectionError as exc:
                logger.error("Provider unreachable: %s", exc)
                raise ProviderError("Provider API error: connection failed") from exc

        return _first_message_content(completion)

    async def aclose(self) -> None:
        """Close every pooled provider client."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            close = getattr(client, "close", None)
            if close is not None:
                await close()

    def _client_for(self, api_key: str, timeout_s: float) -> Any:
        # one pooled client per key/deadline pair; a rotated key gets a fresh one
        key = (api_key, timeout_s)
        client = self._clients.get(key)
        if client is None:
            client = self._client_factory(api_key, timeout_s)
            self._clients[key] = client
        return client

    async def _create(self, client: Any, request: CompletionRequest) -> Any:
        return await client.chat.completions.create(
            model=request.model,
            messages=[
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            extra_headers={
                "HTTP-Referer": self._settings.ai_http_referer,
                "X-Title": request.title,
            },
        )


class RetryingGateway:
    """Bounded retry with exponential backoff around another gateway.

    Only transient failures (timeouts, upstream errors) are retried.
    """

    RETRYABLE = (LLMTimeoutError, ProviderError)

    def __init__(
        self,
        inner: LLMGateway,
        *,
        max_attempts: int,
        backoff_s: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._inner = inner
        self._max_attempts = max(1, max_attempts)
        self._backoff_s = backoff_s
        self._sleep = sleep

    async def complete(self, request: CompletionRequest, *, request_id: str | None = None) -> str:
        attempt = 1
        while True:
            try:
                return await self._inner.complete(request, request_id=request_id)
            except self.RETRYABLE as exc:
                if attempt >= self._max_attempts:
                    raise
                delay = self._backoff_s * (2 ** (attempt - 1))
                logger.info(
                    "Retrying %s call after %s (attempt %d/%d, sleeping %.2fs)",
                    request.feature,
                    type(exc).__name__,
                    attempt + 1,
                    self._max_attempts,
                    delay,
                )
                await self._sleep(delay)
                attempt += 1

    async def aclose(self) -> None:
        await self._inner.aclose()


def build_gateway(settings: Settings, client_factory: Optional[ClientFactory] = None) -> LLMGateway | RetryingGateway:
    gateway = LLMGateway(settings, client_factory)
    if settings.llm_max_attempts > 1:
        return RetryingGateway(
            gateway,
            max_attempts=settings.llm_max_attempts,
            backoff_s=settings.llm_retry_backoff_s,
        )
    return gateway


def _first_message_content(completion: Any) -> str:
    choices = getattr(completion, "choices", None)
    if not choices:
        raise EmptyResponseError("No response from AI model")

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if not isinstance(content, str) or not content.strip():
        raise EmptyResponseError("No response from AI model")
    return content


def _error_text(exc: openai.APIStatusError) -> str:
    try:
        return exc.response.text
    except Exception:  # pragma: no cover - body may already be consumed
        return str(exc)
