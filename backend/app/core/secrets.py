"""API key resolution (direct env var or mounted secret file)."""
from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Dict, Tuple

from app.core.config import Settings
from app.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CACHE_TTL_S = 5 * 60

_secret_cache: Dict[str, Tuple[str, float]] = {}


async def get_api_key(settings: Settings) -> str:
    """Return the provider API key or raise ConfigurationError."""
    if settings.openrouter_api_key:
        return settings.openrouter_api_key

    if settings.openrouter_api_key_file:
        return await _read_secret_file(settings.openrouter_api_key_file)

    raise ConfigurationError(
        "OPENROUTER_API_KEY is not configured. "
        "Set OPENROUTER_API_KEY for local dev, or OPENROUTER_API_KEY_FILE to a mounted secret."
    )


async def _read_secret_file(path: str) -> str:
    cached = _secret_cache.get(path)
    now = time.monotonic()
    if cached and now - cached[1] < CACHE_TTL_S:
        return cached[0]

    try:
        raw = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to read API key secret %s: %s", path, exc)
        raise ConfigurationError(f"API key secret is not readable: {path}") from exc

    value = raw.strip()
    if not value:
        raise ConfigurationError(f"API key secret is empty: {path}")

    _secret_cache[path] = (value, now)
    return value


def clear_secret_cache() -> None:
    _secret_cache.clear()
