"""Tracing utilities wrapping Opik."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from app.core.context import get_request_id
from app.observability import client as opik_client

logger = logging.getLogger(__name__)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional[Any]]:
    """Open an Opik trace around a block; a no-op context when tracing is off.

    Exceptions raised inside the block are attached to the trace and re-raised.
    """
    client = opik_client.get_opik_client()
    span = None

    if client:
        trace_metadata = dict(metadata or {})
        trace_metadata.setdefault("request_id", request_id or get_request_id())
        try:
            span = client.trace(name=name, metadata=trace_metadata)
        except Exception as exc:  # pragma: no cover - telemetry must not fail requests
            logger.debug("Unable to start Opik trace %s: %s", name, exc)

    try:
        yield span
    except Exception as exc:
        if span is not None:
            try:
                span.update(error_info={"exception_type": type(exc).__name__, "message": str(exc)})
            except Exception:  # pragma: no cover
                logger.debug("Failed to attach error info to trace %s", name, exc_info=True)
        raise
    finally:
        if span is not None:
            try:
                span.end()
            except Exception:  # pragma: no cover
                logger.debug("Failed to close trace %s cleanly", name, exc_info=True)
