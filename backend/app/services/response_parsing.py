"""Locate the JSON object inside a free-text completion."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from app.core.errors import MalformedResponseError

logger = logging.getLogger(__name__)

GREEDY_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
UNEXPECTED_FORMAT = "AI response was not in expected JSON format"
LOG_PREVIEW_CHARS = 200

_decoder = json.JSONDecoder()


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the first JSON object embedded in ``text``.

    The span from the first ``{`` to the last ``}`` is tried first, which covers
    replies that wrap a single object in prose or code fences. When that span is
    not valid JSON (stray braces in the commentary, several objects), each ``{``
    is tried in turn with an incremental decoder.
    """
    match = GREEDY_OBJECT_RE.search(text)
    if not match:
        logger.warning("Completion contained no JSON object: %r", text[:LOG_PREVIEW_CHARS])
        raise MalformedResponseError(UNEXPECTED_FORMAT)

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    recovered = _scan_for_object(text, match.start())
    if recovered is None:
        logger.warning("Completion JSON could not be parsed: %r", text[:LOG_PREVIEW_CHARS])
        raise MalformedResponseError(UNEXPECTED_FORMAT)
    return recovered


def _scan_for_object(text: str, start: int) -> Optional[Dict[str, Any]]:
    position = text.find("{", start)
    while position != -1:
        try:
            value, _ = _decoder.raw_decode(text, position)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        position = text.find("{", position + 1)
    return None
