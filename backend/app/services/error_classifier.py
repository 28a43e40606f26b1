"""Map pipeline failures onto HTTP responses."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from fastapi import status

from app.core.errors import (
    AIServiceError,
    ConfigurationError,
    EmptyResponseError,
    EmptyResultError,
    LLMTimeoutError,
    MalformedResponseError,
    ProviderError,
    ValidationError,
)

NOT_CONFIGURED = "AI service is not configured. Please contact the administrator."
UNEXPECTED_FORMAT = "AI response was not in expected format. Please try again."
PROVIDER_FAILED = "AI provider request failed. Please try again later."

TIMEOUT_MESSAGES = {
    "analysis": "AI analysis timed out. Please try again.",
    "breakdown": "Task breakdown timed out. Please try again with a simpler goal.",
}


@dataclass(frozen=True)
class ErrorResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


def classify_error(exc: AIServiceError, feature: str) -> ErrorResponse:
    """Return the HTTP response for a pipeline error.

    Anything outside the taxonomy is re-raised so the application-wide handler
    answers it without leaking details.
    """
    if isinstance(exc, ConfigurationError):
        return ErrorResponse(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            {"error": NOT_CONFIGURED, "details": exc.message},
        )
    if isinstance(exc, LLMTimeoutError):
        return ErrorResponse(
            status.HTTP_504_GATEWAY_TIMEOUT,
            {"error": TIMEOUT_MESSAGES.get(feature, TIMEOUT_MESSAGES["analysis"]), "details": exc.message},
        )
    if isinstance(exc, ValidationError):
        return ErrorResponse(status.HTTP_400_BAD_REQUEST, {"error": exc.message})
    if isinstance(exc, (MalformedResponseError, EmptyResultError, EmptyResponseError)):
        return ErrorResponse(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": UNEXPECTED_FORMAT, "details": exc.message},
        )
    if isinstance(exc, ProviderError):
        upstream = exc.status_code if exc.status_code is not None else "unavailable"
        return ErrorResponse(
            status.HTTP_502_BAD_GATEWAY,
            {"error": PROVIDER_FAILED, "details": f"Upstream status: {upstream}"},
        )
    raise exc
