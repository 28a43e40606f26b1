"""Error taxonomy shared by the AI pipelines."""
from __future__ import annotations


class AIServiceError(Exception):
    """Base class for every failure raised by the analysis/breakdown pipelines."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(AIServiceError):
    """The service cannot run as deployed (missing API key, unreadable secret)."""


class ValidationError(AIServiceError):
    """Caller-supplied input was rejected before any provider call."""


class LLMTimeoutError(AIServiceError, TimeoutError):
    """The provider call was cancelled at its deadline."""


class ProviderError(AIServiceError):
    """Upstream returned a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(AIServiceError):
    """Provider answered successfully but with no choices or no content."""


class MalformedResponseError(AIServiceError):
    """Completion text did not contain a usable JSON object."""


class EmptyResultError(AIServiceError):
    """Nothing survived response validation."""
