"""
Narrator-layer exceptions.
"""

from __future__ import annotations

from typing import List


class NarratorError(Exception):
    """Base exception for narrator failures."""


class NarratorConfigurationError(NarratorError):
    """Raised when the narrator service is unconfigured or unreachable.

    Covers a missing API key, rejected credentials, an unknown model and
    connection failures. Fatal for the current request.
    """


class NarratorServiceError(NarratorError):
    """Raised for any other narrator transport failure (timeouts, 5xx)."""


class NarratorResponseError(NarratorError):
    """Raised when narrator output fails parsing or schema validation.

    Attributes:
        stage: Which validation step failed ("json_parse" or "schema").
        errors: List of human-readable error descriptions.
        raw_response: The original string that failed validation.
    """

    def __init__(
        self,
        stage: str,
        errors: List[str],
        raw_response: str,
    ) -> None:
        self.stage = stage
        self.errors = errors
        self.raw_response = raw_response
        message = (
            f"Narrator output validation failed at stage '{stage}': "
            + "; ".join(errors)
        )
        super().__init__(message)
