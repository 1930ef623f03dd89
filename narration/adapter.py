"""Narrator adapters for compliance report generation.

Provides a base interface, a concrete adapter for OpenAI-compatible chat
completion APIs (Gemini by default) and a scripted double for testing.
"""

import json
from abc import ABC, abstractmethod
from typing import List, Optional

import openai
from openai import OpenAI

from narration.errors import NarratorConfigurationError, NarratorServiceError
from narration.schema import NarrativeReport
from narration.validator import validate_narrator_output

_SYSTEM_INSTRUCTION = (
    "You are a compliance report generator. Always return valid JSON only, "
    "no additional text or markdown formatting."
)


class BaseNarratorAdapter(ABC):
    """Abstract base for all narrator adapters."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a prompt to the narrator and return the raw response text.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Raw string response from the narrator (expected to be JSON).
        """

    def render(self, prompt: str) -> NarrativeReport:
        """Generate once and validate the response.

        Raises:
            NarratorConfigurationError: Service unconfigured or unreachable.
            NarratorServiceError: Any other transport failure.
            NarratorResponseError: Response is not a valid NarrativeReport.
        """
        return validate_narrator_output(self.generate(prompt))


class OpenAINarratorAdapter(BaseNarratorAdapter):
    """Adapter for OpenAI-compatible chat completion APIs.

    One blocking, non-streaming round trip per call. The client's built-in
    retries are disabled so each report issues exactly one request.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: Optional[str] = None,
        temperature: float = 0.3,
        top_p: float = 0.95,
        max_tokens: int = 2048,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialise the adapter.

        Args:
            api_key: Narrator API key. Required.
            model: Model identifier.
            base_url: Optional base URL for OpenAI-compatible endpoints.
            temperature: Sampling temperature.
            top_p: Nucleus sampling mass.
            max_tokens: Maximum tokens in the completion.
            timeout_seconds: Per-request timeout.

        Raises:
            NarratorConfigurationError: If no API key is given.
        """
        if not api_key:
            raise NarratorConfigurationError(
                "Narrator API key is not configured. "
                "Set NARRATOR_API_KEY or GEMINI_API_KEY."
            )

        client_kwargs: dict = {
            "api_key": api_key,
            "max_retries": 0,
            "timeout": timeout_seconds,
        }
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = model
        self._temperature = temperature
        self._top_p = top_p
        self._max_tokens = max_tokens

    def generate(self, prompt: str) -> str:
        """Call the chat completion API.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Raw string content from the model response.

        Raises:
            NarratorConfigurationError: Credentials, model or connectivity problem.
            NarratorServiceError: Timeout or other API failure.
        """
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": _SYSTEM_INSTRUCTION},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                top_p=self._top_p,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
                stream=False,
            )
        except openai.APITimeoutError as exc:
            raise NarratorServiceError(f"Narrator request timed out: {exc}") from exc
        except (
            openai.APIConnectionError,
            openai.AuthenticationError,
            openai.PermissionDeniedError,
            openai.NotFoundError,
        ) as exc:
            raise NarratorConfigurationError(
                f"Narrator service unreachable or misconfigured: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise NarratorServiceError(f"Narrator request failed: {exc}") from exc

        if not response.choices:
            raise NarratorServiceError("No content received from narrator.")
        content = response.choices[0].message.content
        if not content:
            raise NarratorServiceError("No content received from narrator.")
        return content


# ---------------------------------------------------------------------------
# Fixed mock response used for local testing.
# ---------------------------------------------------------------------------
_MOCK_RESPONSE = {
    "gpAccountHolderSummary": "Mock summary for the Gram Panchayat account holder.",
    "supervisorySummary": "Mock supervisory summary for testing purposes.",
    "zpMrfSummary": "Mock summary for district and MRF monitoring.",
    "recommendations": [
        "Verify integration with upstream data entry.",
        "Schedule pickup for stored dry waste.",
        "Review segregation outreach for shops.",
    ],
    "risks": [],
    "notes": "No real data - this is a test fixture.",
    "dataIrregularities": [],
}

MOCK_RESPONSE_JSON = json.dumps(_MOCK_RESPONSE, indent=2)


class MockNarratorAdapter(BaseNarratorAdapter):
    """Deterministic adapter that returns a scripted response.

    Used for local testing and CI pipelines where no narrator API is
    available. Received prompts are kept in ``prompts`` for inspection.
    """

    def __init__(self, response: Optional[str] = None) -> None:
        self._response = MOCK_RESPONSE_JSON if response is None else response
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        """Record *prompt* and return the scripted response."""
        self.prompts.append(prompt)
        return self._response
