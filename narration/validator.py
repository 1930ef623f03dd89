"""Validation layer for raw narrator output.

Parses and validates JSON strings against the NarrativeReport schema.
"""

import json
import re
from typing import Any, Dict

from pydantic import ValidationError

from narration.errors import NarratorResponseError
from narration.schema import NarrativeReport

_REQUIRED_KEYS = (
    "gpAccountHolderSummary",
    "supervisorySummary",
    "zpMrfSummary",
    "recommendations",
    "risks",
    "dataIrregularities",
)

_OPTIONAL_KEYS = ("notes",)


def _strip_markdown_fences(text: str) -> str:
    """Remove optional markdown code fences wrapping JSON.

    Narrators sometimes wrap output in ```json ... ``` despite instructions.
    This strips that wrapper so the inner JSON can be parsed.

    Args:
        text: Raw narrator response string.

    Returns:
        The text with leading/trailing code fences removed, if present.
    """
    stripped = text.strip()
    match = re.match(
        r"^```(?:json)?\s*\n?(.*?)\n?\s*```$",
        stripped,
        re.DOTALL | re.IGNORECASE,
    )
    if match:
        return match.group(1).strip()
    return stripped


def _project_to_report(data: Dict[str, Any]) -> Dict[str, Any]:
    """Project payloads onto the NarrativeReport keys only.

    Required keys are always carried (missing ones as None so the schema
    reports them); optional keys only when present.
    """
    projected = {key: data.get(key) for key in _REQUIRED_KEYS}
    for key in _OPTIONAL_KEYS:
        if key in data:
            projected[key] = data[key]
    return projected


def validate_narrator_output(raw_response: str) -> NarrativeReport:
    """Parse and validate a raw narrator response string.

    Steps:
        1. Strip optional markdown fences.
        2. Parse as JSON.
        3. Project payload onto NarrativeReport keys.
        4. Validate against the NarrativeReport Pydantic model.

    Args:
        raw_response: The raw string returned by the narrator adapter.

    Returns:
        A validated NarrativeReport instance.

    Raises:
        NarratorResponseError: If JSON parsing or schema validation fails.
    """
    cleaned = _strip_markdown_fences(raw_response)

    # Step 1: JSON parse
    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as exc:
        raise NarratorResponseError(
            stage="json_parse",
            errors=[str(exc)],
            raw_response=raw_response,
        ) from exc

    # Step 2: Object shape
    if not isinstance(data, dict):
        raise NarratorResponseError(
            stage="schema",
            errors=["top-level JSON must be an object"],
            raw_response=raw_response,
        )

    # Step 3: Schema validation
    try:
        return NarrativeReport.model_validate(_project_to_report(data))
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
            for e in exc.errors()
        ]
        raise NarratorResponseError(
            stage="schema",
            errors=errors,
            raw_response=raw_response,
        ) from exc
