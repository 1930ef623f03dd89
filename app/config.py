"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_NARRATOR_MODEL = "gemini-1.5-flash"
DEFAULT_NARRATOR_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _first_str_env(names: tuple[str, ...], default: str | None) -> str | None:
    """
    Return the first non-empty value among *names*, else *default*.
    """

    for name in names:
        value = _get_optional_str_env(name)
        if value is not None:
            return value
    return default


@dataclass(frozen=True)
class NarratorSettings:
    """
    Narrator service settings.

    ``api_key`` may be None; the real adapter refuses to start without it.
    """

    api_key: str | None = None
    model: str = DEFAULT_NARRATOR_MODEL
    base_url: str = DEFAULT_NARRATOR_BASE_URL
    temperature: float = 0.3
    top_p: float = 0.95
    max_output_tokens: int = 2048
    timeout_seconds: float = 60.0
    use_mock: bool = False


@lru_cache(maxsize=1)
def get_narrator_settings() -> NarratorSettings:
    """
    Return cached narrator settings from environment variables.
    """

    return NarratorSettings(
        api_key=_first_str_env(("NARRATOR_API_KEY", "GEMINI_API_KEY"), None),
        model=_first_str_env(("NARRATOR_MODEL", "GEMINI_MODEL"), DEFAULT_NARRATOR_MODEL)
        or DEFAULT_NARRATOR_MODEL,
        base_url=_first_str_env(("NARRATOR_BASE_URL",), DEFAULT_NARRATOR_BASE_URL)
        or DEFAULT_NARRATOR_BASE_URL,
        temperature=min(2.0, max(0.0, _get_float_env("NARRATOR_TEMPERATURE", 0.3))),
        top_p=min(1.0, max(0.0, _get_float_env("NARRATOR_TOP_P", 0.95))),
        max_output_tokens=max(1, _get_int_env("NARRATOR_MAX_OUTPUT_TOKENS", 2048)),
        timeout_seconds=max(1.0, _get_float_env("NARRATOR_TIMEOUT_SECONDS", 60.0)),
        use_mock=_get_bool_env("NARRATOR_USE_MOCK", False),
    )
