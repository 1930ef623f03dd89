"""
Report-layer exceptions.

Narrator failures are defined in ``narration.errors`` and re-exported here
so callers can import the full taxonomy from one place.
"""

from __future__ import annotations

from app.domain.compliance import FieldViolation
from narration.errors import (
    NarratorConfigurationError,
    NarratorError,
    NarratorResponseError,
    NarratorServiceError,
)


class ComplianceReportError(Exception):
    """Base exception for report input and lookup failures."""


class InputValidationError(ComplianceReportError):
    """Raised when a request fails field-level validation.

    Attributes:
        violations: Every field-level problem found, in input order.
    """

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = violations
        super().__init__(
            "Invalid input data: "
            + "; ".join(f"{v.field}: {v.message}" for v in violations)
        )


class EntryNotFoundError(ComplianceReportError):
    """Raised when a referenced daily entry does not exist."""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Entry not found: {entry_id}")


class EntryStoreNotConfiguredError(ComplianceReportError):
    """Raised when an entry lookup is requested but no entry store is wired in."""


__all__ = [
    "ComplianceReportError",
    "EntryNotFoundError",
    "EntryStoreNotConfiguredError",
    "InputValidationError",
    "NarratorConfigurationError",
    "NarratorError",
    "NarratorResponseError",
    "NarratorServiceError",
]
