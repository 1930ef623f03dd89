"""Canonical structured output schema for compliance narration."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ErrorType = Literal[
    "Completeness Errors",
    "Consistency Errors",
    "Accuracy Errors",
    "Validity Errors",
    "Duplication Errors",
    "Timeliness Errors",
]

DataQualityMetric = Literal[
    "Completeness",
    "Consistency",
    "Accuracy",
    "Validity",
    "Uniqueness",
    "Timeliness",
]

# Data-irregularity taxonomy: (error type, common name), in checklist order.
IRREGULARITY_TAXONOMY: tuple[tuple[str, str], ...] = (
    ("Completeness Errors", "Missing Data"),
    ("Consistency Errors", "Conflicting/Contradictory Data"),
    ("Accuracy Errors", "Incorrect Values"),
    ("Validity Errors", "Format/Domain Constraint Violations"),
    ("Duplication Errors", "Redundant Records"),
    ("Timeliness Errors", "Stale/Outdated Data"),
)


class DataIrregularity(BaseModel):
    """One data-quality warning raised by the narrator."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    error_type: ErrorType
    common_name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    data_quality_metric_affected: DataQualityMetric


class NarrativeReport(BaseModel):
    """Only accepted output contract for the narrator.

    Field names serialize in camelCase to match the narrator wire format.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )

    gp_account_holder_summary: str = Field(min_length=1)
    supervisory_summary: str = Field(min_length=1)
    zp_mrf_summary: str = Field(min_length=1)
    recommendations: List[str]
    risks: List[str]
    notes: Optional[str] = None
    data_irregularities: List[DataIrregularity]
