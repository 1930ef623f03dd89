"""
narration/payload.py

Input structures for compliance prompt assembly.

The week-to-date section is a two-variant structure: ``WithHistory``
carries the average and today's raw counts it is compared against,
``FirstOfWeek`` carries nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from compliance.types import ComplianceMetrics, DayOperationalInput, Totals, WeekToDateAverage


@dataclass(frozen=True)
class ReportMeta:
    """
    Administrative identifiers printed in the report context.
    """

    taluk: str
    panchayat: str
    vehicle_reg_no: str


@dataclass(frozen=True)
class WithHistory:
    """Week-to-date comparison is available."""

    average: WeekToDateAverage


@dataclass(frozen=True)
class FirstOfWeek:
    """No earlier day of this week has been reported."""


WeekContext = Union[WithHistory, FirstOfWeek]


@dataclass(frozen=True)
class ReferenceData:
    """
    Raw counts behind today's metrics, plus the week context.
    """

    totals: Totals
    day: DayOperationalInput
    week: WeekContext = FirstOfWeek()


@dataclass(frozen=True)
class CompliancePromptPayload:
    """
    Everything the prompt builder renders for one report.

    A week-to-date comparison needs today's raw counts, so it can only be
    expressed through ``reference``.
    """

    meta: ReportMeta
    date: str
    metrics: ComplianceMetrics
    reference: ReferenceData | None = None

    @property
    def week(self) -> WeekContext:
        if self.reference is None:
            return FirstOfWeek()
        return self.reference.week
