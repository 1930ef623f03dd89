"""
app/domain/compliance.py

Validated request models for compliance report generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from compliance.types import ComplianceMetrics, DayOperationalInput, Totals, WeekToDateAverage
from narration.payload import ReportMeta


@dataclass(frozen=True)
class FieldViolation:
    """
    One field-level validation problem.
    """

    field: str
    message: str
    value: Any = None


@dataclass(frozen=True)
class ReportInputs:
    """
    Raw counts supplied alongside precomputed metrics.
    """

    totals: Totals
    day: DayOperationalInput
    week_to_date: WeekToDateAverage | None = None


@dataclass(frozen=True)
class PrecomputedReportRequest:
    """
    Report request whose metrics were computed by the caller.
    """

    meta: ReportMeta
    date: str
    metrics: ComplianceMetrics
    inputs: ReportInputs | None = None


@dataclass(frozen=True)
class EntryDayInput:
    """
    Day counts for the entry path.

    Dry waste collected comes from the entry's material weights; dry waste
    stored is optional and defaults to a share of that sum.
    """

    households: int
    commercial_shops: int
    wet_waste_collected: float
    wet_waste_managed: float
    sanitary_waste_collected: float
    sanitary_waste_scientifically_disposed: float
    dry_waste_stored: float | None = None


@dataclass(frozen=True)
class HistoryDay:
    """
    An earlier day of the current week, used for week-to-date averages.
    """

    date: str
    totals: Totals
    day: DayOperationalInput


@dataclass(frozen=True)
class EntryReportRequest:
    """
    Report request whose metrics are computed from a material-weight entry.
    """

    meta: ReportMeta
    date: str
    totals: Totals
    day: EntryDayInput
    entry_id: str | None = None
    entry_data: Mapping[str, float] | None = None
    week_to_date: WeekToDateAverage | None = None
    history: tuple[HistoryDay, ...] = field(default_factory=tuple)
