"""
compliance/types.py

Typed value objects flowing through the compliance scoring core.

All structures are frozen dataclasses. Counts are integers, masses are
kilograms, ratios are fractions in [0, 1].
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ComplianceBand(str, Enum):
    """Ordinal compliance classification, best first."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_IMPROVEMENT = "Needs Improvement"
    POOR = "Poor"


@dataclass(frozen=True)
class Totals:
    """
    Unit-wide denominators for segregation rates.
    """

    total_households: int
    total_shops: int


@dataclass(frozen=True)
class DayOperationalInput:
    """
    Raw operational counts reported for a single day.
    """

    households: int
    """Households reported as segregating waste today."""

    commercial_shops: int
    """Commercial shops reported as segregating waste today."""

    wet_waste_collected: float
    wet_waste_managed: float
    sanitary_waste_collected: float
    sanitary_waste_scientifically_disposed: float
    dry_waste_collected: float
    dry_waste_stored: float


@dataclass(frozen=True)
class ComplianceMetrics:
    """
    Normalized daily metrics with the derived score and band.

    Ratios are clamped to [0, 1]. ``score`` is an integer in [0, 100].
    """

    segregation_households_rate: float
    segregation_shops_rate: float
    wet_mgmt_efficiency: float
    sanitary_disposal_efficiency: float
    dry_storage_ratio: float
    per_household_waste_kg: float
    score: int
    band: ComplianceBand


@dataclass(frozen=True)
class DailyRecord:
    """
    One contributing day for week-to-date aggregation.
    """

    date: str
    day: DayOperationalInput
    metrics: ComplianceMetrics


@dataclass(frozen=True)
class WeekToDateAverage:
    """
    Arithmetic mean of every metric and raw day-count field across the
    days of the current week. Values are unrounded.
    """

    week_start_date: str
    days_count: int
    avg_segregation_households_rate: float
    avg_segregation_shops_rate: float
    avg_wet_mgmt_efficiency: float
    avg_sanitary_disposal_efficiency: float
    avg_dry_storage_ratio: float
    avg_per_household_waste_kg: float
    avg_score: float
    avg_households: float
    avg_commercial_shops: float
    avg_wet_waste_collected: float
    avg_wet_waste_managed: float
    avg_sanitary_waste_collected: float
    avg_sanitary_waste_scientifically_disposed: float
    avg_dry_waste_collected: float
    avg_dry_waste_stored: float
