"""
compliance/aggregation.py

Week-to-date rolling averages over daily compliance records.
"""

from __future__ import annotations

from typing import Sequence

from compliance.types import DailyRecord, WeekToDateAverage

# (average field, source attribute) pairs, read off ``DailyRecord.metrics``.
_METRIC_FIELDS: tuple[tuple[str, str], ...] = (
    ("avg_segregation_households_rate", "segregation_households_rate"),
    ("avg_segregation_shops_rate", "segregation_shops_rate"),
    ("avg_wet_mgmt_efficiency", "wet_mgmt_efficiency"),
    ("avg_sanitary_disposal_efficiency", "sanitary_disposal_efficiency"),
    ("avg_dry_storage_ratio", "dry_storage_ratio"),
    ("avg_per_household_waste_kg", "per_household_waste_kg"),
    ("avg_score", "score"),
)

# (average field, source attribute) pairs, read off ``DailyRecord.day``.
_DAY_FIELDS: tuple[tuple[str, str], ...] = (
    ("avg_households", "households"),
    ("avg_commercial_shops", "commercial_shops"),
    ("avg_wet_waste_collected", "wet_waste_collected"),
    ("avg_wet_waste_managed", "wet_waste_managed"),
    ("avg_sanitary_waste_collected", "sanitary_waste_collected"),
    (
        "avg_sanitary_waste_scientifically_disposed",
        "sanitary_waste_scientifically_disposed",
    ),
    ("avg_dry_waste_collected", "dry_waste_collected"),
    ("avg_dry_waste_stored", "dry_waste_stored"),
)


class WeekAggregator:
    """
    Stateless week-to-date aggregator.

    Averages are plain arithmetic means with no rounding; presentation
    decides precision.
    """

    def aggregate(self, records: Sequence[DailyRecord]) -> WeekToDateAverage | None:
        """
        Average every metric and raw day-count field across *records*.

        Parameters
        ----------
        records:
            Daily records in chronological order. The first record's date
            is reported as the week start.

        Returns
        -------
        WeekToDateAverage | None
            ``None`` when *records* is empty: an empty week means no
            comparison is available, not a zero average.
        """
        if not records:
            return None

        count = len(records)
        averages: dict[str, float] = {}

        for target, source in _METRIC_FIELDS:
            averages[target] = sum(getattr(r.metrics, source) for r in records) / count
        for target, source in _DAY_FIELDS:
            averages[target] = sum(getattr(r.day, source) for r in records) / count

        return WeekToDateAverage(
            week_start_date=records[0].date,
            days_count=count,
            **averages,
        )
