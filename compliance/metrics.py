"""
compliance/metrics.py

Daily compliance metrics calculator.

Formulas
--------
Household segregation rate = min(households / total_households, 1)
Shop segregation rate      = min(commercial_shops / total_shops, 1)
Wet mgmt efficiency        = min(wet_managed / wet_collected, 1)
Sanitary disposal eff.     = min(sanitary_disposed / sanitary_collected, 1)
Dry storage ratio          = min(dry_stored / dry_collected, 1)
Per-household waste (kg)   = (wet + dry + sanitary collected) / households

Every zero denominator yields 0.0 for the affected metric.
"""

from __future__ import annotations

from compliance.normalizer import ComplianceNormalizer
from compliance.scoring import ComplianceScoreModel, classify_band
from compliance.types import ComplianceMetrics, DayOperationalInput, Totals


class MetricsCalculator:
    """
    Deterministic daily compliance metrics with safe division-by-zero handling.

    Stateless: no I/O, no logging, no side effects. Identical inputs
    always produce identical ``ComplianceMetrics``.
    """

    def __init__(self) -> None:
        self._normalizer = ComplianceNormalizer()
        self._model = ComplianceScoreModel()

    def calculate(self, totals: Totals, day: DayOperationalInput) -> ComplianceMetrics:
        """
        Compute today's ratios, score and band.

        Parameters
        ----------
        totals:
            Unit-wide household and shop denominators.
        day:
            Today's validated operational counts.

        Returns
        -------
        ComplianceMetrics
            Ratios clamped to [0, 1], nonnegative per-household waste,
            integer score in [0, 100] and its band.
        """
        n = self._normalizer

        segregation_households_rate = n.capped_ratio(day.households, totals.total_households)
        segregation_shops_rate = n.capped_ratio(day.commercial_shops, totals.total_shops)
        wet_mgmt_efficiency = n.capped_ratio(day.wet_waste_managed, day.wet_waste_collected)
        sanitary_disposal_efficiency = n.capped_ratio(
            day.sanitary_waste_scientifically_disposed,
            day.sanitary_waste_collected,
        )
        dry_storage_ratio = n.capped_ratio(day.dry_waste_stored, day.dry_waste_collected)

        total_waste = (
            day.wet_waste_collected + day.dry_waste_collected + day.sanitary_waste_collected
        )
        per_household_waste_kg = n.safe_divide(total_waste, day.households)

        score = self._model.compute(
            segregation_households_rate=segregation_households_rate,
            segregation_shops_rate=segregation_shops_rate,
            wet_mgmt_efficiency=wet_mgmt_efficiency,
            sanitary_disposal_efficiency=sanitary_disposal_efficiency,
            dry_storage_ratio=dry_storage_ratio,
        )

        return ComplianceMetrics(
            segregation_households_rate=_unit(segregation_households_rate),
            segregation_shops_rate=_unit(segregation_shops_rate),
            wet_mgmt_efficiency=_unit(wet_mgmt_efficiency),
            sanitary_disposal_efficiency=_unit(sanitary_disposal_efficiency),
            dry_storage_ratio=_unit(dry_storage_ratio),
            per_household_waste_kg=max(0.0, per_household_waste_kg),
            score=score,
            band=classify_band(score),
        )


def _unit(value: float) -> float:
    """Clamp a ratio to [0, 1]."""
    return max(0.0, min(1.0, value))
