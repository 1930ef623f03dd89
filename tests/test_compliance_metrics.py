"""
tests/test_compliance_metrics.py

Pytest unit tests for MetricsCalculator, ComplianceScoreModel and band
classification.

All tests are pure Python with fixed inputs and no I/O.

Coverage
--------
- Reference scenarios (healthy day, all-zero day)
- Division-by-zero policy for every ratio
- Ratio clamping when numerators exceed denominators
- Score monotonicity in each weighted ratio
- Dry storage inversion and its 0.2 cap
- Band boundaries
- Statelessness across repeated calls
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from compliance.metrics import MetricsCalculator
from compliance.normalizer import ComplianceNormalizer
from compliance.scoring import ComplianceScoreModel, classify_band
from compliance.types import ComplianceBand, DayOperationalInput, Totals


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def calc() -> MetricsCalculator:
    """Fresh MetricsCalculator instance for each test."""
    return MetricsCalculator()


@pytest.fixture()
def model() -> ComplianceScoreModel:
    return ComplianceScoreModel()


def _totals(households: int = 1000, shops: int = 200) -> Totals:
    return Totals(total_households=households, total_shops=shops)


def _day(**overrides: float) -> DayOperationalInput:
    base = DayOperationalInput(
        households=950,
        commercial_shops=180,
        wet_waste_collected=500.0,
        wet_waste_managed=490.0,
        sanitary_waste_collected=50.0,
        sanitary_waste_scientifically_disposed=45.0,
        dry_waste_collected=300.0,
        dry_waste_stored=20.0,
    )
    return replace(base, **overrides)


def _zero_day() -> DayOperationalInput:
    return DayOperationalInput(
        households=0,
        commercial_shops=0,
        wet_waste_collected=0.0,
        wet_waste_managed=0.0,
        sanitary_waste_collected=0.0,
        sanitary_waste_scientifically_disposed=0.0,
        dry_waste_collected=0.0,
        dry_waste_stored=0.0,
    )


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------


class TestReferenceScenarios:
    def test_healthy_day_ratios(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(), _day())

        assert metrics.segregation_households_rate == pytest.approx(0.95)
        assert metrics.segregation_shops_rate == pytest.approx(0.90)
        assert metrics.wet_mgmt_efficiency == pytest.approx(0.98)
        assert metrics.sanitary_disposal_efficiency == pytest.approx(0.90)
        assert metrics.dry_storage_ratio == pytest.approx(0.0667, abs=1e-4)
        assert metrics.per_household_waste_kg == pytest.approx(0.895, abs=1e-3)

    def test_healthy_day_score_and_band(self, calc: MetricsCalculator) -> None:
        """23.75 + 13.5 + 24.5 + 18.0 + 10.0 = 89.75, rounded to 90."""
        metrics = calc.calculate(_totals(), _day())

        assert metrics.score == 90
        assert metrics.band is ComplianceBand.EXCELLENT

    def test_all_zero_day_only_dry_storage_credit_contributes(
        self, calc: MetricsCalculator
    ) -> None:
        """No dry waste stored earns the full 15-point dry storage weight."""
        metrics = calc.calculate(_totals(households=500, shops=0), _zero_day())

        assert metrics.segregation_households_rate == 0.0
        assert metrics.segregation_shops_rate == 0.0
        assert metrics.wet_mgmt_efficiency == 0.0
        assert metrics.sanitary_disposal_efficiency == 0.0
        assert metrics.dry_storage_ratio == 0.0
        assert metrics.per_household_waste_kg == 0.0
        assert metrics.score == 15
        assert metrics.band is ComplianceBand.POOR

    def test_perfect_day_scores_100(self, calc: MetricsCalculator) -> None:
        day = _day(
            households=1000,
            commercial_shops=200,
            wet_waste_managed=500.0,
            sanitary_waste_scientifically_disposed=50.0,
            dry_waste_stored=0.0,
        )
        metrics = calc.calculate(_totals(), day)

        assert metrics.score == 100
        assert metrics.band is ComplianceBand.EXCELLENT


# ---------------------------------------------------------------------------
# Division-by-zero policy
# ---------------------------------------------------------------------------


class TestZeroDenominators:
    def test_zero_total_households_gives_zero_rate(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(households=0), _day())
        assert metrics.segregation_households_rate == 0.0

    def test_zero_total_shops_gives_zero_rate(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(shops=0), _day())
        assert metrics.segregation_shops_rate == 0.0

    def test_zero_wet_collected_gives_zero_efficiency(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(), _day(wet_waste_collected=0.0))
        assert metrics.wet_mgmt_efficiency == 0.0

    def test_zero_sanitary_collected_gives_zero_efficiency(
        self, calc: MetricsCalculator
    ) -> None:
        metrics = calc.calculate(_totals(), _day(sanitary_waste_collected=0.0))
        assert metrics.sanitary_disposal_efficiency == 0.0

    def test_zero_dry_collected_gives_zero_storage_ratio(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(), _day(dry_waste_collected=0.0))
        assert metrics.dry_storage_ratio == 0.0

    def test_zero_households_gives_zero_per_household_waste(
        self, calc: MetricsCalculator
    ) -> None:
        metrics = calc.calculate(_totals(), _day(households=0))
        assert metrics.per_household_waste_kg == 0.0


# ---------------------------------------------------------------------------
# Clamping
# ---------------------------------------------------------------------------


class TestClamping:
    def test_households_above_total_caps_rate_at_one(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(households=100), _day(households=950))
        assert metrics.segregation_households_rate == 1.0

    def test_managed_above_collected_caps_efficiency_at_one(
        self, calc: MetricsCalculator
    ) -> None:
        metrics = calc.calculate(_totals(), _day(wet_waste_managed=800.0))
        assert metrics.wet_mgmt_efficiency == 1.0

    def test_stored_above_collected_caps_ratio_at_one(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(), _day(dry_waste_stored=900.0))
        assert metrics.dry_storage_ratio == 1.0

    @pytest.mark.parametrize("total_households", [0, 1, 7, 950, 1000, 10_000])
    @pytest.mark.parametrize("households", [0, 1, 500, 950, 20_000])
    def test_household_rate_always_in_unit_interval(
        self, calc: MetricsCalculator, total_households: int, households: int
    ) -> None:
        metrics = calc.calculate(_totals(households=total_households), _day(households=households))
        assert 0.0 <= metrics.segregation_households_rate <= 1.0
        if total_households == 0:
            assert metrics.segregation_households_rate == 0.0

    def test_score_always_within_bounds(self, calc: MetricsCalculator) -> None:
        for day in (_zero_day(), _day(), _day(dry_waste_stored=300.0)):
            score = calc.calculate(_totals(), day).score
            assert isinstance(score, int)
            assert 0 <= score <= 100


# ---------------------------------------------------------------------------
# Score model
# ---------------------------------------------------------------------------


_GRID = [i / 10 for i in range(11)]

_BASELINE = {
    "segregation_households_rate": 0.5,
    "segregation_shops_rate": 0.5,
    "wet_mgmt_efficiency": 0.5,
    "sanitary_disposal_efficiency": 0.5,
    "dry_storage_ratio": 0.1,
}


class TestScoreModel:
    def test_weights_sum_to_one(self, model: ComplianceScoreModel) -> None:
        total = (
            model.SEGREGATION_HOUSEHOLDS_WEIGHT
            + model.SEGREGATION_SHOPS_WEIGHT
            + model.WET_MGMT_WEIGHT
            + model.SANITARY_DISPOSAL_WEIGHT
            + model.DRY_STORAGE_WEIGHT
        )
        assert total == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "ratio_name",
        [
            "segregation_households_rate",
            "segregation_shops_rate",
            "wet_mgmt_efficiency",
            "sanitary_disposal_efficiency",
        ],
    )
    def test_score_non_decreasing_in_direct_ratios(
        self, model: ComplianceScoreModel, ratio_name: str
    ) -> None:
        scores = [model.compute(**{**_BASELINE, ratio_name: value}) for value in _GRID]
        assert scores == sorted(scores)
        assert scores[-1] > scores[0]

    def test_score_non_increasing_in_dry_storage_up_to_cap(
        self, model: ComplianceScoreModel
    ) -> None:
        values = [0.0, 0.05, 0.1, 0.15, 0.2]
        scores = [model.compute(**{**_BASELINE, "dry_storage_ratio": v}) for v in values]
        assert scores == sorted(scores, reverse=True)
        assert scores[0] > scores[-1]

    def test_score_constant_beyond_dry_storage_cap(self, model: ComplianceScoreModel) -> None:
        scores = {
            model.compute(**{**_BASELINE, "dry_storage_ratio": v})
            for v in (0.2, 0.3, 0.5, 0.9, 1.0)
        }
        assert len(scores) == 1

    def test_half_point_rounds_up(self, model: ComplianceScoreModel) -> None:
        """0.5 * 25 = 12.5 rounds to 13, not to the even neighbour 12."""
        score = model.compute(
            segregation_households_rate=0.5,
            segregation_shops_rate=0.0,
            wet_mgmt_efficiency=0.0,
            sanitary_disposal_efficiency=0.0,
            dry_storage_ratio=1.0,
        )
        assert score == 13


# ---------------------------------------------------------------------------
# Bands
# ---------------------------------------------------------------------------


class TestBands:
    @pytest.mark.parametrize(
        "score, expected",
        [
            (100, ComplianceBand.EXCELLENT),
            (90, ComplianceBand.EXCELLENT),
            (89, ComplianceBand.GOOD),
            (80, ComplianceBand.GOOD),
            (79, ComplianceBand.FAIR),
            (70, ComplianceBand.FAIR),
            (69, ComplianceBand.NEEDS_IMPROVEMENT),
            (60, ComplianceBand.NEEDS_IMPROVEMENT),
            (59, ComplianceBand.POOR),
            (0, ComplianceBand.POOR),
        ],
    )
    def test_band_boundaries(self, score: int, expected: ComplianceBand) -> None:
        assert classify_band(score) is expected

    def test_band_values_are_display_labels(self) -> None:
        assert [band.value for band in ComplianceBand] == [
            "Excellent",
            "Good",
            "Fair",
            "Needs Improvement",
            "Poor",
        ]


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


class TestNormalizer:
    def test_inverted_share_endpoints(self) -> None:
        n = ComplianceNormalizer()
        assert n.inverted_share(0.0, 0.2) == 1.0
        assert n.inverted_share(0.2, 0.2) == 0.0
        assert n.inverted_share(0.1, 0.2) == pytest.approx(0.5)
        assert n.inverted_share(0.7, 0.2) == 0.0

    def test_inverted_share_rejects_non_positive_cap(self) -> None:
        with pytest.raises(ValueError):
            ComplianceNormalizer().inverted_share(0.1, 0.0)

    def test_round_half_up(self) -> None:
        n = ComplianceNormalizer()
        assert n.round_half_up(89.5) == 90
        assert n.round_half_up(88.5) == 89
        assert n.round_half_up(89.49) == 89


# ---------------------------------------------------------------------------
# Statelessness
# ---------------------------------------------------------------------------


class TestStatelessness:
    def test_identical_inputs_identical_outputs(self, calc: MetricsCalculator) -> None:
        first = calc.calculate(_totals(), _day())
        second = calc.calculate(_totals(), _day())
        assert first == second

    def test_separate_instances_agree(self) -> None:
        assert MetricsCalculator().calculate(_totals(), _day()) == MetricsCalculator().calculate(
            _totals(), _day()
        )

    def test_metrics_are_frozen(self, calc: MetricsCalculator) -> None:
        metrics = calc.calculate(_totals(), _day())
        with pytest.raises((AttributeError, TypeError)):
            metrics.score = 0  # type: ignore[misc]
