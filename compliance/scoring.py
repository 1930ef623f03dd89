"""
compliance/scoring.py

Weighted compliance score model and band classification.
"""

from compliance.normalizer import ComplianceNormalizer
from compliance.types import ComplianceBand


# ---------------------------------------------------------------------------
# Band classification: thresholds are inclusive lower bounds
# ---------------------------------------------------------------------------

_BAND_THRESHOLDS: tuple[tuple[int, ComplianceBand], ...] = (
    (90, ComplianceBand.EXCELLENT),
    (80, ComplianceBand.GOOD),
    (70, ComplianceBand.FAIR),
    (60, ComplianceBand.NEEDS_IMPROVEMENT),
)


def classify_band(score: int) -> ComplianceBand:
    """Map an integer score in [0, 100] to a compliance band.

    Args:
        score: Integer compliance score.

    Returns:
        The highest band whose lower bound the score reaches,
        otherwise ``ComplianceBand.POOR``.
    """
    for threshold, band in _BAND_THRESHOLDS:
        if score >= threshold:
            return band
    return ComplianceBand.POOR


# ---------------------------------------------------------------------------
# Score model
# ---------------------------------------------------------------------------

class ComplianceScoreModel:
    """Weighted scoring model for daily SWM compliance.

    Four direct ratios contribute ``rate * weight * 100``. The dry storage
    ratio is lower-is-better: it is inverted against a 0.2 cap, so a ratio
    of 0 earns the full weight and anything at or above 0.2 earns nothing.

    All weights must sum to 1.0.
    """

    SEGREGATION_HOUSEHOLDS_WEIGHT: float = 0.25
    SEGREGATION_SHOPS_WEIGHT: float = 0.15
    WET_MGMT_WEIGHT: float = 0.25
    SANITARY_DISPOSAL_WEIGHT: float = 0.20
    DRY_STORAGE_WEIGHT: float = 0.15

    DRY_STORAGE_CAP: float = 0.2

    def __init__(self) -> None:
        self._normalizer = ComplianceNormalizer()

    def compute(
        self,
        segregation_households_rate: float,
        segregation_shops_rate: float,
        wet_mgmt_efficiency: float,
        sanitary_disposal_efficiency: float,
        dry_storage_ratio: float,
    ) -> int:
        """Compute the compliance score from the five ratios.

        Args:
            segregation_households_rate: Ratio in [0, 1].
            segregation_shops_rate: Ratio in [0, 1].
            wet_mgmt_efficiency: Ratio in [0, 1].
            sanitary_disposal_efficiency: Ratio in [0, 1].
            dry_storage_ratio: Ratio in [0, 1], lower is better.

        Returns:
            The weighted sum rounded half-up to an integer and
            clamped to [0, 100].
        """
        n = self._normalizer

        dry_storage_credit = n.inverted_share(dry_storage_ratio, self.DRY_STORAGE_CAP)

        weighted_sum = (
            segregation_households_rate * self.SEGREGATION_HOUSEHOLDS_WEIGHT * 100.0
            + segregation_shops_rate * self.SEGREGATION_SHOPS_WEIGHT * 100.0
            + wet_mgmt_efficiency * self.WET_MGMT_WEIGHT * 100.0
            + sanitary_disposal_efficiency * self.SANITARY_DISPOSAL_WEIGHT * 100.0
            + dry_storage_credit * self.DRY_STORAGE_WEIGHT * 100.0
        )

        return int(n.clamp(n.round_half_up(weighted_sum), 0, 100))
