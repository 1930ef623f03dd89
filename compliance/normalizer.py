"""
compliance/normalizer.py

Deterministic ratio and bound utilities for compliance scoring inputs.
"""

import math


class ComplianceNormalizer:
    """Provides stateless normalization methods for compliance metrics.

    All methods are deterministic and produce bounded float outputs.
    A zero denominator is a defined case that yields 0.0, never an error.
    """

    def capped_ratio(self, numerator: float, denominator: float) -> float:
        """Compute numerator / denominator capped at 1.0.

        Args:
            numerator: The observed quantity (segregating units, managed mass).
            denominator: The reference quantity (total units, collected mass).

        Returns:
            min(numerator / denominator, 1.0), or 0.0 when the
            denominator is zero or negative.
        """
        if denominator <= 0:
            return 0.0
        return min(numerator / denominator, 1.0)

    def safe_divide(self, numerator: float, denominator: float) -> float:
        """Uncapped division with 0.0 for a non-positive denominator."""
        if denominator <= 0:
            return 0.0
        return numerator / denominator

    def inverted_share(self, value: float, cap: float) -> float:
        """Map a lower-is-better value onto a [0, 1] credit.

        Values at or above ``cap`` earn nothing, zero earns full credit,
        and the credit falls linearly in between.

        Args:
            value: The raw lower-is-better value.
            cap: The value at which credit reaches zero.

        Returns:
            A float in the range [0, 1].

        Raises:
            ValueError: If cap is not positive.
        """
        if cap <= 0:
            raise ValueError("cap must be positive.")
        return 1.0 - min(value, cap) / cap

    def clamp(self, value: float, min_value: float, max_value: float) -> float:
        """Clamp a value to the specified [min_value, max_value] range.

        Args:
            value: The float to clamp.
            min_value: The lower bound of the output range.
            max_value: The upper bound of the output range.

        Returns:
            value if within bounds, otherwise min_value or max_value.
        """
        return max(min_value, min(value, max_value))

    def round_half_up(self, value: float) -> int:
        """Round to the nearest integer, resolving .5 upward."""
        return int(math.floor(value + 0.5))
