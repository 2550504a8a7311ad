# File: utils/math_utils.py
"""Math and calculation utilities for Muslim Companion.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - round_half_up: Round to the nearest integer, halves away from zero
    - calculate_percentage: Progress percentage calculations
    - clamp: Bound a value between a minimum and maximum
    - weighted_score: Combine 0-100 ratios with weights that sum to 1.0
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants
# ==============================================================================

# Default float precision for percentages
DATA_FLOAT_PRECISION = 2

# Tolerance when checking that weights sum to 1.0
WEIGHT_SUM_TOLERANCE = 1e-9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Python's round() uses banker's rounding (round(2.5) == 2); scores and
    percentages shown to users round 2.5 to 3.

    Examples:
        round_half_up(2.5) → 3
        round_half_up(2.49) → 2
        round_half_up(0.0) → 0
    """
    return int(math.floor(value + 0.5))


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage with proper rounding.

    Args:
        current: Current progress value
        target: Target/total value
        precision: Number of decimal places for rounding

    Returns:
        Percentage (0-100) with proper rounding, or 0.0 if target is 0

    Examples:
        calculate_percentage(15, 30) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 0) → 0.0  # Division by zero protection
    """
    if target <= 0:
        return 0.0
    return round((current / target) * 100, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-5, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))


def weighted_score(ratios: Sequence[float], weights: Sequence[float]) -> int:
    """Combine per-activity ratios (each 0-100) into one integer score.

    Args:
        ratios: Completion ratios expressed as percentages.
        weights: Fixed weights, one per ratio, summing to 1.0.

    Returns:
        Weighted sum rounded to the nearest integer.

    Raises:
        ValueError: If the sequences differ in length or weights do not sum to 1.0.

    Example:
        weighted_score([100, 50, 10], [0.4, 0.3, 0.3]) → 58
    """
    if len(ratios) != len(weights):
        raise ValueError(
            f"Got {len(ratios)} ratios but {len(weights)} weights"
        )
    if abs(sum(weights) - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise ValueError(f"Weights must sum to 1.0, got {sum(weights)}")

    total = sum(ratio * weight for ratio, weight in zip(ratios, weights, strict=True))
    return round_half_up(total)
