"""
Nearest-rank percentile.

Every aggregation scope (global, "Total", each label) goes through this
one function so that the same inputs always produce the same values.
"""

from __future__ import annotations

import math
from typing import Sequence


def percentile_index(n: int, p: float) -> int:
    """Index of the p-th percentile in an ascending sequence of length n.

    Nearest rank, ties toward the higher index:
    clamp(ceil(p/100 * n) - 1, 0, n - 1)
    """
    index = math.ceil(p / 100.0 * n) - 1
    return max(0, min(index, n - 1))


def nearest_rank_percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Value at the p-th percentile of an ascending-sorted sequence.

    This is a PURE FUNCTION - the input is not sorted or copied here.

    Args:
        sorted_values: Values in ascending order (list or numpy array)
        p: Percentile in [0, 100]

    Returns:
        The selected value as float, or 0.0 for an empty sequence

    Example:
        >>> nearest_rank_percentile([100, 200, 300], 50)
        200.0  # index ceil(0.5 * 3) - 1 = 1
    """
    if not 0 <= p <= 100:
        raise ValueError(f"Percentile must be within [0, 100], got {p}")
    n = len(sorted_values)
    if n == 0:
        return 0.0
    return float(sorted_values[percentile_index(n, p)])
