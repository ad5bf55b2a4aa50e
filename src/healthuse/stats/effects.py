"""Location-shift estimates and effect sizes for two-sample comparisons."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy import stats as sp_stats


def _sorted_differences(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """All pairwise differences ``x_i - y_j`` in compressed, sorted form.

    Returns:
        Tuple of (sorted distinct-pair differences, cumulative multiplicities)

    Notes:
        Differences are formed between distinct values weighted by their
        counts, so memory scales with the number of distinct values rather
        than ``len(x) * len(y)``. Count outcomes have few distinct values.
    """
    ux, cx = np.unique(x, return_counts=True)
    uy, cy = np.unique(y, return_counts=True)

    diffs = np.subtract.outer(ux, uy).ravel()
    weights = np.multiply.outer(cx, cy).ravel()

    order = np.argsort(diffs, kind="mergesort")
    return diffs[order], np.cumsum(weights[order])


def _order_stat(diffs: np.ndarray, cum_weights: np.ndarray, k: int) -> float:
    """k-th smallest difference (0-indexed) of the expanded difference set."""
    return float(diffs[np.searchsorted(cum_weights, k, side="right")])


def hodges_lehmann(x: np.ndarray, y: np.ndarray, conf_level: float = 0.95) -> Tuple[float, float, float]:
    """Hodges-Lehmann estimate of the location shift between two samples.

    Args:
        x: First sample
        y: Second sample
        conf_level: Confidence level for the interval

    Returns:
        Tuple of (estimate, ci_low, ci_high)

    Notes:
        - Estimate is the median of all ``n1 * n2`` differences ``x_i - y_j``
        - Interval bounds are the order statistics ``C`` and ``N + 1 - C`` of
          the differences, ``C = floor(N / 2 - z * sqrt(n1 n2 (n1 + n2 + 1) / 12))``
          (normal approximation to the rank-sum distribution)
        - Swapping ``x`` and ``y`` negates the estimate and mirrors the interval
        - Returns (NaN, NaN, NaN) if either sample is empty
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n1, n2 = len(x), len(y)

    if n1 == 0 or n2 == 0:
        return np.nan, np.nan, np.nan

    diffs, cum = _sorted_differences(x, y)
    total = n1 * n2

    if total % 2 == 1:
        estimate = _order_stat(diffs, cum, total // 2)
    else:
        estimate = 0.5 * (_order_stat(diffs, cum, total // 2 - 1) + _order_stat(diffs, cum, total // 2))

    z = sp_stats.norm.ppf(1 - (1 - conf_level) / 2)
    sd_u = np.sqrt(n1 * n2 * (n1 + n2 + 1) / 12.0)
    c = max(int(np.floor(total / 2.0 - z * sd_u)), 1)

    ci_low = _order_stat(diffs, cum, c - 1)
    ci_high = _order_stat(diffs, cum, total - c)

    return estimate, ci_low, ci_high


def rank_biserial_from_u(u: float, n1: int, n2: int) -> float:
    """Rank-biserial correlation from the Mann-Whitney U of the first sample.

    Notes:
        Computed as: r = 1 - (2*U) / (n1 * n2), range [-1, 1]
    """
    if n1 == 0 or n2 == 0:
        return np.nan
    return 1.0 - (2.0 * u) / (n1 * n2)

