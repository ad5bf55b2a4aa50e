"""Nonparametric comparative tests (Wilcoxon rank-sum, Kolmogorov-Smirnov, Kruskal-Wallis)."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from healthuse.data.schema import INTERACTION, split_interaction_level
from healthuse.errors import DegenerateSampleError
from healthuse.stats.effects import hodges_lehmann, rank_biserial_from_u
from healthuse.stats.preprocess import level_values
from healthuse.stats.schemas import DistributionTestResult, KruskalResult, LocationTestResult

logger = logging.getLogger(__name__)

PAIRWISE_COLUMNS = [
    "Test", "A.Depression", "A.Chronic", "B.Depression", "B.Chronic",
    "W", "p", "Estimate", "Lower_CI", "Upper_CI", "Effect",
]

# Largest untied sample size (exclusive) for the exact rank-sum distribution
EXACT_LIMIT = 50


def _clean(x) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    return x[np.isfinite(x)]


def _require_nonempty(x: np.ndarray, y: np.ndarray, comparison: str) -> None:
    if len(x) == 0 or len(y) == 0:
        raise DegenerateSampleError(comparison, "both samples need at least one observation", (len(x), len(y)))


def wilcoxon_rank_sum(
    x: np.ndarray, y: np.ndarray, comparison: str = "x vs y", conf_level: float = 0.95
) -> LocationTestResult:
    """Wilcoxon rank-sum (Mann-Whitney U) test with Hodges-Lehmann estimate.

    Args:
        x: First group values
        y: Second group values
        comparison: Label used in the result and in error messages
        conf_level: Confidence level for the location-shift interval

    Returns:
        LocationTestResult

    Raises:
        DegenerateSampleError: If a sample is empty or all pooled values are equal

    Notes:
        The p-value is exact when there are no ties and both samples have
        fewer than ``EXACT_LIMIT`` values; otherwise it uses the normal
        approximation with tie and continuity correction.
    """
    x, y = _clean(x), _clean(y)
    _require_nonempty(x, y, comparison)

    pooled = np.concatenate([x, y])
    if np.all(pooled == pooled[0]):
        raise DegenerateSampleError(comparison, "all observations are tied", (len(x), len(y)))

    exact = len(np.unique(pooled)) == len(pooled) and max(len(x), len(y)) < EXACT_LIMIT
    u_stat, p_val = stats.mannwhitneyu(
        x, y, alternative="two-sided", method="exact" if exact else "asymptotic"
    )
    estimate, ci_low, ci_high = hodges_lehmann(x, y, conf_level)

    logger.debug(f"{comparison}: W={u_stat:.1f}, p={p_val:.4g}, shift={estimate:.3g}")

    return LocationTestResult(
        comparison=comparison,
        statistic=float(u_stat),
        p_value=float(p_val),
        estimate=estimate,
        conf_int=(ci_low, ci_high),
        conf_level=conf_level,
        rank_biserial=rank_biserial_from_u(float(u_stat), len(x), len(y)),
        n1=len(x),
        n2=len(y),
    )


def kolmogorov_smirnov(x: np.ndarray, y: np.ndarray, comparison: str = "x vs y") -> DistributionTestResult:
    """Two-sample Kolmogorov-Smirnov test of equal distributions.

    Raises:
        DegenerateSampleError: If either sample is empty
    """
    x, y = _clean(x), _clean(y)
    _require_nonempty(x, y, comparison)

    result = stats.ks_2samp(x, y, alternative="two-sided")

    logger.debug(f"{comparison}: D={result.statistic:.4f}, p={result.pvalue:.4g}")

    return DistributionTestResult(
        comparison=comparison,
        statistic=float(result.statistic),
        p_value=float(result.pvalue),
        n1=len(x),
        n2=len(y),
    )


def kruskal_wallis(groups: Dict[str, np.ndarray], comparison: str = "groups") -> KruskalResult:
    """Kruskal-Wallis H test over the non-empty groups.

    Args:
        groups: Mapping of level -> values; empty levels are dropped
        comparison: Label used in the result and in error messages

    Raises:
        DegenerateSampleError: If fewer than two groups have observations or
            all observations are equal
    """
    observed = {k: _clean(v) for k, v in groups.items()}
    observed = {k: v for k, v in observed.items() if len(v) > 0}
    sizes = [len(v) for v in observed.values()]

    if len(observed) < 2:
        raise DegenerateSampleError(comparison, "need at least two non-empty groups", sizes)

    pooled = np.concatenate(list(observed.values()))
    if np.all(pooled == pooled[0]):
        raise DegenerateSampleError(comparison, "all observations are tied", sizes)

    H_stat, p_val = stats.kruskal(*observed.values())

    return KruskalResult(
        comparison=comparison,
        statistic=float(H_stat),
        p_value=float(p_val),
        df=len(observed) - 1,
        groups=list(observed),
        group_sizes=sizes,
    )


def compare_levels(
    df: pd.DataFrame,
    group_col: str,
    level_a: str,
    level_b: str,
    outcome_col: str,
    conf_level: float = 0.95,
) -> Tuple[LocationTestResult, DistributionTestResult]:
    """Run the location and distribution tests between two levels of a column."""
    x = level_values(df, group_col, level_a, outcome_col)
    y = level_values(df, group_col, level_b, outcome_col)
    label = f"{outcome_col}: {group_col}={level_a} vs {group_col}={level_b}"

    return (
        wilcoxon_rank_sum(x, y, comparison=label, conf_level=conf_level),
        kolmogorov_smirnov(x, y, comparison=label),
    )


def pairwise_interaction_tests(
    df: pd.DataFrame,
    pairs: Sequence[Tuple[str, str]],
    outcome_col: str,
    conf_level: float = 0.95,
) -> pd.DataFrame:
    """Compare selected pairs of interaction levels.

    Args:
        df: Interaction table (with the interaction column)
        pairs: (level A, level B) pairs, e.g. ``("Yes.Yes", "No.Yes")``
        outcome_col: Outcome column
        conf_level: Confidence level for the location-shift interval

    Returns:
        DataFrame with columns ``PAIRWISE_COLUMNS``; ``Effect`` is the
        Kolmogorov-Smirnov D of the same pair
    """
    rows: List[Dict[str, object]] = []
    for i, (level_a, level_b) in enumerate(pairs, start=1):
        location, distribution = compare_levels(
            df, INTERACTION, level_a, level_b, outcome_col, conf_level
        )
        a_dep, a_chr = split_interaction_level(level_a)
        b_dep, b_chr = split_interaction_level(level_b)
        rows.append(
            {
                "Test": i,
                "A.Depression": a_dep,
                "A.Chronic": a_chr,
                "B.Depression": b_dep,
                "B.Chronic": b_chr,
                "W": location.statistic,
                "p": location.p_value,
                "Estimate": location.estimate,
                "Lower_CI": location.conf_int[0],
                "Upper_CI": location.conf_int[1],
                "Effect": distribution.statistic,
            }
        )

    return pd.DataFrame(rows, columns=PAIRWISE_COLUMNS)
