"""Descriptive statistics of the outcome by factor level."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats as sp_stats

from healthuse.stats.preprocess import level_values

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "N", "Min", "Lower", "Median", "Mode", "Mean", "CI", "Upper",
    "Max", "Range", "Total", "SD", "SE", "Skew", "Kurtosis",
]


def mode_smallest(x: np.ndarray) -> float:
    """Most frequent value; ties go to the smallest value. NaN if empty."""
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        return np.nan
    values, counts = np.unique(x, return_counts=True)
    # np.unique sorts ascending, so argmax picks the smallest of the tied values
    return float(values[np.argmax(counts)])


def describe(x: np.ndarray, conf_level: float = 0.95) -> Dict[str, float]:
    """Compute the summary statistics vector for one group.

    Args:
        x: Outcome values (NaN entries are ignored)
        conf_level: Confidence level for the ``CI`` half-width

    Returns:
        Dictionary keyed by ``SUMMARY_COLUMNS``

    Notes:
        - Quantiles use linear interpolation between order statistics
          (type 7, numpy's default)
        - ``CI`` is ``t(1 - (1 - conf_level) / 2, n - 1) * SE``
        - ``Skew``/``Kurtosis`` are Fisher's g1 and excess g2 from population
          moments (m3 / m2**1.5, m4 / m2**2 - 3). R's ``psych::describe`` default
          (type 3) scales by the n - 1 SD instead:
          ``b1 = g1 * ((n - 1) / n) ** 1.5``, ``b2 = (g2 + 3) * ((n - 1) / n) ** 2 - 3``
        - Empty groups return ``N = 0`` and NaN elsewhere; statistics that
          need two or more values are NaN for single-value groups
    """
    x = np.asarray(x, dtype=float)
    x = x[np.isfinite(x)]
    n = len(x)

    row = {col: np.nan for col in SUMMARY_COLUMNS}
    row["N"] = n
    if n == 0:
        return row

    q25, q50, q75 = np.percentile(x, [25, 50, 75])
    mean = float(np.mean(x))

    row.update(
        {
            "Min": float(np.min(x)),
            "Lower": float(q25),
            "Median": float(q50),
            "Mode": mode_smallest(x),
            "Mean": round(mean, 2),
            "Upper": float(q75),
            "Max": float(np.max(x)),
            "Range": float(np.max(x) - np.min(x)),
            "Total": float(np.sum(x)),
        }
    )

    if n > 1:
        sd = float(np.std(x, ddof=1))
        se = sd / np.sqrt(n)
        t_crit = sp_stats.t.ppf(1 - (1 - conf_level) / 2, df=n - 1)
        row["SD"] = round(sd, 2)
        row["SE"] = round(se, 3)
        row["CI"] = round(float(t_crit * se), 3)
        if sd > 0:
            row["Skew"] = round(float(sp_stats.skew(x)), 2)
            row["Kurtosis"] = round(float(sp_stats.kurtosis(x, fisher=True)), 2)

    return row


def group_summary(
    df: pd.DataFrame,
    group_col: str,
    levels: Sequence[str],
    outcome_col: str,
    label: str | None = None,
    conf_level: float = 0.95,
) -> pd.DataFrame:
    """Build one summary row per level, in the order given.

    Args:
        df: Filtered table
        group_col: Grouping column
        levels: Levels to materialise rows for (not discovered from data)
        outcome_col: Outcome column
        label: Name of the level column in the output (default: ``group_col``)
        conf_level: Confidence level for ``CI``

    Returns:
        DataFrame with columns: Variable, <label>, N, Min, Lower, ..., Kurtosis
    """
    label = label or group_col
    rows = []
    for level in levels:
        x = level_values(df, group_col, level, outcome_col)
        if len(x) == 0:
            logger.warning(f"No '{outcome_col}' observations for {group_col} = {level}")
        rows.append({"Variable": outcome_col, label: level, **describe(x, conf_level)})

    return pd.DataFrame(rows, columns=["Variable", label] + SUMMARY_COLUMNS)


def group_means(df: pd.DataFrame, group_cols: List[str], outcome_col: str) -> pd.DataFrame:
    """Mean outcome per observed level combination."""
    if df.empty:
        return pd.DataFrame(columns=group_cols + [outcome_col])
    return (
        df.groupby(group_cols, observed=True)[outcome_col]
        .mean()
        .reset_index()
    )


def frequency_table(df: pd.DataFrame, group_col: str, levels: Sequence[str]) -> pd.DataFrame:
    """Count and proportion of rows at each level, in the order given."""
    counts = df[group_col].astype(object).value_counts()
    n = [int(counts.get(level, 0)) for level in levels]
    total = sum(n)
    return pd.DataFrame(
        {
            group_col: list(levels),
            "Count": n,
            "Proportion": [c / total if total else np.nan for c in n],
        }
    )


def condition_summary(
    sources: Mapping[str, Tuple[pd.DataFrame, str]],
    outcome_col: str,
    level: str = "Yes",
    conf_level: float = 0.95,
) -> pd.DataFrame:
    """Summarise the outcome for respondents with each condition, ranked by mean.

    Args:
        sources: Mapping of condition display name -> (table, indicator column)
        outcome_col: Outcome column
        level: Indicator value marking the condition as present
        conf_level: Confidence level for ``CI``

    Returns:
        DataFrame with one row per condition (level column ``Condition``),
        sorted by ``Mean`` descending, NaN means last
    """
    rows = []
    for condition, (table, column) in sources.items():
        x = level_values(table, column, level, outcome_col)
        rows.append({"Variable": outcome_col, "Condition": condition, **describe(x, conf_level)})

    summary = pd.DataFrame(rows, columns=["Variable", "Condition"] + SUMMARY_COLUMNS)
    return summary.sort_values(
        "Mean", ascending=False, na_position="last", kind="mergesort"
    ).reset_index(drop=True)
