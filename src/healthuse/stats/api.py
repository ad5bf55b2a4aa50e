"""Public API: run the complete depression / chronic illness analysis."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import pandas as pd

from healthuse.data.schema import (
    CHRONIC,
    CONDITION_LABELS,
    DEPRESSION,
    GROUP_LABELS,
    INTERACTION,
    VISITS,
    Diagnosis,
)
from healthuse.data.validation import generate_missingness_report, validate_observations
from healthuse.stats.config import AnalysisConfig
from healthuse.stats.descriptives import (
    condition_summary,
    frequency_table,
    group_means,
    group_summary,
)
from healthuse.stats.model import fit_interaction_model
from healthuse.stats.preprocess import (
    all_conditions_table,
    chronic_table,
    depression_table,
    heavy_users,
    interaction_table,
    level_values,
)
from healthuse.stats.tests import compare_levels, kruskal_wallis, pairwise_interaction_tests

logger = logging.getLogger(__name__)

ResultBundle = Mapping[str, Mapping[str, Any]]


def _freeze(groups: Dict[str, Dict[str, Any]]) -> ResultBundle:
    return MappingProxyType({name: MappingProxyType(dict(slots)) for name, slots in groups.items()})


def condition_sources(
    depression_data: pd.DataFrame,
    chronic_data: pd.DataFrame,
    conditions_data: pd.DataFrame,
) -> Dict[str, Tuple[pd.DataFrame, str]]:
    """Map each reported condition to the table and indicator column it is read from."""
    sources = {
        "Depression": (depression_data, DEPRESSION),
        "Chronic Illness": (chronic_data, CHRONIC),
    }
    for column, label in CONDITION_LABELS.items():
        sources[label] = (conditions_data, column)
    return sources


def analyze(observations: pd.DataFrame, config: Optional[AnalysisConfig] = None) -> ResultBundle:
    """Run the complete analysis and return the result bundle.

    Args:
        observations: Survey table with ``visits``, ``depression``, ``chronic``
            and the ten chronic-condition indicator columns
        config: AnalysisConfig (default: AnalysisConfig())

    Returns:
        Read-only mapping with groups:
            - dataFrames: depressionData, chronicData, interactionData
            - stats: depression, chronic, interaction, allChronic
            - plots: chart name -> matplotlib Figure (empty if plots disabled)
            - tests: depressionTest, depressionEffect, chronicTest,
              chronicEffect, interactionTest, interactionModel, pairwise

        Only the mappings are read-only. The DataFrames and figures inside are
        the working objects, so copy them before modifying in place.

    Raises:
        MissingFieldError: If a required column is absent
        DegenerateSampleError: If a comparison has an empty or constant sample
        RankDeficientModelError: If a depression/chronic cell is empty

    Example:
        >>> from healthuse import analyze
        >>> bundle = analyze(brfss)
        >>> bundle["stats"]["depression"][["Depression", "N", "Mean"]]
        >>> bundle["tests"]["interactionModel"].anova
    """
    config = config or AnalysisConfig()
    outcome = VISITS
    levels = list(config.levels)
    interaction_levels = list(config.interaction_levels)

    validate_observations(observations)
    missingness = generate_missingness_report(observations)
    logger.info(
        f"Analyzing {missingness['n_rows']} observations "
        f"({missingness['complete_rows']} complete on all fields)"
    )

    # ──────────────────────────────────────────────────────────────
    # 1. Filtered tables
    # ──────────────────────────────────────────────────────────────
    tables = {
        "depression": depression_table(observations, outcome),
        "chronic": chronic_table(observations, outcome),
        "interaction": interaction_table(observations, outcome),
    }
    conditions_data = all_conditions_table(observations, outcome)
    heavy_tables = {
        name: heavy_users(table, config.heavy_use_threshold, outcome)
        for name, table in tables.items()
    }
    for name, table in tables.items():
        logger.info(f"  • {name}: {len(table)} rows ({len(heavy_tables[name])} heavy utilizers)")
    logger.info(f"  • all conditions: {len(conditions_data)} rows")

    axes = {"depression": DEPRESSION, "chronic": CHRONIC, "interaction": INTERACTION}
    axis_levels = {"depression": levels, "chronic": levels, "interaction": interaction_levels}

    # ──────────────────────────────────────────────────────────────
    # 2. Descriptive statistics
    # ──────────────────────────────────────────────────────────────
    summaries = {
        name: group_summary(
            tables[name], group_col, axis_levels[name], outcome,
            label=GROUP_LABELS[group_col], conf_level=config.conf_level,
        )
        for name, group_col in axes.items()
    }
    summaries["allChronic"] = condition_summary(
        condition_sources(tables["depression"], tables["chronic"], conditions_data),
        outcome,
        level=Diagnosis.YES.value,
        conf_level=config.conf_level,
    )

    # ──────────────────────────────────────────────────────────────
    # 3. Comparative tests
    # ──────────────────────────────────────────────────────────────
    yes, no = Diagnosis.YES.value, Diagnosis.NO.value
    depression_test, depression_effect = compare_levels(
        tables["depression"], DEPRESSION, yes, no, outcome, config.conf_level
    )
    chronic_test, chronic_effect = compare_levels(
        tables["chronic"], CHRONIC, yes, no, outcome, config.conf_level
    )
    interaction_test = kruskal_wallis(
        {
            level: level_values(tables["interaction"], INTERACTION, level, outcome)
            for level in interaction_levels
        },
        comparison=f"{outcome} by {INTERACTION}",
    )
    pairwise = pairwise_interaction_tests(
        tables["interaction"], config.pairwise_comparisons, outcome, config.conf_level
    )

    # ──────────────────────────────────────────────────────────────
    # 4. Linear model
    # ──────────────────────────────────────────────────────────────
    interaction_model = fit_interaction_model(tables["interaction"], outcome, DEPRESSION, CHRONIC)

    # ──────────────────────────────────────────────────────────────
    # 5. Charts
    # ──────────────────────────────────────────────────────────────
    plots: Dict[str, Any] = {}
    if config.make_plots:
        from healthuse.stats.viz import build_analysis_plots

        plots = build_analysis_plots(
            tables=tables,
            heavy_tables=heavy_tables,
            means={n: group_means(tables[n], [axes[n]], outcome) for n in axes},
            heavy_means={n: group_means(heavy_tables[n], [axes[n]], outcome) for n in axes},
            frequencies={n: frequency_table(tables[n], axes[n], axis_levels[n]) for n in axes},
            condition_stats=summaries["allChronic"],
            axes=axes,
            levels=axis_levels,
            config=config,
        )

    logger.info("Analysis complete.")

    return _freeze(
        {
            "dataFrames": {
                "depressionData": tables["depression"],
                "chronicData": tables["chronic"],
                "interactionData": tables["interaction"],
            },
            "stats": {
                "depression": summaries["depression"],
                "chronic": summaries["chronic"],
                "interaction": summaries["interaction"],
                "allChronic": summaries["allChronic"],
            },
            "plots": plots,
            "tests": {
                "depressionTest": depression_test,
                "depressionEffect": depression_effect,
                "chronicTest": chronic_test,
                "chronicEffect": chronic_effect,
                "interactionTest": interaction_test,
                "interactionModel": interaction_model,
                "pairwise": pairwise,
            },
        }
    )
