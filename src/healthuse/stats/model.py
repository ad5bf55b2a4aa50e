"""Two-factor linear model with interaction and its sequential ANOVA."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
from statsmodels.formula.api import ols
from statsmodels.stats.anova import anova_lm

from healthuse.data.schema import BINARY_LEVELS, CHRONIC, DEPRESSION, VISITS, Diagnosis
from healthuse.errors import RankDeficientModelError
from healthuse.stats.schemas import ModelFit

logger = logging.getLogger(__name__)


def _term(col: str, reference: str) -> str:
    return f"C({col}, Treatment(reference='{reference}'))"


def empty_cells(
    df: pd.DataFrame, factor_a: str, factor_b: str, levels: Sequence[str] = BINARY_LEVELS
) -> List[Tuple[str, str]]:
    """Factor level combinations with no observations."""
    counts = df.groupby([df[factor_a].astype(object), df[factor_b].astype(object)]).size()
    return [
        (a, b)
        for a in levels
        for b in levels
        if int(counts.get((a, b), 0)) == 0
    ]


def fit_interaction_model(
    df: pd.DataFrame,
    outcome_col: str = VISITS,
    factor_a: str = DEPRESSION,
    factor_b: str = CHRONIC,
    reference: str = Diagnosis.NO.value,
) -> ModelFit:
    """Fit ``outcome ~ A + B + A:B`` by OLS with treatment-coded factors.

    Args:
        df: Complete-case table with outcome and both factors
        outcome_col: Outcome column
        factor_a: First factor (entered first in the sequential ANOVA)
        factor_b: Second factor
        reference: Reference level for both factors

    Returns:
        ModelFit with coefficient table and Type I ANOVA table

    Raises:
        RankDeficientModelError: If any of the four factor cells is empty
    """
    formula = f"{outcome_col} ~ {_term(factor_a, reference)} * {_term(factor_b, reference)}"

    missing = empty_cells(df, factor_a, factor_b)
    if missing:
        raise RankDeficientModelError(
            f"{outcome_col} ~ {factor_a} + {factor_b} + {factor_a}:{factor_b}", missing
        )

    data = df[[outcome_col, factor_a, factor_b]].copy()
    data[outcome_col] = data[outcome_col].astype(float)
    data[factor_a] = data[factor_a].astype(str)
    data[factor_b] = data[factor_b].astype(str)

    results = ols(formula, data=data).fit()
    anova = anova_lm(results, typ=1)

    # Readable term names: "C(depression, Treatment(reference='No'))[T.Yes]" -> "depression[T.Yes]"
    rename = {
        _term(factor_a, reference): factor_a,
        _term(factor_b, reference): factor_b,
    }

    def _short(name: str) -> str:
        for long, short in rename.items():
            name = name.replace(long, short)
        return name

    coefficients = pd.DataFrame(
        {
            "estimate": results.params,
            "std_err": results.bse,
            "t": results.tvalues,
            "p_value": results.pvalues,
        }
    )
    coefficients.index = [_short(i) for i in coefficients.index]
    anova.index = [_short(i) for i in anova.index]

    logger.info(
        f"Fitted {outcome_col} ~ {factor_a} * {factor_b} on {int(results.nobs)} rows "
        f"(R^2={results.rsquared:.4f})"
    )

    return ModelFit(
        formula=f"{outcome_col} ~ {factor_a} + {factor_b} + {factor_a}:{factor_b}",
        n_obs=int(results.nobs),
        coefficients=coefficients,
        anova=anova,
        r_squared=float(results.rsquared),
        adj_r_squared=float(results.rsquared_adj) if np.isfinite(results.rsquared_adj) else np.nan,
        results=results,
    )
