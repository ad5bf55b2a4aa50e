"""Result records for comparative tests and model fits.

Records are frozen Pydantic models so that results placed in the bundle cannot
be altered by callers.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class LocationTestResult(BaseModel):
    """Wilcoxon rank-sum (Mann-Whitney U) test with Hodges-Lehmann estimate."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="Wilcoxon rank-sum test")
    comparison: str = Field(..., description="Human-readable 'A vs B' label")
    statistic: float = Field(..., description="W: Mann-Whitney U of the first sample")
    p_value: float = Field(..., description="Two-sided p-value")
    estimate: float = Field(..., description="Hodges-Lehmann location shift (A - B)")
    conf_int: Tuple[float, float] = Field(..., description="Confidence interval of the shift")
    conf_level: float = Field(default=0.95)
    rank_biserial: float = Field(..., description="Rank-biserial correlation, 1 - 2U/(n1*n2)")
    n1: int = Field(..., ge=1)
    n2: int = Field(..., ge=1)


class DistributionTestResult(BaseModel):
    """Two-sample Kolmogorov-Smirnov test."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="Two-sample Kolmogorov-Smirnov test")
    comparison: str
    statistic: float = Field(..., description="D: maximum distance between empirical CDFs")
    p_value: float
    n1: int = Field(..., ge=1)
    n2: int = Field(..., ge=1)


class KruskalResult(BaseModel):
    """Kruskal-Wallis rank-sum test across k groups."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="Kruskal-Wallis rank sum test")
    comparison: str
    statistic: float = Field(..., description="H statistic (chi-squared approximation)")
    p_value: float
    df: int
    groups: List[str]
    group_sizes: List[int]


class ModelFit(BaseModel):
    """OLS fit with its sequential ANOVA decomposition."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    formula: str
    n_obs: int
    coefficients: pd.DataFrame = Field(..., description="estimate, std_err, t, p_value per term")
    anova: pd.DataFrame = Field(..., description="df, sum_sq, mean_sq, F, PR(>F) per term")
    r_squared: float
    adj_r_squared: float
    results: Optional[Any] = Field(default=None, description="Underlying statsmodels results")
