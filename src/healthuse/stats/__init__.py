"""Statistical analysis of doctor visits by depression and chronic illness.

This module provides the complete analysis pipeline:

- Complete-case filtering and the depression x chronic interaction factor
- Descriptive statistics per factor level (quartiles, mode, mean CI, skew, ...)
- Nonparametric tests (Wilcoxon rank-sum with Hodges-Lehmann estimate,
  Kolmogorov-Smirnov, Kruskal-Wallis)
- Two-factor OLS model with interaction and sequential ANOVA
- Histograms, violin, box and bar charts as in-memory figures

Public API:
-----------
from healthuse.stats import analyze, AnalysisConfig

bundle = analyze(brfss, AnalysisConfig(make_plots=False))
bundle["stats"]["interaction"]
bundle["tests"]["pairwise"]
"""

from healthuse.stats.api import analyze, ResultBundle
from healthuse.stats.config import AnalysisConfig

__all__ = ["analyze", "ResultBundle", "AnalysisConfig"]
