"""
healthuse: Depression, chronic illness and health care utilization analysis.

This package provides:
- Complete-case filtering of BRFSS-style survey extracts
- Per-group descriptive statistics of doctor visits
- Nonparametric comparisons and a two-factor linear model with interaction
- Chart handles for histograms, violin, box and bar plots
- A CLI that prints the analysis tables
"""

__version__ = "0.1.0"

from healthuse.errors import (
    HealthUseError,
    MissingFieldError,
    DegenerateSampleError,
    RankDeficientModelError,
)
from healthuse.stats import analyze, AnalysisConfig

__all__ = [
    "__version__",
    "analyze",
    "AnalysisConfig",
    "HealthUseError",
    "MissingFieldError",
    "DegenerateSampleError",
    "RankDeficientModelError",
]
