"""Tests for the two-factor interaction model."""

import pytest
import numpy as np

from healthuse.errors import RankDeficientModelError
from healthuse.stats.model import empty_cells, fit_interaction_model
from healthuse.stats.preprocess import interaction_table


def test_fit_interaction_model_terms(sample_observations):
    """Coefficient and ANOVA tables carry readable term names."""
    fit = fit_interaction_model(interaction_table(sample_observations))

    assert fit.formula == "visits ~ depression + chronic + depression:chronic"
    assert list(fit.anova.index) == ["depression", "chronic", "depression:chronic", "Residual"]
    assert list(fit.coefficients.index) == [
        "Intercept",
        "depression[T.Yes]",
        "chronic[T.Yes]",
        "depression[T.Yes]:chronic[T.Yes]",
    ]
    assert list(fit.coefficients.columns) == ["estimate", "std_err", "t", "p_value"]
    assert fit.anova.loc["Residual", "df"] == fit.n_obs - 4
    assert 0 <= fit.r_squared <= 1


def test_fit_interaction_model_cell_means(depression_split):
    """Saturated model: intercept is the No/No cell mean."""
    fit = fit_interaction_model(interaction_table(depression_split))

    # No/No cell holds visits 5, 7, 9
    assert fit.coefficients.loc["Intercept", "estimate"] == pytest.approx(7.0)
    assert fit.n_obs == 10


def test_fit_interaction_model_detects_effect(sample_observations):
    """Chronic illness adds visits in the fixture; its ANOVA term is significant."""
    fit = fit_interaction_model(interaction_table(sample_observations))

    assert fit.anova.loc["chronic", "PR(>F)"] < 0.05
    assert fit.coefficients.loc["chronic[T.Yes]", "estimate"] > 0


def test_fit_interaction_model_empty_level(observations_factory):
    """No observations at one chronic level raises RankDeficientModelError."""
    df = observations_factory(
        visits=[1, 2, 3, 4, 5, 6],
        depression=["Yes", "No", "Yes", "No", "Yes", "No"],
        chronic=["Yes"] * 6,
    )

    with pytest.raises(RankDeficientModelError) as exc_info:
        fit_interaction_model(interaction_table(df))

    assert ("Yes", "No") in exc_info.value.empty_cells
    assert ("No", "No") in exc_info.value.empty_cells


def test_empty_cells(depression_split):
    """All four cells populated."""
    assert empty_cells(depression_split, "depression", "chronic") == []

    subset = depression_split[depression_split["depression"] == "No"]
    assert empty_cells(subset, "depression", "chronic") == [("Yes", "Yes"), ("Yes", "No")]


def test_model_fit_exposes_results(depression_split):
    """Underlying statsmodels results are kept for further inspection."""
    fit = fit_interaction_model(interaction_table(depression_split))

    assert fit.results is not None
    assert np.isfinite(fit.results.fvalue)
