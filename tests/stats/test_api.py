"""Tests for the end-to-end analysis API."""

import pytest
import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from healthuse import analyze, AnalysisConfig
from healthuse.errors import DegenerateSampleError, MissingFieldError
from healthuse.stats.schemas import KruskalResult, LocationTestResult, DistributionTestResult, ModelFit
from healthuse.stats.tests import PAIRWISE_COLUMNS


@pytest.fixture
def no_plots():
    return AnalysisConfig(make_plots=False)


def test_bundle_layout(sample_observations, no_plots):
    """Bundle exposes the four named groups and their slots."""
    bundle = analyze(sample_observations, no_plots)

    assert set(bundle) == {"dataFrames", "stats", "plots", "tests"}
    assert set(bundle["dataFrames"]) == {"depressionData", "chronicData", "interactionData"}
    assert set(bundle["stats"]) == {"depression", "chronic", "interaction", "allChronic"}
    assert set(bundle["tests"]) == {
        "depressionTest",
        "depressionEffect",
        "chronicTest",
        "chronicEffect",
        "interactionTest",
        "interactionModel",
        "pairwise",
    }
    assert len(bundle["plots"]) == 0

    tests = bundle["tests"]
    assert isinstance(tests["depressionTest"], LocationTestResult)
    assert isinstance(tests["depressionEffect"], DistributionTestResult)
    assert isinstance(tests["interactionTest"], KruskalResult)
    assert isinstance(tests["interactionModel"], ModelFit)
    assert list(tests["pairwise"].columns) == PAIRWISE_COLUMNS


def test_bundle_is_read_only(sample_observations, no_plots):
    """Groups cannot be replaced or extended."""
    bundle = analyze(sample_observations, no_plots)

    with pytest.raises(TypeError):
        bundle["stats"] = {}
    with pytest.raises(TypeError):
        bundle["stats"]["depression"] = pd.DataFrame()


def test_summary_tables(sample_observations, no_plots):
    """Summary rows follow the configured level order."""
    bundle = analyze(sample_observations, no_plots)
    stats = bundle["stats"]

    assert stats["depression"]["Depression"].tolist() == ["Yes", "No"]
    assert stats["chronic"]["Chronic"].tolist() == ["Yes", "No"]
    assert stats["interaction"]["DepressionChronic"].tolist() == ["Yes.Yes", "No.Yes", "Yes.No", "No.No"]
    assert stats["depression"]["N"].sum() == len(bundle["dataFrames"]["depressionData"])
    assert stats["interaction"]["N"].sum() == len(bundle["dataFrames"]["interactionData"])


def test_all_chronic_ranking(sample_observations, no_plots):
    """Twelve conditions ranked by mean visits."""
    all_chronic = analyze(sample_observations, no_plots)["stats"]["allChronic"]

    assert len(all_chronic) == 12
    assert {"Depression", "Chronic Illness", "Kidney Disease"} <= set(all_chronic["Condition"])
    means = all_chronic["Mean"].dropna().to_numpy()
    assert np.all(np.diff(means) <= 0)


def test_custom_level_order(sample_observations):
    """Level order is configuration, not data order."""
    config = AnalysisConfig(levels=["No", "Yes"], make_plots=False)

    bundle = analyze(sample_observations, config)

    assert bundle["stats"]["depression"]["Depression"].tolist() == ["No", "Yes"]


def test_depression_split_end_to_end(depression_split, no_plots):
    """Ten-row split: per-level counts, means and extremes."""
    stats = analyze(depression_split, no_plots)["stats"]["depression"].set_index("Depression")

    assert stats.loc["Yes", ["N", "Mean", "Min", "Max"]].tolist() == [5, 2.0, 0, 4]
    assert stats.loc["No", ["N", "Mean", "Min", "Max"]].tolist() == [5, 7.0, 5, 9]


def test_heavy_threshold_changes_nothing_without_plots(depression_split):
    """Heavy-utilizer tables only feed the charts."""
    low = analyze(depression_split, AnalysisConfig(heavy_use_threshold=0, make_plots=False))
    high = analyze(depression_split, AnalysisConfig(heavy_use_threshold=8, make_plots=False))

    pd.testing.assert_frame_equal(low["stats"]["depression"], high["stats"]["depression"])


def test_missing_column(sample_observations, no_plots):
    """Absent required column raises MissingFieldError."""
    with pytest.raises(MissingFieldError) as exc_info:
        analyze(sample_observations.drop(columns=["kidney_disease"]), no_plots)

    assert exc_info.value.missing == ["kidney_disease"]


def test_invalid_factor_value(sample_observations, no_plots):
    """Factor values outside Yes/No are rejected."""
    df = sample_observations.copy()
    df.loc[0, "depression"] = "Maybe"

    with pytest.raises(ValueError, match="depression"):
        analyze(df, no_plots)


def test_all_chronic_missing_aborts(sample_observations, no_plots):
    """An empty chronic table cannot support the chronic comparison."""
    df = sample_observations.copy()
    df["chronic"] = None

    with pytest.raises(DegenerateSampleError):
        analyze(df, no_plots)


def test_plots(depression_split):
    """All charts are built in memory."""
    bundle = analyze(depression_split, AnalysisConfig(fig_dpi=50))
    plots = bundle["plots"]

    assert len(plots) == 19
    assert "allChronic" in plots
    for axis in ("depression", "chronic", "interaction"):
        for suffix in ("FreqBar", "PropBar", "Hist1", "Hist2", "Violin", "Box"):
            assert isinstance(plots[f"{axis}{suffix}"], Figure)


def test_analyze_leaves_input_untouched(sample_observations, no_plots):
    """Bundle tables are separate from the caller's observation table."""
    before = sample_observations.copy()

    bundle = analyze(sample_observations, no_plots)
    bundle["dataFrames"]["depressionData"].loc[0, "visits"] = 99

    pd.testing.assert_frame_equal(sample_observations, before)
