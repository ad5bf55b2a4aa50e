"""Pytest configuration and fixtures."""

import pytest
import numpy as np
import pandas as pd

from healthuse.data.schema import CONDITION_COLUMNS, REQUIRED_COLUMNS


def make_observations(visits, depression, chronic, conditions=None):
    """Build an observation table; condition indicators default to all ``No``."""
    n = len(visits)
    data = {
        "visits": pd.Series(visits, dtype=float),
        "depression": pd.Series(depression, dtype=object),
        "chronic": pd.Series(chronic, dtype=object),
    }
    for col in CONDITION_COLUMNS:
        values = (conditions or {}).get(col, ["No"] * n)
        data[col] = pd.Series(values, dtype=object)
    return pd.DataFrame(data)[REQUIRED_COLUMNS]


@pytest.fixture
def sample_observations():
    """Generate a survey extract with every depression/chronic cell populated."""
    rng = np.random.default_rng(42)
    n = 240

    depression = rng.choice(["Yes", "No"], size=n, p=[0.3, 0.7]).astype(object)
    chronic = rng.choice(["Yes", "No"], size=n, p=[0.5, 0.5]).astype(object)
    visits = rng.poisson(3, size=n) + np.where(depression == "Yes", 2, 0) + np.where(chronic == "Yes", 3, 0)

    df = make_observations(
        visits,
        depression,
        chronic,
        conditions={
            col: rng.choice(["Yes", "No"], size=n, p=[0.25, 0.75]).astype(object)
            for col in CONDITION_COLUMNS
        },
    )

    # Sprinkle missing values across outcome and factors
    df.loc[[3, 17, 58], "visits"] = np.nan
    df.loc[[5, 90], "depression"] = None
    df.loc[[11, 120], "chronic"] = None
    df.loc[[7, 150], "asthma"] = None

    return df


@pytest.fixture
def depression_split():
    """Ten rows: depressed respondents visit 0-4 times, the rest 5-9 times."""
    return make_observations(
        visits=[0, 1, 2, 3, 4, 5, 6, 7, 8, 9],
        depression=["Yes"] * 5 + ["No"] * 5,
        chronic=["Yes", "No"] * 5,
    )


@pytest.fixture
def observations_factory():
    """Expose ``make_observations`` to tests."""
    return make_observations
