"""Input validation for survey observation tables."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from healthuse.data.schema import BINARY_LEVELS, FACTOR_COLUMNS, REQUIRED_COLUMNS, VISITS
from healthuse.errors import MissingFieldError

logger = logging.getLogger(__name__)


def validate_columns(df: pd.DataFrame, required: Optional[List[str]] = None) -> None:
    """
    Check that every required column exists in the table.

    Parameters
    ----------
    df : pd.DataFrame
        Input table
    required : List[str], optional
        Columns to require; defaults to the full observation schema

    Raises
    ------
    MissingFieldError
        If one or more columns are absent
    """
    required = REQUIRED_COLUMNS if required is None else required
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise MissingFieldError(missing, available=[str(c) for c in df.columns])


def validate_values(df: pd.DataFrame) -> None:
    """
    Check outcome and factor values against the schema.

    ``visits`` must be a non-negative whole number where present; factor columns
    may only hold ``Yes``/``No`` where present.

    Raises
    ------
    ValueError
        Listing every offending column
    """
    errors = []

    visits = df[VISITS]
    if not (pd.api.types.is_numeric_dtype(visits) or visits.isna().all()):
        errors.append(f"Column '{VISITS}' must be numeric, got dtype {visits.dtype}")
    else:
        present = pd.to_numeric(visits, errors="coerce").dropna()
        if (present < 0).any():
            errors.append(f"Column '{VISITS}' has {int((present < 0).sum())} negative values")
        fractional = present % 1 != 0
        if fractional.any():
            errors.append(f"Column '{VISITS}' has {int(fractional.sum())} non-integer values")

    allowed = set(BINARY_LEVELS)
    for col in FACTOR_COLUMNS:
        if col not in df.columns:
            continue
        values = set(df[col].dropna().astype(str).unique())
        unexpected = values - allowed
        if unexpected:
            errors.append(f"Column '{col}' has values outside {sorted(allowed)}: {sorted(unexpected)[:5]}")

    if errors:
        raise ValueError("Observation validation failed:\n" + "\n".join(errors))


def validate_observations(df: pd.DataFrame) -> None:
    """Run all schema checks on an observation table."""
    validate_columns(df)
    validate_values(df)


def generate_missingness_report(df: pd.DataFrame, columns: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Summarise missing values per column.

    Returns
    -------
    Dict[str, Any]
        Report containing:
        - missing_counts: dict of {column: count}
        - missing_pct: dict of {column: percentage}
        - complete_rows: rows with no missing value in ``columns``
    """
    columns = REQUIRED_COLUMNS if columns is None else columns
    df_check = df[columns]
    n = len(df_check)

    missing_counts = df_check.isna().sum()
    missing_pct = (missing_counts / n * 100).round(2) if n else missing_counts.astype(float) * np.nan

    return {
        "n_rows": n,
        "missing_counts": {k: int(v) for k, v in missing_counts.items()},
        "missing_pct": missing_pct.to_dict(),
        "complete_rows": int((~df_check.isna().any(axis=1)).sum()),
    }
