"""Row filtering and projection of the observation table."""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from healthuse.data.schema import (
    CHRONIC,
    CONDITION_COLUMNS,
    DEPRESSION,
    INTERACTION,
    INTERACTION_LEVELS,
    VISITS,
    Diagnosis,
)
from healthuse.data.validation import validate_columns

logger = logging.getLogger(__name__)


def complete_cases(
    df: pd.DataFrame, required: List[str], columns: Optional[List[str]] = None
) -> pd.DataFrame:
    """Keep rows where every required field is present.

    Args:
        df: Input table
        required: Columns that must be non-missing
        columns: Columns to keep (default: ``required``)

    Returns:
        New table in original row order with a fresh 0..n-1 index

    Raises:
        MissingFieldError: If a required or projected column is absent
    """
    columns = list(required) if columns is None else list(columns)
    validate_columns(df, list(dict.fromkeys(list(required) + columns)))

    mask = df[required].notna().all(axis=1)
    return df.loc[mask, columns].reset_index(drop=True)


def heavy_users(df: pd.DataFrame, threshold: float = 4, outcome_col: str = VISITS) -> pd.DataFrame:
    """Rows whose outcome exceeds ``threshold``."""
    return df.loc[df[outcome_col] > threshold].reset_index(drop=True)


def add_interaction(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with the depression x chronic interaction column.

    The level is ``"{depression}.{chronic}"``; the column is an ordered
    categorical over all four levels, observed or not.
    """
    out = df.copy()
    labels = out[DEPRESSION].astype(str) + "." + out[CHRONIC].astype(str)
    out[INTERACTION] = pd.Categorical(labels, categories=list(INTERACTION_LEVELS), ordered=True)
    return out


def depression_table(df: pd.DataFrame, outcome_col: str = VISITS) -> pd.DataFrame:
    """Complete cases for the depression axis."""
    return complete_cases(df, [outcome_col, DEPRESSION])


def chronic_table(df: pd.DataFrame, outcome_col: str = VISITS) -> pd.DataFrame:
    """Complete cases for the chronic illness axis."""
    return complete_cases(df, [outcome_col, CHRONIC])


def interaction_table(df: pd.DataFrame, outcome_col: str = VISITS) -> pd.DataFrame:
    """Complete cases on both factors, with the interaction column added."""
    return add_interaction(complete_cases(df, [outcome_col, DEPRESSION, CHRONIC]))


def all_conditions_table(df: pd.DataFrame, outcome_col: str = VISITS) -> pd.DataFrame:
    """Non-depressed chronic patients with every condition indicator present.

    Used to compare outcomes across individual conditions without the
    depression effect mixed in.
    """
    required = [outcome_col, DEPRESSION, CHRONIC] + CONDITION_COLUMNS
    validate_columns(df, required)

    mask = (
        df[required].notna().all(axis=1)
        & df[DEPRESSION].isin([Diagnosis.NO.value])
        & df[CHRONIC].isin([Diagnosis.YES.value])
    )
    return df.loc[mask, [outcome_col, DEPRESSION] + CONDITION_COLUMNS].reset_index(drop=True)


def level_values(df: pd.DataFrame, group_col: str, level: str, outcome_col: str = VISITS):
    """Non-missing outcome values for one level of a grouping column, as floats."""
    if df.empty:
        return df[outcome_col].to_numpy(dtype=float)
    mask = df[group_col].astype(object).isin([level])
    return df.loc[mask, outcome_col].dropna().to_numpy(dtype=float)
