"""Table loading for CSV and Parquet survey extracts.

The analysis core takes an in-memory DataFrame; this module is only used by the
command line to get one.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import pandas as pd

from healthuse.data.schema import FACTOR_COLUMNS, VISITS

logger = logging.getLogger(__name__)


class DataFormat(str, Enum):
    """Supported data formats."""

    CSV = "csv"
    PARQUET = "parquet"
    PARQUET_DATASET = "parquet_dataset"

    @classmethod
    def from_path(cls, path: Path) -> DataFormat:
        """
        Infer format from path.

        Raises
        ------
        ValueError
            If format cannot be inferred
        """
        path = Path(path)

        if path.is_dir():
            return cls.PARQUET_DATASET

        suffix = path.suffix.lower()
        if suffix == ".csv":
            return cls.CSV
        elif suffix == ".parquet":
            return cls.PARQUET
        else:
            raise ValueError(
                f"Cannot infer data format from path: {path}. "
                f"Expected .csv, .parquet file, or directory for parquet dataset."
            )


def validate_parquet_available() -> None:
    """
    Check if PyArrow is available for Parquet operations.

    Raises
    ------
    ImportError
        If PyArrow is not installed with helpful installation message
    """
    try:
        import pyarrow  # noqa: F401
    except ImportError as e:
        raise ImportError(
            "PyArrow is required for Parquet support but is not installed.\n"
            "Install with: pip install healthuse[parquet] or pip install pyarrow"
        ) from e


def load_table(path: Path, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Load an observation table from CSV, Parquet, or a Parquet dataset directory.

    Factor columns are read as plain strings (missing values become ``None``)
    and ``visits`` is coerced to numeric.

    Parameters
    ----------
    path : Path
        Path to data file or directory
    columns : List[str], optional
        Subset of columns to load

    Returns
    -------
    pd.DataFrame
        Loaded data

    Examples
    --------
    >>> df = load_table(Path("brfss_rq4.parquet"))
    >>> df = load_table(Path("brfss_rq4.csv"))
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data path not found: {path}")

    fmt = DataFormat.from_path(path)
    logger.info(f"Loading table from {path} (format: {fmt.value})")

    if fmt == DataFormat.CSV:
        df = _load_csv(path, columns=columns)
    else:
        validate_parquet_available()
        df = _load_parquet(path, columns=columns)

    logger.info(f"Loaded {len(df)} rows, {len(df.columns)} columns")
    return _coerce_types(df)


def _load_csv(path: Path, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Load CSV file."""
    kwargs = {"dtype": {c: str for c in FACTOR_COLUMNS}}
    if columns is not None:
        kwargs["usecols"] = columns

    return pd.read_csv(path, **kwargs)


def _load_parquet(path: Path, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Load a Parquet file or a directory of Parquet files."""
    import pyarrow.dataset as ds

    dataset = ds.dataset(str(path), format="parquet")
    return dataset.to_table(columns=columns).to_pandas()


def _coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    if VISITS in df.columns:
        df[VISITS] = pd.to_numeric(df[VISITS], errors="coerce")
    for col in FACTOR_COLUMNS:
        if col in df.columns:
            df[col] = pd.Series(
                [None if pd.isna(v) else str(v) for v in df[col]], index=df.index, dtype=object
            )
    return df
