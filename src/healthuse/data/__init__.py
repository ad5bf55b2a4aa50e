"""
Observation schema, validation and table loading.

Example usage:
    from healthuse.data import load_table, validate_observations

    df = load_table(Path("brfss_rq4.parquet"))
    validate_observations(df)
"""

from healthuse.data.schema import (
    Diagnosis,
    VISITS,
    DEPRESSION,
    CHRONIC,
    INTERACTION,
    CONDITION_LABELS,
    CONDITION_COLUMNS,
    REQUIRED_COLUMNS,
    INTERACTION_LEVELS,
)
from healthuse.data.loaders import DataFormat, load_table
from healthuse.data.validation import (
    validate_columns,
    validate_values,
    validate_observations,
    generate_missingness_report,
)

__all__ = [
    # Schema
    "Diagnosis",
    "VISITS",
    "DEPRESSION",
    "CHRONIC",
    "INTERACTION",
    "CONDITION_LABELS",
    "CONDITION_COLUMNS",
    "REQUIRED_COLUMNS",
    "INTERACTION_LEVELS",
    # Loaders
    "DataFormat",
    "load_table",
    # Validation
    "validate_columns",
    "validate_values",
    "validate_observations",
    "generate_missingness_report",
]
