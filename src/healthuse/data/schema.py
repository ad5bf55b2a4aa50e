"""Column schema for the survey observation table."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple


class Diagnosis(str, Enum):
    """Values allowed in binary diagnosis columns."""

    YES = "Yes"
    NO = "No"


VISITS = "visits"
DEPRESSION = "depression"
CHRONIC = "chronic"
INTERACTION = "depression_chronic"

# Chronic condition indicators, in reporting order, with their display labels
CONDITION_LABELS: Dict[str, str] = {
    "heart_attack": "Heart Attack",
    "angina_or_chd": "Angina or CHD",
    "stroke": "Stroke",
    "asthma": "Asthma",
    "skin_cancer": "Skin Cancer",
    "other_cancer": "Cancer (Other)",
    "copd": "COPD",
    "arthritis": "Arthritis",
    "diabetes": "Diabetes",
    "kidney_disease": "Kidney Disease",
}
CONDITION_COLUMNS: List[str] = list(CONDITION_LABELS)

FACTOR_COLUMNS: List[str] = [DEPRESSION, CHRONIC] + CONDITION_COLUMNS
REQUIRED_COLUMNS: List[str] = [VISITS] + FACTOR_COLUMNS

# Display names used for the grouping column of summary tables
GROUP_LABELS: Dict[str, str] = {
    DEPRESSION: "Depression",
    CHRONIC: "Chronic",
    INTERACTION: "DepressionChronic",
}

BINARY_LEVELS: Tuple[str, str] = (Diagnosis.YES.value, Diagnosis.NO.value)


def interaction_level(depression: str, chronic: str) -> str:
    """Interaction level name, e.g. ``interaction_level("Yes", "No") == "Yes.No"``."""
    return f"{depression}.{chronic}"


def split_interaction_level(level: str) -> Tuple[str, str]:
    """Inverse of :func:`interaction_level`."""
    depression, _, chronic = level.partition(".")
    return depression, chronic


INTERACTION_LEVELS: Tuple[str, ...] = tuple(
    interaction_level(d, c)
    for c in BINARY_LEVELS
    for d in BINARY_LEVELS
)
