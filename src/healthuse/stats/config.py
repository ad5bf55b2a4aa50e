"""Configuration dataclass for the analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from healthuse.data.schema import BINARY_LEVELS, INTERACTION_LEVELS


# (level A, level B) of the interaction factor for each pairwise comparison
DEFAULT_PAIRWISE: List[Tuple[str, str]] = [
    ("Yes.Yes", "No.Yes"),
    ("No.Yes", "Yes.No"),
    ("Yes.No", "No.No"),
]


@dataclass
class AnalysisConfig:
    """Configuration for the depression / chronic illness analysis.

    Attributes:
        levels: Order of binary factor levels in summary tables
        interaction_levels: Order of interaction levels in summary tables
        pairwise_comparisons: Interaction level pairs compared pairwise
        heavy_use_threshold: Rows with outcome above this value form the
            heavy-utilizer tables (default: 4)
        conf_level: Confidence level for mean and location-shift intervals
        hist_binwidth: Histogram bin width in outcome units (default: 5)
        make_plots: Whether to build chart handles (default: True)
        fig_dpi: Figure DPI (default: 100)
    """

    levels: List[str] = field(default_factory=lambda: list(BINARY_LEVELS))
    interaction_levels: List[str] = field(default_factory=lambda: list(INTERACTION_LEVELS))
    pairwise_comparisons: List[Tuple[str, str]] = field(default_factory=lambda: list(DEFAULT_PAIRWISE))
    heavy_use_threshold: float = 4
    conf_level: float = 0.95
    hist_binwidth: float = 5.0
    make_plots: bool = True
    fig_dpi: int = 100

    def __post_init__(self):
        """Validate configuration."""
        if self.conf_level <= 0 or self.conf_level >= 1:
            raise ValueError(f"conf_level must be in (0, 1), got {self.conf_level}")

        if self.hist_binwidth <= 0:
            raise ValueError(f"hist_binwidth must be > 0, got {self.hist_binwidth}")

        if sorted(self.levels) != sorted(BINARY_LEVELS):
            raise ValueError(f"levels must be an ordering of {list(BINARY_LEVELS)}, got {self.levels}")

        if sorted(self.interaction_levels) != sorted(INTERACTION_LEVELS):
            raise ValueError(
                f"interaction_levels must be an ordering of {list(INTERACTION_LEVELS)}, "
                f"got {self.interaction_levels}"
            )

        self.pairwise_comparisons = [tuple(p) for p in self.pairwise_comparisons]
        for a, b in self.pairwise_comparisons:
            if a not in INTERACTION_LEVELS or b not in INTERACTION_LEVELS or a == b:
                raise ValueError(f"Invalid pairwise comparison: ({a!r}, {b!r})")
