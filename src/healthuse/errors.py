"""Exception types raised by the analysis pipeline."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple


class HealthUseError(Exception):
    """Base class for healthuse errors."""


class MissingFieldError(HealthUseError, ValueError):
    """Required column(s) absent from the input table."""

    def __init__(self, missing: Iterable[str], available: Optional[Iterable[str]] = None):
        self.missing = sorted(missing)
        self.available = sorted(available) if available is not None else []
        msg = f"Required columns not found: {self.missing}"
        if self.available:
            msg += f". Available: {self.available[:15]}"
        super().__init__(msg)


class DegenerateSampleError(HealthUseError, ValueError):
    """A comparison received a sample that cannot support the test."""

    def __init__(self, comparison: str, reason: str, sizes: Sequence[int] = ()):
        self.comparison = comparison
        self.reason = reason
        self.sizes = tuple(sizes)
        msg = f"{comparison}: {reason}"
        if self.sizes:
            msg += f" (n={list(self.sizes)})"
        super().__init__(msg)


class RankDeficientModelError(HealthUseError, ValueError):
    """The model design has one or more empty factor cells."""

    def __init__(self, formula: str, empty_cells: Sequence[Tuple[str, str]]):
        self.formula = formula
        self.empty_cells = list(empty_cells)
        cells = ", ".join(f"{a}/{b}" for a, b in self.empty_cells)
        super().__init__(f"Cannot fit '{formula}': no observations in cell(s) {cells}")
