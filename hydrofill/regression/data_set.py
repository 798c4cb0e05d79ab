"""
hydrofill.regression.data_set - Extracted sample arrays for each equation scope.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Optional

import numpy as np

from hydrofill.config import Period
from hydrofill.core import ScopedSet
from hydrofill.timeseries import TimeSeriesHandle


def _frozen_array(values) -> np.ndarray:
    arr = np.array(values if values is not None else (), dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class SampleStats:
    """Summary of one sample array; fields are None when the sample is too short."""

    n: int
    mean: Optional[float] = None
    std: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @classmethod
    def of(cls, values: np.ndarray) -> "SampleStats":
        n = len(values)
        if n == 0:
            return cls(n=0)
        return cls(
            n=n,
            mean=float(np.mean(values)),
            std=float(np.std(values, ddof=1)) if n > 1 else None,
            min=float(np.min(values)),
            max=float(np.max(values)),
        )


@dataclass(frozen=True, eq=False)
class RegressionSample:
    """
    Sample arrays for one equation scope, in data units.

    Attributes
    ----------
    x1, y1 : np.ndarray
        Paired sample: X and Y at timestamps in the dependent period where
        neither is missing.  Always the same length.
    x2 : np.ndarray
        Every non-missing X over the independent period, regardless of Y.
    x3 : np.ndarray
        Extension sample: non-missing X over the independent period with no
        paired Y (outside the dependent period or Y missing).
    y3 : np.ndarray
        Every non-missing Y over the dependent period, regardless of X.
    month : int or None
        Scope (None = single equation).

    All arrays are read-only and have length 0 (never None) when the scope
    has no data or its month is excluded.
    """

    x1: np.ndarray = None
    y1: np.ndarray = None
    x2: np.ndarray = None
    x3: np.ndarray = None
    y3: np.ndarray = None
    month: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("x1", "y1", "x2", "x3", "y3"):
            object.__setattr__(self, name, _frozen_array(getattr(self, name)))
        if len(self.x1) != len(self.y1):
            raise ValueError(f"Paired arrays differ in length ({len(self.x1)} vs {len(self.y1)})")

    @property
    def n1(self) -> int:
        return len(self.x1)

    @property
    def n2(self) -> int:
        return len(self.x2)

    @property
    def is_empty(self) -> bool:
        return self.n1 == 0 and self.n2 == 0 and len(self.y3) == 0

    @cached_property
    def x1_stats(self) -> SampleStats:
        return SampleStats.of(self.x1)

    @cached_property
    def y1_stats(self) -> SampleStats:
        return SampleStats.of(self.y1)

    @cached_property
    def x2_stats(self) -> SampleStats:
        return SampleStats.of(self.x2)

    @cached_property
    def x3_stats(self) -> SampleStats:
        return SampleStats.of(self.x3)

    @cached_property
    def y3_stats(self) -> SampleStats:
        return SampleStats.of(self.y3)


@dataclass(frozen=True, eq=False)
class RegressionDataSet(ScopedSet[RegressionSample]):
    """
    Single-equation and monthly samples extracted for one analysis.

    Also records the source series and the resolved analysis periods the
    samples were taken over.
    """

    independent: Optional[TimeSeriesHandle] = None
    dependent: Optional[TimeSeriesHandle] = None
    dependent_period: Optional[Period] = None
    independent_period: Optional[Period] = None
