"""
hydrofill.regression.filling - Estimate missing Y values from fitted relationships.

:class:`FillApplier` walks the dependent series over a fill period and, for
every missing Y with a non-missing X at the same timestamp, estimates Y with
the relationship for that timestamp's scope:

* monthly equations when they were analysed, otherwise the single equation,
* only relationships that are defined and, when checks were evaluated, pass,
* only months in the analysis-month filter.

LOG10 estimates are returned to data units with ``10**y``.  The input series
is never modified; a new :class:`~hydrofill.timeseries.PandasTimeSeries` is
returned alongside the :class:`RegressionFilledValues` summary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Collection, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from hydrofill.config import Period
from hydrofill.core import MONTHS, ScopedSet, scope_label
from hydrofill.regression.checks import RegressionCheckSet
from hydrofill.regression.data_set import SampleStats
from hydrofill.regression.solver import RegressionRelationship, RegressionResultSet
from hydrofill.timeseries import PandasTimeSeries, TimeSeriesHandle

log = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FilledRecord:
    """Values filled by one equation, in data units."""

    month: Optional[int]
    timestamps: Tuple[pd.Timestamp, ...] = ()
    values: np.ndarray = None

    def __post_init__(self) -> None:
        arr = np.array(self.values if self.values is not None else (), dtype=float)
        arr.setflags(write=False)
        object.__setattr__(self, "values", arr)
        object.__setattr__(self, "timestamps", tuple(self.timestamps))
        if len(self.timestamps) != len(arr):
            raise ValueError("Filled timestamps and values differ in length")

    @property
    def n(self) -> int:
        return len(self.values)

    @cached_property
    def stats(self) -> SampleStats:
        return SampleStats.of(self.values)

    @cached_property
    def skew(self) -> Optional[float]:
        """Sample skew coefficient, None with fewer than 3 values."""
        if self.n < 3 or np.all(self.values == self.values[0]):
            return None
        return float(stats.skew(self.values, bias=False))

    @property
    def scope_label(self) -> str:
        return scope_label(self.month)


@dataclass(frozen=True, eq=False)
class RegressionFilledValues(ScopedSet[FilledRecord]):
    """
    Filled values grouped by the equation that produced them.

    ``single`` holds values filled with the single equation; ``monthly``
    holds values filled with each monthly equation.
    """

    @property
    def n_filled(self) -> int:
        return sum(rec.n for _, rec in self.items())


def as_pandas(series: TimeSeriesHandle) -> PandasTimeSeries:
    """Return *series* as a :class:`PandasTimeSeries`, converting through its iterator if needed."""
    if isinstance(series, PandasTimeSeries):
        return series
    start, end = series.period()
    if start is None:
        return PandasTimeSeries(pd.Series([], dtype=float, index=pd.DatetimeIndex([])), name=series.name)
    observations = list(series.iterate(start, end))
    data = pd.Series(
        [np.nan if missing else value for _, value, missing in observations],
        index=pd.DatetimeIndex([t for t, _, _ in observations]),
        dtype=float,
    )
    return PandasTimeSeries(data, name=series.name)


class FillApplier:
    """
    Apply fitted relationships to fill a dependent series.

    Parameters
    ----------
    use_monthly : bool
        Fill with monthly equations (when the result set has them) instead
        of the single equation.
    month_filter : collection of int
        Months that may be filled; empty means all.
    """

    def __init__(self, use_monthly: bool = False, month_filter: Collection[int] = ()) -> None:
        self.use_monthly = use_monthly
        self.month_filter = frozenset(month_filter)

    def _usable(
        self,
        result_set: RegressionResultSet,
        check_set: Optional[RegressionCheckSet],
    ) -> Dict[Optional[int], RegressionRelationship]:
        """Relationships that may fill, keyed by month (None = single equation)."""
        if self.use_monthly:
            if not result_set.has_monthly:
                raise KeyError("Monthly equations were not analyzed")
            keys = [m for m in MONTHS if not self.month_filter or m in self.month_filter]
        else:
            if not result_set.has_single:
                raise KeyError("Single equation was not analyzed")
            keys = [None]
        usable = {}
        for key in keys:
            rel = result_set.get(key)
            if not rel.is_defined:
                log.debug("Not filling with %s: %s", rel.scope_label, rel.reason)
                continue
            if check_set is not None:
                check = check_set.get(key)
                if not check.passed:
                    log.warning(
                        "Not filling with %s: relationship fails checks (%s)",
                        rel.scope_label,
                        check.invalid_reason(),
                    )
                    continue
            usable[key] = rel
        return usable

    def fill(
        self,
        independent: TimeSeriesHandle,
        dependent: TimeSeriesHandle,
        result_set: RegressionResultSet,
        check_set: Optional[RegressionCheckSet] = None,
        fill_period: Optional[Period] = None,
    ) -> Tuple[RegressionFilledValues, PandasTimeSeries]:
        """
        Fill missing values of *dependent* from *independent*.

        Parameters
        ----------
        independent, dependent : TimeSeriesHandle
        result_set : RegressionResultSet
        check_set : RegressionCheckSet, optional
            When given, relationships that fail their checks are not used.
        fill_period : (start, end), optional
            Defaults to the dependent series' full period.

        Returns
        -------
        (RegressionFilledValues, PandasTimeSeries)
            The summary of filled values and a new, filled copy of *dependent*.
        """
        usable = self._usable(result_set, check_set)
        if fill_period is None:
            start, end = dependent.period()
            fill_period = None if start is None else (start, end)

        filled: Dict[Optional[int], List[Tuple[pd.Timestamp, float]]] = {k: [] for k in usable}
        if fill_period is not None and usable:
            x_values = {
                t: v
                for t, v, missing in independent.iterate(fill_period[0], fill_period[1])
                if not (missing or independent.is_missing(v))
            }
            for timestamp, value, missing in dependent.iterate(fill_period[0], fill_period[1]):
                if not (missing or dependent.is_missing(value)):
                    continue
                if self.month_filter and timestamp.month not in self.month_filter:
                    continue
                if timestamp not in x_values:
                    continue
                key = timestamp.month if self.use_monthly else None
                rel = usable.get(key)
                if rel is None:
                    continue
                filled[key].append((timestamp, float(rel.estimate([x_values[timestamp]])[0])))

        def record(key):
            pairs = filled.get(key, [])
            return FilledRecord(month=key, timestamps=[t for t, _ in pairs], values=[v for _, v in pairs])

        if self.use_monthly:
            values = RegressionFilledValues(monthly=tuple(record(m) for m in MONTHS))
        else:
            values = RegressionFilledValues(single=record(None))

        updates = {t: v for pairs in filled.values() for t, v in pairs}
        filled_series = as_pandas(dependent).with_values(updates)
        log.info("Filled %d values in %s", len(updates), getattr(dependent, "name", "Y"))
        return values, filled_series
