"""
hydrofill.regression.extractor - Build paired and unpaired samples from two series.

:class:`SampleExtractor` walks the series over their analysis periods at the
native timestep and collects, for a scope (single equation or one calendar
month):

* ``x1``/``y1`` - values where neither X nor Y is missing (paired sample),
* ``x2``        - every non-missing X over the independent period,
* ``x3``        - non-missing X with no paired Y (MOVE2 extension sample),
* ``y3``        - every non-missing Y over the dependent period.

Extraction never raises for lack of data; an empty period, an excluded month
or an all-missing series produces zero-length arrays.
"""

from __future__ import annotations

import logging
from typing import Collection, Optional, Tuple

import numpy as np

from hydrofill.config import Period
from hydrofill.core import MONTHS
from hydrofill.regression.data_set import RegressionDataSet, RegressionSample
from hydrofill.timeseries import TimeSeriesHandle

log = logging.getLogger(__name__)

_EMPTY = np.empty(0, dtype=float)


def _scope_months(month: Optional[int], month_filter: Collection[int]) -> Optional[frozenset]:
    """
    Months a scope draws from: None means every month, an empty set means none.
    """
    if month is None:
        return frozenset(month_filter) if month_filter else None
    if month_filter and month not in month_filter:
        return frozenset()
    return frozenset((month,))


def _observations(series: Optional[TimeSeriesHandle], period: Optional[Period], months: Optional[frozenset]):
    """Yield ``(timestamp, value, is_missing)`` in *period*, restricted to *months*."""
    if series is None or period is None or months == frozenset():
        return
    for timestamp, value, missing in series.iterate(period[0], period[1]):
        if months is not None and timestamp.month not in months:
            continue
        yield timestamp, value, missing or series.is_missing(value)


class SampleExtractor:
    """
    Extract sample arrays from an independent (X) and dependent (Y) series.

    The extractor holds no state, so repeated calls with the same inputs
    return identical arrays.
    """

    def extract(
        self,
        x_series: TimeSeriesHandle,
        y_series: Optional[TimeSeriesHandle],
        period: Optional[Period],
        month: Optional[int] = None,
        month_filter: Collection[int] = (),
        match_missing: bool = True,
    ) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        """
        Extract one scope's sample over *period*.

        Parameters
        ----------
        x_series, y_series : TimeSeriesHandle
            Independent and dependent series.  *y_series* may be None when
            ``match_missing`` is False.
        period : (start, end) or None
            Inclusive analysis period; None yields empty arrays.
        month : int, optional
            Calendar month of a monthly equation; None for the single equation.
        month_filter : collection of int
            Analysis months; empty means all months.
        match_missing : bool
            True returns ``(x1, y1)`` where both values are present.  False
            returns ``(x2, None)``: every non-missing X, ignoring Y.

        Returns
        -------
        (np.ndarray, np.ndarray or None)
        """
        months = _scope_months(month, month_filter)
        if not match_missing:
            values = [v for _, v, missing in _observations(x_series, period, months) if not missing]
            return np.asarray(values, dtype=float), None

        x_lookup = {t: (v, m) for t, v, m in _observations(x_series, period, months)}
        xs, ys = [], []
        for timestamp, y_value, y_missing in _observations(y_series, period, months):
            if y_missing:
                continue
            x_value, x_missing = x_lookup.get(timestamp, (None, True))
            if x_missing:
                continue
            xs.append(x_value)
            ys.append(y_value)
        return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)

    def extract_extension(
        self,
        x_series: TimeSeriesHandle,
        y_series: TimeSeriesHandle,
        independent_period: Optional[Period],
        dependent_period: Optional[Period],
        month: Optional[int] = None,
        month_filter: Collection[int] = (),
    ) -> np.ndarray:
        """
        Non-missing X over the independent period that has no paired Y.

        A value qualifies when its timestamp lies outside the dependent period
        or Y is missing there.
        """
        months = _scope_months(month, month_filter)
        y_present = set()
        for timestamp, _, y_missing in _observations(y_series, dependent_period, months):
            if not y_missing:
                y_present.add(timestamp)
        values = [
            v
            for t, v, missing in _observations(x_series, independent_period, months)
            if not missing and t not in y_present
        ]
        return np.asarray(values, dtype=float)

    def extract_dependent(
        self,
        y_series: TimeSeriesHandle,
        dependent_period: Optional[Period],
        month: Optional[int] = None,
        month_filter: Collection[int] = (),
    ) -> np.ndarray:
        """Every non-missing Y over the dependent period."""
        y3, _ = self.extract(y_series, None, dependent_period, month, month_filter, match_missing=False)
        return y3

    def sample(
        self,
        x_series: TimeSeriesHandle,
        y_series: TimeSeriesHandle,
        dependent_period: Optional[Period],
        independent_period: Optional[Period],
        month: Optional[int] = None,
        month_filter: Collection[int] = (),
    ) -> RegressionSample:
        """Extract all arrays for one scope."""
        if _scope_months(month, month_filter) == frozenset():
            return RegressionSample(_EMPTY, _EMPTY, _EMPTY, _EMPTY, _EMPTY, month=month)
        x1, y1 = self.extract(x_series, y_series, dependent_period, month, month_filter)
        x2, _ = self.extract(x_series, None, independent_period, month, month_filter, match_missing=False)
        return RegressionSample(
            x1=x1,
            y1=y1,
            x2=x2,
            x3=self.extract_extension(
                x_series, y_series, independent_period, dependent_period, month, month_filter
            ),
            y3=self.extract_dependent(y_series, dependent_period, month, month_filter),
            month=month,
        )

    def build_data_set(
        self,
        x_series: TimeSeriesHandle,
        y_series: TimeSeriesHandle,
        dependent_period: Optional[Period],
        independent_period: Optional[Period],
        month_filter: Collection[int] = (),
        single: bool = True,
        monthly: bool = True,
    ) -> RegressionDataSet:
        """
        Extract the single-equation sample and/or the twelve monthly samples.

        Months excluded by *month_filter* get zero-length arrays.
        """
        single_sample = None
        if single:
            single_sample = self.sample(x_series, y_series, dependent_period, independent_period, None, month_filter)
            log.info(
                "Extracted single-equation sample: n1=%d n2=%d (%s vs %s)",
                single_sample.n1,
                single_sample.n2,
                getattr(y_series, "name", "Y"),
                getattr(x_series, "name", "X"),
            )
        monthly_samples: Tuple[RegressionSample, ...] = ()
        if monthly:
            monthly_samples = tuple(
                self.sample(x_series, y_series, dependent_period, independent_period, m, month_filter)
                for m in MONTHS
            )
            log.debug("Monthly n1: %s", [s.n1 for s in monthly_samples])
        return RegressionDataSet(
            single=single_sample,
            monthly=monthly_samples,
            independent=x_series,
            dependent=y_series,
            dependent_period=dependent_period,
            independent_period=independent_period,
        )

