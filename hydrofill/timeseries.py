"""
hydrofill.timeseries - Time series access used by the regression engine.

The engine only needs read access to a time series: its period, an ordered
walk over a sub-range at the series' own timestep, and the missing-value
convention.  :class:`TimeSeriesHandle` states that contract;
:class:`PandasTimeSeries` implements it over a ``pandas.Series`` with a
``DatetimeIndex`` (daily flows from NWIS, monthly volumes, etc.).
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterator, Optional, Protocol, Tuple

import numpy as np
import pandas as pd
from pandas.tseries.frequencies import to_offset

log = logging.getLogger(__name__)

Observation = Tuple[pd.Timestamp, float, bool]


class TimeSeriesHandle(Protocol):
    """Read-only time series contract consumed by the regression engine."""

    name: str

    def period(self) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
        """First and last timestamps, or ``(None, None)`` for an empty series."""
        ...

    def iterate(self, start: pd.Timestamp, end: pd.Timestamp) -> Iterator[Observation]:
        """Yield ``(timestamp, value, is_missing)`` in increasing time order, both ends inclusive."""
        ...

    def is_missing(self, value: float) -> bool:
        ...

    def missing_sentinel(self) -> float:
        ...


class PandasTimeSeries:
    """
    Time series backed by a ``pandas.Series`` indexed by timestamps.

    The data are copied on construction so later changes to the caller's
    Series are not seen by an analysis.

    Parameters
    ----------
    data : pd.Series
        Values indexed by a ``DatetimeIndex`` (or anything ``pd.to_datetime``
        accepts).  NaN marks missing values.
    name : str, optional
        Identifier used in logs and reports (defaults to ``data.name``).
    freq : str or DateOffset, optional
        Native timestep, e.g. ``"D"`` or ``"MS"``.  Inferred from the index
        when possible; when neither given nor inferable, iteration visits the
        stored timestamps only.
    missing : float
        Missing-value sentinel.  NaN is always treated as missing as well.

    Examples
    --------
    >>> flows = pd.Series([12.0, None, 14.5],
    ...                   index=pd.date_range("2020-01-01", periods=3, freq="D"))
    >>> ts = PandasTimeSeries(flows, name="03606500")
    >>> [(t.day, m) for t, v, m in ts.iterate(*ts.period())]
    [(1, False), (2, True), (3, False)]
    """

    def __init__(
        self,
        data: pd.Series,
        name: Optional[str] = None,
        freq=None,
        missing: float = np.nan,
    ) -> None:
        series = pd.Series(data, dtype=float).copy()
        series.index = pd.DatetimeIndex(pd.to_datetime(series.index))
        series = series.sort_index()
        if series.index.has_duplicates:
            raise ValueError("Time series index contains duplicate timestamps")
        self._missing = float(missing)
        if not math.isnan(self._missing):
            series = series.mask(series == self._missing)
        self._data = series
        self.name = name if name is not None else (str(data.name) if data.name is not None else "TS")
        if freq is None and len(series) >= 3:
            freq = pd.infer_freq(series.index)
        if freq is None:
            log.debug("No regular timestep for %s, iterating stored values only", self.name)
        self.freq = to_offset(freq) if freq is not None else None

    @classmethod
    def from_values(
        cls,
        values,
        start,
        freq: str = "D",
        name: Optional[str] = None,
        missing: float = np.nan,
    ) -> "PandasTimeSeries":
        """Build a regular series from a value sequence, a start date and a timestep."""
        values = list(values)
        index = pd.date_range(start=start, periods=len(values), freq=freq)
        data = pd.Series([np.nan if v is None else v for v in values], index=index, dtype=float)
        return cls(data, name=name, freq=freq, missing=missing)

    # ------------------------------------------------------------------
    # TimeSeriesHandle contract
    # ------------------------------------------------------------------

    def period(self) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
        if self._data.empty:
            return None, None
        return self._data.index[0], self._data.index[-1]

    def iterate(self, start, end) -> Iterator[Observation]:
        if start is None or end is None or self._data.empty:
            return
        start, end = pd.Timestamp(start), pd.Timestamp(end)
        if start > end:
            return
        if self.freq is not None:
            index = pd.date_range(start=start, end=end, freq=self.freq)
            values = self._data.reindex(index)
        else:
            values = self._data.loc[start:end]
        for timestamp, value in values.items():
            yield timestamp, float(value), bool(np.isnan(value))

    def is_missing(self, value: float) -> bool:
        if value is None:
            return True
        value = float(value)
        return math.isnan(value) or (not math.isnan(self._missing) and value == self._missing)

    def missing_sentinel(self) -> float:
        return self._missing

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        start, end = self.period()
        return f"PandasTimeSeries({self.name!r}, {start} - {end}, n={len(self)})"

    def to_series(self) -> pd.Series:
        """Return a copy of the data as a ``pandas.Series`` (NaN for missing)."""
        return self._data.copy()

    def with_values(self, updates: Dict[pd.Timestamp, float], name: Optional[str] = None) -> "PandasTimeSeries":
        """
        Return a new series with *updates* applied; this series is unchanged.

        Timestamps not already in the index are added.
        """
        data = self._data.copy()
        for timestamp, value in updates.items():
            data.loc[pd.Timestamp(timestamp)] = value
        return PandasTimeSeries(
            data.sort_index(),
            name=name or self.name,
            freq=self.freq,
            missing=self._missing,
        )
