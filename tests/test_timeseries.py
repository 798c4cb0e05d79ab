"""Tests for hydrofill.timeseries."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from hydrofill.timeseries import PandasTimeSeries


@pytest.fixture
def daily() -> PandasTimeSeries:
    values = [1.0, np.nan, 3.0, 4.0, np.nan, 6.0]
    return PandasTimeSeries.from_values(values, start="2020-01-01", freq="D", name="daily")


class TestPandasTimeSeries:
    """Contract used by the regression engine."""

    def test_period(self, daily: PandasTimeSeries) -> None:
        assert daily.period() == (pd.Timestamp("2020-01-01"), pd.Timestamp("2020-01-06"))

    def test_empty_period(self) -> None:
        ts = PandasTimeSeries(pd.Series([], dtype=float, index=pd.DatetimeIndex([])))
        assert ts.period() == (None, None)
        assert list(ts.iterate("2020-01-01", "2020-12-31")) == []

    def test_iterate_inclusive_in_order(self, daily: PandasTimeSeries) -> None:
        obs = list(daily.iterate("2020-01-02", "2020-01-04"))
        assert [t.day for t, _, _ in obs] == [2, 3, 4]
        assert [m for _, _, m in obs] == [True, False, False]
        assert obs[1][1] == 3.0

    def test_iterate_beyond_data_is_missing(self, daily: PandasTimeSeries) -> None:
        obs = list(daily.iterate("2020-01-05", "2020-01-08"))
        assert len(obs) == 4
        assert [m for _, _, m in obs] == [True, False, True, True]

    def test_iterate_reversed_period_is_empty(self, daily: PandasTimeSeries) -> None:
        assert list(daily.iterate("2020-01-05", "2020-01-01")) == []

    def test_missing_sentinel(self) -> None:
        ts = PandasTimeSeries.from_values([5.0, -999.0, 7.0], start="2020-01-01", missing=-999.0)
        assert ts.missing_sentinel() == -999.0
        assert ts.is_missing(-999.0)
        assert ts.is_missing(float("nan"))
        assert not ts.is_missing(5.0)
        assert [m for _, _, m in ts.iterate(*ts.period())] == [False, True, False]

    def test_none_values_are_missing(self) -> None:
        ts = PandasTimeSeries.from_values([1.0, None, 2.0], start="2020-01-01")
        assert ts.to_series().isna().sum() == 1

    def test_freq_inferred(self) -> None:
        idx = pd.date_range("2000-01-01", periods=12, freq="MS")
        ts = PandasTimeSeries(pd.Series(np.arange(12.0), index=idx))
        assert ts.freq is not None
        assert len(list(ts.iterate(*ts.period()))) == 12

    def test_irregular_series_iterates_stored_values(self) -> None:
        idx = pd.DatetimeIndex(["2020-01-01", "2020-01-03", "2020-01-10"])
        ts = PandasTimeSeries(pd.Series([1.0, 2.0, 3.0], index=idx))
        assert ts.freq is None
        assert [v for _, v, _ in ts.iterate("2020-01-01", "2020-01-05")] == [1.0, 2.0]

    def test_duplicate_index_raises(self) -> None:
        idx = pd.DatetimeIndex(["2020-01-01", "2020-01-01"])
        with pytest.raises(ValueError):
            PandasTimeSeries(pd.Series([1.0, 2.0], index=idx))

    def test_snapshot_of_input(self) -> None:
        data = pd.Series([1.0, 2.0, 3.0], index=pd.date_range("2020-01-01", periods=3))
        ts = PandasTimeSeries(data)
        data.iloc[0] = 100.0
        assert ts.to_series().iloc[0] == 1.0

    def test_with_values_returns_new_series(self, daily: PandasTimeSeries) -> None:
        filled = daily.with_values({pd.Timestamp("2020-01-02"): 2.0})
        assert filled.to_series().loc[pd.Timestamp("2020-01-02")] == 2.0
        assert np.isnan(daily.to_series().loc[pd.Timestamp("2020-01-02")])
        assert filled.name == "daily"
