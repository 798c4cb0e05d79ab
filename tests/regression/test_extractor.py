"""
Tests for hydrofill.regression.extractor.

Covers paired / unpaired extraction, month filtering, the extension and
dependent samples, and the zero-length results for empty inputs.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from hydrofill.regression.data_set import RegressionSample
from hydrofill.regression.extractor import SampleExtractor
from hydrofill.timeseries import PandasTimeSeries

# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

YEAR_2000 = (pd.Timestamp("2000-01-01"), pd.Timestamp("2000-12-01"))


@pytest.fixture
def x_ts() -> PandasTimeSeries:
    """X = 1..12 at monthly steps through 2000."""
    return PandasTimeSeries.from_values(range(1, 13), start="2000-01-01", freq="MS", name="X")


@pytest.fixture
def y_ts() -> PandasTimeSeries:
    """Y = 2t with January and April missing."""
    values = [2.0 * t for t in range(1, 13)]
    values[0] = None
    values[3] = None
    return PandasTimeSeries.from_values(values, start="2000-01-01", freq="MS", name="Y")


@pytest.fixture
def extractor() -> SampleExtractor:
    return SampleExtractor()


# ---------------------------------------------------------------------------
# extract()
# ---------------------------------------------------------------------------


class TestExtract:
    def test_paired_sample_skips_missing(self, extractor, x_ts, y_ts) -> None:
        x1, y1 = extractor.extract(x_ts, y_ts, YEAR_2000)
        np.testing.assert_array_equal(x1, [2, 3, 5, 6, 7, 8, 9, 10, 11, 12])
        np.testing.assert_array_equal(y1, [4, 6, 10, 12, 14, 16, 18, 20, 22, 24])

    def test_unpaired_sample_ignores_y(self, extractor, x_ts) -> None:
        x2, y = extractor.extract(x_ts, None, YEAR_2000, match_missing=False)
        assert y is None
        np.testing.assert_array_equal(x2, np.arange(1.0, 13.0))

    def test_month_scope(self, extractor, x_ts, y_ts) -> None:
        x1, y1 = extractor.extract(x_ts, y_ts, YEAR_2000, month=2)
        np.testing.assert_array_equal(x1, [2.0])
        np.testing.assert_array_equal(y1, [4.0])

    def test_month_filter_on_single_equation(self, extractor, x_ts, y_ts) -> None:
        x1, _ = extractor.extract(x_ts, y_ts, YEAR_2000, month_filter=(1, 2, 3, 4))
        np.testing.assert_array_equal(x1, [2.0, 3.0])

    def test_month_excluded_by_filter(self, extractor, x_ts, y_ts) -> None:
        x1, y1 = extractor.extract(x_ts, y_ts, YEAR_2000, month=6, month_filter=(1, 2))
        assert len(x1) == 0 and len(y1) == 0

    def test_sub_period(self, extractor, x_ts, y_ts) -> None:
        period = (pd.Timestamp("2000-05-01"), pd.Timestamp("2000-07-01"))
        x1, y1 = extractor.extract(x_ts, y_ts, period)
        np.testing.assert_array_equal(x1, [5.0, 6.0, 7.0])

    def test_none_period_is_empty(self, extractor, x_ts, y_ts) -> None:
        x1, y1 = extractor.extract(x_ts, y_ts, None)
        assert x1.shape == (0,) and y1.shape == (0,)

    def test_all_missing_series_is_empty(self, extractor, x_ts) -> None:
        y_missing = PandasTimeSeries.from_values([None] * 12, start="2000-01-01", freq="MS")
        x1, y1 = extractor.extract(x_ts, y_missing, YEAR_2000)
        assert len(x1) == 0 and len(y1) == 0

    def test_idempotent(self, extractor, x_ts, y_ts) -> None:
        first = extractor.extract(x_ts, y_ts, YEAR_2000, month_filter=(2, 3, 5))
        second = SampleExtractor().extract(x_ts, y_ts, YEAR_2000, month_filter=(2, 3, 5))
        np.testing.assert_array_equal(first[0], second[0])
        np.testing.assert_array_equal(first[1], second[1])
        assert first[0].tobytes() == second[0].tobytes()


# ---------------------------------------------------------------------------
# Extension and dependent samples
# ---------------------------------------------------------------------------


class TestExtensionSamples:
    def test_extension_is_x_without_paired_y(self, extractor, x_ts, y_ts) -> None:
        x3 = extractor.extract_extension(x_ts, y_ts, YEAR_2000, YEAR_2000)
        np.testing.assert_array_equal(x3, [1.0, 4.0])

    def test_extension_includes_x_outside_dependent_period(self, extractor, x_ts, y_ts) -> None:
        dependent = (pd.Timestamp("2000-07-01"), pd.Timestamp("2000-12-01"))
        x3 = extractor.extract_extension(x_ts, y_ts, YEAR_2000, dependent)
        np.testing.assert_array_equal(x3, [1, 2, 3, 4, 5, 6])

    def test_dependent_sample(self, extractor, y_ts) -> None:
        y3 = extractor.extract_dependent(y_ts, YEAR_2000)
        assert len(y3) == 10
        assert y3[0] == 4.0


# ---------------------------------------------------------------------------
# build_data_set()
# ---------------------------------------------------------------------------


class TestBuildDataSet:
    def test_single_and_monthly(self, extractor, x_ts, y_ts) -> None:
        ds = extractor.build_data_set(x_ts, y_ts, YEAR_2000, YEAR_2000)
        assert ds.single_equation().n1 == 10
        assert len(ds.monthly) == 12
        assert ds.monthly_equation(1).n1 == 0
        assert ds.monthly_equation(4).n1 == 0
        assert ds.monthly_equation(2).n1 == 1
        assert ds.monthly_equation(12).n2 == 1

    def test_pairing_invariant(self, extractor, x_ts, y_ts) -> None:
        ds = extractor.build_data_set(x_ts, y_ts, YEAR_2000, YEAR_2000, month_filter=(2, 4, 9))
        for _, sample in ds.items():
            assert len(sample.x1) == len(sample.y1)

    def test_excluded_months_are_empty_arrays(self, extractor, x_ts, y_ts) -> None:
        ds = extractor.build_data_set(x_ts, y_ts, YEAR_2000, YEAR_2000, month_filter=(6,))
        for month in (1, 5, 7, 12):
            sample = ds.monthly_equation(month)
            assert sample.x1 is not None
            assert sample.is_empty
        assert ds.monthly_equation(6).n1 == 1
        assert ds.single_equation().n1 == 1

    def test_single_only(self, extractor, x_ts, y_ts) -> None:
        ds = extractor.build_data_set(x_ts, y_ts, YEAR_2000, YEAR_2000, monthly=False)
        assert ds.has_single and not ds.has_monthly
        with pytest.raises(KeyError):
            ds.monthly_equation(1)

    def test_periods_and_series_recorded(self, extractor, x_ts, y_ts) -> None:
        ds = extractor.build_data_set(x_ts, y_ts, YEAR_2000, YEAR_2000)
        assert ds.independent is x_ts
        assert ds.dependent is y_ts
        assert ds.dependent_period == YEAR_2000

    def test_invalid_month_raises(self, extractor, x_ts, y_ts) -> None:
        ds = extractor.build_data_set(x_ts, y_ts, YEAR_2000, YEAR_2000)
        with pytest.raises(ValueError):
            ds.monthly_equation(13)


class TestRegressionSample:
    def test_arrays_read_only(self) -> None:
        sample = RegressionSample(x1=[1.0, 2.0], y1=[3.0, 4.0])
        with pytest.raises(ValueError):
            sample.x1[0] = 10.0

    def test_mismatched_pairs_raise(self) -> None:
        with pytest.raises(ValueError):
            RegressionSample(x1=[1.0, 2.0], y1=[3.0])

    def test_stats(self) -> None:
        sample = RegressionSample(x1=[1.0, 2.0, 3.0], y1=[2.0, 4.0, 6.0], x2=[5.0])
        assert sample.x1_stats.mean == pytest.approx(2.0)
        assert sample.y1_stats.std == pytest.approx(2.0)
        assert sample.x2_stats.std is None
        assert sample.x3_stats.n == 0 and sample.x3_stats.mean is None
