"""Tests for hydrofill.config and the enumerations in hydrofill.core."""

from __future__ import annotations

import pandas as pd
import pytest

from hydrofill.config import AnalysisConfiguration, CheckCriteria, coerce_period
from hydrofill.core import (
    ConfigurationError,
    EquationScope,
    RegressionMethod,
    Transformation,
)


class TestEnumCoercion:
    """String parsing of the option enums."""

    @pytest.mark.parametrize("raw", ["OLS", "ols", "ORDINARY_LEAST_SQUARES", "OLS_REGRESSION"])
    def test_ols_names(self, raw: str) -> None:
        assert RegressionMethod.coerce(raw) is RegressionMethod.OLS

    def test_move2(self) -> None:
        assert RegressionMethod.coerce("Move2") is RegressionMethod.MOVE2

    @pytest.mark.parametrize("raw,expected", [
        (None, Transformation.NONE),
        ("", Transformation.NONE),
        ("None", Transformation.NONE),
        ("Log", Transformation.LOG10),
        ("log10", Transformation.LOG10),
    ])
    def test_transformation(self, raw, expected) -> None:
        assert Transformation.coerce(raw) is expected

    def test_scope_names(self) -> None:
        assert EquationScope.coerce("SingleEquation") is EquationScope.SINGLE
        assert EquationScope.coerce("MonthlyEquations") is EquationScope.MONTHLY

    def test_unknown_method_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            RegressionMethod.coerce("MOVE1")

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Transformation.coerce("ln")


class TestAnalysisConfiguration:
    """Validation and defaults of AnalysisConfiguration."""

    def test_defaults(self) -> None:
        cfg = AnalysisConfiguration()
        assert cfg.method is RegressionMethod.OLS
        assert cfg.equation_scopes == frozenset({EquationScope.SINGLE})
        assert cfg.analysis_months == ()
        assert cfg.transform is Transformation.NONE
        assert cfg.le_zero_substitute == pytest.approx(0.001)
        assert cfg.forced_intercept is None
        assert cfg.analyze_single and not cfg.analyze_monthly

    def test_strings_are_coerced(self) -> None:
        cfg = AnalysisConfiguration(
            method="MOVE2",
            equation_scopes=["SingleEquation", "MonthlyEquations"],
            transform="Log",
            analysis_months=[6, 4, 5, 4],
        )
        assert cfg.method is RegressionMethod.MOVE2
        assert cfg.analyze_single and cfg.analyze_monthly
        assert cfg.transform is Transformation.LOG10
        assert cfg.analysis_months == (4, 5, 6)

    def test_single_scope_string(self) -> None:
        cfg = AnalysisConfiguration(equation_scopes="MonthlyEquations")
        assert cfg.equation_scopes == frozenset({EquationScope.MONTHLY})

    def test_no_scopes_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(equation_scopes=[])

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_month_out_of_range_raises(self, month: int) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(analysis_months=[1, month])

    def test_non_integer_month_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(analysis_months="1,2.5")

    @pytest.mark.parametrize("months", [[float("nan")], ["inf"], "1,inf", [float("-inf")], 7])
    def test_non_finite_or_scalar_months_raise(self, months) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(analysis_months=months)

    def test_le_zero_must_be_positive(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(transform="Log", le_zero_substitute=0.0)

    def test_le_zero_none_takes_default(self) -> None:
        assert AnalysisConfiguration(le_zero_substitute=None).le_zero_substitute == pytest.approx(0.001)

    def test_zero_intercept_with_ols_allowed(self) -> None:
        cfg = AnalysisConfiguration(method="OLS", forced_intercept=0.0)
        assert cfg.forced_intercept == 0.0

    def test_zero_intercept_with_move2_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(method="MOVE2", forced_intercept=0.0)

    def test_non_zero_intercept_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(forced_intercept=1.5)

    def test_ols_periods_must_match(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(
                dependent_period=("2000-01-01", "2000-12-31"),
                independent_period=("1990-01-01", "2000-12-31"),
            )

    def test_move2_periods_may_differ(self) -> None:
        cfg = AnalysisConfiguration(
            method="MOVE2",
            dependent_period=("2000-01-01", "2000-12-31"),
            independent_period=("1990-01-01", "2000-12-31"),
        )
        assert cfg.independent_period[0] == pd.Timestamp("1990-01-01")

    def test_reversed_period_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration(dependent_period=("2001-01-01", "2000-01-01"))

    def test_months_mask(self) -> None:
        assert AnalysisConfiguration().analysis_months_mask == (True,) * 12
        mask = AnalysisConfiguration(analysis_months=[1, 12]).analysis_months_mask
        assert mask[0] and mask[11]
        assert sum(mask) == 2

    def test_forced_intercept_dropped_for_log(self) -> None:
        cfg = AnalysisConfiguration(forced_intercept=0.0, transform="Log10")
        assert cfg.forced_intercept == 0.0
        assert cfg.effective_forced_intercept is None

    def test_frozen(self) -> None:
        cfg = AnalysisConfiguration()
        with pytest.raises(AttributeError):
            cfg.method = RegressionMethod.MOVE2


class TestFromDict:
    """Command-style string parameters."""

    def test_from_dict(self) -> None:
        cfg = AnalysisConfiguration.from_dict({
            "AnalysisMethod": "MOVE2",
            "NumberOfEquations": "MonthlyEquations",
            "AnalysisMonth": "4, 5,6",
            "Transformation": "Log",
            "LEZeroLogValue": "0.01",
            "DependentAnalysisStart": "2000-01-01",
            "DependentAnalysisEnd": "2005-12-31",
        })
        assert cfg.method is RegressionMethod.MOVE2
        assert cfg.analyze_monthly and not cfg.analyze_single
        assert cfg.analysis_months == (4, 5, 6)
        assert cfg.le_zero_substitute == pytest.approx(0.01)
        assert cfg.dependent_period == (pd.Timestamp("2000-01-01"), pd.Timestamp("2005-12-31"))
        assert cfg.independent_period is None

    def test_blank_values_take_defaults(self) -> None:
        cfg = AnalysisConfiguration.from_dict({"AnalysisMethod": "", "Intercept": " "})
        assert cfg == AnalysisConfiguration()

    def test_half_period_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration.from_dict({"DependentAnalysisStart": "2000-01-01"})

    def test_infinite_month_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfiguration.from_dict({"AnalysisMonth": "3,inf"})

    def test_round_trip(self) -> None:
        cfg = AnalysisConfiguration(
            equation_scopes=["SingleEquation", "MonthlyEquations"],
            analysis_months=[1, 2],
            forced_intercept=0.0,
            dependent_period=("2000-01-01", "2001-01-01"),
        )
        assert AnalysisConfiguration.from_dict(cfg.to_dict()) == cfg


class TestCheckCriteria:
    """Validation of CheckCriteria."""

    def test_defaults(self) -> None:
        criteria = CheckCriteria()
        assert criteria.minimum_sample_size == 2
        assert criteria.minimum_correlation is None
        assert criteria.confidence_level is None

    def test_invalid_sample_size(self) -> None:
        with pytest.raises(ConfigurationError):
            CheckCriteria(minimum_sample_size=0)

    @pytest.mark.parametrize("size", [float("nan"), float("inf"), 2.5, "ten"])
    def test_non_integer_sample_size_raises(self, size) -> None:
        with pytest.raises(ConfigurationError):
            CheckCriteria(minimum_sample_size=size)

    def test_from_dict_infinite_sample_size_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            CheckCriteria.from_dict({"MinimumSampleSize": "inf"})

    def test_invalid_correlation(self) -> None:
        with pytest.raises(ConfigurationError):
            CheckCriteria(minimum_correlation=1.5)

    @pytest.mark.parametrize("level", [0.0, 100.0, 150.0])
    def test_invalid_confidence(self, level: float) -> None:
        with pytest.raises(ConfigurationError):
            CheckCriteria(confidence_level=level)

    def test_from_dict(self) -> None:
        criteria = CheckCriteria.from_dict(
            {"MinimumSampleSize": "10", "MinimumR": "0.5", "ConfidenceInterval": "95"}
        )
        assert criteria == CheckCriteria(10, 0.5, 95.0)
        assert isinstance(criteria.minimum_sample_size, int)


def test_coerce_period_none() -> None:
    assert coerce_period(None, "period") is None


def test_coerce_period_malformed() -> None:
    with pytest.raises(ConfigurationError):
        coerce_period(("2000-01-01",), "period")
