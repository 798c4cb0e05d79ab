"""
hydrofill.regression.analysis - Driver for a regression analysis between two series.

:class:`RegressionAnalysis` validates its inputs, resolves the analysis
periods and extracts the samples on construction.  The later stages are
separate calls that each store and return a new immutable result object:

    extract  ->  calculate_relationships  ->  estimate_errors
                                          ->  check_relationships  ->  fill

:meth:`RegressionAnalysis.analyze` runs the fitting, error and check stages
in order.  A driver is bound to one configuration; analysing with different
options means constructing a new driver.

Examples
--------
>>> analysis = RegressionAnalysis(x_ts, y_ts, AnalysisConfiguration(method="MOVE2"))
>>> analysis.analyze(CheckCriteria(minimum_correlation=0.7))
>>> analysis.result_set.single_equation().slope
>>> filled = analysis.fill()
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from hydrofill.config import AnalysisConfiguration, CheckCriteria, Period
from hydrofill.core import ConfigurationError, RegressionMethod
from hydrofill.regression.checks import CheckEvaluator, RegressionCheckSet
from hydrofill.regression.data_set import RegressionDataSet
from hydrofill.regression.estimate_errors import ErrorEstimator, RegressionErrorSet
from hydrofill.regression.extractor import SampleExtractor
from hydrofill.regression.filling import FillApplier, RegressionFilledValues
from hydrofill.regression.solver import RegressionResultSet, RelationshipSolver
from hydrofill.timeseries import PandasTimeSeries, TimeSeriesHandle

log = logging.getLogger(__name__)


def _series_period(series: TimeSeriesHandle) -> Optional[Period]:
    start, end = series.period()
    if start is None or end is None:
        return None
    return start, end


class RegressionAnalysis:
    """
    Regression of a dependent series Y on an independent series X.

    Parameters
    ----------
    independent : TimeSeriesHandle
        X series.
    dependent : TimeSeriesHandle
        Y series, the one to be estimated.
    config : AnalysisConfiguration, optional
        Defaults to ``AnalysisConfiguration()`` (OLS, single equation).

    Raises
    ------
    ConfigurationError
        If a series is None or the periods are inconsistent with the method.

    Attributes
    ----------
    data_set : RegressionDataSet
        Extracted samples, available immediately.
    result_set, error_set, check_set, filled_values : optional
        Set by the corresponding stage; None until it has run.
    """

    def __init__(
        self,
        independent: TimeSeriesHandle,
        dependent: TimeSeriesHandle,
        config: Optional[AnalysisConfiguration] = None,
    ) -> None:
        if independent is None:
            raise ConfigurationError("Independent time series is null.")
        if dependent is None:
            raise ConfigurationError("Dependent time series is null.")
        self.independent = independent
        self.dependent = dependent
        self.config = config if config is not None else AnalysisConfiguration()

        self.dependent_period, self.independent_period = self._resolve_periods()

        self.result_set: Optional[RegressionResultSet] = None
        self.error_set: Optional[RegressionErrorSet] = None
        self.check_set: Optional[RegressionCheckSet] = None
        self.filled_values: Optional[RegressionFilledValues] = None
        self.filled_series: Optional[PandasTimeSeries] = None

        self.data_set: RegressionDataSet = SampleExtractor().build_data_set(
            independent,
            dependent,
            self.dependent_period,
            self.independent_period,
            month_filter=self.config.analysis_months,
            single=self.config.analyze_single,
            monthly=self.config.analyze_monthly,
        )

    def _resolve_periods(self) -> Tuple[Optional[Period], Optional[Period]]:
        cfg = self.config
        dependent_period = cfg.dependent_period or _series_period(self.dependent)
        if cfg.method == RegressionMethod.OLS:
            if cfg.independent_period is not None and cfg.independent_period != dependent_period:
                raise ConfigurationError(
                    "For OLS the independent analysis period must equal the dependent analysis period."
                )
            independent_period = dependent_period
        else:
            independent_period = cfg.independent_period or _series_period(self.independent)
        log.debug("Analysis periods: dependent=%s independent=%s", dependent_period, independent_period)
        return dependent_period, independent_period

    def __repr__(self) -> str:
        return (
            f"RegressionAnalysis({getattr(self.dependent, 'name', 'Y')!r} on "
            f"{getattr(self.independent, 'name', 'X')!r}, {self.config.method.name})"
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def calculate_relationships(self) -> RegressionResultSet:
        """
        Fit the relationships for every analysed scope.

        Raises
        ------
        ComputationError
            If a fit fails; the error names the scope.
        """
        cfg = self.config
        solver = RelationshipSolver(
            method=cfg.method,
            transform=cfg.transform,
            le_zero_substitute=cfg.le_zero_substitute,
            forced_intercept=cfg.forced_intercept,
        )
        self.result_set = solver.solve_data_set(
            self.data_set, single=cfg.analyze_single, monthly=cfg.analyze_monthly
        )
        # Downstream results belong to the previous fit
        self.error_set = self.check_set = None
        self.filled_values = self.filled_series = None
        return self.result_set

    def estimate_errors(self) -> RegressionErrorSet:
        """Residual statistics; fits the relationships first if needed."""
        if self.result_set is None:
            self.calculate_relationships()
        self.error_set = ErrorEstimator().estimate_result_set(self.data_set, self.result_set)
        return self.error_set

    def check_relationships(self, criteria: Optional[CheckCriteria] = None) -> RegressionCheckSet:
        """Evaluate *criteria* (default ``CheckCriteria()``) for every relationship."""
        if self.result_set is None:
            self.calculate_relationships()
        criteria = criteria or CheckCriteria()
        if self.error_set is None and criteria.confidence_level is not None:
            self.estimate_errors()
        self.check_set = CheckEvaluator().evaluate(self.data_set, self.result_set, criteria, self.error_set)
        return self.check_set

    def analyze(self, criteria: Optional[CheckCriteria] = None) -> "RegressionAnalysis":
        """Fit, estimate errors and check, in that order.  Returns self."""
        self.calculate_relationships()
        self.estimate_errors()
        self.check_relationships(criteria)
        return self

    def fill(self, fill_period: Optional[Period] = None) -> PandasTimeSeries:
        """
        Fill missing dependent values and return the filled copy.

        Monthly equations are used when they were analysed, otherwise the
        single equation.  When :meth:`check_relationships` has run, only
        relationships that pass are used.  The dependent series is unchanged.
        """
        if self.result_set is None:
            self.calculate_relationships()
        applier = FillApplier(
            use_monthly=self.config.analyze_monthly,
            month_filter=self.config.analysis_months,
        )
        self.filled_values, self.filled_series = applier.fill(
            self.independent,
            self.dependent,
            self.result_set,
            check_set=self.check_set,
            fill_period=fill_period,
        )
        return self.filled_series

    # ------------------------------------------------------------------
    # Masks
    # ------------------------------------------------------------------

    def _checks(self) -> RegressionCheckSet:
        return self.check_set if self.check_set is not None else self.check_relationships()

    def checks_mask_single(self) -> bool:
        """True when the single equation was analysed and passes its checks."""
        checks = self._checks()
        return checks.has_single and checks.single_equation().passed

    def checks_mask_monthly(self) -> Tuple[bool, ...]:
        """Twelve booleans: month is analysed and its relationship passes its checks."""
        checks = self._checks()
        if not checks.has_monthly:
            return (False,) * 12
        return tuple(
            analysed and record.passed
            for analysed, record in zip(self.config.analysis_months_mask, checks.monthly)
        )
