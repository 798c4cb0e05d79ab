"""
hydrofill - Regression-based filling of hydrologic time series

Includes:
- Paired / independent sample extraction from two time series
- OLS and MOVE2 relationships, single equation or twelve monthly equations
- Optional log10 transform and forced zero intercept
- Error statistics, relationship checks (sample size, R, t test on slope)
- Filling missing values of the dependent series
- Statistics tables, markdown reports and relationship plots
"""

from typing import Optional

from .config import AnalysisConfiguration, CheckCriteria
from .core import (
    ComputationError,
    ConfigurationError,
    EquationScope,
    HydrofillError,
    RegressionMethod,
    ScopedSet,
    Transformation,
)
from .regression import RegressionAnalysis
from .timeseries import PandasTimeSeries, TimeSeriesHandle


def fill_regression(
    independent: TimeSeriesHandle,
    dependent: TimeSeriesHandle,
    config: Optional[AnalysisConfiguration] = None,
    criteria: Optional[CheckCriteria] = None,
    fill_period=None,
) -> RegressionAnalysis:
    """
    Analyse *dependent* against *independent* and fill its missing values.

    Parameters
    ----------
    independent : TimeSeriesHandle
        X series.
    dependent : TimeSeriesHandle
        Y series to fill (left unchanged; see ``analysis.filled_series``).
    config : AnalysisConfiguration, optional
    criteria : CheckCriteria, optional
        Relationships failing these checks are not used for filling.
    fill_period : (start, end), optional
        Defaults to the dependent series' full period.

    Returns
    -------
    RegressionAnalysis
        The completed analysis, with ``filled_series`` and ``filled_values`` set.
    """
    analysis = RegressionAnalysis(independent, dependent, config).analyze(criteria)
    analysis.fill(fill_period)
    return analysis


__version__ = "0.1.0"
__author__ = "HydroFill"

__all__ = [
    # Core
    "RegressionMethod",
    "Transformation",
    "EquationScope",
    "ScopedSet",
    # Errors
    "HydrofillError",
    "ConfigurationError",
    "ComputationError",
    # Configuration
    "AnalysisConfiguration",
    "CheckCriteria",
    # Time series
    "TimeSeriesHandle",
    "PandasTimeSeries",
    # Analysis
    "RegressionAnalysis",
    # Convenience
    "fill_regression",
]
