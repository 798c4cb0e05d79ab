"""
hydrofill.regression - Regression-based estimation of missing time-series values.

Core classes
------------
:class:`RegressionAnalysis`
    Driver: validates the configuration, resolves the analysis periods,
    extracts samples and runs the fitting, error, check and fill stages.

:class:`SampleExtractor`
    Builds paired (x1, y1) and unpaired (x2, x3, y3) samples per scope.

:class:`RelationshipSolver`
    Fits OLS or MOVE2 relationships, with optional LOG10 transform and a
    forced zero intercept.

:class:`ErrorEstimator`, :class:`CheckEvaluator`, :class:`FillApplier`
    Residual statistics, pass/fail checks and filling.

Result containers
-----------------
:class:`RegressionDataSet`, :class:`RegressionResultSet`,
:class:`RegressionErrorSet`, :class:`RegressionCheckSet`,
:class:`RegressionFilledValues` - immutable, each holding an optional
single-equation record and zero or twelve monthly records, accessed with
``single_equation()`` and ``monthly_equation(month)``.

Typical usage
-------------
::

    from hydrofill import AnalysisConfiguration, CheckCriteria, PandasTimeSeries
    from hydrofill.regression import RegressionAnalysis

    x = PandasTimeSeries(upstream_flows, name="03604000")
    y = PandasTimeSeries(downstream_flows, name="03606500")
    config = AnalysisConfiguration(
        method="MOVE2", equation_scopes=["MonthlyEquations"], transform="Log10",
    )
    analysis = RegressionAnalysis(x, y, config).analyze(CheckCriteria(minimum_correlation=0.7))
    for month, rel in analysis.result_set.items():
        print(rel)
    filled = analysis.fill()
"""

from hydrofill.regression.analysis import RegressionAnalysis
from hydrofill.regression.checks import CheckEvaluator, CheckRecord, RegressionCheckSet
from hydrofill.regression.data_set import RegressionDataSet, RegressionSample, SampleStats
from hydrofill.regression.estimate_errors import ErrorEstimator, ErrorRecord, RegressionErrorSet
from hydrofill.regression.extractor import SampleExtractor
from hydrofill.regression.filling import FillApplier, FilledRecord, RegressionFilledValues
from hydrofill.regression.solver import (
    RegressionRelationship,
    RegressionResultSet,
    RelationshipSolver,
)

__all__ = [
    # Driver
    "RegressionAnalysis",
    # Stages
    "SampleExtractor",
    "RelationshipSolver",
    "ErrorEstimator",
    "CheckEvaluator",
    "FillApplier",
    # Records and containers
    "RegressionSample",
    "SampleStats",
    "RegressionDataSet",
    "RegressionRelationship",
    "RegressionResultSet",
    "ErrorRecord",
    "RegressionErrorSet",
    "CheckRecord",
    "RegressionCheckSet",
    "FilledRecord",
    "RegressionFilledValues",
]
