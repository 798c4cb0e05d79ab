"""
hydrofill.regression.estimate_errors - Residual statistics of fitted relationships.

Each relationship is re-applied to its own paired X values and compared to
the observed Y.  Statistics are in transformed units, except
``rmse_original`` which compares the inverted estimates to the raw Y values.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from hydrofill import transforms
from hydrofill.core import ScopedSet, scope_label
from hydrofill.regression.data_set import RegressionDataSet
from hydrofill.regression.solver import RegressionRelationship, RegressionResultSet

log = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ErrorRecord:
    """
    Estimation errors for one scope.

    Attributes
    ----------
    y1_estimated : np.ndarray
        ``intercept + slope * x1`` in transformed units (read-only).
    mean_bias : float
        Mean of ``y1 - y1_estimated``.
    rmse : float
        Root mean squared error, transformed units.
    rmse_original : float
        Root mean squared error of the inverted estimates, data units.
    see : float or None
        Standard error of estimate ``sqrt(SSE / (n1 - k))`` with ``k = 2``
        (1 when the intercept is forced).  None when ``n1 <= k``.
    se_slope : float or None
        Standard error of the slope.
    """

    month: Optional[int]
    n1: int
    y1_estimated: Optional[np.ndarray] = None
    mean_y1_estimated: Optional[float] = None
    std_y1_estimated: Optional[float] = None
    mean_bias: Optional[float] = None
    rmse: Optional[float] = None
    rmse_original: Optional[float] = None
    see: Optional[float] = None
    se_slope: Optional[float] = None
    t_score: Optional[float] = None
    reason: Optional[str] = None

    @property
    def is_defined(self) -> bool:
        return self.rmse is not None

    @property
    def scope_label(self) -> str:
        return scope_label(self.month)


@dataclass(frozen=True, eq=False)
class RegressionErrorSet(ScopedSet[ErrorRecord]):
    """Error records for the single equation and/or each month."""


class ErrorEstimator:
    """Compute residual statistics for fitted relationships."""

    def estimate_errors(self, x1, y1, relationship: RegressionRelationship) -> ErrorRecord:
        """
        Apply *relationship* to *x1* and compare with *y1*.

        Parameters
        ----------
        x1, y1 : array-like
            Paired sample in data units (as stored in the data set).
        relationship : RegressionRelationship
            Fitted line for the same scope.

        Returns
        -------
        ErrorRecord
            Undefined (``is_defined == False``) when the relationship is.
        """
        x1 = np.asarray(x1, dtype=float)
        y1 = np.asarray(y1, dtype=float)
        n1 = len(x1)
        if not relationship.is_defined:
            return ErrorRecord(month=relationship.month, n1=n1, reason=relationship.reason)

        transform, le_zero = relationship.transform, relationship.le_zero_substitute
        x1_t = transforms.apply(x1, transform, le_zero)
        y1_t = transforms.apply(y1, transform, le_zero)
        y_est = relationship.estimate_transformed(x1_t)
        y_est.setflags(write=False)
        residuals = y1_t - y_est
        sse = float(np.dot(residuals, residuals))

        rmse = math.sqrt(sse / n1)
        original_residuals = y1 - transforms.invert(y_est, transform)
        rmse_original = math.sqrt(float(np.dot(original_residuals, original_residuals)) / n1)

        forced = relationship.forced_intercept is not None
        k = 1 if forced else 2
        see = math.sqrt(sse / (n1 - k)) if n1 > k else None

        se_slope = None
        t_score = None
        if see is not None:
            sxx = float(np.dot(x1_t, x1_t)) if forced else float(np.sum((x1_t - x1_t.mean()) ** 2))
            if sxx > 0.0:
                se_slope = see / math.sqrt(sxx)
                if se_slope > 0.0:
                    t_score = relationship.slope / se_slope

        record = ErrorRecord(
            month=relationship.month,
            n1=n1,
            y1_estimated=y_est,
            mean_y1_estimated=float(np.mean(y_est)),
            std_y1_estimated=float(np.std(y_est, ddof=1)) if n1 > 1 else None,
            mean_bias=float(np.mean(residuals)),
            rmse=rmse,
            rmse_original=rmse_original,
            see=see,
            se_slope=se_slope,
            t_score=t_score,
        )
        log.debug("%s: RMSE=%.6g SEE=%s", record.scope_label, rmse, see)
        return record

    def estimate_result_set(
        self,
        data_set: RegressionDataSet,
        result_set: RegressionResultSet,
    ) -> RegressionErrorSet:
        """Error records for every scope in *result_set*."""
        single = None
        if result_set.has_single:
            sample = data_set.single_equation()
            single = self.estimate_errors(sample.x1, sample.y1, result_set.single_equation())
        monthly = ()
        if result_set.has_monthly:
            monthly = tuple(
                self.estimate_errors(
                    data_set.monthly_equation(m).x1,
                    data_set.monthly_equation(m).y1,
                    rel,
                )
                for m, rel in result_set.items()
                if m is not None
            )
        errors = RegressionErrorSet(single=single, monthly=monthly)
        log.info("Estimated errors for %d relationships", sum(1 for _, e in errors.items() if e.is_defined))
        return errors
