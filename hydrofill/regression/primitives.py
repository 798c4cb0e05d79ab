"""
hydrofill.regression.primitives - Line fitting and significance kernels.

Thin wrappers around ``scipy.stats`` that the solver and check stages call.
Failures inside scipy/numpy are reported as :class:`ComputationError` so the
caller can attach the offending equation scope.

References
----------
Hirsch, R.M., 1982, A comparison of four streamflow record extension
techniques: Water Resources Research, v. 18, no. 4, p. 1081-1088.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import stats

from hydrofill.core import ComputationError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearFit:
    """Fitted line ``y = intercept + slope * x`` and its correlation."""

    slope: float
    intercept: float
    r: float
    n: int


@dataclass(frozen=True)
class SignificanceTest:
    """
    Outcome of the two-sided t test on a fitted slope.

    ``score`` and ``quantile`` are None when the test could not be evaluated
    (too few degrees of freedom or no standard error).
    """

    score: Optional[float]
    quantile: Optional[float]
    significant: bool


def _pearson(x: np.ndarray, y: np.ndarray) -> float:
    dx = x - x.mean()
    dy = y - y.mean()
    sxx = float(np.dot(dx, dx))
    syy = float(np.dot(dy, dy))
    if sxx == 0.0 or syy == 0.0:
        return 0.0
    return float(np.dot(dx, dy)) / math.sqrt(sxx * syy)


def fit_ols(x, y, force_zero_intercept: bool = False, month: Optional[int] = None) -> LinearFit:
    """
    Ordinary least squares fit of *y* on *x*.

    Parameters
    ----------
    x, y : array-like
        Paired samples of equal length (at least 2).
    force_zero_intercept : bool
        Fit ``y = slope * x`` through the origin.
    month : int, optional
        Scope reported in a raised :class:`ComputationError`.

    Raises
    ------
    ComputationError
        If the samples are degenerate (e.g. zero variance in x).
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(x) != len(y):
        raise ComputationError(f"x and y lengths differ ({len(x)} vs {len(y)})", month)
    if len(x) < 2:
        raise ComputationError(f"at least 2 points are needed to fit a line (got {len(x)})", month)
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise ComputationError("sample contains non-finite values", month)

    if force_zero_intercept:
        sxx = float(np.dot(x, x))
        if sxx == 0.0:
            raise ComputationError("all x values are zero, cannot fit through the origin", month)
        slope = float(np.dot(x, y)) / sxx
        return LinearFit(slope=slope, intercept=0.0, r=_pearson(x, y), n=len(x))

    try:
        result = stats.linregress(x, y)
    except ValueError as exc:
        raise ComputationError(str(exc), month) from exc
    slope, intercept = float(result.slope), float(result.intercept)
    if not (math.isfinite(slope) and math.isfinite(intercept)):
        raise ComputationError("regression produced non-finite coefficients", month)
    r = float(result.rvalue)
    if not math.isfinite(r):
        r = 0.0
    return LinearFit(slope=slope, intercept=intercept, r=r, n=len(x))


def move2_adjust(
    fit: LinearFit,
    x1,
    y1,
    x_full,
    x_extension,
    month: Optional[int] = None,
) -> LinearFit:
    """
    Adjust an OLS fit with the MOVE.2 record-extension method.

    The mean and variance of Y are extended using the X values that have no
    concurrent Y (*x_extension*), then the line is rescaled so that its
    slope preserves that variance over the full X sample::

        Ybar = Y1mean + n2 * b * (X2mean - X1mean) / (n1 + n2)
        Sy^2 = 1/(n1+n2-1) * [(n1-1) Sy1^2 + (n2-1) b^2 Sx2^2
               + n2 (n1-4)(n1-1)(1-r^2) Sy1^2 / ((n1-3)(n1-2))
               + n1 n2 / (n1+n2) b^2 (X2mean - X1mean)^2]
        slope = sign(r) * Sy / Sx_full,  intercept = Ybar - slope * Xmean_full

    with ``b = r * Sy1 / Sx1`` and ``n2``, ``X2`` the extension sample.

    Parameters
    ----------
    fit : LinearFit
        OLS fit of *y1* on *x1* (only its correlation is used).
    x1, y1 : array-like
        Paired sample, at least 4 points when *x_extension* is non-empty.
    x_full : array-like
        All X values over the independent analysis period (at least 2).
    x_extension : array-like
        X values without a concurrent Y value.

    Raises
    ------
    ComputationError
        If the samples cannot support the adjustment.
    """
    x1 = np.asarray(x1, dtype=float)
    y1 = np.asarray(y1, dtype=float)
    x_full = np.asarray(x_full, dtype=float)
    x_ext = np.asarray(x_extension, dtype=float)
    n1, n2 = len(x1), len(x_ext)
    if len(x_full) < 2:
        raise ComputationError(f"MOVE2 needs at least 2 independent values (got {len(x_full)})", month)
    if n2 > 0 and n1 < 4:
        raise ComputationError(f"MOVE2 needs at least 4 paired values (got {n1})", month)

    r = fit.r
    sx1 = float(np.std(x1, ddof=1))
    sy1 = float(np.std(y1, ddof=1))
    if sx1 == 0.0:
        raise ComputationError("zero variance in paired X sample", month)
    b = r * sy1 / sx1
    mean_x1, mean_y1 = float(x1.mean()), float(y1.mean())

    if n2 > 0:
        mean_x2 = float(x_ext.mean())
        sx2 = float(np.std(x_ext, ddof=1)) if n2 > 1 else 0.0
        sy_sq = (1.0 / (n1 + n2 - 1.0)) * (
            (n1 - 1.0) * sy1 * sy1
            + (n2 - 1.0) * b * b * sx2 * sx2
            + n2 * (n1 - 4.0) * (n1 - 1.0) * (1.0 - r * r) * sy1 * sy1 / ((n1 - 3.0) * (n1 - 2.0))
            + n1 * n2 / (n1 + n2) * b * b * (mean_x2 - mean_x1) ** 2
        )
        y_bar = mean_y1 + n2 * b * (mean_x2 - mean_x1) / (n1 + n2)
    else:
        sy_sq = sy1 * sy1
        y_bar = mean_y1

    sx_full = float(np.std(x_full, ddof=1))
    if sx_full == 0.0:
        raise ComputationError("zero variance in independent X sample", month)
    if sy_sq < 0.0 or not math.isfinite(sy_sq):
        raise ComputationError(f"MOVE2 variance estimate is invalid ({sy_sq})", month)

    slope = math.copysign(math.sqrt(sy_sq) / sx_full, r) if r != 0.0 else math.sqrt(sy_sq) / sx_full
    intercept = y_bar - slope * float(x_full.mean())
    log.debug("MOVE2 n1=%d n2=%d r=%.4f Ybar=%.6g Sy^2=%.6g", n1, n2, r, y_bar, sy_sq)
    return LinearFit(slope=slope, intercept=intercept, r=r, n=n1)


def slope_significance(
    slope: float,
    se_slope: Optional[float],
    n: int,
    confidence_level: float,
    force_zero_intercept: bool = False,
) -> SignificanceTest:
    """
    Two-sided Student t test that the slope differs from zero.

    ``score = |slope| / se_slope`` is compared with
    ``t.ppf(1 - alpha/2, dof)`` where ``alpha = 1 - confidence_level/100``
    and ``dof = n - 2`` (``n - 1`` when the intercept is forced to zero).

    Parameters
    ----------
    slope : float
    se_slope : float or None
        Standard error of the slope.
    n : int
        Number of paired points used in the fit.
    confidence_level : float
        Percent, e.g. 95.
    force_zero_intercept : bool
    """
    dof = n - 1 if force_zero_intercept else n - 2
    alpha = 1.0 - confidence_level / 100.0
    if dof < 1 or se_slope is None or not math.isfinite(se_slope) or se_slope < 0.0:
        return SignificanceTest(score=None, quantile=None, significant=False)
    quantile = float(stats.t.ppf(1.0 - alpha / 2.0, dof))
    if se_slope == 0.0:
        score = math.inf if slope != 0.0 else 0.0
    else:
        score = abs(slope) / se_slope
    return SignificanceTest(score=score, quantile=quantile, significant=score >= quantile)
