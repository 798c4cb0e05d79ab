"""
hydrofill.regression.solver - Fit the Y-on-X relationship for each equation scope.

:class:`RelationshipSolver` applies the configured transform, calls the OLS
or MOVE2 kernel from :mod:`hydrofill.regression.primitives`, and returns an
immutable :class:`RegressionRelationship` per scope, collected in a
:class:`RegressionResultSet`.

A scope with fewer than two paired points is not an error: its record is
present with ``is_defined == False`` and a ``reason``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from hydrofill import transforms
from hydrofill.core import (
    DEFAULT_LE_ZERO_SUBSTITUTE,
    ConfigurationError,
    RegressionMethod,
    ScopedSet,
    Transformation,
    scope_label,
)
from hydrofill.regression.data_set import RegressionDataSet, SampleStats
from hydrofill.regression.primitives import fit_ols, move2_adjust

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionRelationship:
    """
    Fitted relationship ``Y = intercept + slope * X`` for one scope.

    Coefficients and sample statistics are in transformed units (log10 when
    ``transform`` is LOG10).  When ``is_defined`` is False every numeric
    field except the counts is None.

    Attributes
    ----------
    month : int or None
        Scope (None = single equation).
    n1 : int
        Paired sample size.
    n2 : int
        Independent sample size (all non-missing X over the independent period).
    n_extension : int
        X values without a paired Y (used by MOVE2).
    reason : str or None
        Why the relationship is undefined.
    """

    month: Optional[int]
    method: RegressionMethod
    transform: Transformation
    n1: int
    n2: int
    n_extension: int = 0
    le_zero_substitute: float = DEFAULT_LE_ZERO_SUBSTITUTE
    forced_intercept: Optional[float] = None
    slope: Optional[float] = None
    intercept: Optional[float] = None
    r: Optional[float] = None
    x1_stats: SampleStats = field(default_factory=lambda: SampleStats(n=0))
    y1_stats: SampleStats = field(default_factory=lambda: SampleStats(n=0))
    x2_stats: SampleStats = field(default_factory=lambda: SampleStats(n=0))
    y3_stats: SampleStats = field(default_factory=lambda: SampleStats(n=0))
    reason: Optional[str] = None

    @property
    def is_defined(self) -> bool:
        return self.slope is not None

    @property
    def r_squared(self) -> Optional[float]:
        return None if self.r is None else self.r * self.r

    @property
    def scope_label(self) -> str:
        return scope_label(self.month)

    def estimate_transformed(self, x_transformed) -> np.ndarray:
        """Apply the line to already-transformed X values."""
        if not self.is_defined:
            raise ValueError(f"Relationship for {self.scope_label} is undefined: {self.reason}")
        return self.intercept + self.slope * np.asarray(x_transformed, dtype=float)

    def estimate(self, x) -> np.ndarray:
        """Estimate Y in data units from X in data units."""
        x_t = transforms.apply(x, self.transform, self.le_zero_substitute)
        return transforms.invert(self.estimate_transformed(x_t), self.transform)

    def __str__(self) -> str:
        if not self.is_defined:
            return f"{self.scope_label}: undefined ({self.reason})"
        return (
            f"{self.scope_label}: Y = {self.intercept:.6g} + {self.slope:.6g} X "
            f"(R={self.r:.4f}, N1={self.n1}, N2={self.n2})"
        )


@dataclass(frozen=True, eq=False)
class RegressionResultSet(ScopedSet[RegressionRelationship]):
    """Fitted relationships for the single equation and/or each month."""

    method: RegressionMethod = RegressionMethod.OLS
    transform: Transformation = Transformation.NONE

    @property
    def n_defined(self) -> int:
        return sum(1 for _, rel in self.items() if rel.is_defined)


class RelationshipSolver:
    """
    Fit relationships with a fixed method, transform and intercept rule.

    Parameters
    ----------
    method : RegressionMethod
    transform : Transformation
    le_zero_substitute : float
        Replaces values <= 0 before a LOG10 transform.
    forced_intercept : float, optional
        0.0 to fit through the origin (OLS only).  Ignored for LOG10 data.
    """

    def __init__(
        self,
        method: RegressionMethod = RegressionMethod.OLS,
        transform: Transformation = Transformation.NONE,
        le_zero_substitute: float = DEFAULT_LE_ZERO_SUBSTITUTE,
        forced_intercept: Optional[float] = None,
    ) -> None:
        self.method = RegressionMethod.coerce(method)
        self.transform = Transformation.coerce(transform)
        self.le_zero_substitute = le_zero_substitute
        if forced_intercept is not None and self.method != RegressionMethod.OLS:
            raise ConfigurationError("Intercept can only be forced with OLS regression")
        if forced_intercept is not None and self.transform == Transformation.LOG10:
            log.warning("Forced intercept is ignored for log-transformed data")
            forced_intercept = None
        self.forced_intercept = forced_intercept

    def _transform(self, values) -> np.ndarray:
        if values is None:
            return np.empty(0, dtype=float)
        return transforms.apply(values, self.transform, self.le_zero_substitute)

    def solve(
        self,
        x1,
        y1,
        x2,
        x_extension=None,
        y3=None,
        month: Optional[int] = None,
    ) -> RegressionRelationship:
        """
        Fit one scope.

        Parameters
        ----------
        x1, y1 : array-like
            Paired sample in data units.
        x2 : array-like
            Independent sample in data units.
        x_extension : array-like, optional
            X values with no paired Y (MOVE2 only).
        y3 : array-like, optional
            All Y values over the dependent period, for summary statistics.
        month : int, optional
            Scope, for records and error messages.

        Raises
        ------
        ComputationError
            If the fitting kernel fails on a defined sample.
        """
        x1_t, y1_t = self._transform(x1), self._transform(y1)
        x2_t, x3_t = self._transform(x2), self._transform(x_extension)
        common = dict(
            month=month,
            method=self.method,
            transform=self.transform,
            n1=len(x1_t),
            n2=len(x2_t),
            n_extension=len(x3_t),
            le_zero_substitute=self.le_zero_substitute,
            forced_intercept=self.forced_intercept,
            x1_stats=SampleStats.of(x1_t),
            y1_stats=SampleStats.of(y1_t),
            x2_stats=SampleStats.of(x2_t),
            y3_stats=SampleStats.of(self._transform(y3)),
        )

        reason = self._undefined_reason(len(x1_t), len(x2_t), len(x3_t))
        if reason is not None:
            log.debug("%s undefined: %s", scope_label(month), reason)
            return RegressionRelationship(reason=reason, **common)

        fit = fit_ols(x1_t, y1_t, force_zero_intercept=self.forced_intercept is not None, month=month)
        if self.method == RegressionMethod.MOVE2:
            fit = move2_adjust(fit, x1_t, y1_t, x2_t, x3_t, month=month)
        log.debug("%s: a=%.6g b=%.6g r=%.4f", scope_label(month), fit.intercept, fit.slope, fit.r)
        return RegressionRelationship(slope=fit.slope, intercept=fit.intercept, r=fit.r, **common)

    def _undefined_reason(self, n1: int, n2: int, n_extension: int) -> Optional[str]:
        if n1 < 2:
            return f"fewer than 2 paired values (N1={n1})"
        if self.method == RegressionMethod.MOVE2:
            if n2 < 2:
                return f"fewer than 2 independent values (N2={n2})"
            if n_extension > 0 and n1 < 4:
                return f"MOVE2 needs at least 4 paired values (N1={n1})"
        return None

    def solve_data_set(
        self,
        data_set: RegressionDataSet,
        single: bool = True,
        monthly: bool = True,
    ) -> RegressionResultSet:
        """
        Fit every analysed scope of *data_set*.

        Raises
        ------
        ComputationError
            Naming the first scope whose fit failed.
        """
        def solve_sample(sample):
            return self.solve(sample.x1, sample.y1, sample.x2, sample.x3, sample.y3, month=sample.month)

        single_rel = solve_sample(data_set.single) if single and data_set.has_single else None
        monthly_rel = ()
        if monthly and data_set.has_monthly:
            monthly_rel = tuple(solve_sample(s) for s in data_set.monthly)
        result = RegressionResultSet(
            single=single_rel,
            monthly=monthly_rel,
            method=self.method,
            transform=self.transform,
        )
        log.info("Fitted %d of %d relationships (%s)", result.n_defined, len(result), self.method.name)
        return result
