"""
hydrofill.regression.checks - Pass/fail criteria for fitted relationships.

Each scope is judged on three criteria; a criterion that is not specified
always passes:

* sample size: ``n1 >= minimum_sample_size``
* correlation: ``r >= minimum_correlation``
* confidence:  two-sided t test of the slope against zero at
  ``confidence_level`` percent
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from hydrofill.config import CheckCriteria
from hydrofill.core import ScopedSet, scope_label
from hydrofill.regression.data_set import RegressionDataSet
from hydrofill.regression.estimate_errors import ErrorEstimator, ErrorRecord, RegressionErrorSet
from hydrofill.regression.primitives import slope_significance
from hydrofill.regression.solver import RegressionRelationship, RegressionResultSet

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckRecord:
    """
    Check outcome for one scope, with the values that were tested.

    Attributes
    ----------
    test_score, test_quantile : float or None
        ``|b| / SE(b)`` and the t quantile it is compared with; None when
        no confidence level was requested or the test could not be made.
    """

    month: Optional[int]
    criteria: CheckCriteria
    n1: int
    r: Optional[float]
    sample_size_ok: bool
    correlation_ok: bool
    confidence_ok: bool
    test_score: Optional[float] = None
    test_quantile: Optional[float] = None

    @property
    def passed(self) -> bool:
        return self.sample_size_ok and self.correlation_ok and self.confidence_ok

    @property
    def scope_label(self) -> str:
        return scope_label(self.month)

    def invalid_reason(self) -> str:
        """Comma-separated description of the failed criteria ("" when passed)."""
        reasons = []
        if not self.sample_size_ok:
            reasons.append(f"sample size ({self.n1}) < {self.criteria.minimum_sample_size}")
        if not self.correlation_ok:
            r = "undefined" if self.r is None else f"{self.r:.4g}"
            reasons.append(f"R ({r}) < {self.criteria.minimum_correlation}")
        if not self.confidence_ok:
            reasons.append(f"CI ({self.criteria.confidence_level:g}%) not met")
        return ", ".join(reasons)


@dataclass(frozen=True, eq=False)
class RegressionCheckSet(ScopedSet[CheckRecord]):
    """Check records for the single equation and/or each month."""

    criteria: CheckCriteria = CheckCriteria()

    @property
    def n_passed(self) -> int:
        return sum(1 for _, c in self.items() if c.passed)


class CheckEvaluator:
    """Evaluate :class:`CheckCriteria` against fitted relationships."""

    def check(
        self,
        relationship: RegressionRelationship,
        errors: Optional[ErrorRecord],
        criteria: CheckCriteria,
    ) -> CheckRecord:
        """
        Check one relationship.

        Parameters
        ----------
        relationship : RegressionRelationship
        errors : ErrorRecord or None
            Needed only when ``criteria.confidence_level`` is set.
        criteria : CheckCriteria
        """
        n1 = relationship.n1
        r = relationship.r
        sample_size_ok = n1 >= criteria.minimum_sample_size

        correlation_ok = True
        if criteria.minimum_correlation is not None:
            correlation_ok = r is not None and r >= criteria.minimum_correlation

        confidence_ok = True
        score = quantile = None
        if criteria.confidence_level is not None:
            if relationship.is_defined and errors is not None and errors.is_defined:
                test = slope_significance(
                    relationship.slope,
                    errors.se_slope,
                    n1,
                    criteria.confidence_level,
                    force_zero_intercept=relationship.forced_intercept is not None,
                )
                score, quantile, confidence_ok = test.score, test.quantile, test.significant
            else:
                confidence_ok = False

        record = CheckRecord(
            month=relationship.month,
            criteria=criteria,
            n1=n1,
            r=r,
            sample_size_ok=sample_size_ok,
            correlation_ok=correlation_ok,
            confidence_ok=confidence_ok,
            test_score=score,
            test_quantile=quantile,
        )
        if not record.passed:
            log.debug("%s fails checks: %s", record.scope_label, record.invalid_reason())
        return record

    def evaluate(
        self,
        data_set: RegressionDataSet,
        result_set: RegressionResultSet,
        criteria: Optional[CheckCriteria] = None,
        error_set: Optional[RegressionErrorSet] = None,
    ) -> RegressionCheckSet:
        """
        Check every scope in *result_set*.

        Error statistics needed for the confidence test are computed from
        *data_set* when *error_set* is not supplied.
        """
        criteria = criteria or CheckCriteria()
        if error_set is None and criteria.confidence_level is not None:
            error_set = ErrorEstimator().estimate_result_set(data_set, result_set)

        def errors_for(month):
            return None if error_set is None else error_set.get(month)

        single = None
        if result_set.has_single:
            single = self.check(result_set.single_equation(), errors_for(None), criteria)
        monthly = tuple(
            self.check(rel, errors_for(m), criteria) for m, rel in result_set.items() if m is not None
        )
        checks = RegressionCheckSet(single=single, monthly=monthly, criteria=criteria)
        log.info("%d of %d relationships pass checks", checks.n_passed, len(checks))
        return checks
