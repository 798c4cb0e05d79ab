"""
hydrofill.config - Analysis configuration and relationship check criteria.

Both objects are frozen dataclasses validated on construction; an invalid
combination of options raises :class:`~hydrofill.core.ConfigurationError`
immediately rather than surfacing later in the analysis.

The ``from_dict`` helpers accept the flat string parameters used by the
FillRegression-style commands, for example::

    AnalysisConfiguration.from_dict({
        "AnalysisMethod": "MOVE2",
        "NumberOfEquations": "MonthlyEquations",
        "AnalysisMonth": "4,5,6,7,8,9",
        "Transformation": "Log",
        "LEZeroLogValue": "0.001",
    })
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple, Union

import pandas as pd

from hydrofill.core import (
    DEFAULT_LE_ZERO_SUBSTITUTE,
    DEFAULT_MINIMUM_SAMPLE_SIZE,
    ConfigurationError,
    EquationScope,
    RegressionMethod,
    Transformation,
)

Period = Tuple[pd.Timestamp, pd.Timestamp]
PeriodLike = Union[Tuple[object, object], None]


def coerce_period(period: PeriodLike, name: str) -> Optional[Period]:
    """
    Convert a ``(start, end)`` pair of date-likes to Timestamps.

    Raises
    ------
    ConfigurationError
        If the pair is malformed or ``start`` is after ``end``.
    """
    if period is None:
        return None
    try:
        start, end = period
        start, end = pd.Timestamp(start), pd.Timestamp(end)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a (start, end) pair of dates: {exc}") from exc
    if start > end:
        raise ConfigurationError(f"{name} start ({start}) is after end ({end})")
    return start, end


def _parse_months(raw: object) -> Tuple[int, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.split(",") if p.strip()]
    else:
        try:
            parts = list(raw)
        except TypeError:
            raise ConfigurationError(f"Analysis months must be a sequence of integers, got {raw!r}.")
    months = []
    for p in parts:
        try:
            value = float(p)
            month = int(value)
        except (TypeError, ValueError, OverflowError):
            raise ConfigurationError(f"Analysis month ({p!r}) is not an integer.")
        if value != month:
            raise ConfigurationError(f"Analysis month ({p!r}) is not an integer.")
        months.append(month)
    return tuple(months)


def _optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Expected a number, got {raw!r}")


@dataclass(frozen=True)
class AnalysisConfiguration:
    """
    Options controlling a regression analysis between two time series.

    Parameters
    ----------
    method : RegressionMethod or str
        ``OLS`` (default) or ``MOVE2``.
    equation_scopes : iterable of EquationScope or str
        Which equations to analyse; at least one of ``SINGLE`` / ``MONTHLY``.
    analysis_months : iterable of int
        Months (1-12) included in the analysis.  Empty means all months.
    transform : Transformation or str
        ``NONE`` (default) or ``LOG10``.
    le_zero_substitute : float
        Positive value substituted for values <= 0 before a LOG10
        transform.  Default 0.001.
    forced_intercept : float, optional
        If given must be exactly 0.0, and is only allowed with OLS.
    dependent_period : (start, end), optional
        Analysis period for Y.  Defaults to the Y series' full period.
    independent_period : (start, end), optional
        Analysis period for X.  For OLS it must equal the dependent period
        (and defaults to it); for MOVE2 it defaults to the X series' period.
    """

    method: RegressionMethod = RegressionMethod.OLS
    equation_scopes: FrozenSet[EquationScope] = frozenset({EquationScope.SINGLE})
    analysis_months: Tuple[int, ...] = ()
    transform: Transformation = Transformation.NONE
    le_zero_substitute: Optional[float] = DEFAULT_LE_ZERO_SUBSTITUTE
    forced_intercept: Optional[float] = None
    dependent_period: Optional[Period] = None
    independent_period: Optional[Period] = None

    def _set(self, name: str, value: object) -> None:
        object.__setattr__(self, name, value)

    def __post_init__(self) -> None:
        # Normalise loosely-typed inputs before validating
        set_ = self._set
        set_("method", RegressionMethod.coerce(self.method))
        set_("transform", Transformation.coerce(self.transform))
        scopes = self.equation_scopes
        if isinstance(scopes, (str, EquationScope)):
            scopes = (scopes,)
        set_("equation_scopes", frozenset(EquationScope.coerce(s) for s in scopes))
        set_("analysis_months", tuple(sorted(set(_parse_months(self.analysis_months)))))
        if self.le_zero_substitute is None:
            set_("le_zero_substitute", DEFAULT_LE_ZERO_SUBSTITUTE)
        set_("dependent_period", coerce_period(self.dependent_period, "dependent_period"))
        set_("independent_period", coerce_period(self.independent_period, "independent_period"))

        if not self.equation_scopes:
            raise ConfigurationError("At least one of single or monthly equations must be analyzed.")
        for month in self.analysis_months:
            if not 1 <= month <= 12:
                raise ConfigurationError(f"Analysis month ({month}) is not in range 1-12.")
        if not self.le_zero_substitute > 0:
            raise ConfigurationError(
                f"Value substituted for <= 0 before log transform must be > 0 "
                f"(got {self.le_zero_substitute})."
            )
        if self.forced_intercept is not None:
            if self.forced_intercept != 0.0:
                raise ConfigurationError(
                    f"Intercept ({self.forced_intercept}) can only be specified as zero."
                )
            if self.method != RegressionMethod.OLS:
                raise ConfigurationError(
                    f"Intercept can only be forced with OLS regression (method is {self.method.name})."
                )
            set_("forced_intercept", 0.0)
        if (
            self.method == RegressionMethod.OLS
            and self.independent_period is not None
            and self.dependent_period is not None
            and self.independent_period != self.dependent_period
        ):
            raise ConfigurationError(
                "For OLS the independent analysis period must equal the dependent analysis period."
            )

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def analyze_single(self) -> bool:
        return EquationScope.SINGLE in self.equation_scopes

    @property
    def analyze_monthly(self) -> bool:
        return EquationScope.MONTHLY in self.equation_scopes

    @property
    def analysis_months_mask(self) -> Tuple[bool, ...]:
        """Twelve booleans, January first, True where the month is analysed."""
        if not self.analysis_months:
            return (True,) * 12
        return tuple(m in self.analysis_months for m in range(1, 13))

    @property
    def effective_forced_intercept(self) -> Optional[float]:
        """Forced intercept as applied to the fit (dropped for LOG10 data)."""
        if self.transform == Transformation.LOG10:
            return None
        return self.forced_intercept

    # ------------------------------------------------------------------
    # I/O helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, row: Dict[str, str]) -> "AnalysisConfiguration":
        """
        Construct from command-style string parameters.

        Recognised keys: ``AnalysisMethod``, ``NumberOfEquations``,
        ``AnalysisMonth``, ``Transformation``, ``LEZeroLogValue``,
        ``Intercept``, ``DependentAnalysisStart``, ``DependentAnalysisEnd``,
        ``IndependentAnalysisStart``, ``IndependentAnalysisEnd``.
        Missing or blank values take the defaults.
        """
        def get(key: str) -> Optional[str]:
            return (row.get(key) or "").strip() or None

        scopes_raw = get("NumberOfEquations") or "SingleEquation"
        scopes = [s for s in scopes_raw.split(",") if s.strip()]

        def period(prefix: str) -> PeriodLike:
            start, end = get(prefix + "AnalysisStart"), get(prefix + "AnalysisEnd")
            if start is None and end is None:
                return None
            if start is None or end is None:
                raise ConfigurationError(f"{prefix}AnalysisStart and {prefix}AnalysisEnd must both be set")
            return start, end

        return cls(
            method=get("AnalysisMethod") or RegressionMethod.OLS,
            equation_scopes=scopes,
            analysis_months=_parse_months(get("AnalysisMonth")),
            transform=get("Transformation"),
            le_zero_substitute=_optional_float(get("LEZeroLogValue")),
            forced_intercept=_optional_float(get("Intercept")),
            dependent_period=period("Dependent"),
            independent_period=period("Independent"),
        )

    def to_dict(self) -> Dict[str, str]:
        """Serialise to command-style string parameters (inverse of :meth:`from_dict`)."""
        scope_names = {EquationScope.SINGLE: "SingleEquation", EquationScope.MONTHLY: "MonthlyEquations"}
        d = {
            "AnalysisMethod": self.method.name,
            "NumberOfEquations": ",".join(
                scope_names[s] for s in (EquationScope.SINGLE, EquationScope.MONTHLY) if s in self.equation_scopes
            ),
            "AnalysisMonth": ",".join(str(m) for m in self.analysis_months),
            "Transformation": "Log" if self.transform == Transformation.LOG10 else "None",
            "LEZeroLogValue": repr(self.le_zero_substitute),
            "Intercept": "" if self.forced_intercept is None else repr(self.forced_intercept),
        }
        for prefix, period in (("Dependent", self.dependent_period), ("Independent", self.independent_period)):
            d[prefix + "AnalysisStart"] = "" if period is None else period[0].isoformat()
            d[prefix + "AnalysisEnd"] = "" if period is None else period[1].isoformat()
        return d


@dataclass(frozen=True)
class CheckCriteria:
    """
    Criteria a fitted relationship must meet to be considered valid.

    Parameters
    ----------
    minimum_sample_size : int
        Minimum number of paired (N1) values.  Default 2, which avoids
        division by zero in downstream statistics.
    minimum_correlation : float, optional
        Minimum correlation coefficient R.  Not checked when None.
    confidence_level : float, optional
        Confidence level in percent (e.g. 95) for the t test on the slope.
        Not checked when None.
    """

    minimum_sample_size: int = DEFAULT_MINIMUM_SAMPLE_SIZE
    minimum_correlation: Optional[float] = None
    confidence_level: Optional[float] = None

    def __post_init__(self) -> None:
        if self.minimum_sample_size is None:
            object.__setattr__(self, "minimum_sample_size", DEFAULT_MINIMUM_SAMPLE_SIZE)
        try:
            size = int(self.minimum_sample_size)
        except (TypeError, ValueError, OverflowError):
            size = None
        if size is None or size != self.minimum_sample_size or size < 1:
            raise ConfigurationError(
                f"Minimum sample size ({self.minimum_sample_size}) is invalid - must be >= 1"
            )
        object.__setattr__(self, "minimum_sample_size", size)
        if self.minimum_correlation is not None and not -1.0 <= self.minimum_correlation <= 1.0:
            raise ConfigurationError(
                f"Minimum R ({self.minimum_correlation}) must be in range [-1, 1]"
            )
        if self.confidence_level is not None and not 0.0 < self.confidence_level < 100.0:
            raise ConfigurationError(
                f"Confidence level ({self.confidence_level}) must be a percent in (0, 100)"
            )

    @classmethod
    def from_dict(cls, row: Dict[str, str]) -> "CheckCriteria":
        """Construct from ``MinimumSampleSize``, ``MinimumR`` and ``ConfidenceInterval`` strings."""
        size = _optional_float(row.get("MinimumSampleSize"))
        return cls(
            minimum_sample_size=DEFAULT_MINIMUM_SAMPLE_SIZE if size is None else size,
            minimum_correlation=_optional_float(row.get("MinimumR")),
            confidence_level=_optional_float(row.get("ConfidenceInterval")),
        )
