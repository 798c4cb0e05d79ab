"""
hydrofill.core - Core enumerations, exceptions and the scoped result container
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Iterator, Optional, Tuple, TypeVar, Union

MONTHS: Tuple[int, ...] = tuple(range(1, 13))
MONTH_LABELS: Tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

DEFAULT_LE_ZERO_SUBSTITUTE = 0.001
DEFAULT_MINIMUM_SAMPLE_SIZE = 2


class RegressionMethod(Enum):
    """Method used to fit the relationship between X and Y."""

    OLS = auto()  # Ordinary least squares
    MOVE2 = auto()  # Maintenance of variance extension, type 2

    @classmethod
    def coerce(cls, value: Union[str, "RegressionMethod"]) -> "RegressionMethod":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("_REGRESSION", "")
        if key in ("OLS", "ORDINARY_LEAST_SQUARES", "ORDINARYLEASTSQUARES"):
            return cls.OLS
        if key == "MOVE2":
            return cls.MOVE2
        raise ConfigurationError(f"Unknown regression method {value!r} (expected OLS or MOVE2)")


class Transformation(Enum):
    """Data transformation applied before fitting."""

    NONE = auto()
    LOG10 = auto()

    @classmethod
    def coerce(cls, value: Union[str, None, "Transformation"]) -> "Transformation":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        key = str(value).strip().upper()
        if key in ("", "NONE"):
            return cls.NONE
        if key in ("LOG", "LOG10"):
            return cls.LOG10
        raise ConfigurationError(f"Unknown transformation {value!r} (expected None or Log10)")


class EquationScope(Enum):
    """Which equations are analysed: one for the whole period and/or one per month."""

    SINGLE = auto()
    MONTHLY = auto()

    @classmethod
    def coerce(cls, value: Union[str, "EquationScope"]) -> "EquationScope":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("_", "")
        if key in ("SINGLE", "SINGLEEQUATION", "ONEEQUATION"):
            return cls.SINGLE
        if key in ("MONTHLY", "MONTHLYEQUATIONS"):
            return cls.MONTHLY
        raise ConfigurationError(
            f"Unknown equation scope {value!r} (expected SingleEquation or MonthlyEquations)"
        )


# =============================================================================
# EXCEPTIONS
# =============================================================================


class HydrofillError(Exception):
    """Base class for errors raised by hydrofill."""


class ConfigurationError(HydrofillError, ValueError):
    """Raised when an analysis is constructed with invalid inputs or options."""


def scope_label(month: Optional[int]) -> str:
    """Human-readable name for a scope (``None`` is the single equation)."""
    if month is None:
        return "single equation"
    return f"month {month} ({MONTH_LABELS[month - 1]})"


class ComputationError(HydrofillError, ArithmeticError):
    """Raised when a relationship cannot be computed for a scope.

    Parameters
    ----------
    message : str
        Description of the failure.
    month : int or None
        Month 1-12 of the failing equation, or None for the single equation.
    """

    def __init__(self, message: str, month: Optional[int] = None) -> None:
        self.month = month
        super().__init__(f"{scope_label(month)}: {message}")

    @property
    def scope_label(self) -> str:
        return scope_label(self.month)


def check_month(month: int) -> int:
    """Return *month* if it is an integer in 1-12, else raise ``ValueError``."""
    if isinstance(month, bool) or int(month) != month or not 1 <= month <= 12:
        raise ValueError(f"Month ({month}) is not in range 1-12.")
    return int(month)


# =============================================================================
# SCOPED CONTAINER
# =============================================================================

T = TypeVar("T")


@dataclass(frozen=True)
class ScopedSet(Generic[T]):
    """
    Immutable single + monthly record container shared by the analysis stages.

    ``single`` is None when the single equation was not analysed and
    ``monthly`` is empty when monthly equations were not analysed; otherwise
    ``monthly`` holds exactly 12 records, January first.
    """

    single: Optional[T] = None
    monthly: Tuple[T, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "monthly", tuple(self.monthly))
        if len(self.monthly) not in (0, 12):
            raise ValueError(f"Monthly records must number 0 or 12, got {len(self.monthly)}")

    @property
    def has_single(self) -> bool:
        return self.single is not None

    @property
    def has_monthly(self) -> bool:
        return len(self.monthly) == 12

    def single_equation(self) -> T:
        """Return the single-equation record."""
        if self.single is None:
            raise KeyError("Single equation was not analyzed")
        return self.single

    def monthly_equation(self, month: int) -> T:
        """Return the record for *month* (1 = January)."""
        month = check_month(month)
        if not self.has_monthly:
            raise KeyError("Monthly equations were not analyzed")
        return self.monthly[month - 1]

    def get(self, month: Optional[int]) -> T:
        """Return the record for a scope, ``None`` meaning the single equation."""
        if month is None:
            return self.single_equation()
        return self.monthly_equation(month)

    def items(self) -> Iterator[Tuple[Optional[int], T]]:
        """Iterate ``(month, record)`` pairs, single equation (month None) first."""
        if self.single is not None:
            yield None, self.single
        for i, record in enumerate(self.monthly):
            yield i + 1, record

    def __len__(self) -> int:
        return int(self.single is not None) + len(self.monthly)
