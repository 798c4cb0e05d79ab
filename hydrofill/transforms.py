"""
hydrofill.transforms - Data transformations applied before fitting.

``LOG10`` replaces every value <= 0 with a positive substitute and takes the
base-10 logarithm; :func:`invert` maps fitted values back with ``10**y`` so
that ``invert(apply(v)) == v`` for any positive ``v``.
"""

from __future__ import annotations

import numpy as np

from hydrofill.core import DEFAULT_LE_ZERO_SUBSTITUTE, Transformation


def apply(
    values,
    transform: Transformation,
    le_zero_substitute: float = DEFAULT_LE_ZERO_SUBSTITUTE,
) -> np.ndarray:
    """
    Transform an array of values.

    Parameters
    ----------
    values : array-like
        Raw data values (no missing values).
    transform : Transformation
        ``NONE`` returns a float copy of *values*.
    le_zero_substitute : float
        Value used in place of any value <= 0 before taking ``log10``.

    Returns
    -------
    np.ndarray
    """
    arr = np.asarray(values, dtype=float).copy()
    if transform == Transformation.LOG10:
        arr[arr <= 0.0] = le_zero_substitute
        return np.log10(arr)
    return arr


def invert(values, transform: Transformation) -> np.ndarray:
    """Map transformed values back to data units."""
    arr = np.asarray(values, dtype=float)
    if transform == Transformation.LOG10:
        return np.power(10.0, arr)
    return arr.copy()
