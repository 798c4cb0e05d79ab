"""Tests for hydrofill.core."""

from __future__ import annotations

import pytest

from hydrofill.core import (
    ComputationError,
    HydrofillError,
    ScopedSet,
    check_month,
    scope_label,
)


class TestScopedSet:
    def test_single_and_monthly(self) -> None:
        scoped = ScopedSet(single="all", monthly=[f"m{m}" for m in range(1, 13)])
        assert scoped.single_equation() == "all"
        assert scoped.monthly_equation(1) == "m1"
        assert scoped.monthly_equation(12) == "m12"
        assert scoped.get(None) == "all"
        assert scoped.get(6) == "m6"
        assert len(scoped) == 13
        assert [m for m, _ in scoped.items()] == [None] + list(range(1, 13))

    def test_monthly_count_validated(self) -> None:
        with pytest.raises(ValueError):
            ScopedSet(monthly=["a", "b"])

    def test_missing_scopes_raise_key_error(self) -> None:
        scoped = ScopedSet()
        with pytest.raises(KeyError):
            scoped.single_equation()
        with pytest.raises(KeyError):
            scoped.monthly_equation(3)

    @pytest.mark.parametrize("month", [0, 13, 2.5, True])
    def test_invalid_month(self, month) -> None:
        scoped = ScopedSet(monthly=list(range(12)))
        with pytest.raises(ValueError):
            scoped.monthly_equation(month)


def test_check_month() -> None:
    assert check_month(7) == 7
    with pytest.raises(ValueError):
        check_month(-1)


def test_scope_label() -> None:
    assert scope_label(None) == "single equation"
    assert scope_label(4) == "month 4 (Apr)"


def test_computation_error_carries_scope() -> None:
    err = ComputationError("zero variance", month=11)
    assert isinstance(err, HydrofillError)
    assert isinstance(err, ArithmeticError)
    assert err.month == 11
    assert err.scope_label == "month 11 (Nov)"
    assert str(err) == "month 11 (Nov): zero variance"
