"""
Pearson chi-square statistic.

    X^2 = sum_i (d_i - e_i)^2 / sigma_i^2

with sigma_i^2 = |e_i| unless standard errors are supplied. Terms are
summed with Kahan compensation. A statistic built from a contingency
table is frozen: its expected counts come from the marginal totals, so
further terms or constraint changes would make it meaningless.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamstats.core.compute.summation import KahanSum
from pystreamstats.core.exceptions import (
    InsufficientDataError,
    InvalidStateError,
    ValidationError,
)
from pystreamstats.core.validation import (
    check_array,
    check_1d,
    check_2d,
    check_consistent_length,
    check_finite,
)
from pystreamstats.distributions.chi_square import ChiSquareDistribution
from pystreamstats.hypothesis.base import Statistic


def _broadcast(value: ArrayLike, n: int, name: str) -> NDArray[np.floating[Any]]:
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim == 0:
        arr = np.full(n, float(arr))
    check_1d(arr, name)
    check_finite(arr, name)
    return arr


class ChiSquareStatistic(Statistic):
    """
    Chi-square goodness-of-fit statistic.

    Args:
        observed: Optional observed values
        expected: Expected values, one per observation or a single shared
            value (required when ``observed`` is given)
        sigma: Optional standard error, per observation or shared; when
            omitted the variance of each term is taken as |expected|

    Examples:
        >>> stat = ChiSquareStatistic([18, 22, 20], 20.0)
        >>> stat.degrees_of_freedom
        3
    """

    statistic_name = "X-squared"
    method = "Chi-squared test for given probabilities"

    def __init__(
        self,
        observed: ArrayLike | None = None,
        expected: ArrayLike | None = None,
        sigma: ArrayLike | None = None,
    ):
        super().__init__()
        self._sum = KahanSum()
        self._n = 0
        self._constraints = 0
        self._frozen = False
        self._sigmas: NDArray[np.floating[Any]] | None = None

        if observed is None:
            if expected is not None or sigma is not None:
                raise ValidationError("observed: required when expected or sigma is given")
            return
        if expected is None:
            raise ValidationError("expected: required when observed is given")

        d = check_array(observed, "observed")
        check_1d(d, "observed")
        check_finite(d, "observed")
        n = d.shape[0]
        e = _broadcast(expected, n, "expected")
        check_consistent_length(d, e, names=("observed", "expected"))
        if sigma is None:
            if np.any(e == 0.0):
                raise ValidationError("expected: zero expected value with no sigma")
            sigmas = np.sqrt(np.abs(e))
        else:
            sigmas = _broadcast(sigma, n, "sigma")
            check_consistent_length(d, sigmas, names=("observed", "sigma"))
            if np.any(sigmas <= 0.0):
                raise ValidationError("sigma: expected values > 0")

        for di, ei, si in zip(d, e, sigmas):
            r = (di - ei) / si
            self._sum.add(r * r)
        self._n = n
        self._sigmas = sigmas.copy()
        self.data_name = "observed and expected"

    @classmethod
    def from_summary(cls, chisq: float, n: int, constraints: int = 0) -> "ChiSquareStatistic":
        """
        Statistic from a precomputed chi-square value over ``n`` terms.

        Raises:
            ValidationError: If chisq < 0, n < 0 or constraints < 0
        """
        if chisq < 0:
            raise ValidationError(f"chisq: expected >= 0, got {chisq}")
        if n < 0:
            raise ValidationError(f"n: expected >= 0, got {n}")
        stat = cls()
        stat._sum.reset(chisq)
        stat._n = int(n)
        stat.set_constraints(constraints)
        stat.data_name = "summary statistics"
        return stat

    @classmethod
    def contingency(cls, table: ArrayLike) -> "ChiSquareStatistic":
        """
        Pearson's test of independence for an r x c contingency table.

        Expected counts are row_total * column_total / total; degrees of
        freedom are (r - 1)(c - 1). The returned statistic is frozen.

        Raises:
            DimensionError: If table is not 2-D
            ValidationError: If any count is negative or a marginal total is 0
        """
        counts = check_array(table, "table")
        check_2d(counts, "table")
        check_finite(counts, "table")
        if np.any(counts < 0):
            raise ValidationError("table: counts must be non-negative")
        rows, cols = counts.shape
        if rows < 2 or cols < 2:
            raise ValidationError(f"table: need at least 2 rows and 2 columns, got {rows}x{cols}")

        row_totals = counts.sum(axis=1)
        col_totals = counts.sum(axis=0)
        total = float(row_totals.sum())
        if np.any(row_totals == 0) or np.any(col_totals == 0):
            raise ValidationError("table: every row and column needs a non-zero total")

        expected = np.outer(row_totals, col_totals) / total
        stat = cls()
        for observed, e in zip(counts.ravel(), expected.ravel()):
            diff = observed - e
            stat._sum.add(diff * diff / e)
        stat._n = rows * cols
        stat.set_degrees_of_freedom((rows - 1) * (cols - 1))
        stat._frozen = True
        stat.method = "Pearson's Chi-squared test"
        stat.data_name = f"{rows}x{cols} table"
        return stat

    # ====================================================================
    # Mutation
    # ====================================================================

    def _check_not_frozen(self, operation: str) -> None:
        if self._frozen:
            raise InvalidStateError(f"{operation}: statistic is frozen")

    def add(self, observed: float, expected: float, sigma: float | None = None) -> None:
        """
        Add one term.

        Per-term standard errors are no longer retained afterwards, so
        ``noncentrality`` becomes unavailable.

        Raises:
            InvalidStateError: If the statistic is frozen
        """
        self._check_not_frozen("add")
        if sigma is None:
            if expected == 0.0:
                raise ValidationError("expected: zero expected value with no sigma")
            variance = abs(expected)
        else:
            if not sigma > 0:
                raise ValidationError(f"sigma: expected value > 0, got {sigma}")
            variance = sigma * sigma
        diff = observed - expected
        self._sum.add(diff * diff / variance)
        self._n += 1
        self._sigmas = None

    def set_constraints(self, constraints: int) -> None:
        """
        Set the number of constraints subtracted from the term count.

        Raises:
            ValidationError: If constraints < 0
            InvalidStateError: If the statistic is frozen
        """
        self._check_not_frozen("set_constraints")
        if constraints < 0:
            raise ValidationError(f"constraints: expected >= 0, got {constraints}")
        self._constraints = int(constraints)

    def set_degrees_of_freedom(self, dof: int) -> None:
        """
        Set the degrees of freedom directly (constraints = size - dof).

        Raises:
            ValidationError: If dof < 1 or dof > size
            InvalidStateError: If the statistic is frozen
        """
        if dof < 1:
            raise ValidationError(f"dof: expected >= 1, got {dof}")
        if dof > self._n:
            raise ValidationError(f"dof: {dof} exceeds the number of terms {self._n}")
        self._check_not_frozen("set_degrees_of_freedom")
        self._constraints = self._n - int(dof)

    def freeze(self) -> None:
        """Disallow further mutation."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # ====================================================================
    # Queries
    # ====================================================================

    @property
    def size(self) -> int:
        """Number of terms."""
        return self._n

    @property
    def constraints(self) -> int:
        return self._constraints

    @property
    def degrees_of_freedom(self) -> int:
        dof = self._n - self._constraints
        if dof < 0:
            raise InsufficientDataError(
                f"chi-square: {self._constraints} constraints exceed {self._n} terms",
                required=self._constraints,
                actual=self._n,
            )
        return dof

    @property
    def value(self) -> float:
        if self._n <= 0:
            raise InsufficientDataError("chi-square: no data", required=1, actual=0)
        return self._sum.total

    def distribution(self, noncentrality: float | None = None) -> ChiSquareDistribution:
        dof = self._n - self._constraints
        if dof <= 0:
            raise InsufficientDataError(
                f"chi-square: no degrees of freedom left after {self._constraints} constraints",
                required=self._constraints + 1,
                actual=self._n,
            )
        if noncentrality is not None and noncentrality < 0:
            raise ValidationError(
                f"noncentrality: expected value >= 0, got {noncentrality}"
            )
        if not noncentrality:
            return ChiSquareDistribution(dof)
        return ChiSquareDistribution(dof, noncentrality)

    def noncentrality(self, *effects: float) -> float:
        """
        Noncentrality from shifts of the expected values.

        A single effect shifts every expected value by the same amount;
        otherwise one effect per term is required. Each shift is divided
        by that term's standard error and the squares are summed.

        Raises:
            InvalidStateError: If per-term standard errors are not known
                (summary or contingency construction, or after ``add``)
            ValidationError: If the number of effects does not match
        """
        if self._sigmas is None:
            raise InvalidStateError(
                "noncentrality: per-term standard errors are not available"
            )
        if len(effects) == 0:
            raise ValidationError("effects: at least one effect size is required")
        if len(effects) == 1:
            shifts = np.full(self._n, float(effects[0]))
        elif len(effects) == self._n:
            shifts = np.asarray(effects, dtype=np.float64)
        else:
            raise ValidationError(
                f"effects: expected 1 or {self._n} effect sizes, got {len(effects)}"
            )
        acc = KahanSum()
        for r in shifts / self._sigmas:
            acc.add(r * r)
        return acc.total

    def _parameter(self) -> dict[str, float]:
        return {"df": float(self.degrees_of_freedom)}

    def _extras(self) -> dict[str, Any]:
        return {"terms": self._n, "constraints": self._constraints, "frozen": self._frozen}

    def __repr__(self) -> str:
        value = self._sum.total if self._n > 0 else math.nan
        return (
            f"ChiSquareStatistic(value={value:g}, terms={self._n}, "
            f"constraints={self._constraints}, frozen={self._frozen})"
        )
