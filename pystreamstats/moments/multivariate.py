"""
Vector-valued moment accumulators.

Each coordinate of a fixed-length vector keeps its own running mean, sum
of squared deviations and Kahan compensation terms; numpy applies the
scalar recurrence element-wise so every coordinate sees exactly the
arithmetic of MomentAccumulator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, TypeVar

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamstats.core.exceptions import (
    DimensionError,
    InsufficientDataError,
    ValidationError,
)
from pystreamstats.core.compute.summation import kahan_increment
from pystreamstats.core.validation import check_array, check_1d, check_2d, check_positive_int


M = TypeVar("M", bound="MultivariateAccumulator")


class MultivariateAccumulator(ABC):
    """
    Running means and variances for every coordinate of a vector stream.

    Args:
        dimension: Number of coordinates tracked. Longer input vectors are
            accepted and only their first ``dimension`` entries used.
    """

    def __init__(self, dimension: int) -> None:
        self._dim = check_positive_int(dimension, "dimension")
        self._count = 0
        self._means = np.zeros(self._dim)
        self._t = np.zeros(self._dim)
        self._means_c = np.zeros(self._dim)
        self._t_c = np.zeros(self._dim)

    @classmethod
    def from_array(cls: type[M], rows: ArrayLike) -> M:
        """Accumulator fed with every row of a 2-D array."""
        arr = check_array(rows, "rows")
        check_2d(arr, "rows")
        acc = cls(arr.shape[1])
        for row in arr:
            acc.add(row)
        return acc

    @classmethod
    def from_summary(
        cls: type[M],
        means: ArrayLike,
        variances: ArrayLike,
        count: int,
    ) -> M:
        """
        Accumulator reproducing per-coordinate summary statistics.

        Raises:
            DimensionError: If means and variances differ in length
            ValidationError: If count < 1 or any variance is negative
        """
        m = check_array(means, "means")
        v = check_array(variances, "variances")
        check_1d(m, "means")
        check_1d(v, "variances")
        if m.shape[0] != v.shape[0]:
            raise DimensionError(
                f"Inconsistent lengths: means={m.shape[0]}, variances={v.shape[0]}"
            )
        if count < 1:
            raise ValidationError(f"count: expected >= 1, got {count}")
        if np.any(v < 0):
            raise ValidationError(f"variances: expected >= 0, got {v.tolist()}")
        acc = cls(m.shape[0])
        acc._count = int(count)
        acc._means = m.astype(np.float64, copy=True)
        acc._t = cls._t_from_variances(v.astype(np.float64), int(count))
        return acc

    @classmethod
    def identity(cls, dimension: int) -> "IdentityMomentsMV":
        return IdentityMomentsMV(cls, dimension)

    @staticmethod
    @abstractmethod
    def _t_from_variances(variances: NDArray[np.floating[Any]], count: int) -> NDArray[np.floating[Any]]:
        ...

    @abstractmethod
    def _correction(self) -> float:
        ...

    def _coerce(self, values: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
        arr = check_array(values, name)
        check_1d(arr, name)
        if arr.shape[0] < self._dim:
            raise DimensionError(
                f"{name}: vector too short, length {arr.shape[0]} < dimension {self._dim}"
            )
        return arr[: self._dim]

    def add(self: M, values: ArrayLike) -> M:
        """Add one observation vector."""
        x = self._coerce(values, "values")
        old_count = self._count
        self._count += 1
        q = x - self._means
        r = q / self._count
        self._means, self._means_c = kahan_increment(self._means, self._means_c, r)
        self._t, self._t_c = kahan_increment(self._t, self._t_c, old_count * q * r)
        return self

    def extend(self: M, rows: Iterable[ArrayLike]) -> M:
        for row in rows:
            self.add(row)
        return self

    def add_all(self: M, other: "MultivariateAccumulator | IdentityMomentsMV") -> M:
        """
        Merge another vector accumulator into this one.

        Raises:
            DimensionError: If ``other`` tracks fewer coordinates
        """
        if isinstance(other, IdentityMomentsMV):
            return self
        if other._dim < self._dim:
            raise DimensionError(
                f"other: dimension {other._dim} < dimension {self._dim}"
            )
        if other._count == 0:
            return self
        d = self._dim
        if self._count == 0:
            self._count = other._count
            self._means = other._means[:d].copy()
            self._t = other._t[:d].copy()
            self._means_c = other._means_c[:d].copy()
            self._t_c = other._t_c[:d].copy()
            return self

        n1, n2 = self._count, other._count
        m1, m2 = self._means, other._means[:d]
        n = n1 + n2
        new_means = (m1 * n1 + m2 * n2) / n
        self._t = (self._t + other._t[:d]) + ((m1 * m1 * n1 + m2 * m2 * n2) - n * new_means * new_means)
        self._means = new_means
        self._count = n
        self._means_c = np.zeros(d)
        self._t_c = np.zeros(d)
        return self

    def combine(self: M, other: "MultivariateAccumulator | IdentityMomentsMV") -> M:
        return self.copy().add_all(other)

    def copy(self: M) -> M:
        acc = type(self)(self._dim)
        acc._count = self._count
        acc._means = self._means.copy()
        acc._t = self._t.copy()
        acc._means_c = self._means_c.copy()
        acc._t_c = self._t_c.copy()
        return acc

    @property
    def dimension(self) -> int:
        return self._dim

    @property
    def count(self) -> int:
        return self._count

    @property
    def means(self) -> NDArray[np.floating[Any]]:
        """Per-coordinate means (a copy)."""
        if self._count == 0:
            raise InsufficientDataError("means: no data", required=1, actual=0)
        return self._means.copy()

    @property
    def variances(self) -> NDArray[np.floating[Any]]:
        """Per-coordinate variances."""
        if self._count == 0:
            raise InsufficientDataError("variances: no data", required=1, actual=0)
        correction = self._correction()
        if correction != correction:
            raise InsufficientDataError(
                f"variances: dataset too small ({self._count} observation)",
                required=2,
                actual=self._count,
            )
        return correction * self._t / self._count

    @property
    def standard_deviations(self) -> NDArray[np.floating[Any]]:
        return np.sqrt(self.variances)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dimension={self._dim}, count={self._count})"


class PopulationMomentsMV(MultivariateAccumulator):
    """Vector accumulator reporting population variances."""

    @staticmethod
    def _t_from_variances(variances, count):
        return variances * count

    def _correction(self) -> float:
        return 1.0


class SampleMomentsMV(MultivariateAccumulator):
    """Vector accumulator reporting unbiased sample variances."""

    @staticmethod
    def _t_from_variances(variances, count):
        return ((count - 1.0) / count) * variances * count

    def _correction(self) -> float:
        if self._count < 2:
            return float("nan")
        return self._count / (self._count - 1.0)


class IdentityMomentsMV:
    """Empty neutral element for vector accumulator merges."""

    __slots__ = ("_kind", "_dim")

    def __init__(self, kind: type[MultivariateAccumulator], dimension: int) -> None:
        self._kind = kind
        self._dim = check_positive_int(dimension, "dimension")

    @property
    def dimension(self) -> int:
        return self._dim

    @property
    def count(self) -> int:
        return 0

    def add(self, values: ArrayLike) -> MultivariateAccumulator:
        return self._kind(self._dim).add(values)

    def extend(self, rows: Iterable[ArrayLike]) -> MultivariateAccumulator:
        return self._kind(self._dim).extend(rows)

    def add_all(self, other):
        if isinstance(other, IdentityMomentsMV):
            return self
        return self._kind(self._dim).add_all(other)

    combine = add_all

    def __repr__(self) -> str:
        return f"IdentityMomentsMV({self._kind.__name__}, dimension={self._dim})"
