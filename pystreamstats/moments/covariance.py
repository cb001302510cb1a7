"""
Streaming covariance-matrix accumulators.

The running matrix holds the population covariance of the data seen so
far and is updated on its lower triangle only:

    d = (x - mean_old) / count
    M[i, j] += (count - 1) * d[i] * d[j] - M[i, j] / count     (j <= i)

The upper triangle is filled in from the lower one when the matrix is
read. ``seal()`` marks construction complete: further additions fail and
the next read finishes the matrix in place, after which the same array is
returned by reference on every call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, TypeVar

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamstats.core.exceptions import (
    DimensionError,
    InsufficientDataError,
    InvalidStateError,
)
from pystreamstats.core.validation import check_array, check_1d, check_2d, check_positive_int


C = TypeVar("C", bound="CovarianceAccumulator")


class CovarianceAccumulator(ABC):
    """
    Covariance matrix of a stream of fixed-length vectors.

    Args:
        dimension: Number of coordinates per observation
    """

    def __init__(self, dimension: int) -> None:
        self._dim = check_positive_int(dimension, "dimension")
        self._count = 0
        self._means = np.zeros(self._dim)
        self._matrix = np.zeros((self._dim, self._dim))
        # Shift vector and residual means, set only by from_array
        self._shift: NDArray[np.floating[Any]] | None = None
        self._residual: NDArray[np.floating[Any]] | None = None
        self._sealed = False
        self._finished: NDArray[np.floating[Any]] | None = None
        self._lower = np.tril(np.ones((self._dim, self._dim), dtype=bool))

    @classmethod
    def from_array(cls: type[C], rows: ArrayLike) -> C:
        """
        Covariance of the rows of a 2-D array, computed eagerly.

        A first pass finds the means; the second pass runs the update on
        data shifted by those means, which keeps the deltas small.
        """
        arr = check_array(rows, "rows")
        check_2d(arr, "rows")
        acc = cls(arr.shape[1])
        if arr.shape[0] == 0:
            return acc
        shift = np.zeros(acc._dim)
        for k, row in enumerate(arr, start=1):
            shift += (row - shift) / k
        acc._means = shift.copy()
        acc._shift = shift
        acc._residual = np.zeros(acc._dim)
        for k, row in enumerate(arr):
            acc._count += 1
            delta = ((row - shift) - acc._residual) / acc._count
            acc._residual += delta
            acc._update_matrix(k, delta)
        return acc

    @abstractmethod
    def _correction(self) -> float:
        ...

    def _update_matrix(self, old_count: int, delta: NDArray[np.floating[Any]]) -> None:
        outer = old_count * np.outer(delta, delta) - self._matrix / self._count
        self._matrix += np.where(self._lower, outer, 0.0)

    def add(self: C, values: ArrayLike) -> C:
        """
        Add one observation vector.

        Raises:
            InvalidStateError: If the accumulator has been sealed
            DimensionError: If the vector is shorter than the dimension
        """
        if self._sealed:
            raise InvalidStateError("add: accumulator sealed, no further data accepted")
        x = check_array(values, "values")
        check_1d(x, "values")
        if x.shape[0] < self._dim:
            raise DimensionError(
                f"values: vector too short, length {x.shape[0]} < dimension {self._dim}"
            )
        x = x[: self._dim]
        old_count = self._count
        self._count += 1
        incr = (x - self._means) / self._count
        self._means = self._means + incr
        if self._shift is not None:
            delta = ((x - self._shift) - self._residual) / self._count
            self._residual = self._residual + delta
        else:
            delta = incr
        self._update_matrix(old_count, delta)
        return self

    def extend(self: C, rows: Iterable[ArrayLike]) -> C:
        for row in rows:
            self.add(row)
        return self

    def seal(self) -> None:
        """Mark construction complete; later additions raise InvalidStateError."""
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def dimension(self) -> int:
        return self._dim

    @property
    def count(self) -> int:
        return self._count

    @property
    def means(self) -> NDArray[np.floating[Any]]:
        """Coordinate means; the internal array once sealed, a copy before."""
        if self._count == 0:
            raise InsufficientDataError("means: no data", required=1, actual=0)
        return self._means if self._sealed else self._means.copy()

    def covariance_matrix(self) -> NDArray[np.floating[Any]]:
        """
        Symmetric covariance matrix.

        Raises:
            InsufficientDataError: With no data, or one observation for the
                sample form
        """
        if self._count == 0:
            raise InsufficientDataError("covariance: no data", required=1, actual=0)
        if self._finished is not None:
            return self._finished
        correction = self._correction()
        if correction != correction:
            raise InsufficientDataError(
                f"covariance: dataset too small ({self._count} observation)",
                required=2,
                actual=self._count,
            )
        lower = np.tril(self._matrix) * correction
        full = lower + np.tril(lower, -1).T
        if self._sealed:
            self._matrix = full
            self._finished = full
            self._shift = None
            self._residual = None
        return full

    def correlation_matrix(self) -> NDArray[np.floating[Any]]:
        """Correlation matrix, with an exact unit diagonal."""
        cov = self.covariance_matrix()
        sd = np.sqrt(np.diag(cov))
        with np.errstate(divide='ignore', invalid='ignore'):
            corr = cov / np.outer(sd, sd)
        np.fill_diagonal(corr, 1.0)
        return corr

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(dimension={self._dim}, count={self._count}, "
            f"sealed={self._sealed})"
        )


class PopulationCovariance(CovarianceAccumulator):
    """Covariance normalized by n."""

    def _correction(self) -> float:
        return 1.0


class SampleCovariance(CovarianceAccumulator):
    """Covariance normalized by n - 1."""

    def _correction(self) -> float:
        if self._count == 1:
            return float("nan")
        return self._count / (self._count - 1.0)
