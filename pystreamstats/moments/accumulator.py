"""
Single-pass scalar moment accumulators.

Implements West's weighted incremental update for the mean and the sum of
squared deviations T, with Kahan compensation on both running sums, plus
the algebraic merge that makes accumulators a commutative monoid: two
accumulators built on disjoint streams combine into one equal (to
rounding) to an accumulator built on the union.

    variance = correction(n) * T / n

where correction is 1 for PopulationMoments and n / (n - 1) for
SampleMoments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, TypeVar

import numpy as np
from numpy.typing import ArrayLike

from pystreamstats.core.exceptions import InsufficientDataError, ValidationError
from pystreamstats.core.compute.summation import kahan_increment
from pystreamstats.core.validation import check_array, check_1d


A = TypeVar("A", bound="MomentAccumulator")


class MomentAccumulator(ABC):
    """
    Running count, mean and sum of squared deviations for a scalar stream.

    Subclasses choose the variance correction. ``add`` and ``add_all``
    mutate in place and return ``self`` so calls can be chained; ``combine``
    returns a fresh accumulator and leaves both inputs untouched.
    """

    def __init__(self) -> None:
        self._count = 0
        self._mean = 0.0
        self._t = 0.0
        self._mean_c = 0.0
        self._t_c = 0.0
        self._cached_count = -1
        self._cached_variance = 0.0

    # ====================================================================
    # Construction
    # ====================================================================

    @classmethod
    def from_array(cls: type[A], values: ArrayLike) -> A:
        """Accumulator containing every element of a 1-D array."""
        arr = check_array(values, "values")
        check_1d(arr, "values")
        return cls().extend(arr)

    @classmethod
    def from_summary(cls: type[A], mean: float, variance: float, count: int) -> A:
        """
        Accumulator reproducing pre-aggregated summary statistics.

        Args:
            mean: Mean of the data
            variance: Variance of the data, in this accumulator's convention
            count: Number of observations

        Raises:
            ValidationError: If count < 1 or variance < 0
        """
        if count < 1:
            raise ValidationError(f"count: expected >= 1, got {count}")
        if variance < 0:
            raise ValidationError(f"variance: expected >= 0, got {variance}")
        acc = cls()
        acc._count = int(count)
        acc._mean = float(mean)
        acc._t = cls._t_from_variance(float(variance), int(count))
        return acc

    @classmethod
    def identity(cls) -> "IdentityMoments":
        """Neutral element for add/add_all/combine of this kind."""
        return IdentityMoments(cls)

    @staticmethod
    @abstractmethod
    def _t_from_variance(variance: float, count: int) -> float:
        """Sum of squared deviations implied by ``variance`` over ``count`` points."""

    @abstractmethod
    def _correction(self) -> float:
        """Multiplier applied to T / n; NaN when undefined."""

    # ====================================================================
    # Updates
    # ====================================================================

    def add(self: A, value: float) -> A:
        """Add one observation."""
        old_count = self._count
        self._count += 1
        q = value - self._mean
        r = q / self._count
        self._mean, self._mean_c = kahan_increment(self._mean, self._mean_c, r)
        self._t, self._t_c = kahan_increment(self._t, self._t_c, old_count * q * r)
        return self

    def extend(self: A, values: Iterable[float]) -> A:
        """Add every observation of an iterable."""
        for value in values:
            self.add(float(value))
        return self

    def add_all(self: A, other: "MomentAccumulator | IdentityMoments") -> A:
        """
        Merge another accumulator into this one.

        Compensation terms are reset afterwards: the merge is an exact
        algebraic identity rather than a running sum.
        """
        if isinstance(other, IdentityMoments) or other._count == 0:
            return self
        if self._count == 0:
            self._count = other._count
            self._mean = other._mean
            self._t = other._t
            self._mean_c = other._mean_c
            self._t_c = other._t_c
            return self

        n1, n2 = self._count, other._count
        m1, m2 = self._mean, other._mean
        n = n1 + n2
        new_mean = (m1 * n1 + m2 * n2) / n
        self._t = (self._t + other._t) + ((m1 * m1 * n1 + m2 * m2 * n2) - n * new_mean * new_mean)
        self._mean = new_mean
        self._count = n
        self._mean_c = 0.0
        self._t_c = 0.0
        return self

    def combine(self: A, other: "MomentAccumulator | IdentityMoments") -> A:
        """Fresh accumulator equal to ``self`` merged with ``other``."""
        return self.copy().add_all(other)

    def copy(self: A) -> A:
        """Independent accumulator with the same state."""
        acc = type(self)()
        acc._count = self._count
        acc._mean = self._mean
        acc._t = self._t
        acc._mean_c = self._mean_c
        acc._t_c = self._t_c
        return acc

    # ====================================================================
    # Queries
    # ====================================================================

    @property
    def count(self) -> int:
        """Number of observations."""
        return self._count

    @property
    def size(self) -> int:
        return self._count

    @property
    def is_empty(self) -> bool:
        return self._count == 0

    @property
    def mean(self) -> float:
        """
        Running mean.

        Raises:
            InsufficientDataError: If no data has been added
        """
        if self._count == 0:
            raise InsufficientDataError("mean: no data", required=1, actual=0)
        return self._mean

    @property
    def sum_of_squares(self) -> float:
        """Sum of squared deviations from the mean (T)."""
        return self._t

    @property
    def variance(self) -> float:
        """
        Variance, cached until the count changes.

        Raises:
            InsufficientDataError: If there is no data, or for the sample
                variance with a single observation
        """
        if self._count == 0:
            raise InsufficientDataError("variance: no data", required=1, actual=0)
        if self._cached_count == self._count:
            return self._cached_variance
        correction = self._correction()
        if correction != correction:
            raise InsufficientDataError(
                f"variance: dataset too small ({self._count} observation)",
                required=2,
                actual=self._count,
            )
        self._cached_variance = correction * self._t / self._count
        self._cached_count = self._count
        return self._cached_variance

    @property
    def standard_deviation(self) -> float:
        return float(np.sqrt(self.variance))

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        if self._count == 0:
            return f"{type(self).__name__}(count=0)"
        return f"{type(self).__name__}(count={self._count}, mean={self._mean:.6g})"


class PopulationMoments(MomentAccumulator):
    """Accumulator whose variance is the population variance T / n."""

    @staticmethod
    def _t_from_variance(variance: float, count: int) -> float:
        return variance * count

    def _correction(self) -> float:
        return 1.0


class SampleMoments(MomentAccumulator):
    """Accumulator whose variance is the unbiased sample variance T / (n - 1)."""

    @staticmethod
    def _t_from_variance(variance: float, count: int) -> float:
        return ((count - 1.0) / count) * variance * count

    def _correction(self) -> float:
        if self._count < 2:
            return float("nan")
        return self._count / (self._count - 1.0)


class IdentityMoments:
    """
    Empty neutral element for accumulator merges.

    It never stores data: the first add/extend/add_all/combine allocates a
    new accumulator of the wrapped kind and returns it. Use it as the
    initial value of a reduction and always rebind the result::

        acc = SampleMoments.identity()
        for part in parts:
            acc = acc.add_all(part)
    """

    __slots__ = ("_kind",)

    def __init__(self, kind: type[MomentAccumulator]) -> None:
        self._kind = kind

    @property
    def kind(self) -> type[MomentAccumulator]:
        return self._kind

    @property
    def count(self) -> int:
        return 0

    @property
    def is_empty(self) -> bool:
        return True

    def add(self, value: float) -> MomentAccumulator:
        return self._kind().add(value)

    def extend(self, values: Iterable[float]) -> MomentAccumulator:
        return self._kind().extend(values)

    def add_all(self, other: "MomentAccumulator | IdentityMoments") -> "MomentAccumulator | IdentityMoments":
        if isinstance(other, IdentityMoments):
            return self
        if type(other) is self._kind:
            return other.copy()
        return self._kind().add_all(other)

    combine = add_all

    @property
    def mean(self) -> float:
        raise InsufficientDataError("mean: no data", required=1, actual=0)

    @property
    def variance(self) -> float:
        raise InsufficientDataError("variance: no data", required=1, actual=0)

    def __len__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"IdentityMoments({self._kind.__name__})"
