"""
Student's t statistics.

    TwoSampleTStatistic         pooled-variance difference of two means
    OneSampleTStatistic         mean against a hypothesized value
    PairedDifferenceTStatistic  mean of paired differences
    SlopeTStatistic             least-squares slope against a hypothesized value

Each can be built from raw data, from pre-aggregated summary statistics,
or empty and fed incrementally. The null distribution is Student's t and
the alternative a noncentral t whose noncentrality is the effect size in
standard-error units.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from pystreamstats.core.exceptions import InsufficientDataError, ValidationError
from pystreamstats.core.validation import (
    check_array,
    check_1d,
    check_consistent_length,
    check_finite,
    check_min_samples,
)
from pystreamstats.distributions.students_t import StudentsTDistribution
from pystreamstats.hypothesis.base import Statistic
from pystreamstats.moments.accumulator import PopulationMoments, SampleMoments


def _as_vector(data: ArrayLike, name: str):
    arr = check_array(data, name)
    check_1d(arr, name)
    check_finite(arr, name)
    return arr


class StudentsTStatistic(Statistic):
    """Statistic whose null distribution is Student's t."""

    statistic_name = "t"

    def distribution(self, noncentrality: float | None = None) -> StudentsTDistribution:
        dof = self.degrees_of_freedom
        if dof < 1:
            raise InsufficientDataError(
                f"{type(self).__name__}: degrees of freedom {dof} < 1",
                required=1,
                actual=dof,
            )
        return StudentsTDistribution(dof, noncentrality)

    def _ratio(self, numerator: float, denominator: float) -> float:
        if denominator == 0.0:
            self._warn("data are essentially constant")
            return math.nan
        return numerator / denominator


def _single_effect(effects: tuple[float, ...]) -> float:
    if len(effects) != 1:
        raise ValidationError(f"effects: expected one effect size, got {len(effects)}")
    return float(effects[0])


# ========================================================================
# Two independent samples, pooled variance
# ========================================================================


class TwoSampleTStatistic(StudentsTStatistic):
    """
    Pooled two-sample t statistic.

        t = (mean1 - mean2) / (s_p sqrt(1/n1 + 1/n2))
        s_p^2 = (T1 + T2) / (n1 + n2 - 2)

    where T is each sample's sum of squared deviations.

    Args:
        x: Optional first sample
        y: Optional second sample
    """

    method = " Two Sample t-test"

    def __init__(self, x: ArrayLike | None = None, y: ArrayLike | None = None):
        super().__init__()
        self._s1 = SampleMoments()
        self._s2 = SampleMoments()
        if x is not None:
            self._s1.extend(_as_vector(x, "x"))
        if y is not None:
            self._s2.extend(_as_vector(y, "y"))
        self.data_name = "x and y"

    @classmethod
    def from_summary(
        cls,
        mean1: float, variance1: float, n1: int,
        mean2: float, variance2: float, n2: int,
    ) -> "TwoSampleTStatistic":
        """Statistic from each sample's mean, sample variance and size."""
        stat = cls()
        stat._s1 = SampleMoments.from_summary(mean1, variance1, n1)
        stat._s2 = SampleMoments.from_summary(mean2, variance2, n2)
        stat.data_name = "summary statistics"
        return stat

    def add1(self, value: float) -> None:
        """Add an observation to the first sample."""
        self._s1.add(value)

    def add2(self, value: float) -> None:
        """Add an observation to the second sample."""
        self._s2.add(value)

    @property
    def mean1(self) -> float:
        return self._s1.mean

    @property
    def mean2(self) -> float:
        return self._s2.mean

    @property
    def degrees_of_freedom(self) -> int:
        return self._s1.count + self._s2.count - 2

    def _standard_error(self) -> float:
        n1, n2 = self._s1.count, self._s2.count
        if n1 == 0 or n2 == 0 or n1 + n2 <= 2:
            raise InsufficientDataError(
                f"two-sample t: need n1, n2 >= 1 and n1 + n2 > 2, got {n1}, {n2}",
                required=3,
                actual=n1 + n2,
            )
        pooled = (self._s1.sum_of_squares + self._s2.sum_of_squares) / (n1 + n2 - 2)
        return math.sqrt(pooled) * math.sqrt(1.0 / n1 + 1.0 / n2)

    @property
    def value(self) -> float:
        return self._ratio(self._s1.mean - self._s2.mean, self._standard_error())

    def noncentrality(self, *effects: float) -> float:
        """Noncentrality for a true difference of means ``effects[0]``."""
        diff = _single_effect(effects)
        return self._ratio(diff, self._standard_error())

    def _estimate(self) -> dict[str, float]:
        return {"mean of x": self._s1.mean, "mean of y": self._s2.mean}


# ========================================================================
# One sample
# ========================================================================


class OneSampleTStatistic(StudentsTStatistic):
    """
    One-sample t statistic (mean - mu) sqrt(n) / s.

    Args:
        data: Optional sample
        mu: Hypothesized mean
    """

    method = "One Sample t-test"

    def __init__(self, data: ArrayLike | None = None, mu: float = 0.0):
        super().__init__()
        self._mu = float(mu)
        self._stats = SampleMoments()
        if data is not None:
            self._stats.extend(_as_vector(data, "data"))
        self.data_name = "x"

    @classmethod
    def from_summary(cls, mean: float, variance: float, n: int, mu: float = 0.0):
        """
        Statistic from a sample's mean, sample variance and size.

        Raises:
            InsufficientDataError: If n < 2
        """
        if n < 2:
            raise InsufficientDataError(
                f"{cls.__name__}.from_summary: n must be >= 2, got {n}",
                required=2,
                actual=n,
            )
        stat = cls(mu=mu)
        stat._stats = SampleMoments.from_summary(mean, variance, n)
        stat.data_name = "summary statistics"
        return stat

    def add(self, value: float) -> None:
        self._stats.add(value)

    def extend(self, values: ArrayLike) -> None:
        self._stats.extend(_as_vector(values, "values"))

    @property
    def mu(self) -> float:
        return self._mu

    @property
    def mean(self) -> float:
        return self._stats.mean

    @property
    def standard_deviation(self) -> float:
        return self._stats.standard_deviation

    @property
    def count(self) -> int:
        return self._stats.count

    @property
    def degrees_of_freedom(self) -> int:
        return self._stats.count - 1

    @property
    def value(self) -> float:
        return self._ratio(
            (self._stats.mean - self._mu) * math.sqrt(self._stats.count),
            self._stats.standard_deviation,
        )

    def noncentrality(self, *effects: float) -> float:
        """Noncentrality for a true shift ``effects[0]`` away from mu."""
        diff = _single_effect(effects)
        return self._ratio(math.sqrt(self._stats.count) * diff, self._stats.standard_deviation)

    def _estimate(self) -> dict[str, float]:
        return {"mean of x": self._stats.mean}


class PairedDifferenceTStatistic(OneSampleTStatistic):
    """
    Paired t statistic on the differences x1 - x2.

    Args:
        x1, x2: Optional paired samples of equal length
        mu: Hypothesized mean difference
    """

    method = "Paired t-test"

    def __init__(
        self,
        x1: ArrayLike | None = None,
        x2: ArrayLike | None = None,
        mu: float = 0.0,
    ):
        super().__init__(mu=mu)
        if (x1 is None) != (x2 is None):
            raise ValidationError("x1, x2: both paired samples are required")
        if x1 is not None:
            a = _as_vector(x1, "x1")
            b = _as_vector(x2, "x2")
            check_consistent_length(a, b, names=("x1", "x2"))
            self._stats.extend(a - b)
        self.data_name = "x1 and x2"

    @classmethod
    def from_differences(cls, differences: ArrayLike, mu: float = 0.0) -> "PairedDifferenceTStatistic":
        stat = cls(mu=mu)
        stat._stats.extend(_as_vector(differences, "differences"))
        stat.data_name = "differences"
        return stat

    def add(self, x1: float, x2: float) -> None:
        """Add one pair."""
        self._stats.add(x1 - x2)

    def add_difference(self, difference: float) -> None:
        self._stats.add(difference)

    def extend(self, values: ArrayLike) -> None:
        """Add an array of differences."""
        self._stats.extend(_as_vector(values, "values"))

    def _estimate(self) -> dict[str, float]:
        return {"mean difference": self._stats.mean}


# ========================================================================
# Regression slope
# ========================================================================


class SlopeTStatistic(StudentsTStatistic):
    """
    t statistic for the slope of a least-squares line.

        t = (b - beta0) sqrt(n - 2) / sqrt(SSR / (n var_x))

    with var_x the population variance of x and SSR the residual sum of
    squares.

    Args:
        x, y: Paired data (at least 3 points)
        beta0: Hypothesized slope
    """

    method = "Slope t-test"

    def __init__(self, x: ArrayLike, y: ArrayLike, beta0: float = 0.0):
        super().__init__()
        xa = _as_vector(x, "x")
        ya = _as_vector(y, "y")
        check_consistent_length(xa, ya, names=("x", "y"))
        check_min_samples(xa, 3, "x")
        sx = PopulationMoments().extend(xa)
        sy = PopulationMoments().extend(ya)
        sxx = sx.sum_of_squares
        if sxx == 0.0:
            raise ValidationError("x: zero variance, slope undefined")
        sxy = float(np.dot(xa - sx.mean, ya - sy.mean))
        self._beta = sxy / sxx
        self._intercept = sy.mean - self._beta * sx.mean
        residuals = ya - (self._intercept + self._beta * xa)
        self._ssr = float(np.dot(residuals, residuals))
        self._variance_x = sx.variance
        self._n = xa.shape[0]
        self._beta0 = float(beta0)
        self.data_name = "x and y"

    @classmethod
    def from_summary(
        cls,
        beta: float,
        variance_x: float,
        ssr: float,
        n: int,
        beta0: float = 0.0,
    ) -> "SlopeTStatistic":
        """
        Statistic from a fitted slope, population variance of x, residual
        sum of squares and number of points.

        Raises:
            InsufficientDataError: If n < 3
            ValidationError: If variance_x <= 0 or ssr < 0
        """
        if n < 3:
            raise InsufficientDataError(
                f"SlopeTStatistic.from_summary: n must be >= 3, got {n}",
                required=3,
                actual=n,
            )
        if variance_x <= 0:
            raise ValidationError(f"variance_x: expected > 0, got {variance_x}")
        if ssr < 0:
            raise ValidationError(f"ssr: expected >= 0, got {ssr}")
        stat = cls.__new__(cls)
        Statistic.__init__(stat)
        stat._beta = float(beta)
        stat._intercept = float("nan")
        stat._ssr = float(ssr)
        stat._variance_x = float(variance_x)
        stat._n = int(n)
        stat._beta0 = float(beta0)
        stat.data_name = "summary statistics"
        return stat

    @property
    def slope(self) -> float:
        return self._beta

    @property
    def intercept(self) -> float:
        return self._intercept

    @property
    def residual_sum_of_squares(self) -> float:
        return self._ssr

    @property
    def degrees_of_freedom(self) -> int:
        return self._n - 2

    def _scale(self) -> float:
        return math.sqrt(self._ssr / (self._n * self._variance_x))

    @property
    def value(self) -> float:
        return self._ratio((self._beta - self._beta0) * math.sqrt(self._n - 2.0), self._scale())

    def noncentrality(self, *effects: float) -> float:
        """Noncentrality for a true slope differing from beta0 by ``effects[0]``."""
        diff = _single_effect(effects)
        return self._ratio(diff * math.sqrt(self._n - 2.0), self._scale())

    def _estimate(self) -> dict[str, float]:
        return {"slope": self._beta}
