"""
Welch's t statistic for two samples with unequal variances.

    t  = (mean1 - mean2) / sqrt(v1/n1 + v2/n2)
    df = (v1/n1 + v2/n2)^2 / (v1^2 / (n1^2 (n1-1)) + v2^2 / (n2^2 (n2-1)))

The Welch-Satterthwaite degrees of freedom are generally fractional; the
sampling distribution is Student's t with floor(df) degrees of freedom.
"""

from __future__ import annotations

import math

from numpy.typing import ArrayLike

from pystreamstats.core.exceptions import InsufficientDataError
from pystreamstats.distributions.students_t import StudentsTDistribution
from pystreamstats.hypothesis.t_statistics import StudentsTStatistic, _as_vector, _single_effect
from pystreamstats.moments.accumulator import SampleMoments


class WelchTStatistic(StudentsTStatistic):
    """
    Welch's unequal-variance t statistic.

    Args:
        x: Optional first sample
        y: Optional second sample
    """

    method = "Welch Two Sample t-test"

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
    ) -> "WelchTStatistic":
        """Statistic from each sample's mean, sample variance and size."""
        stat = cls()
        stat._s1 = SampleMoments.from_summary(mean1, variance1, n1)
        stat._s2 = SampleMoments.from_summary(mean2, variance2, n2)
        stat.data_name = "summary statistics"
        return stat

    def add1(self, value: float) -> None:
        self._s1.add(value)

    def add2(self, value: float) -> None:
        self._s2.add(value)

    def _check_sizes(self) -> None:
        n1, n2 = self._s1.count, self._s2.count
        if n1 < 2 or n2 < 2:
            raise InsufficientDataError(
                f"Welch t: each sample needs >= 2 observations, got {n1}, {n2}",
                required=2,
                actual=min(n1, n2),
            )

    def _variance_terms(self) -> tuple[float, float]:
        self._check_sizes()
        return (
            self._s1.variance / self._s1.count,
            self._s2.variance / self._s2.count,
        )

    @property
    def welch_degrees_of_freedom(self) -> float:
        """Fractional Welch-Satterthwaite degrees of freedom."""
        a, b = self._variance_terms()
        n1, n2 = self._s1.count, self._s2.count
        denom = a * a / (n1 - 1.0) + b * b / (n2 - 1.0)
        if denom == 0.0:
            return math.nan
        return (a + b) ** 2 / denom

    @property
    def degrees_of_freedom(self) -> int:
        """Truncated degrees of freedom used by the sampling distribution."""
        df = self.welch_degrees_of_freedom
        if math.isnan(df):
            raise InsufficientDataError(
                "Welch t: both samples have zero variance, degrees of freedom undefined"
            )
        return int(math.floor(df))

    def distribution(self, noncentrality: float | None = None) -> StudentsTDistribution:
        df = self.welch_degrees_of_freedom
        if df == df and df < 1.0:
            self._warn(f"Welch degrees of freedom {df:.4g} truncated below 1")
        return super().distribution(noncentrality)

    def _standard_error(self) -> float:
        a, b = self._variance_terms()
        return math.sqrt(a + b)

    @property
    def value(self) -> float:
        return self._ratio(self._s1.mean - self._s2.mean, self._standard_error())

    def noncentrality(self, *effects: float) -> float:
        """Noncentrality for a true difference of means ``effects[0]``."""
        diff = _single_effect(effects)
        return self._ratio(diff, self._standard_error())

    def _parameter(self) -> dict[str, float]:
        return {"df": self.welch_degrees_of_freedom}

    def _estimate(self) -> dict[str, float]:
        return {"mean of x": self._s1.mean, "mean of y": self._s2.mean}
