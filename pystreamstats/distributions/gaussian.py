"""Gaussian (normal) distribution with closed-form inverses."""

from __future__ import annotations

import math

from scipy import special

from pystreamstats.core.exceptions import ValidationError
from pystreamstats.core.validation import check_probability
from pystreamstats.distributions.base import DistributionKind, ProbabilityDistribution


_SQRT2 = math.sqrt(2.0)
_SQRT2PI = math.sqrt(2.0 * math.pi)


class GaussianDistribution(ProbabilityDistribution):
    """
    Normal distribution N(mean, sd^2).

    The interval probability A(x) is the probability of falling within x
    of the mean: erf(x / (sd * sqrt(2))).
    """

    def __init__(self, mean: float = 0.0, sd: float = 1.0):
        if not math.isfinite(mean):
            raise ValidationError(f"mean: expected finite value, got {mean!r}")
        if not (math.isfinite(sd) and sd > 0):
            raise ValidationError(f"sd: expected finite value > 0, got {sd!r}")
        self._mean = float(mean)
        self._sd = float(sd)

    @property
    def kind(self) -> DistributionKind:
        return DistributionKind.GAUSSIAN

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def sd(self) -> float:
        return self._sd

    def _z(self, x: float) -> float:
        return (x - self._mean) / (self._sd * _SQRT2)

    def density(self, x: float) -> float:
        u = (x - self._mean) / self._sd
        return math.exp(-0.5 * u * u) / (self._sd * _SQRT2PI)

    def cdf(self, x: float) -> float:
        return 0.5 * float(special.erfc(-self._z(x)))

    def complementary_cdf(self, x: float) -> float:
        return 0.5 * float(special.erfc(self._z(x)))

    def is_symmetric(self, x: float) -> bool:
        return x == self._mean

    def interval_probability(self, x: float) -> float:
        return float(special.erf(x / (self._sd * _SQRT2)))

    def inverse_cdf(self, p: float) -> float:
        p = check_probability(p, "p")
        if p == 0.0 or p == 1.0:
            return super().inverse_cdf(p)
        return self._mean + self._sd * float(special.ndtri(p))

    def inverse_complementary_cdf(self, q: float) -> float:
        q = check_probability(q, "q")
        if q == 0.0 or q == 1.0:
            return super().inverse_complementary_cdf(q)
        return self._mean - self._sd * float(special.ndtri(q))

    def inverse_interval_probability(self, a: float) -> float:
        a = check_probability(a, "a")
        if a == 1.0:
            return super().inverse_interval_probability(a)
        return self._sd * _SQRT2 * float(special.erfinv(a))

    def __repr__(self) -> str:
        return f"GaussianDistribution(mean={self._mean:g}, sd={self._sd:g})"
