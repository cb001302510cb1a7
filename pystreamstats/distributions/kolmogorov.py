"""
Kolmogorov distribution of the one-sample statistic D_n.

For n * x up to a threshold (default 256) the cdf is computed exactly
with the Marsaglia-Tsang-Wang matrix method: with k = floor(n x) + 1,
m = 2k - 1 and h = k - n x,

    P(D_n < x) = n! / n^n * (H^n)[k-1, k-1]

where H is the m x m lower-Hessenberg matrix of reciprocal factorials
corrected by powers of h. H^n e_k is formed one step at a time, each
step multiplied by i/n to build the n!/n^n factor, and the vector is
rescaled by 1e140 whenever its k-th entry leaves [1e-140, 1e140].
For n x <= 1 the cdf is n! (2x - 1/n)^n, and for n x >= n - 1 it is
1 - 2 (1 - x)^n.

Above the threshold the limiting distribution of sqrt(n) D_n is used:

    x' > 1/2   1 - 2 sum_i (-1)^(i-1) exp(-2 i^2 x'^2)
    x' <= 1/2  sqrt(2 pi) / x' * sum_k exp(-(2k-1)^2 pi^2 / (8 x'^2))
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import special

from pystreamstats.core.exceptions import ConvergenceError, ValidationError
from pystreamstats.core.validation import check_positive_int
from pystreamstats.core.compute.tolerances import (
    KOLMOGOROV_INV_SCALE,
    KOLMOGOROV_SCALE,
    KOLMOGOROV_SERIES,
    get_kolmogorov_limit,
)
from pystreamstats.distributions.base import DistributionKind, ProbabilityDistribution


_PI_SQ = math.pi * math.pi
_ROOT_2PI = math.sqrt(2.0 * math.pi)
_LOG_SCALE = math.log(KOLMOGOROV_SCALE)
_DERIVATIVE_STEP = 1e-7


def _alternating_series(xp: float, weight_power: int) -> float:
    """sum_i (-1)^(i-1) i^weight_power exp(-2 i^2 xp^2)"""
    xsq = xp * xp
    total = 0.0
    for i in range(1, KOLMOGOROV_SERIES.max_iterations):
        term = (i ** weight_power) * math.exp(-2.0 * i * i * xsq)
        total += term if i % 2 == 1 else -term
        if term <= KOLMOGOROV_SERIES.rtol * abs(total):
            return total
    raise ConvergenceError(
        f"Kolmogorov alternating series did not converge for x'={xp!r}",
        iterations=KOLMOGOROV_SERIES.max_iterations,
        reason='max_iterations',
        threshold=KOLMOGOROV_SERIES.rtol,
    )


def _theta_series(xp: float, weight_power: int) -> float:
    """sum_k (2k-1)^weight_power exp(-(2k-1)^2 pi^2 / (8 xp^2))"""
    xsq = xp * xp
    total = 0.0
    for k in range(1, KOLMOGOROV_SERIES.max_iterations):
        f = 2.0 * k - 1.0
        term = (f ** weight_power) * math.exp(-f * f * _PI_SQ / (8.0 * xsq))
        total += term
        if term <= KOLMOGOROV_SERIES.rtol * total or term == 0.0:
            return total
    raise ConvergenceError(
        f"Kolmogorov theta series did not converge for x'={xp!r}",
        iterations=KOLMOGOROV_SERIES.max_iterations,
        reason='max_iterations',
        threshold=KOLMOGOROV_SERIES.rtol,
    )


def limiting_cdf(x: float, n: int) -> float:
    """Asymptotic P(D_n <= x) from the limiting distribution of sqrt(n) D_n."""
    if x <= 0.0:
        return 0.0
    xp = x * math.sqrt(n)
    if xp > 0.5:
        return 1.0 - 2.0 * _alternating_series(xp, 0)
    return _ROOT_2PI * _theta_series(xp, 0) / xp


def limiting_density(x: float, n: int) -> float:
    """Derivative of limiting_cdf with respect to x."""
    if x <= 0.0:
        return 0.0
    rn = math.sqrt(n)
    xp = x * rn
    if xp > 0.5:
        return 8.0 * xp * _alternating_series(xp, 2) * rn
    xsq = xp * xp
    return rn * _ROOT_2PI * (
        (_PI_SQ / 4.0) * _theta_series(xp, 2) / xsq - _theta_series(xp, 0)
    ) / xsq


def _h_matrix(m: int, h: float) -> NDArray[np.floating[Any]]:
    idx = np.arange(m)
    diff = idx[:, None] - idx[None, :] + 1
    H = (diff >= 0).astype(np.float64)
    powers = h ** np.arange(1, m + 1, dtype=np.float64)
    H[:, 0] -= powers
    H[m - 1, :] -= powers[::-1]
    if 2.0 * h - 1.0 > 0.0:
        H[m - 1, 0] += (2.0 * h - 1.0) ** m
    inv_factorial = np.exp(-special.gammaln(np.maximum(diff, 0) + 1.0))
    return np.where(diff > 0, H * inv_factorial, H)


def exact_cdf(d: float, n: int) -> float:
    """Exact P(D_n < d) by the Marsaglia-Tsang-Wang recurrence."""
    if d <= 0.0:
        return 0.0
    if d >= 1.0:
        return 1.0
    nd = n * d
    if nd <= 0.5:
        return 0.0
    # Closed forms at both ends of the support
    if nd <= 1.0:
        return math.exp(math.lgamma(n + 1.0) + n * math.log(2.0 * d - 1.0 / n))
    if nd >= n - 1:
        return 1.0 - 2.0 * (1.0 - d) ** n
    k = int(math.floor(nd)) + 1
    m = 2 * k - 1
    h = k - nd
    H = _h_matrix(m, h)
    r = np.zeros(m)
    r[k - 1] = 1.0
    exponent = 0
    for i in range(1, n + 1):
        r = (H @ r) * (i / n)
        pivot = r[k - 1]
        if pivot > KOLMOGOROV_SCALE:
            r *= KOLMOGOROV_INV_SCALE
            exponent += 1
        elif 0.0 < pivot < KOLMOGOROV_INV_SCALE:
            r *= KOLMOGOROV_SCALE
            exponent -= 1
    value = float(r[k - 1])
    if value <= 0.0:
        return 0.0
    if exponent == 0:
        return min(value, 1.0)
    return min(math.exp(math.log(value) + exponent * _LOG_SCALE), 1.0)


class KolmogorovDistribution(ProbabilityDistribution):
    """
    Distribution of the Kolmogorov-Smirnov statistic D_n for n samples.

    Args:
        n: Number of samples (>= 1)
        limit: Optional n*x threshold above which the asymptotic form is
            used; None follows the global setting (see
            ``pystreamstats.core.compute.tolerances.set_kolmogorov_limit``)
    """

    def __init__(self, n: int, limit: float | None = None):
        self._n = check_positive_int(n, "n")
        if limit is not None and not (limit > 0):
            raise ValidationError(f"limit: expected value > 0, got {limit!r}")
        self._limit = None if limit is None else float(limit)

    @property
    def kind(self) -> DistributionKind:
        return DistributionKind.KOLMOGOROV

    @property
    def n(self) -> int:
        return self._n

    @property
    def limit(self) -> float:
        """Effective n*x threshold for the asymptotic form."""
        return get_kolmogorov_limit() if self._limit is None else self._limit

    @property
    def domain_min(self) -> float:
        return 0.0

    @property
    def domain_max(self) -> float:
        return 1.0

    @property
    def domain_min_closed(self) -> bool:
        return True

    @property
    def domain_max_closed(self) -> bool:
        return True

    def _uses_limit_form(self, x: float) -> bool:
        return self._n * x > self.limit

    def cdf(self, x: float) -> float:
        if x <= 0.0:
            return 0.0
        if x >= 1.0:
            return 1.0
        if self._uses_limit_form(x):
            return limiting_cdf(x, self._n)
        return exact_cdf(x, self._n)

    def density(self, x: float) -> float:
        if x <= 0.0 or x > 1.0:
            return 0.0
        if self._uses_limit_form(x):
            return limiting_density(x, self._n)
        lo = max(x - _DERIVATIVE_STEP, 0.0)
        hi = min(x + _DERIVATIVE_STEP, 1.0)
        return (exact_cdf(hi, self._n) - exact_cdf(lo, self._n)) / (hi - lo)

    def __repr__(self) -> str:
        return f"KolmogorovDistribution(n={self._n})"
