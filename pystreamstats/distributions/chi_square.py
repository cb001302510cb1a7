"""
Chi-square distribution, central and noncentral.

Central:
    density   x^(k-1) e^(-x/2) / (2^k Gamma(k)),  k = nu/2
    cdf       (x/2)^k e^(-x/2) / Gamma(k+1) * sum_r x^r / prod_{i<=r}(nu + 2i)
    ccdf      even nu: e^(-x/2) sum_{r < nu/2} (x/2)^r / r!
              odd nu:  erfc(sqrt(x/2))
                       + sqrt(2/pi) e^(-x/2) sum_{r <= (nu-1)/2} x^(r-1/2) / (2r-1)!!

Noncentral forms are Poisson(lambda/2) mixtures of the central ones over
nu + 2j degrees of freedom. All terms are built in log space so large
arguments neither overflow nor underflow prematurely.
"""

from __future__ import annotations

import math

from scipy import special

from pystreamstats.core.exceptions import ConvergenceError
from pystreamstats.core.validation import check_positive_int, check_non_negative
from pystreamstats.core.compute.tolerances import (
    CHI_SQUARE_SERIES,
    CHI_SQUARE_TAIL,
)
from pystreamstats.distributions.base import DistributionKind, ProbabilityDistribution
from pystreamstats.distributions._series import poisson_mixture


_LOG_SQRT_2_OVER_PI = 0.5 * math.log(2.0 / math.pi)


def _central_density(x: float, nu: int) -> float:
    if x < 0 or math.isinf(x):
        return 0.0
    if x == 0.0:
        if nu == 1:
            return math.inf
        return 0.5 if nu == 2 else 0.0
    k = nu / 2.0
    return math.exp((k - 1.0) * math.log(x) - x / 2.0 - k * math.log(2.0) - math.lgamma(k))


def _central_cdf(x: float, nu: int) -> float:
    if x <= 0.0:
        return 0.0
    if math.isinf(x):
        return 1.0
    if x > nu:
        return min(max(1.0 - _central_ccdf(x, nu), 0.0), 1.0)
    half = x / 2.0
    log_prefix = (nu / 2.0) * math.log(half) - half - math.lgamma(nu / 2.0 + 1.0)
    total = 0.0
    max_term = 0.0
    log_term = 0.0
    r = 0
    while True:
        term = math.exp(log_prefix + log_term)
        total += term
        if term > max_term:
            max_term = term
        r += 1
        ratio = x / (nu + 2.0 * r)
        if ratio < 1.0 and term <= max_term * CHI_SQUARE_SERIES.rtol:
            break
        if r > CHI_SQUARE_SERIES.max_iterations:
            raise ConvergenceError(
                f"chi-square cdf series did not converge for x={x!r}, nu={nu}",
                iterations=r,
                final_change=term,
                reason='max_iterations',
                threshold=CHI_SQUARE_SERIES.rtol,
            )
        log_term += math.log(ratio)
    return min(total, 1.0)


def _central_ccdf(x: float, nu: int) -> float:
    if x <= 0.0:
        return 1.0
    if math.isinf(x):
        return 0.0
    half = x / 2.0
    rtol = CHI_SQUARE_TAIL.rtol
    if nu % 2 == 0:
        total = 0.0
        log_term = -half
        for r in range(nu // 2):
            term = math.exp(log_term)
            total += term
            if r > half and term <= total * rtol:
                break
            log_term += math.log(half) - math.log(r + 1.0)
        return min(total, 1.0)

    chi = math.sqrt(x)
    base = float(special.erfc(chi / math.sqrt(2.0)))
    if nu == 1:
        return base
    total = 0.0
    log_term = _LOG_SQRT_2_OVER_PI - half + math.log(chi)
    for r in range(1, (nu - 1) // 2 + 1):
        term = math.exp(log_term)
        total += term
        if r > half and term <= total * rtol:
            break
        log_term += math.log(x) - math.log(2.0 * r + 1.0)
    return min(base + total, 1.0)


def _mixture(func, x: float, nu: int, lam: float) -> float:
    """sum_j e^(-lam/2) (lam/2)^j / j! * func(x, nu + 2j)"""
    return poisson_mixture(
        lambda j: func(x, nu + 2 * j), lam / 2.0, "noncentral chi-square"
    )


class ChiSquareDistribution(ProbabilityDistribution):
    """
    Chi-square distribution with ``dof`` degrees of freedom.

    Args:
        dof: Positive integer degrees of freedom
        noncentrality: Optional noncentrality parameter lambda >= 0;
            None or 0 gives the central distribution
    """

    def __init__(self, dof: int, noncentrality: float | None = None):
        self._nu = check_positive_int(dof, "dof")
        lam = 0.0 if noncentrality is None else check_non_negative(noncentrality, "noncentrality")
        self._lambda = lam

    @property
    def kind(self) -> DistributionKind:
        return DistributionKind.CHI_SQUARE

    @property
    def dof(self) -> int:
        return self._nu

    @property
    def noncentrality(self) -> float:
        return self._lambda

    @property
    def is_central(self) -> bool:
        return self._lambda == 0.0

    @property
    def domain_min(self) -> float:
        return 0.0

    @property
    def domain_min_closed(self) -> bool:
        return True

    def density(self, x: float) -> float:
        if self.is_central:
            return _central_density(x, self._nu)
        if x < 0 or math.isinf(x):
            return 0.0
        if x == 0.0:
            if self._nu == 1:
                return math.inf
            return 0.5 * math.exp(-self._lambda / 2.0) if self._nu == 2 else 0.0
        return _mixture(_central_density, x, self._nu, self._lambda)

    def cdf(self, x: float) -> float:
        if self.is_central:
            return _central_cdf(x, self._nu)
        if x <= 0.0:
            return 0.0
        return min(_mixture(_central_cdf, x, self._nu, self._lambda), 1.0)

    def complementary_cdf(self, x: float) -> float:
        if self.is_central:
            return _central_ccdf(x, self._nu)
        if x <= 0.0:
            return 1.0
        return min(_mixture(_central_ccdf, x, self._nu, self._lambda), 1.0)

    def __repr__(self) -> str:
        if self.is_central:
            return f"ChiSquareDistribution(dof={self._nu})"
        return f"ChiSquareDistribution(dof={self._nu}, noncentrality={self._lambda:g})"
