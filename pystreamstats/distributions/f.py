"""
F distribution, central and noncentral.

With a = nu1/2, b = nu2/2 and I_y(a, b) the regularized incomplete beta
function:

    P(f) = I_{nu1 f / (nu2 + nu1 f)}(a, b)
    Q(f) = I_{nu2 / (nu2 + nu1 f)}(b, a)

The noncentral forms are Poisson(lambda/2) mixtures with the first shape
parameter shifted to a + j.
"""

from __future__ import annotations

import math

from scipy import special

from pystreamstats.core.validation import check_positive_int, check_non_negative
from pystreamstats.distributions.base import DistributionKind, ProbabilityDistribution
from pystreamstats.distributions._series import poisson_mixture


def _log_beta_density(f: float, a: float, b: float, ratio: float) -> float:
    """Log density of (chi2_{2a}/nu1) / (chi2_{2b}/nu2) with ratio = nu1/nu2."""
    return (
        a * math.log(ratio)
        + (a - 1.0) * math.log(f)
        - (a + b) * math.log1p(ratio * f)
        - float(special.betaln(a, b))
    )


class FDistribution(ProbabilityDistribution):
    """
    F distribution with (dof1, dof2) degrees of freedom.

    Args:
        dof1: Numerator degrees of freedom (positive integer)
        dof2: Denominator degrees of freedom (positive integer)
        noncentrality: Optional lambda >= 0; None or 0 is central
    """

    def __init__(self, dof1: int, dof2: int, noncentrality: float | None = None):
        self._nu1 = check_positive_int(dof1, "dof1")
        self._nu2 = check_positive_int(dof2, "dof2")
        self._lambda = 0.0 if noncentrality is None else check_non_negative(noncentrality, "noncentrality")

    @property
    def kind(self) -> DistributionKind:
        return DistributionKind.F

    @property
    def dof1(self) -> int:
        return self._nu1

    @property
    def dof2(self) -> int:
        return self._nu2

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

    def _component_density(self, f: float, j: int) -> float:
        a = self._nu1 / 2.0 + j
        b = self._nu2 / 2.0
        return math.exp(_log_beta_density(f, a, b, self._nu1 / self._nu2))

    def density(self, f: float) -> float:
        if f < 0 or math.isinf(f):
            return 0.0
        if f == 0.0:
            if self._nu1 == 1:
                return math.inf
            if self._nu1 == 2:
                return math.exp(-self._lambda / 2.0)
            return 0.0
        if self.is_central:
            return self._component_density(f, 0)
        return poisson_mixture(
            lambda j: self._component_density(f, j), self._lambda / 2.0, "noncentral F density"
        )

    def cdf(self, f: float) -> float:
        if f <= 0.0:
            return 0.0
        if math.isinf(f):
            return 1.0
        nu1, nu2 = self._nu1, self._nu2
        y = nu1 * f / (nu2 + nu1 * f)
        if self.is_central:
            return float(special.betainc(nu1 / 2.0, nu2 / 2.0, y))
        return min(
            poisson_mixture(
                lambda j: float(special.betainc(nu1 / 2.0 + j, nu2 / 2.0, y)),
                self._lambda / 2.0,
                "noncentral F cdf",
            ),
            1.0,
        )

    def complementary_cdf(self, f: float) -> float:
        if f <= 0.0:
            return 1.0
        if math.isinf(f):
            return 0.0
        nu1, nu2 = self._nu1, self._nu2
        y = nu2 / (nu2 + nu1 * f)
        if self.is_central:
            return float(special.betainc(nu2 / 2.0, nu1 / 2.0, y))
        return min(
            poisson_mixture(
                lambda j: float(special.betainc(nu2 / 2.0, nu1 / 2.0 + j, y)),
                self._lambda / 2.0,
                "noncentral F complementary cdf",
            ),
            1.0,
        )

    def __repr__(self) -> str:
        base = f"FDistribution(dof1={self._nu1}, dof2={self._nu2}"
        if self.is_central:
            return base + ")"
        return base + f", noncentrality={self._lambda:g})"
