"""
Student's t distribution, central and noncentral.

The central distribution is evaluated through the interval probability
A(t, nu) = P(|T| <= t), a finite trigonometric series in
theta = atan(t / sqrt(nu)) (Abramowitz & Stegun 26.7.3 and 26.7.4):

    nu = 1      2 theta / pi
    nu odd      (2/pi) (theta + sin(theta) sum_k c_k cos^(2k+1)(theta))
    nu even     sin(theta) sum_k d_k cos^(2k)(theta)

so that P = (1 + A)/2 and Q = (1 - A)/2 on the side nearer the
center. The far tail, where A approaches 1 and the difference would
cancel, uses 1/2 I_{nu/(nu + t^2)}(nu/2, 1/2) instead.

The noncentral cdf for t >= 0 is

    P(t) = Phi(-mu) + 1/2 sum_j [p_j I_y(j + 1/2, nu/2) + q_j I_y(j + 1, nu/2)]

with y = t^2 / (t^2 + nu), p_j = e^(-mu^2/2) (mu^2/2)^j / j! and
q_j = mu e^(-mu^2/2) (mu^2/2)^j / (sqrt(2) Gamma(j + 3/2)); negative t uses
P(t, nu, mu) = 1 - P(-t, nu, -mu).
"""

from __future__ import annotations

import math

from scipy import special

from pystreamstats.core.exceptions import ConvergenceError, ValidationError
from pystreamstats.core.validation import check_positive_int
from pystreamstats.core.compute.tolerances import NONCENTRAL_T, NONCENTRAL_T_ATOL
from pystreamstats.distributions.base import DistributionKind, ProbabilityDistribution


_TWO_OVER_PI = 2.0 / math.pi
_SQRT2 = math.sqrt(2.0)


def interval_probability(t: float, nu: int) -> float:
    """A(t, nu) for the central distribution; odd in t."""
    if math.isinf(t):
        return math.copysign(1.0, t)
    theta = math.atan(t / math.sqrt(nu))
    if nu == 1:
        return _TWO_OVER_PI * theta
    sin_theta = math.sin(theta)
    if nu == 2:
        return sin_theta
    cos_theta = math.cos(theta)
    if nu == 3:
        return _TWO_OVER_PI * (theta + sin_theta * cos_theta)
    cos2 = cos_theta * cos_theta
    limit = nu - 2
    if nu % 2 == 1:
        term = cos_theta
        total = term
        even, odd = 0, 1
        while odd < limit:
            even += 2
            odd += 2
            term *= (even / odd) * cos2
            total += term
        return _TWO_OVER_PI * (theta + sin_theta * total)
    term = 1.0
    total = 1.0
    odd, even = -1, 0
    while even < limit:
        odd += 2
        even += 2
        term *= (odd / even) * cos2
        total += term
    return sin_theta * total


def _upper_tail(t: float, nu: int) -> float:
    """Central Q(t) for t > 0."""
    if math.isinf(t):
        return 0.0
    return 0.5 * float(special.betainc(nu / 2.0, 0.5, nu / (nu + t * t)))


def _noncentral_cdf(t: float, nu: int, mu: float) -> float:
    if t < 0:
        return 1.0 - _noncentral_cdf(-t, nu, -mu)
    if math.isinf(t):
        return 1.0
    half_nu = nu / 2.0
    t2 = t * t
    y = t2 / (t2 + nu)
    musq2 = mu * mu / 2.0
    log_musq2 = math.log(musq2)
    q_scale = mu / _SQRT2
    total = 0.0
    j = 0
    while True:
        log_base = -musq2 + j * log_musq2
        p_j = math.exp(log_base - math.lgamma(j + 1.0))
        q_j = q_scale * math.exp(log_base - math.lgamma(j + 1.5))
        term = (
            p_j * float(special.betainc(j + 0.5, half_nu, y))
            + q_j * float(special.betainc(j + 1.0, half_nu, y))
        )
        total += term
        if j > musq2:
            if abs(term) <= NONCENTRAL_T_ATOL:
                break
            if total != 0.0 and abs(term / total) <= NONCENTRAL_T.rtol:
                break
        j += 1
        if j > NONCENTRAL_T.max_iterations:
            raise ConvergenceError(
                f"noncentral t cdf did not converge for t={t!r}, nu={nu}, mu={mu!r}",
                iterations=j,
                final_change=term,
                reason='max_iterations',
                threshold=NONCENTRAL_T.rtol,
            )
    result = 0.5 * float(special.erfc(mu / _SQRT2)) + total / 2.0
    return min(max(result, 0.0), 1.0)


def _noncentral_density(t: float, nu: int, mu: float) -> float:
    if math.isinf(t):
        return 0.0
    musq = mu * mu
    tsq = t * t
    nu_tsq = nu + tsq
    arg = musq * tsq / (2.0 * nu_tsq)
    log_prefix = (
        (nu / 2.0) * math.log(nu)
        + math.lgamma(nu + 1.0)
        - musq / 2.0
        - nu * math.log(2.0)
        - (nu / 2.0) * math.log(nu_tsq)
        - math.lgamma(nu / 2.0)
    )
    odd_part = (
        _SQRT2 * mu * t * float(special.hyp1f1(nu / 2.0 + 1.0, 1.5, arg)) / nu_tsq
        * math.exp(log_prefix - math.lgamma((nu + 1.0) / 2.0))
    )
    even_part = (
        float(special.hyp1f1((nu + 1.0) / 2.0, 0.5, arg)) / math.sqrt(nu_tsq)
        * math.exp(log_prefix - math.lgamma(nu / 2.0 + 1.0))
    )
    return odd_part + even_part


class StudentsTDistribution(ProbabilityDistribution):
    """
    Student's t distribution.

    Args:
        dof: Positive integer degrees of freedom
        noncentrality: Optional shift mu of the numerator normal variate;
            None or 0 gives the central distribution
    """

    def __init__(self, dof: int, noncentrality: float | None = None):
        self._nu = check_positive_int(dof, "dof")
        mu = 0.0 if noncentrality is None else float(noncentrality)
        if not math.isfinite(mu):
            raise ValidationError(f"noncentrality: expected finite value, got {noncentrality!r}")
        self._mu = mu

    @property
    def kind(self) -> DistributionKind:
        return DistributionKind.STUDENTS_T

    @property
    def dof(self) -> int:
        return self._nu

    @property
    def noncentrality(self) -> float:
        return self._mu

    @property
    def is_central(self) -> bool:
        return self._mu == 0.0

    def is_symmetric(self, x: float) -> bool:
        return self.is_central and x == 0.0

    def density(self, t: float) -> float:
        if not self.is_central:
            return _noncentral_density(t, self._nu, self._mu)
        if math.isinf(t):
            return 0.0
        nu = self._nu
        return math.exp(
            math.lgamma((nu + 1.0) / 2.0)
            - math.lgamma(nu / 2.0)
            - 0.5 * math.log(nu * math.pi)
            - ((nu + 1.0) / 2.0) * math.log1p(t * t / nu)
        )

    def cdf(self, t: float) -> float:
        if self.is_central:
            if t < 0:
                return _upper_tail(-t, self._nu)
            return 0.5 * (1.0 + interval_probability(t, self._nu))
        return _noncentral_cdf(t, self._nu, self._mu)

    def complementary_cdf(self, t: float) -> float:
        if self.is_central:
            if t > 0:
                return _upper_tail(t, self._nu)
            return 0.5 * (1.0 - interval_probability(t, self._nu))
        if t < 0:
            return _noncentral_cdf(-t, self._nu, -self._mu)
        return 1.0 - _noncentral_cdf(t, self._nu, self._mu)

    def interval_probability(self, t: float) -> float:
        if not self.is_central:
            return super().interval_probability(t)
        return interval_probability(t, self._nu)

    def __repr__(self) -> str:
        if self.is_central:
            return f"StudentsTDistribution(dof={self._nu})"
        return f"StudentsTDistribution(dof={self._nu}, noncentrality={self._mu:g})"
