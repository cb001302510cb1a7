"""
Base class for univariate probability distributions.

Every distribution exposes its domain, density, cdf (P), complementary
cdf (Q) and, for symmetric distributions, the interval probability A.
The inverses are shared: boundary probabilities resolve to the domain
endpoints and interior targets are bracketed by a geometric walk from 0
(clamped into the domain) and refined with Brent's method.

Endpoint convention for p in {0, 1}:
    closed infinite end   -> +/- inf
    open infinite end     -> +/- largest finite float
    closed finite end     -> the endpoint
    open finite end       -> nearest representable interior value
"""

from __future__ import annotations

import math
import sys
from abc import ABC, abstractmethod
from enum import Enum

from pystreamstats.core.exceptions import UnsupportedOperationError
from pystreamstats.core.validation import check_probability
from pystreamstats.core.compute.rootfind import increasing_root, decreasing_root


_FLOAT_MAX = sys.float_info.max


class DistributionKind(str, Enum):
    """Closed set of supported distribution families."""
    GAUSSIAN = "gaussian"
    CHI_SQUARE = "chi_square"
    F = "f"
    STUDENTS_T = "students_t"
    KOLMOGOROV = "kolmogorov"


class ProbabilityDistribution(ABC):
    """
    Immutable univariate distribution.

    Subclasses implement ``density``, ``cdf`` and ``kind``; most also
    override ``complementary_cdf`` with an independent computation, and
    the domain properties when the support is not the whole real line.
    """

    # ====================================================================
    # Domain
    # ====================================================================

    @property
    def domain_min(self) -> float:
        return -math.inf

    @property
    def domain_max(self) -> float:
        return math.inf

    @property
    def domain_min_closed(self) -> bool:
        return False

    @property
    def domain_max_closed(self) -> bool:
        return False

    def is_in_domain(self, x: float) -> bool:
        lo, hi = self.domain_min, self.domain_max
        above = x >= lo if self.domain_min_closed else x > lo
        below = x <= hi if self.domain_max_closed else x < hi
        return above and below

    # ====================================================================
    # Family interface
    # ====================================================================

    @property
    @abstractmethod
    def kind(self) -> DistributionKind:
        """Family tag."""

    @abstractmethod
    def density(self, x: float) -> float:
        """Probability density at x."""

    @abstractmethod
    def cdf(self, x: float) -> float:
        """P(x): probability that a variate is <= x."""

    def complementary_cdf(self, x: float) -> float:
        """Q(x): probability that a variate is > x."""
        return 1.0 - self.cdf(x)

    def is_symmetric(self, x: float) -> bool:
        """True if the density is symmetric about x."""
        return False

    def interval_probability(self, x: float) -> float:
        """
        A(x): probability of lying within x of the center of symmetry.

        Raises:
            UnsupportedOperationError: For asymmetric distributions
        """
        raise UnsupportedOperationError(
            f"{type(self).__name__}: interval probability requires a symmetric distribution"
        )

    # Short aliases matching the usual P/Q/A notation
    def P(self, x: float) -> float:
        return self.cdf(x)

    def Q(self, x: float) -> float:
        return self.complementary_cdf(x)

    def A(self, x: float) -> float:
        return self.interval_probability(x)

    # ====================================================================
    # Inverses
    # ====================================================================

    def _lower_endpoint(self) -> float:
        lo = self.domain_min
        if math.isinf(lo):
            return lo if self.domain_min_closed else -_FLOAT_MAX
        return lo if self.domain_min_closed else math.nextafter(lo, math.inf)

    def _upper_endpoint(self) -> float:
        hi = self.domain_max
        if math.isinf(hi):
            return hi if self.domain_max_closed else _FLOAT_MAX
        return hi if self.domain_max_closed else math.nextafter(hi, -math.inf)

    def _initial_guess(self) -> float:
        return min(max(0.0, self._lower_endpoint()), self._upper_endpoint())

    def inverse_cdf(self, p: float) -> float:
        """
        x such that P(x) = p.

        Raises:
            ValidationError: If p is outside [0, 1]
            ConvergenceError: If the root cannot be bracketed
        """
        p = check_probability(p, "p")
        if p == 0.0:
            return self._lower_endpoint()
        if p == 1.0:
            return self._upper_endpoint()
        return increasing_root(
            self.cdf, p, self._initial_guess(),
            self._lower_endpoint(), self._upper_endpoint(),
        )

    def inverse_complementary_cdf(self, q: float) -> float:
        """
        x such that Q(x) = q.

        Raises:
            ValidationError: If q is outside [0, 1]
            ConvergenceError: If the root cannot be bracketed
        """
        q = check_probability(q, "q")
        if q == 1.0:
            return self._lower_endpoint()
        if q == 0.0:
            return self._upper_endpoint()
        return decreasing_root(
            self.complementary_cdf, q, self._initial_guess(),
            self._lower_endpoint(), self._upper_endpoint(),
        )

    def inverse_interval_probability(self, a: float) -> float:
        """
        Half-width x >= 0 such that A(x) = a.

        Raises:
            ValidationError: If a is outside [0, 1]
            UnsupportedOperationError: For asymmetric distributions
        """
        a = check_probability(a, "a")
        # Raises for asymmetric families
        self.interval_probability(0.0)
        if a == 0.0:
            return 0.0
        if a == 1.0:
            return self._upper_endpoint() - self._initial_guess()
        return increasing_root(self.interval_probability, a, 0.0, 0.0, math.inf)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
