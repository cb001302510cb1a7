"""
Probability distributions.

Each distribution is an immutable object exposing density, cdf,
complementary cdf, domain bounds and symmetry, with inverses shared
through ProbabilityDistribution.

Public API:
    GaussianDistribution(mean, sd)
    ChiSquareDistribution(dof, noncentrality=None)
    FDistribution(dof1, dof2, noncentrality=None)
    StudentsTDistribution(dof, noncentrality=None)
    KolmogorovDistribution(n, limit=None)
"""

from pystreamstats.distributions.base import DistributionKind, ProbabilityDistribution
from pystreamstats.distributions.gaussian import GaussianDistribution
from pystreamstats.distributions.chi_square import ChiSquareDistribution
from pystreamstats.distributions.f import FDistribution
from pystreamstats.distributions.students_t import StudentsTDistribution
from pystreamstats.distributions.kolmogorov import KolmogorovDistribution

__all__ = [
    "DistributionKind",
    "ProbabilityDistribution",
    "GaussianDistribution",
    "ChiSquareDistribution",
    "FDistribution",
    "StudentsTDistribution",
    "KolmogorovDistribution",
]
