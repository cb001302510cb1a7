"""
PyStreamStats: streaming statistics and probability distributions.

Numerically stable one-pass moment accumulators, the probability
distributions used by classical tests, and test statistics built on
both.

Submodules:
    moments: Mean/variance/covariance accumulators and trimmed means
    distributions: Gaussian, chi-square, F, Student's t, Kolmogorov
    hypothesis: t, Welch, F, Levene, chi-square and Kolmogorov-Smirnov statistics
"""

__version__ = "0.1.0"
__author__ = "Hai-Shuo"
__email__ = "contact@sgcx.org"

from pystreamstats import moments
from pystreamstats import distributions
from pystreamstats import hypothesis

__all__ = [
    "__version__",
    "moments",
    "distributions",
    "hypothesis",
]
