"""
Moment accumulators.

Single-pass, mergeable accumulators for scalar and vector streams, a
covariance-matrix accumulator and batch location estimators.

Public API:
    SampleMoments, PopulationMoments          - scalar accumulators
    SampleMomentsMV, PopulationMomentsMV      - per-coordinate accumulators
    SampleCovariance, PopulationCovariance    - covariance matrices
    mean, median, trimmed_mean, trimmed_mean_ratio
"""

from pystreamstats.moments.accumulator import (
    MomentAccumulator,
    SampleMoments,
    PopulationMoments,
    IdentityMoments,
)
from pystreamstats.moments.multivariate import (
    MultivariateAccumulator,
    SampleMomentsMV,
    PopulationMomentsMV,
    IdentityMomentsMV,
)
from pystreamstats.moments.covariance import (
    CovarianceAccumulator,
    SampleCovariance,
    PopulationCovariance,
)
from pystreamstats.moments.quantiles import (
    mean,
    median,
    trimmed_mean,
    trimmed_mean_ratio,
)

__all__ = [
    "MomentAccumulator",
    "SampleMoments",
    "PopulationMoments",
    "IdentityMoments",
    "MultivariateAccumulator",
    "SampleMomentsMV",
    "PopulationMomentsMV",
    "IdentityMomentsMV",
    "CovarianceAccumulator",
    "SampleCovariance",
    "PopulationCovariance",
    "mean",
    "median",
    "trimmed_mean",
    "trimmed_mean_ratio",
]
