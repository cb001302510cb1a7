"""
Round-trip tests for the shared inverse machinery.

For every family, P(P^-1(p)) ~= p and Q(Q^-1(q)) ~= q across the unit
interval, and A(A^-1(a)) ~= a where the family is symmetric.
"""

import math
import sys

import pytest

from pystreamstats.core.exceptions import ValidationError
from pystreamstats.distributions import (
    ChiSquareDistribution,
    FDistribution,
    GaussianDistribution,
    KolmogorovDistribution,
    StudentsTDistribution,
)


PROBABILITIES = [0.001, 0.25, 0.5, 0.75, 0.999]

DISTRIBUTIONS = [
    GaussianDistribution(3.0, 2.0),
    ChiSquareDistribution(1),
    ChiSquareDistribution(6),
    ChiSquareDistribution(4, 3.5),
    FDistribution(2, 3),
    FDistribution(5, 17, 2.3),
    StudentsTDistribution(1),
    StudentsTDistribution(8),
    StudentsTDistribution(12, 1.5),
    KolmogorovDistribution(10),
    KolmogorovDistribution(400),
]


@pytest.mark.parametrize("dist", DISTRIBUTIONS, ids=repr)
@pytest.mark.parametrize("p", PROBABILITIES)
class TestRoundTrip:

    def test_cdf(self, dist, p):
        x = dist.inverse_cdf(p)
        assert dist.is_in_domain(x)
        assert dist.cdf(x) == pytest.approx(p, rel=1e-9)

    def test_complementary_cdf(self, dist, p):
        x = dist.inverse_complementary_cdf(p)
        assert dist.complementary_cdf(x) == pytest.approx(p, rel=1e-9)

    def test_inverses_agree(self, dist, p):
        assert dist.inverse_cdf(p) == pytest.approx(dist.inverse_complementary_cdf(1.0 - p), rel=1e-7)


@pytest.mark.parametrize("dist", [GaussianDistribution(), StudentsTDistribution(1), StudentsTDistribution(5)], ids=repr)
@pytest.mark.parametrize("a", [0.01, 0.5, 0.95, 0.999])
def test_interval_round_trip(dist, a):
    x = dist.inverse_interval_probability(a)
    assert x >= 0.0
    assert dist.interval_probability(x) == pytest.approx(a, rel=1e-10)


class TestEndpoints:

    def test_closed_finite_lower(self):
        assert ChiSquareDistribution(3).inverse_cdf(0.0) == 0.0
        assert ChiSquareDistribution(3).inverse_complementary_cdf(1.0) == 0.0

    def test_open_infinite_upper(self):
        assert FDistribution(2, 3).inverse_cdf(1.0) == sys.float_info.max
        assert StudentsTDistribution(4).inverse_cdf(0.0) == -sys.float_info.max

    def test_interval_endpoints(self):
        dist = StudentsTDistribution(4)
        assert dist.inverse_interval_probability(0.0) == 0.0
        assert dist.inverse_interval_probability(1.0) == sys.float_info.max

    @pytest.mark.parametrize("p", [-0.1, 1.1, math.nan])
    def test_probability_validated(self, p):
        with pytest.raises(ValidationError):
            ChiSquareDistribution(2).inverse_cdf(p)
        with pytest.raises(ValidationError):
            ChiSquareDistribution(2).inverse_complementary_cdf(p)
