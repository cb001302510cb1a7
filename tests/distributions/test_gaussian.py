"""
Tests for the Gaussian distribution.

Reference values from scipy.stats.norm.
"""

import math
import sys

import pytest
from scipy import stats

from pystreamstats.core.exceptions import ValidationError
from pystreamstats.distributions import DistributionKind, GaussianDistribution


class TestGaussian:

    @pytest.mark.parametrize("x", [-4.0, -1.3, 0.0, 0.7, 2.5, 9.0])
    def test_cdf_matches_scipy(self, x):
        dist = GaussianDistribution(1.0, 2.0)
        ref = stats.norm(1.0, 2.0)
        assert dist.cdf(x) == pytest.approx(ref.cdf(x), rel=1e-14)
        assert dist.complementary_cdf(x) == pytest.approx(ref.sf(x), rel=1e-14)
        assert dist.density(x) == pytest.approx(ref.pdf(x), rel=1e-14)

    def test_far_tail_keeps_precision(self):
        """Q is computed directly, not as 1 - P."""
        dist = GaussianDistribution()
        assert dist.Q(10.0) == pytest.approx(stats.norm.sf(10.0), rel=1e-12)
        assert dist.Q(10.0) > 0.0

    def test_interval_probability(self):
        dist = GaussianDistribution(5.0, 3.0)
        assert dist.A(3.0) == pytest.approx(stats.norm.cdf(1.0) - stats.norm.cdf(-1.0), rel=1e-14)
        assert dist.A(0.0) == 0.0

    def test_inverses(self):
        dist = GaussianDistribution(-2.0, 0.5)
        assert dist.inverse_cdf(0.975) == pytest.approx(stats.norm.ppf(0.975, -2.0, 0.5), rel=1e-14)
        assert dist.inverse_complementary_cdf(0.025) == pytest.approx(dist.inverse_cdf(0.975), rel=1e-14)
        assert dist.inverse_interval_probability(0.95) == pytest.approx(0.5 * 1.959963984540054, rel=1e-12)

    def test_open_endpoints(self):
        dist = GaussianDistribution()
        assert dist.inverse_cdf(0.0) == -sys.float_info.max
        assert dist.inverse_cdf(1.0) == sys.float_info.max
        assert dist.inverse_complementary_cdf(0.0) == sys.float_info.max

    def test_symmetry(self):
        dist = GaussianDistribution(3.0)
        assert dist.is_symmetric(3.0)
        assert not dist.is_symmetric(0.0)

    def test_domain(self):
        dist = GaussianDistribution()
        assert dist.domain_min == -math.inf
        assert dist.domain_max == math.inf
        assert not dist.domain_min_closed
        assert dist.is_in_domain(1e300)

    def test_kind(self):
        assert GaussianDistribution().kind is DistributionKind.GAUSSIAN

    @pytest.mark.parametrize("sd", [0.0, -1.0, math.inf, math.nan])
    def test_bad_sd(self, sd):
        with pytest.raises(ValidationError, match="sd"):
            GaussianDistribution(0.0, sd)

    def test_bad_probability(self):
        with pytest.raises(ValidationError):
            GaussianDistribution().inverse_cdf(1.5)
