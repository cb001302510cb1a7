"""
Tests for the Kolmogorov distribution of D_n.

Validates:
    - Exact cdf against scipy.stats.kstwo
    - Asymptotic form against scipy.stats.kstwobign
    - Switching between forms via the global limit and per-instance limit
    - Closed [0, 1] domain
"""

import math

import pytest
from scipy import stats

from pystreamstats.core.exceptions import UnsupportedOperationError, ValidationError
from pystreamstats.distributions import DistributionKind, KolmogorovDistribution
from pystreamstats.distributions.kolmogorov import exact_cdf, limiting_cdf


class TestExact:

    @pytest.mark.parametrize("n", [1, 2, 5, 10, 40])
    @pytest.mark.parametrize("d", [0.05, 0.2, 0.31, 0.6, 0.95])
    def test_matches_scipy(self, n, d):
        assert KolmogorovDistribution(n).cdf(d) == pytest.approx(stats.kstwo.cdf(d, n), rel=1e-9, abs=1e-300)

    def test_large_n_rescaling(self):
        """n = 200 exercises the 1e140 rescaling of the recurrence.

        scipy.stats.kstwo drifts by ~2e-7 above n = 140, so the reference
        is a 60-digit evaluation of the same matrix recurrence.
        """
        assert exact_cdf(0.08, 200) == pytest.approx(0.85360368342571373, rel=1e-12)

    def test_single_observation(self):
        """D_1 is uniform on [1/2, 1]."""
        dist = KolmogorovDistribution(1)
        assert dist.cdf(0.5) == pytest.approx(0.0, abs=1e-15)
        assert dist.cdf(0.75) == pytest.approx(0.5, rel=1e-12)

    def test_density_by_difference(self):
        dist = KolmogorovDistribution(10)
        assert dist.density(0.27) == pytest.approx(stats.kstwo.pdf(0.27, 10), rel=1e-5)

    def test_complementary(self):
        dist = KolmogorovDistribution(12)
        assert dist.Q(0.25) == pytest.approx(stats.kstwo.sf(0.25, 12), rel=1e-9)


class TestLimitingForm:

    @pytest.mark.parametrize("xp", [0.3, 0.5, 0.8, 1.36, 2.5])
    def test_matches_kstwobign(self, xp):
        n = 100
        assert limiting_cdf(xp / math.sqrt(n), n) == pytest.approx(stats.kstwobign.cdf(xp), rel=1e-12)

    def test_large_n_uses_limit(self):
        """n * x above 256 switches to the asymptotic form."""
        n = 5000
        x = 0.06
        dist = KolmogorovDistribution(n)
        assert dist.cdf(x) == limiting_cdf(x, n)
        assert dist.cdf(x) == pytest.approx(stats.kstwobign.cdf(x * math.sqrt(n)), rel=1e-12)

    def test_global_limit(self, kolmogorov_limit):
        n, x = 50, 0.2
        exact = KolmogorovDistribution(n).cdf(x)
        kolmogorov_limit(5.0)
        assert KolmogorovDistribution(n).limit == 5.0
        assert KolmogorovDistribution(n).cdf(x) == limiting_cdf(x, n)
        assert KolmogorovDistribution(n).cdf(x) != exact

    def test_instance_limit_overrides_global(self, kolmogorov_limit):
        kolmogorov_limit(5.0)
        dist = KolmogorovDistribution(50, limit=1000.0)
        assert dist.limit == 1000.0
        assert dist.cdf(0.2) == exact_cdf(0.2, 50)

    def test_limiting_density(self, kolmogorov_limit):
        kolmogorov_limit(1.0)
        n = 100
        for xp in (0.4, 1.2):
            expected = stats.kstwobign.pdf(xp) * math.sqrt(n)
            assert KolmogorovDistribution(n).density(xp / math.sqrt(n)) == pytest.approx(expected, rel=1e-9)


class TestDomain:

    def test_closed_unit_interval(self):
        dist = KolmogorovDistribution(8)
        assert (dist.domain_min, dist.domain_max) == (0.0, 1.0)
        assert dist.domain_min_closed and dist.domain_max_closed
        assert dist.cdf(0.0) == 0.0
        assert dist.cdf(1.0) == 1.0
        assert dist.cdf(1.5) == 1.0
        assert dist.inverse_cdf(0.0) == 0.0
        assert dist.inverse_cdf(1.0) == 1.0

    def test_inverse(self):
        dist = KolmogorovDistribution(10)
        assert dist.inverse_complementary_cdf(0.05) == pytest.approx(stats.kstwo.isf(0.05, 10), rel=1e-9)

    def test_asymmetric(self):
        with pytest.raises(UnsupportedOperationError):
            KolmogorovDistribution(5).A(0.3)

    def test_bad_arguments(self):
        with pytest.raises(ValidationError):
            KolmogorovDistribution(0)
        with pytest.raises(ValidationError, match="limit"):
            KolmogorovDistribution(5, limit=-1.0)

    def test_kind(self):
        dist = KolmogorovDistribution(7)
        assert dist.kind is DistributionKind.KOLMOGOROV
        assert dist.n == 7
