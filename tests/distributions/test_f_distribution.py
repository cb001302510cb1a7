"""
Tests for the F distribution, central and noncentral.
"""

import math

import pytest
from scipy import stats

from pystreamstats.core.exceptions import UnsupportedOperationError, ValidationError
from pystreamstats.distributions import DistributionKind, FDistribution


class TestCentral:

    def test_tabulated(self):
        dist = FDistribution(2, 3)
        assert dist.density(1.5) == pytest.approx(0.1767766952966368811, rel=1e-13)
        assert dist.cdf(1.5) == pytest.approx(0.6464466094067262378, rel=1e-13)

    @pytest.mark.parametrize("nu1,nu2", [(1, 1), (1, 10), (3, 26), (5, 2), (20, 40)])
    @pytest.mark.parametrize("x", [0.05, 0.9, 2.97515, 12.0])
    def test_matches_scipy(self, nu1, nu2, x):
        dist = FDistribution(nu1, nu2)
        assert dist.cdf(x) == pytest.approx(stats.f.cdf(x, nu1, nu2), rel=1e-11)
        assert dist.complementary_cdf(x) == pytest.approx(stats.f.sf(x, nu1, nu2), rel=1e-11)
        assert dist.density(x) == pytest.approx(stats.f.pdf(x, nu1, nu2), rel=1e-11)

    def test_critical_value(self):
        """Levene critical value for (3, 26) degrees of freedom at alpha 0.05."""
        assert FDistribution(3, 26).inverse_complementary_cdf(0.05) == pytest.approx(2.97515, abs=1e-5)

    def test_density_at_zero(self):
        assert FDistribution(1, 5).density(0.0) == math.inf
        assert FDistribution(2, 5).density(0.0) == 1.0
        assert FDistribution(3, 5).density(0.0) == 0.0

    def test_boundaries(self):
        dist = FDistribution(4, 7)
        assert dist.cdf(0.0) == 0.0
        assert dist.complementary_cdf(-3.0) == 1.0
        assert dist.cdf(math.inf) == 1.0
        assert dist.complementary_cdf(math.inf) == 0.0
        assert dist.density(math.inf) == 0.0

    def test_asymmetric(self):
        with pytest.raises(UnsupportedOperationError):
            FDistribution(3, 4).A(1.0)


class TestNoncentral:

    def test_tabulated(self):
        dist = FDistribution(2, 3, 2.3)
        assert dist.density(1.5) == pytest.approx(0.191248271031184193579, rel=1e-12)
        assert dist.cdf(1.5) == pytest.approx(0.39989107486236300713, rel=1e-12)

    @pytest.mark.parametrize("nu1,nu2,lam", [(1, 8, 0.7), (3, 12, 4.0), (6, 30, 15.0)])
    @pytest.mark.parametrize("x", [0.3, 1.7, 6.0])
    def test_matches_scipy(self, nu1, nu2, lam, x):
        dist = FDistribution(nu1, nu2, lam)
        assert dist.cdf(x) == pytest.approx(stats.ncf.cdf(x, nu1, nu2, lam), rel=1e-8)
        assert dist.complementary_cdf(x) == pytest.approx(stats.ncf.sf(x, nu1, nu2, lam), rel=1e-8)
        assert dist.density(x) == pytest.approx(stats.ncf.pdf(x, nu1, nu2, lam), rel=1e-8)

    def test_noncentrality_shifts_mass_right(self):
        assert FDistribution(3, 10, 5.0).Q(2.0) > FDistribution(3, 10).Q(2.0)

    def test_density_at_zero_nu2(self):
        assert FDistribution(2, 5, 4.0).density(0.0) == pytest.approx(math.exp(-2.0))


class TestConstruction:

    def test_bad_dof(self):
        with pytest.raises(ValidationError, match="dof2"):
            FDistribution(3, 0)

    def test_negative_noncentrality(self):
        with pytest.raises(ValidationError, match="noncentrality"):
            FDistribution(3, 4, -0.1)

    def test_properties(self):
        dist = FDistribution(3, 4, 2.0)
        assert dist.kind is DistributionKind.F
        assert (dist.dof1, dist.dof2, dist.noncentrality) == (3, 4, 2.0)
        assert not dist.is_central
        assert repr(dist) == "FDistribution(dof1=3, dof2=4, noncentrality=2)"
