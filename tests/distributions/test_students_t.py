"""
Tests for Student's t distribution.

Validates:
    - Central trigonometric series against scipy.stats.t for odd/even dof
    - Interval probability A and its inverse
    - Noncentral cdf/density against scipy.stats.nct, both signs of t and mu
"""

import math

import pytest
from scipy import stats

from pystreamstats.core.exceptions import UnsupportedOperationError, ValidationError
from pystreamstats.distributions import DistributionKind, StudentsTDistribution
from pystreamstats.distributions.students_t import interval_probability


# ═══════════════════════════════════════════════════════════════════════
# Central
# ═══════════════════════════════════════════════════════════════════════


class TestCentral:

    @pytest.mark.parametrize("nu", [1, 2, 3, 4, 5, 6, 9, 30])
    @pytest.mark.parametrize("t", [-3.2, -0.4, 0.0, 1.1, 2.447, 8.0])
    def test_matches_scipy(self, nu, t):
        dist = StudentsTDistribution(nu)
        assert dist.cdf(t) == pytest.approx(stats.t.cdf(t, nu), rel=1e-12)
        assert dist.complementary_cdf(t) == pytest.approx(stats.t.sf(t, nu), rel=1e-11)
        assert dist.density(t) == pytest.approx(stats.t.pdf(t, nu), rel=1e-12)

    def test_interval_probability(self):
        dist = StudentsTDistribution(6)
        expected = stats.t.cdf(2.0, 6) - stats.t.cdf(-2.0, 6)
        assert dist.A(2.0) == pytest.approx(expected, rel=1e-13)

    def test_interval_probability_is_odd(self):
        assert interval_probability(-1.5, 7) == pytest.approx(-interval_probability(1.5, 7))

    def test_cauchy(self):
        assert StudentsTDistribution(1).cdf(1.0) == pytest.approx(0.75, rel=1e-15)

    def test_two_sided_critical_value(self):
        dist = StudentsTDistribution(6)
        assert dist.inverse_interval_probability(0.95) == pytest.approx(stats.t.ppf(0.975, 6), rel=1e-10)

    def test_symmetry(self):
        dist = StudentsTDistribution(4)
        assert dist.is_symmetric(0.0)
        assert not dist.is_symmetric(1.0)
        assert dist.P(-1.3) == pytest.approx(dist.Q(1.3), rel=1e-15)

    def test_infinite_arguments(self):
        dist = StudentsTDistribution(5)
        assert dist.cdf(math.inf) == 1.0
        assert dist.cdf(-math.inf) == 0.0
        assert dist.density(math.inf) == 0.0


# ═══════════════════════════════════════════════════════════════════════
# Noncentral
# ═══════════════════════════════════════════════════════════════════════


class TestNoncentral:

    @pytest.mark.parametrize("nu,mu", [(3, 1.0), (8, -2.0), (15, 0.5), (25, 3.0)])
    @pytest.mark.parametrize("t", [-1.5, 0.3, 2.0, 4.5])
    def test_matches_scipy(self, nu, mu, t):
        dist = StudentsTDistribution(nu, mu)
        assert dist.cdf(t) == pytest.approx(stats.nct.cdf(t, nu, mu), rel=1e-8, abs=1e-14)
        assert dist.complementary_cdf(t) == pytest.approx(stats.nct.sf(t, nu, mu), rel=1e-8, abs=1e-14)
        assert dist.density(t) == pytest.approx(stats.nct.pdf(t, nu, mu), rel=1e-8)

    def test_not_symmetric(self):
        dist = StudentsTDistribution(5, 1.0)
        assert not dist.is_symmetric(0.0)
        assert not dist.is_symmetric(1.0)
        with pytest.raises(UnsupportedOperationError):
            dist.A(1.0)

    def test_power_increases_with_shift(self):
        crit = StudentsTDistribution(10).inverse_complementary_cdf(0.05)
        assert StudentsTDistribution(10, 3.0).Q(crit) > StudentsTDistribution(10, 1.0).Q(crit)

    def test_zero_shift_is_central(self):
        assert StudentsTDistribution(5, 0.0).is_central


class TestConstruction:

    def test_bad_dof(self):
        with pytest.raises(ValidationError, match="dof"):
            StudentsTDistribution(0)

    def test_bad_noncentrality(self):
        with pytest.raises(ValidationError, match="noncentrality"):
            StudentsTDistribution(3, math.nan)

    def test_kind(self):
        assert StudentsTDistribution(3).kind is DistributionKind.STUDENTS_T
