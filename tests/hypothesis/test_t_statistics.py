"""
Tests for Student's t statistics.

Validates:
    - Two-sample pooled statistic (hand-checked scenario and scipy.stats.ttest_ind)
    - One-sample and paired statistics against scipy.stats
    - Slope statistic against scipy.stats.linregress
    - Summary constructors, incremental feeding, noncentrality
    - Degenerate data warnings
"""

import math

import numpy as np
import pytest
from scipy import stats

from pystreamstats.core.exceptions import InsufficientDataError, ValidationError
from pystreamstats.hypothesis import (
    OneSampleTStatistic,
    PairedDifferenceTStatistic,
    SlopeTStatistic,
    TwoSampleTStatistic,
)


A = [10.0, 12.0, 11.0, 13.0]
B = [20.0, 22.0, 21.0, 23.0]


# ═══════════════════════════════════════════════════════════════════════
# Two-sample pooled
# ═══════════════════════════════════════════════════════════════════════


class TestTwoSample:

    def test_scenario(self):
        stat = TwoSampleTStatistic(A, B)
        assert stat.degrees_of_freedom == 6
        assert stat.value == pytest.approx(-10.0 / math.sqrt(5.0 / 6.0), rel=1e-13)
        assert stat.p_value() < 0.001
        assert stat.resolve_mode() == "two.sided"

    def test_matches_scipy(self, rng):
        x = rng.normal(0.0, 1.0, size=15)
        y = rng.normal(0.4, 1.0, size=22)
        ref = stats.ttest_ind(x, y)
        stat = TwoSampleTStatistic(x, y)
        assert stat.value == pytest.approx(ref.statistic, rel=1e-12)
        assert stat.p_value("two.sided") == pytest.approx(ref.pvalue, rel=1e-10)

    def test_incremental(self):
        stat = TwoSampleTStatistic()
        for a, b in zip(A, B):
            stat.add1(a)
            stat.add2(b)
        assert stat.value == pytest.approx(TwoSampleTStatistic(A, B).value, rel=1e-15)
        assert (stat.mean1, stat.mean2) == pytest.approx((11.5, 21.5))

    def test_from_summary(self):
        stat = TwoSampleTStatistic.from_summary(11.5, 5.0 / 3.0, 4, 21.5, 5.0 / 3.0, 4)
        assert stat.value == pytest.approx(TwoSampleTStatistic(A, B).value, rel=1e-13)
        assert stat.data_name == "summary statistics"

    def test_noncentrality_is_effect_over_standard_error(self):
        stat = TwoSampleTStatistic(A, B)
        se = math.sqrt(5.0 / 3.0) * math.sqrt(0.5)
        assert stat.noncentrality(2.0) == pytest.approx(2.0 / se, rel=1e-13)

    def test_noncentrality_needs_one_effect(self):
        with pytest.raises(ValidationError, match="one effect"):
            TwoSampleTStatistic(A, B).noncentrality(1.0, 2.0)

    def test_too_little_data(self):
        with pytest.raises(InsufficientDataError):
            TwoSampleTStatistic([1.0], [2.0]).value

    def test_constant_data_warns(self):
        stat = TwoSampleTStatistic([1.0, 1.0, 1.0], [1.0, 1.0])
        with pytest.warns(RuntimeWarning, match="constant"):
            assert math.isnan(stat.value)

    def test_estimate(self):
        sol = TwoSampleTStatistic(A, B).summarize()
        assert sol.estimate == pytest.approx({"mean of x": 11.5, "mean of y": 21.5})
        assert sol.parameter == {"df": 6.0}


# ═══════════════════════════════════════════════════════════════════════
# One sample and paired
# ═══════════════════════════════════════════════════════════════════════


class TestOneSample:

    def test_matches_scipy(self, normal_sample):
        ref = stats.ttest_1samp(normal_sample, 9.8)
        stat = OneSampleTStatistic(normal_sample, mu=9.8)
        assert stat.value == pytest.approx(ref.statistic, rel=1e-11)
        assert stat.p_value() == pytest.approx(ref.pvalue, rel=1e-9)
        assert stat.degrees_of_freedom == 199

    def test_from_summary(self):
        stat = OneSampleTStatistic.from_summary(1.0, 4.0, 16)
        assert stat.value == pytest.approx(2.0)
        assert stat.degrees_of_freedom == 15

    def test_from_summary_needs_two(self):
        with pytest.raises(InsufficientDataError):
            OneSampleTStatistic.from_summary(1.0, 4.0, 1)

    def test_streaming(self):
        stat = OneSampleTStatistic(mu=1.0)
        stat.add(2.0)
        stat.extend([3.0, 4.0])
        assert stat.count == 3
        assert stat.mean == pytest.approx(3.0)
        assert stat.value == pytest.approx(2.0 * math.sqrt(3.0))

    def test_noncentrality(self):
        stat = OneSampleTStatistic.from_summary(0.0, 9.0, 25)
        assert stat.noncentrality(0.6) == pytest.approx(1.0)

    def test_rejects_nan(self):
        with pytest.raises(ValidationError, match="NaN"):
            OneSampleTStatistic([1.0, math.nan, 2.0])


class TestPaired:

    def test_matches_scipy(self, rng):
        before = rng.normal(100.0, 10.0, size=12)
        after = before + rng.normal(2.0, 3.0, size=12)
        ref = stats.ttest_rel(before, after)
        stat = PairedDifferenceTStatistic(before, after)
        assert stat.value == pytest.approx(ref.statistic, rel=1e-11)
        assert stat.p_value() == pytest.approx(ref.pvalue, rel=1e-9)

    def test_pairs_and_differences_agree(self):
        x1 = [5.0, 7.0, 6.5, 9.0]
        x2 = [4.0, 7.5, 5.0, 6.0]
        by_pairs = PairedDifferenceTStatistic()
        for a, b in zip(x1, x2):
            by_pairs.add(a, b)
        by_diffs = PairedDifferenceTStatistic.from_differences(np.subtract(x1, x2))
        assert by_pairs.value == pytest.approx(by_diffs.value, rel=1e-15)
        assert by_pairs.value == pytest.approx(PairedDifferenceTStatistic(x1, x2).value, rel=1e-15)

    def test_length_mismatch(self):
        with pytest.raises(ValidationError):
            PairedDifferenceTStatistic([1.0, 2.0], [1.0])

    def test_one_sample_missing(self):
        with pytest.raises(ValidationError, match="both"):
            PairedDifferenceTStatistic([1.0, 2.0], None)

    def test_estimate(self):
        sol = PairedDifferenceTStatistic([3.0, 5.0, 4.0], [1.0, 2.0, 2.0]).summarize()
        assert sol.estimate == {"mean difference": pytest.approx(7.0 / 3.0)}
        assert sol.method == "Paired t-test"


# ═══════════════════════════════════════════════════════════════════════
# Regression slope
# ═══════════════════════════════════════════════════════════════════════


class TestSlope:

    @pytest.fixture
    def line(self, rng):
        x = np.linspace(0.0, 10.0, 25)
        y = 1.5 + 0.8 * x + rng.normal(0.0, 1.0, size=25)
        return x, y

    def test_matches_linregress(self, line):
        x, y = line
        ref = stats.linregress(x, y)
        stat = SlopeTStatistic(x, y)
        assert stat.slope == pytest.approx(ref.slope, rel=1e-12)
        assert stat.intercept == pytest.approx(ref.intercept, rel=1e-12)
        assert stat.value == pytest.approx(ref.slope / ref.stderr, rel=1e-10)
        assert stat.p_value() == pytest.approx(ref.pvalue, rel=1e-8)
        assert stat.degrees_of_freedom == 23

    def test_hypothesized_slope(self, line):
        x, y = line
        ref = stats.linregress(x, y)
        stat = SlopeTStatistic(x, y, beta0=0.8)
        assert stat.value == pytest.approx((ref.slope - 0.8) / ref.stderr, rel=1e-10)

    def test_from_summary(self, line):
        x, y = line
        fitted = SlopeTStatistic(x, y)
        stat = SlopeTStatistic.from_summary(
            fitted.slope, float(np.var(x)), fitted.residual_sum_of_squares, 25,
        )
        assert stat.value == pytest.approx(fitted.value, rel=1e-12)
        assert math.isnan(stat.intercept)

    def test_noncentrality_on_value_scale(self, line):
        x, y = line
        stat = SlopeTStatistic(x, y)
        assert stat.noncentrality(stat.slope) == pytest.approx(stat.value, rel=1e-14)

    def test_needs_three_points(self):
        with pytest.raises(InsufficientDataError):
            SlopeTStatistic([1.0, 2.0], [1.0, 2.0])

    def test_constant_x(self):
        with pytest.raises(ValidationError, match="zero variance"):
            SlopeTStatistic([2.0, 2.0, 2.0], [1.0, 2.0, 3.0])

    @pytest.mark.parametrize("kwargs,error,match", [
        ({"n": 2}, InsufficientDataError, "n must be"),
        ({"variance_x": 0.0}, ValidationError, "variance_x"),
        ({"ssr": -1.0}, ValidationError, "ssr"),
    ])
    def test_bad_summary(self, kwargs, error, match):
        args = {"beta": 1.0, "variance_x": 2.0, "ssr": 3.0, "n": 10}
        args.update(kwargs)
        with pytest.raises(error, match=match):
            SlopeTStatistic.from_summary(**args)
