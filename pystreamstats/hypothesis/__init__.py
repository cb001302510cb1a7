"""
Test statistics.

Statistics combine streaming accumulators with sampling distributions
to produce values, p-values, critical values, power and type II error
probabilities.

Public API:
    t_test(x, y)           - Student's / Welch's t-test (one-sample, two-sample, paired)
    var_test(x, y)         - F-test to compare two variances
    levene_test(*groups)   - Levene's test for homogeneity of variance
    chisq_test(x)          - Pearson's chi-squared test (independence, GOF)
    ks_test(x, reference)  - One-sample Kolmogorov-Smirnov test
"""

from pystreamstats.hypothesis.solvers import (
    t_test, var_test, levene_test, chisq_test, ks_test,
)
from pystreamstats.hypothesis.base import Statistic
from pystreamstats.hypothesis.t_statistics import (
    StudentsTStatistic,
    TwoSampleTStatistic,
    OneSampleTStatistic,
    PairedDifferenceTStatistic,
    SlopeTStatistic,
)
from pystreamstats.hypothesis.welch import WelchTStatistic
from pystreamstats.hypothesis.f_statistics import (
    FStatistic,
    VarianceRatioStatistic,
    LeveneStatistic,
)
from pystreamstats.hypothesis.chi_square import ChiSquareStatistic
from pystreamstats.hypothesis.kolmogorov_smirnov import KolmogorovSmirnovStatistic
from pystreamstats.hypothesis._common import StatisticParams, VALID_MODES
from pystreamstats.hypothesis.solution import StatisticSolution

__all__ = [
    "t_test",
    "var_test",
    "levene_test",
    "chisq_test",
    "ks_test",
    "Statistic",
    "StudentsTStatistic",
    "TwoSampleTStatistic",
    "OneSampleTStatistic",
    "PairedDifferenceTStatistic",
    "SlopeTStatistic",
    "WelchTStatistic",
    "FStatistic",
    "VarianceRatioStatistic",
    "LeveneStatistic",
    "ChiSquareStatistic",
    "KolmogorovSmirnovStatistic",
    "StatisticParams",
    "VALID_MODES",
    "StatisticSolution",
]
