"""
Solver functions for test statistics.

Provides R-named functions: t_test(), var_test(), levene_test(),
chisq_test(), ks_test(). Each builds the matching statistic and returns
its StatisticSolution.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import ArrayLike

from pystreamstats.core.exceptions import ValidationError
from pystreamstats.core.validation import check_array
from pystreamstats.distributions.base import ProbabilityDistribution
from pystreamstats.distributions.gaussian import GaussianDistribution
from pystreamstats.hypothesis.chi_square import ChiSquareStatistic
from pystreamstats.hypothesis.f_statistics import (
    LeveneCenter,
    LeveneStatistic,
    VarianceRatioStatistic,
)
from pystreamstats.hypothesis.kolmogorov_smirnov import KolmogorovSmirnovStatistic
from pystreamstats.hypothesis.solution import StatisticSolution
from pystreamstats.hypothesis.t_statistics import (
    OneSampleTStatistic,
    PairedDifferenceTStatistic,
    TwoSampleTStatistic,
)
from pystreamstats.hypothesis.welch import WelchTStatistic


def t_test(
    x: ArrayLike,
    y: ArrayLike | None = None,
    *,
    mu: float = 0.0,
    paired: bool = False,
    var_equal: bool = True,
    mode: str | None = None,
    alpha: float = 0.05,
) -> StatisticSolution:
    """
    Student's t-test.

    Parameters
    ----------
    x : array-like
        Sample data. 1D numeric vector.
    y : array-like or None
        Optional second sample for a two-sample or paired test.
    mu : float
        Hypothesized mean (one-sample) or mean difference (paired).
        Default 0.
    paired : bool
        If True, perform a paired t-test. x and y must have same length.
    var_equal : bool
        If True (default), use the pooled-variance statistic. If False,
        use Welch's statistic with truncated Welch-Satterthwaite degrees
        of freedom.
    mode : str or None
        "positive", "negative", "two.sided", "one.sided"; None resolves
        to "two.sided".
    alpha : float
        Significance level for the critical value. Default 0.05.

    Returns
    -------
    StatisticSolution
    """
    if y is None:
        if paired:
            raise ValidationError("y is required for a paired t-test")
        stat = OneSampleTStatistic(x, mu=mu)
    elif paired:
        stat = PairedDifferenceTStatistic(x, y, mu=mu)
    else:
        if mu != 0.0:
            raise ValidationError(
                f"mu: two-sample statistics test a zero difference, got {mu}"
            )
        stat = TwoSampleTStatistic(x, y) if var_equal else WelchTStatistic(x, y)
    return stat.summarize(mode=mode, alpha=alpha)


def var_test(
    x: ArrayLike,
    y: ArrayLike,
    *,
    mode: str | None = None,
    alpha: float = 0.05,
) -> StatisticSolution:
    """
    F-test to compare two variances.

    The statistic is var(x) / var(y) with (n_x - 1, n_y - 1) degrees of
    freedom. With the default mode the p-value is the tail on the side
    of the observed ratio.
    """
    return VarianceRatioStatistic(x, y).summarize(mode=mode, alpha=alpha)


def levene_test(
    *groups: ArrayLike,
    center: LeveneCenter = "median",
    mode: str | None = "positive",
    alpha: float = 0.05,
) -> StatisticSolution:
    """
    Levene's test for homogeneity of variance across two or more groups.

    Parameters
    ----------
    *groups : array-like
        One 1D sample per group.
    center : str
        "median" (default, Brown-Forsythe), "mean" or "trimmed".
    mode : str
        Defaults to "positive": large W indicates unequal variances.
    """
    return LeveneStatistic(list(groups), center=center).summarize(mode=mode, alpha=alpha)


def chisq_test(
    observed: ArrayLike,
    expected: ArrayLike | None = None,
    *,
    constraints: int = 1,
    mode: str | None = "positive",
    alpha: float = 0.05,
) -> StatisticSolution:
    """
    Pearson's chi-squared test.

    Parameters
    ----------
    observed : array-like
        A 2D contingency table (test of independence), or a 1D vector of
        observed counts (goodness of fit).
    expected : array-like or None
        Expected counts for a 1D input. None means equal expected counts
        (the mean of ``observed``). Ignored for tables.
    constraints : int
        Constraints on a 1D input. The default 1 accounts for the fixed
        total count.
    """
    arr = check_array(observed, "observed")
    if arr.ndim == 2:
        if expected is not None:
            raise ValidationError("expected: not used with a contingency table")
        stat = ChiSquareStatistic.contingency(arr)
    else:
        if expected is None:
            expected = float(np.mean(arr)) if arr.size else 0.0
        stat = ChiSquareStatistic(arr, expected)
        stat.set_constraints(constraints)
    return stat.summarize(mode=mode, alpha=alpha)


def ks_test(
    x: ArrayLike,
    reference: ProbabilityDistribution | Callable[[float], float] | None = None,
    *,
    mode: str | None = "positive",
    alpha: float = 0.05,
) -> StatisticSolution:
    """
    One-sample Kolmogorov-Smirnov test.

    Parameters
    ----------
    x : array-like
        Numeric vector of observations.
    reference : ProbabilityDistribution, callable or None
        Reference distribution or cdf. Defaults to the standard normal.
    """
    if reference is None:
        reference = GaussianDistribution()
    return KolmogorovSmirnovStatistic(reference, x).summarize(mode=mode, alpha=alpha)
