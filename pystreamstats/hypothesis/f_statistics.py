"""
F statistics.

    FStatistic              shared F machinery (abstract)
    VarianceRatioStatistic  ratio of two sample variances
    LeveneStatistic         Levene / Brown-Forsythe test for equal variances
"""

from __future__ import annotations

import math
from typing import Any, Literal

import numpy as np
from numpy.typing import ArrayLike

from pystreamstats.core.compute.summation import KahanSum
from pystreamstats.core.exceptions import InsufficientDataError, ValidationError
from pystreamstats.distributions.f import FDistribution
from pystreamstats.hypothesis.base import Statistic
from pystreamstats.hypothesis.t_statistics import _as_vector
from pystreamstats.moments.accumulator import PopulationMoments, SampleMoments
from pystreamstats.moments.quantiles import median, trimmed_mean


LeveneCenter = Literal["mean", "median", "trimmed"]

VALID_CENTERS = ("mean", "median", "trimmed")


class FStatistic(Statistic):
    """
    Statistic whose null distribution is F(dof1, dof2).

    Subclasses provide ``degrees_of_freedom`` as a (dof1, dof2) pair and
    ``numerator_size``, the number of squared terms in the numerator.
    """

    statistic_name = "F"

    @property
    def numerator_size(self) -> int:
        """Number of terms contributing to the numerator sum of squares."""
        return self.degrees_of_freedom[0]

    def distribution(self, noncentrality: float | None = None) -> FDistribution:
        dof1, dof2 = self.degrees_of_freedom
        for dof in (dof1, dof2):
            if dof <= 0:
                raise InsufficientDataError(
                    f"{type(self).__name__}: degrees of freedom {dof} must be positive",
                    required=1,
                    actual=dof,
                )
        if noncentrality is not None and noncentrality < 0:
            raise ValidationError(
                f"noncentrality: expected value >= 0, got {noncentrality}"
            )
        if not noncentrality:
            return FDistribution(dof1, dof2)
        return FDistribution(dof1, dof2, noncentrality)

    def noncentrality(self, *effects: float) -> float:
        """
        Noncentrality parameter from standardized effects.

        A single effect is applied to every numerator term; otherwise one
        effect per numerator term is required. The result is the
        compensated sum of the squared effects.

        Raises:
            ValidationError: If no effects are given or their number does
                not match ``numerator_size``
        """
        size = self.numerator_size
        if len(effects) == 0:
            raise ValidationError("effects: at least one effect size is required")
        if len(effects) == 1:
            terms = [float(effects[0])] * size
        elif len(effects) == size:
            terms = [float(e) for e in effects]
        else:
            raise ValidationError(
                f"effects: expected 1 or {size} effect sizes, got {len(effects)}"
            )
        acc = KahanSum()
        for e in terms:
            acc.add(e * e)
        return acc.total

    def _parameter(self) -> dict[str, float]:
        dof1, dof2 = self.degrees_of_freedom
        return {"num df": float(dof1), "denom df": float(dof2)}


# ========================================================================
# Ratio of variances
# ========================================================================


class VarianceRatioStatistic(FStatistic):
    """
    F statistic s1^2 / s2^2 comparing the variances of two samples.

    Args:
        x: Optional first sample (numerator)
        y: Optional second sample (denominator)
    """

    method = "F test to compare two variances"

    def __init__(self, x: ArrayLike | None = None, y: ArrayLike | None = None):
        super().__init__()
        self._s1 = SampleMoments()
        self._s2 = SampleMoments()
        if x is not None:
            self._s1.extend(_as_vector(x, "x"))
        if y is not None:
            self._s2.extend(_as_vector(y, "y"))
        self.data_name = "x and y"

    @classmethod
    def from_summary(
        cls,
        variance1: float, n1: int,
        variance2: float, n2: int,
        mean1: float = 0.0,
        mean2: float = 0.0,
    ) -> "VarianceRatioStatistic":
        """Statistic from two sample variances and sizes."""
        stat = cls()
        stat._s1 = SampleMoments.from_summary(mean1, variance1, n1)
        stat._s2 = SampleMoments.from_summary(mean2, variance2, n2)
        stat.data_name = "summary statistics"
        return stat

    def add1(self, value: float) -> None:
        self._s1.add(value)

    def add2(self, value: float) -> None:
        self._s2.add(value)

    @property
    def degrees_of_freedom(self) -> tuple[int, int]:
        return (self._s1.count - 1, self._s2.count - 1)

    @property
    def numerator_size(self) -> int:
        return self._s1.count

    @property
    def value(self) -> float:
        v2 = self._s2.variance
        if v2 == 0.0:
            self._warn("denominator sample is essentially constant")
            return math.nan
        return self._s1.variance / v2

    def _estimate(self) -> dict[str, float]:
        return {"ratio of variances": self.value}


# ========================================================================
# Levene
# ========================================================================


def _center(group: np.ndarray, center: str) -> float:
    if center == "mean":
        return PopulationMoments().extend(group).mean
    if center == "median":
        return median(group)
    return trimmed_mean(group, 10)


class LeveneStatistic(FStatistic):
    """
    Levene's statistic for homogeneity of variance.

        W = (N - k) / (k - 1) * sum_i n_i (zbar_i - zbar)^2
                              / sum_i sum_j (z_ij - zbar_i)^2

    where z_ij = |y_ij - c_i| and c_i is the center of group i. With
    ``center="median"`` this is the Brown-Forsythe variant, the most
    robust to non-normal data.

    Args:
        groups: Two or more 1-D samples
        center: "mean", "median" or "trimmed" (10% trimmed mean)
    """

    method = "Levene's Test for Homogeneity of Variance"

    def __init__(self, groups: list[ArrayLike], center: LeveneCenter = "median"):
        super().__init__()
        if center not in VALID_CENTERS:
            raise ValidationError(
                f"center: expected one of {VALID_CENTERS}, got {center!r}"
            )
        if len(groups) < 2:
            raise ValidationError(
                f"groups: need at least 2 groups, got {len(groups)}"
            )
        self._center = center
        arrays = [_as_vector(g, f"groups[{i}]") for i, g in enumerate(groups)]
        for i, arr in enumerate(arrays):
            if arr.shape[0] == 0:
                raise InsufficientDataError(f"groups[{i}]: empty group", required=1, actual=0)

        self._k = len(arrays)
        self._n_total = int(sum(a.shape[0] for a in arrays))

        group_stats = []
        for arr in arrays:
            z = np.abs(arr - _center(arr, center))
            group_stats.append(PopulationMoments.from_array(z))

        overall = PopulationMoments.identity()
        for zs in group_stats:
            overall = overall.add_all(zs)

        between = KahanSum()
        within = KahanSum()
        for zs in group_stats:
            d = zs.mean - overall.mean
            between.add(zs.count * d * d)
            within.add(zs.sum_of_squares)

        self._between = between.total
        self._within = within.total
        self._group_sizes = tuple(zs.count for zs in group_stats)
        self.data_name = f"{self._k} groups"

    @property
    def center(self) -> str:
        return self._center

    @property
    def group_sizes(self) -> tuple[int, ...]:
        return self._group_sizes

    @property
    def degrees_of_freedom(self) -> tuple[int, int]:
        return (self._k - 1, self._n_total - self._k)

    @property
    def value(self) -> float:
        dof1, dof2 = self.degrees_of_freedom
        if self._within == 0.0:
            if self._between == 0.0:
                self._warn("all groups have zero dispersion about their centers")
                return math.nan
            return math.inf
        return (dof2 / dof1) * (self._between / self._within)

    def _extras(self) -> dict[str, Any]:
        return {"center": self._center, "group_sizes": self._group_sizes}
