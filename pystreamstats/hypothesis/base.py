"""
Base class for test statistics.

A statistic has a value, an optimal (null) value, a sampling distribution
under the null hypothesis and, where one exists, a noncentral
distribution parameterized by an effect size. p-values, critical values,
power and type II error probabilities are computed here from those
pieces; subclasses only describe the statistic itself.

Mode resolution is explicit: when no mode is given, "two.sided" is used
if the null distribution is symmetric about the optimal value and
"one.sided" otherwise.
"""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from typing import Any

from pystreamstats.core.exceptions import (
    UnsupportedOperationError,
    ValidationError,
)
from pystreamstats.core.result import Result
from pystreamstats.core.compute.timing import Timer
from pystreamstats.distributions.base import ProbabilityDistribution
from pystreamstats.hypothesis._common import StatisticParams, check_mode


class Statistic(ABC):
    """
    Abstract test statistic.

    Subclasses implement ``value``, ``degrees_of_freedom`` and
    ``distribution``; those with a noncentral form also implement
    ``noncentrality``.
    """

    statistic_name = "statistic"
    method = "Test statistic"
    data_name = "data"

    def __init__(self) -> None:
        self._warnings: list[str] = []

    # ====================================================================
    # Subclass interface
    # ====================================================================

    @property
    @abstractmethod
    def value(self) -> float:
        """Current value of the statistic."""

    @property
    def optimal_value(self) -> float:
        """Value of the statistic when the null hypothesis holds exactly."""
        return 0.0

    @property
    @abstractmethod
    def degrees_of_freedom(self) -> Any:
        """Degrees of freedom of the sampling distribution."""

    @abstractmethod
    def distribution(self, noncentrality: float | None = None) -> ProbabilityDistribution:
        """
        Sampling distribution.

        Args:
            noncentrality: None for the null distribution, otherwise the
                noncentrality parameter of the alternative

        Raises:
            UnsupportedOperationError: If the statistic has no noncentral form
        """

    def noncentrality(self, *effects: float) -> float:
        """
        Noncentrality parameter for an effect size.

        Raises:
            UnsupportedOperationError: If the statistic has no noncentral form
        """
        raise UnsupportedOperationError(
            f"{type(self).__name__}: no noncentral distribution"
        )

    # ====================================================================
    # p-values and critical values
    # ====================================================================

    def resolve_mode(self, mode: str | None = None) -> str:
        """Explicit mode, or the default for this statistic's distribution."""
        if mode is not None:
            return check_mode(mode)
        if self.distribution().is_symmetric(self.optimal_value):
            return "two.sided"
        return "one.sided"

    def _require_symmetric(self, distr: ProbabilityDistribution, mode: str) -> None:
        if not distr.is_symmetric(self.optimal_value):
            raise ValidationError(
                f"mode {mode!r}: distribution {distr!r} is not symmetric about "
                f"{self.optimal_value!r}"
            )

    def p_value(self, mode: str | None = None) -> float:
        """
        p-value of the current value.

        Args:
            mode: "positive", "negative", "two.sided", "one.sided" or None

        Raises:
            ValidationError: For two-sided modes on asymmetric distributions
        """
        mode = self.resolve_mode(mode)
        distr = self.distribution()
        stat = self.value
        ov = self.optimal_value
        if mode == "positive":
            return distr.complementary_cdf(stat)
        if mode == "negative":
            return distr.cdf(stat)
        if mode == "two.sided":
            self._require_symmetric(distr, mode)
            if stat == ov:
                return 1.0
            if stat < ov:
                return min(2.0 * distr.cdf(stat), 1.0)
            return min(2.0 * distr.complementary_cdf(stat), 1.0)
        if stat < ov:
            return distr.cdf(stat)
        return distr.complementary_cdf(stat)

    def critical_value(self, mode: str | None = None, alpha: float = 0.05) -> float:
        """
        Value of the statistic at which the test rejects at level ``alpha``.

        For "two.sided" the upper critical value is returned; the lower
        one is its mirror image about the optimal value.

        Raises:
            ValidationError: If alpha is outside (0, 1), for two-sided modes
                on asymmetric distributions, or for "one.sided" when the
                optimal value is not 0
        """
        if not (0.0 < alpha < 1.0):
            raise ValidationError(f"alpha: expected value in (0, 1), got {alpha!r}")
        mode = self.resolve_mode(mode)
        distr = self.distribution()
        if mode == "positive":
            return distr.inverse_complementary_cdf(alpha)
        if mode == "negative":
            return distr.inverse_cdf(alpha)
        if mode == "two.sided":
            self._require_symmetric(distr, mode)
            return distr.inverse_complementary_cdf(alpha / 2.0)
        if self.optimal_value != 0.0:
            raise ValidationError(
                f"mode 'one.sided': critical value requires optimal value 0, "
                f"got {self.optimal_value!r}"
            )
        return distr.inverse_complementary_cdf(alpha)

    # ====================================================================
    # Power
    # ====================================================================

    def power(
        self,
        noncentrality: float,
        *critical_values: float,
        upper_bound: bool = True,
    ) -> float:
        """
        Probability of rejecting the null under the given alternative.

        With two critical values the acceptance region lies between them.
        With one, the rejection region is above it when ``upper_bound``
        is True and below it otherwise.
        """
        distr = self.distribution(noncentrality)
        if len(critical_values) == 2:
            cv1, cv2 = critical_values
            if cv1 == cv2:
                return 1.0
            lo, hi = min(cv1, cv2), max(cv1, cv2)
            return distr.complementary_cdf(hi) + distr.cdf(lo)
        if len(critical_values) == 1:
            cv = critical_values[0]
            return distr.complementary_cdf(cv) if upper_bound else distr.cdf(cv)
        raise ValidationError(
            f"critical_values: expected 1 or 2 values, got {len(critical_values)}"
        )

    def type_ii_error_probability(
        self,
        noncentrality: float,
        *critical_values: float,
        upper_bound: bool = True,
    ) -> float:
        """Probability of accepting the null under the given alternative."""
        distr = self.distribution(noncentrality)
        if len(critical_values) == 2:
            cv1, cv2 = critical_values
            if cv1 == cv2:
                return 0.0
            lo, hi = min(cv1, cv2), max(cv1, cv2)
            return distr.cdf(hi) - distr.cdf(lo)
        if len(critical_values) == 1:
            cv = critical_values[0]
            return distr.cdf(cv) if upper_bound else distr.complementary_cdf(cv)
        raise ValidationError(
            f"critical_values: expected 1 or 2 values, got {len(critical_values)}"
        )

    # ====================================================================
    # Summary
    # ====================================================================

    def _warn(self, message: str) -> None:
        if message in self._warnings:
            return
        self._warnings.append(message)
        warnings.warn(message, RuntimeWarning, stacklevel=3)

    def _parameter(self) -> dict[str, float] | None:
        return {"df": float(self.degrees_of_freedom)}

    def _estimate(self) -> dict[str, float] | None:
        return None

    def _extras(self) -> dict[str, Any] | None:
        return None

    def summarize(self, mode: str | None = None, alpha: float = 0.05) -> "StatisticSolution":
        """
        Evaluate the statistic and wrap the outcome in a StatisticSolution.

        Args:
            mode: p-value mode, or None for the statistic's default
            alpha: Significance level for the critical value
        """
        from pystreamstats.hypothesis.solution import StatisticSolution

        timer = Timer()
        with timer.section('value'):
            stat = self.value
        with timer.section('p_value'):
            resolved = self.resolve_mode(mode)
            p = self.p_value(resolved)
        with timer.section('critical_value'):
            cv = self.critical_value(resolved, alpha)
        timing = timer.stop()

        params = StatisticParams(
            statistic=float(stat),
            statistic_name=self.statistic_name,
            parameter=self._parameter(),
            p_value=float(p),
            critical_value=float(cv),
            alpha=alpha,
            mode=resolved,
            optimal_value=self.optimal_value,
            estimate=self._estimate(),
            method=self.method,
            data_name=self.data_name,
            extras=self._extras(),
        )
        result = Result(
            params=params,
            info={
                'mode': resolved,
                'alpha': alpha,
                'distribution': self.distribution().kind.value,
            },
            timing=timing,
            backend_name='cpu_streaming',
            warnings=tuple(self._warnings),
        )
        return StatisticSolution(_result=result, _statistic=self)
