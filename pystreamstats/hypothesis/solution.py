"""
Statistic solution type.

StatisticSolution wraps Result[StatisticParams] and prints an htest-like
report via summary().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import math

from pystreamstats.core.result import Result
from pystreamstats.hypothesis._common import StatisticParams

if TYPE_CHECKING:
    from pystreamstats.hypothesis.base import Statistic


_ALTERNATIVE_TEXT = {
    "positive": "greater than",
    "negative": "less than",
    "two.sided": "not equal to",
}


@dataclass
class StatisticSolution:
    """
    User-facing summary of a test statistic.

    Wraps Result[StatisticParams]; the evaluated statistic is kept so
    that power and noncentral quantities can be queried afterwards.
    """
    _result: Result[StatisticParams]
    _statistic: 'Statistic'

    @property
    def statistic(self) -> float:
        """Value of the test statistic."""
        return self._result.params.statistic

    @property
    def statistic_name(self) -> str:
        return self._result.params.statistic_name

    @property
    def parameter(self) -> dict[str, float] | None:
        """Distribution parameters (e.g. {'df': 9})."""
        return self._result.params.parameter

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def critical_value(self) -> float:
        """Critical value at ``alpha`` for the resolved mode."""
        return self._result.params.critical_value

    @property
    def alpha(self) -> float:
        return self._result.params.alpha

    @property
    def mode(self) -> str:
        """Resolved p-value mode."""
        return self._result.params.mode

    @property
    def optimal_value(self) -> float:
        return self._result.params.optimal_value

    @property
    def rejected(self) -> bool:
        """True if the null hypothesis is rejected at ``alpha``."""
        return self.p_value < self.alpha

    @property
    def estimate(self) -> dict[str, float] | None:
        return self._result.params.estimate

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def data_name(self) -> str:
        return self._result.params.data_name

    @property
    def extras(self) -> dict[str, Any] | None:
        return self._result.params.extras

    @property
    def statistic_object(self) -> 'Statistic':
        """The statistic this solution was computed from."""
        return self._statistic

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Formatting ---

    def summary(self) -> str:
        """
        Format like R's print.htest output.

        Produces output like:
                 Two Sample t-test

            data:  x and y
            t = -10.954, df = 6, p-value = 3.4364e-05
            critical value (alpha = 0.05, two.sided): 2.4469
            alternative hypothesis: true statistic is not equal to 0
            sample estimates:
                 mean of x      mean of y
                      11.5           21.5
        """
        p = self._result.params
        lines = []

        lines.append(f"\t{p.method}")
        lines.append("")
        lines.append(f"data:  {p.data_name}")

        parts = [f"{p.statistic_name} = {_format_number(p.statistic)}"]
        if p.parameter is not None:
            for name, val in p.parameter.items():
                parts.append(f"{name} = {val:.5g}")
        parts.append(f"p-value = {_format_pvalue(p.p_value)}")
        lines.append(", ".join(parts))

        lines.append(
            f"critical value (alpha = {p.alpha:g}, {p.mode}): "
            f"{_format_number(p.critical_value)}"
        )

        if p.mode in _ALTERNATIVE_TEXT:
            relation = _ALTERNATIVE_TEXT[p.mode]
        elif p.statistic < p.optimal_value:
            relation = "less than"
        else:
            relation = "greater than"
        lines.append(
            f"alternative hypothesis: true statistic is {relation} {p.optimal_value:g}"
        )

        if p.estimate is not None:
            lines.append("sample estimates:")
            names = list(p.estimate.keys())
            vals = list(p.estimate.values())
            lines.append(" ".join(f"{n:>14s}" for n in names))
            lines.append(" ".join(f"{v:14.7g}" for v in vals))

        if p.extras:
            for key, val in p.extras.items():
                lines.append(f"{key}: {val}")

        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"StatisticSolution(method={p.method!r}, "
            f"{p.statistic_name}={p.statistic:.4g}, p_value={p.p_value:.4g})"
        )


def _format_pvalue(p: float) -> str:
    """Format p-value like R does."""
    if math.isnan(p):
        return "NA"
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"


def _format_number(x: float) -> str:
    """Format a number, handling infinity and NaN."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "-Inf" if x < 0 else "Inf"
    return f"{x:.5g}"
