"""
Common types for test statistics.

Defines StatisticParams (the payload of a statistic summary, laid out
like R's htest class) and the p-value modes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pystreamstats.core.exceptions import ValidationError


PValueMode = Literal["positive", "negative", "two.sided", "one.sided"]

# positive:  upper tail Q(value)
# negative:  lower tail P(value)
# two.sided: twice the tail beyond value, for distributions symmetric
#            about the optimal value
# one.sided: the tail on the side of value relative to the optimal value
VALID_MODES = ("positive", "negative", "two.sided", "one.sided")


def check_mode(mode: str) -> str:
    """
    Validate a p-value mode string.

    Raises:
        ValidationError: If mode is not one of VALID_MODES
    """
    if mode not in VALID_MODES:
        raise ValidationError(
            f"mode: expected one of {VALID_MODES}, got {mode!r}"
        )
    return mode


@dataclass(frozen=True)
class StatisticParams:
    """
    Parameter payload for a statistic summary.

    Attributes
    ----------
    statistic : float
        Value of the test statistic.
    statistic_name : str
        Name of the test statistic ("t", "F", "X-squared", "D", "W").
    parameter : dict or None
        Distribution parameters, e.g. {"df": 9} or {"num df": 4, "denom df": 8}.
    p_value : float
        p-value for ``mode``.
    critical_value : float
        Critical value of the statistic at significance ``alpha``.
    alpha : float
        Significance level used for ``critical_value``.
    mode : str
        Resolved p-value mode.
    optimal_value : float
        Value of the statistic under an exact null.
    estimate : dict or None
        Point estimate(s), e.g. {"mean of x": 5.1, "mean of y": 3.2}.
    method : str
        Human-readable method name, e.g. "Welch Two Sample t-test".
    data_name : str
        Description of the data, e.g. "x and y".
    extras : dict or None
        Statistic-specific additional outputs.
    """
    statistic: float
    statistic_name: str
    parameter: dict[str, float] | None
    p_value: float
    critical_value: float
    alpha: float
    mode: str
    optimal_value: float
    estimate: dict[str, float] | None
    method: str
    data_name: str
    extras: dict[str, Any] | None = None
