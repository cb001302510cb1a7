"""Poisson-weighted mixtures shared by the noncentral distributions."""

from __future__ import annotations

import math
from typing import Callable

from pystreamstats.core.exceptions import ConvergenceError
from pystreamstats.core.compute.tolerances import POISSON_MIXTURE


def poisson_weight(j: int, mean: float) -> float:
    """e^(-mean) mean^j / j!, evaluated in log space."""
    return math.exp(-mean + j * math.log(mean) - math.lgamma(j + 1.0))


def poisson_mixture(component: Callable[[int], float], mean: float, label: str) -> float:
    """
    sum_j poisson_weight(j, mean) * component(j)

    Summation stops once past the Poisson mode and the current weight is
    negligible relative to the running total (or has underflowed, which
    covers components that are identically zero far in a tail).

    Raises:
        ConvergenceError: If the iteration cap is reached
    """
    total = 0.0
    j = 0
    while True:
        weight = poisson_weight(j, mean)
        total += weight * component(j)
        if j > mean and (weight <= POISSON_MIXTURE.rtol * total or weight == 0.0):
            return total
        j += 1
        if j > POISSON_MIXTURE.max_iterations:
            raise ConvergenceError(
                f"{label}: Poisson mixture did not converge (mean={mean!r})",
                iterations=j,
                final_change=weight,
                reason='max_iterations',
                threshold=POISSON_MIXTURE.rtol,
            )
