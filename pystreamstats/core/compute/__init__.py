"""
Shared compute infrastructure for PyStreamStats.

Numeric building blocks shared by the accumulator, distribution and
statistic layers.

Submodules:
    summation: Kahan compensated summation
    rootfind: Bracketing walk plus Brent refinement
    tolerances: Series tolerances, iteration caps, Kolmogorov limit
    timing: Execution timing utilities
"""

from pystreamstats.core.compute.summation import KahanSum, kahan_increment, kahan_sum
from pystreamstats.core.compute.rootfind import increasing_root, decreasing_root
from pystreamstats.core.compute.timing import Timer
from pystreamstats.core.compute.tolerances import (
    SeriesTolerance,
    get_kolmogorov_limit,
    set_kolmogorov_limit,
)

__all__ = [
    "KahanSum",
    "kahan_increment",
    "kahan_sum",
    "increasing_root",
    "decreasing_root",
    "Timer",
    "SeriesTolerance",
    "get_kolmogorov_limit",
    "set_kolmogorov_limit",
]
