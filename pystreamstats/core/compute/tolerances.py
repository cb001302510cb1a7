"""
Numerical tolerances, iteration caps and tunable thresholds.

Series tiers bundle a relative stopping tolerance with the iteration cap
after which the loop gives up and raises ConvergenceError. The Kolmogorov
limit is the single mutable setting: above n*x > limit the Kolmogorov
distribution switches from the exact matrix recurrence to its asymptotic
form. Instances may override it with their own ``limit=`` argument.
"""

from dataclasses import dataclass

from pystreamstats.core.exceptions import ValidationError


@dataclass(frozen=True)
class SeriesTolerance:
    """Stopping rule for an infinite series."""
    rtol: float
    max_iterations: int
    name: str
    description: str


# Poisson-weighted mixtures (noncentral chi-square and F)
POISSON_MIXTURE = SeriesTolerance(
    rtol=1e-15,
    max_iterations=100_000,
    name='poisson_mixture',
    description='weight/sum ratio for noncentral mixtures',
)

# Central chi-square lower-tail series
CHI_SQUARE_SERIES = SeriesTolerance(
    rtol=1e-15,
    max_iterations=1_000_000,
    name='chi_square_series',
    description='term/maxterm ratio for the chi-square cdf series',
)

# Parity-dependent finite sums for the chi-square upper tail
CHI_SQUARE_TAIL = SeriesTolerance(
    rtol=1e-64,
    max_iterations=1_000_000,
    name='chi_square_tail',
    description='term/sum ratio below which tail terms are dropped',
)

# Noncentral Student's t incomplete-beta series
NONCENTRAL_T = SeriesTolerance(
    rtol=1e-16,
    max_iterations=100_000,
    name='noncentral_t',
    description='term/sum ratio for the noncentral t cdf',
)

# Smallest absolute term considered significant in the noncentral t series
NONCENTRAL_T_ATOL = 1e-32

# Alternating asymptotic Kolmogorov series
KOLMOGOROV_SERIES = SeriesTolerance(
    rtol=1e-17,
    max_iterations=10_000,
    name='kolmogorov_series',
    description='term size for the limiting Kolmogorov series',
)

# Bracketing walk used by the generic inverse
INVERSE_STEP_GROWTH = 1.5
INVERSE_MAX_STEPS = 5_000
ROOT_XTOL = 1e-300
ROOT_RTOL = 1e-15
ROOT_MAX_ITERATIONS = 500

# Rescaling constants for the exact Kolmogorov matrix recurrence
KOLMOGOROV_SCALE = 1e140
KOLMOGOROV_INV_SCALE = 1e-140

DEFAULT_KOLMOGOROV_LIMIT = 256.0

_kolmogorov_limit = DEFAULT_KOLMOGOROV_LIMIT


def get_kolmogorov_limit() -> float:
    """Current global n*x threshold for the asymptotic Kolmogorov form."""
    return _kolmogorov_limit


def set_kolmogorov_limit(limit: float) -> None:
    """
    Set the global n*x threshold for the asymptotic Kolmogorov form.

    Args:
        limit: New threshold. Values <= 0 restore the default (256).

    Raises:
        ValidationError: If limit is NaN
    """
    global _kolmogorov_limit
    if limit != limit:
        raise ValidationError("kolmogorov limit: got NaN")
    _kolmogorov_limit = float(limit) if limit > 0 else DEFAULT_KOLMOGOROV_LIMIT
