"""
Exception hierarchy for PyStreamStats.

All exceptions inherit from PyStreamStatsError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information

Error kinds:
    ValidationError          bad argument (bins <= 0, probability outside [0, 1])
    InvalidStateError        operation not valid for the current object state
    InsufficientDataError    too few observations for the requested quantity
    UnsupportedOperationError capability the object does not provide
    ConvergenceError         a series or search exceeded its iteration cap
"""


class PyStreamStatsError(Exception):
    """Base exception for all PyStreamStats errors."""
    pass


class ValidationError(PyStreamStatsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions, when a
    vector is shorter than an accumulator's dimension, or when paired
    arrays have different lengths.
    """
    pass


class InvalidStateError(PyStreamStatsError):
    """
    Operation is not valid in the object's current state.

    Raised when data is added to a frozen statistic, a sealed covariance
    accumulator, or a Kolmogorov-Smirnov statistic whose value has
    already been computed.
    """
    pass


class InsufficientDataError(InvalidStateError):
    """
    Not enough observations for the requested quantity.

    Attributes:
        required: Minimum number of observations needed
        actual: Number of observations available
    """

    def __init__(
        self,
        message: str,
        required: int | None = None,
        actual: int | None = None,
    ):
        super().__init__(message)
        self.required = required
        self.actual = actual


class UnsupportedOperationError(PyStreamStatsError):
    """
    Requested capability is not provided.

    Raised, for example, when an interval probability is requested from an
    asymmetric distribution or a noncentral distribution is requested from
    a statistic that has none.
    """
    pass


class NumericalError(PyStreamStatsError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class ConvergenceError(NumericalError):
    """
    Iterative algorithm failed to converge.

    Raised when a series summation, bracketing walk or root search does
    not meet its stopping criterion within the maximum number of
    iterations.

    Attributes:
        iterations: Number of iterations completed
        final_change: Last term or step size, if meaningful
        reason: Why convergence failed (e.g., 'max_iterations', 'no_bracket')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
