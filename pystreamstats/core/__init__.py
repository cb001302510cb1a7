"""
Core infrastructure for PyStreamStats.

Shared abstractions and utilities used by the moments, distributions and
hypothesis subpackages.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Kahan summation, root finding, tolerances, timing
"""

from pystreamstats.core.result import Result
from pystreamstats.core.exceptions import (
    PyStreamStatsError,
    ValidationError,
    DimensionError,
    InvalidStateError,
    InsufficientDataError,
    UnsupportedOperationError,
    NumericalError,
    ConvergenceError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyStreamStatsError",
    "ValidationError",
    "DimensionError",
    "InvalidStateError",
    "InsufficientDataError",
    "UnsupportedOperationError",
    "NumericalError",
    "ConvergenceError",
]
