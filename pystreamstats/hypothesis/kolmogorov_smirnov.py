"""
One-sample Kolmogorov-Smirnov statistic.

Observations are pushed onto a heap as they arrive. The first query of
the value drains the heap in sorted order and computes

    D = max_i max(i/n - F(x_i), F(x_i) - (i-1)/n)

against the reference cdf F. The result is cached; after that point the
sample is closed and further additions fail.
"""

from __future__ import annotations

import heapq
import threading
from typing import Any, Callable

import numpy as np
from numpy.typing import ArrayLike

from pystreamstats.core.exceptions import (
    InsufficientDataError,
    InvalidStateError,
    UnsupportedOperationError,
    ValidationError,
)
from pystreamstats.distributions.base import ProbabilityDistribution
from pystreamstats.distributions.kolmogorov import KolmogorovDistribution
from pystreamstats.hypothesis.base import Statistic
from pystreamstats.hypothesis.t_statistics import _as_vector


class KolmogorovSmirnovStatistic(Statistic):
    """
    Supremum distance between the empirical cdf and a reference cdf.

    ``add`` and ``extend`` may be called from several threads; they are
    serialized by an internal lock, as is the one-time computation of
    the value.

    Args:
        reference_cdf: A ProbabilityDistribution or a callable x -> F(x)
        data: Optional initial observations
    """

    statistic_name = "D"
    method = "Exact one-sample Kolmogorov-Smirnov test"

    def __init__(
        self,
        reference_cdf: ProbabilityDistribution | Callable[[float], float],
        data: ArrayLike | None = None,
    ):
        super().__init__()
        if isinstance(reference_cdf, ProbabilityDistribution):
            self._cdf = reference_cdf.cdf
            self.data_name = f"x against {reference_cdf!r}"
        elif callable(reference_cdf):
            self._cdf = reference_cdf
            self.data_name = "x"
        else:
            raise ValidationError(
                f"reference_cdf: expected a distribution or callable, got "
                f"{type(reference_cdf).__name__}"
            )
        self._lock = threading.Lock()
        self._heap: list[float] = []
        self._n = 0
        self._value: float | None = None
        if data is not None:
            self.extend(data)

    def add(self, x: float) -> None:
        """
        Add one observation.

        Raises:
            InvalidStateError: If the value has already been computed
        """
        with self._lock:
            self._check_open()
            heapq.heappush(self._heap, float(x))
            self._n += 1

    def extend(self, values: ArrayLike) -> None:
        """Add every element of a 1-D array."""
        arr = _as_vector(values, "values")
        with self._lock:
            self._check_open()
            for x in arr:
                heapq.heappush(self._heap, float(x))
            self._n += arr.shape[0]

    def _check_open(self) -> None:
        if self._value is not None:
            raise InvalidStateError("add: statistic value already computed, sample is closed")

    @property
    def count(self) -> int:
        return self._n

    @property
    def is_computed(self) -> bool:
        """True once the value has been computed and the sample closed."""
        return self._value is not None

    @property
    def value(self) -> float:
        with self._lock:
            if self._value is None:
                self._value = self._compute()
            return self._value

    def _compute(self) -> float:
        n = self._n
        if n == 0:
            raise InsufficientDataError("Kolmogorov-Smirnov: no data", required=1, actual=0)
        # the heap is only released once every cdf evaluation has succeeded
        ordered = np.array(sorted(self._heap))
        probs = np.array([self._cdf(float(x)) for x in ordered])
        self._heap = []
        ranks = np.arange(1, n + 1, dtype=np.float64)
        d_plus = np.max(ranks / n - probs)
        d_minus = np.max(probs - (ranks - 1.0) / n)
        return float(max(d_plus, d_minus))

    @property
    def degrees_of_freedom(self) -> int:
        return self._n

    def distribution(self, noncentrality: float | None = None) -> KolmogorovDistribution:
        if noncentrality is not None:
            raise UnsupportedOperationError(
                "KolmogorovSmirnovStatistic: no noncentral distribution"
            )
        if self._n < 1:
            raise InsufficientDataError("Kolmogorov-Smirnov: no data", required=1, actual=0)
        return KolmogorovDistribution(self._n)

    def _parameter(self) -> dict[str, float]:
        return {"n": float(self._n)}

    def _extras(self) -> dict[str, Any]:
        return {"n": self._n}
