"""
Compensated (Kahan) summation.

KahanSum keeps a running compensation term so that long streams of
additions lose only O(eps) accuracy rather than O(n * eps).
"""

from __future__ import annotations

from typing import Iterable


class KahanSum:
    """
    Running compensated sum.

    Usage:
        acc = KahanSum()
        for term in terms:
            acc.add(term)
        total = acc.total
    """

    __slots__ = ("_total", "_compensation")

    def __init__(self, initial: float = 0.0):
        self._total = float(initial)
        self._compensation = 0.0

    def add(self, value: float) -> "KahanSum":
        y = value - self._compensation
        t = self._total + y
        self._compensation = (t - self._total) - y
        self._total = t
        return self

    def extend(self, values: Iterable[float]) -> "KahanSum":
        for value in values:
            self.add(value)
        return self

    def reset(self, value: float = 0.0) -> None:
        self._total = float(value)
        self._compensation = 0.0

    @property
    def total(self) -> float:
        return self._total

    @property
    def compensation(self) -> float:
        return self._compensation


def kahan_increment(total: float, compensation: float, increment: float) -> tuple[float, float]:
    """
    Add ``increment`` to ``total`` with compensation.

    Works element-wise on numpy arrays as well as on floats.

    Returns:
        (new_total, new_compensation)
    """
    y = increment - compensation
    t = total + y
    return t, (t - total) - y


def kahan_sum(values: Iterable[float]) -> float:
    """Compensated sum of an iterable."""
    return KahanSum().extend(values).total
