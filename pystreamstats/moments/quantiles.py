"""
Batch location estimators: mean, median and trimmed means.

The trimmed means remove the same number of sorted observations from
each end. When the requested fraction does not divide the sample size,
the result interpolates linearly between the two neighbouring integral
trims, weighted by the fractional part of the trim count.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamstats.core.exceptions import ValidationError
from pystreamstats.core.validation import check_array, check_1d
from pystreamstats.moments.accumulator import PopulationMoments


def _sorted_data(data: ArrayLike) -> NDArray[np.floating[Any]]:
    arr = check_array(data, "data")
    check_1d(arr, "data")
    if arr.shape[0] == 0:
        raise ValidationError("data: empty dataset")
    return np.sort(arr)


def _slice_mean(sorted_data: NDArray[np.floating[Any]], trim: int) -> float:
    return PopulationMoments().extend(sorted_data[trim: sorted_data.shape[0] - trim]).mean


def mean(data: ArrayLike) -> float:
    """
    Arithmetic mean computed with a compensated accumulator.

    Raises:
        ValidationError: If data is empty
    """
    arr = check_array(data, "data")
    check_1d(arr, "data")
    if arr.shape[0] == 0:
        raise ValidationError("data: empty dataset")
    return PopulationMoments().extend(arr).mean


def median(data: ArrayLike) -> float:
    """
    Median: the middle element, or the average of the two middle elements.

    Raises:
        ValidationError: If data is empty
    """
    s = _sorted_data(data)
    n = s.shape[0]
    if n % 2 == 1:
        return float(s[n // 2])
    return float((s[n // 2] + s[n // 2 - 1]) / 2.0)


def _interpolated_trim(
    s: NDArray[np.floating[Any]],
    min1: int,
    weight: float,
    exact: bool,
    label: str,
) -> float:
    n = s.shape[0]
    if n - 2 * min1 <= 0:
        raise ValidationError(f"{label}: trimming removes every observation (n={n})")
    mean1 = _slice_mean(s, min1)
    if exact:
        return mean1
    if n - 2 * (min1 + 1) <= 0:
        return mean1
    mean2 = _slice_mean(s, min1 + 1)
    t = min(max(weight, 0.0), 1.0)
    return mean2 * t + mean1 * (1.0 - t)


def trimmed_mean(data: ArrayLike, bins: int) -> float:
    """
    Trimmed mean removing ``len(data) / bins`` points from each end.

    For example ``bins=10`` gives the 10% trimmed mean.

    Args:
        data: 1-D data (not modified)
        bins: Positive divisor of the sample size defining the trim

    Raises:
        ValidationError: If bins < 1, data is empty, or nothing remains
    """
    if bins < 1:
        raise ValidationError(f"bins: expected positive integer, got {bins}")
    s = _sorted_data(data)
    n = s.shape[0]
    min1 = n // bins
    t = n / float(bins)
    t -= math.floor(t)
    return _interpolated_trim(s, min1, t, n % bins == 0, "trimmed_mean")


def trimmed_mean_ratio(data: ArrayLike, numerator: int, denominator: int) -> float:
    """
    Trimmed mean removing the fraction ``numerator / denominator`` from each end.

    The fraction is reduced by its gcd and the interpolation weight is
    formed from exact integer arithmetic.

    Raises:
        ValidationError: If either argument is < 1, data is empty, or
            nothing remains
    """
    if numerator < 1 or denominator < 1:
        raise ValidationError(
            f"numerator, denominator: expected positive integers, got "
            f"{numerator}, {denominator}"
        )
    s = _sorted_data(data)
    g = math.gcd(numerator, denominator)
    num, den = numerator // g, denominator // g
    n = s.shape[0]
    scaled = n * num
    min1 = scaled // den
    weight = (scaled - min1 * den) / float(den)
    return _interpolated_trim(s, min1, weight, scaled % den == 0, "trimmed_mean_ratio")
