"""
Bracket-then-refine root finding for monotone functions.

Used by the generic distribution inverses: starting from a guess, the
bracket endpoints walk outward with a geometrically growing step (halved
whenever it would cross a finite domain bound) until the target value is
straddled, then scipy's Brent solver refines the root.
"""

from __future__ import annotations

import math
from typing import Callable

from scipy import optimize

from pystreamstats.core.exceptions import ConvergenceError
from pystreamstats.core.compute.tolerances import (
    INVERSE_STEP_GROWTH,
    INVERSE_MAX_STEPS,
    ROOT_XTOL,
    ROOT_RTOL,
    ROOT_MAX_ITERATIONS,
)


def _walk(
    f: Callable[[float], float],
    start: float,
    direction: float,
    done: Callable[[float], bool],
    bound: float,
) -> float:
    """Move from ``start`` in ``direction`` until ``done(f(x))`` holds."""
    x = start
    incr = direction
    steps = 0
    while not done(f(x)):
        if steps >= INVERSE_MAX_STEPS:
            raise ConvergenceError(
                f"Could not bracket root: walked {steps} steps to x={x!r} "
                f"without reaching the target",
                iterations=steps,
                final_change=incr,
                reason='no_bracket',
            )
        if math.isfinite(bound):
            while (direction < 0 and x + incr < bound) or (direction > 0 and x + incr > bound):
                incr /= 2.0
                if incr == 0.0:
                    raise ConvergenceError(
                        f"Could not bracket root: stuck at domain bound {bound!r}",
                        iterations=steps,
                        final_change=0.0,
                        reason='no_bracket',
                    )
        x += incr
        incr *= INVERSE_STEP_GROWTH
        steps += 1
    return x


def increasing_root(
    f: Callable[[float], float],
    target: float,
    guess: float,
    lower: float,
    upper: float,
) -> float:
    """
    Solve ``f(x) = target`` for non-decreasing ``f`` on [lower, upper].

    Args:
        f: Non-decreasing function
        target: Value to solve for
        guess: Starting point inside the domain
        lower, upper: Domain bounds (may be infinite)

    Returns:
        x with f(x) == target to solver precision

    Raises:
        ConvergenceError: If no bracket is found or Brent's method fails
    """
    low = _walk(f, guess, -1.0, lambda v: v <= target, lower)
    high = _walk(f, guess, 1.0, lambda v: v >= target, upper)
    return _refine(lambda x: f(x) - target, low, high)


def decreasing_root(
    f: Callable[[float], float],
    target: float,
    guess: float,
    lower: float,
    upper: float,
) -> float:
    """Solve ``f(x) = target`` for non-increasing ``f`` on [lower, upper]."""
    low = _walk(f, guess, -1.0, lambda v: v >= target, lower)
    high = _walk(f, guess, 1.0, lambda v: v <= target, upper)
    return _refine(lambda x: target - f(x), low, high)


def _refine(g: Callable[[float], float], low: float, high: float) -> float:
    if low == high:
        return low
    g_low = g(low)
    if g_low == 0.0:
        return low
    g_high = g(high)
    if g_high == 0.0:
        return high
    try:
        root, info = optimize.brentq(
            g, low, high,
            xtol=ROOT_XTOL, rtol=ROOT_RTOL, maxiter=ROOT_MAX_ITERATIONS,
            full_output=True, disp=False,
        )
    except ValueError as e:
        raise ConvergenceError(
            f"Brent's method failed on [{low!r}, {high!r}]: {e}",
            iterations=0,
            reason='no_sign_change',
        ) from e
    if not info.converged:
        raise ConvergenceError(
            f"Brent's method did not converge on [{low!r}, {high!r}]: {info.flag}",
            iterations=info.iterations,
            reason='max_iterations',
            threshold=ROOT_XTOL,
        )
    return float(root)
