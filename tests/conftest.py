"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pystreamstats.core.compute.tolerances import set_kolmogorov_limit


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def normal_sample(rng):
    """200 draws from N(10, 2^2)."""
    return rng.normal(10.0, 2.0, size=200)


@pytest.fixture
def kolmogorov_limit():
    """Restore the global Kolmogorov limit after a test changes it."""
    yield set_kolmogorov_limit
    set_kolmogorov_limit(0.0)
