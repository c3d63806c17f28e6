"""
Pytest configuration and fixtures for scalargrad tests
"""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Seeded generator so parameter draws are reproducible"""
    return np.random.default_rng(42)


@pytest.fixture
def small_mlp(rng):
    """Two-layer network mapping 3 inputs to 1 output"""
    from scalargrad.nn import MLP

    return MLP(3, [4, 4, 1], rng=rng)


@pytest.fixture
def separable_data():
    """Points labelled by the sign of x0 + x1, with no points on the boundary"""
    coords = (-1.0, -0.5, 0.5, 1.0)
    data = []
    for a in coords:
        for b in coords:
            if a + b == 0:
                continue
            data.append(([a, b], 1.0 if a + b > 0 else 0.0))
    return data

