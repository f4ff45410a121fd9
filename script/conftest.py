"""Shared synthetic fields for the edge evaluation tests."""

import numpy as np
import pytest


@pytest.fixture
def step_image() -> np.ndarray:
    """20x20 uint8 image with a vertical step edge between columns 9 and 10."""
    image = np.zeros((20, 20), dtype=np.uint8)
    image[:, 10:] = 200
    return image


@pytest.fixture
def step_consensus() -> np.ndarray:
    """Consensus map agreeing on the two columns either side of the step."""
    consensus = np.zeros((20, 20), dtype=np.float64)
    consensus[:, 9:11] = 5.0
    return consensus


@pytest.fixture
def ramp_field() -> np.ndarray:
    """4x4 magnitude field with values 0, 10, ..., 150 row-major."""
    return np.arange(0, 160, 10, dtype=np.float64).reshape(4, 4)


@pytest.fixture
def random_field() -> np.ndarray:
    """Non-negative field with a spread of values and some exact zeros."""
    rng = np.random.default_rng(42)
    field = rng.gamma(2.0, 20.0, size=(32, 48))
    field[rng.random(field.shape) < 0.1] = 0.0
    return field
