#!/usr/bin/env python3
"""
Tests for Sobel derivatives and gradient magnitude.
"""

import numpy as np
import pytest

from edge_eval.derivatives import compute_derivatives, compute_gradient_magnitude
from edge_eval.errors import InvalidInputError, InvalidRangeError, SizeMismatchError


def test_step_edge_has_horizontal_gradient_only(step_image):
    result = compute_derivatives(step_image, gaussian_radius=0, sobel_aperture=3)
    dx, dy = result["gradient_x"], result["gradient_y"]

    assert dx.shape == step_image.shape
    assert dy.shape == step_image.shape
    assert dx.dtype == np.float64

    # Constant rows: no vertical response anywhere
    assert np.allclose(dy, 0.0)

    # 3x3 Sobel response to a 200-level step is 4 * 200 on both sides of the step
    assert np.allclose(dx[:, 9], 800.0)
    assert np.allclose(dx[:, 10], 800.0)
    assert np.allclose(dx[:, :9], 0.0)
    assert np.allclose(dx[:, 11:], 0.0)


def test_derivatives_keep_sign(step_image):
    falling = 200 - step_image
    dx = compute_derivatives(falling)["gradient_x"]
    assert dx.min() < 0


def test_smoothing_preserves_size_and_spreads_response(step_image):
    sharp = compute_derivatives(step_image, gaussian_radius=0)["gradient_x"]
    smooth = compute_derivatives(step_image, gaussian_radius=2)["gradient_x"]

    assert smooth.shape == step_image.shape
    assert np.count_nonzero(np.abs(smooth) > 1e-9) > np.count_nonzero(np.abs(sharp) > 1e-9)


@pytest.mark.parametrize("aperture", [1, 3, 5, 7])
def test_valid_apertures(step_image, aperture):
    result = compute_derivatives(step_image, sobel_aperture=aperture)
    assert result["sobel_aperture"] == aperture
    assert result["gradient_x"].shape == step_image.shape


def test_direction_of_vertical_edge_is_horizontal(step_image):
    result = compute_derivatives(step_image)
    direction = result["gradient_direction"]
    assert np.allclose(direction[:, 9:11], 0.0)


def test_single_channel_axis_is_accepted(step_image):
    result = compute_derivatives(step_image[:, :, np.newaxis])
    assert result["gradient_x"].shape == step_image.shape


def test_wider_integer_depth_is_accepted(step_image):
    result = compute_derivatives(step_image.astype(np.int32))
    assert np.allclose(result["gradient_x"][:, 9], 800.0)


def test_rejects_empty_image():
    with pytest.raises(InvalidInputError):
        compute_derivatives(np.zeros((0, 0), dtype=np.uint8))


def test_rejects_multichannel_image():
    with pytest.raises(InvalidInputError):
        compute_derivatives(np.zeros((8, 8, 3), dtype=np.uint8))


def test_rejects_float_image():
    with pytest.raises(InvalidInputError):
        compute_derivatives(np.zeros((8, 8), dtype=np.float32))


@pytest.mark.parametrize("aperture", [0, 2, 4, 9])
def test_rejects_invalid_aperture(step_image, aperture):
    with pytest.raises(InvalidRangeError):
        compute_derivatives(step_image, sobel_aperture=aperture)


def test_rejects_negative_radius(step_image):
    with pytest.raises(InvalidRangeError):
        compute_derivatives(step_image, gaussian_radius=-1)


def test_magnitude_is_euclidean_norm():
    dx = np.full((3, 5), 3.0, dtype=np.float32)
    dy = np.full((3, 5), -4.0, dtype=np.float32)

    magnitude = compute_gradient_magnitude(dx, dy)

    assert magnitude.shape == (3, 5)
    assert np.allclose(magnitude, 5.0)


def test_magnitude_rejects_size_mismatch():
    with pytest.raises(SizeMismatchError):
        compute_gradient_magnitude(np.zeros((3, 5)), np.zeros((5, 3)))
