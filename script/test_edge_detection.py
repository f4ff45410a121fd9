#!/usr/bin/env python3
"""
Tests for percentile, Otsu and hysteresis edge detectors.
"""

import numpy as np
import pytest

from edge_eval.derivatives import compute_derivatives
from edge_eval.edge_detection import (
    detect_edges_percentile,
    detect_edges_otsu,
    detect_edges_hysteresis,
    hysteresis_threshold,
)
from edge_eval.edge_detection_constants import MASK_ON, MASK_OFF
from edge_eval.errors import DegenerateInputError, InvalidInputError, InvalidRangeError


def _assert_two_class(mask, shape):
    assert mask.shape == shape
    assert mask.dtype == np.uint8
    assert set(np.unique(mask).tolist()) <= {MASK_OFF, MASK_ON}


@pytest.fixture
def hysteresis_dx():
    """
    Horizontal derivative whose magnitude has one strong pixel, a weak chain
    touching it (the last link only diagonally) and one isolated weak pixel.
    """
    dx = np.zeros((10, 10), dtype=np.float64)
    dx[2, 2] = 100.0   # strong
    dx[2, 3] = 50.0    # weak, 4-connected to strong
    dx[3, 4] = -50.0   # weak, diagonal to (2, 3)
    dx[7, 7] = 50.0    # weak, isolated
    return dx


# =============================================================================
# Percentile detector
# =============================================================================

def test_zero_percentile_marks_every_pixel(random_field):
    edges = detect_edges_percentile(random_field, th=0.0, n_bins=64)
    _assert_two_class(edges, random_field.shape)
    assert np.all(edges == MASK_ON)


def test_median_percentile_on_ramp(ramp_field):
    edges = detect_edges_percentile(ramp_field, th=0.5, n_bins=4)
    # Threshold is the lower edge of bin 1 (37.5): values 40..150 are edges
    assert np.array_equal(edges != 0, ramp_field >= 37.5)
    assert np.count_nonzero(edges) == 12


def test_full_percentile_keeps_last_bin(ramp_field):
    edges = detect_edges_percentile(ramp_field, th=1.0, n_bins=4)
    assert np.array_equal(edges != 0, ramp_field >= 112.5)
    assert np.count_nonzero(edges) == 4


def test_percentile_edges_shrink_as_threshold_rises(random_field):
    counts = [
        np.count_nonzero(detect_edges_percentile(random_field, th=th, n_bins=100))
        for th in (0.0, 0.25, 0.5, 0.75, 0.9, 1.0)
    ]
    assert counts == sorted(counts, reverse=True)


def test_percentile_detector_is_deterministic(random_field):
    first = detect_edges_percentile(random_field, th=0.7, n_bins=50)
    second = detect_edges_percentile(random_field, th=0.7, n_bins=50)
    assert np.array_equal(first, second)


def test_percentile_rejects_out_of_range_threshold(ramp_field):
    with pytest.raises(InvalidRangeError):
        detect_edges_percentile(ramp_field, th=1.5, n_bins=4)


def test_percentile_rejects_all_zero_magnitude():
    with pytest.raises(DegenerateInputError):
        detect_edges_percentile(np.zeros((6, 6)), th=0.5, n_bins=4)


def test_percentile_rejects_non_2d_field():
    with pytest.raises(InvalidInputError):
        detect_edges_percentile(np.ones(10), th=0.5, n_bins=4)


# =============================================================================
# Otsu detector
# =============================================================================

def test_otsu_separates_bimodal_field():
    magnitude = np.full((8, 8), 1.0)
    magnitude[:, 4:] = 10.0

    edges = detect_edges_otsu(magnitude)

    _assert_two_class(edges, magnitude.shape)
    assert np.all(edges[:, 4:] == MASK_ON)
    assert np.all(edges[:, :4] == MASK_OFF)


def test_otsu_is_deterministic(random_field):
    assert np.array_equal(detect_edges_otsu(random_field), detect_edges_otsu(random_field))


def test_otsu_rejects_constant_field():
    with pytest.raises(DegenerateInputError):
        detect_edges_otsu(np.full((5, 5), 3.0))


# =============================================================================
# Hysteresis detector
# =============================================================================

def test_hysteresis_keeps_weak_pixels_connected_to_strong(hysteresis_dx):
    dy = np.zeros_like(hysteresis_dx)

    # 96 zeros, 3 weak (bin 5), 1 strong (bin 9) -> low = 0, high = 90
    edges = detect_edges_hysteresis(hysteresis_dx, dy, th1=0.5, th2=0.995, n_bins=10)

    _assert_two_class(edges, hysteresis_dx.shape)
    expected = {(2, 2), (2, 3), (3, 4)}
    assert set(zip(*np.nonzero(edges))) == expected


def test_hysteresis_rule_on_magnitude():
    magnitude = np.array([
        [0, 5, 0, 0, 0],
        [0, 5, 0, 0, 5],
        [9, 0, 0, 0, 5],
    ], dtype=np.float64)

    kept = hysteresis_threshold(magnitude, low=4.0, high=8.0)

    # Left chain reaches the strong pixel diagonally; right chain never does
    assert kept[0, 1] and kept[1, 1] and kept[2, 0]
    assert not kept[1, 4] and not kept[2, 4]


def test_hysteresis_thresholds_are_strict():
    magnitude = np.array([[5.0, 5.0, 9.0]])

    # Equal to high is not strong, equal to low is not weak
    assert not np.any(hysteresis_threshold(magnitude, low=5.0, high=9.0))
    assert hysteresis_threshold(magnitude, low=5.0, high=8.0).tolist() == [[False, False, True]]


def test_flat_pixels_never_survive_a_zero_low_threshold(step_image):
    derivatives = compute_derivatives(step_image)
    dx, dy = derivatives["gradient_x"], derivatives["gradient_y"]
    magnitude = np.hypot(dx, dy)

    # 360 flat pixels fill bin 0, so th1 = 0.5 resolves to a zero low threshold
    edges = detect_edges_hysteresis(dx, dy, th1=0.5, th2=0.95, n_bins=10)

    assert np.all(edges[magnitude == 0] == MASK_OFF)
    assert np.array_equal(edges != 0, magnitude > 0)


def test_hysteresis_defaults_on_step_edge(step_image):
    derivatives = compute_derivatives(step_image)
    edges = detect_edges_hysteresis(derivatives["gradient_x"], derivatives["gradient_y"])

    assert np.count_nonzero(edges) == 40
    assert np.all(edges[:, 9:11] == MASK_ON)
    assert np.all(edges[:, :9] == MASK_OFF)
    assert np.all(edges[:, 11:] == MASK_OFF)


def test_hysteresis_is_deterministic(step_image):
    derivatives = compute_derivatives(step_image)
    dx, dy = derivatives["gradient_x"], derivatives["gradient_y"]
    first = detect_edges_hysteresis(dx, dy, th1=0.95, th2=0.99, n_bins=10)
    second = detect_edges_hysteresis(dx, dy, th1=0.95, th2=0.99, n_bins=10)
    assert np.array_equal(first, second)
    assert np.all(first[:, 9:11] == MASK_ON)
    assert np.count_nonzero(first) == 40


def test_thin_edges_use_non_maximum_suppression(step_image):
    derivatives = compute_derivatives(step_image)
    dx, dy = derivatives["gradient_x"], derivatives["gradient_y"]

    plain = detect_edges_hysteresis(dx, dy, th1=0.5, th2=0.95, n_bins=10)
    thin = detect_edges_hysteresis(dx, dy, th1=0.5, th2=0.95, n_bins=10, thin_edges=True)

    assert np.count_nonzero(plain) == 40
    _assert_two_class(thin, step_image.shape)
    assert 0 < np.count_nonzero(thin) <= np.count_nonzero(plain)
    assert np.all(thin[:, :9] == MASK_OFF)


@pytest.mark.parametrize("th1,th2", [(0.5, 0.5), (0.9, 0.1)])
def test_hysteresis_rejects_misordered_thresholds(th1, th2):
    # Checked before anything else, even with unusable derivatives
    with pytest.raises(InvalidRangeError):
        detect_edges_hysteresis(np.zeros((2, 2)), np.zeros((3, 3)), th1=th1, th2=th2, n_bins=10)


def test_hysteresis_rejects_out_of_range_threshold(hysteresis_dx):
    with pytest.raises(InvalidRangeError):
        detect_edges_hysteresis(hysteresis_dx, np.zeros_like(hysteresis_dx), th1=-0.1, th2=0.5)
