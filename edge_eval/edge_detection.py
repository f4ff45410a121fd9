"""
Binary edge detection from gradient magnitude.

This module implements three thresholding strategies over a gradient field:
1. Percentile: threshold at the magnitude below which a fraction of pixels lie
2. Otsu: rescale magnitude to 8 bit and pick the variance-maximizing threshold
3. Hysteresis: weak/strong percentile thresholds joined by 8-connectivity
   (optionally with non-maximum suppression through cv2.Canny)

All detectors return uint8 masks with edges at MASK_ON and background at MASK_OFF.
"""

import cv2
import numpy as np
import logging
from typing import Tuple
from scipy import ndimage

from edge_eval.derivatives import compute_gradient_magnitude
from edge_eval.edge_detection_constants import (
    DEFAULT_N_BINS,
    DEFAULT_PERCENTILE_THRESHOLD,
    DEFAULT_HYSTERESIS_LOW,
    DEFAULT_HYSTERESIS_HIGH,
    OTSU_RANGE_MAX,
    INT16_MIN,
    INT16_MAX,
    MASK_ON,
    MASK_OFF,
)
from edge_eval.errors import DegenerateInputError, InvalidInputError, InvalidRangeError
from edge_eval.histogram import (
    compute_gradient_histogram,
    compute_histogram_percentile,
    histogram_index_to_value,
)

logger = logging.getLogger(__name__)

# 8-connectivity neighbourhood
EIGHT_CONNECTIVITY = np.ones((3, 3), dtype=bool)


def _validate_field(field: np.ndarray, name: str = "magnitude") -> None:
    if field is None or field.size == 0:
        raise InvalidInputError(f"{name} field is empty")
    if field.ndim != 2:
        raise InvalidInputError(f"{name} field must be 2D, got shape {field.shape}")


def _validate_fraction(value: float, name: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise InvalidRangeError(f"Invalid {name}: {value}. Must be in [0, 1]")


def _to_mask(edges: np.ndarray) -> np.ndarray:
    return np.where(edges, MASK_ON, MASK_OFF).astype(np.uint8)


def percentile_thresholds(
    magnitude: np.ndarray,
    fractions: Tuple[float, ...],
    n_bins: int,
) -> Tuple[float, ...]:
    """
    Convert cumulative fractions into gradient magnitude thresholds.

    Builds one histogram of the magnitude field and maps each fraction to the
    lower edge of the bin at which that fraction of pixels is reached.
    """
    hist = compute_gradient_histogram(magnitude, n_bins)

    thresholds = []
    for fraction in fractions:
        idx = compute_histogram_percentile(hist["counts"], fraction)
        value = histogram_index_to_value(idx, n_bins, hist["max_value"], 0.0)
        logger.debug(f"Fraction {fraction:.3f} -> bin {idx}/{n_bins} -> magnitude {value:.3f}")
        thresholds.append(value)

    return tuple(thresholds)


def detect_edges_percentile(
    magnitude: np.ndarray,
    th: float = DEFAULT_PERCENTILE_THRESHOLD,
    n_bins: int = DEFAULT_N_BINS,
) -> np.ndarray:
    """
    Mark pixels whose magnitude reaches the th-percentile threshold.

    Args:
        magnitude: Gradient magnitude field
        th: Fraction of pixel mass below the threshold bin, in [0, 1]
        n_bins: Histogram bins

    Returns:
        uint8 edge mask, same size as magnitude
    """
    _validate_field(magnitude)
    _validate_fraction(th, "th")

    (threshold,) = percentile_thresholds(magnitude, (th,), n_bins)
    edges = _to_mask(magnitude >= threshold)

    logger.debug(f"Percentile edges (th={th}): threshold={threshold:.3f}, "
                 f"{np.count_nonzero(edges):,}/{edges.size:,} pixels")
    return edges


def detect_edges_otsu(magnitude: np.ndarray) -> np.ndarray:
    """
    Threshold the magnitude field with Otsu's method.

    The field is rescaled linearly from [min, max] into [0, 255] before
    cv2.threshold picks the two-class variance-maximizing level.

    Args:
        magnitude: Gradient magnitude field

    Returns:
        uint8 edge mask, same size as magnitude
    """
    _validate_field(magnitude)
    if not np.all(np.isfinite(magnitude)):
        raise InvalidInputError("magnitude field contains NaN or infinite samples")

    min_val = float(np.min(magnitude))
    max_val = float(np.max(magnitude))
    if max_val == min_val:
        raise DegenerateInputError(f"Magnitude field is constant ({max_val}), cannot rescale")

    gradient_uint8 = cv2.normalize(
        magnitude.astype(np.float64), None, 0, OTSU_RANGE_MAX, cv2.NORM_MINMAX, dtype=cv2.CV_8U
    )
    otsu_threshold, edges = cv2.threshold(gradient_uint8, 0, MASK_ON, cv2.THRESH_BINARY | cv2.THRESH_OTSU)

    logger.debug(f"Otsu edges: threshold={otsu_threshold:.0f}/255 "
                 f"(magnitude range [{min_val:.3f}, {max_val:.3f}]), "
                 f"{np.count_nonzero(edges):,}/{edges.size:,} pixels")
    return edges


def hysteresis_threshold(magnitude: np.ndarray, low: float, high: float) -> np.ndarray:
    """
    Two-level hysteresis over a magnitude field.

    Pixels above high are strong edges. Pixels above low survive only when
    their 8-connected weak component contains at least one strong pixel.
    Both comparisons are strict, as in cv2.Canny, so a zero low threshold
    never turns flat regions into weak edges.

    Returns:
        Boolean edge map
    """
    strong = magnitude > high
    weak = magnitude > low

    labels, num_components = ndimage.label(weak, structure=EIGHT_CONNECTIVITY)
    keep = np.unique(labels[strong])
    keep = keep[keep > 0]

    logger.debug(f"Hysteresis: {num_components} weak components, {len(keep)} touch a strong edge")
    return np.isin(labels, keep)


def detect_edges_hysteresis(
    dx: np.ndarray,
    dy: np.ndarray,
    th1: float = DEFAULT_HYSTERESIS_LOW,
    th2: float = DEFAULT_HYSTERESIS_HIGH,
    n_bins: int = DEFAULT_N_BINS,
    thin_edges: bool = False,
) -> np.ndarray:
    """
    Canny-style dual-threshold edge detection with percentile thresholds.

    Both thresholds come from the histogram of the gradient magnitude of
    (dx, dy). By default the plain hysteresis rule is applied to the
    magnitude. With thin_edges=True, cv2.Canny is run on the 16-bit
    derivatives instead, adding non-maximum suppression.

    Args:
        dx: Horizontal derivative
        dy: Vertical derivative
        th1: Weak-edge fraction in [0, 1]
        th2: Strong-edge fraction in [0, 1], th1 < th2
        n_bins: Histogram bins
        thin_edges: Apply non-maximum suppression (cv2.Canny)

    Returns:
        uint8 edge mask, same size as dx
    """
    _validate_fraction(th1, "th1")
    _validate_fraction(th2, "th2")
    if th1 >= th2:
        raise InvalidRangeError(f"th1 ({th1}) must be < th2 ({th2})")
    _validate_field(dx, "dx")

    magnitude = compute_gradient_magnitude(dx, dy)
    low, high = percentile_thresholds(magnitude, (th1, th2), n_bins)

    if thin_edges:
        dx_16s = np.clip(np.rint(dx), INT16_MIN, INT16_MAX).astype(np.int16)
        dy_16s = np.clip(np.rint(dy), INT16_MIN, INT16_MAX).astype(np.int16)
        edges = cv2.Canny(dx_16s, dy_16s, low, high, L2gradient=True)
    else:
        edges = _to_mask(hysteresis_threshold(magnitude, low, high))

    logger.debug(f"Hysteresis edges (th1={th1}, th2={th2}, thin={thin_edges}): "
                 f"low={low:.3f}, high={high:.3f}, {np.count_nonzero(edges):,}/{edges.size:,} pixels")
    return edges
