"""
Image derivatives and gradient magnitude.

Functions:
- compute_derivatives: Optional Gaussian smoothing + bidirectional Sobel filtering
- compute_gradient_magnitude: Per-pixel Euclidean norm of (dx, dy)
"""

import cv2
import numpy as np
import logging
from typing import Dict, Any

from edge_eval.edge_detection_constants import (
    DEFAULT_GAUSSIAN_RADIUS,
    DEFAULT_SOBEL_APERTURE,
    VALID_SOBEL_APERTURES,
)
from edge_eval.errors import InvalidInputError, InvalidRangeError, SizeMismatchError

logger = logging.getLogger(__name__)

# Depths cv2.GaussianBlur and cv2.Sobel accept without conversion
_NATIVE_DEPTHS = (np.uint8, np.uint16, np.int16)


def _validate_gray_image(image: np.ndarray) -> np.ndarray:
    """
    Check that image is a non-empty, single-channel, integral array.

    A trailing channel axis of length 1 is squeezed away.

    Returns:
        2D view of the image
    """
    if image is None or image.size == 0:
        raise InvalidInputError("Image is empty")

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    if image.ndim != 2:
        raise InvalidInputError(f"Expected single-channel image, got shape {image.shape}")

    if not np.issubdtype(image.dtype, np.integer):
        raise InvalidInputError(f"Expected integral image depth, got {image.dtype}")

    return image


def compute_derivatives(
    image: np.ndarray,
    gaussian_radius: int = DEFAULT_GAUSSIAN_RADIUS,
    sobel_aperture: int = DEFAULT_SOBEL_APERTURE,
) -> Dict[str, Any]:
    """
    Compute horizontal and vertical first derivatives of a grayscale image.

    If gaussian_radius > 0 the image is first smoothed with a Gaussian
    kernel of size 2*gaussian_radius+1 (sigma derived from the size).

    Args:
        image: Single-channel image with integral samples (usually uint8)
        gaussian_radius: Smoothing radius, 0 disables smoothing
        sobel_aperture: Sobel aperture (1, 3, 5 or 7)

    Returns:
        Dictionary containing:
        - gradient_x: Horizontal derivative (float64, same size as image)
        - gradient_y: Vertical derivative (float64, same size as image)
        - gradient_direction: Edge orientation (radians)
        - gaussian_radius: Smoothing radius used
        - sobel_aperture: Aperture used
    """
    image = _validate_gray_image(image)

    if gaussian_radius < 0:
        raise InvalidRangeError(f"Invalid gaussian_radius: {gaussian_radius}. Must be >= 0")
    if sobel_aperture not in VALID_SOBEL_APERTURES:
        raise InvalidRangeError(f"Invalid sobel_aperture: {sobel_aperture}. Use {VALID_SOBEL_APERTURES}")

    if image.dtype in _NATIVE_DEPTHS:
        work = image
    else:
        work = image.astype(np.float64)

    if gaussian_radius > 0:
        ksize = 2 * gaussian_radius + 1
        work = cv2.GaussianBlur(work, (ksize, ksize), 0)

    grad_x = cv2.Sobel(work, cv2.CV_64F, 1, 0, ksize=sobel_aperture)
    grad_y = cv2.Sobel(work, cv2.CV_64F, 0, 1, ksize=sobel_aperture)

    gradient_direction = np.arctan2(grad_y, grad_x)

    h, w = image.shape
    logger.debug(f"Derivatives on {w}x{h} image (g_r={gaussian_radius}, s_ap={sobel_aperture}): "
                 f"dx in [{grad_x.min():.1f}, {grad_x.max():.1f}], dy in [{grad_y.min():.1f}, {grad_y.max():.1f}]")

    return {
        "gradient_x": grad_x,
        "gradient_y": grad_y,
        "gradient_direction": gradient_direction,
        "gaussian_radius": gaussian_radius,
        "sobel_aperture": sobel_aperture,
    }


def compute_gradient_magnitude(dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
    """
    Combine directional derivatives into a gradient magnitude field.

    Args:
        dx: Horizontal derivative
        dy: Vertical derivative

    Returns:
        sqrt(dx^2 + dy^2) per element (float64)
    """
    if dx.shape != dy.shape:
        raise SizeMismatchError(f"Derivative shapes differ: dx {dx.shape} vs dy {dy.shape}")

    return np.hypot(dx.astype(np.float64), dy.astype(np.float64))
