"""
Constants for gradient edge detection and edge evaluation.

This module contains the default parameters and valid domains used by the
derivative, histogram, detector and ground-truth stages so they are easy to
tune in one place.
"""

# =============================================================================
# Derivative Constants
# =============================================================================

# Gaussian pre-smoothing radius (kernel size is 2*r+1, 0 disables smoothing)
DEFAULT_GAUSSIAN_RADIUS = 0

# Default Sobel aperture
DEFAULT_SOBEL_APERTURE = 3

# Valid Sobel apertures
VALID_SOBEL_APERTURES = (1, 3, 5, 7)


# =============================================================================
# Histogram Constants
# =============================================================================

# Number of uniform-width bins over [0, max_gradient]
DEFAULT_N_BINS = 100


# =============================================================================
# Edge Detector Constants
# =============================================================================

# Percentile detector: fraction of pixel mass below the edge threshold
DEFAULT_PERCENTILE_THRESHOLD = 0.8

# Hysteresis detector: weak/strong percentile thresholds (th1 < th2)
DEFAULT_HYSTERESIS_LOW = 0.6
DEFAULT_HYSTERESIS_HIGH = 0.9

# Otsu detector rescales magnitude into the 8-bit range
OTSU_RANGE_MAX = 255

# Canny (thin_edges) expects 16-bit signed derivatives
INT16_MIN = -32768
INT16_MAX = 32767

# Detection methods understood by the evaluation pipeline
METHOD_PERCENTILE = "percentile"
METHOD_OTSU = "otsu"
METHOD_CANNY = "canny"
VALID_METHODS = (METHOD_PERCENTILE, METHOD_OTSU, METHOD_CANNY)


# =============================================================================
# Mask Constants
# =============================================================================

# Byte-image convention for binary masks
MASK_ON = 255
MASK_OFF = 0


# =============================================================================
# Ground Truth Constants
# =============================================================================

# Consensus values are rescaled into [0, 100] before thresholding
CONSENSUS_RANGE_MIN = 0.0
CONSENSUS_RANGE_MAX = 100.0

# Default minimum consensus (full agreement)
DEFAULT_MIN_CONSENSUS = 100.0
