"""
End-to-end edge detection evaluation.

Runs derivatives -> magnitude -> detector on an image, builds ground truth
from a consensus map, and scores the prediction.
"""

import numpy as np
import logging
from typing import Dict, Any, Optional

from edge_eval.derivatives import compute_derivatives, compute_gradient_magnitude
from edge_eval.edge_detection import (
    detect_edges_percentile,
    detect_edges_otsu,
    detect_edges_hysteresis,
)
from edge_eval.edge_detection_constants import (
    DEFAULT_GAUSSIAN_RADIUS,
    DEFAULT_SOBEL_APERTURE,
    DEFAULT_N_BINS,
    DEFAULT_PERCENTILE_THRESHOLD,
    DEFAULT_HYSTERESIS_LOW,
    DEFAULT_HYSTERESIS_HIGH,
    DEFAULT_MIN_CONSENSUS,
    METHOD_PERCENTILE,
    METHOD_OTSU,
    VALID_METHODS,
)
from edge_eval.errors import InvalidInputError
from edge_eval.evaluation import compute_confusion_matrix, compute_metrics
from edge_eval.ground_truth import compute_ground_truth

logger = logging.getLogger(__name__)


def evaluate_edge_detection(
    image: np.ndarray,
    consensus: np.ndarray,
    method: str = METHOD_PERCENTILE,
    gaussian_radius: int = DEFAULT_GAUSSIAN_RADIUS,
    sobel_aperture: int = DEFAULT_SOBEL_APERTURE,
    n_bins: int = DEFAULT_N_BINS,
    th: float = DEFAULT_PERCENTILE_THRESHOLD,
    th1: float = DEFAULT_HYSTERESIS_LOW,
    th2: float = DEFAULT_HYSTERESIS_HIGH,
    min_consensus: float = DEFAULT_MIN_CONSENSUS,
    thin_edges: bool = False,
    debug_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Detect edges in an image and score them against a consensus ground truth.

    Args:
        image: Single-channel integral image
        consensus: Consensus map, same size as image
        method: "percentile", "otsu" or "canny"
        gaussian_radius: Pre-smoothing radius (0 disables)
        sobel_aperture: Sobel aperture (1, 3, 5 or 7)
        n_bins: Histogram bins for percentile thresholds
        th: Percentile detector fraction
        th1: Hysteresis weak fraction
        th2: Hysteresis strong fraction
        min_consensus: Ground-truth threshold on the 0-100 scale
        thin_edges: Non-maximum suppression for the canny method
        debug_dir: Directory to save debug visualizations

    Returns:
        Dictionary containing:
        - edges: Predicted uint8 mask
        - ground_truth: Ground-truth uint8 mask
        - confusion_matrix: [[TP, FN], [FP, TN]]
        - sensitivity, precision, f1: Scalar metrics
        - method: Detection method used
    """
    if method not in VALID_METHODS:
        raise InvalidInputError(f"Unknown detection method: {method}. Use {VALID_METHODS}")

    if debug_dir:
        from edge_eval.debug_observer import DebugObserver
        observer = DebugObserver(debug_dir)
    else:
        observer = None

    # Step 1: Derivatives and magnitude
    derivatives = compute_derivatives(image, gaussian_radius=gaussian_radius, sobel_aperture=sobel_aperture)
    dx = derivatives["gradient_x"]
    dy = derivatives["gradient_y"]
    magnitude = compute_gradient_magnitude(dx, dy)

    # Step 2: Edge detection
    if method == METHOD_PERCENTILE:
        edges = detect_edges_percentile(magnitude, th=th, n_bins=n_bins)
    elif method == METHOD_OTSU:
        edges = detect_edges_otsu(magnitude)
    else:
        edges = detect_edges_hysteresis(dx, dy, th1=th1, th2=th2, n_bins=n_bins, thin_edges=thin_edges)

    # Step 3: Ground truth and scoring
    gt = compute_ground_truth(consensus, min_consensus=min_consensus)
    cm = compute_confusion_matrix(gt, edges)
    metrics = compute_metrics(cm)

    logger.debug(f"{method}: sensitivity={metrics['sensitivity']:.4f}, "
                 f"precision={metrics['precision']:.4f}, f1={metrics['f1']:.4f}")

    if observer:
        from edge_eval.debug_observer import scale_to_uint8, draw_edge_comparison
        observer.save_stage("01_gradient_magnitude", scale_to_uint8(magnitude))
        observer.save_stage(f"02_edges_{method}", edges)
        observer.save_stage("03_ground_truth", gt)
        observer.save_stage("04_comparison", draw_edge_comparison(gt, edges))

    return {
        "edges": edges,
        "ground_truth": gt,
        "confusion_matrix": cm,
        "sensitivity": metrics["sensitivity"],
        "precision": metrics["precision"],
        "f1": metrics["f1"],
        "method": method,
    }
