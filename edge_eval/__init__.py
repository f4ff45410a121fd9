"""
Gradient edge detection and evaluation against consensus ground truth.
"""

from .derivatives import compute_derivatives, compute_gradient_magnitude
from .histogram import (
    compute_gradient_histogram,
    merge_histograms,
    compute_histogram_percentile,
    histogram_index_to_value,
)
from .edge_detection import detect_edges_percentile, detect_edges_otsu, detect_edges_hysteresis
from .ground_truth import compute_ground_truth, normalize_consensus
from .evaluation import (
    compute_confusion_matrix,
    compute_sensitivity,
    compute_precision,
    compute_f1_score,
    compute_metrics,
)
from .pipeline import evaluate_edge_detection
from .errors import (
    EdgeEvaluationError,
    InvalidInputError,
    SizeMismatchError,
    DegenerateInputError,
    InvalidRangeError,
    InvariantViolationError,
)

__all__ = [
    "compute_derivatives",
    "compute_gradient_magnitude",
    "compute_gradient_histogram",
    "merge_histograms",
    "compute_histogram_percentile",
    "histogram_index_to_value",
    "detect_edges_percentile",
    "detect_edges_otsu",
    "detect_edges_hysteresis",
    "compute_ground_truth",
    "normalize_consensus",
    "compute_confusion_matrix",
    "compute_sensitivity",
    "compute_precision",
    "compute_f1_score",
    "compute_metrics",
    "evaluate_edge_detection",
    "EdgeEvaluationError",
    "InvalidInputError",
    "SizeMismatchError",
    "DegenerateInputError",
    "InvalidRangeError",
    "InvariantViolationError",
]
