"""
Edge detection scoring against a ground-truth mask.

This module handles:
- Per-pixel confusion matrix [[TP, FN], [FP, TN]]
- Sensitivity (recall), precision and F1 score

Every metric is 0 when its denominator is 0, so empty masks never produce NaN.
"""

import logging
import numpy as np
from typing import Dict
from sklearn.metrics import confusion_matrix

from edge_eval.errors import InvalidInputError, InvariantViolationError, SizeMismatchError

logger = logging.getLogger(__name__)

# Label order putting the edge class first gives [[TP, FN], [FP, TN]]
EDGE_LABELS = [1, 0]


def compute_confusion_matrix(gt: np.ndarray, pred: np.ndarray) -> np.ndarray:
    """
    Compare a predicted edge mask against ground truth, pixel by pixel.

    Any non-zero sample counts as an edge, so {0, 1} and {0, 255} masks both work.

    Args:
        gt: Ground-truth mask
        pred: Predicted mask, same size as gt

    Returns:
        2x2 int64 array [[TP, FN], [FP, TN]]
    """
    if gt.shape != pred.shape:
        raise SizeMismatchError(f"Mask shapes differ: ground truth {gt.shape} vs prediction {pred.shape}")
    if gt.size == 0:
        raise InvalidInputError("Masks are empty")
    if gt.ndim != 2:
        raise InvalidInputError(f"Masks must be 2D, got shape {gt.shape}")

    gt_edges = (gt != 0).astype(np.uint8).ravel()
    pred_edges = (pred != 0).astype(np.uint8).ravel()

    cm = confusion_matrix(gt_edges, pred_edges, labels=EDGE_LABELS).astype(np.int64)

    if int(cm.sum()) != gt.size:
        raise InvariantViolationError(f"Confusion matrix holds {int(cm.sum())} pixels, masks have {gt.size}")

    logger.debug(f"Confusion: TP={cm[0, 0]}, FN={cm[0, 1]}, FP={cm[1, 0]}, TN={cm[1, 1]}")
    return cm


def _validate_cm(cm: np.ndarray) -> np.ndarray:
    cm = np.asarray(cm)
    if cm.shape != (2, 2):
        raise InvalidInputError(f"Confusion matrix must be 2x2, got shape {cm.shape}")
    if np.any(cm < 0):
        raise InvalidInputError("Confusion matrix has negative counts")
    return cm


def compute_sensitivity(cm: np.ndarray) -> float:
    """TP / (TP + FN), or 0 when there are no ground-truth edges."""
    cm = _validate_cm(cm)
    tp, fn = float(cm[0, 0]), float(cm[0, 1])
    return tp / (tp + fn) if (tp + fn) > 0 else 0.0


def compute_precision(cm: np.ndarray) -> float:
    """TP / (TP + FP), or 0 when nothing was predicted as an edge."""
    cm = _validate_cm(cm)
    tp, fp = float(cm[0, 0]), float(cm[1, 0])
    return tp / (tp + fp) if (tp + fp) > 0 else 0.0


def compute_f1_score(cm: np.ndarray) -> float:
    """
    Harmonic mean of precision and sensitivity.

    Args:
        cm: Confusion matrix [[TP, FN], [FP, TN]]

    Returns:
        F1 score in [0, 1], 0 when precision + sensitivity is 0
    """
    precision = compute_precision(cm)
    sensitivity = compute_sensitivity(cm)

    if precision + sensitivity <= 0:
        return 0.0
    return 2.0 * precision * sensitivity / (precision + sensitivity)


def compute_metrics(cm: np.ndarray) -> Dict[str, float]:
    """
    Compute all scalar metrics from a confusion matrix.

    Returns:
        Dictionary containing:
        - sensitivity: TP / (TP + FN)
        - precision: TP / (TP + FP)
        - f1: 2 * precision * sensitivity / (precision + sensitivity)
    """
    return {
        "sensitivity": compute_sensitivity(cm),
        "precision": compute_precision(cm),
        "f1": compute_f1_score(cm),
    }
