"""
Ground-truth edge masks from consensus maps.

A consensus map scores each pixel by how many annotators (or edge estimates)
agree it is an edge. The map is rescaled to [0, 100] and thresholded.
"""

import numpy as np
import logging

from edge_eval.edge_detection_constants import (
    CONSENSUS_RANGE_MIN,
    CONSENSUS_RANGE_MAX,
    DEFAULT_MIN_CONSENSUS,
    MASK_ON,
    MASK_OFF,
)
from edge_eval.errors import InvalidInputError, InvalidRangeError

logger = logging.getLogger(__name__)


def normalize_consensus(consensus: np.ndarray) -> np.ndarray:
    """
    Linearly rescale a consensus field from [min, max] to [0, 100].

    A constant field has no range to stretch and maps to all zeros.
    Multi-channel input is averaged to a single channel.
    """
    if consensus is None or consensus.size == 0:
        raise InvalidInputError("Consensus field is empty")

    field = np.asarray(consensus, dtype=np.float64)
    if field.ndim == 3:
        field = field.mean(axis=2)
    if field.ndim != 2:
        raise InvalidInputError(f"Consensus field must be 2D, got shape {consensus.shape}")
    if not np.all(np.isfinite(field)):
        raise InvalidInputError("Consensus field contains NaN or infinite samples")

    min_val = field.min()
    max_val = field.max()
    if max_val == min_val:
        logger.debug(f"Consensus field is constant ({min_val}), normalizing to zeros")
        return np.full(field.shape, CONSENSUS_RANGE_MIN, dtype=np.float64)

    span = CONSENSUS_RANGE_MAX - CONSENSUS_RANGE_MIN
    normalized = CONSENSUS_RANGE_MIN + (field - min_val) * span / (max_val - min_val)
    # Pin the top so full agreement always reaches exactly 100
    normalized[field == max_val] = CONSENSUS_RANGE_MAX
    return normalized


def compute_ground_truth(
    consensus: np.ndarray,
    min_consensus: float = DEFAULT_MIN_CONSENSUS,
) -> np.ndarray:
    """
    Binarize a consensus field into a ground-truth edge mask.

    Args:
        consensus: Per-pixel agreement score, any numeric range
        min_consensus: Minimum normalized consensus in [0, 100]

    Returns:
        uint8 mask with MASK_ON where normalized consensus >= min_consensus
    """
    if not CONSENSUS_RANGE_MIN <= min_consensus <= CONSENSUS_RANGE_MAX:
        raise InvalidRangeError(
            f"Invalid min_consensus: {min_consensus}. Must be in [{CONSENSUS_RANGE_MIN}, {CONSENSUS_RANGE_MAX}]"
        )

    normalized = normalize_consensus(consensus)
    gt = np.where(normalized >= min_consensus, MASK_ON, MASK_OFF).astype(np.uint8)

    logger.debug(f"Ground truth (min_consensus={min_consensus}): "
                 f"{np.count_nonzero(gt):,}/{gt.size:,} edge pixels")
    return gt
