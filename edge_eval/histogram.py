"""
Gradient magnitude histograms and percentile thresholds.

Binning is done explicitly instead of through cv2.calcHist so the bin edge
rule is fixed: bin i covers [i*w, (i+1)*w) with w = max_value / n_bins, and
the maximum itself falls in the last bin.

Functions:
- compute_gradient_histogram: Bin a non-negative field into n_bins counts
- merge_histograms: Sum histograms computed over partitions of one field
- compute_histogram_percentile: Smallest bin reaching a cumulative fraction
- histogram_index_to_value: Lower edge of a bin, used as a magnitude threshold
"""

import numpy as np
import logging
from typing import Dict, Any, Optional, Sequence

from edge_eval.errors import (
    DegenerateInputError,
    InvalidInputError,
    InvalidRangeError,
    InvariantViolationError,
)

logger = logging.getLogger(__name__)


def compute_gradient_histogram(
    field: np.ndarray,
    n_bins: int,
    max_value: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Build a uniform-width histogram of a non-negative scalar field.

    Each sample v goes to bin min(floor(v * n_bins / max_value), n_bins - 1).

    Args:
        field: Non-negative scalar field (e.g. gradient magnitude)
        n_bins: Number of bins (> 0)
        max_value: Upper end of the binned range. Defaults to the field
            maximum; pass the whole-field maximum when binning partitions
            that will be merged later.

    Returns:
        Dictionary containing:
        - counts: int64 array of length n_bins
        - max_value: Upper end of the binned range
        - bin_width: max_value / n_bins
        - n_bins: Number of bins
        - total: Number of samples binned
    """
    if n_bins <= 0:
        raise InvalidRangeError(f"Invalid n_bins: {n_bins}. Must be > 0")
    if field is None or field.size == 0:
        raise InvalidInputError("Field is empty")

    values = np.asarray(field, dtype=np.float64).ravel()
    if not np.all(np.isfinite(values)):
        raise InvalidInputError("Field contains NaN or infinite samples")
    if np.any(values < 0):
        raise InvalidInputError(f"Field must be non-negative, minimum is {values.min()}")

    field_max = float(values.max())
    if max_value is None:
        max_value = field_max
    elif field_max > max_value:
        raise InvalidRangeError(f"Field maximum {field_max} exceeds histogram max_value {max_value}")

    max_value = float(max_value)
    if max_value <= 0:
        raise DegenerateInputError("Field maximum is 0, cannot build histogram")

    indices = np.floor(values * n_bins / max_value).astype(np.int64)
    indices = np.minimum(indices, n_bins - 1)
    counts = np.bincount(indices, minlength=n_bins).astype(np.int64)

    total = int(counts.sum())
    if total != values.size:
        raise InvariantViolationError(f"Histogram holds {total} samples, field has {values.size}")

    logger.debug(f"Histogram: {n_bins} bins over [0, {max_value:.3f}], {total} samples")

    return {
        "counts": counts,
        "max_value": max_value,
        "bin_width": max_value / n_bins,
        "n_bins": n_bins,
        "total": total,
    }


def merge_histograms(histograms: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge histograms built over disjoint partitions of the same field.

    Counts are added bin by bin. Every partition must have been binned with
    the same n_bins and max_value (the maximum of the whole field).
    """
    if not histograms:
        raise InvalidInputError("No histograms to merge")

    first = histograms[0]
    for hist in histograms[1:]:
        if hist["n_bins"] != first["n_bins"] or hist["max_value"] != first["max_value"]:
            raise InvalidInputError(
                f"Cannot merge histograms with different binning: "
                f"({first['n_bins']}, {first['max_value']}) vs ({hist['n_bins']}, {hist['max_value']})"
            )

    counts = np.sum([hist["counts"] for hist in histograms], axis=0).astype(np.int64)
    total = int(counts.sum())
    expected = sum(int(hist["total"]) for hist in histograms)
    if total != expected:
        raise InvariantViolationError(f"Merged histogram holds {total} samples, partitions hold {expected}")

    return {
        "counts": counts,
        "max_value": first["max_value"],
        "bin_width": first["bin_width"],
        "n_bins": first["n_bins"],
        "total": total,
    }


def compute_histogram_percentile(counts: np.ndarray, fraction: float) -> int:
    """
    Find the bin at which a fraction of the histogram mass is first reached.

    Returns the smallest index i with sum(counts[0..i]) >= fraction * total.
    A fraction of exactly 1.0 always maps to the last bin.

    Args:
        counts: Histogram counts
        fraction: Target cumulative fraction in [0, 1]

    Returns:
        Bin index in [0, len(counts) - 1]
    """
    if not 0.0 <= fraction <= 1.0:
        raise InvalidRangeError(f"Invalid fraction: {fraction}. Must be in [0, 1]")

    counts = np.asarray(counts, dtype=np.float64).ravel()
    if counts.size == 0:
        raise InvalidInputError("Histogram has no bins")

    total = counts.sum()
    if total <= 0:
        raise DegenerateInputError("Histogram mass is 0")

    n_bins = counts.size
    if fraction == 1.0:
        return n_bins - 1

    target = fraction * total
    cumulative = np.cumsum(counts)
    idx = int(np.searchsorted(cumulative, target, side="left"))
    # cumulative[-1] == total >= target, so the search never runs off the end
    idx = min(idx, n_bins - 1)

    if idx > 0 and cumulative[idx - 1] >= target:
        raise InvariantViolationError(f"Bin {idx - 1} already reaches fraction {fraction}")
    if cumulative[idx] < target:
        raise InvariantViolationError(f"Bin {idx} does not reach fraction {fraction}")

    return idx


def histogram_index_to_value(
    idx: int,
    n_bins: int,
    max_value: float,
    min_value: float = 0.0,
) -> float:
    """
    Map a bin index to the lower edge of that bin.

    Returns:
        min_value + idx * (max_value - min_value) / n_bins
    """
    if n_bins <= 0:
        raise InvalidRangeError(f"Invalid n_bins: {n_bins}. Must be > 0")
    if not 0 <= idx < n_bins:
        raise InvalidRangeError(f"Invalid bin index: {idx}. Must be in [0, {n_bins - 1}]")
    if min_value >= max_value:
        raise InvalidRangeError(f"min_value ({min_value}) must be < max_value ({max_value})")

    bin_width = (max_value - min_value) / n_bins
    return float(min_value + idx * bin_width)
