"""
Debug visualization observer for the edge evaluation pipeline.

This module provides a non-intrusive way to capture intermediate stages
(magnitude field, predicted mask, ground truth, comparison overlay) without
putting file I/O inside the core algorithms.
"""

import cv2
import numpy as np
from typing import Dict, List
from pathlib import Path

from edge_eval.viz_constants import (
    FONT_FACE,
    FontScale,
    FontThickness,
    Color,
    OutcomeColor,
    Layout,
    MAX_DEBUG_DIM,
    PNG_COMPRESSION,
)


class DebugObserver:
    """
    Observer for capturing and saving intermediate processing stages.

    Stage names become PNG filenames. Saving the same stage twice appends a
    counter instead of overwriting.
    """

    def __init__(self, debug_dir: str):
        """
        Initialize debug observer.

        Args:
            debug_dir: Directory where debug images will be saved
        """
        self.debug_dir = Path(debug_dir)
        self.debug_dir.mkdir(parents=True, exist_ok=True)
        self._stage_counter: Dict[str, int] = {}
        self.saved_paths: List[Path] = []

    def save_stage(self, name: str, image: np.ndarray) -> None:
        """
        Save an intermediate processing stage image.

        Args:
            name: Stage name (used as filename prefix)
            image: Image to save (uint8, gray or BGR)
        """
        if image is None or image.size == 0:
            return

        if name in self._stage_counter:
            self._stage_counter[name] += 1
            filename = f"{name}_{self._stage_counter[name]}.png"
        else:
            self._stage_counter[name] = 0
            filename = f"{name}.png"

        self._save_with_compression(image, filename)

    def _save_with_compression(self, image: np.ndarray, filename: str) -> None:
        output_path = self.debug_dir / filename

        h, w = image.shape[:2]
        if max(h, w) > MAX_DEBUG_DIM:
            scale = MAX_DEBUG_DIM / max(h, w)
            # Nearest neighbour keeps masks binary
            image = cv2.resize(image, (int(w * scale), int(h * scale)), interpolation=cv2.INTER_NEAREST)

        cv2.imwrite(str(output_path), image, [cv2.IMWRITE_PNG_COMPRESSION, PNG_COMPRESSION])
        self.saved_paths.append(output_path)


# =============================================================================
# Drawing Functions for Debug Visualization
# =============================================================================

def scale_to_uint8(field: np.ndarray) -> np.ndarray:
    """Min-max scale a scalar field to 0-255 for display. Constant fields map to 0."""
    field = field.astype(np.float64)
    min_val, max_val = float(field.min()), float(field.max())
    if max_val == min_val:
        return np.zeros(field.shape, dtype=np.uint8)
    return cv2.normalize(field, None, 0, 255, cv2.NORM_MINMAX, dtype=cv2.CV_8U)


def _put_outlined_text(image: np.ndarray, text: str, origin, color) -> None:
    cv2.putText(image, text, origin, FONT_FACE, FontScale.SMALL,
                Color.BLACK, FontThickness.BODY_OUTLINE, cv2.LINE_AA)
    cv2.putText(image, text, origin, FONT_FACE, FontScale.SMALL,
                color, FontThickness.BODY, cv2.LINE_AA)


def draw_edge_comparison(gt: np.ndarray, pred: np.ndarray, label: bool = True) -> np.ndarray:
    """
    Color each pixel by its confusion-matrix outcome.

    Green = true positive, red = false positive, blue = false negative,
    black = true negative.

    Args:
        gt: Ground-truth mask (non-zero = edge)
        pred: Predicted mask, same size as gt
        label: Whether to draw the legend

    Returns:
        BGR overlay image
    """
    gt_edges = gt != 0
    pred_edges = pred != 0

    vis = np.zeros(gt.shape + (3,), dtype=np.uint8)
    vis[gt_edges & pred_edges] = OutcomeColor.TRUE_POSITIVE
    vis[~gt_edges & pred_edges] = OutcomeColor.FALSE_POSITIVE
    vis[gt_edges & ~pred_edges] = OutcomeColor.FALSE_NEGATIVE

    if label:
        legend = [
            ("TP", OutcomeColor.TRUE_POSITIVE),
            ("FP", OutcomeColor.FALSE_POSITIVE),
            ("FN", OutcomeColor.FALSE_NEGATIVE),
        ]
        for i, (text, color) in enumerate(legend):
            origin = (Layout.TEXT_OFFSET_X, Layout.TEXT_OFFSET_Y + i * Layout.LINE_HEIGHT)
            _put_outlined_text(vis, text, origin, color)

    return vis
