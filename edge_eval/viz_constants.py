"""
Visualization constants for edge evaluation debug output.

Used by debug_observer.py when rendering masks and prediction/ground-truth
comparison overlays.
"""

import cv2

# ============================================================================
# FONT SETTINGS
# ============================================================================

FONT_FACE = cv2.FONT_HERSHEY_SIMPLEX


class FontScale:
    """Font scales for overlay text, tuned for images a few hundred pixels wide."""
    SMALL = 0.45


class FontThickness:
    """Stroke widths. Draw OUTLINE first, then the main text on top."""
    BODY = 1
    BODY_OUTLINE = 3


# ============================================================================
# COLORS (BGR format for OpenCV)
# ============================================================================

class Color:
    """Standard colors in BGR order."""
    WHITE = (255, 255, 255)
    BLACK = (0, 0, 0)
    RED = (0, 0, 255)
    GREEN = (0, 255, 0)
    BLUE = (255, 0, 0)


class OutcomeColor:
    """Per-pixel outcome colors for the comparison overlay (TN stays black)."""
    TRUE_POSITIVE = Color.GREEN
    FALSE_POSITIVE = Color.RED
    FALSE_NEGATIVE = Color.BLUE


# ============================================================================
# LAYOUT
# ============================================================================

class Layout:
    """Text placement in pixels from the top-left corner."""
    TEXT_OFFSET_X = 8
    TEXT_OFFSET_Y = 20
    LINE_HEIGHT = 20


# Longest side of a saved debug image
MAX_DEBUG_DIM = 1920

# PNG compression level for debug images
PNG_COMPRESSION = 6
