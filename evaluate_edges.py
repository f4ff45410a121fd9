#!/usr/bin/env python3
"""
Edge Detection Evaluation Tool

Detects edges in a grayscale image with a gradient-based detector and scores
the result against a ground truth built from a consensus map.

Usage:
    python evaluate_edges.py --input image.png --consensus consensus.png [--method canny] [--debug debug_dir]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from edge_eval.edge_detection_constants import (
    DEFAULT_GAUSSIAN_RADIUS,
    DEFAULT_SOBEL_APERTURE,
    VALID_SOBEL_APERTURES,
    DEFAULT_N_BINS,
    DEFAULT_PERCENTILE_THRESHOLD,
    DEFAULT_HYSTERESIS_LOW,
    DEFAULT_HYSTERESIS_HIGH,
    DEFAULT_MIN_CONSENSUS,
    METHOD_PERCENTILE,
    VALID_METHODS,
)
from edge_eval.errors import EdgeEvaluationError
from edge_eval.pipeline import evaluate_edge_detection

SUPPORTED_SUFFIXES = [".jpg", ".jpeg", ".png", ".bmp", ".pgm", ".tif", ".tiff"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Evaluate gradient edge detection against a consensus ground truth.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python evaluate_edges.py --input img.png --consensus gt.png
    python evaluate_edges.py --input img.png --consensus gt.png --method otsu
    python evaluate_edges.py --input img.png --consensus gt.png --method canny --th1 0.7 --th2 0.9 --debug out/
        """,
    )

    # Required arguments
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Path to input grayscale image",
    )
    parser.add_argument(
        "--consensus",
        type=str,
        required=True,
        help="Path to consensus (ground-truth agreement) image",
    )

    # Detector options
    parser.add_argument(
        "--method",
        type=str,
        default=METHOD_PERCENTILE,
        choices=list(VALID_METHODS),
        help=f"Edge detection method (default: {METHOD_PERCENTILE})",
    )
    parser.add_argument(
        "--gaussian-radius",
        type=int,
        default=DEFAULT_GAUSSIAN_RADIUS,
        help=f"Gaussian smoothing radius, 0 disables (default: {DEFAULT_GAUSSIAN_RADIUS})",
    )
    parser.add_argument(
        "--sobel-aperture",
        type=int,
        default=DEFAULT_SOBEL_APERTURE,
        choices=list(VALID_SOBEL_APERTURES),
        help=f"Sobel aperture (default: {DEFAULT_SOBEL_APERTURE})",
    )
    parser.add_argument(
        "--n-bins",
        type=int,
        default=DEFAULT_N_BINS,
        help=f"Gradient histogram bins (default: {DEFAULT_N_BINS})",
    )
    parser.add_argument(
        "--th",
        type=float,
        default=DEFAULT_PERCENTILE_THRESHOLD,
        help=f"Percentile threshold in [0, 1] (default: {DEFAULT_PERCENTILE_THRESHOLD})",
    )
    parser.add_argument(
        "--th1",
        type=float,
        default=DEFAULT_HYSTERESIS_LOW,
        help=f"Canny weak-edge percentile in [0, 1] (default: {DEFAULT_HYSTERESIS_LOW})",
    )
    parser.add_argument(
        "--th2",
        type=float,
        default=DEFAULT_HYSTERESIS_HIGH,
        help=f"Canny strong-edge percentile in [0, 1] (default: {DEFAULT_HYSTERESIS_HIGH})",
    )
    parser.add_argument(
        "--thin-edges",
        action="store_true",
        help="Apply non-maximum suppression in the canny method",
    )

    # Ground truth options
    parser.add_argument(
        "--min-consensus",
        type=float,
        default=DEFAULT_MIN_CONSENSUS,
        help=f"Minimum normalized consensus in [0, 100] (default: {DEFAULT_MIN_CONSENSUS})",
    )

    # Debugging options
    parser.add_argument(
        "--debug",
        type=str,
        default=None,
        help="Directory to save debug images (magnitude, masks, comparison)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging from the evaluation modules",
    )

    return parser.parse_args(argv)


def validate_input(input_path: str) -> Optional[str]:
    """
    Validate input file exists and is a supported image format.

    Args:
        input_path: Path to input image

    Returns:
        Error message if validation fails, None if valid
    """
    path = Path(input_path)

    if not path.exists():
        return f"Input file not found: {input_path}"

    if not path.is_file():
        return f"Input path is not a file: {input_path}"

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        return f"Unsupported image format: {suffix}. Use one of {', '.join(SUPPORTED_SUFFIXES)}."

    return None


def load_grayscale(input_path: str) -> Optional[np.ndarray]:
    """Load an image as single-channel uint8, or None if it cannot be read."""
    return cv2.imread(input_path, cv2.IMREAD_GRAYSCALE)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    for path in (args.input, args.consensus):
        error = validate_input(path)
        if error:
            print(f"Error: {error}", file=sys.stderr)
            return 1

    image = load_grayscale(args.input)
    if image is None:
        print(f"Error: Failed to load image: {args.input}", file=sys.stderr)
        return 1

    consensus = load_grayscale(args.consensus)
    if consensus is None:
        print(f"Error: Failed to load consensus image: {args.consensus}", file=sys.stderr)
        return 1

    print(f"Loaded image: {args.input} ({image.shape[1]}x{image.shape[0]})")
    print(f"Loaded consensus: {args.consensus} ({consensus.shape[1]}x{consensus.shape[0]})")

    try:
        result = evaluate_edge_detection(
            image=image,
            consensus=consensus,
            method=args.method,
            gaussian_radius=args.gaussian_radius,
            sobel_aperture=args.sobel_aperture,
            n_bins=args.n_bins,
            th=args.th,
            th1=args.th1,
            th2=args.th2,
            min_consensus=args.min_consensus,
            thin_edges=args.thin_edges,
            debug_dir=args.debug,
        )
    except EdgeEvaluationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    cm = result["confusion_matrix"]
    print(f"Method: {result['method']}")
    print(f"Confusion matrix [[TP, FN], [FP, TN]]:")
    print(f"  [[{cm[0, 0]}, {cm[0, 1]}],")
    print(f"   [{cm[1, 0]}, {cm[1, 1]}]]")
    print(f"Sensitivity: {result['sensitivity']:.4f}")
    print(f"Precision:   {result['precision']:.4f}")
    print(f"F1:          {result['f1']:.4f}")

    if args.debug:
        print(f"Debug images saved to: {args.debug}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
