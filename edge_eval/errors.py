"""
Exception types raised by the edge evaluation core.

All errors derive from EdgeEvaluationError, itself a ValueError, so callers
that already guard calls with ``except ValueError`` keep working.
"""


class EdgeEvaluationError(ValueError):
    """Base class for precondition failures in the edge evaluation core."""


class InvalidInputError(EdgeEvaluationError):
    """Input has the wrong shape, dtype or channel count."""


class SizeMismatchError(EdgeEvaluationError):
    """Two fields or masks that must match in size do not."""


class DegenerateInputError(EdgeEvaluationError):
    """Input carries no usable signal (all-zero field, zero-range field, empty histogram)."""


class InvalidRangeError(EdgeEvaluationError):
    """A parameter is outside its domain or two parameters are misordered."""


class InvariantViolationError(EdgeEvaluationError):
    """An internally computed result failed its own consistency check."""
