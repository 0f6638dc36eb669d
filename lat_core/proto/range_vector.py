"""
Range Vector helpers.

A range vector is an ordered sequence of per-anchor distance readings (one
entry per anchor, fixed anchor ordering for a session). A reading is either a
finite non-negative distance in meters or the FAILED sentinel.

Range vectors are plain Python sequences of floats; this module only
defines the sentinel and the validity predicates shared by all consumers.
"""

from typing import List, Sequence
import math

# Sentinel for "measurement failed"
FAILED: float = -1.0


def is_valid_range(value: float) -> bool:
    """
    Check if a single reading is a usable distance.
    
    Args:
        value: Range reading (m) or FAILED
        
    Returns:
        True if value is finite and non-negative
    """
    return value is not None and math.isfinite(value) and value >= 0.0


def count_valid(ranges: Sequence[float]) -> int:
    """Number of valid readings in a range vector."""
    return sum(1 for r in ranges if is_valid_range(r))


def valid_indices(ranges: Sequence[float]) -> List[int]:
    """Indices of the valid readings, in anchor order."""
    return [i for i, r in enumerate(ranges) if is_valid_range(r)]


def failed_vector(n_anchors: int) -> List[float]:
    """Range vector with every anchor marked FAILED."""
    return [FAILED] * n_anchors
