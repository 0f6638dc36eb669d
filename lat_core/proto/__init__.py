"""
Protocol Module: Value types shared across the pipeline.

- Point: immutable 2D coordinate
- Range vectors: per-anchor readings with the FAILED sentinel
- PositionEstimate: final per-epoch output
"""

from .point import Point
from .range_vector import (
    FAILED,
    is_valid_range,
    count_valid,
    valid_indices,
    failed_vector,
)
from .position_estimate import (
    PositionEstimate,
    FixType,
    create_no_fix,
)

__all__ = [
    'Point',
    'FAILED',
    'is_valid_range',
    'count_valid',
    'valid_indices',
    'failed_vector',
    'PositionEstimate',
    'FixType',
    'create_no_fix',
]
