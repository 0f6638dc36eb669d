"""
Tracking Module: Temporal smoothing of position estimates.

Location filters run after the multilateration pipeline has produced a
position for the epoch and smooth the sequence of positions over time.
"""

from .location_filter import (
    LocationFilter,
    LocationWindowConfig,
    MeanLocationFilter,
    MedianLocationFilter,
    GeometricMedianLocationFilter,
    KalmanLocationFilter,
    KalmanLocationConfig,
    geometric_median,
)

__all__ = [
    'LocationFilter',
    'LocationWindowConfig',
    'MeanLocationFilter',
    'MedianLocationFilter',
    'GeometricMedianLocationFilter',
    'KalmanLocationFilter',
    'KalmanLocationConfig',
    'geometric_median',
]
