"""
Ratio-based weighers.

- SimpleWeigher: consistency of the distance/range ratios
- SimpleWeigher2: inverse sum of squared relative range deviations
"""

from typing import Sequence

from lat_core.proto.point import Point
from lat_core.weighting.base import Weigher
from lat_core.weighting.statistics import PreciseStandardDeviation

# Guards for the ratio weigher
MIN_RANGE_M = 0.001
MIN_DENOMINATOR = 0.00001

# Upper bound on SimpleWeigher2 weights (sum of squares floored at 1/MAX)
MAX_WEIGHT = 1e12


class SimpleWeigher(Weigher):
    """
    Per anchor, ratio = distance / max(range, MIN_RANGE_M).
    
    Weight = (1 / mean) / sdev with both denominators floored at
    MIN_DENOMINATOR. Ratios close to 1 and close to each other score high.
    """
    
    name = "Simple Weigher"
    
    def _weigh(self, position: Point, anchors: Sequence[Point], ranges: Sequence[float]) -> float:
        stats = PreciseStandardDeviation()
        for anchor, r in zip(anchors, ranges):
            stats.add_sample(position.distance_to(anchor) / max(r, MIN_RANGE_M))
        mean = stats.mean()
        sdev = stats.standard_deviation()
        return (1.0 / (mean if mean > 0 else MIN_DENOMINATOR)) / (
            sdev if sdev > 0 else MIN_DENOMINATOR
        )


class SimpleWeigher2(Weigher):
    """
    Weight = 1 / sum((distance / range - 1)^2) over anchors with range > 0.
    
    Anchors with a non-positive range carry no information about the
    position and are skipped: they neither raise nor lower the weight.
    
    Degenerate sums:
        - No anchor with range > 0: weight 0.0
        - Sum below 1 / MAX_WEIGHT (including an exact match, sum == 0):
          weight MAX_WEIGHT, so the result is always finite
    """
    
    name = "Simple Weigher 2"
    
    def _weigh(self, position: Point, anchors: Sequence[Point], ranges: Sequence[float]) -> float:
        total = 0.0
        used = 0
        for anchor, r in zip(anchors, ranges):
            if r <= 0:
                continue
            dev = position.distance_to(anchor) / r - 1.0
            total += dev * dev
            used += 1
        if used == 0:
            return 0.0
        return 1.0 / max(total, 1.0 / MAX_WEIGHT)
