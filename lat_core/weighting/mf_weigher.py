"""
Membership-function (MF) weigher.

Each residual `range - distance` is mapped through a trapezoidal fuzzy
membership function and clamped to [EPSILON, 1]. The weight is
mean / max(stddev, EPSILON) of the membership values: high when residuals
consistently fall inside the plateau.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from lat_core.errors import ConfigurationError
from lat_core.proto.point import Point
from lat_core.weighting.base import ConfigurableWeigher, EPSILON
from lat_core.weighting.statistics import PreciseStandardDeviation


@dataclass
class MFWeigherConfig:
    """
    Trapezoid corners of the membership function (m).
    
    Membership rises from 0 at low_rate to 1 at mean_low, stays 1 until
    mean_up and falls back to 0 at up_rate.
    """
    
    low_rate: float = -2.1610
    mean_low: float = 1.6362
    mean_up: float = 1.6362
    up_rate: float = 16.0428
    
    def __post_init__(self):
        """Validate configuration."""
        if not self.low_rate < self.mean_low <= self.mean_up < self.up_rate:
            raise ConfigurationError(
                "Need low_rate < mean_low <= mean_up < up_rate, got "
                f"{self.low_rate}, {self.mean_low}, {self.mean_up}, {self.up_rate}"
            )


def _clamp(value: float, low: float, high: float) -> float:
    return high if value > high else (low if value < low else value)


class MFWeigher(ConfigurableWeigher):
    """Consistency of trapezoidal memberships of the residuals."""
    
    name = "MF Weigher"
    
    def __init__(self, config: Optional[MFWeigherConfig] = None):
        super().__init__(config or MFWeigherConfig())
    
    def membership(self, residual: float) -> float:
        """Clamped membership value of a single residual."""
        c = self.config
        up = (residual - c.low_rate) / (c.mean_low - c.low_rate)
        down = (c.up_rate - residual) / (c.up_rate - c.mean_up)
        return _clamp(min(up, down), EPSILON, 1.0)
    
    def _weigh(self, position: Point, anchors: Sequence[Point], ranges: Sequence[float]) -> float:
        stats = PreciseStandardDeviation()
        for anchor, r in zip(anchors, ranges):
            stats.add_sample(self.membership(r - position.distance_to(anchor)))
        sdev = stats.standard_deviation()
        return stats.mean() / (sdev if sdev > EPSILON else EPSILON)
