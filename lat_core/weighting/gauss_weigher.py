"""
Gauss weigher.

Product over anchors of a Normal density evaluated at the residual
`range - distance`. The product is accumulated in log space, floored at
the smallest normal double and capped near the largest, so a position far
in the tails still gets a tiny positive weight instead of 0.0.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import math
import sys

from lat_core.distribution.sampler import check_positive
from lat_core.proto.point import Point
from lat_core.weighting.base import MAX_LOG_WEIGHT, ConfigurableWeigher

MIN_WEIGHT = sys.float_info.min


@dataclass
class GaussWeigherConfig:
    """
    Normal residual model parameters.
    
    Attributes:
        mean_m: Mean of the residual (m)
        sdev_m: Standard deviation of the residual (m)
    """
    
    mean_m: float = 2.43
    sdev_m: float = 3.57
    
    def __post_init__(self):
        """Validate configuration."""
        check_positive("sdev_m", self.sdev_m)


class GaussWeigher(ConfigurableWeigher):
    """Product of Normal densities of the per-anchor residuals."""
    
    name = "Gauss Weigher"
    
    def __init__(self, config: Optional[GaussWeigherConfig] = None):
        super().__init__(config or GaussWeigherConfig())
    
    def _apply_config(self):
        var = self.config.sdev_m ** 2
        self._log_c = -0.5 * math.log(2.0 * math.pi * var)
        self._two_var = 2.0 * var
    
    def _weigh(self, position: Point, anchors: Sequence[Point], ranges: Sequence[float]) -> float:
        log_w = 0.0
        for anchor, r in zip(anchors, ranges):
            t = r - position.distance_to(anchor) - self.config.mean_m
            log_w += self._log_c - t * t / self._two_var
        return max(math.exp(min(log_w, MAX_LOG_WEIGHT)), MIN_WEIGHT)
