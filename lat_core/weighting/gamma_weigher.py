"""
Gamma weigher.

Models `range + offset - distance` as a Gamma(shape, rate) residual and
returns the product of the per-anchor densities, accumulated in log space
and capped near the largest double. A residual outside the support (<= 0)
for any anchor gives weight 0.0.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import math

from lat_core.distribution.sampler import check_positive
from lat_core.errors import ConfigurationError
from lat_core.proto.point import Point
from lat_core.weighting.base import MAX_LOG_WEIGHT, ConfigurableWeigher


@dataclass
class GammaWeigherConfig:
    """
    Gamma residual model parameters.
    
    Attributes:
        shape: Gamma shape
        rate: Gamma rate (1 / scale)
        offset_m: Shift added to each range before the residual (m)
    """
    
    shape: float = 3.3
    rate: float = 0.576
    offset_m: float = 3.31060119642765
    
    def __post_init__(self):
        """Validate configuration."""
        check_positive("shape", self.shape)
        check_positive("rate", self.rate)
        if not math.isfinite(self.offset_m):
            raise ConfigurationError(f"offset_m must be finite, got {self.offset_m}")


class GammaWeigher(ConfigurableWeigher):
    """Product of Gamma densities of the per-anchor residuals."""
    
    name = "Gamma Weigher"
    
    def __init__(self, config: Optional[GammaWeigherConfig] = None):
        super().__init__(config or GammaWeigherConfig())
    
    def _apply_config(self):
        c = self.config
        # log(rate^shape / Gamma(shape))
        self._log_norm = c.shape * math.log(c.rate) - math.lgamma(c.shape)
    
    @property
    def normalizer(self) -> float:
        return math.exp(min(self._log_norm, MAX_LOG_WEIGHT))
    
    def _weigh(self, position: Point, anchors: Sequence[Point], ranges: Sequence[float]) -> float:
        c = self.config
        log_w = 0.0
        for anchor, r in zip(anchors, ranges):
            x = r + c.offset_m - position.distance_to(anchor)
            if x <= 0.0:
                return 0.0
            log_w += self._log_norm + (c.shape - 1.0) * math.log(x) - c.rate * x
        return math.exp(min(log_w, MAX_LOG_WEIGHT))
