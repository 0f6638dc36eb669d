"""
Offset-correction ranging filter.

Subtracts a constant hardware offset from each valid reading, flooring the
result at a small positive distance. Stateless.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import math

from lat_core.errors import ConfigurationError
from lat_core.proto.range_vector import FAILED, is_valid_range
from lat_core.ranging.base import RangingFilter


@dataclass
class OffsetCorrectionConfig:
    """
    Configuration for offset correction.
    
    Attributes:
        offset_m: Constant offset subtracted from each reading (m)
        min_distance_m: Floor applied after correction (m)
    """
    
    offset_m: float = 3.04
    min_distance_m: float = 0.01
    
    def __post_init__(self):
        """Validate configuration."""
        if not math.isfinite(self.offset_m):
            raise ConfigurationError(f"offset_m must be finite, got {self.offset_m}")
        if not self.min_distance_m > 0:
            raise ConfigurationError(f"min_distance_m must be > 0, got {self.min_distance_m}")


class OffsetCorrectionRangingFilter(RangingFilter):
    """
    result[i] = max(measured[i] - offset, min_distance) for valid readings.
    """
    
    def __init__(self, config: Optional[OffsetCorrectionConfig] = None):
        self.config = config or OffsetCorrectionConfig()
    
    @property
    def name(self) -> str:
        return f"RF-OFFSET ({self.config.offset_m})"
    
    def filter(
        self,
        measured: Sequence[float],
        real: Optional[Sequence[float]] = None,
        timestamp: int = -1,
    ) -> List[float]:
        offset = self.config.offset_m
        floor = self.config.min_distance_m
        return [
            max(d - offset, floor) if is_valid_range(d) else FAILED
            for d in measured
        ]
