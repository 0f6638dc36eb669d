"""
Hardware-profile ranging filter.

Adds an offset from a hardware error model to each ground-truth distance,
simulating a specific ranging chip. Requires `real`.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from lat_core.distribution import DistributionSampler
from lat_core.distribution.sampler import check_positive
from lat_core.errormodel import ErrorModel, create_hardware_profile_model
from lat_core.errors import UsageError
from lat_core.proto.range_vector import FAILED, failed_vector, is_valid_range
from lat_core.ranging.base import RangingFilter


@dataclass
class HardwareProfileConfig:
    """
    Configuration for the hardware-profile ranging filter.
    
    Attributes:
        maximum_allowed_error_m: Bound on |offset| (m)
        negative_offsets: Allow negative offsets
        p_nlos: NLOS probability passed to the error model
        seed: Seed for the error model's sampler (None = unseeded)
    """
    
    maximum_allowed_error_m: float = 30.0
    negative_offsets: bool = True
    p_nlos: float = 0.0
    seed: Optional[int] = None
    
    def __post_init__(self):
        """Validate configuration."""
        check_positive("maximum_allowed_error_m", self.maximum_allowed_error_m)


class HardwareProfileRangingFilter(RangingFilter):
    """
    result[i] = real[i] + error_model.offset(real[i]) for valid readings.
    
    Usage:
        rf = HardwareProfileRangingFilter()               # Nanopan profile
        rf = HardwareProfileRangingFilter(error_model=LosErrorModel())
    """
    
    def __init__(
        self,
        config: Optional[HardwareProfileConfig] = None,
        error_model: Optional[ErrorModel] = None,
    ):
        self.config = config or HardwareProfileConfig()
        self.error_model = error_model or create_hardware_profile_model(
            maximum_allowed_error_m=self.config.maximum_allowed_error_m,
            negative_offsets=self.config.negative_offsets,
            sampler=DistributionSampler(seed=self.config.seed),
        )
    
    @property
    def name(self) -> str:
        return f"RF-{self.error_model.name.upper()}-SIM"
    
    def filter(
        self,
        measured: Sequence[float],
        real: Optional[Sequence[float]] = None,
        timestamp: int = -1,
    ) -> List[float]:
        if real is None:
            return failed_vector(len(measured))
        if len(real) != len(measured):
            raise UsageError(
                f"real has {len(real)} entries, measured has {len(measured)}"
            )
        
        result = []
        for d_meas, d_real in zip(measured, real):
            if is_valid_range(d_meas) and is_valid_range(d_real):
                result.append(d_real + self.error_model.offset(d_real, self.config.p_nlos))
            else:
                result.append(FAILED)
        return result
    
    def reset(self):
        """Reset the error model's running statistics."""
        self.error_model.reset()
