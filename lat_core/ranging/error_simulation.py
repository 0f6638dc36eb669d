"""
LOS/NLOS error-simulation ranging filter.

Replaces each valid measurement with the ground-truth distance plus a
synthetic ranging error:
- LOS error ~ Normal(0.90, 0.56) on every valid reading
- For real distances at or beyond the hardware range threshold (25 m),
  with probability 0.2 an additional NLOS error ~ Exponential(mean 1.0)

Requires `real`; without it every anchor reports FAILED.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from lat_core.distribution import (
    DistributionSampler,
    NormalDistribution,
    ExponentialDistribution,
)
from lat_core.errors import ConfigurationError, UsageError
from lat_core.metrics import get_metrics
from lat_core.proto.range_vector import FAILED, failed_vector, is_valid_range
from lat_core.ranging.base import RangingFilter


@dataclass
class ErrorSimulationConfig:
    """
    Configuration for the LOS/NLOS error simulator.
    
    Attributes:
        los_mean_m: Mean of the LOS error (m)
        los_sdev_m: Standard deviation of the LOS error (m)
        nlos_mean_m: Mean of the NLOS error (m)
        nlos_threshold_m: Real distance from which NLOS errors can occur (m)
        nlos_probability: Chance of an NLOS error beyond the threshold
        seed: Seed for the filter's own sampler (None = unseeded)
    """
    
    los_mean_m: float = 0.90
    los_sdev_m: float = 0.56
    nlos_mean_m: float = 1.0
    nlos_threshold_m: float = 25.0
    nlos_probability: float = 0.2
    seed: Optional[int] = None
    
    def __post_init__(self):
        """Validate configuration."""
        if not 0.0 <= self.nlos_probability <= 1.0:
            raise ConfigurationError(
                f"nlos_probability must be in [0, 1], got {self.nlos_probability}"
            )
        if self.nlos_threshold_m < 0:
            raise ConfigurationError(
                f"nlos_threshold_m must be >= 0, got {self.nlos_threshold_m}"
            )


class ErrorSimulationRangingFilter(RangingFilter):
    """
    Synthesize LOS/NLOS ranging errors on top of ground-truth distances.
    
    The filter owns its sampler, so independent filters never contend for
    one generator.
    """
    
    def __init__(
        self,
        config: Optional[ErrorSimulationConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        self.config = config or ErrorSimulationConfig()
        self.metrics = get_metrics()
        self.sampler = sampler or DistributionSampler(seed=self.config.seed)
        # Distribution parameters are validated here, not per sample
        self.los_error = NormalDistribution(
            self.config.los_mean_m, self.config.los_sdev_m, self.sampler
        )
        self.nlos_error = ExponentialDistribution(self.config.nlos_mean_m, self.sampler)
    
    @property
    def name(self) -> str:
        return "RF-EM"
    
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
        
        self.metrics.increment('ranging_epochs')
        result = []
        for d_meas, d_real in zip(measured, real):
            if not (is_valid_range(d_meas) and is_valid_range(d_real)):
                result.append(FAILED)
                continue
            
            value = d_real + self.los_error.sample()
            if (d_real >= self.config.nlos_threshold_m and
                    self.sampler.next_double() <= self.config.nlos_probability):
                value += self.nlos_error.sample()
                self.metrics.increment('simulated_nlos_errors')
            result.append(value)
        return result
