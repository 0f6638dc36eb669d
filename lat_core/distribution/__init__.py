"""
Distribution Module: Pseudorandom sampling for noise synthesis.

- DistributionSampler: seedable Normal/Exponential/Gamma sampling
- NormalDistribution, ExponentialDistribution, GammaDistribution:
  validated parameter holders bound to a sampler
"""

from .sampler import (
    DistributionSampler,
    EXPONENTIAL_SA_QI,
)
from .distributions import (
    NormalDistribution,
    ExponentialDistribution,
    GammaDistribution,
)

__all__ = [
    'DistributionSampler',
    'EXPONENTIAL_SA_QI',
    'NormalDistribution',
    'ExponentialDistribution',
    'GammaDistribution',
]
