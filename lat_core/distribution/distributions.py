"""
Parameterised distributions.

Immutable parameter holders validated at construction. Each distribution
draws from a DistributionSampler (its own by default), so sampling never
fails once the object exists.
"""

from typing import Optional

import numpy as np

from lat_core.distribution.sampler import DistributionSampler, check_positive


class _Distribution:
    """Common sampler plumbing."""

    def __init__(self, sampler: Optional[DistributionSampler] = None):
        self._sampler = sampler or DistributionSampler()

    @property
    def sampler(self) -> DistributionSampler:
        return self._sampler

    def sample(self) -> float:
        raise NotImplementedError

    def sample_many(self, n: int) -> np.ndarray:
        """Draw n independent samples."""
        return np.array([self.sample() for _ in range(n)])


class NormalDistribution(_Distribution):
    """
    Normal (Gauss) distribution.

    Args:
        mean: Mean
        sdev: Standard deviation, must be > 0
        sampler: Sampler to draw from (new unseeded sampler if None)
    """

    def __init__(self, mean: float = 0.0, sdev: float = 1.0,
                 sampler: Optional[DistributionSampler] = None):
        check_positive("Standard deviation", sdev)
        super().__init__(sampler)
        self._mean = float(mean)
        self._sdev = float(sdev)

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def sdev(self) -> float:
        return self._sdev

    def sample(self) -> float:
        return self._sampler._normal(self._mean, self._sdev)

    def __repr__(self) -> str:
        return f"NormalDistribution(mean={self._mean}, sdev={self._sdev})"


class ExponentialDistribution(_Distribution):
    """
    Exponential distribution parameterised by its mean.

    Args:
        mean: Mean (1 / rate), must be > 0
        sampler: Sampler to draw from (new unseeded sampler if None)
    """

    def __init__(self, mean: float = 1.0, sampler: Optional[DistributionSampler] = None):
        check_positive("Mean", mean)
        super().__init__(sampler)
        self._mean = float(mean)

    @property
    def mean(self) -> float:
        return self._mean

    def sample(self) -> float:
        return self._sampler._exponential(self._mean)

    def __repr__(self) -> str:
        return f"ExponentialDistribution(mean={self._mean})"


class GammaDistribution(_Distribution):
    """
    Gamma distribution with shape/scale parameterisation.

    Args:
        shape: Shape (alpha), must be > 0
        scale: Scale (beta = 1 / rate), must be > 0
        sampler: Sampler to draw from (new unseeded sampler if None)
    """

    def __init__(self, shape: float, scale: float,
                 sampler: Optional[DistributionSampler] = None):
        check_positive("Shape", shape)
        check_positive("Scale", scale)
        super().__init__(sampler)
        self._shape = float(shape)
        self._scale = float(scale)

    @property
    def shape(self) -> float:
        return self._shape

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def mean(self) -> float:
        return self._shape * self._scale

    @property
    def variance(self) -> float:
        return self._shape * self._scale ** 2

    def sample(self) -> float:
        return self._sampler._gamma(self._shape, self._scale)

    def __repr__(self) -> str:
        return f"GammaDistribution(shape={self._shape}, scale={self._scale})"
