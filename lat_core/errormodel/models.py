"""
Concrete ranging error models.

- NanopanErrorModel: empirical model of the Nanotron Nanopan 5375 chip
- LosErrorModel: Normal line-of-sight error
- LosNlosErrorModel: Normal LOS error plus occasional Exponential NLOS error
- GammaErrorModel: Gamma-distributed error minus a fixed offset
- UniformErrorModel: uniform error on a fixed interval
- LosNlosUniformErrorModel: Normal LOS error plus occasional Uniform NLOS error
- LosNlosGmmErrorModel: mixture of LOS and NLOS Normal errors weighted by p_nlos
- NoErrorModel: zero error
"""

from typing import Optional
import math

from lat_core.distribution import (
    DistributionSampler,
    NormalDistribution,
    GammaDistribution,
)
from lat_core.distribution.sampler import check_positive
from lat_core.errors import ConfigurationError
from lat_core.errormodel.base import ErrorModel, ErrorModelConfig

# Nanopan 5375 empirical fit: ln(u1*u2*u3) / -RATE - OFFSET
NANOPAN_RATE = 0.5228819579
NANOPAN_OFFSET_M = 3.31060119642765


class NanopanErrorModel(ErrorModel):
    """
    Hardware profile of the Nanopan 5375 ranging chip.

    The offset is a Gamma(3, 1/RATE) variate built from three uniforms,
    shifted by the chip's mean ranging offset, folded, biased and clamped.
    """

    name = "Nanopan5375"

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        s = self.sampler
        x = s.next_uniform() * s.next_uniform() * s.next_uniform()
        x = math.log(x) / -NANOPAN_RATE - NANOPAN_OFFSET_M
        y = self._fold(x) * self.config.bias
        return self._clamp(y)


def create_hardware_profile_model(
    maximum_allowed_error_m: float = 30.0,
    negative_offsets: bool = True,
    sampler: Optional[DistributionSampler] = None,
) -> NanopanErrorModel:
    """
    Create the hardware-profile error model used by the ranging simulator.

    Args:
        maximum_allowed_error_m: Bound on |offset| (m)
        negative_offsets: Allow negative offsets
        sampler: Sampler to draw from

    Returns:
        Configured NanopanErrorModel
    """
    config = ErrorModelConfig(
        maximum_allowed_error_m=maximum_allowed_error_m,
        negative_offsets=negative_offsets,
    )
    return NanopanErrorModel(config, sampler)


class LosErrorModel(ErrorModel):
    """
    Line-of-sight error from a Normal distribution.

    Draws are redrawn until |error| fits the maximum allowed error.
    """

    name = "LOS"

    def __init__(
        self,
        mean: float = 0.0,
        sdev: float = 2.3,
        config: Optional[ErrorModelConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        super().__init__(config, sampler)
        self.gaussian = NormalDistribution(mean, sdev, self.sampler)

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        while True:
            error = self._fold(self.gaussian.sample()) * self.config.bias
            if abs(error) <= self.config.maximum_allowed_error_m:
                return error


class LosNlosErrorModel(ErrorModel):
    """
    LOS Normal error plus an Exponential NLOS component.

    With probability p_nlos an NLOS term is added whose rate lambda is
    drawn from U(ua, ub); the term's mean is 1 / lambda.
    """

    name = "LOS+NLOS"

    def __init__(
        self,
        mean: float = 0.0,
        sdev: float = 2.3,
        ua: float = 0.0,
        ub: float = 3.0,
        config: Optional[ErrorModelConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        if ua < 0 or ua > ub or ub <= 0:
            raise ConfigurationError(f"Need 0 <= ua <= ub and ub > 0, got ua={ua}, ub={ub}")
        super().__init__(config, sampler)
        self.ua = ua
        self.ub = ub
        self.gaussian = NormalDistribution(mean, sdev, self.sampler)

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        s = self.sampler
        while True:
            error = self._fold(self.gaussian.sample())
            if p_nlos > 0.0 and s.next_double() <= p_nlos:
                rate = s.next_uniform(self.ua, self.ub)
                error += s.sample_exponential(1.0 / rate) * self.config.bias
            if abs(error) <= self.config.maximum_allowed_error_m:
                return error


class GammaErrorModel(ErrorModel):
    """
    Gamma-distributed ranging error shifted by a fixed offset, clamped.

    Defaults describe the same chip as the Gamma weigher.
    """

    name = "Gamma"

    def __init__(
        self,
        shape: float = 3.0,
        rate: float = 2.35,
        offset_m: float = NANOPAN_OFFSET_M,
        config: Optional[ErrorModelConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        check_positive("rate", rate)
        super().__init__(config, sampler)
        self.offset_m = offset_m
        self.gamma = GammaDistribution(shape, 1.0 / rate, self.sampler)

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        return self._clamp(self.gamma.sample() - self.offset_m)


class NoErrorModel(ErrorModel):
    """Error model that never adds an offset."""

    name = "None"

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        return 0.0


class UniformErrorModel(ErrorModel):
    """Error drawn from U(ua, ub), biased and clamped."""

    name = "LOS-Uniform"

    def __init__(
        self,
        ua: float = -1.0,
        ub: float = 1.0,
        config: Optional[ErrorModelConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        if ua > ub:
            raise ConfigurationError(f"Need ua <= ub, got ua={ua}, ub={ub}")
        super().__init__(config, sampler)
        self.ua = ua
        self.ub = ub

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        return self._clamp(self.sampler.next_uniform(self.ua, self.ub) * self.config.bias)


class LosNlosUniformErrorModel(ErrorModel):
    """
    LOS Normal error plus a Uniform NLOS component.

    With probability p_nlos a U(ua, ub) term is added to the folded LOS
    draw. The sum is biased and clamped rather than redrawn.
    """

    name = "LOS+NLOS-Uniform"

    def __init__(
        self,
        mean: float = 0.0,
        sdev: float = 0.1,
        ua: float = 0.0,
        ub: float = 10.0,
        config: Optional[ErrorModelConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        if ua > ub:
            raise ConfigurationError(f"Need ua <= ub, got ua={ua}, ub={ub}")
        super().__init__(config, sampler)
        self.ua = ua
        self.ub = ub
        self.gaussian = NormalDistribution(mean, sdev, self.sampler)

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        s = self.sampler
        error = self._fold(self.gaussian.sample())
        if p_nlos > 0.0 and s.next_double() <= p_nlos:
            error += s.next_uniform(self.ua, self.ub)
        return self._clamp(error * self.config.bias)


class LosNlosGmmErrorModel(ErrorModel):
    """
    Two-component Gaussian mixture of LOS and NLOS error.

    error = (1 - p_nlos) * N(0, sdev_los) + p_nlos * N(mean_nlos, sdev_nlos),
    each component folded unless negative offsets are enabled.
    """

    name = "LOS+NLOS-GMM"

    def __init__(
        self,
        sdev_los: float = 0.5,
        mean_nlos: float = 3.0,
        sdev_nlos: float = 2.0,
        config: Optional[ErrorModelConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        super().__init__(config, sampler)
        self.gaussian_los = NormalDistribution(0.0, sdev_los, self.sampler)
        self.gaussian_nlos = NormalDistribution(mean_nlos, sdev_nlos, self.sampler)

    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        los = self._fold(self.gaussian_los.sample())
        nlos = self._fold(self.gaussian_nlos.sample())
        error = (1.0 - p_nlos) * los + p_nlos * nlos
        return self._clamp(error * self.config.bias)
