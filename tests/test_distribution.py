"""
Unit tests for distribution sampling.

Tests cover:
- Algorithm SA constant table
- Parameter validation
- Sample moments for Normal / Exponential / Gamma
- Goodness of fit (Kolmogorov-Smirnov) against scipy reference CDFs
- Seed reproducibility
"""

import math

import numpy as np
import pytest
from scipy import stats

from lat_core.distribution import (
    DistributionSampler,
    NormalDistribution,
    ExponentialDistribution,
    GammaDistribution,
)
from lat_core.distribution.sampler import EXPONENTIAL_SA_QI
from lat_core.errors import ConfigurationError

N_SAMPLES = 20000


# =============================================================================
# Algorithm SA Table
# =============================================================================


class TestExponentialTable:
    """Tests for the q_i constants."""

    def test_first_entry_is_ln2(self):
        assert EXPONENTIAL_SA_QI[0] == pytest.approx(math.log(2.0))

    def test_strictly_increasing_up_to_one(self):
        for a, b in zip(EXPONENTIAL_SA_QI, EXPONENTIAL_SA_QI[1:]):
            assert a < b or b == 1.0
        assert EXPONENTIAL_SA_QI[-1] == 1.0

    def test_at_most_16_entries(self):
        assert len(EXPONENTIAL_SA_QI) <= 16


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    """Invalid parameters are rejected before any sampling."""

    @pytest.mark.parametrize("sdev", [0.0, -1.0, float('nan')])
    def test_normal_rejects_bad_sdev(self, sampler, sdev):
        with pytest.raises(ConfigurationError):
            sampler.sample_normal(0.0, sdev)
        with pytest.raises(ConfigurationError):
            NormalDistribution(0.0, sdev)

    @pytest.mark.parametrize("mean", [0.0, -2.0])
    def test_exponential_rejects_bad_mean(self, sampler, mean):
        with pytest.raises(ConfigurationError):
            sampler.sample_exponential(mean)
        with pytest.raises(ConfigurationError):
            ExponentialDistribution(mean)

    @pytest.mark.parametrize("shape,scale", [(0.0, 1.0), (1.0, 0.0), (-1.0, 1.0)])
    def test_gamma_rejects_bad_params(self, sampler, shape, scale):
        with pytest.raises(ConfigurationError):
            sampler.sample_gamma(shape, scale)
        with pytest.raises(ConfigurationError):
            GammaDistribution(shape, scale)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ExponentialDistribution(-1.0)


# =============================================================================
# Moments
# =============================================================================


class TestMoments:
    """Sample means and variances match the parameters."""

    def test_normal_moments(self, sampler):
        samples = NormalDistribution(0.90, 0.56, sampler).sample_many(N_SAMPLES)

        assert samples.mean() == pytest.approx(0.90, abs=0.02)
        assert samples.std(ddof=1) == pytest.approx(0.56, abs=0.02)

    def test_exponential_mean_and_support(self, sampler):
        samples = ExponentialDistribution(1.0, sampler).sample_many(N_SAMPLES)

        assert samples.min() >= 0.0
        assert samples.mean() == pytest.approx(1.0, rel=0.03)

    def test_exponential_scales_with_mean(self, sampler):
        samples = np.array([sampler.sample_exponential(2.5) for _ in range(N_SAMPLES)])
        assert samples.mean() == pytest.approx(2.5, rel=0.03)

    @pytest.mark.parametrize("shape,scale", [(0.5, 2.0), (3.0, 1.0 / 2.35), (3.3, 1.0 / 0.576)])
    def test_gamma_moments(self, sampler, shape, scale):
        dist = GammaDistribution(shape, scale, sampler)
        samples = dist.sample_many(N_SAMPLES)

        assert samples.min() > 0.0
        assert samples.mean() == pytest.approx(dist.mean, rel=0.04)
        assert samples.var(ddof=1) == pytest.approx(dist.variance, rel=0.1)


# =============================================================================
# Goodness of Fit
# =============================================================================


class TestGoodnessOfFit:
    """KS tests against scipy reference distributions."""

    def test_exponential_ks(self, sampler):
        samples = ExponentialDistribution(1.0, sampler).sample_many(5000)
        result = stats.kstest(samples, stats.expon(scale=1.0).cdf)
        assert result.pvalue > 0.001

    def test_normal_ks(self, sampler):
        samples = NormalDistribution(2.43, 3.57, sampler).sample_many(5000)
        result = stats.kstest(samples, stats.norm(loc=2.43, scale=3.57).cdf)
        assert result.pvalue > 0.001

    @pytest.mark.parametrize("shape", [0.3, 0.9, 1.0, 3.3])
    def test_gamma_ks(self, sampler, shape):
        samples = GammaDistribution(shape, 1.5, sampler).sample_many(5000)
        result = stats.kstest(samples, stats.gamma(a=shape, scale=1.5).cdf)
        assert result.pvalue > 0.001


# =============================================================================
# Sampler Primitives
# =============================================================================


class TestSampler:
    """Tests for sampler primitives and seeding."""

    def test_uniform_open_interval(self, sampler):
        for _ in range(1000):
            u = sampler.next_uniform(2.0, 3.0)
            assert 2.0 < u < 3.0

    def test_gaussian_is_standard_normal(self, sampler):
        samples = [sampler.next_gaussian() for _ in range(N_SAMPLES)]
        assert stats.kstest(samples, 'norm').pvalue > 0.001

    def test_same_seed_same_sequence(self):
        a = DistributionSampler(seed=7)
        b = DistributionSampler(seed=7)

        seq_a = [a.sample_gamma(2.0, 1.0) for _ in range(50)]
        seq_b = [b.sample_gamma(2.0, 1.0) for _ in range(50)]

        assert seq_a == seq_b

    def test_shared_generator(self):
        rng = np.random.default_rng(3)
        sampler = DistributionSampler(rng=rng)
        assert sampler.rng is rng

    def test_distribution_uses_given_sampler(self, sampler):
        dist = NormalDistribution(sampler=sampler)
        assert dist.sampler is sampler
