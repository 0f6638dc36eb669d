"""
Standard deviation accumulators.

- PreciseStandardDeviation: stores samples, two-pass variance
- WelfordStandardDeviation: streaming, Welford's update

Both report the sample variance (n - 1 denominator), 0.0 for fewer than
two samples.
"""

from typing import List
import math


class PreciseStandardDeviation:
    """Two-pass mean/variance over stored samples."""

    def __init__(self):
        self._samples: List[float] = []

    @property
    def count(self) -> int:
        return len(self._samples)

    def add_sample(self, sample: float):
        self._samples.append(sample)

    def reset(self):
        self._samples.clear()

    def mean(self) -> float:
        if not self._samples:
            return 0.0
        return math.fsum(self._samples) / len(self._samples)

    def variance(self) -> float:
        n = len(self._samples)
        if n < 2:
            return 0.0
        m = self.mean()
        return math.fsum((s - m) * (s - m) for s in self._samples) / (n - 1)

    def standard_deviation(self) -> float:
        return math.sqrt(self.variance())


class WelfordStandardDeviation:
    """Incremental mean/variance without storing samples."""

    def __init__(self):
        self.reset()

    @property
    def count(self) -> int:
        return self._count

    def add_sample(self, sample: float):
        m_old = self._m
        self._count += 1
        self._m += (sample - self._m) / self._count
        self._s += (sample - m_old) * (sample - self._m)

    def reset(self):
        self._m = 0.0
        self._s = 0.0
        self._count = 0

    def mean(self) -> float:
        return self._m

    def variance(self) -> float:
        return self._s / (self._count - 1) if self._count > 1 else 0.0

    def standard_deviation(self) -> float:
        return math.sqrt(self.variance())
