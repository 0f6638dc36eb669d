"""
Ranging Error Model base.

An error model produces a distance offset (m) to add to a true distance.
It is bounded by a maximum allowed error, may fold negative offsets to
positive, applies a scale factor (bias), and keeps running statistics of
the offsets it produced.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from lat_core.distribution import DistributionSampler
from lat_core.distribution.sampler import check_positive


@dataclass
class ErrorModelConfig:
    """
    Configuration shared by all error models.

    Attributes:
        maximum_allowed_error_m: Bound on |offset| (m)
        negative_offsets: Allow negative offsets (else fold to positive)
        bias: Scale factor applied to the offset
    """

    maximum_allowed_error_m: float = 30.0   # ~indoor radio range
    negative_offsets: bool = False
    bias: float = 1.0

    def __post_init__(self):
        """Validate configuration."""
        check_positive("maximum_allowed_error_m", self.maximum_allowed_error_m)
        check_positive("bias", self.bias)


class ErrorModel(ABC):
    """
    Base class for ranging error models.

    Subclasses implement `_draw_offset()`; `offset()` wraps it with
    statistics accounting.
    """

    name = "ERROR-MODEL"

    def __init__(
        self,
        config: Optional[ErrorModelConfig] = None,
        sampler: Optional[DistributionSampler] = None,
    ):
        self.config = config or ErrorModelConfig()
        self.sampler = sampler or DistributionSampler()
        self._offset_calls = 0
        self._error_sum = 0.0
        self._maximum_error = 0.0

    @property
    def maximum_allowed_error(self) -> float:
        return self.config.maximum_allowed_error_m

    @property
    def negative_offsets_enabled(self) -> bool:
        return self.config.negative_offsets

    def offset(self, true_distance: float, p_nlos: float = 0.0) -> float:
        """
        Draw a distance offset.

        Args:
            true_distance: Real anchor-to-node distance (m); unused by most models
            p_nlos: NLOS probability of the channel in [0, 1]

        Returns:
            Offset in meters, |offset| <= maximum allowed error
        """
        error = self._draw_offset(true_distance, p_nlos)
        self._account(error)
        return error

    @abstractmethod
    def _draw_offset(self, true_distance: float, p_nlos: float) -> float:
        """Draw one offset (m)."""

    def _clamp(self, value: float) -> float:
        limit = self.config.maximum_allowed_error_m
        return max(-limit, min(limit, value))

    def _fold(self, value: float) -> float:
        """Fold negative values to positive unless negative offsets are enabled."""
        if not self.config.negative_offsets and value < 0:
            return -value
        return value

    def _account(self, error: float):
        magnitude = abs(error)
        self._offset_calls += 1
        self._error_sum += magnitude
        if magnitude > self._maximum_error:
            self._maximum_error = magnitude

    @property
    def average_error(self) -> float:
        """Mean |offset| produced so far."""
        if self._offset_calls == 0:
            return 0.0
        return self._error_sum / self._offset_calls

    @property
    def maximum_error(self) -> float:
        """Largest |offset| produced so far."""
        return self._maximum_error

    def reset(self):
        """Reset running statistics."""
        self._offset_calls = 0
        self._error_sum = 0.0
        self._maximum_error = 0.0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config})"
