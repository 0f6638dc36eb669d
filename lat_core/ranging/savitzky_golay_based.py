"""
Savitzky-Golay-based ranging filter.

One polynomial-smoothing window per anchor, reporting the least-squares
fit at the newest sample. Push/flush behaviour matches the median filter.
"""

from dataclasses import dataclass
from typing import Optional

from lat_core.errors import ConfigurationError
from lat_core.ranging.base import WindowedRangingFilter
from lat_core.ranging.smoothing import SavitzkyGolayWindow


@dataclass
class SavitzkyGolayConfig:
    """
    Configuration for the Savitzky-Golay ranging filter.
    
    Attributes:
        window_size: Samples kept per anchor (must exceed degree)
        flush_limit: Consecutive failures tolerated before the window resets
        degree: Degree of the fitted polynomial
    """
    
    window_size: int = 11
    flush_limit: int = 5
    degree: int = 2
    
    def __post_init__(self):
        """Validate configuration."""
        if self.degree < 0:
            raise ConfigurationError(f"degree must be >= 0, got {self.degree}")
        if self.window_size <= self.degree:
            raise ConfigurationError(
                f"window_size ({self.window_size}) must exceed degree ({self.degree})"
            )
        if self.flush_limit < 1:
            raise ConfigurationError(f"flush_limit must be >= 1, got {self.flush_limit}")


class SavitzkyGolayBasedRangingFilter(WindowedRangingFilter):
    """Smooth each anchor's readings with a Savitzky-Golay window."""
    
    def __init__(self, config: Optional[SavitzkyGolayConfig] = None):
        super().__init__()
        self.config = config or SavitzkyGolayConfig()
    
    @property
    def name(self) -> str:
        c = self.config
        return f"RF-SAVITZKY-GOLAY ({c.window_size},{c.flush_limit},{c.degree})"
    
    def _create_window(self) -> SavitzkyGolayWindow:
        return SavitzkyGolayWindow(
            self.config.window_size, self.config.degree, self.config.flush_limit
        )
