"""
Median-based ranging filter.

One bounded median window per anchor. Valid readings are pushed; FAILED
readings advance the window's flush counter and report whatever the
window still holds.
"""

from dataclasses import dataclass
from typing import Optional

from lat_core.errors import ConfigurationError
from lat_core.ranging.base import WindowedRangingFilter
from lat_core.ranging.smoothing import MedianWindow


@dataclass
class MedianFilterConfig:
    """
    Configuration for the median-based ranging filter.
    
    Attributes:
        window_size: Samples kept per anchor
        flush_limit: Consecutive failures tolerated before the window resets
    """
    
    window_size: int = 5
    flush_limit: int = 7
    
    def __post_init__(self):
        """Validate configuration."""
        if self.window_size < 1:
            raise ConfigurationError(f"window_size must be >= 1, got {self.window_size}")
        if self.flush_limit < 1:
            raise ConfigurationError(f"flush_limit must be >= 1, got {self.flush_limit}")


class MedianBasedRangingFilter(WindowedRangingFilter):
    """
    Report the median of each anchor's recent valid readings.
    
    Usage:
        rf = MedianBasedRangingFilter(MedianFilterConfig(window_size=5))
        
        for measured in epochs:
            filtered = rf.filter(measured)
    """
    
    def __init__(self, config: Optional[MedianFilterConfig] = None):
        super().__init__()
        self.config = config or MedianFilterConfig()
    
    @property
    def name(self) -> str:
        return f"RF-MEDIAN ({self.config.window_size},{self.config.flush_limit})"
    
    def _create_window(self) -> MedianWindow:
        return MedianWindow(self.config.window_size, self.config.flush_limit)
