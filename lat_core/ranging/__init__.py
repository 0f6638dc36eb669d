"""
Ranging Module: Per-anchor ranging filters.

Key classes:
- RangingFilter: common contract (filter / reset)
- OffsetCorrectionRangingFilter: constant offset removal
- MedianBasedRangingFilter: bounded median window per anchor
- SavitzkyGolayBasedRangingFilter: polynomial smoothing per anchor
- ErrorSimulationRangingFilter: LOS/NLOS noise synthesis from ground truth
- HardwareProfileRangingFilter: hardware error-model noise from ground truth
"""

from .base import RangingFilter, WindowedRangingFilter
from .smoothing import FlushingWindow, MedianWindow, SavitzkyGolayWindow
from .offset_correction import OffsetCorrectionRangingFilter, OffsetCorrectionConfig
from .median_based import MedianBasedRangingFilter, MedianFilterConfig
from .savitzky_golay_based import SavitzkyGolayBasedRangingFilter, SavitzkyGolayConfig
from .error_simulation import ErrorSimulationRangingFilter, ErrorSimulationConfig
from .hardware_profile import HardwareProfileRangingFilter, HardwareProfileConfig

__all__ = [
    'RangingFilter',
    'WindowedRangingFilter',
    'FlushingWindow',
    'MedianWindow',
    'SavitzkyGolayWindow',
    'OffsetCorrectionRangingFilter',
    'OffsetCorrectionConfig',
    'MedianBasedRangingFilter',
    'MedianFilterConfig',
    'SavitzkyGolayBasedRangingFilter',
    'SavitzkyGolayConfig',
    'ErrorSimulationRangingFilter',
    'ErrorSimulationConfig',
    'HardwareProfileRangingFilter',
    'HardwareProfileConfig',
]
