"""
Ranging Filter contract.

A ranging filter conditions one range vector per measurement epoch:

    filtered = ranging_filter.filter(measured, real, timestamp)

Rules shared by every variant:
- A FAILED reading for anchor i is never turned into an invented
  distance; the output for i is FAILED unless the filter's own smoothing
  state still holds data for i.
- `real` (ground-truth distances) is only used by simulation variants and
  is None in production; variants that need it report FAILED without it.
- Stateful filters bind to the anchor count of the first vector they see;
  a later vector of another length raises UsageError.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import logging

from lat_core.errors import UsageError
from lat_core.metrics import get_metrics
from lat_core.proto.range_vector import is_valid_range
from lat_core.ranging.smoothing import FlushingWindow

logger = logging.getLogger(__name__)


class RangingFilter(ABC):
    """
    Base class for ranging filters.

    Not thread-safe: use one instance per ranging session, called
    sequentially once per epoch.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short display name, e.g. 'RF-MEDIAN (5,7)'."""

    @abstractmethod
    def filter(
        self,
        measured: Sequence[float],
        real: Optional[Sequence[float]] = None,
        timestamp: int = -1,
    ) -> List[float]:
        """
        Filter one epoch of range readings.

        Args:
            measured: Measured distances (m) per anchor, FAILED if failed
            real: Ground-truth distances (m) per anchor, or None
            timestamp: Epoch timestamp (ms), -1 if unavailable

        Returns:
            Filtered distances per anchor, FAILED where unavailable
        """

    def reset(self):
        """Discard all per-anchor state (no-op for stateless filters)."""

    def __repr__(self) -> str:
        return self.name


class WindowedRangingFilter(RangingFilter):
    """
    Ranging filter owning one smoothing window per anchor.

    Windows are unallocated until the first call, which sizes them to the
    observed anchor count. The allocation happens once per lifetime (or
    once after each reset) and is never resized.
    """

    def __init__(self):
        self.metrics = get_metrics()
        self._windows: Optional[List[FlushingWindow]] = None

    @abstractmethod
    def _create_window(self) -> FlushingWindow:
        """Create the smoothing window for one anchor."""

    @property
    def is_allocated(self) -> bool:
        return self._windows is not None

    @property
    def anchor_count(self) -> Optional[int]:
        """Bound anchor count, or None while unallocated."""
        return len(self._windows) if self._windows is not None else None

    def window(self, anchor_index: int) -> FlushingWindow:
        """Smoothing window of one anchor (filter must be allocated)."""
        if self._windows is None:
            raise UsageError(f"{self.name}: no windows allocated yet")
        return self._windows[anchor_index]

    def filter(
        self,
        measured: Sequence[float],
        real: Optional[Sequence[float]] = None,
        timestamp: int = -1,
    ) -> List[float]:
        windows = self._bind(len(measured))
        self.metrics.increment('ranging_epochs')

        result = []
        for i, value in enumerate(measured):
            window = windows[i]
            if is_valid_range(value):
                window.push(value)
            else:
                self.metrics.increment_drop('range_failed')
                if window.increment_flush():
                    self.metrics.increment('ranging_filter_flushes')
                    self.metrics.increment_drop('filter_flush')
                    logger.debug("%s: flushed anchor %d at t=%s", self.name, i, timestamp)
            result.append(window.value())
        return result

    def reset(self):
        self._windows = None

    def _bind(self, n_anchors: int) -> List[FlushingWindow]:
        if self._windows is None:
            self._windows = [self._create_window() for _ in range(n_anchors)]
            logger.info("%s: allocated %d anchor windows", self.name, n_anchors)
        elif len(self._windows) != n_anchors:
            self.metrics.increment_drop('anchor_count_mismatch')
            logger.error(
                "%s: range vector has %d anchors, session is bound to %d",
                self.name, n_anchors, len(self._windows)
            )
            raise UsageError(
                f"Anchor count changed from {len(self._windows)} to {n_anchors}"
            )
        return self._windows
