"""
Per-anchor smoothing windows.

Bounded histories of recent valid readings used by the windowed ranging
filters. A window also counts consecutive failed readings ("flush"
counter); once that counter exceeds the flush limit the history is
discarded so a long outage cannot freeze the output on stale data.
"""

from collections import deque
from typing import Dict, List

import numpy as np

from lat_core.proto.range_vector import FAILED


class FlushingWindow:
    """
    Bounded sample history with a consecutive-failure counter.

    Attributes:
        size: Maximum number of samples kept
        flush_limit: Consecutive failures tolerated before flushing
    """

    def __init__(self, size: int, flush_limit: int):
        self.size = size
        self.flush_limit = flush_limit
        self._samples = deque(maxlen=size)
        self._flush_count = 0

    @property
    def samples(self) -> List[float]:
        """Stored samples, oldest first."""
        return list(self._samples)

    @property
    def flush_count(self) -> int:
        return self._flush_count

    def __len__(self) -> int:
        return len(self._samples)

    def push(self, value: float):
        """Store a valid reading and clear the failure counter."""
        self._samples.append(value)
        self._flush_count = 0

    def increment_flush(self) -> bool:
        """
        Record a failed reading.

        Returns:
            True if the history was discarded by this call
        """
        self._flush_count += 1
        if self._flush_count > self.flush_limit:
            self._flush_count = 0
            self._samples.clear()
            return True
        return False

    def value(self) -> float:
        raise NotImplementedError


class MedianWindow(FlushingWindow):
    """
    Median over the stored samples.

    A single sample yields that sample; an even count yields the mean of
    the two middle samples (four samples [1, 2, 3, 4] give 2.5).
    """

    def value(self) -> float:
        if not self._samples:
            return FAILED
        return float(np.median(self._samples))


class SavitzkyGolayWindow(FlushingWindow):
    """
    Savitzky-Golay smoothing evaluated at the most recent sample.

    Fits a polynomial of the given degree to the stored samples by least
    squares and reports its value at the newest sample. Until more than
    `degree` samples are stored the plain mean is reported.

    Coefficients depend only on the number of stored samples and are
    cached per length.
    """

    def __init__(self, size: int, degree: int, flush_limit: int):
        super().__init__(size, flush_limit)
        self.degree = degree
        self._coeff_cache: Dict[int, np.ndarray] = {}

    def coefficients(self, length: int) -> np.ndarray:
        """
        Smoothing coefficients for a window of `length` samples.

        Sample positions are -(length - 1) ... 0, so the fit is evaluated
        at the newest sample (zeroth derivative).
        """
        coeffs = self._coeff_cache.get(length)
        if coeffs is None:
            positions = np.arange(-(length - 1), 1, dtype=float)
            A = np.vander(positions, self.degree + 1, increasing=True)
            e0 = np.zeros(self.degree + 1)
            e0[0] = 1.0
            b = np.linalg.solve(A.T @ A, e0)
            coeffs = A @ b
            self._coeff_cache[length] = coeffs
        return coeffs

    def value(self) -> float:
        n = len(self._samples)
        if n == 0:
            return FAILED

        data = np.fromiter(self._samples, dtype=float, count=n)
        if n > self.degree:
            return float(self.coefficients(n) @ data)
        return float(data.mean())
