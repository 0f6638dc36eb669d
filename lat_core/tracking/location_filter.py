"""
Location Filters.

Smooth the stream of final position estimates over time. A location
filter sees one position per epoch (or None when the epoch produced no
fix) and reports its current smoothed position.

    lf = MeanLocationFilter()
    for estimate in estimates:
        lf.add(estimate.position, estimate.timestamp)
    smoothed = lf.get()

Variants:
- MeanLocationFilter: per-axis mean over a sliding window
- MedianLocationFilter: per-axis median over a sliding window
- GeometricMedianLocationFilter: Weiszfeld geometric median over a window,
  cleared after a run of missed epochs
- KalmanLocationFilter: constant-velocity Kalman filter
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Sequence
import logging
import math

import numpy as np

from lat_core.distribution.sampler import check_positive
from lat_core.errors import ConfigurationError
from lat_core.metrics import get_metrics
from lat_core.proto.point import Point

logger = logging.getLogger(__name__)

# Weiszfeld iteration limits
WEISZFELD_MAX_ITERATIONS = 100
WEISZFELD_TOLERANCE = 1e-6
WEISZFELD_SMOOTHING = 1e-3


class LocationFilter(ABC):
    """
    Base class for location filters.

    `add(None, t)` marks an epoch without a fix. `get()` returns None
    until the filter has seen at least one position.
    """

    def __init__(self):
        self.metrics = get_metrics()

    @property
    @abstractmethod
    def name(self) -> str:
        """Short display name."""

    @abstractmethod
    def add(self, location: Optional[Point], timestamp: int = -1):
        """Feed one epoch's position (None if the epoch had no fix)."""

    @abstractmethod
    def get(self) -> Optional[Point]:
        """Current smoothed position, or None."""

    def reset(self):
        """Discard all history."""
        self._clear()
        self.metrics.increment('location_filter_resets')

    @abstractmethod
    def _clear(self):
        """Drop filter state."""

    def __repr__(self) -> str:
        return self.name


@dataclass
class LocationWindowConfig:
    """
    Configuration for windowed location filters.

    Attributes:
        window_size: Number of most recent positions kept
        reset_after_misses: Consecutive missed epochs that clear the window
            (geometric median only, 0 disables)
    """

    window_size: int = 10
    reset_after_misses: int = 5

    def __post_init__(self):
        """Validate configuration."""
        if self.window_size < 1:
            raise ConfigurationError(f"window_size must be >= 1, got {self.window_size}")
        if self.reset_after_misses < 0:
            raise ConfigurationError(
                f"reset_after_misses must be >= 0, got {self.reset_after_misses}"
            )


class _WindowedLocationFilter(LocationFilter):
    """Keeps the last window_size positions; missed epochs are ignored."""

    label = "WINDOW"

    def __init__(self, config: Optional[LocationWindowConfig] = None):
        super().__init__()
        self.config = config or LocationWindowConfig()
        self._window: Deque[Point] = deque(maxlen=self.config.window_size)

    @property
    def name(self) -> str:
        return f"{self.label}-{self.config.window_size}"

    def __len__(self) -> int:
        return len(self._window)

    def add(self, location: Optional[Point], timestamp: int = -1):
        if location is None:
            return
        self._window.append(location)
        self.metrics.increment('location_filter_updates')

    def get(self) -> Optional[Point]:
        if not self._window:
            return None
        return self._aggregate(list(self._window))

    @abstractmethod
    def _aggregate(self, points: Sequence[Point]) -> Point:
        """Combine the window into one position."""

    def _clear(self):
        self._window.clear()


class MeanLocationFilter(_WindowedLocationFilter):
    """Per-axis mean of the window."""

    label = "MEAN"

    def _aggregate(self, points: Sequence[Point]) -> Point:
        return Point.center_of_mass(points)


class MedianLocationFilter(_WindowedLocationFilter):
    """Per-axis median of the window (x and y taken independently)."""

    label = "MEDIAN"

    def _aggregate(self, points: Sequence[Point]) -> Point:
        return Point(
            float(np.median([p.x for p in points])),
            float(np.median([p.y for p in points])),
        )


def geometric_median(points: Sequence[Point], weights: Optional[Sequence[float]] = None) -> Point:
    """
    Approximate the weighted geometric median (Fermat-Weber point).

    First checks whether one of the input points is itself optimal, then
    runs Weiszfeld iterations from the center of mass until the
    (smoothed) distance sum stops improving by more than
    WEISZFELD_TOLERANCE relative, or WEISZFELD_MAX_ITERATIONS is reached.

    Args:
        points: Sample points (non-empty)
        weights: Weight per point (equal weights if None)

    Returns:
        Geometric median estimate
    """
    if not points:
        raise ValueError("geometric_median needs at least one point")
    if weights is None:
        weights = [1.0] * len(points)

    for i, p in enumerate(points):
        if _is_vertex_optimum(points, weights, i):
            return p

    x = Point.center_of_mass(points, weights)
    e0 = _smoothed_distance_sum(points, x)
    for _ in range(WEISZFELD_MAX_ITERATIONS):
        xt = yt = inv = 0.0
        for p, w in zip(points, weights):
            d = _smoothed_distance(x, p)
            xt += w * p.x / d
            yt += w * p.y / d
            inv += w / d
        x_new = Point(xt / inv, yt / inv)

        e1 = _smoothed_distance_sum(points, x_new)
        if e1 >= e0 or (e0 - e1) / e0 < WEISZFELD_TOLERANCE:
            break
        x, e0 = x_new, e1
    return x


def _smoothed_distance_sum(points: Sequence[Point], x: Point) -> float:
    return math.fsum(_smoothed_distance(x, p) for p in points)


def _smoothed_distance(a: Point, b: Point) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return math.sqrt(dx * dx + dy * dy + WEISZFELD_SMOOTHING)


def _is_vertex_optimum(points: Sequence[Point], weights: Sequence[float], i: int) -> bool:
    """Weiszfeld optimality test for the sample point itself."""
    pi = points[i]
    sum_x = sum_y = 0.0
    for m, pm in enumerate(points):
        if m == i:
            continue
        d = pi.distance_to(pm)
        if d == 0.0:
            continue
        sum_x += weights[m] * (pi.x - pm.x) / d
        sum_y += weights[m] * (pi.y - pm.y) / d
    return math.hypot(sum_x, sum_y) <= weights[i]


class GeometricMedianLocationFilter(_WindowedLocationFilter):
    """
    Geometric median of the window.

    A run of `reset_after_misses` consecutive epochs without a fix clears
    the window, so a tag that reappears elsewhere is not pulled back
    towards its old positions.
    """

    label = "GEOMETRIC-MEDIAN"

    def __init__(self, config: Optional[LocationWindowConfig] = None):
        super().__init__(config)
        self._misses = 0

    def add(self, location: Optional[Point], timestamp: int = -1):
        if location is not None:
            self._misses = 0
            super().add(location, timestamp)
            return

        self._misses += 1
        if self.config.reset_after_misses and self._misses >= self.config.reset_after_misses:
            logger.debug("%s: %d missed epochs, clearing window", self.name, self._misses)
            self._misses = 0
            self._window.clear()

    def _aggregate(self, points: Sequence[Point]) -> Point:
        return geometric_median(points)

    def _clear(self):
        super()._clear()
        self._misses = 0


@dataclass
class KalmanLocationConfig:
    """
    Configuration for the constant-velocity location filter.

    Attributes:
        q_pos: Process noise for position (m²/s)
        q_vel: Process noise for velocity (m²/s³)
        measurement_std_m: Standard deviation of an input position (m)
        initial_vel_std_m_s: Initial velocity uncertainty (m/s)
        default_dt_s: Step used when timestamps are unavailable (s)
    """

    q_pos: float = 0.1 ** 2
    q_vel: float = 1.0 ** 2
    measurement_std_m: float = 1.0
    initial_vel_std_m_s: float = 5.0
    default_dt_s: float = 0.1

    def __post_init__(self):
        """Validate configuration."""
        check_positive("q_pos", self.q_pos)
        check_positive("q_vel", self.q_vel)
        check_positive("measurement_std_m", self.measurement_std_m)
        check_positive("initial_vel_std_m_s", self.initial_vel_std_m_s)
        check_positive("default_dt_s", self.default_dt_s)


class KalmanLocationFilter(LocationFilter):
    """
    Constant-velocity Kalman filter over 2D positions.

    State: [x, y, vx, vy]. The first position initializes the state with
    zero velocity; each later position runs a predict step over the
    elapsed time (timestamps in ms) followed by an update. Missed epochs
    are ignored. Timestamps of -1 advance by default_dt_s.
    """

    def __init__(self, config: Optional[KalmanLocationConfig] = None):
        super().__init__()
        self.config = config or KalmanLocationConfig()
        self._clear()

    @property
    def name(self) -> str:
        return "KALMAN"

    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def velocity(self) -> Optional[Point]:
        """Estimated velocity (m/s) as a Point, or None before the first fix."""
        if self._state is None:
            return None
        return Point(float(self._state[2]), float(self._state[3]))

    def add(self, location: Optional[Point], timestamp: int = -1):
        if location is None:
            return

        if self._state is None:
            self._initialize(location, timestamp)
            return

        self._predict(self._elapsed_s(timestamp))

        z = np.array([location.x, location.y])
        H = np.array([
            [1, 0, 0, 0],
            [0, 1, 0, 0]
        ])
        R = np.eye(2) * self.config.measurement_std_m ** 2

        y = z - H @ self._state
        S = H @ self._covariance @ H.T + R
        K = self._covariance @ H.T @ np.linalg.inv(S)

        self._state = self._state + K @ y
        self._covariance = (np.eye(4) - K @ H) @ self._covariance
        self._last_timestamp = timestamp

        self.metrics.increment('location_filter_updates')
        self.metrics.record_histogram('location_filter_innovation_m', float(np.linalg.norm(y)))

    def get(self) -> Optional[Point]:
        if self._state is None:
            return None
        return Point(float(self._state[0]), float(self._state[1]))

    def _initialize(self, location: Point, timestamp: int):
        self._state = np.array([location.x, location.y, 0.0, 0.0])
        pos_var = self.config.measurement_std_m ** 2
        vel_var = self.config.initial_vel_std_m_s ** 2
        self._covariance = np.diag([pos_var, pos_var, vel_var, vel_var])
        self._last_timestamp = timestamp

    def _elapsed_s(self, timestamp: int) -> float:
        if timestamp < 0 or self._last_timestamp < 0:
            return self.config.default_dt_s
        return (timestamp - self._last_timestamp) / 1000.0

    def _predict(self, dt: float):
        """Predict state forward by dt seconds."""
        if dt <= 0:
            return

        F = np.array([
            [1, 0, dt, 0],
            [0, 1, 0, dt],
            [0, 0, 1, 0],
            [0, 0, 0, 1]
        ])
        Q = np.diag([
            self.config.q_pos * dt,
            self.config.q_pos * dt,
            self.config.q_vel * dt,
            self.config.q_vel * dt,
        ])

        self._state = F @ self._state
        self._covariance = F @ self._covariance @ F.T + Q

    def _clear(self):
        self._state: Optional[np.ndarray] = None
        self._covariance: Optional[np.ndarray] = None
        self._last_timestamp = -1
