"""
Pytest configuration and shared fixtures for lateration core tests.

Provides anchor layouts, seeded samplers, and a stub candidate solver so
pipeline tests do not depend on any geometric solver implementation.
"""

import sys
import itertools
from pathlib import Path
from typing import List, Mapping, Sequence

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from lat_core.distribution import DistributionSampler
from lat_core.metrics import reset_metrics
from lat_core.proto import Point


# =============================================================================
# Global State
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_metrics():
    """Give every test its own global metrics collector."""
    reset_metrics()
    yield
    reset_metrics()


# =============================================================================
# Anchor Configuration Fixtures
# =============================================================================


@pytest.fixture
def right_angle_anchors() -> List[Point]:
    """
    Three anchors on a right angle.

    Returns:
        A0=(0, 0), A1=(10, 0), A2=(0, 10) in metres.
    """
    return [Point(0.0, 0.0), Point(10.0, 0.0), Point(0.0, 10.0)]


@pytest.fixture
def square_anchors() -> List[Point]:
    """Four anchors on the corners of a 20 m square."""
    return [Point(0.0, 0.0), Point(20.0, 0.0), Point(20.0, 20.0), Point(0.0, 20.0)]


# =============================================================================
# Sampler Fixtures
# =============================================================================


@pytest.fixture
def sampler() -> DistributionSampler:
    """Deterministic sampler for reproducible statistical tests."""
    return DistributionSampler(seed=12345)


# =============================================================================
# Solver Stubs
# =============================================================================


def exact_ranges(position: Point, anchors: Sequence[Point]) -> List[float]:
    """Noise-free distances from position to each anchor."""
    return [position.distance_to(a) for a in anchors]


def linear_subset_solver(
    anchors: Sequence[Point],
    ranges: Sequence[float],
    options: Mapping,
) -> List[Point]:
    """
    One candidate per 3-anchor subset via the linearized circle equations.

    Exact for noise-free ranges, which is all the tests need.
    """
    candidates = []
    for i, j, k in itertools.combinations(range(len(anchors)), 3):
        p0, p1, p2 = anchors[i], anchors[j], anchors[k]
        r0, r1, r2 = ranges[i], ranges[j], ranges[k]
        a11, a12 = 2 * (p1.x - p0.x), 2 * (p1.y - p0.y)
        a21, a22 = 2 * (p2.x - p0.x), 2 * (p2.y - p0.y)
        b1 = r0 ** 2 - r1 ** 2 - p0.x ** 2 + p1.x ** 2 - p0.y ** 2 + p1.y ** 2
        b2 = r0 ** 2 - r2 ** 2 - p0.x ** 2 + p2.x ** 2 - p0.y ** 2 + p2.y ** 2
        det = a11 * a22 - a12 * a21
        if abs(det) < 1e-10:
            continue
        candidates.append(Point((a22 * b1 - a12 * b2) / det, (a11 * b2 - a21 * b1) / det))
    return candidates


class FixedCandidateSolver:
    """Solver stub returning a preset candidate list and recording its calls."""

    def __init__(self, candidates: Sequence[Point]):
        self.candidates = list(candidates)
        self.calls = []

    def __call__(self, anchors, ranges, options):
        self.calls.append((list(anchors), list(ranges), dict(options)))
        return list(self.candidates)
