"""
Unit tests for protocol value types.

Tests cover:
- Point distance and center of mass
- Range vector validity helpers
- PositionEstimate validation and serialization
"""

import math

import pytest

from lat_core.proto import (
    FAILED,
    Point,
    PositionEstimate,
    FixType,
    count_valid,
    create_no_fix,
    failed_vector,
    is_valid_range,
    valid_indices,
)


class TestPoint:
    """Tests for the 2D point type."""

    def test_distance(self):
        assert Point(0.0, 0.0).distance_to(Point(3.0, 4.0)) == 5.0

    def test_immutable_and_hashable(self):
        p = Point(1.0, 2.0)
        with pytest.raises(AttributeError):
            p.x = 3.0
        assert {p, Point(1.0, 2.0)} == {p}

    def test_center_of_mass_equal_weights(self):
        points = [Point(0.0, 0.0), Point(2.0, 0.0), Point(1.0, 3.0)]
        assert Point.center_of_mass(points) == Point(1.0, 1.0)

    def test_center_of_mass_weighted(self):
        points = [Point(0.0, 0.0), Point(4.0, 0.0)]
        com = Point.center_of_mass(points, [3.0, 1.0])
        assert com.x == pytest.approx(1.0)
        assert com.y == pytest.approx(0.0)

    def test_center_of_mass_huge_weights(self):
        points = [Point(0.0, 0.0), Point(4.0, 2.0)]
        com = Point.center_of_mass(points, [1e308, 1e308])
        assert com.x == pytest.approx(2.0)
        assert com.y == pytest.approx(1.0)

    def test_center_of_mass_degenerate(self):
        assert Point.center_of_mass([]) is None
        assert Point.center_of_mass([Point(1.0, 1.0)], [0.0]) is None

    def test_str(self):
        assert str(Point(1.0, 2.5)) == "(1.000, 2.500)"


class TestRangeVector:
    """Tests for range vector helpers."""

    @pytest.mark.parametrize("value,expected", [
        (0.0, True),
        (12.5, True),
        (FAILED, False),
        (-0.5, False),
        (float('nan'), False),
        (float('inf'), False),
        (None, False),
    ])
    def test_is_valid_range(self, value, expected):
        assert is_valid_range(value) is expected

    def test_valid_indices(self):
        ranges = [1.0, FAILED, 3.0, float('nan'), 0.0]
        assert valid_indices(ranges) == [0, 2, 4]
        assert count_valid(ranges) == 3

    def test_failed_vector(self):
        assert failed_vector(3) == [FAILED, FAILED, FAILED]
        assert failed_vector(0) == []


class TestPositionEstimate:
    """Tests for the per-epoch output."""

    def test_fix_requires_position(self):
        with pytest.raises(ValueError):
            PositionEstimate(timestamp=0, fix_type=FixType.FIX, position=None)

    def test_rejected_bounded_by_candidates(self):
        with pytest.raises(ValueError):
            PositionEstimate(
                timestamp=0, fix_type=FixType.FIX, position=Point(0.0, 0.0),
                num_candidates=2, num_rejected=3,
            )

    def test_negative_residual_rejected(self):
        with pytest.raises(ValueError):
            PositionEstimate(
                timestamp=0, fix_type=FixType.FIX, position=Point(0.0, 0.0),
                residual_m=-1.0,
            )

    def test_no_fix(self):
        estimate = create_no_fix(1500, [0, 2], num_candidates=3)

        assert not estimate.has_valid_fix
        assert estimate.position is None
        assert estimate.num_anchors_used == 2
        assert estimate.num_rejected == 3

    def test_to_dict(self):
        estimate = PositionEstimate(
            timestamp=100,
            fix_type=FixType.FIX,
            position=Point(1.0, 2.0),
            anchor_indices=[0, 1, 2],
            num_candidates=1,
            residual_m=0.25,
            weight_sum=4.0,
        )

        d = estimate.to_dict()

        assert d['fix_type'] == 'FIX'
        assert d['position'] == (1.0, 2.0)
        assert d['anchor_indices'] == [0, 1, 2]
        assert math.isclose(d['residual_m'], 0.25)
