"""
Unit tests for candidate outlier rejection.

Tests cover:
- Quickselect against sorting
- Pair indexing of the flattened distance triangle
- Median threshold (MEDV)
- Robust filter edge cases and outlier rejection
"""

import random

import pytest

from lat_core.localization import (
    RobustFilter,
    robust_filter,
    pair_index,
    pairwise_distances,
    median_threshold,
    select,
)
from lat_core.proto import Point


# =============================================================================
# Quickselect
# =============================================================================


class TestSelect:
    """Tests for k-th smallest selection."""

    @pytest.mark.parametrize("n", [1, 2, 5, 10, 11, 37, 200])
    def test_matches_sorted(self, n):
        rng = random.Random(n)
        values = [rng.uniform(-100.0, 100.0) for _ in range(n)]
        expected = sorted(values)

        for k in range(1, n + 1):
            assert select(list(values), k) == expected[k - 1]

    def test_duplicates(self):
        values = [3.0] * 25 + [1.0] * 25
        assert select(list(values), 25) == 1.0
        assert select(list(values), 26) == 3.0

    @pytest.mark.parametrize("k", [0, 4])
    def test_out_of_range(self, k):
        with pytest.raises(IndexError):
            select([1.0, 2.0, 3.0], k)


# =============================================================================
# Pair Indexing
# =============================================================================


class TestPairIndex:
    """Tests for the flattened upper-triangle layout."""

    def test_row_major_order(self):
        n = 5
        pairs = [(i, j) for i in range(n - 1) for j in range(i + 1, n)]
        assert [pair_index(i, j, n) for i, j in pairs] == list(range(len(pairs)))

    def test_symmetric(self):
        assert pair_index(3, 1, 6) == pair_index(1, 3, 6)

    def test_diagonal_rejected(self):
        with pytest.raises(ValueError):
            pair_index(2, 2, 4)

    def test_distances_layout(self):
        points = [Point(0.0, 0.0), Point(3.0, 4.0), Point(6.0, 8.0)]
        distances = pairwise_distances(points)

        assert distances == pytest.approx([5.0, 10.0, 5.0])
        assert distances[pair_index(0, 2, 3)] == pytest.approx(10.0)


# =============================================================================
# Median Threshold
# =============================================================================


class TestMedianThreshold:
    """MEDV = 2 * distance of rank count // 2 + 1."""

    def test_odd_count(self):
        assert median_threshold([1.0, 5.0, 3.0]) == 6.0

    def test_even_count_uses_upper_middle(self):
        assert median_threshold([4.0, 1.0, 3.0, 2.0]) == 6.0

    def test_input_not_modified(self):
        distances = [3.0, 1.0, 2.0]
        median_threshold(distances)
        assert distances == [3.0, 1.0, 2.0]


# =============================================================================
# Robust Filter
# =============================================================================


class TestRobustFilter:
    """Tests for outlier rejection over candidate sets."""

    @pytest.mark.parametrize("points", [[], [Point(1.0, 2.0)]])
    def test_small_sets_unchanged(self, points):
        assert robust_filter(points) == points

    def test_identical_candidates_kept(self):
        points = [Point(2.0, 2.0)] * 4
        assert robust_filter(points) == points

    def test_single_outlier_removed(self):
        cluster = [Point(5.0, 5.0), Point(5.2, 5.1), Point(4.9, 5.05), Point(5.1, 4.9)]
        outlier = Point(40.0, -30.0)

        survivors = robust_filter(cluster[:2] + [outlier] + cluster[2:])

        assert outlier not in survivors
        assert survivors == cluster

    def test_order_preserved(self):
        points = [Point(float(i), 0.0) for i in range(6)]
        survivors = robust_filter(points)
        assert survivors == [p for p in points if p in survivors]

    def test_survivors_subset(self):
        rng = random.Random(5)
        points = [Point(rng.gauss(0, 1), rng.gauss(0, 1)) for _ in range(20)]
        points += [Point(50.0, 50.0), Point(-60.0, 10.0)]

        survivors = robust_filter(points)

        assert set(survivors) <= set(points)
        assert Point(50.0, 50.0) not in survivors
        assert Point(-60.0, 10.0) not in survivors

    def test_repeat_application_on_tight_cluster(self):
        """A tight cluster that survived once survives again."""
        cluster = [Point(5.0, 5.0), Point(5.2, 5.1), Point(4.9, 5.05), Point(5.1, 4.9)]
        once = robust_filter(cluster + [Point(40.0, -30.0)])
        assert robust_filter(once) == once

    def test_two_candidates_kept(self):
        points = [Point(0.0, 0.0), Point(100.0, 0.0)]
        # The only distance is the median, so MEDV is twice it
        assert robust_filter(points) == points

    def test_input_not_modified(self):
        points = [Point(0.0, 0.0), Point(1.0, 0.0), Point(30.0, 30.0)]
        copy = list(points)
        robust_filter(points)
        assert points == copy

    def test_object_form(self):
        points = [Point(0.0, 0.0), Point(0.1, 0.0), Point(0.0, 0.1), Point(25.0, 25.0)]
        rf = RobustFilter()
        assert rf(points) == rf.filter(points) == robust_filter(points)
