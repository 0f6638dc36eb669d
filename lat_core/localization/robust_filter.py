"""
Robust median filter for candidate positions.

Removes every candidate x_j that lies at least MEDV away from more than
half of the other candidates, where MEDV is twice the median pairwise
distance.

Reference:
    A. Bahillo, S. Mazuelas, R. M. Lorenzo, P. Fernandez, J. Prieto,
    R. J. Duran and E. J. Abril, "Hybrid RSS-RTT Localization Scheme for
    Indoor Wireless Networks", 2010.
"""

from typing import List, Sequence

from lat_core.localization.quick_select import select
from lat_core.proto.point import Point


def pair_index(row: int, col: int, n: int) -> int:
    """
    Index of pair (row, col) in a flattened upper triangle of an n x n matrix.

    Pairs are stored row by row: (0,1), (0,2), ..., (0,n-1), (1,2), ...
    The order of row and col does not matter.
    """
    if row == col:
        raise ValueError("diagonal has no pair index")
    if row > col:
        row, col = col, row
    return row * (n - 1) - row * (row - 1) // 2 + col - row - 1


def pairwise_distances(points: Sequence[Point]) -> List[float]:
    """All C(n, 2) pairwise distances in flattened upper-triangular order."""
    n = len(points)
    return [
        points[i].distance_to(points[j])
        for i in range(n - 1)
        for j in range(i + 1, n)
    ]


def median_threshold(distances: Sequence[float]) -> float:
    """
    MEDV = 2 * the distance of rank floor(count / 2) + 1 (1-indexed).

    For an even count this is the upper of the two middle values.
    """
    scratch = list(distances)
    return 2.0 * select(scratch, len(scratch) // 2 + 1)


def robust_filter(points: Sequence[Point]) -> List[Point]:
    """
    Drop candidates that disagree with the consensus.

    Args:
        points: Candidate positions for one epoch

    Returns:
        Surviving candidates in their original order. Fewer than two
        candidates are returned unchanged.

    Notes:
        - A pair (i, j) disagrees when its distance is >= MEDV and > 0;
          coincident candidates never disagree, so a set of identical
          candidates (MEDV = 0) is kept whole
        - Candidate i is dropped when its disagreement count exceeds n // 2
    """
    n = len(points)
    if n <= 1:
        return list(points)

    distances = pairwise_distances(points)
    medv = median_threshold(distances)

    survivors = []
    for i in range(n):
        disagreements = 0
        for j in range(n):
            if i == j:
                continue
            d = distances[pair_index(i, j, n)]
            if d >= medv and d > 0.0:
                disagreements += 1
        if disagreements <= n // 2:
            survivors.append(points[i])
    return survivors


class RobustFilter:
    """
    Object form of `robust_filter` for pipelines that pass filters around.

    Stateless; safe to share between threads.
    """

    name = "Robust Median Filter"

    def filter(self, points: Sequence[Point]) -> List[Point]:
        return robust_filter(points)

    def __call__(self, points: Sequence[Point]) -> List[Point]:
        return robust_filter(points)
