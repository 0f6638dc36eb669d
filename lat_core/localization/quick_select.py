"""
Hoare's selection (quickselect).

Finds the k-th smallest element in expected linear time using
median-of-three pivoting, falling back to insertion sort on short ranges.
"""

from typing import List, TypeVar

T = TypeVar("T")

CUTOFF = 10


def select(values: List[T], k: int) -> T:
    """
    Return the k-th smallest element (1-indexed).

    Args:
        values: Elements to select from; reordered in place
        k: Rank, 1 <= k <= len(values)

    Returns:
        The element of rank k

    Raises:
        IndexError: if k is out of range
    """
    if not 1 <= k <= len(values):
        raise IndexError(f"rank {k} out of range for {len(values)} values")
    _select(values, 0, len(values) - 1, k - 1)
    return values[k - 1]


def _select(a: List[T], low: int, high: int, pos: int):
    while low + CUTOFF <= high:
        # Sort low, middle, high
        middle = (low + high) // 2
        if a[middle] < a[low]:
            a[low], a[middle] = a[middle], a[low]
        if a[high] < a[low]:
            a[low], a[high] = a[high], a[low]
        if a[high] < a[middle]:
            a[middle], a[high] = a[high], a[middle]

        # Pivot to high - 1
        a[middle], a[high - 1] = a[high - 1], a[middle]
        pivot = a[high - 1]

        i, j = low, high - 1
        while True:
            i += 1
            while a[i] < pivot:
                i += 1
            j -= 1
            while pivot < a[j]:
                j -= 1
            if i >= j:
                break
            a[i], a[j] = a[j], a[i]

        # Restore pivot
        a[i], a[high - 1] = a[high - 1], a[i]

        if pos < i:
            high = i - 1
        elif pos > i:
            low = i + 1
        else:
            return

    _insertion_sort(a, low, high)


def _insertion_sort(a: List[T], low: int, high: int):
    for p in range(low + 1, high + 1):
        tmp = a[p]
        j = p
        while j > low and tmp < a[j - 1]:
            a[j] = a[j - 1]
            j -= 1
        a[j] = tmp
