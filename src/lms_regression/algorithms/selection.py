"""Order-statistic selection for robust residual scoring"""

from typing import MutableSequence, Sequence

import numpy as np


def select(values: MutableSequence[float], k: int) -> float:
    """
    Return the k-th smallest element (0-based) of ``values``

    Partition-based selection: each pass partitions the active range around
    a pivot held at its right end and narrows to the side containing rank
    ``k``. Expected O(n) time, O(1) extra space. ``values`` is reordered in
    place; afterwards ``values[k]`` holds the result, everything left of it
    is <= and everything right of it is >=.

    Args:
        values: Mutable sequence of comparable numbers (reordered)
        k: Rank to extract, 0 <= k < len(values)

    Returns:
        The element of rank k
    """
    n = len(values)
    if n == 0:
        raise ValueError("Cannot select from an empty sequence")
    if not 0 <= k < n:
        raise IndexError(f"Rank {k} out of range for {n} values")

    left, right = 0, n - 1
    while right > left:
        if right - left >= 2:
            _median_of_three(values, left, right)
        i = _partition(values, left, right)
        if i > k:
            right = i - 1
        elif i < k:
            left = i + 1
        else:
            break

    return values[k]


def _median_of_three(a: MutableSequence[float], left: int, right: int) -> None:
    """Move the median of a[left], a[mid], a[right] to a[right]"""
    mid = (left + right) // 2
    if a[mid] < a[left]:
        a[left], a[mid] = a[mid], a[left]
    if a[right] < a[left]:
        a[left], a[right] = a[right], a[left]
    if a[right] < a[mid]:
        a[mid], a[right] = a[right], a[mid]
    a[mid], a[right] = a[right], a[mid]


def _partition(a: MutableSequence[float], left: int, right: int) -> int:
    """
    Partition a[left..right] around the pivot a[right]

    Smaller elements end up left of the returned index, larger ones right
    of it. Both scans stop on elements equal to the pivot so runs of equal
    values split evenly. The left scan is bounded by the pivot itself, the
    right scan by ``left``.
    """
    pivot = a[right]
    i = left - 1
    j = right
    while True:
        i += 1
        while a[i] < pivot:
            i += 1
        j -= 1
        while pivot < a[j] and j > left:
            j -= 1
        if i >= j:
            break
        a[i], a[j] = a[j], a[i]

    a[i], a[right] = a[right], a[i]
    return i


def median_index(n: int) -> int:
    """Rank of the median used for scoring: floor(n / 2)"""
    return n // 2


def median_squared_residual(squared_residuals: Sequence[float]) -> float:
    """
    Median of squared residuals, at rank floor(n / 2)

    Selection runs on a private scratch copy; the input is left untouched.
    """
    if isinstance(squared_residuals, np.ndarray):
        scratch = squared_residuals.tolist()
    else:
        scratch = list(squared_residuals)
    return float(select(scratch, median_index(len(scratch))))
