"""
Statistical utility functions for psmqc
"""

from __future__ import annotations

import numpy as np


def safe_ratio(numerator, denominator, empty_fallback: float = 0.0) -> float:
    """
    Divide two counts, returning a fallback when the denominator is zero.

    Parameters:
    -----------
    numerator: count of matching items
    denominator: total count
    empty_fallback: value to return if *denominator* is 0

    Returns
    -------
    float
        numerator / denominator, or *empty_fallback*
    """
    if denominator == 0:
        return empty_fallback
    return numerator / denominator


def percent(count, total, empty_fallback: float = 0.0) -> float:
    """Return count / total * 100, or *empty_fallback* if *total* is 0."""
    if total == 0:
        return empty_fallback
    return count / total * 100


def max_adjacent_gap(values, upper_bound=None) -> int:
    """
    Largest difference between consecutive sorted values.

    Parameters:
    -----------
    values: iterable of integers (need not be sorted)
    upper_bound: if given, the gap between the largest value and *upper_bound* is also considered

    Returns
    -------
    int
        The maximum gap, or 0 for fewer than two points
    """
    points = np.sort(np.asarray(list(values), dtype=np.int64))
    if upper_bound is not None and points.size > 0:
        points = np.append(points, upper_bound)

    if points.size < 2:
        return 0

    return max(0, int(np.diff(points).max()))
