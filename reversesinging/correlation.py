"""Correlation measures used to compare two sample descriptors."""

from __future__ import annotations

import numpy as np


def pearson_correlation(x: np.ndarray, y: np.ndarray) -> float:
    """Return the Pearson correlation coefficient of ``x`` and ``y``.

    Both sequences are centred on their own mean before the covariance is
    divided by the product of their standard deviations, so the result is
    independent of scale and offset.

    Args:
        x: First sequence.
        y: Second sequence, same length as ``x``.

    Returns:
        Coefficient in ``[-1, 1]``.  ``0.0`` is returned when either
        sequence is empty, the lengths differ or either sequence is
        constant (zero variance).
    """

    x = np.asarray(x, dtype=np.float64).reshape(-1)
    y = np.asarray(y, dtype=np.float64).reshape(-1)
    if x.size == 0 or x.size != y.size:
        return 0.0
    dx = x - x.mean()
    dy = y - y.mean()
    sum_sq_x = float(np.dot(dx, dx))
    sum_sq_y = float(np.dot(dy, dy))
    # Rounding in the mean leaves a residue on constant input.
    eps = np.finfo(np.float64).eps
    if sum_sq_x <= eps * float(np.dot(x, x)) or sum_sq_y <= eps * float(np.dot(y, y)):
        return 0.0
    covariance = float(np.dot(dx, dy))
    correlation = covariance / (np.sqrt(sum_sq_x) * np.sqrt(sum_sq_y))
    return float(np.clip(correlation, -1.0, 1.0))


def absolute_correlation(x: np.ndarray, y: np.ndarray) -> float:
    """Return ``|pearson_correlation(x, y)|``; only the strength matters."""
    return abs(pearson_correlation(x, y))


__all__ = ["pearson_correlation", "absolute_correlation"]
