"""Sample-level transforms applied before correlation.

Every function here takes one-dimensional sample arrays and returns a new
array; inputs are never modified.  All of them accept empty input and
return an empty result instead of raising, so silent or very short
recordings flow through the pipeline without special casing.
"""

from __future__ import annotations

import numpy as np
from scipy.signal import convolve

from .constants import ENVELOPE_WINDOW, NOISE_THRESHOLD_RATIO, RMS_WINDOW


def _as_samples(samples: np.ndarray) -> np.ndarray:
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1:
        samples = samples.reshape(-1)
    return samples


def amplitude_filter(
    samples: np.ndarray, threshold_ratio: float = NOISE_THRESHOLD_RATIO
) -> np.ndarray:
    """Silence samples that are quiet relative to the peak of ``samples``.

    Parameters
    ----------
    samples:
        One-dimensional array of audio samples.
    threshold_ratio:
        Fraction of the peak magnitude at or below which a sample is
        replaced with ``0.0``.

    Returns
    -------
    np.ndarray
        Array of the same length as ``samples``.  An all-zero input stays
        all zero because ``|0| <= 0``.
    """

    samples = _as_samples(samples)
    if samples.size == 0:
        return samples.copy()
    threshold = float(np.max(np.abs(samples))) * threshold_ratio
    return np.where(np.abs(samples) <= threshold, 0.0, samples)


def normalize_amplitude(samples: np.ndarray) -> np.ndarray:
    """Scale ``samples`` so the peak magnitude is ``1.0``.

    Silent input is returned unchanged.
    """
    samples = _as_samples(samples)
    if samples.size == 0:
        return samples.copy()
    peak = float(np.max(np.abs(samples)))
    if peak <= 0.0:
        return samples.copy()
    return samples / peak


def normalize_lengths(
    first: np.ndarray, second: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Truncate both arrays to the shorter length and peak-normalise each.

    The arrays are aligned at their first sample; no time shifting is
    attempted.
    """

    first = _as_samples(first)
    second = _as_samples(second)
    length = min(first.size, second.size)
    return normalize_amplitude(first[:length]), normalize_amplitude(second[:length])


def envelope(samples: np.ndarray, window: int = ENVELOPE_WINDOW) -> np.ndarray:
    """Return the centred moving average of ``|samples|``.

    Output ``i`` is the mean magnitude over
    ``[max(0, i - window // 2), min(len, i + window // 2))``.  Windows are
    shrunk at the edges rather than padded, so the divisor is the number
    of samples actually covered.

    Parameters
    ----------
    samples:
        One-dimensional array of audio samples.
    window:
        Nominal window width.  Widths below two cover a single sample and
        therefore reduce to ``|samples|``.

    Returns
    -------
    np.ndarray
        Envelope with the same length as ``samples``.
    """

    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")
    magnitude = np.abs(_as_samples(samples))
    half = window // 2
    if magnitude.size == 0 or half == 0:
        return magnitude

    size = magnitude.size
    # Full convolution index k sums magnitude[k - 2 * half + 1 : k + 1].
    sums = convolve(magnitude, np.ones(2 * half), mode="full", method="direct")
    sums = sums[half - 1 : half - 1 + size]
    index = np.arange(size)
    counts = np.minimum(size, index + half) - np.maximum(0, index - half)
    return sums / counts


def rms_windows(samples: np.ndarray, window: int = RMS_WINDOW) -> np.ndarray:
    """Return the RMS level of consecutive non-overlapping blocks.

    The final block may be shorter than ``window``; its RMS uses the
    samples it actually holds.  The result has
    ``ceil(len(samples) / window)`` entries.
    """

    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")
    samples = _as_samples(samples)
    if samples.size == 0:
        return np.array([], dtype=np.float64)
    blocks = [samples[start : start + window] for start in range(0, samples.size, window)]
    return np.array([float(np.sqrt(np.mean(b**2))) for b in blocks])


__all__ = [
    "amplitude_filter",
    "normalize_amplitude",
    "normalize_lengths",
    "envelope",
    "rms_windows",
]
