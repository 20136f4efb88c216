"""Similarity scoring between an original recording and an attempt.

The pipeline turns two sample buffers into a single ``0``-``100`` score:

1. silence samples below a fraction of each buffer's peak,
2. truncate both buffers to the shorter length and peak-normalise them,
3. correlate their amplitude envelopes,
4. correlate their block-wise RMS loudness contours,
5. blend both correlations, bend the result with a concave response
   curve and scale it to a percentage.

:func:`score_samples` runs the pipeline on buffers that are already in
memory.  :func:`similarity_report` and :func:`similarity` are the
coroutine entry points working on audio sources; they decode both sources
in worker threads and never raise for undecodable input, returning a score
of ``0`` instead.

Every entry point accepts an optional ``trace`` callable which receives
``(name, value)`` for each intermediate result.  It is called from
whichever thread runs the pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

from .config import ScoringConfig
from .constants import ENVELOPE_WEIGHT, MAX_SCORE, RESPONSE_EXPONENT, RMS_WEIGHT
from .correlation import absolute_correlation
from .dsp import amplitude_filter, envelope, normalize_lengths, rms_windows
from .exceptions import DecodeError
from .extraction import AudioSource, extract_samples

logger = logging.getLogger(__name__)

TraceSink = Callable[[str, Any], None]


def _no_trace(_name: str, _value: Any) -> None:
    return None


@dataclass(frozen=True)
class SimilarityReport:
    """Outcome of one similarity run.

    Attributes:
        score: Displayed score in ``[0, 100]``.  ``0.0`` when the run failed.
        envelope_score: Absolute envelope correlation.
        rms_score: Absolute RMS correlation, or ``None`` when the RMS
            contour could not be compared and the envelope was used alone.
        combined: Blended correlation before the response curve.
        error: Reason the score could not be computed, ``None`` on success.
    """

    score: float
    envelope_score: float = 0.0
    rms_score: Optional[float] = None
    combined: float = 0.0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, reason: str) -> "SimilarityReport":
        return cls(score=0.0, error=reason)


def combine_scores(
    envelope_score: float,
    rms_score: Optional[float],
    envelope_weight: float = ENVELOPE_WEIGHT,
    rms_weight: float = RMS_WEIGHT,
) -> float:
    """Blend the envelope and RMS correlations into a value in ``[0, 1]``.

    The weights are divided by their sum, so the defaults ``0.75``/``0.25``
    apply unchanged.  When ``rms_score`` is ``None`` the envelope score is
    used on its own.
    """

    if rms_score is None:
        combined = envelope_score
    else:
        total = envelope_weight + rms_weight
        combined = (envelope_score * envelope_weight + rms_score * rms_weight) / total
    return float(np.clip(combined, 0.0, 1.0))


def response_curve(combined: float, exponent: float = RESPONSE_EXPONENT) -> float:
    """Map a blended correlation onto the displayed ``[0, 1]`` scale.

    Exponents below one lift middling correlations while keeping ``0`` and
    ``1`` fixed.  The curve is non-decreasing for any positive exponent.
    """
    combined = float(np.clip(combined, 0.0, 1.0))
    return combined**exponent


def score_samples(
    original: np.ndarray,
    comparison: np.ndarray,
    config: Optional[ScoringConfig] = None,
    trace: Optional[TraceSink] = None,
) -> SimilarityReport:
    """Score two already-extracted sample buffers.

    Parameters
    ----------
    original:
        Samples of the reference recording.
    comparison:
        Samples of the attempt.  May differ in length from ``original``;
        both are cut to the shorter one.
    config:
        Pipeline parameters.  Defaults to :class:`ScoringConfig`.
    trace:
        Optional sink for named intermediate values.

    Returns
    -------
    SimilarityReport
        The score and the correlations it was built from.  Empty input
        yields a failed report with a score of ``0.0``.  NaN and infinite
        samples are treated as silence.
    """

    config = config or ScoringConfig()
    emit = trace or _no_trace
    original = np.nan_to_num(
        np.asarray(original, dtype=np.float64).reshape(-1), nan=0.0, posinf=0.0, neginf=0.0
    )
    comparison = np.nan_to_num(
        np.asarray(comparison, dtype=np.float64).reshape(-1), nan=0.0, posinf=0.0, neginf=0.0
    )
    emit("original_samples", original)
    emit("comparison_samples", comparison)

    if original.size == 0 or comparison.size == 0:
        logger.debug(
            "Empty sample buffer (%d vs %d samples)", original.size, comparison.size
        )
        return SimilarityReport.failed("empty sample buffer")

    first, second = normalize_lengths(
        amplitude_filter(original, config.noise_threshold_ratio),
        amplitude_filter(comparison, config.noise_threshold_ratio),
    )
    emit("normalized_original", first)
    emit("normalized_comparison", second)

    env_first = envelope(first, config.envelope_window)
    env_second = envelope(second, config.envelope_window)
    emit("envelope_original", env_first)
    emit("envelope_comparison", env_second)
    envelope_score = absolute_correlation(env_first, env_second)
    emit("envelope_score", envelope_score)

    rms_first = rms_windows(first, config.rms_window)
    rms_second = rms_windows(second, config.rms_window)
    emit("rms_original", rms_first)
    emit("rms_comparison", rms_second)
    rms_score: Optional[float] = None
    if rms_first.size and rms_first.size == rms_second.size:
        rms_score = absolute_correlation(rms_first, rms_second)
        emit("rms_score", rms_score)
    else:
        logger.debug(
            "Skipping RMS comparison (%d vs %d windows)", rms_first.size, rms_second.size
        )

    combined = combine_scores(
        envelope_score, rms_score, config.envelope_weight, config.rms_weight
    )
    emit("combined", combined)
    scaled = response_curve(combined, config.response_exponent)
    emit("scaled", scaled)
    score = float(np.clip(scaled * MAX_SCORE, 0.0, MAX_SCORE))
    emit("score", score)

    logger.debug(
        "envelope=%.4f rms=%s combined=%.4f score=%.1f",
        envelope_score,
        "n/a" if rms_score is None else f"{rms_score:.4f}",
        combined,
        score,
    )
    return SimilarityReport(
        score=score,
        envelope_score=envelope_score,
        rms_score=rms_score,
        combined=combined,
    )


async def similarity_report(
    original: AudioSource,
    comparison: AudioSource,
    config: Optional[ScoringConfig] = None,
    trace: Optional[TraceSink] = None,
) -> SimilarityReport:
    """Decode two audio sources and score their similarity.

    Both sources are decoded concurrently in worker threads and the
    numeric pipeline runs in a worker thread as well, so awaiting this
    coroutine never blocks the event loop.  A source that cannot be
    decoded produces a failed report with a score of ``0.0``; the decode
    error is logged rather than raised.
    """

    config = config or ScoringConfig()
    try:
        first, second = await asyncio.gather(
            asyncio.to_thread(extract_samples, original, config.downsample_factor),
            asyncio.to_thread(extract_samples, comparison, config.downsample_factor),
        )
    except DecodeError as exc:
        logger.warning("Could not compute similarity: %s", exc)
        return SimilarityReport.failed(str(exc))
    return await asyncio.to_thread(score_samples, first, second, config, trace)


async def similarity(
    original: AudioSource,
    comparison: AudioSource,
    config: Optional[ScoringConfig] = None,
    trace: Optional[TraceSink] = None,
) -> float:
    """Return the ``0``-``100`` similarity score of two audio sources.

    ``0.0`` is returned both for dissimilar recordings and for sources that
    could not be decoded; use :func:`similarity_report` to tell them apart.
    """

    report = await similarity_report(original, comparison, config, trace)
    return report.score


__all__ = [
    "SimilarityReport",
    "TraceSink",
    "combine_scores",
    "response_curve",
    "score_samples",
    "similarity_report",
    "similarity",
]
