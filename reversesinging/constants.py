"""Tuning constants used by the similarity scoring pipeline.

The values in this module configure each stage of the scoring engine:
how aggressively decoded audio is downsampled, how much background noise
is suppressed, the window sizes of the envelope and loudness descriptors
and how the two correlations are blended into the displayed score.
Centralising them avoids magic numbers spread throughout the code base
and makes it easy to retune the game in one place.
"""

from __future__ import annotations

# ─── Extraction ─────────────────────────────────────────────────────────────

# Only every Nth frame of the first channel is kept.  The scorer compares
# broad amplitude shape, so a large factor bounds the cost of long
# recordings without changing the result noticeably.
DOWNSAMPLE_FACTOR: int = 20

# ─── Noise suppression ──────────────────────────────────────────────────────

# Samples whose magnitude is at or below this fraction of the peak are
# replaced with silence.  Higher values remove more room noise but start
# eating into quiet syllables of the reversed audio.
NOISE_THRESHOLD_RATIO: float = 0.10

# ─── Shape and loudness descriptors ─────────────────────────────────────────

# Width (in downsampled samples) of the centred moving average used to
# build the amplitude envelope.
ENVELOPE_WINDOW: int = 75

# Size of the non-overlapping blocks used for the RMS loudness contour.
RMS_WINDOW: int = 125

# ─── Score combination ──────────────────────────────────────────────────────

# Blend weights for the envelope and RMS correlations.  The envelope
# carries most of the signal; RMS adds a coarser loudness check.
ENVELOPE_WEIGHT: float = 0.75
RMS_WEIGHT: float = 0.25

# Exponent of the response curve applied to the blended correlation.
# Values below one bend the curve upwards so decent attempts read as
# decent scores while near-zero matches stay near zero.
RESPONSE_EXPONENT: float = 0.45

# Upper bound of the displayed score.
MAX_SCORE: float = 100.0

# ─── Grading ────────────────────────────────────────────────────────────────

# Scores strictly above this value trigger the success celebration.
CELEBRATION_THRESHOLD: float = 70.0

# Lower bounds of each grade band, best first.
GRADE_BANDS: tuple[tuple[float, str, str], ...] = (
    (90.0, "A+", "Perfect Match!"),
    (85.0, "A", "Excellent!"),
    (75.0, "B+", "Great Job!"),
    (65.0, "B", "Very Good!"),
    (55.0, "C+", "Good Effort!"),
    (45.0, "C", "Nice Try!"),
    (40.0, "D", "Keep Practicing!"),
)
FAILING_GRADE: tuple[str, str] = ("F", "Try Again!")

# ─── Persistence ────────────────────────────────────────────────────────────

APP_NAME: str = "reversesinging"
APP_AUTHOR: str = "reversesinging"
CONFIG_FILENAME: str = "scoring.json"

__all__ = [
    "DOWNSAMPLE_FACTOR",
    "NOISE_THRESHOLD_RATIO",
    "ENVELOPE_WINDOW",
    "RMS_WINDOW",
    "ENVELOPE_WEIGHT",
    "RMS_WEIGHT",
    "RESPONSE_EXPONENT",
    "MAX_SCORE",
    "CELEBRATION_THRESHOLD",
    "GRADE_BANDS",
    "FAILING_GRADE",
    "APP_NAME",
    "APP_AUTHOR",
    "CONFIG_FILENAME",
]
