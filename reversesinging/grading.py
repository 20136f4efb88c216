"""Helpers that turn a similarity score into player feedback."""

from __future__ import annotations

from .constants import CELEBRATION_THRESHOLD, FAILING_GRADE, GRADE_BANDS, MAX_SCORE


def _band(score: float) -> tuple[str, str]:
    if not 0.0 <= score <= MAX_SCORE:
        raise ValueError(f"score must lie in [0, {MAX_SCORE:g}], got {score}")
    for lower, grade, description in GRADE_BANDS:
        if score >= lower:
            return grade, description
    return FAILING_GRADE


def letter_grade(score: float) -> str:
    """Return the letter grade (``"A+"`` … ``"F"``) for ``score``."""
    return _band(score)[0]


def grade_description(score: float) -> str:
    """Return the encouragement message shown next to the grade."""
    return _band(score)[1]


def should_celebrate(score: float) -> bool:
    return score > CELEBRATION_THRESHOLD


__all__ = ["letter_grade", "grade_description", "should_celebrate"]
