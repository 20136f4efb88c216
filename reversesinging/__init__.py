"""Reverse singing similarity scoring package."""

from .config import ScoringConfig, load_config, save_config
from .correlation import pearson_correlation
from .exceptions import ConfigError, DecodeError, ReverseSingingError
from .extraction import extract_samples
from .grading import grade_description, letter_grade, should_celebrate
from .scoring import SimilarityReport, score_samples, similarity, similarity_report

__all__ = [
    "ScoringConfig",
    "load_config",
    "save_config",
    "pearson_correlation",
    "ConfigError",
    "DecodeError",
    "ReverseSingingError",
    "extract_samples",
    "grade_description",
    "letter_grade",
    "should_celebrate",
    "SimilarityReport",
    "score_samples",
    "similarity",
    "similarity_report",
]
