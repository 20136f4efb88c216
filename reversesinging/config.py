"""Scoring configuration and its on-disk persistence.

:class:`ScoringConfig` gathers every tunable constant of the pipeline in a
single immutable value.  The defaults come from
:mod:`reversesinging.constants`; user overrides are stored as JSON in the
per-user configuration directory so values survive between sessions.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from appdirs import user_config_dir

from .constants import (
    APP_AUTHOR,
    APP_NAME,
    CONFIG_FILENAME,
    DOWNSAMPLE_FACTOR,
    ENVELOPE_WEIGHT,
    ENVELOPE_WINDOW,
    NOISE_THRESHOLD_RATIO,
    RESPONSE_EXPONENT,
    RMS_WEIGHT,
    RMS_WINDOW,
)
from .exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringConfig:
    """Tunable parameters of the similarity pipeline.

    Attributes:
        downsample_factor: Keep every Nth decoded frame.
        noise_threshold_ratio: Fraction of the peak magnitude at or below
            which samples are silenced.
        envelope_window: Nominal width of the centred moving average.
        rms_window: Block size of the RMS loudness contour.
        envelope_weight: Weight of the envelope correlation in the blend.
        rms_weight: Weight of the RMS correlation in the blend.
        response_exponent: Exponent of the response curve applied to the
            blended correlation.
    """

    downsample_factor: int = DOWNSAMPLE_FACTOR
    noise_threshold_ratio: float = NOISE_THRESHOLD_RATIO
    envelope_window: int = ENVELOPE_WINDOW
    rms_window: int = RMS_WINDOW
    envelope_weight: float = ENVELOPE_WEIGHT
    rms_weight: float = RMS_WEIGHT
    response_exponent: float = RESPONSE_EXPONENT

    def __post_init__(self) -> None:
        for name in ("downsample_factor", "envelope_window", "rms_window"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ConfigError(f"{name} must be at least 1, got {value}")
        for name in (
            "noise_threshold_ratio",
            "envelope_weight",
            "rms_weight",
            "response_exponent",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value}")
        if not 0.0 <= self.noise_threshold_ratio <= 1.0:
            raise ConfigError(
                f"noise_threshold_ratio must lie in [0, 1], got {self.noise_threshold_ratio}"
            )
        if self.envelope_weight < 0.0 or self.rms_weight < 0.0:
            raise ConfigError("blend weights must not be negative")
        if self.envelope_weight + self.rms_weight <= 0.0:
            raise ConfigError("at least one blend weight must be positive")
        if self.response_exponent <= 0.0:
            raise ConfigError(
                f"response_exponent must be positive, got {self.response_exponent}"
            )

    def replace(self, **changes: Any) -> "ScoringConfig":
        """Return a copy of this configuration with ``changes`` applied."""
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoringConfig":
        """Build a configuration from a plain mapping.

        Missing keys keep their defaults; unknown keys raise
        :class:`~reversesinging.exceptions.ConfigError`.
        """
        known = {field.name for field in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))


def default_config_path() -> Path:
    """Return the location of the per-user scoring configuration file."""
    return Path(user_config_dir(APP_NAME, APP_AUTHOR)) / CONFIG_FILENAME


def load_config(path: Optional[str | Path] = None) -> ScoringConfig:
    """Load a :class:`ScoringConfig` from ``path``.

    Parameters
    ----------
    path:
        JSON file to read.  Defaults to :func:`default_config_path`.

    Returns
    -------
    ScoringConfig
        The stored configuration, or the defaults when no file exists.
    """

    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        logger.debug("No scoring config at %s, using defaults", config_path)
        return ScoringConfig()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{config_path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    config = ScoringConfig.from_dict(data)
    logger.debug("Loaded scoring config from %s", config_path)
    return config


def save_config(config: ScoringConfig, path: Optional[str | Path] = None) -> Path:
    """Write ``config`` as JSON and return the path written."""
    config_path = Path(path) if path is not None else default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    return config_path


__all__ = ["ScoringConfig", "default_config_path", "load_config", "save_config"]
