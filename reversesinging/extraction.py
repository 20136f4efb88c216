"""Decoding of audio sources into downsampled mono sample buffers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

import numpy as np
import soundfile as sf

from .constants import DOWNSAMPLE_FACTOR
from .exceptions import DecodeError

logger = logging.getLogger(__name__)

AudioSource = Union[str, "os.PathLike[str]", BinaryIO, np.ndarray]


def _source_name(source: AudioSource) -> str:
    if isinstance(source, np.ndarray):
        return f"<array shape={source.shape}>"
    if isinstance(source, (str, os.PathLike)):
        return Path(source).name
    return getattr(source, "name", repr(source))


def _as_frames(data: np.ndarray) -> np.ndarray:
    """Return ``data`` shaped ``(frames, channels)`` as ``float32``."""
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    elif data.ndim != 2:
        raise DecodeError(f"Expected 1-D or 2-D audio data, got {data.ndim} dimensions")
    try:
        return np.asarray(data, dtype=np.float32)
    except (TypeError, ValueError) as exc:
        raise DecodeError("Audio data is not numeric") from exc


def decode_audio(source: AudioSource) -> tuple[np.ndarray, Optional[int]]:
    """Decode ``source`` into PCM frames.

    Args:
        source: A filesystem path, a binary file object or an array of
            already-decoded samples (mono, or ``frames x channels``).  Paths
            ending in ``.npy`` are read with :func:`numpy.load`; everything
            else goes through ``soundfile``.

    Returns:
        Tuple of ``(frames, sample_rate)`` where ``frames`` is a ``float32``
        array shaped ``(frames, channels)``.  ``sample_rate`` is ``None``
        when it is not known (arrays and ``.npy`` files).

    Raises:
        DecodeError: If the source cannot be read, holds no frames or
            contains non-finite samples.
    """

    name = _source_name(source)
    sample_rate: Optional[int] = None
    if isinstance(source, np.ndarray):
        data = source
    elif isinstance(source, (str, os.PathLike)) and Path(source).suffix.lower() == ".npy":
        try:
            data = np.load(source, allow_pickle=False)
        except (OSError, ValueError) as exc:
            raise DecodeError(f"{name} could not be loaded as a sample array.") from exc
    else:
        try:
            data, sample_rate = sf.read(source, dtype="float32", always_2d=True)
        except (sf.LibsndfileError, RuntimeError, OSError, TypeError) as exc:
            raise DecodeError(
                f"{name} could not be decoded. Invalid audio data or unsupported format."
            ) from exc

    frames = _as_frames(data)
    if frames.shape[0] == 0 or frames.shape[1] == 0:
        raise DecodeError(f'No audio data could be loaded from "{name}".')
    if not np.all(np.isfinite(frames)):
        raise DecodeError(f'"{name}" contains NaN or infinite samples.')
    logger.debug(
        "Decoded %s: %d frames, %d channel(s), rate=%s",
        name,
        frames.shape[0],
        frames.shape[1],
        sample_rate,
    )
    return frames, sample_rate


def downsample(frames: np.ndarray, factor: int = DOWNSAMPLE_FACTOR) -> np.ndarray:
    """Return every ``factor``-th frame of the first channel of ``frames``.

    The first frame is always kept, so the result holds
    ``ceil(len(frames) / factor)`` samples.
    """

    if factor < 1:
        raise ValueError(f"factor must be at least 1, got {factor}")
    if frames.ndim == 2:
        frames = frames[:, 0]
    return np.ascontiguousarray(frames[::factor], dtype=np.float32)


def extract_samples(
    source: AudioSource, downsample_factor: int = DOWNSAMPLE_FACTOR
) -> np.ndarray:
    """Decode ``source`` and return its downsampled first channel.

    Raises:
        DecodeError: If ``source`` cannot be decoded or is empty.
    """

    frames, _ = decode_audio(source)
    return downsample(frames, downsample_factor)


__all__ = ["AudioSource", "decode_audio", "downsample", "extract_samples"]
