import io

import numpy as np
import pytest
import soundfile as sf

from reversesinging.exceptions import DecodeError
from reversesinging.extraction import decode_audio, downsample, extract_samples


def _sine(freq: float, sr: int = 8000, dur: float = 0.5) -> np.ndarray:
    t = np.linspace(0, dur, int(sr * dur), endpoint=False)
    return np.sin(2 * np.pi * freq * t).astype(np.float32)


def test_downsample_keeps_every_nth_frame() -> None:
    frames = np.arange(45, dtype=np.float32)
    assert downsample(frames, 20).tolist() == [0.0, 20.0, 40.0]


def test_downsample_uses_first_channel() -> None:
    frames = np.stack([np.arange(10.0), -np.arange(10.0)], axis=1)
    assert downsample(frames, 5).tolist() == [0.0, 5.0]


def test_downsample_rejects_invalid_factor() -> None:
    with pytest.raises(ValueError):
        downsample(np.ones(4), 0)


def test_extract_samples_from_wav(tmp_path) -> None:
    path = tmp_path / "take.wav"
    tone = _sine(440)
    sf.write(path, tone, 8000, subtype="FLOAT")
    samples = extract_samples(path)
    assert samples.dtype == np.float32
    assert samples.size == -(-tone.size // 20)
    assert np.allclose(samples, tone[::20])


def test_decode_audio_reports_sample_rate_and_channels(tmp_path) -> None:
    path = tmp_path / "stereo.wav"
    left = _sine(220)
    sf.write(path, np.stack([left, np.zeros_like(left)], axis=1), 8000, subtype="FLOAT")
    frames, rate = decode_audio(str(path))
    assert rate == 8000
    assert frames.shape == (left.size, 2)
    assert np.allclose(extract_samples(path, 1), left)


def test_extract_samples_from_file_object() -> None:
    buffer = io.BytesIO()
    sf.write(buffer, _sine(330), 8000, format="WAV", subtype="FLOAT")
    buffer.seek(0)
    assert extract_samples(buffer, 10).size == 400


def test_extract_samples_from_npy(tmp_path) -> None:
    path = tmp_path / "sample.npy"
    np.save(path, _sine(440))
    frames, rate = decode_audio(path)
    assert rate is None
    assert frames.shape[1] == 1
    assert extract_samples(path).size == 200


def test_extract_samples_from_array() -> None:
    assert extract_samples(np.arange(100.0), 50).tolist() == [0.0, 50.0]


def test_missing_file_raises_decode_error(tmp_path) -> None:
    with pytest.raises(DecodeError):
        extract_samples(tmp_path / "missing.wav")


def test_garbage_file_raises_decode_error(tmp_path) -> None:
    path = tmp_path / "noise.wav"
    path.write_bytes(b"definitely not audio")
    with pytest.raises(DecodeError):
        extract_samples(path)


def test_empty_source_raises_decode_error() -> None:
    with pytest.raises(DecodeError):
        extract_samples(np.zeros((0, 1), dtype=np.float32))
    with pytest.raises(DecodeError):
        extract_samples(np.zeros((2, 2, 2)))


def test_non_finite_samples_raise_decode_error(tmp_path) -> None:
    path = tmp_path / "glitch.wav"
    tone = _sine(440)
    tone[100] = np.nan
    sf.write(path, tone, 8000, subtype="FLOAT")
    with pytest.raises(DecodeError):
        extract_samples(path)
    with pytest.raises(DecodeError):
        extract_samples(np.array([0.5, np.inf, -0.5]))
