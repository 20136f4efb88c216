import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reversesinging.dsp import (
    amplitude_filter,
    envelope,
    normalize_amplitude,
    normalize_lengths,
    rms_windows,
)


def _naive_envelope(samples: np.ndarray, window: int) -> np.ndarray:
    half = window // 2
    out = []
    for i in range(len(samples)):
        lo = max(0, i - half)
        hi = min(len(samples), i + half)
        out.append(np.mean(np.abs(samples[lo:hi])))
    return np.array(out)


def test_amplitude_filter_zeroes_quiet_samples() -> None:
    samples = np.array([0.01, 0.5, -0.02, 1.0, 0.03])
    filtered = amplitude_filter(samples)
    assert filtered.tolist() == pytest.approx([0.0, 0.5, 0.0, 1.0, 0.0])


def test_amplitude_filter_threshold_is_inclusive() -> None:
    samples = np.array([0.1, -1.0, 0.2])
    assert amplitude_filter(samples, 0.1).tolist() == pytest.approx([0.0, -1.0, 0.2])


def test_amplitude_filter_edge_cases() -> None:
    assert amplitude_filter(np.array([])).size == 0
    silent = amplitude_filter(np.zeros(8))
    assert silent.shape == (8,)
    assert not np.any(silent)


def test_amplitude_filter_does_not_modify_input() -> None:
    samples = np.array([0.01, 1.0])
    amplitude_filter(samples)
    assert samples[0] == pytest.approx(0.01)


def test_normalize_amplitude_peak_is_one() -> None:
    out = normalize_amplitude(np.array([0.25, -0.5, 0.1]))
    assert out.tolist() == pytest.approx([0.5, -1.0, 0.2])
    assert np.max(np.abs(out)) == pytest.approx(1.0)


def test_normalize_amplitude_leaves_silence() -> None:
    assert normalize_amplitude(np.zeros(4)).tolist() == [0.0, 0.0, 0.0, 0.0]


def test_normalize_lengths_truncates_to_shorter() -> None:
    first, second = normalize_lengths(np.array([1.0, 2.0, 4.0, 8.0]), np.array([0.5, -0.25]))
    assert first.size == second.size == 2
    assert first.tolist() == pytest.approx([0.5, 1.0])
    assert second.tolist() == pytest.approx([1.0, -0.5])


def test_normalize_lengths_with_empty_side() -> None:
    first, second = normalize_lengths(np.array([1.0, 2.0]), np.array([]))
    assert first.size == 0
    assert second.size == 0


def test_envelope_shrinks_windows_at_edges() -> None:
    samples = np.array([1.0, -2.0, 3.0, -4.0, 5.0])
    assert envelope(samples, window=4).tolist() == pytest.approx([1.5, 2.0, 2.5, 3.5, 4.0])


def test_envelope_matches_naive_computation() -> None:
    rng = np.random.default_rng(7)
    samples = rng.normal(size=500)
    for window in (2, 3, 75, 600):
        assert np.allclose(envelope(samples, window), _naive_envelope(samples, window))


def test_envelope_small_window_is_magnitude() -> None:
    samples = np.array([-0.5, 0.25, 0.0])
    assert envelope(samples, window=1).tolist() == pytest.approx([0.5, 0.25, 0.0])


def test_envelope_of_silence_is_exactly_zero() -> None:
    env = envelope(np.zeros(300))
    assert env.shape == (300,)
    assert not np.any(env)


def test_envelope_empty_and_invalid() -> None:
    assert envelope(np.array([])).size == 0
    with pytest.raises(ValueError):
        envelope(np.ones(3), window=0)


def test_rms_windows_blocks() -> None:
    samples = np.array([1, 1, 1, 1, 2, 2, 2, 2], dtype=float)
    assert rms_windows(samples, window=4).tolist() == pytest.approx([1.0, 2.0])


def test_rms_windows_short_final_block() -> None:
    samples = np.array([3.0, -3.0, 3.0, 4.0])
    rms = rms_windows(samples, window=3)
    assert rms.size == 2
    assert rms.tolist() == pytest.approx([3.0, 4.0])


def test_rms_windows_length_is_ceiling() -> None:
    rng = np.random.default_rng(1)
    for size in (1, 124, 125, 126, 1000):
        assert rms_windows(rng.normal(size=size), 125).size == -(-size // 125)


def test_rms_windows_empty() -> None:
    assert rms_windows(np.array([])).size == 0
