"""
Tests for lightmix/core/types: Wave construction, mix, filter, padding.
Run from project root: python -m pytest tests/test_wave.py -v
"""
import sys
import os
import logging

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import pytest

from lightmix.core.config import resolve_dtype
from lightmix.core.errors import (
    AllocationFailure,
    FilterFailed,
    InvalidPadding,
    ShapeMismatch,
)
from lightmix.core.types import Wave, fill_zero_to_end, pad_end, pad_start

SR = 44100


def _sine(n: int = SR, amplitude: float = 0.5, freq: float = 440.0) -> np.ndarray:
    i = np.arange(n, dtype=np.float64)
    return amplitude * np.sin(i * freq * 2.0 * np.pi / SR)


# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

def test_init_keeps_format():
    wave = Wave(_sine(), SR, 1)
    assert wave.sample_rate == SR
    assert wave.channels == 1
    assert len(wave) == SR
    assert wave.frames == SR
    assert wave.duration == pytest.approx(1.0)


def test_init_creates_deep_copy():
    original = np.array([1.0, 2.0, 3.0])
    wave = Wave(original, SR)
    original[0] = 999.0
    np.testing.assert_array_equal(wave.samples, [1.0, 2.0, 3.0])


def test_samples_are_read_only():
    wave = Wave([1.0, 2.0], SR)
    with pytest.raises(ValueError):
        wave.samples[0] = 5.0


def test_init_with_empty_samples():
    wave = Wave([], SR, 1)
    assert len(wave) == 0
    assert wave.sample_rate == SR
    assert wave.channels == 1


def test_init_with_different_channels():
    samples = [1.0, 2.0, 3.0, 4.0]
    assert Wave(samples, SR, 1).channels == 1
    stereo = Wave(samples, SR, 2)
    assert stereo.channels == 2
    assert stereo.frames == 2


def test_init_rejects_non_positive_format():
    with pytest.raises(ValueError):
        Wave([0.0], 0, 1)
    with pytest.raises(ValueError):
        Wave([0.0], SR, 0)


def test_non_divisible_length_is_allowed_but_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="lightmix.core.types"):
        wave = Wave([1.0, 2.0, 3.0], SR, 2)
    assert len(wave) == 3
    assert wave.frames == 1
    assert "not a multiple" in caplog.text


def test_precision_is_preserved_and_convertible():
    w32 = Wave(np.array([0.5, 0.25], dtype=np.float32), SR)
    assert w32.dtype == np.float32
    assert Wave([1, 2, 3], SR).dtype == np.float64
    w64 = w32.astype(np.float64)
    assert w64.dtype == np.float64
    np.testing.assert_array_equal(w64.samples, [0.5, 0.25])
    with pytest.raises(ValueError):
        w32.astype(np.int16)


def test_resolve_dtype():
    assert resolve_dtype("float32") == np.float32
    assert resolve_dtype(None) == np.float64
    with pytest.raises(ValueError):
        resolve_dtype("int32")


def test_soundless():
    wave = Wave.soundless(10, SR, 2)
    assert len(wave) == 10
    assert wave.channels == 2
    assert not np.any(wave.samples)


# -----------------------------------------------------------------------------
# mix
# -----------------------------------------------------------------------------

def test_mix_sine_with_itself():
    wave = Wave(_sine(), SR, 1)
    result = wave.mix(wave)
    assert result.sample_rate == SR
    assert result.channels == 1
    assert result.samples[0] == pytest.approx(0.0, abs=1e-5)
    assert result.samples[1] == pytest.approx(0.06264832417874369, abs=1e-5)
    assert result.samples[2] == pytest.approx(0.1250505236945281, abs=1e-5)


def test_mix_preserves_wave_properties():
    a = Wave([1.0, 2.0, 3.0], 48000, 2)
    b = Wave([0.5, 1.0, 1.5], 48000, 2)
    result = a.mix(b)
    assert result.sample_rate == 48000
    assert result.channels == 2
    np.testing.assert_array_equal(result.samples, [1.5, 3.0, 4.5])


def test_mix_is_commutative():
    rng = np.random.default_rng(7)
    a = Wave(rng.uniform(-1, 1, 1000), SR)
    b = Wave(rng.uniform(-1, 1, 1000), SR)
    np.testing.assert_array_equal(a.mix(b).samples, b.mix(a).samples)


def test_mix_with_zeros_is_identity():
    a = Wave(_sine(512), SR)
    zero = Wave.soundless(512, SR)
    np.testing.assert_array_equal(a.mix(zero).samples, a.samples)


def test_mix_zero_length():
    a = Wave([], 22050, 2)
    result = a.mix(Wave([], 22050, 2))
    assert len(result) == 0
    assert result.sample_rate == 22050
    assert result.channels == 2


def test_mix_is_not_clamped():
    result = Wave([0.9, -0.9], SR).mix(Wave([0.9, -0.9], SR))
    np.testing.assert_allclose(result.samples, [1.8, -1.8])


@pytest.mark.parametrize(
    "other",
    [
        Wave([1.0, 2.0], SR, 1),          # length
        Wave([1.0, 2.0, 3.0], 48000, 1),  # sample rate
        Wave([1.0, 2.0, 3.0], SR, 3),     # channels
    ],
)
def test_mix_shape_mismatch(other):
    wave = Wave([1.0, 2.0, 3.0], SR, 1)
    with pytest.raises(ShapeMismatch):
        wave.mix(other)


def test_mix_custom_mixer():
    a = Wave([1.0, 3.0], SR)
    b = Wave([3.0, 5.0], SR)
    result = a.mix(b, mixer=lambda left, right: (left + right) / 2)
    np.testing.assert_array_equal(result.samples, [2.0, 4.0])


# -----------------------------------------------------------------------------
# Padding
# -----------------------------------------------------------------------------

def test_padding_round_trip():
    samples = np.array([0.1, 0.2, 0.3])
    n, m = 4, 5
    out = pad_end(pad_start(samples, n), n + len(samples) + m)
    assert len(out) == n + len(samples) + m
    assert not np.any(out[:n])
    assert not np.any(out[-m:])
    np.testing.assert_array_equal(out[n:n + len(samples)], samples)


def test_pad_end_shorter_target_raises():
    with pytest.raises(InvalidPadding):
        pad_end(np.ones(5), 4)


def test_pad_start_negative_raises():
    with pytest.raises(InvalidPadding):
        pad_start(np.ones(5), -1)


def test_wave_padding_methods_keep_format():
    wave = Wave([1.0, 1.0], 8000, 1).pad_start(2).pad_end(6)
    assert wave.sample_rate == 8000
    np.testing.assert_array_equal(wave.samples, [0, 0, 1, 1, 0, 0])


def test_fill_zero_to_end():
    wave = Wave(_sine(), SR, 1)
    filled = wave.fill_zero_to_end(22050, 44100)
    assert len(filled) == 44100
    assert filled.samples[0] == pytest.approx(0.0, abs=1e-5)
    assert filled.samples[1] == pytest.approx(0.031324162089371846, abs=1e-5)
    assert filled.samples[2] == pytest.approx(0.06252526184726405, abs=1e-5)
    assert filled.samples[22049] == pytest.approx(-0.03132416208941618, abs=1e-5)
    assert filled.samples[22050] == 0.0
    assert filled.samples[44099] == 0.0


def test_fill_zero_to_end_invalid():
    with pytest.raises(InvalidPadding):
        fill_zero_to_end(np.ones(3), 4, 5)
    with pytest.raises(InvalidPadding):
        fill_zero_to_end(np.ones(3), 2, 1)


# -----------------------------------------------------------------------------
# filter
# -----------------------------------------------------------------------------

def _five_zeros(wave: Wave) -> Wave:
    return Wave(np.zeros(5), wave.sample_rate, wave.channels)


def _n_zeros(wave: Wave, samples: int) -> Wave:
    return Wave(np.zeros(samples), wave.sample_rate, wave.channels)


def _double(wave: Wave) -> Wave:
    return Wave(wave.samples * 2, wave.sample_rate, wave.channels)


def _plus_one(wave: Wave) -> Wave:
    return Wave(wave.samples + 1, wave.sample_rate, wave.channels)


def test_filter_may_change_length():
    wave = Wave([], SR, 1).filter(_five_zeros)
    assert wave.sample_rate == SR
    assert wave.channels == 1
    np.testing.assert_array_equal(wave.samples, np.zeros(5))


def test_filter_with_args():
    wave = Wave([], SR, 1).filter(_n_zeros, 3)
    assert len(wave) == 3
    wave = Wave([], SR, 1).filter(_n_zeros, samples=4)
    assert len(wave) == 4


def test_repeated_filters():
    wave = Wave([], SR).filter(_five_zeros).filter(_five_zeros).filter(_five_zeros).filter(_five_zeros)
    assert len(wave) == 5


def test_filter_chaining_matches_composition():
    wave = Wave([0.1, -0.2, 0.3], SR)
    chained = wave.filter(_double).filter(_plus_one)
    composed = _plus_one(_double(wave))
    np.testing.assert_array_equal(chained.samples, composed.samples)
    reversed_order = wave.filter(_plus_one).filter(_double)
    assert not np.array_equal(chained.samples, reversed_order.samples)


def test_filter_failure_carries_cause():
    def broken(wave):
        raise KeyError("missing coefficient")

    with pytest.raises(FilterFailed) as info:
        Wave([1.0], SR).filter(broken)
    assert info.value.filter_name == "broken"
    assert isinstance(info.value.cause, KeyError)
    assert isinstance(info.value.__cause__, KeyError)


def test_filter_returning_non_wave_fails():
    with pytest.raises(FilterFailed):
        Wave([1.0], SR).filter(lambda w: w.samples)


def test_filter_memory_error_is_allocation_failure():
    def hungry(wave):
        raise MemoryError()

    with pytest.raises(AllocationFailure):
        Wave([1.0], SR).filter(hungry)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
