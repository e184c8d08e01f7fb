"""
Filters: pure Wave -> Wave transformations.

A filter is any callable taking a Wave and returning a new Wave. Parameters are
captured when the filter is built (Filter.gain(-6.0), bind(fn, factor=2)), so the
callable passed to Wave.filter takes the wave alone. Filters may change the
length of the buffer; they keep sample_rate/channels unless documented otherwise.

Biquad filters use torchaudio implementations (minimum-phase IIR).
"""
from functools import reduce, wraps
from typing import Callable

import numpy as np
import torch
import torchaudio.functional as F

from lightmix.core.data import from_interleaved, to_interleaved
from lightmix.core.types import Wave
from lightmix.dsp.envelopes import Envelope, db_to_lin, expand_to_channels

FilterFn = Callable[[Wave], Wave]


# -----------------------------------------------------------------------------
# Composition
# -----------------------------------------------------------------------------

def chain(*filters: FilterFn) -> FilterFn:
    """
    Compose filters left to right: chain(f1, f2)(w) == f2(f1(w)).
    Each step goes through Wave.filter, so failures surface as FilterFailed.
    """
    def chained(wave: Wave) -> Wave:
        return reduce(lambda acc, f: acc.filter(f), filters, wave)

    chained.__name__ = "chain(" + ", ".join(getattr(f, "__name__", "?") for f in filters) + ")"
    return chained


def bind(fn: Callable[..., Wave], *args, **kwargs) -> FilterFn:
    """Capture extra arguments: bind(fn, a)(w) == fn(w, a)."""
    @wraps(fn)
    def bound(wave: Wave) -> Wave:
        return fn(wave, *args, **kwargs)

    return bound


# -----------------------------------------------------------------------------
# Tensor helpers
# -----------------------------------------------------------------------------

def _planar(wave: Wave) -> torch.Tensor:
    """(channels, frames) tensor view of a wave's interleaved samples."""
    return torch.from_numpy(from_interleaved(wave.samples, wave.channels))


def _from_planar(planar: torch.Tensor, like: Wave) -> Wave:
    samples = to_interleaved(planar.numpy()).astype(like.dtype, copy=False)
    return Wave(samples, like.sample_rate, like.channels)


def _scaled(wave: Wave, envelope: torch.Tensor) -> Wave:
    """Multiply each frame by the matching envelope value."""
    gains = expand_to_channels(envelope, wave.channels)
    body = wave.samples[: gains.shape[0]] * gains.astype(wave.dtype)
    # Leftover samples of an incomplete trailing frame are kept as-is
    return Wave(np.concatenate([body, wave.samples[gains.shape[0]:]]), wave.sample_rate, wave.channels)


# -----------------------------------------------------------------------------
# Built-in filters
# -----------------------------------------------------------------------------

class Filter:
    @staticmethod
    def scale(factor: float) -> FilterFn:
        """Multiply every sample by factor."""
        def scale(wave: Wave) -> Wave:
            return Wave(wave.samples * wave.dtype.type(factor), wave.sample_rate, wave.channels)
        return scale

    @staticmethod
    def gain(gain_db: float) -> FilterFn:
        """Apply gain in dB. 0 dB leaves the wave unchanged."""
        scale = Filter.scale(db_to_lin(gain_db))

        def gain(wave: Wave) -> Wave:
            return scale(wave)
        return gain

    @staticmethod
    def linear_decay() -> FilterFn:
        """Linear fade-out over the whole wave."""
        def linear_decay(wave: Wave) -> Wave:
            return _scaled(wave, Envelope.linear_decay(wave.frames))
        return linear_decay

    @staticmethod
    def linear_attack() -> FilterFn:
        """Linear fade-in over the whole wave."""
        def linear_attack(wave: Wave) -> Wave:
            return _scaled(wave, Envelope.linear_attack(wave.frames))
        return linear_attack

    @staticmethod
    def exponential_decay(decay_time: float) -> FilterFn:
        """Multiply by e^(-t / decay_time)."""
        def exponential_decay(wave: Wave) -> Wave:
            return _scaled(wave, Envelope.exponential_decay(wave.frames, wave.sample_rate, decay_time))
        return exponential_decay

    @staticmethod
    def lowpass(cutoff_freq: float, q: float = 0.707) -> FilterFn:
        """LowPass biquad. Cutoff is capped just below Nyquist."""
        def lowpass(wave: Wave) -> Wave:
            if wave.frames == 0:
                return Wave(wave.samples, wave.sample_rate, wave.channels)
            cutoff = min(cutoff_freq, wave.sample_rate / 2 - 1)
            out = F.lowpass_biquad(_planar(wave), wave.sample_rate, cutoff, q)
            return _from_planar(out, wave)
        return lowpass

    @staticmethod
    def highpass(cutoff_freq: float, q: float = 0.707) -> FilterFn:
        """HighPass biquad. Cutoff is capped just below Nyquist."""
        def highpass(wave: Wave) -> Wave:
            if wave.frames == 0:
                return Wave(wave.samples, wave.sample_rate, wave.channels)
            cutoff = min(cutoff_freq, wave.sample_rate / 2 - 1)
            out = F.highpass_biquad(_planar(wave), wave.sample_rate, cutoff, q)
            return _from_planar(out, wave)
        return highpass

    @staticmethod
    def soft_clip(threshold_db: float = -0.1) -> FilterFn:
        """tanh soft clipping scaled to the threshold."""
        threshold = db_to_lin(threshold_db)

        def soft_clip(wave: Wave) -> Wave:
            out = torch.tanh(torch.from_numpy(np.array(wave.samples))) * threshold
            return Wave(out.numpy().astype(wave.dtype, copy=False), wave.sample_rate, wave.channels)
        return soft_clip

    @staticmethod
    def normalize(peak: float = 1.0) -> FilterFn:
        """Scale so max(abs(x)) == peak. Silent waves are returned unchanged."""
        def normalize(wave: Wave) -> Wave:
            current = float(np.max(np.abs(wave.samples))) if len(wave) else 0.0
            if current == 0.0:
                return Wave(wave.samples, wave.sample_rate, wave.channels)
            return Filter.scale(peak / current)(wave)
        return normalize

    @staticmethod
    def decimate(factor: int = 2) -> FilterFn:
        """
        Keep every factor-th frame. Played back at the same rate the pitch rises
        by `factor` and the length shrinks accordingly.
        """
        if factor < 1:
            raise ValueError(f"decimation factor must be >= 1, got {factor}")

        def decimate(wave: Wave) -> Wave:
            planar = _planar(wave)
            return _from_planar(planar[:, ::factor].contiguous(), wave)
        return decimate

    @staticmethod
    def repeat_samples(factor: int = 2) -> FilterFn:
        """Repeat every frame factor times: pitch drops, length grows."""
        if factor < 1:
            raise ValueError(f"repeat factor must be >= 1, got {factor}")

        def repeat_samples(wave: Wave) -> Wave:
            planar = _planar(wave)
            return _from_planar(torch.repeat_interleave(planar, factor, dim=1), wave)
        return repeat_samples
