"""
Oscillator generators producing Wave values.
Sample i is evaluated at t = i / sample_rate, so every waveform starts at phase 0.
Multi-channel output duplicates the signal into each interleaved channel.
"""

import torch
import numpy as np

from lightmix.core.config import DEFAULT_SAMPLE_RATE
from lightmix.core.types import Wave


def _time(duration: float, sample_rate: int) -> torch.Tensor:
    num_samples = int(duration * sample_rate)
    return torch.arange(num_samples, dtype=torch.float64) / sample_rate


def _to_wave(signal: torch.Tensor, sample_rate: int, channels: int, dtype) -> Wave:
    if channels > 1:
        signal = torch.repeat_interleave(signal, channels)
    samples = signal.numpy()
    if dtype is not None:
        samples = samples.astype(dtype)
    return Wave(samples, sample_rate, channels)


class Oscillator:
    @staticmethod
    def sine(
        frequency: float,
        duration: float,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = 1.0,
        phase: float = 0.0,
        channels: int = 1,
        dtype=None,
    ) -> Wave:
        """
        Sine wave: amplitude * sin(2*pi*f*t + phase).

        Args:
            frequency: Frequency (Hz)
            duration: Duration in seconds
            sample_rate: Sample rate
            amplitude: Peak amplitude
            phase: Initial phase offset (radians)
        """
        t = _time(duration, sample_rate)
        return _to_wave(amplitude * torch.sin(2 * np.pi * frequency * t + phase), sample_rate, channels, dtype)

    @staticmethod
    def triangle(
        frequency: float,
        duration: float,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = 1.0,
        channels: int = 1,
        dtype=None,
    ) -> Wave:
        """Triangle wave, -1 at t = 0."""
        t = _time(duration, sample_rate)
        # 2 * abs(2 * (t * freq - floor(t * freq + 0.5))) - 1
        x = frequency * t
        wave = 2 * torch.abs(2 * (x - torch.floor(x + 0.5))) - 1
        return _to_wave(amplitude * wave, sample_rate, channels, dtype)

    @staticmethod
    def saw(
        frequency: float,
        duration: float,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = 1.0,
        channels: int = 1,
        dtype=None,
    ) -> Wave:
        """Sawtooth wave rising from 0 through 1, jumping to -1 at half period."""
        t = _time(duration, sample_rate)
        x = frequency * t
        return _to_wave(amplitude * 2 * (x - torch.floor(x + 0.5)), sample_rate, channels, dtype)

    @staticmethod
    def square(
        frequency: float,
        duration: float,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = 1.0,
        channels: int = 1,
        dtype=None,
    ) -> Wave:
        """Square wave: +amplitude for the first half period, -amplitude for the second."""
        t = _time(duration, sample_rate)
        phase = torch.remainder(frequency * t, 1.0)
        wave = torch.where(phase < 0.5, 1.0, -1.0).to(torch.float64)
        return _to_wave(amplitude * wave, sample_rate, channels, dtype)

    @staticmethod
    def soundless(
        length: int,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        channels: int = 1,
        dtype=None,
    ) -> Wave:
        """length zero samples."""
        return Wave.soundless(length, sample_rate, channels, dtype=dtype)
