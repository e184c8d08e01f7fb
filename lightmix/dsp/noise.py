import torch
import torchaudio.functional as AF

from lightmix.core.config import DEFAULT_SAMPLE_RATE
from lightmix.core.types import Wave

# Three-pole pink shaping: (pole, gain) per stage, plus direct white gain
PINK_POLES = ((0.99765, 0.0990460), (0.96300, 0.2965164), (0.57000, 1.0526913))
PINK_WHITE_GAIN = 0.1848


def _uniform(num_samples: int, seed: int) -> torch.Tensor:
    """Seeded uniform noise in [-1, 1)."""
    gen = torch.Generator().manual_seed(seed)
    return torch.rand(num_samples, generator=gen, dtype=torch.float64) * 2.0 - 1.0


class Noise:
    @staticmethod
    def white(
        duration: float,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = 1.0,
        seed: int = 0,
    ) -> Wave:
        """Uniform white noise. Same seed -> same samples."""
        num_samples = int(duration * sample_rate)
        return Wave((_uniform(num_samples, seed) * amplitude).numpy(), sample_rate)

    @staticmethod
    def pink(
        duration: float,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = 1.0,
        seed: int = 0,
    ) -> Wave:
        """
        Pink (1/f) noise via three one-pole filters over white noise:
        b_k[n] = pole_k * b_k[n-1] + gain_k * white[n]; pink = sum(b_k) + 0.1848 * white.
        Not normalized; scale with amplitude.
        """
        num_samples = int(duration * sample_rate)
        white = _uniform(num_samples, seed)
        pink = white * PINK_WHITE_GAIN
        if num_samples:
            for pole, gain in PINK_POLES:
                a = torch.tensor([1.0, -pole], dtype=torch.float64)
                b = torch.tensor([gain, 0.0], dtype=torch.float64)
                pink = pink + AF.lfilter(white, a, b, clamp=False)
        return Wave((pink * amplitude).numpy(), sample_rate)

    @staticmethod
    def brown(
        duration: float,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = 1.0,
        step: float = 0.02,
        seed: int = 0,
    ) -> Wave:
        """
        Brown noise: random walk of uniform steps in [-step, step), clamped to [-1, 1].
        """
        num_samples = int(duration * sample_rate)
        steps = (_uniform(num_samples, seed) * step).tolist()
        walk = []
        last = 0.0
        # Clamping makes each value depend on the previous one; no cumsum shortcut
        for s in steps:
            last = max(-1.0, min(1.0, last + s))
            walk.append(last)
        out = torch.tensor(walk, dtype=torch.float64)
        return Wave((out * amplitude).numpy(), sample_rate)
