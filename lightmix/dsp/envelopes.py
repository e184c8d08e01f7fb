import torch
import numpy as np


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def db_to_lin(db: float) -> float:
    """Convert decibels to linear gain. 0 dB -> 1.0."""
    return 10.0 ** (db / 20.0)


# -----------------------------------------------------------------------------
# Per-frame envelope curves
# -----------------------------------------------------------------------------

class Envelope:
    """
    Envelopes are returned per frame (float64 tensor of length `frames`);
    callers expand them across interleaved channels.
    """

    @staticmethod
    def linear_decay(frames: int) -> torch.Tensor:
        """(frames - i) / frames: 1.0 at the first frame, approaching 0 at the last."""
        if frames <= 0:
            return torch.zeros(0, dtype=torch.float64)
        i = torch.arange(frames, dtype=torch.float64)
        return (frames - i) / frames

    @staticmethod
    def linear_attack(frames: int) -> torch.Tensor:
        """i / frames: 0.0 at the first frame."""
        if frames <= 0:
            return torch.zeros(0, dtype=torch.float64)
        return torch.arange(frames, dtype=torch.float64) / frames

    @staticmethod
    def exponential_decay(frames: int, sample_rate: int, decay_time: float) -> torch.Tensor:
        """
        y(t) = e^(-t / decay_time), t = i / sample_rate.
        """
        t = torch.arange(frames, dtype=torch.float64) / sample_rate
        return torch.exp(-t / (decay_time + 1e-6))


def expand_to_channels(envelope: torch.Tensor, channels: int) -> np.ndarray:
    """Repeat each frame value `channels` times to match interleaved samples."""
    return torch.repeat_interleave(envelope, channels).numpy()
