"""
Conversion between interleaved sample buffers and per-channel (planar) arrays.
"""
from typing import Sequence

import numpy as np


def from_interleaved(samples: np.ndarray, channels: int) -> np.ndarray:
    """
    Split interleaved samples into a (channels, frames) array.
    [l0, r0, l1, r1] with channels=2 -> [[l0, l1], [r0, r1]].
    Trailing samples that do not fill a frame are dropped.
    """
    if channels <= 0:
        raise ValueError(f"channels must be positive, got {channels}")
    samples = np.asarray(samples)
    frames = samples.shape[0] // channels
    return samples[: frames * channels].reshape(frames, channels).T.copy()


def to_interleaved(planar: Sequence[np.ndarray]) -> np.ndarray:
    """Inverse of from_interleaved. All channels must have the same length."""
    arrays = [np.asarray(ch) for ch in planar]
    if not arrays:
        return np.zeros(0)
    lengths = {a.shape[0] for a in arrays}
    if len(lengths) != 1:
        raise ValueError(f"channel lengths differ: {sorted(lengths)}")
    return np.stack(arrays, axis=1).reshape(-1)
