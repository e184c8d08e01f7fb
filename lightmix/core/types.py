"""
Wave: an owned, fixed-length buffer of float samples plus format metadata.
Samples are interleaved when channels > 1. Every operation returns a new Wave;
the sample array of an existing Wave is read-only and never shared.
"""
from dataclasses import dataclass
import logging
from typing import Any, Callable, Optional, Union

import numpy as np

from lightmix.core.config import DEFAULT_BITS, DEFAULT_CHANNELS, resolve_dtype
from lightmix.core.errors import (
    AllocationFailure,
    FilterFailed,
    InvalidPadding,
    ShapeMismatch,
    allocation_guard,
)
from lightmix.core.io import WavIO

logger = logging.getLogger(__name__)

Mixer = Callable[[np.ndarray, np.ndarray], np.ndarray]


def default_mixer(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    """Elementwise sum. No clamping: values outside [-1, 1] are kept."""
    return left + right


# -----------------------------------------------------------------------------
# Padding primitives (operate on raw sample arrays)
# -----------------------------------------------------------------------------

def pad_start(samples: np.ndarray, n: int) -> np.ndarray:
    """Prepend n zero samples."""
    if n < 0:
        raise InvalidPadding(f"cannot prepend {n} samples")
    samples = np.asarray(samples)
    with allocation_guard(f"{n + samples.shape[0]} samples"):
        out = np.zeros(n + samples.shape[0], dtype=samples.dtype)
    out[n:] = samples
    return out


def pad_end(samples: np.ndarray, target_length: int) -> np.ndarray:
    """Append zero samples until len == target_length. target_length < len raises InvalidPadding."""
    samples = np.asarray(samples)
    length = samples.shape[0]
    if length > target_length:
        raise InvalidPadding(f"target length {target_length} is shorter than buffer length {length}")
    with allocation_guard(f"{target_length} samples"):
        out = np.zeros(target_length, dtype=samples.dtype)
    out[:length] = samples
    return out


def fill_zero_to_end(samples: np.ndarray, start: int, end: int) -> np.ndarray:
    """
    Keep samples[:start], then zero-fill up to end.
    E.g. fill_zero_to_end([1, 2, 3, 4], 2, 5) -> [1, 2, 0, 0, 0].
    """
    samples = np.asarray(samples)
    if start < 0 or start > samples.shape[0]:
        raise InvalidPadding(f"start {start} outside buffer of length {samples.shape[0]}")
    if end < start:
        raise InvalidPadding(f"end {end} is before start {start}")
    return pad_end(samples[:start], end)


def as_samples(samples: Any) -> np.ndarray:
    """Deep-copy input into a flat float array. Float arrays keep their precision."""
    if isinstance(samples, np.ndarray) and np.issubdtype(samples.dtype, np.floating):
        dtype = samples.dtype
    else:
        dtype = resolve_dtype()
    with allocation_guard("wave samples"):
        out = np.array(samples, dtype=dtype, copy=True).reshape(-1)
    out.setflags(write=False)
    return out


# -----------------------------------------------------------------------------
# Wave
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class Wave:
    samples: np.ndarray
    sample_rate: int
    channels: int = DEFAULT_CHANNELS

    def __post_init__(self):
        if int(self.sample_rate) <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if int(self.channels) <= 0:
            raise ValueError(f"channels must be positive, got {self.channels}")
        self.sample_rate = int(self.sample_rate)
        self.channels = int(self.channels)
        self.samples = as_samples(self.samples)
        if self.samples.shape[0] % self.channels != 0:
            logger.warning(
                "Wave length %d is not a multiple of channels=%d",
                self.samples.shape[0],
                self.channels,
            )

    # -- format ---------------------------------------------------------------

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def dtype(self) -> np.dtype:
        return self.samples.dtype

    @property
    def frames(self) -> int:
        """Number of whole frames (one sample per channel)."""
        return len(self) // self.channels

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frames / self.sample_rate

    def is_compatible(self, other: "Wave") -> bool:
        return (
            self.sample_rate == other.sample_rate
            and self.channels == other.channels
            and len(self) == len(other)
        )

    def _replace_samples(self, samples: np.ndarray) -> "Wave":
        return Wave(samples, self.sample_rate, self.channels)

    def astype(self, dtype) -> "Wave":
        """Copy at another float precision."""
        with allocation_guard("wave samples"):
            converted = self.samples.astype(resolve_dtype(dtype))
        return self._replace_samples(converted)

    # -- construction helpers -------------------------------------------------

    @classmethod
    def soundless(cls, length: int, sample_rate: int, channels: int = 1, dtype=None) -> "Wave":
        """Zero-valued wave of `length` samples."""
        with allocation_guard(f"{length} samples"):
            samples = np.zeros(length, dtype=resolve_dtype(dtype))
        return cls(samples, sample_rate, channels)

    # -- operations -----------------------------------------------------------

    def mix(self, other: "Wave", mixer: Optional[Mixer] = None) -> "Wave":
        """
        Elementwise combination of two compatible waves (sum by default).
        Raises ShapeMismatch when length, sample rate or channel count differ.
        """
        if not self.is_compatible(other):
            raise ShapeMismatch(
                "cannot mix waves of different shape: "
                f"(len={len(self)}, sr={self.sample_rate}, ch={self.channels}) vs "
                f"(len={len(other)}, sr={other.sample_rate}, ch={other.channels})",
                left=(len(self), self.sample_rate, self.channels),
                right=(len(other), other.sample_rate, other.channels),
            )
        if len(self) == 0:
            return self._replace_samples(np.zeros(0, dtype=np.result_type(self.dtype, other.dtype)))

        mixer = mixer or default_mixer
        with allocation_guard("mixed samples"):
            mixed = np.asarray(mixer(self.samples, other.samples))
        if mixed.shape != self.samples.shape:
            raise ShapeMismatch(f"mixer returned shape {mixed.shape}, expected {self.samples.shape}")
        return self._replace_samples(mixed)

    def filter(self, fn: Callable[..., "Wave"], *args, **kwargs) -> "Wave":
        """
        Return fn(self, *args, **kwargs). The input wave should not be used afterwards.
        Errors raised inside fn surface as FilterFailed (MemoryError as AllocationFailure).
        """
        name = getattr(fn, "__name__", repr(fn))
        try:
            result = fn(self, *args, **kwargs)
        except AllocationFailure:
            raise
        except MemoryError as err:
            raise AllocationFailure(f"out of memory in filter {name!r}") from err
        except Exception as err:
            raise FilterFailed(name, err) from err
        if not isinstance(result, Wave):
            raise FilterFailed(name, TypeError(f"filter returned {type(result).__name__}, expected Wave"))
        return result

    def pad_start(self, n: int) -> "Wave":
        return self._replace_samples(pad_start(self.samples, n))

    def pad_end(self, target_length: int) -> "Wave":
        return self._replace_samples(pad_end(self.samples, target_length))

    def fill_zero_to_end(self, start: int, end: int) -> "Wave":
        return self._replace_samples(fill_zero_to_end(self.samples, start, end))

    # -- codec boundary -------------------------------------------------------

    @classmethod
    def read(cls, source: Union[bytes, str, Any], dtype=None) -> "Wave":
        """Decode WAV from bytes, a path or a binary file object."""
        decoded = WavIO.decode(source, dtype=resolve_dtype(dtype))
        return cls(decoded["samples"], decoded["sample_rate"], decoded["channels"])

    def write(self, bits: int = DEFAULT_BITS, format_code: str = "pcm") -> bytes:
        """Encode as WAV bytes at the given bit depth."""
        return WavIO.encode(self.samples, self.sample_rate, self.channels, bits, format_code)

    def save(self, path: str, bits: int = DEFAULT_BITS, format_code: str = "pcm") -> None:
        WavIO.save(path, self.samples, self.sample_rate, self.channels, bits, format_code)
