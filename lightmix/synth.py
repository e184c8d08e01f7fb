"""
Synth: a note held as four sample segments (attack, decay, sustain, release).
Segments are processed independently and joined into one Wave by finalize().
"""
from dataclasses import dataclass, replace
from typing import Callable

import numpy as np

from lightmix.core.errors import AllocationFailure, FilterFailed, allocation_guard
from lightmix.core.types import Wave, as_samples

SEGMENTS = ("attack", "decay", "sustain", "release")


@dataclass(eq=False)
class Synth:
    attack: np.ndarray
    decay: np.ndarray
    sustain: np.ndarray
    release: np.ndarray
    sample_rate: int
    channels: int = 1

    def __post_init__(self):
        if self.sample_rate <= 0 or self.channels <= 0:
            raise ValueError(
                f"sample_rate and channels must be positive, got {self.sample_rate}, {self.channels}"
            )
        for name in SEGMENTS:
            setattr(self, name, as_samples(getattr(self, name)))

    def __len__(self) -> int:
        return sum(getattr(self, name).shape[0] for name in SEGMENTS)

    def filter(self, fn: Callable[["Synth"], "Synth"]) -> "Synth":
        """Return fn(self); errors surface as FilterFailed like Wave.filter."""
        name = getattr(fn, "__name__", repr(fn))
        try:
            result = fn(self)
        except MemoryError as err:
            raise AllocationFailure(f"out of memory in filter {name!r}") from err
        except Exception as err:
            raise FilterFailed(name, err) from err
        if not isinstance(result, Synth):
            raise FilterFailed(name, TypeError(f"filter returned {type(result).__name__}, expected Synth"))
        return result

    def map_segment(self, segment: str, fn: Callable[[Wave], Wave]) -> "Synth":
        """Apply a Wave filter to one segment, e.g. map_segment("release", Filter.linear_decay())."""
        if segment not in SEGMENTS:
            raise ValueError(f"Unknown segment: {segment}")
        wave = Wave(getattr(self, segment), self.sample_rate, self.channels).filter(fn)
        return replace(self, **{segment: wave.samples})

    def finalize(self) -> Wave:
        """attack + decay + sustain + release as one Wave."""
        with allocation_guard("synth samples"):
            samples = np.concatenate([getattr(self, name) for name in SEGMENTS])
        return Wave(samples, self.sample_rate, self.channels)
