"""
Composer: place waves at sample offsets on a timeline and mix them into one Wave.
Entries keep insertion order; finalize folds them in that order so float results
are reproducible for identical input.
"""
from dataclasses import dataclass, field, replace
import logging
import operator
from typing import Iterable, Optional, Tuple

import numpy as np

from lightmix.core.config import DEFAULT_CHANNELS, resolve_dtype
from lightmix.core.errors import ComposerFinalized, FormatMismatch, InvalidPadding
from lightmix.core.types import Mixer, Wave, pad_end, pad_start

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Timeline entry
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WaveInfo:
    """A wave and the sample index at which it starts."""
    wave: Wave
    start_point: int = 0

    def __post_init__(self):
        try:
            start_point = operator.index(self.start_point)
        except TypeError as err:
            raise InvalidPadding(f"start_point must be an integer, got {self.start_point!r}") from err
        if start_point < 0:
            raise InvalidPadding(f"start_point must be non-negative, got {self.start_point}")
        object.__setattr__(self, "start_point", start_point)

    @property
    def end_point(self) -> int:
        return self.start_point + len(self.wave)

    def to_wave(self) -> Wave:
        """The wave preceded by start_point zeros."""
        return self.wave.pad_start(self.start_point)


# -----------------------------------------------------------------------------
# Composer
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Composer:
    """
    Ordered, append-only collection of WaveInfo entries.
    append/append_slice return a new Composer; the receiver is left unchanged.
    finalize() is terminal for the composer it is called on.
    """
    sample_rate: int
    channels: int = DEFAULT_CHANNELS
    info: Tuple[WaveInfo, ...] = ()
    dtype: Optional[np.dtype] = None
    _finalized: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.sample_rate <= 0 or self.channels <= 0:
            raise ValueError(
                f"sample_rate and channels must be positive, got {self.sample_rate}, {self.channels}"
            )
        object.__setattr__(self, "dtype", resolve_dtype(self.dtype))
        object.__setattr__(self, "info", tuple(self.info))
        for entry in self.info:
            self._check_format(entry)

    @classmethod
    def init_with(
        cls,
        entries: Iterable[WaveInfo],
        sample_rate: int,
        channels: int = 1,
        dtype=None,
    ) -> "Composer":
        return cls(sample_rate, channels, tuple(entries), dtype)

    def __len__(self) -> int:
        return len(self.info)

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def end_point(self) -> int:
        """Length of the finalized timeline. 0 for an empty composer."""
        return max((entry.end_point for entry in self.info), default=0)

    def _check_format(self, entry: WaveInfo) -> None:
        wave = entry.wave
        if wave.sample_rate != self.sample_rate or wave.channels != self.channels:
            raise FormatMismatch(
                f"entry format (sr={wave.sample_rate}, ch={wave.channels}) does not match "
                f"composer (sr={self.sample_rate}, ch={self.channels})",
                left=(self.sample_rate, self.channels),
                right=(wave.sample_rate, wave.channels),
            )

    def _check_open(self) -> None:
        if self._finalized:
            raise ComposerFinalized("composer was already finalized; create a new Composer")

    def append(self, entry: WaveInfo) -> "Composer":
        return self.append_slice([entry])

    def append_slice(self, entries: Iterable[WaveInfo]) -> "Composer":
        self._check_open()
        entries = tuple(entries)
        for entry in entries:
            self._check_format(entry)
        return replace(self, info=self.info + entries)

    def finalize(self, mixer: Optional[Mixer] = None) -> Wave:
        """
        Mix all entries into one Wave of length end_point.

        Each entry is zero-padded to [0, end_point) with its samples at
        [start_point, start_point + len), then folded into a zero accumulator
        with Wave.mix in insertion order.
        """
        self._check_open()
        end_point = self.end_point
        logger.debug("Finalizing %d entries into %d samples", len(self.info), end_point)

        def padded_entry(entry: WaveInfo) -> Wave:
            samples = pad_end(pad_start(entry.wave.samples, entry.start_point), end_point)
            # Fold runs at the composer's precision, whatever the entry's
            return Wave(samples.astype(self.dtype, copy=False), self.sample_rate, self.channels)

        # Lazy: one padded buffer alive at a time
        padded = (padded_entry(entry) for entry in self.info)

        result = Wave.soundless(end_point, self.sample_rate, self.channels, dtype=self.dtype)
        for wave in padded:
            result = result.mix(wave, mixer)

        object.__setattr__(self, "_finalized", True)
        return result
