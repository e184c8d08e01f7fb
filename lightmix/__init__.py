"""
lightmix: PCM wave buffers with filters, mixing and a timeline composer.
"""
from lightmix.core.types import Wave, default_mixer
from lightmix.core.errors import (
    LightmixError,
    ShapeMismatch,
    FormatMismatch,
    InvalidPadding,
    FilterFailed,
    AllocationFailure,
    ComposerFinalized,
)
from lightmix.dsp.composer import Composer, WaveInfo
from lightmix.dsp.filters import Filter, bind, chain
from lightmix.synth import Synth

__all__ = [
    "Wave",
    "default_mixer",
    "Composer",
    "WaveInfo",
    "Filter",
    "bind",
    "chain",
    "Synth",
    "LightmixError",
    "ShapeMismatch",
    "FormatMismatch",
    "InvalidPadding",
    "FilterFailed",
    "AllocationFailure",
    "ComposerFinalized",
]
