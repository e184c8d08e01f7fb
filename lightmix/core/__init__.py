"""
Sample buffer, errors, configuration and the WAV codec boundary.
"""
from lightmix.core.types import Wave, pad_start, pad_end, fill_zero_to_end
from lightmix.core.io import WavIO

__all__ = ["Wave", "pad_start", "pad_end", "fill_zero_to_end", "WavIO"]
