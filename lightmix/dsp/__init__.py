"""
Filters, composer and signal generators built on Wave.
"""
from lightmix.dsp.composer import Composer, WaveInfo
from lightmix.dsp.filters import Filter, bind, chain
from lightmix.dsp.oscillators import Oscillator
from lightmix.dsp.noise import Noise

__all__ = ["Composer", "WaveInfo", "Filter", "bind", "chain", "Oscillator", "Noise"]
