import io
import logging
from typing import Any, Dict, Union

import numpy as np
import soundfile as sf

from lightmix.core.errors import ShapeMismatch

logger = logging.getLogger(__name__)

# bits -> libsndfile subtype, per format code
PCM_SUBTYPES = {8: "PCM_U8", 16: "PCM_16", 24: "PCM_24", 32: "PCM_32"}
FLOAT_SUBTYPES = {32: "FLOAT", 64: "DOUBLE"}
SUBTYPE_BITS = {
    "PCM_U8": 8,
    "PCM_S8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
    "FLOAT": 32,
    "DOUBLE": 64,
}


def _subtype_for(bits: int, format_code: str) -> str:
    if format_code not in ("pcm", "ieee_float"):
        raise ValueError(f"Unknown format code: {format_code}")
    table = FLOAT_SUBTYPES if format_code == "ieee_float" else PCM_SUBTYPES
    try:
        return table[bits]
    except KeyError:
        raise ValueError(f"Unsupported bit depth {bits} for {format_code}") from None


class WavIO:
    @staticmethod
    def decode(source: Union[bytes, str, Any], dtype=np.float64) -> Dict[str, Any]:
        """
        Decode a WAV payload (bytes, path or binary file object).
        Returns {samples (interleaved, nominal [-1, 1]), sample_rate, channels, bits}.
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        with sf.SoundFile(source) as f:
            data = f.read(dtype=np.dtype(dtype).name, always_2d=True)
            sample_rate = f.samplerate
            channels = f.channels
            bits = SUBTYPE_BITS.get(f.subtype, 0)
        logger.debug("Decoded WAV: %d frames, %d Hz, %d ch, %d bits", data.shape[0], sample_rate, channels, bits)
        return {
            "samples": data.reshape(-1),
            "sample_rate": sample_rate,
            "channels": channels,
            "bits": bits,
        }

    @staticmethod
    def _frames(samples: np.ndarray, channels: int, format_code: str) -> np.ndarray:
        """Reshape interleaved samples to (frames, channels)."""
        data = np.asarray(samples)
        if data.shape[0] % channels != 0:
            raise ShapeMismatch(
                f"cannot encode {data.shape[0]} samples as {channels} interleaved channels"
            )
        # Clamp to avoid wrap-around clipping on integer formats
        if format_code == "pcm" and data.size and float(np.max(np.abs(data))) > 1.0:
            logger.warning("Samples exceed [-1, 1]; clamping for PCM encode")
            data = np.clip(data, -1.0, 1.0)
        return data.reshape(-1, channels)

    @staticmethod
    def encode(
        samples: np.ndarray,
        sample_rate: int,
        channels: int,
        bits: int = 16,
        format_code: str = "pcm",
    ) -> bytes:
        """Returns a WAV file as bytes."""
        subtype = _subtype_for(bits, format_code)
        frames = WavIO._frames(samples, channels, format_code)
        buffer = io.BytesIO()
        sf.write(buffer, frames, sample_rate, subtype=subtype, format="WAV")
        return buffer.getvalue()

    @staticmethod
    def save(
        path: str,
        samples: np.ndarray,
        sample_rate: int,
        channels: int,
        bits: int = 16,
        format_code: str = "pcm",
    ) -> None:
        """Writes a WAV file to path."""
        subtype = _subtype_for(bits, format_code)
        frames = WavIO._frames(samples, channels, format_code)
        sf.write(path, frames, sample_rate, subtype=subtype, format="WAV")
