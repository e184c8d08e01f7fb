"""
Library defaults. Each can be overridden from the environment at import time.
"""
import os

import numpy as np

DEFAULT_SAMPLE_RATE = int(os.environ.get("LIGHTMIX_SAMPLE_RATE", "44100"))
DEFAULT_CHANNELS = 1
DEFAULT_BITS = int(os.environ.get("LIGHTMIX_BITS", "16"))


def resolve_dtype(dtype=None) -> np.dtype:
    """
    Return a floating numpy dtype. None -> LIGHTMIX_DTYPE (float64 by default).
    Raises ValueError for non-float dtypes.
    """
    if dtype is None:
        dtype = os.environ.get("LIGHTMIX_DTYPE", "float64")
    resolved = np.dtype(dtype)
    if not np.issubdtype(resolved, np.floating):
        raise ValueError(f"sample dtype must be floating point, got {resolved}")
    return resolved

