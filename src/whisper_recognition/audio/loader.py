"""WAV loading to mono float32 at the model sample rate."""

from __future__ import annotations

import logging
from math import gcd
from pathlib import Path
from typing import Union

import numpy as np

from whisper_recognition.errors import ResourceError

logger = logging.getLogger(__name__)


def _to_float(audio: np.ndarray) -> np.ndarray:
    if audio.dtype == np.int16:
        return audio.astype(np.float32) / 32768.0
    if audio.dtype == np.int32:
        return audio.astype(np.float32) / 2147483648.0
    if audio.dtype == np.uint8:
        return (audio.astype(np.float32) - 128.0) / 128.0
    return audio.astype(np.float32)


def load_wav(path: Union[str, Path], sample_rate: int = 16_000) -> np.ndarray:
    """Load a WAV file as mono float32 in [-1, 1].

    Multi-channel files keep the first channel. Other sample rates are
    resampled to ``sample_rate``.

    Raises:
        ResourceError: If the file is missing or cannot be parsed.
    """
    import scipy.io.wavfile as wavfile
    from scipy.signal import resample_poly

    path = Path(path)
    if not path.is_file():
        raise ResourceError(f"Can NOT open {path}")
    try:
        sr, audio = wavfile.read(str(path))
    except (OSError, ValueError) as exc:
        raise ResourceError(f"Load wav {path} failed: {exc}") from exc

    audio = _to_float(audio)
    if audio.ndim > 1:
        audio = audio[:, 0]
    if sr != sample_rate:
        logger.info("Resampling %s from %d Hz to %d Hz", path.name, sr, sample_rate)
        g = gcd(sr, sample_rate)
        audio = resample_poly(audio, sample_rate // g, sr // g).astype(np.float32)
    return audio
