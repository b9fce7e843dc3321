"""Audio loading and feature extraction modules."""

from whisper_recognition.audio.config import AudioConfig
from whisper_recognition.audio.features import WhisperFeatureExtractor, pad_or_trim
from whisper_recognition.audio.loader import load_wav

__all__ = [
    "AudioConfig",
    "WhisperFeatureExtractor",
    "load_wav",
    "pad_or_trim",
]
