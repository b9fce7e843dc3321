"""Feature extraction: 80-bin log-Mel, normalized and fixed to 3000 frames."""

from __future__ import annotations

from typing import Optional

import numpy as np

from whisper_recognition.audio.config import AudioConfig


def pad_or_trim(mel: np.ndarray, n_frames: int) -> np.ndarray:
    """Zero-pad or truncate the frame axis (last axis) to exactly n_frames."""
    length = mel.shape[-1]
    if length > n_frames:
        return mel[..., :n_frames]
    if length < n_frames:
        pad = [(0, 0)] * (mel.ndim - 1) + [(0, n_frames - length)]
        return np.pad(mel, pad)
    return mel


class WhisperFeatureExtractor:
    """Waveform -> normalized log-Mel (n_mels, n_frames) ready for the encoder.

    Inputs longer than one window (30 s) are truncated.
    """

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or AudioConfig()

    def power_mel(self, audio: np.ndarray) -> np.ndarray:
        """Mel power spectrogram, (n_mels, frames)."""
        import librosa

        c = self.config
        audio = np.asarray(audio, dtype=np.float32).reshape(-1)
        if audio.size == 0:
            return np.zeros((c.n_mels, 0), dtype=np.float32)
        return librosa.feature.melspectrogram(
            y=audio,
            sr=c.sample_rate,
            n_fft=c.n_fft,
            hop_length=c.hop_length,
            window=c.window,
            center=True,
            pad_mode=c.pad_mode,
            power=c.power,
            n_mels=c.n_mels,
            fmin=c.fmin,
            fmax=c.fmax,
        )

    def normalize(self, mel: np.ndarray) -> np.ndarray:
        """log10 with floor, clamp to (max - dynamic_range), then (x + 4) / 4."""
        log_spec = np.log10(np.maximum(mel, self.config.log_floor))
        log_spec = np.maximum(log_spec, log_spec.max() - self.config.dynamic_range)
        return (log_spec + 4.0) / 4.0

    def extract(self, audio: np.ndarray) -> np.ndarray:
        """Extract the encoder input from raw audio.

        Short input is zero-padded on the power spectrogram, before the log,
        so padded frames sit at the same floor as silence. Long input is
        normalized over all of its frames and only then truncated.

        Returns:
            C-contiguous float32 array, shape (n_mels, n_frames).
        """
        n_frames = self.config.n_frames
        power = self.power_mel(audio)
        if power.shape[-1] < n_frames:
            power = pad_or_trim(power, n_frames)
        mel = pad_or_trim(self.normalize(power), n_frames)
        return np.ascontiguousarray(mel, dtype=np.float32)
