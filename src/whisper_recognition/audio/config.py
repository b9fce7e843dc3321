"""Centralized audio and feature extraction configuration.

Encoding standards (fixed by the Whisper encoder):
- Audio: mono 16 kHz
- Features: 80-bin log-Mel, Hann window 400 / hop 160, power 2.0
- Input window: 30 s, i.e. exactly 3000 frames
- Normalization: log10, clamp to (max - 8), then (x + 4) / 4
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AudioConfig:
    """Audio input and log-Mel front-end configuration."""

    # Input
    sample_rate: int = 16_000

    # STFT
    n_fft: int = 400
    hop_length: int = 160
    window: str = "hann"
    pad_mode: str = "reflect"
    power: float = 2.0

    # Mel filterbanks
    n_mels: int = 80
    fmin: float = 0.0

    # Encoder window
    chunk_sec: int = 30

    # Log compression
    log_floor: float = 1e-10
    dynamic_range: float = 8.0

    @property
    def fmax(self) -> float:
        """Upper filterbank edge (Nyquist)."""
        return self.sample_rate / 2.0

    @property
    def n_samples(self) -> int:
        """Samples in one encoder window."""
        return self.chunk_sec * self.sample_rate

    @property
    def n_frames(self) -> int:
        """Mel frames in one encoder window (3000 for 30 s)."""
        return self.n_samples // self.hop_length
