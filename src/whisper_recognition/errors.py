"""Error types raised by the transcription pipeline."""


class WhisperRecognitionError(Exception):
    """Base class for all fatal pipeline errors."""


class ResourceError(WhisperRecognitionError):
    """A required file (positional embedding, token table, wav) is missing or unreadable."""


class ConfigError(WhisperRecognitionError):
    """Unknown model size or other invalid configuration."""


class AcceleratorError(WhisperRecognitionError):
    """A model stage failed to load, prepare or run."""
