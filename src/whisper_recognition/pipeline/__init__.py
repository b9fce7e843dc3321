"""End-to-end offline transcription pipeline."""

from whisper_recognition.pipeline.transcriber import (
    ModelPaths,
    TranscriptionResult,
    WhisperTranscriber,
)

__all__ = ["ModelPaths", "TranscriptionResult", "WhisperTranscriber"]
