"""Offline Whisper speech recognition - features, greedy decoder, stage runtime, detokenizer."""

from whisper_recognition.pipeline import ModelPaths, WhisperTranscriber

__all__ = ["ModelPaths", "WhisperTranscriber"]
