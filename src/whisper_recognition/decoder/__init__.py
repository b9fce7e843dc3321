"""Greedy Whisper decoder: token rules, language prefix, decode loop."""

from whisper_recognition.decoder.greedy import (
    DecodeResult,
    DecoderState,
    DecodingMask,
    GreedyDecoder,
)
from whisper_recognition.decoder.languages import LANGUAGES, detect_language, sot_sequence
from whisper_recognition.decoder.tokens import argmax, suppress_tokens

__all__ = [
    "DecodeResult",
    "DecoderState",
    "DecodingMask",
    "GreedyDecoder",
    "LANGUAGES",
    "argmax",
    "detect_language",
    "sot_sequence",
    "suppress_tokens",
]
