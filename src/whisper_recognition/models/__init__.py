"""Model assets: positional embedding, token table, size table."""

from whisper_recognition.models.assets import (
    TEXT_STATE,
    load_positional_embedding,
    load_token_table,
    text_state_for,
)

__all__ = [
    "TEXT_STATE",
    "load_positional_embedding",
    "load_token_table",
    "text_state_for",
]
