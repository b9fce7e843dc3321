"""Model assets shipped next to the compiled stages.

- Positional embedding: raw float32, row-major (n_text_ctx, n_text_state)
- Token table: one entry per line, base64 fragment before the first space;
  the line number is the token id
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import List, Union

import numpy as np

from whisper_recognition.decoder.tokens import N_TEXT_CTX
from whisper_recognition.errors import ConfigError, ResourceError

# Decoder hidden width per model size
TEXT_STATE = MappingProxyType({
    "tiny": 384,
    "small": 768,
})


def text_state_for(model_type: str) -> int:
    """Hidden width for a model size name.

    Raises:
        ConfigError: If the size is unknown.
    """
    try:
        return TEXT_STATE[model_type]
    except KeyError:
        raise ConfigError(f"Can NOT find n_text_state for model_type: {model_type}") from None


def load_positional_embedding(
    path: Union[str, Path],
    n_text_state: int,
    n_text_ctx: int = N_TEXT_CTX,
) -> np.ndarray:
    """Read the positional embedding table.

    Returns:
        float32 array, shape (n_text_ctx, n_text_state).

    Raises:
        ResourceError: If the file is missing or too short.
    """
    path = Path(path)
    if not path.is_file():
        raise ResourceError(f"Can NOT open {path}")
    count = n_text_ctx * n_text_state
    try:
        data = np.fromfile(path, dtype=np.float32, count=count)
    except OSError as exc:
        raise ResourceError(f"Can NOT read {path}: {exc}") from exc
    if data.size < count:
        raise ResourceError(
            f"{path} holds {data.size} floats, expected {count} "
            f"({n_text_ctx} x {n_text_state})"
        )
    return data.reshape(n_text_ctx, n_text_state)


def load_token_table(path: Union[str, Path]) -> List[str]:
    """Read the token table; entry i is the base64 fragment of token id i.

    Raises:
        ResourceError: If the file is missing or not UTF-8.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return [line.rstrip("\r\n").split(" ", 1)[0] for line in f]
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceError(f"Can NOT open {path}: {exc}") from exc
