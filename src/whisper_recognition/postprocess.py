"""Post-processing for decoder output: token ids -> text."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Callable, Iterable, List, Optional, Sequence

from whisper_recognition.errors import ResourceError

logger = logging.getLogger(__name__)

ScriptConverter = Callable[[str], str]


def traditional_to_simplified() -> ScriptConverter:
    """OpenCC traditional -> simplified Chinese converter."""
    from opencc import OpenCC

    return OpenCC("t2s").convert


class Detokenizer:
    """Turn generated token ids into text.

    Each token is a base64-encoded byte fragment. Fragments are joined at
    the byte level, so characters split across tokens decode correctly.
    For any language other than English, the text is converted from
    traditional to simplified script.

    Interface:
      detok = Detokenizer(load_token_table("tokens.txt"))
      text = detok.decode(tokens, language="zh")
    """

    def __init__(
        self,
        token_table: Sequence[str],
        converter_factory: Callable[[], ScriptConverter] = traditional_to_simplified,
    ):
        self.token_table = token_table
        self._converter_factory = converter_factory
        self._converter: Optional[ScriptConverter] = None

    def fragment(self, token: int) -> bytes:
        """Raw bytes of one token."""
        try:
            encoded = self.token_table[token]
        except IndexError:
            raise ResourceError(
                f"Token id {token} is outside the token table ({len(self.token_table)} entries)"
            ) from None
        try:
            return base64.b64decode(encoded)
        except (binascii.Error, ValueError) as exc:
            raise ResourceError(f"Token {token} has invalid base64 {encoded!r}") from exc

    def join(self, tokens: Iterable[int]) -> str:
        """Concatenate fragments in order and decode as UTF-8."""
        raw = b"".join(self.fragment(t) for t in tokens)
        return raw.decode("utf-8", errors="replace")

    def decode(self, tokens: Iterable[int], language: str) -> str:
        text = self.join(tokens)
        if language == "en":
            return text
        if self._converter is None:
            self._converter = self._converter_factory()
        return self._converter(text)


def tokens_to_fragments(detokenizer: Detokenizer, tokens: Iterable[int]) -> List[str]:
    """Per-token text, for debugging output."""
    return [detokenizer.fragment(t).decode("utf-8", errors="replace") for t in tokens]
