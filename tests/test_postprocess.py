"""Unit tests for detokenization."""

from __future__ import annotations

import base64
import unittest

from whisper_recognition.errors import ResourceError
from whisper_recognition.postprocess import Detokenizer, tokens_to_fragments


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


# "你" is split across tokens 2 and 3 at the byte level
TABLE = [
    _b64(b"Hello"),
    _b64(b" world"),
    _b64("你".encode("utf-8")[:2]),
    _b64("你".encode("utf-8")[2:]),
    _b64("們".encode("utf-8")),
]


class TestDetokenizer(unittest.TestCase):
    """Tests for Detokenizer."""

    def setUp(self) -> None:
        self.calls = 0

        def factory():
            self.calls += 1
            return lambda s: s.replace("們", "们")

        self.detok = Detokenizer(TABLE, converter_factory=factory)

    def test_english_joined_without_conversion(self) -> None:
        self.assertEqual(self.detok.decode([0, 1], language="en"), "Hello world")
        self.assertEqual(self.calls, 0)

    def test_bytes_joined_before_utf8(self) -> None:
        self.assertEqual(self.detok.join([2, 3]), "你")

    def test_non_english_converted(self) -> None:
        self.assertEqual(self.detok.decode([2, 3, 4], language="zh"), "你们")
        self.assertEqual(self.detok.decode([4], language="ja"), "们")
        self.assertEqual(self.calls, 1)

    def test_empty(self) -> None:
        self.assertEqual(self.detok.decode([], language="en"), "")

    def test_unknown_token(self) -> None:
        with self.assertRaises(ResourceError):
            self.detok.join([99])

    def test_fragments(self) -> None:
        self.assertEqual(tokens_to_fragments(self.detok, [0, 1]), ["Hello", " world"])


if __name__ == "__main__":
    unittest.main()
