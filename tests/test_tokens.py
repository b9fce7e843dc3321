"""Unit tests for token suppression and greedy selection."""

from __future__ import annotations

import unittest

import numpy as np

from whisper_recognition.decoder.tokens import (
    BLANK,
    EOT,
    NO_SPEECH,
    NO_TIMESTAMPS,
    SOT,
    TRANSLATE,
    VOCAB_SIZE,
    argmax,
    suppress_tokens,
)


class TestSuppressTokens(unittest.TestCase):
    """Tests for suppress_tokens."""

    def setUp(self) -> None:
        rng = np.random.default_rng(0)
        self.logits = rng.standard_normal(VOCAB_SIZE).astype(np.float32)

    def test_initial_step_suppresses_six(self) -> None:
        out = suppress_tokens(self.logits.copy(), is_initial=True)
        masked = set(np.flatnonzero(np.isneginf(out)).tolist())
        self.assertEqual(masked, {EOT, BLANK, NO_TIMESTAMPS, SOT, NO_SPEECH, TRANSLATE})

    def test_later_step_suppresses_four(self) -> None:
        out = suppress_tokens(self.logits.copy(), is_initial=False)
        masked = set(np.flatnonzero(np.isneginf(out)).tolist())
        self.assertEqual(masked, {NO_TIMESTAMPS, SOT, NO_SPEECH, TRANSLATE})
        self.assertTrue(np.isfinite(out[EOT]))

    def test_in_place(self) -> None:
        logits = self.logits.copy()
        returned = suppress_tokens(logits, is_initial=False)
        self.assertIs(returned, logits)
        self.assertTrue(np.isneginf(logits[SOT]))

    def test_idempotent(self) -> None:
        for is_initial in (True, False):
            once = suppress_tokens(self.logits.copy(), is_initial)
            twice = suppress_tokens(suppress_tokens(self.logits.copy(), is_initial), is_initial)
            np.testing.assert_array_equal(once, twice)

    def test_other_entries_untouched(self) -> None:
        out = suppress_tokens(self.logits.copy(), is_initial=True)
        keep = np.ones(VOCAB_SIZE, dtype=bool)
        keep[[EOT, BLANK, NO_TIMESTAMPS, SOT, NO_SPEECH, TRANSLATE]] = False
        np.testing.assert_array_equal(out[keep], self.logits[keep])


class TestArgmax(unittest.TestCase):
    """Tests for deterministic argmax."""

    def test_ties_pick_lowest_index(self) -> None:
        logits = np.zeros(10, dtype=np.float32)
        logits[[3, 7, 8]] = 5.0
        self.assertEqual(argmax(logits), 3)

    def test_all_equal_picks_zero(self) -> None:
        self.assertEqual(argmax(np.ones(VOCAB_SIZE, dtype=np.float32)), 0)

    def test_ignores_suppressed(self) -> None:
        logits = np.zeros(VOCAB_SIZE, dtype=np.float32)
        logits[EOT] = 100.0
        logits[42] = 1.0
        suppress_tokens(logits, is_initial=True)
        self.assertEqual(argmax(logits), 42)

    def test_returns_python_int(self) -> None:
        self.assertIsInstance(argmax(np.array([0.0, 1.0])), int)


if __name__ == "__main__":
    unittest.main()
