"""Special vocabulary ids, token suppression and greedy selection."""

from __future__ import annotations

import numpy as np

SOT = 50258
EOT = 50257
BLANK = 220
NO_TIMESTAMPS = 50363
NO_SPEECH = 50362
TRANSLATE = 50358
TRANSCRIBE = 50359

VOCAB_SIZE = 51865
N_TEXT_CTX = 448

# Suppressed on every step
ALWAYS_SUPPRESSED = (NO_TIMESTAMPS, SOT, NO_SPEECH, TRANSLATE)
# Additionally suppressed on the first step so the transcript cannot start empty
INITIAL_SUPPRESSED = (EOT, BLANK)


def suppress_tokens(logits: np.ndarray, is_initial: bool) -> np.ndarray:
    """Set disallowed vocabulary entries to -inf, in place.

    Args:
        logits: Vocabulary-size vector for the current step.
        is_initial: True for the first decode step (after the SOT prefix).

    Returns:
        The same array, for chaining.
    """
    if is_initial:
        logits[list(INITIAL_SUPPRESSED)] = -np.inf
    logits[list(ALWAYS_SUPPRESSED)] = -np.inf
    return logits


def argmax(logits: np.ndarray) -> int:
    """Index of the largest logit; ties resolve to the lowest index."""
    return int(np.argmax(logits))
