"""Greedy autoregressive decoding over the three model stages.

State machine:

    INIT        encoder runs once; cross-attention K/V stay in its outputs
    FIRST_STEP  decoder_main consumes the SOT prefix, yields the first token
                and the initial self-attention cache
    LOOP        decoder_loop runs once per token, feeding its updated
                self-attention cache back into its own inputs
    TERMINATED  EOT selected or context window exhausted

Caches never leave the device side: every cache move is a tensor-to-tensor
copy between runner-owned buffers. Only logits are read back to host.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from whisper_recognition.decoder.tokens import (
    EOT,
    N_TEXT_CTX,
    VOCAB_SIZE,
    argmax,
    suppress_tokens,
)
from whisper_recognition.errors import ConfigError
from whisper_recognition.runtime.stages import DecoderLoopStage, DecoderMainStage, EncoderStage
from whisper_recognition.runtime.tensor import Tensor, copy_tensor

logger = logging.getLogger(__name__)


class DecoderState(enum.Enum):
    INIT = "init"
    FIRST_STEP = "first_step"
    LOOP = "loop"
    TERMINATED = "terminated"


class DecodingMask:
    """Additive causal attention bias over the context window.

    At decode offset k the last k + 1 entries are 0 and the rest are -inf.
    """

    def __init__(self, n_ctx: int = N_TEXT_CTX):
        self.n_ctx = n_ctx
        self.values = np.full(n_ctx, -np.inf, dtype=np.float32)
        self.offset = 0

    def reset(self, offset: int) -> None:
        self.offset = offset
        self.values[:] = -np.inf
        self.values[max(self.n_ctx - offset - 1, 0):] = 0.0

    def advance(self) -> None:
        """Move to the next offset, unmasking one more position."""
        self.offset += 1
        position = self.n_ctx - self.offset - 1
        if position >= 0:
            self.values[position] = 0.0

    @property
    def unmasked(self) -> int:
        return int(np.count_nonzero(self.values == 0.0))


@dataclass
class DecodeResult:
    """Output of one greedy decode."""

    tokens: List[int] = field(default_factory=list)
    reached_eot: bool = False
    first_token_ms: float = 0.0
    total_ms: float = 0.0

    @property
    def tokens_per_second(self) -> float:
        if self.total_ms <= 0:
            return 0.0
        # The first token comes from decoder_main, the rest from decoder_loop
        return (len(self.tokens) + 1) * 1000.0 / self.total_ms


class GreedyDecoder:
    """Drives encoder, decoder_main and decoder_loop to produce token ids.

    Interface:
      decoder = GreedyDecoder(encoder, decoder_main, decoder_loop, positional_embedding)
      result = decoder.decode(mel, sot_sequence(detect_language("en")))
      result.tokens  # excludes the prefix and EOT
    """

    def __init__(
        self,
        encoder: EncoderStage,
        decoder_main: DecoderMainStage,
        decoder_loop: DecoderLoopStage,
        positional_embedding: np.ndarray,
        n_ctx: int = N_TEXT_CTX,
        vocab_size: int = VOCAB_SIZE,
        dump_dir: Optional[Path] = None,
    ):
        """
        Args:
            encoder: Encoder stage (mel -> cross K/V).
            decoder_main: First decoder step over the SOT prefix.
            decoder_loop: Single-token decoder step with self-attention cache.
            positional_embedding: (n_ctx, n_text_state) float32 table.
            n_ctx: Context window in tokens (prefix included).
            vocab_size: Logits per position.
            dump_dir: If set, cross K/V and first-step logits are written
                there as raw float32 for debugging.

        Raises:
            ConfigError: If the positional embedding does not fit the
                context window or the decoder_loop width.
        """
        if positional_embedding.shape[0] < n_ctx:
            raise ConfigError(
                f"Positional embedding has {positional_embedding.shape[0]} rows, need {n_ctx}"
            )
        width = decoder_loop.positional_embedding.size
        if positional_embedding.shape[1] != width:
            raise ConfigError(
                f"Positional embedding width {positional_embedding.shape[1]} does not match "
                f"decoder_loop input width {width}; check --model_type"
            )
        self.encoder = encoder
        self.decoder_main = decoder_main
        self.decoder_loop = decoder_loop
        self.positional_embedding = positional_embedding
        self.n_ctx = n_ctx
        self.vocab_size = vocab_size
        self.dump_dir = Path(dump_dir) if dump_dir is not None else None
        self.mask = DecodingMask(n_ctx)
        self.state = DecoderState.INIT

    @property
    def offset(self) -> int:
        return self.mask.offset

    def decode(self, mel: np.ndarray, sot: Sequence[int]) -> DecodeResult:
        """Run a full greedy decode.

        Args:
            mel: Normalized log-Mel, (n_mels, n_frames) float32.
            sot: Start-of-transcript prefix (see ``sot_sequence``).

        Returns:
            DecodeResult with the generated tokens.

        Raises:
            AcceleratorError: If any stage fails; nothing partial is returned.
        """
        self.state = DecoderState.INIT
        result = DecodeResult()
        self._encode(mel)

        self.state = DecoderState.FIRST_STEP
        start = time.perf_counter()
        token = self._first_step(sot)
        result.first_token_ms = (time.perf_counter() - start) * 1000
        logger.info("First token: %d\ttake %.2f ms", token, result.first_token_ms)

        self.state = DecoderState.LOOP
        self._bind_loop_inputs()
        max_new_tokens = self.n_ctx - len(sot)
        loop_start = time.perf_counter()
        for _ in range(max_new_tokens):
            if token == EOT:
                result.reached_eot = True
                break
            result.tokens.append(token)
            step_start = time.perf_counter()
            token = self._loop_step(token)
            logger.debug(
                "Next token: %d\ttake %.2f ms", token, (time.perf_counter() - step_start) * 1000
            )
        self.state = DecoderState.TERMINATED

        result.total_ms = result.first_token_ms + (time.perf_counter() - loop_start) * 1000
        logger.info(
            "All tokens: take %.2f ms, %.2f token/s", result.total_ms, result.tokens_per_second
        )
        return result

    def _encode(self, mel: np.ndarray) -> None:
        self.encoder.mel.write(np.ascontiguousarray(mel, dtype=np.float32))
        self.encoder.run()
        self._dump("cross_k", self.encoder.cross_k)
        self._dump("cross_v", self.encoder.cross_v)

    def _first_step(self, sot: Sequence[int]) -> int:
        main = self.decoder_main
        main.tokens.write(np.asarray(sot))
        copy_tensor(main.cross_k, self.encoder.cross_k)
        copy_tensor(main.cross_v, self.encoder.cross_v)
        main.run()

        # Only the last prefix position predicts the next token
        logits = self._last_logits(main.logits)
        self._dump("logits", logits)
        suppress_tokens(logits, is_initial=True)
        self.mask.reset(len(sot))
        return argmax(logits)

    def _bind_loop_inputs(self) -> None:
        loop = self.decoder_loop
        copy_tensor(loop.self_k_in, self.decoder_main.self_k)
        copy_tensor(loop.self_v_in, self.decoder_main.self_v)
        copy_tensor(loop.cross_k, self.encoder.cross_k)
        copy_tensor(loop.cross_v, self.encoder.cross_v)

    def _loop_step(self, token: int) -> int:
        loop = self.decoder_loop
        loop.token.write(np.array([token]))
        loop.positional_embedding.write(self.positional_embedding[self.offset])
        loop.mask.write(self.mask.values)
        loop.run()

        copy_tensor(loop.self_k_in, loop.self_k_out)
        copy_tensor(loop.self_v_in, loop.self_v_out)

        logits = self._last_logits(loop.logits)
        suppress_tokens(logits, is_initial=False)
        self.mask.advance()
        return argmax(logits)

    def _last_logits(self, tensor: Tensor) -> np.ndarray:
        flat = tensor.read().reshape(-1)
        if flat.size < self.vocab_size or flat.size % self.vocab_size:
            raise ValueError(
                f"{tensor.name!r} has {flat.size} logits, not a multiple of vocab size {self.vocab_size}"
            )
        return flat[-self.vocab_size:].astype(np.float32)

    def _dump(self, name: str, value) -> None:
        if self.dump_dir is None:
            return
        array = value.read() if isinstance(value, Tensor) else value
        self.dump_dir.mkdir(parents=True, exist_ok=True)
        path = self.dump_dir / f"{name}.bin"
        np.asarray(array, dtype=np.float32).tofile(path)
        logger.debug("Dumped %s to %s", name, path)
