"""The three model stages and their tensor layouts.

All stages share the runner lifecycle; they differ only in which tensor
index carries which value.
"""

from __future__ import annotations

from whisper_recognition.errors import AcceleratorError
from whisper_recognition.runtime.runner import ModelRunner
from whisper_recognition.runtime.tensor import Tensor


class Stage:
    """A model runner plus named tensor indices."""

    name = "stage"

    def __init__(self, runner: ModelRunner):
        self.runner = runner

    def run(self) -> None:
        """Execute synchronously.

        Raises:
            AcceleratorError: If the runner reports failure.
        """
        if not self.runner.run(False):
            raise AcceleratorError(f"{self.name} run failed")


class EncoderStage(Stage):
    """mel -> cross-attention K/V."""

    name = "encoder"

    @property
    def mel(self) -> Tensor:
        return self.runner.input(0)

    @property
    def cross_k(self) -> Tensor:
        return self.runner.output(0)

    @property
    def cross_v(self) -> Tensor:
        return self.runner.output(1)


class DecoderMainStage(Stage):
    """SOT prefix + cross K/V -> prefix logits + initial self-attention cache."""

    name = "decoder_main"

    @property
    def tokens(self) -> Tensor:
        return self.runner.input(0)

    @property
    def cross_k(self) -> Tensor:
        return self.runner.input(1)

    @property
    def cross_v(self) -> Tensor:
        return self.runner.input(2)

    @property
    def logits(self) -> Tensor:
        return self.runner.output(0)

    @property
    def self_k(self) -> Tensor:
        return self.runner.output(1)

    @property
    def self_v(self) -> Tensor:
        return self.runner.output(2)


class DecoderLoopStage(Stage):
    """One token + caches + positional row + mask -> logits + updated cache."""

    name = "decoder_loop"

    @property
    def token(self) -> Tensor:
        return self.runner.input(0)

    @property
    def self_k_in(self) -> Tensor:
        return self.runner.input(1)

    @property
    def self_v_in(self) -> Tensor:
        return self.runner.input(2)

    @property
    def cross_k(self) -> Tensor:
        return self.runner.input(3)

    @property
    def cross_v(self) -> Tensor:
        return self.runner.input(4)

    @property
    def positional_embedding(self) -> Tensor:
        return self.runner.input(5)

    @property
    def mask(self) -> Tensor:
        return self.runner.input(6)

    @property
    def logits(self) -> Tensor:
        return self.runner.output(0)

    @property
    def self_k_out(self) -> Tensor:
        return self.runner.output(1)

    @property
    def self_v_out(self) -> Tensor:
        return self.runner.output(2)
