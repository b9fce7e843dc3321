"""End-to-end offline transcription: wav -> mel -> encoder -> greedy decode -> text.

Glue that wires the three compiled stages, the model assets, feature
extraction and detokenization. Runners are injectable so tests (or a
different accelerator backend) can supply their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from whisper_recognition.audio import AudioConfig, WhisperFeatureExtractor, load_wav
from whisper_recognition.decoder import (
    DecodeResult,
    GreedyDecoder,
    detect_language,
    sot_sequence,
)
from whisper_recognition.models import (
    load_positional_embedding,
    load_token_table,
    text_state_for,
)
from whisper_recognition.postprocess import Detokenizer, tokens_to_fragments
from whisper_recognition.runtime import (
    DecoderLoopStage,
    DecoderMainStage,
    EncoderStage,
    ModelRunner,
    OnnxModelRunner,
    load_runner,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
RunnerFactory = Callable[[], ModelRunner]


@dataclass(frozen=True)
class ModelPaths:
    """Files that make up one model size."""

    encoder: Path
    decoder_main: Path
    decoder_loop: Path
    positional_embedding: Path
    tokens: Path

    @classmethod
    def for_model_type(cls, model_dir: PathLike, model_type: str) -> "ModelPaths":
        """Conventional layout: <dir>/<type>-encoder.onnx etc."""
        d = Path(model_dir)
        return cls(
            encoder=d / f"{model_type}-encoder.onnx",
            decoder_main=d / f"{model_type}-decoder-main.onnx",
            decoder_loop=d / f"{model_type}-decoder-loop.onnx",
            positional_embedding=d / f"{model_type}-positional_embedding.bin",
            tokens=d / f"{model_type}-tokens.txt",
        )


@dataclass
class TranscriptionResult:
    text: str
    language: str
    tokens: List[int] = field(default_factory=list)
    decode: Optional[DecodeResult] = None


class WhisperTranscriber:
    """Offline Whisper transcription on compiled stages.

    Interface:
      transcriber = WhisperTranscriber.from_paths(paths, model_type="small")
      result = transcriber.transcribe_file("speech.wav", language="zh")
      print(result.text)
    """

    def __init__(
        self,
        encoder: EncoderStage,
        decoder_main: DecoderMainStage,
        decoder_loop: DecoderLoopStage,
        positional_embedding: np.ndarray,
        token_table: Sequence[str],
        audio_config: Optional[AudioConfig] = None,
        detokenizer: Optional[Detokenizer] = None,
        dump_dir: Optional[PathLike] = None,
    ):
        self.audio_config = audio_config or AudioConfig()
        self.feature_extractor = WhisperFeatureExtractor(self.audio_config)
        self.dump_dir = Path(dump_dir) if dump_dir is not None else None
        self.decoder = GreedyDecoder(
            encoder,
            decoder_main,
            decoder_loop,
            positional_embedding,
            dump_dir=self.dump_dir,
        )
        self.detokenizer = detokenizer or Detokenizer(token_table)

    @classmethod
    def from_paths(
        cls,
        paths: ModelPaths,
        model_type: str = "small",
        runner_factory: Optional[RunnerFactory] = None,
        providers: Optional[Sequence[str]] = None,
        dump_dir: Optional[PathLike] = None,
    ) -> "WhisperTranscriber":
        """Load every stage and asset.

        Raises:
            ConfigError: Unknown model_type.
            AcceleratorError: A stage failed to load or prepare.
            ResourceError: An asset file is missing or malformed.
        """
        n_text_state = text_state_for(model_type)
        if runner_factory is None:
            runner_factory = lambda: OnnxModelRunner(providers)  # noqa: E731

        logger.info("encoder: %s", paths.encoder)
        logger.info("decoder_main: %s", paths.decoder_main)
        logger.info("decoder_loop: %s", paths.decoder_loop)
        encoder = EncoderStage(load_runner(paths.encoder, runner_factory()))
        decoder_main = DecoderMainStage(load_runner(paths.decoder_main, runner_factory()))
        decoder_loop = DecoderLoopStage(load_runner(paths.decoder_loop, runner_factory()))

        logger.info("Read positional_embedding")
        positional_embedding = load_positional_embedding(paths.positional_embedding, n_text_state)
        token_table = load_token_table(paths.tokens)
        return cls(
            encoder,
            decoder_main,
            decoder_loop,
            positional_embedding,
            token_table,
            dump_dir=dump_dir,
        )

    def transcribe(self, audio: np.ndarray, language: str = "zh") -> TranscriptionResult:
        """Transcribe one utterance (at most 30 s; longer input is truncated)."""
        mel = self.feature_extractor.extract(audio)
        if self.dump_dir is not None:
            self.dump_dir.mkdir(parents=True, exist_ok=True)
            mel.tofile(self.dump_dir / "mel.bin")

        decode = self.decoder.decode(mel, sot_sequence(detect_language(language)))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Fragments: %s", tokens_to_fragments(self.detokenizer, decode.tokens))
        text = self.detokenizer.decode(decode.tokens, language)
        return TranscriptionResult(
            text=text,
            language=language,
            tokens=list(decode.tokens),
            decode=decode,
        )

    def transcribe_file(self, wav_path: PathLike, language: str = "zh") -> TranscriptionResult:
        logger.info("wav_file: %s", wav_path)
        logger.info("language: %s", language)
        audio = load_wav(wav_path, self.audio_config.sample_rate)
        return self.transcribe(audio, language)
