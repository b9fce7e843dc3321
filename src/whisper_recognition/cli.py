"""CLI for offline transcription of a WAV file."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from whisper_recognition.errors import WhisperRecognitionError
from whisper_recognition.pipeline import ModelPaths, WhisperTranscriber

logger = logging.getLogger("whisper_recognition")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Transcribe a WAV file with compiled Whisper stages")
    parser.add_argument("--encoder", "-e", type=Path, default=None, help="Encoder model")
    parser.add_argument("--decoder_main", "-m", type=Path, default=None, help="decoder_main model")
    parser.add_argument("--decoder_loop", "-l", type=Path, default=None, help="decoder_loop model")
    parser.add_argument(
        "--position_embedding", "-p", type=Path, default=None, help="positional_embedding.bin"
    )
    parser.add_argument("--token", "-t", type=Path, default=None, help="Token table (tokens.txt)")
    parser.add_argument("--wav", "-w", type=Path, required=True, help="WAV file to transcribe")
    parser.add_argument(
        "--model_dir",
        type=Path,
        default=Path("../models"),
        help="Directory for model files not given explicitly (default: ../models)",
    )
    parser.add_argument("--model_type", default="small", help="tiny, small, large (default: small)")
    parser.add_argument("--language", default="zh", help="Language code, e.g. en, zh (default: zh)")
    parser.add_argument(
        "--provider",
        action="append",
        default=None,
        help="onnxruntime execution provider; repeat for fallbacks (default: CPUExecutionProvider)",
    )
    parser.add_argument(
        "--dump-dir",
        type=Path,
        default=None,
        help="Write mel, cross K/V and first-step logits as raw float32 here",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Per-token debug logging")
    return parser


def resolve_paths(args: argparse.Namespace) -> ModelPaths:
    defaults = ModelPaths.for_model_type(args.model_dir, args.model_type)
    return ModelPaths(
        encoder=args.encoder or defaults.encoder,
        decoder_main=args.decoder_main or defaults.decoder_main,
        decoder_loop=args.decoder_loop or defaults.decoder_loop,
        positional_embedding=args.position_embedding or defaults.positional_embedding,
        tokens=args.token or defaults.tokens,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        transcriber = WhisperTranscriber.from_paths(
            resolve_paths(args),
            model_type=args.model_type,
            providers=args.provider,
            dump_dir=args.dump_dir,
        )
        result = transcriber.transcribe_file(args.wav, language=args.language)
    except WhisperRecognitionError as exc:
        logger.error("%s", exc)
        return 1

    print(f"Result: {result.text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
