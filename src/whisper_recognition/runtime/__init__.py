"""Model runners, stage layouts and tensor handles."""

from whisper_recognition.runtime.runner import ModelRunner, OnnxModelRunner, load_runner
from whisper_recognition.runtime.stages import DecoderLoopStage, DecoderMainStage, EncoderStage
from whisper_recognition.runtime.tensor import Placement, Tensor, copy_tensor

__all__ = [
    "DecoderLoopStage",
    "DecoderMainStage",
    "EncoderStage",
    "ModelRunner",
    "OnnxModelRunner",
    "Placement",
    "Tensor",
    "copy_tensor",
    "load_runner",
]
