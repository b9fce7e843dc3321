"""Model runners: the lifecycle every compiled stage goes through.

A runner loads one compiled model, allocates its input/output tensors in
``prepare`` and executes it with ``run``. Each lifecycle call reports
success as a boolean; callers turn ``False`` into ``AcceleratorError``.

``OnnxModelRunner`` backs the lifecycle with onnxruntime. Its tensors are
tagged as device-resident: they belong to the runner and are bound to the
session on every run.
"""

from __future__ import annotations

import abc
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from whisper_recognition.errors import AcceleratorError
from whisper_recognition.runtime.tensor import Placement, Tensor

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS = ("CPUExecutionProvider",)

# onnxruntime type strings -> numpy dtypes
_ORT_DTYPES: Dict[str, type] = {
    "tensor(float)": np.float32,
    "tensor(float16)": np.float16,
    "tensor(double)": np.float64,
    "tensor(int32)": np.int32,
    "tensor(int64)": np.int64,
    "tensor(int8)": np.int8,
    "tensor(uint8)": np.uint8,
    "tensor(bool)": np.bool_,
}


class ModelRunner(abc.ABC):
    """Common lifecycle of a compiled model stage."""

    @abc.abstractmethod
    def load(self, path: Union[str, Path]) -> bool:
        """Load a compiled model file."""

    @abc.abstractmethod
    def prepare(self) -> bool:
        """Allocate input and output tensors."""

    @abc.abstractmethod
    def run(self, async_run: bool = False) -> bool:
        """Execute once on the current inputs; outputs are overwritten."""

    @abc.abstractmethod
    def input(self, index: int) -> Tensor:
        """Input tensor handle by index."""

    @abc.abstractmethod
    def output(self, index: int) -> Tensor:
        """Output tensor handle by index."""

    @property
    @abc.abstractmethod
    def input_count(self) -> int: ...

    @property
    @abc.abstractmethod
    def output_count(self) -> int: ...

    def input_size(self, index: int) -> int:
        """Input size in bytes."""
        return self.input(index).nbytes

    def output_size(self, index: int) -> int:
        """Output size in bytes."""
        return self.output(index).nbytes


def _resolve_shape(shape: Sequence[object]) -> tuple:
    """Replace symbolic or unknown dims with 1 (single utterance)."""
    return tuple(d if isinstance(d, int) and d > 0 else 1 for d in shape)


class OnnxModelRunner(ModelRunner):
    """Runs an ONNX model with onnxruntime."""

    def __init__(self, providers: Optional[Sequence[str]] = None):
        self.providers = list(providers or DEFAULT_PROVIDERS)
        self.path: Optional[Path] = None
        self._session = None
        self._inputs: List[Tensor] = []
        self._outputs: List[Tensor] = []
        self._output_names: List[str] = []

    def load(self, path: Union[str, Path]) -> bool:
        self.path = Path(path)
        if not self.path.exists():
            logger.error("Model file not found: %s", self.path)
            return False

        import onnxruntime as ort

        try:
            self._session = ort.InferenceSession(str(self.path), providers=self.providers)
        except Exception as exc:  # onnxruntime raises its own Fail/InvalidGraph types
            logger.error("Loading model %s failed: %s", self.path, exc)
            return False
        return True

    def prepare(self) -> bool:
        if self._session is None:
            logger.error("prepare() called before load()")
            return False
        try:
            self._inputs = [
                Tensor.empty(meta.name, _resolve_shape(meta.shape), _ORT_DTYPES[meta.type])
                for meta in self._session.get_inputs()
            ]
            self._outputs = [
                Tensor.empty(meta.name, _resolve_shape(meta.shape), _ORT_DTYPES[meta.type])
                for meta in self._session.get_outputs()
            ]
        except KeyError as exc:
            logger.error("Unsupported tensor type %s in %s", exc, self.path)
            return False
        self._output_names = [t.name for t in self._outputs]
        for t in self._inputs:
            logger.debug("%s input %r", self.path.name, t)
        for t in self._outputs:
            logger.debug("%s output %r", self.path.name, t)
        return True

    def run(self, async_run: bool = False) -> bool:
        # onnxruntime sessions are synchronous; async_run is accepted for the common lifecycle
        if self._session is None:
            logger.error("run() called before load()")
            return False
        feed = {t.name: t.data for t in self._inputs}
        try:
            results = self._session.run(self._output_names, feed)
        except Exception as exc:
            logger.error("Running model %s failed: %s", self.path, exc)
            return False
        for tensor, value in zip(self._outputs, results):
            value = np.asarray(value, dtype=tensor.dtype)
            if value.size == tensor.size:
                np.copyto(tensor.data, value.reshape(tensor.shape))
            else:
                tensor.rebind(np.ascontiguousarray(value))
        return True

    def input(self, index: int) -> Tensor:
        return self._inputs[index]

    def output(self, index: int) -> Tensor:
        return self._outputs[index]

    @property
    def input_count(self) -> int:
        return len(self._inputs)

    @property
    def output_count(self) -> int:
        return len(self._outputs)


def load_runner(
    model_path: Union[str, Path],
    runner: Optional[ModelRunner] = None,
) -> ModelRunner:
    """Load and prepare a model stage.

    Args:
        model_path: Compiled model file.
        runner: Runner instance to use (default: a new ``OnnxModelRunner``).

    Returns:
        The prepared runner.

    Raises:
        AcceleratorError: If load or prepare fails.
    """
    runner = runner if runner is not None else OnnxModelRunner()
    start = time.perf_counter()
    if not runner.load(model_path):
        raise AcceleratorError(f"Loading model {model_path} failed")
    if not runner.prepare():
        raise AcceleratorError(f"Prepare for model {model_path} failed")
    logger.info(
        "Loaded %s in %.2f ms", Path(model_path).name, (time.perf_counter() - start) * 1000
    )
    return runner
