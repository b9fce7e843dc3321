"""Unit tests for runner lifecycle and stage error translation."""

from __future__ import annotations

import unittest

import numpy as np

from fake_runner import ScriptedRunner
from whisper_recognition.errors import AcceleratorError
from whisper_recognition.runtime import EncoderStage, OnnxModelRunner, load_runner


class _FailingRunner(ScriptedRunner):
    def __init__(self, fail_load: bool = False, fail_prepare: bool = False):
        super().__init__(inputs=[("x", (2,), np.float32)], outputs=[("y", (2,), np.float32)])
        self.fail_load = fail_load
        self.fail_prepare = fail_prepare

    def load(self, path) -> bool:
        return not self.fail_load and super().load(path)

    def prepare(self) -> bool:
        return not self.fail_prepare and super().prepare()


class TestLoadRunner(unittest.TestCase):
    """Tests for load_runner and Stage.run."""

    def test_load_and_prepare(self) -> None:
        runner = load_runner("model.onnx", _FailingRunner())
        self.assertEqual(runner.loaded_path, "model.onnx")
        self.assertEqual(runner.input_count, 1)
        self.assertEqual(runner.input_size(0), 8)
        self.assertEqual(runner.output_size(0), 8)

    def test_load_failure(self) -> None:
        with self.assertRaises(AcceleratorError):
            load_runner("model.onnx", _FailingRunner(fail_load=True))

    def test_prepare_failure(self) -> None:
        with self.assertRaises(AcceleratorError):
            load_runner("model.onnx", _FailingRunner(fail_prepare=True))

    def test_stage_run_failure(self) -> None:
        runner = ScriptedRunner(inputs=[], outputs=[], fail_on_run=1)
        with self.assertRaisesRegex(AcceleratorError, "encoder"):
            EncoderStage(runner).run()


class TestOnnxModelRunner(unittest.TestCase):
    """Lifecycle checks that do not need a model file."""

    def test_missing_file(self) -> None:
        with self.assertLogs("whisper_recognition.runtime.runner", level="ERROR"):
            self.assertFalse(OnnxModelRunner().load("does-not-exist.onnx"))

    def test_prepare_and_run_before_load(self) -> None:
        runner = OnnxModelRunner()
        with self.assertLogs("whisper_recognition.runtime.runner", level="ERROR"):
            self.assertFalse(runner.prepare())
        with self.assertLogs("whisper_recognition.runtime.runner", level="ERROR"):
            self.assertFalse(runner.run())

    def test_default_provider(self) -> None:
        self.assertEqual(OnnxModelRunner().providers, ["CPUExecutionProvider"])


if __name__ == "__main__":
    unittest.main()
