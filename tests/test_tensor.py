"""Unit tests for tensor handles and checked copies."""

from __future__ import annotations

import unittest

import numpy as np

from whisper_recognition.runtime import Placement, Tensor, copy_tensor


class TestTensor(unittest.TestCase):
    """Tests for Tensor and copy_tensor."""

    def test_empty_is_device_zeros(self) -> None:
        t = Tensor.empty("x", (2, 3), np.float32)
        self.assertTrue(t.is_device)
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.nbytes, 24)
        np.testing.assert_array_equal(t.read(), np.zeros((2, 3)))

    def test_write_casts_and_reshapes(self) -> None:
        t = Tensor.empty("tokens", (1, 4), np.int32)
        t.write(np.array([50258, 50260, 50359, 50363], dtype=np.int64))
        self.assertEqual(t.dtype, np.int32)
        np.testing.assert_array_equal(t.read(), [[50258, 50260, 50359, 50363]])

    def test_write_size_mismatch(self) -> None:
        t = Tensor.empty("x", (4,), np.float32)
        with self.assertRaises(ValueError):
            t.write(np.zeros(5))

    def test_read_is_a_copy(self) -> None:
        t = Tensor.empty("x", (3,), np.float32)
        host = t.read()
        host[:] = 1.0
        np.testing.assert_array_equal(t.read(), np.zeros(3))

    def test_write_keeps_buffer(self) -> None:
        t = Tensor.empty("x", (3,), np.float32)
        buffer = t.data
        t.write(np.ones(3))
        self.assertIs(t.data, buffer)

    def test_copy_device_to_device(self) -> None:
        src = Tensor.empty("src", (1, 2, 3), np.float32)
        src.write(np.arange(6))
        dst = Tensor.empty("dst", (2, 3), np.float32)
        copy_tensor(dst, src)
        np.testing.assert_array_equal(dst.read(), np.arange(6).reshape(2, 3))

    def test_copy_from_host(self) -> None:
        src = Tensor.from_host("row", np.ones((4,), dtype=np.float32))
        self.assertEqual(src.placement, Placement.HOST)
        dst = Tensor.empty("dst", (1, 4), np.float32)
        copy_tensor(dst, src)
        np.testing.assert_array_equal(dst.read(), np.ones((1, 4)))

    def test_copy_size_mismatch(self) -> None:
        with self.assertRaises(ValueError):
            copy_tensor(Tensor.empty("a", (3,), np.float32), Tensor.empty("b", (4,), np.float32))

    def test_copy_dtype_mismatch(self) -> None:
        with self.assertRaises(ValueError):
            copy_tensor(Tensor.empty("a", (3,), np.float32), Tensor.empty("b", (3,), np.int32))


if __name__ == "__main__":
    unittest.main()
