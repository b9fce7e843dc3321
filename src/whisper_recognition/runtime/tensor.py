"""Tensor handles with explicit placement.

A ``Tensor`` wraps a buffer owned by a model runner (or by the host) and
records where it lives. Copies between tensors go through ``copy_tensor``,
which checks element count and dtype instead of trusting byte counts.
"""

from __future__ import annotations

import enum
import logging
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)


class Placement(str, enum.Enum):
    HOST = "host"
    DEVICE = "device"


class Tensor:
    """A named, shaped buffer with a placement tag.

    The backing array is never replaced by copies, only written into, so
    runners can hand out handles once and keep them valid.
    """

    def __init__(self, name: str, data: np.ndarray, placement: Placement = Placement.DEVICE):
        self.name = name
        self._data = data
        self.placement = placement

    @classmethod
    def empty(
        cls,
        name: str,
        shape: Tuple[int, ...],
        dtype: np.dtype,
        placement: Placement = Placement.DEVICE,
    ) -> "Tensor":
        return cls(name, np.zeros(shape, dtype=dtype), placement)

    @classmethod
    def from_host(cls, name: str, array: np.ndarray) -> "Tensor":
        return cls(name, np.ascontiguousarray(array), Placement.HOST)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self._data.shape)

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def size(self) -> int:
        return int(self._data.size)

    @property
    def nbytes(self) -> int:
        return int(self._data.nbytes)

    @property
    def is_device(self) -> bool:
        return self.placement is Placement.DEVICE

    def write(self, array: np.ndarray) -> None:
        """Host-to-tensor copy. Casts to this tensor's dtype; element count must match."""
        src = np.asarray(array)
        if src.size != self.size:
            raise ValueError(
                f"Cannot write {src.size} elements into tensor {self.name!r} "
                f"of shape {self.shape}"
            )
        np.copyto(self._data, src.reshape(self.shape), casting="unsafe")

    def read(self) -> np.ndarray:
        """Tensor-to-host copy."""
        return self._data.copy()

    def rebind(self, data: np.ndarray) -> None:
        """Replace the backing buffer (runner-internal, for outputs whose shape is only known after a run)."""
        self._data = data

    @property
    def data(self) -> np.ndarray:
        """Backing array, for runners feeding their execution engine."""
        return self._data

    def __repr__(self) -> str:
        return f"Tensor({self.name!r}, shape={self.shape}, dtype={self.dtype}, {self.placement.value})"


def copy_tensor(dst: Tensor, src: Tensor) -> None:
    """Copy ``src`` into ``dst``.

    Element count and dtype must match; shapes may differ (e.g. a leading
    batch axis on one side). Device-to-device copies never stage through a
    host buffer.
    """
    if src.size != dst.size:
        raise ValueError(
            f"Size mismatch copying {src.name!r} {src.shape} into {dst.name!r} {dst.shape}"
        )
    if src.dtype != dst.dtype:
        raise ValueError(
            f"Dtype mismatch copying {src.name!r} ({src.dtype}) into {dst.name!r} ({dst.dtype})"
        )
    logger.debug(
        "copy %s -> %s (%s to %s, %d bytes)",
        src.name, dst.name, src.placement.value, dst.placement.value, src.nbytes,
    )
    np.copyto(dst.data, src.data.reshape(dst.shape))
