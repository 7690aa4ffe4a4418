from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List, Optional, Tuple, Union

import numpy as np
import torch

from tensorview.config import get_config
from tensorview.core.dtype import DType
from tensorview.utils import prod


class LoadOp(Enum):
    FROM_CONST = auto()
    FROM_PYTHON = auto()  # list, tuple, any nested sequence
    FROM_NUMPY = auto()
    FROM_TORCH = auto()
    FROM_NONE = auto()


def load_op_for(data: Any) -> LoadOp:
    if data is None:
        return LoadOp.FROM_NONE
    if isinstance(data, (bool, int, float)):
        return LoadOp.FROM_CONST
    if isinstance(data, (List, Tuple)):
        return LoadOp.FROM_PYTHON
    if isinstance(data, np.ndarray):
        return LoadOp.FROM_NUMPY
    if isinstance(data, torch.Tensor):
        return LoadOp.FROM_TORCH
    raise TypeError(f"Cannot load buffer from {type(data).__name__}")


@dataclass
class RawBuffer:
    """
    * Dense storage of a tensor: a flat, row-major torch.Tensor plus its logical shape
    * Views never own a RawBuffer, they read and write through the Tensor that does
    """

    shape: Tuple[int, ...]
    data: torch.Tensor  # always 1D and contiguous

    @property
    def device(self) -> str:
        return self.data.device.type

    def load(self, offset: int) -> Union[int, float, bool]:
        return self.data[offset].item()

    def store(self, offset: int, value: Union[int, float, bool]):
        self.data[offset] = value

    def to(self, device: str) -> "RawBuffer":
        return RawBuffer(self.shape, self.data.to(device.lower()))

    def numpy(self) -> np.ndarray:
        return self.data.detach().to("cpu").numpy().reshape(self.shape)

    @staticmethod
    def create(
        data: Any,
        shape: Optional[Tuple[int, ...]] = None,
        dtype: Optional[DType] = None,
        device: Optional[str] = None,
    ) -> "RawBuffer":
        config = get_config()
        torch_dtype = (config.dtype if dtype is None else dtype).torch
        device_str = (config.device if device is None else device).lower()

        op = load_op_for(data)
        if op == LoadOp.FROM_NONE:
            if shape is None:
                raise ValueError("Shape cannot be None for empty Buffer creation")
            buf_data = torch.empty(prod(shape), dtype=torch_dtype, device=device_str)
        elif op == LoadOp.FROM_CONST:
            if shape is None:
                raise ValueError("Scalar creation requires shape")
            buf_data = torch.full(
                (prod(shape),), data, dtype=torch_dtype, device=device_str
            )
        else:
            if op == LoadOp.FROM_PYTHON:
                # note that convert to numpy then wrap torch is faster than raw list
                src = torch.from_numpy(np.array(data))
            elif op == LoadOp.FROM_NUMPY:
                # np.array copies, the buffer never aliases the caller array
                src = torch.from_numpy(np.array(data))
            else:
                # copy a new torch Tensor, detached from any autograd graph
                src = data.detach().clone()

            if shape is None:
                shape = tuple(src.shape)
            elif prod(shape) != src.numel():
                raise ValueError(
                    f"Cannot fit {src.numel()} elements into shape {tuple(shape)}"
                )
            buf_data = src.flatten().to(dtype=torch_dtype, device=device_str)

        return RawBuffer(shape=tuple(shape), data=buf_data.contiguous())
