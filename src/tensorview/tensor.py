from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import torch

from tensorview.config import get_config
from tensorview.core.buffer import RawBuffer
from tensorview.core.dtype import DType, dtypes
from tensorview.core.span import check_index
from tensorview.core.view import TensorView, equal_values
from tensorview.utils import argfix, prod, row_major_strides


class Tensor:
    """
    * Dense, row-major N-dimensional array owning its storage
    * Indexing a Tensor goes through a full-extent TensorView, so `t[1:3, 0:2]` is a view, not a copy
    """

    __slots__ = "buffer", "_strides"

    def __init__(
        self,
        data: Optional[
            Union[RawBuffer, List, Tuple, np.ndarray, torch.Tensor, int, float]
        ] = None,
        shape: Optional[Tuple[int, ...]] = None,
        dtype: Optional[DType] = None,
        device: Optional[str] = None,
    ):
        if isinstance(data, RawBuffer):
            self.buffer = data
        else:
            if data is None:
                assert shape is not None, "Cannot allocate empty Tensor without shape"
            self.buffer = RawBuffer.create(data, shape=shape, dtype=dtype, device=device)
        self._strides = row_major_strides(self.buffer.shape)

    def __repr__(self):
        return f"<Tensor shape={self.shape} dtype={self.dtype} on {self.device}>"

    def __str__(self):
        return str(self.numpy())

    # ---------- Property ----------

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.buffer.shape

    @property
    def dimensions(self) -> Tuple[int, ...]:
        return self.buffer.shape

    @property
    def rank(self) -> int:
        return len(self.buffer.shape)

    @property
    def count(self) -> int:
        return prod(self.buffer.shape)

    @property
    def strides(self) -> Tuple[int, ...]:
        return self._strides

    @property
    def dtype(self) -> DType:
        return dtypes.from_torch(self.buffer.data.dtype)

    @property
    def device(self) -> str:
        return self.buffer.device

    @property
    def pointer(self) -> torch.Tensor:
        # flat storage, slicing it aliases the tensor
        return self.buffer.data

    # ---------- Element Access ----------

    def linear_offset(self, index: Sequence[int]) -> int:
        return sum(i * s for i, s in zip(index, self._strides))

    def element(self, *index: int):
        index = argfix(*index)
        if get_config().check_bounds:
            check_index(index, self.shape, "Absolute index")
        return self.buffer.load(self.linear_offset(index))

    def set_element(self, index: Sequence[int], value):
        if get_config().check_bounds:
            check_index(index, self.shape, "Absolute index")
        self.buffer.store(self.linear_offset(index), value)

    def view(self) -> TensorView:
        return TensorView.full(self)

    def __getitem__(self, key):
        return self.view()[key]

    def __setitem__(self, key, value):
        self.view()[key] = value

    def __iter__(self):
        return self.view().values()

    def __eq__(self, other):
        if not isinstance(other, (Tensor, TensorView)):
            return NotImplemented
        return equal_values(self, other)

    __hash__ = None

    # ---------- Creation Methods ----------

    @staticmethod
    def full(shape: Tuple[int, ...], fill_value: Union[float, int], **kwargs):
        return Tensor(fill_value, shape=tuple(shape), **kwargs)

    @staticmethod
    def zeros(shape: Tuple[int, ...], **kwargs):
        return Tensor.full(shape, 0, **kwargs)

    @staticmethod
    def ones(shape: Tuple[int, ...], **kwargs):
        return Tensor.full(shape, 1, **kwargs)

    @staticmethod
    def empty(shape: Tuple[int, ...], **kwargs):
        return Tensor(None, shape=tuple(shape), **kwargs)

    @staticmethod
    def arange(shape: Tuple[int, ...], **kwargs):
        # values 0..count-1 laid out row-major
        return Tensor(torch.arange(prod(shape)), shape=tuple(shape), **kwargs)

    def full_like(self, fill_value, **kwargs):
        return Tensor.full(
            self.shape,
            fill_value=fill_value,
            dtype=kwargs.pop("dtype", self.dtype),
            device=kwargs.pop("device", self.device),
            **kwargs,
        )

    def zeros_like(self, **kwargs):
        return self.full_like(0, **kwargs)

    # ---------- Other Methods ----------

    def to(self, device: str) -> "Tensor":
        if device.lower() == self.device:
            return self
        return Tensor(self.buffer.to(device))

    def numpy(self) -> np.ndarray:
        return self.buffer.numpy()

    def tolist(self) -> list:
        return self.numpy().tolist()

    def item(self) -> Union[float, int, bool]:
        if self.count == 1:
            return self.buffer.load(0)
        raise ValueError(
            f"item() method can be used only for Tensor with one element, got shape={self.shape}"
        )
