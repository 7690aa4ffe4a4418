from typing import List, Optional, Sequence, Union

import numpy as np
import torch

from tensorview.core.buffer import RawBuffer
from tensorview.core.dtype import DType
from tensorview.errors import ShapeMismatchError
from tensorview.tensor import Tensor
from tensorview.utils.logging import default_logger


class Matrix(Tensor):
    """Dense row-major tensor of rank 2.

    Views compare equal to a matrix by walking the view in row-major order
    against `elements`, the matrix's linear storage.
    """

    __slots__ = ()

    def __init__(
        self,
        rows: int,
        columns: int,
        elements: Optional[Union[RawBuffer, List, np.ndarray, torch.Tensor, int, float]] = None,
        dtype: Optional[DType] = None,
        device: Optional[str] = None,
    ):
        if elements is None:
            elements = 0
        super().__init__(elements, shape=(rows, columns), dtype=dtype, device=device)
        default_logger.check_and_raise(
            f"Matrix must have rank 2, got shape {self.shape}",
            ShapeMismatchError,
            self.rank == 2,
        )

    @staticmethod
    def from_rows(rows: Sequence[Sequence], **kwargs) -> "Matrix":
        array = np.array(rows)
        default_logger.check_and_raise(
            f"Rows must be a 2D sequence, got shape {array.shape}",
            ShapeMismatchError,
            array.ndim == 2,
        )
        return Matrix(array.shape[0], array.shape[1], array, **kwargs)

    def __repr__(self):
        return f"<Matrix {self.rows}x{self.columns} dtype={self.dtype} on {self.device}>"

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def columns(self) -> int:
        return self.shape[1]

    @property
    def elements(self) -> list:
        return self.pointer.tolist()
