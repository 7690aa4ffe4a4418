from tensorview.config import TensorConfig, get_config, set_config
from tensorview.core.dtype import DType, dtypes
from tensorview.core.span import Interval, Span, same_shape
from tensorview.core.view import TensorView, equal_values
from tensorview.errors import (
    IndexOutOfBoundsError,
    InvalidIntervalError,
    InvalidSourceError,
    NonContiguousError,
    RankMismatchError,
    ShapeMismatchError,
    TensorViewError,
)
from tensorview.matrix import Matrix
from tensorview.tensor import Tensor

__all__ = [
    "DType",
    "IndexOutOfBoundsError",
    "Interval",
    "InvalidIntervalError",
    "InvalidSourceError",
    "Matrix",
    "NonContiguousError",
    "RankMismatchError",
    "ShapeMismatchError",
    "Span",
    "Tensor",
    "TensorConfig",
    "TensorView",
    "TensorViewError",
    "dtypes",
    "equal_values",
    "get_config",
    "same_shape",
    "set_config",
]
