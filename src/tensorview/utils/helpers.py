import functools
import math
import os
from typing import Iterable, Sequence, Tuple


@functools.lru_cache(maxsize=None)
def getenv(key, default=0):
    return type(default)(os.getenv(key, default))


def getenv_flag(key: str, default: bool = True) -> bool:
    # accepts 1/0, true/false, on/off, yes/no
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() not in ("0", "false", "off", "no")


def argfix(*x):
    return tuple(x[0]) if x and x[0].__class__ in (tuple, list) else x


def prod(xs: Iterable[int]) -> int:
    return math.prod(xs)


def add_indices(lhs: Sequence[int], rhs: Sequence[int]) -> Tuple[int, ...]:
    return tuple(a + b for a, b in zip(lhs, rhs))


def row_major_strides(shape: Sequence[int]) -> Tuple[int, ...]:
    # shape (3, 2) -> strides (2, 1)
    strides = [1] * len(shape)
    for i in range(len(shape) - 2, -1, -1):
        strides[i] = strides[i + 1] * shape[i + 1]
    return tuple(strides)


def normalize_slice(s: slice, dim_size: int) -> Tuple[int, int]:
    """
    * Resolves missing bounds of a slice against the axis size.
    * Negative bounds are kept as they are so that bounds checks can reject them
    """
    if s.step not in (None, 1):
        raise NotImplementedError(f"Slice step {s.step} not supported, views are dense")
    start = 0 if s.start is None else s.start
    stop = dim_size if s.stop is None else s.stop
    return start, stop


DEBUG = getenv("DEBUG")
