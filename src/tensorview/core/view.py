import numbers
from typing import TYPE_CHECKING, Any, Iterator, Sequence, Tuple, Union

import numpy as np
import torch

from tensorview.config import get_config
from tensorview.core.span import IntervalLike, Span, check_index, same_shape
from tensorview.errors import (
    IndexOutOfBoundsError,
    InvalidIntervalError,
    NonContiguousError,
    InvalidSourceError,
    RankMismatchError,
    ShapeMismatchError,
)
from tensorview.utils import add_indices, argfix
from tensorview.utils.logging import default_logger

if TYPE_CHECKING:
    from tensorview.tensor import Tensor


def _is_index(v: Any) -> bool:
    return isinstance(v, numbers.Integral) and not isinstance(v, bool)


def _interval_list(intervals: Tuple) -> Tuple:
    """
    * reslice(a, b) and reslice([a, b]) select the same region
    * A single tuple of ints is one (lo, hi) interval, not a list of single indices
    """
    if len(intervals) == 1:
        only = intervals[0]
        if isinstance(only, list):
            return tuple(only)
        if isinstance(only, tuple) and not all(_is_index(v) for v in only):
            return only
    return intervals


class TensorView:
    """
    * A window over a rectangular region of a Tensor, no data is copied
    * `span` is expressed in the absolute coordinates of `base`
    * Indices passed to a view are local: (0, 0, ...) is the first element of the region
    * Every write goes straight to the storage of `base` and is visible through all other views of it
    """

    __slots__ = "base", "span"

    def __init__(self, base: "Tensor", span: Span):
        default_logger.check_and_raise(
            f"Span of rank {span.rank} doesn't match tensor of rank {base.rank}",
            RankMismatchError,
            span.rank == base.rank,
        )
        default_logger.check_and_raise(
            f"{span} is out of bounds for tensor of shape {base.shape}",
            IndexOutOfBoundsError,
            span.lies_within(base.dimensions),
        )
        self.base = base
        self.span = span

    @staticmethod
    def full(base: "Tensor") -> "TensorView":
        return TensorView(base, Span.zero_to(base.dimensions))

    def __repr__(self):
        return f"<TensorView {self.span} of tensor {self.base.shape} {self.base.dtype}>"

    # ---------- Property ----------

    @property
    def dimensions(self) -> Tuple[int, ...]:
        return self.span.dimensions

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.span.dimensions

    @property
    def start_index(self) -> Tuple[int, ...]:
        return self.span.start_index

    @property
    def rank(self) -> int:
        return self.span.rank

    @property
    def count(self) -> int:
        return self.span.count

    @property
    def dtype(self):
        return self.base.dtype

    # ---------- Validation ----------

    def index_is_valid(self, indices: Sequence[int]) -> bool:
        if len(indices) != self.rank:
            return False
        for i, index in enumerate(indices):
            if index < 0 or self.dimensions[i] <= index:
                return False
        return True

    def span_is_valid(self, span: Span) -> bool:
        return span.lies_within(self.dimensions)

    def absolute_index(self, indices: Sequence[int]) -> Tuple[int, ...]:
        """Translates a local index into the coordinates of `base`."""
        if get_config().check_bounds:
            check_index(indices, self.dimensions, "Local index")
        return add_indices(self.span.start_index, indices)

    # ---------- Element Access ----------

    def element_at(self, *indices: int):
        index = self.absolute_index(argfix(*indices))
        return self.base.element(index)

    def set_element(self, indices: Sequence[int], value):
        index = self.absolute_index(tuple(indices))
        self.base.set_element(index, value)

    def values(self) -> Iterator:
        """Yields the elements of the view in row-major order."""
        for index in self.span:
            yield self.base.element(index)

    def __iter__(self):
        return self.values()

    # ---------- Slicing ----------

    def reslice(self, *intervals: IntervalLike) -> "TensorView":
        """Returns the view of a sub-region, `intervals` being relative to this view.

        Args:
            intervals: One specifier per axis, either an int (a single index,
                the axis keeps size 1) or a half-open range given as a
                `slice`, a `range`, a ``(lo, hi)`` pair or an `Interval`.

        Raises:
            InvalidIntervalError: If the number of intervals isn't the rank
                or an interval leaves this view.
        """
        span = Span.from_intervals(self.dimensions, _interval_list(intervals))
        return self.reslice_span(span)

    def reslice_span(self, span: Span) -> "TensorView":
        self._check_relative_span(span)
        base_span = Span.compose(self.span.start_index, span)
        default_logger.debug(
            f"Reslice {self.span} with relative {span} => {base_span}"
        )
        return TensorView(self.base, base_span)

    def assign(self, intervals: Sequence[IntervalLike], source):
        """Copies `source` into the sub-region selected by `intervals`.

        `source` is either a view congruent to that region or a scalar used
        to fill it. Elements outside the region are never touched.
        """
        span = Span.from_intervals(self.dimensions, tuple(intervals))
        self.assign_span(span, source)

    def assign_span(self, span: Span, source):
        from tensorview.tensor import Tensor

        self._check_relative_span(span)
        target = TensorView(self.base, Span.compose(self.span.start_index, span))

        if isinstance(source, Tensor):
            source = source.view()
        if not isinstance(source, TensorView):
            default_logger.check_and_raise(
                f"Cannot assign {type(source).__name__} to a region, expected a view, a tensor or a scalar",
                InvalidSourceError,
                isinstance(source, numbers.Number),
            )
            target.fill(source)
            return

        default_logger.check_and_raise(
            f"Cannot assign view of shape {source.shape} to region of shape {span.dimensions}",
            ShapeMismatchError,
            same_shape(span, source.span),
        )

        if target.is_contiguous and source.is_contiguous:
            # clone first, source and target may overlap in the same storage
            target.contiguous_data()[:] = source.contiguous_data().clone()
            return

        # snapshot the source so that overlapping regions behave like a copy
        values = list(source.values())
        for index, value in zip(target.span, values):
            self.base.set_element(index, value)

    def fill(self, value):
        if self.is_contiguous:
            self.contiguous_data().fill_(value)
            return
        for index in self.span:
            self.base.set_element(index, value)

    def _check_relative_span(self, span: Span):
        default_logger.check_and_raise(
            f"Span of rank {span.rank} doesn't match view of rank {self.rank}",
            RankMismatchError,
            span.rank == self.rank,
        )
        default_logger.check_and_raise(
            f"{span} is out of bounds for view of shape {self.dimensions}",
            InvalidIntervalError,
            self.span_is_valid(span),
        )

    def __getitem__(self, key):
        if not isinstance(key, tuple):
            key = (key,)
        if all(_is_index(k) for k in key):
            return self.element_at(key)
        return self.reslice(list(key))

    def __setitem__(self, key, value):
        if not isinstance(key, tuple):
            key = (key,)
        if all(_is_index(k) for k in key):
            self.set_element(key, value)
        else:
            self.assign(key, value)

    # ---------- Memory Layout ----------

    @property
    def is_contiguous(self) -> bool:
        """
        * True when the elements, in row-major order, form one unbroken run of the base storage
        * Reading from the fastest axis: full axes, then at most one partial axis, then axes of size 1
        """
        if self.count == 0:
            return True

        # leading axes of size 1, slowest axis first
        ones_count = next(
            (i for i, d in enumerate(self.dimensions) if d != 1), self.rank
        )

        # trailing axes that cover the whole base axis, fastest axis first
        diff = [
            d - b
            for d, b in zip(reversed(self.dimensions), reversed(self.base.dimensions))
        ]
        full_count = next((i for i, d in enumerate(diff) if d != 0), self.rank)

        return self.rank - full_count - ones_count <= 1

    def storage_range(self) -> Tuple[int, int]:
        """Linear offsets ``(start, stop)`` of this view inside the base storage."""
        default_logger.check_and_raise(
            f"{self} is not contiguous",
            NonContiguousError,
            self.is_contiguous,
        )
        start = sum(i * s for i, s in zip(self.span.start_index, self.base.strides))
        return start, start + self.count

    def contiguous_data(self) -> torch.Tensor:
        """Flat torch tensor aliasing the storage of this view, writes reach `base`."""
        start, stop = self.storage_range()
        return self.base.pointer[start:stop]

    # ---------- Conversion ----------

    def numpy(self) -> np.ndarray:
        if self.is_contiguous:
            flat = self.contiguous_data().detach().to("cpu").numpy().copy()
        else:
            flat = np.array(list(self.values()), dtype=self.dtype.numpy)
        return flat.reshape(self.dimensions)

    def copy(self) -> "Tensor":
        from tensorview.tensor import Tensor

        return Tensor(self.numpy(), dtype=self.dtype, device=self.base.device)

    # ---------- Comparison ----------

    def is_congruent(self, other) -> bool:
        return same_shape(self, other)

    def __eq__(self, other):
        from tensorview.tensor import Tensor

        if not isinstance(other, (TensorView, Tensor)):
            return NotImplemented
        return equal_values(self, other)

    __hash__ = None


def _elements(x: Union[TensorView, "Tensor"]) -> Iterator:
    from tensorview.matrix import Matrix

    if isinstance(x, TensorView):
        return x.values()
    if isinstance(x, Matrix):
        # matrices are compared through their linear row-major storage
        return iter(x.elements)
    return x.view().values()


def equal_values(lhs: Union[TensorView, "Tensor"], rhs: Union[TensorView, "Tensor"]) -> bool:
    """Element-wise equality of two congruent regions, walked in row-major order.

    Raises:
        ShapeMismatchError: If `lhs` and `rhs` have different dimensions.
    """
    default_logger.check_and_raise(
        f"Cannot compare shape {tuple(lhs.dimensions)} with shape {tuple(rhs.dimensions)}",
        ShapeMismatchError,
        same_shape(lhs, rhs),
    )
    return all(a == b for a, b in zip(_elements(lhs), _elements(rhs)))
