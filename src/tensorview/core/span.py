import itertools
import numbers
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

from tensorview.errors import (
    IndexOutOfBoundsError,
    InvalidIntervalError,
    RankMismatchError,
)
from tensorview.utils import add_indices, normalize_slice, prod
from tensorview.utils.logging import default_logger


@dataclass(frozen=True)
class Interval:
    """Half-open range ``[lo, hi)`` along a single axis."""

    lo: int
    hi: int

    @property
    def length(self) -> int:
        return self.hi - self.lo

    def within(self, extent: int) -> bool:
        return 0 <= self.lo <= self.hi <= extent

    @staticmethod
    def create(spec: "IntervalLike", extent: int) -> "Interval":
        """
        * Normalizes one axis specifier against the extent of that axis
        * int i -> [i, i + 1), slice/range/(lo, hi) -> [lo, hi)
        * Negative bounds are not wrapped around, bounds checks reject them later
        """
        if isinstance(spec, Interval):
            return spec
        if isinstance(spec, bool):
            raise InvalidIntervalError(f"Cannot use {spec!r} as an interval")
        if isinstance(spec, numbers.Integral):
            return Interval(int(spec), int(spec) + 1)
        if isinstance(spec, slice):
            try:
                lo, hi = normalize_slice(spec, extent)
            except NotImplementedError as e:
                raise InvalidIntervalError(str(e)) from e
            return Interval._checked(spec, lo, hi)
        if isinstance(spec, range):
            if spec.step != 1:
                raise InvalidIntervalError(
                    f"Range step {spec.step} not supported, views are dense"
                )
            return Interval._checked(spec, spec.start, spec.stop)
        if isinstance(spec, tuple) and len(spec) == 2:
            return Interval._checked(spec, spec[0], spec[1])
        raise InvalidIntervalError(f"Cannot use {spec!r} as an interval")

    @staticmethod
    def _checked(spec, lo, hi) -> "Interval":
        default_logger.check_and_raise(
            f"Interval {spec!r} must have integer bounds",
            InvalidIntervalError,
            all(
                isinstance(v, numbers.Integral) and not isinstance(v, bool)
                for v in (lo, hi)
            ),
        )
        return Interval(int(lo), int(hi))


IntervalLike = Union[int, slice, range, Tuple[int, int], Interval]


@dataclass(frozen=True)
class Span:
    """
    Rectangular region of an N-dimensional index space.

    A span is an origin (`start_index`) and an extent (`dimensions`) per
    axis. Iterating it yields absolute index tuples in row-major order, last
    axis varying fastest:

    >>> list(Span((1, 0), (2, 2)))
    [(1, 0), (1, 1), (2, 0), (2, 1)]
    """

    start_index: Tuple[int, ...]
    dimensions: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "start_index", tuple(self.start_index))
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        default_logger.check_and_raise(
            f"Span start {self.start_index} and dimensions {self.dimensions} differ in rank",
            RankMismatchError,
            len(self.start_index) == len(self.dimensions),
        )
        default_logger.check_and_raise(
            f"Span dimensions {self.dimensions} can't contain negative numbers",
            InvalidIntervalError,
            all(d >= 0 for d in self.dimensions),
        )

    def __repr__(self):
        return f"Span(start={self.start_index}, dims={self.dimensions})"

    # ---------- Construction ----------

    @staticmethod
    def zero_to(dimensions: Sequence[int]) -> "Span":
        return Span((0,) * len(dimensions), tuple(dimensions))

    @staticmethod
    def from_intervals(
        dimensions: Sequence[int], intervals: Sequence[IntervalLike]
    ) -> "Span":
        """Builds the span covered by `intervals` inside a region of extent `dimensions`.

        Args:
            dimensions: Extent of each axis the intervals are expressed against.
            intervals: One specifier per axis, see `Interval.create`.

        Raises:
            InvalidIntervalError: If the number of intervals differs from the
                number of axes, or an interval leaves ``[0, dimensions[k]]``.
        """
        default_logger.check_and_raise(
            f"Got {len(intervals)} intervals for {len(dimensions)} dimensions",
            InvalidIntervalError,
            len(intervals) == len(dimensions),
        )

        start, extent = [], []
        for axis, (spec, dim) in enumerate(zip(intervals, dimensions)):
            interval = Interval.create(spec, dim)
            default_logger.check_and_raise(
                f"Interval [{interval.lo}, {interval.hi}) out of bounds for axis {axis} of size {dim}",
                InvalidIntervalError,
                interval.within(dim),
            )
            start.append(interval.lo)
            extent.append(interval.length)

        return Span(tuple(start), tuple(extent))

    @staticmethod
    def compose(parent_start: Sequence[int], child: "Span") -> "Span":
        """Moves `child`, expressed relative to `parent_start`, into the parent's coordinates."""
        default_logger.check_and_raise(
            f"Cannot compose span of rank {child.rank} onto origin {tuple(parent_start)}",
            RankMismatchError,
            len(parent_start) == child.rank,
        )
        return Span(add_indices(parent_start, child.start_index), child.dimensions)

    def relative_to(self, origin: Sequence[int]) -> "Span":
        default_logger.check_and_raise(
            f"Cannot express span of rank {self.rank} relative to {tuple(origin)}",
            RankMismatchError,
            len(origin) == self.rank,
        )
        return Span(
            tuple(s - o for s, o in zip(self.start_index, origin)), self.dimensions
        )

    # ---------- Property ----------

    @property
    def rank(self) -> int:
        return len(self.dimensions)

    @property
    def count(self) -> int:
        return prod(self.dimensions)

    @property
    def end_index(self) -> Tuple[int, ...]:
        return add_indices(self.start_index, self.dimensions)

    @property
    def intervals(self) -> Tuple[range, ...]:
        return tuple(
            range(start, start + dim)
            for start, dim in zip(self.start_index, self.dimensions)
        )

    # ---------- Queries ----------

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        # product varies its last argument fastest, which is row-major order
        return itertools.product(*self.intervals)

    def is_congruent(self, other: "Span") -> bool:
        return self.dimensions == tuple(other.dimensions)

    def contains(self, index: Sequence[int]) -> bool:
        if len(index) != self.rank:
            return False
        return all(i in r for i, r in zip(index, self.intervals))

    def lies_within(self, dimensions: Sequence[int]) -> bool:
        """True when every index of this span is inside ``[0, dimensions)``."""
        if len(dimensions) != self.rank:
            return False
        return all(
            start >= 0 and start + dim <= bound
            for start, dim, bound in zip(self.start_index, self.dimensions, dimensions)
        )


def same_shape(lhs, rhs) -> bool:
    """Dimensional congruency: same extent on every axis, origins are ignored.

    Works on anything exposing `dimensions` (spans, views, tensors, matrices).
    """
    return tuple(lhs.dimensions) == tuple(rhs.dimensions)


def check_index(index: Sequence[int], dimensions: Sequence[int], what: str = "Index"):
    """Raises unless `index` addresses an element of a region of extent `dimensions`."""
    default_logger.check_and_raise(
        f"{what} {tuple(index)} has {len(index)} axes, expected {len(dimensions)}",
        RankMismatchError,
        len(index) == len(dimensions),
    )
    for axis, (i, dim) in enumerate(zip(index, dimensions)):
        default_logger.check_and_raise(
            f"{what} {tuple(index)} out of bounds for axis {axis} with size {dim}",
            IndexOutOfBoundsError,
            0 <= i < dim,
        )
