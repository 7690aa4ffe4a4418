class TensorViewError(Exception):
    """Base class of every error raised by tensorview."""


class ShapeMismatchError(TensorViewError, ValueError):
    """Two regions were required to be congruent but their dimensions differ."""


class RankMismatchError(TensorViewError, ValueError):
    """An index, span or interval list has the wrong number of axes."""


class InvalidIntervalError(TensorViewError, ValueError):
    """An interval specifier is malformed or falls outside its axis."""


class IndexOutOfBoundsError(TensorViewError, IndexError):
    """A local or absolute index falls outside the extent of its axis."""


class NonContiguousError(TensorViewError, ValueError):
    """Linear storage access was requested on a view that is not one run."""


class InvalidSourceError(TensorViewError, TypeError):
    """A region was assigned something that is neither a view, a tensor nor a scalar."""
