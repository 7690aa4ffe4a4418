import numpy as np
import pytest
import torch

from tensorview import (
    IndexOutOfBoundsError,
    InvalidIntervalError,
    InvalidSourceError,
    Matrix,
    NonContiguousError,
    RankMismatchError,
    ShapeMismatchError,
    Span,
    Tensor,
    TensorView,
    equal_values,
    same_shape,
    set_config,
)


@pytest.fixture
def reference():
    """Numpy twin of the `tensor_3x4` fixture."""
    return np.arange(12).reshape(3, 4)


class TestConstruction:
    def test_full_view(self, tensor_3x4):
        view = TensorView.full(tensor_3x4)
        assert view.span == Span((0, 0), (3, 4))
        assert view.dimensions == (3, 4)
        assert view.rank == 2
        assert view.count == 12
        assert view.base is tensor_3x4

    def test_rank_mismatch(self, tensor_3x4):
        with pytest.raises(RankMismatchError):
            TensorView(tensor_3x4, Span((0,), (3,)))

    def test_span_outside_tensor(self, tensor_3x4):
        with pytest.raises(IndexOutOfBoundsError):
            TensorView(tensor_3x4, Span((2, 0), (2, 4)))


class TestElementAccess:
    def test_full_view_matches_tensor(self, tensor_3x4):
        view = tensor_3x4.view()
        for index in Span.zero_to(tensor_3x4.shape):
            assert view.element_at(index) == tensor_3x4.element(index)

    def test_slice_translates_indices(self, tensor_3x4):
        view = tensor_3x4[1:3, 0:2]
        assert view.dimensions == (2, 2)
        assert view[0, 0] == tensor_3x4[1, 0] == 4
        assert view[1, 1] == tensor_3x4[2, 1] == 9

    def test_element_at_accepts_tuple_or_varargs(self, tensor_3x4):
        view = tensor_3x4[1:3, 1:3]
        assert view.element_at(0, 1) == view.element_at((0, 1)) == 6

    def test_set_element_writes_through(self, tensor_3x4):
        view = tensor_3x4[1:3, 0:2]
        other = tensor_3x4[0:3, 1:2]
        view[0, 1] = 100
        assert tensor_3x4[1, 1] == 100
        assert other[1, 0] == 100

    @pytest.mark.parametrize("index", [(2, 0), (0, 2), (-1, 0), (0, -1)])
    def test_out_of_bounds_local_index(self, tensor_3x4, index):
        view = tensor_3x4[1:3, 0:2]
        with pytest.raises(IndexOutOfBoundsError):
            view[index]
        with pytest.raises(IndexOutOfBoundsError):
            view[index] = 1

    def test_out_of_bounds_is_an_index_error(self, tensor_3x4):
        with pytest.raises(IndexError):
            tensor_3x4[1:3, 0:2][5, 5]

    def test_wrong_number_of_indices(self, tensor_3x4):
        view = tensor_3x4[1:3, 0:2]
        with pytest.raises(RankMismatchError):
            view[0]
        with pytest.raises(RankMismatchError):
            view.element_at(0, 0, 0)

    def test_rejected_write_leaves_tensor_unchanged(self, tensor_3x4, reference):
        with pytest.raises(IndexOutOfBoundsError):
            tensor_3x4[1:3, 0:2][0, 2] = -1
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_index_is_valid(self, tensor_3x4):
        view = tensor_3x4[1:3, 0:2]
        assert view.index_is_valid((0, 0))
        assert view.index_is_valid((1, 1))
        assert not view.index_is_valid((-1, 0))
        assert not view.index_is_valid((0, 2))
        assert not view.index_is_valid((0,))

    def test_unchecked_access(self, tensor_3x4):
        view = tensor_3x4[0:2, 0:2]
        with pytest.raises(IndexOutOfBoundsError):
            view.element_at(0, 3)

        set_config(check_bounds=False)
        # the base still holds the element, only the view bound is skipped
        assert view.element_at(0, 3) == 3

    def test_iteration_is_row_major(self, tensor_3x4):
        view = tensor_3x4[1:3, 0:2]
        assert list(view) == [4, 5, 8, 9]
        assert list(view.values()) == list(view)


class TestReslice:
    @pytest.mark.parametrize(
        "key, np_key",
        [
            ((slice(1, 3), slice(0, 2)), (slice(1, 3), slice(0, 2))),
            ((slice(None), slice(2, None)), (slice(None), slice(2, None))),
            ((1, slice(0, 4)), (slice(1, 2), slice(0, 4))),
            ((range(0, 2), (1, 3)), (slice(0, 2), slice(1, 3))),
        ],
    )
    def test_matches_numpy(self, tensor_3x4, reference, key, np_key):
        view = tensor_3x4.view().reslice(key)
        np.testing.assert_array_equal(view.numpy(), reference[np_key])

    @pytest.mark.parametrize(
        "intervals, expected",
        [
            (((0, 2), (1, 3)), Span((0, 1), (2, 2))),
            (((1, 3), slice(None)), Span((1, 0), (2, 4))),
            (((1, 3), 2), Span((1, 2), (2, 1))),
        ],
    )
    def test_leading_pair_interval(self, tensor_3x4, intervals, expected):
        view = tensor_3x4.view()
        assert view.reslice(*intervals).span == expected
        assert view.reslice(list(intervals)).span == expected
        assert view.reslice(intervals).span == expected

    def test_single_pair_on_rank_one(self):
        view = Tensor.arange((5,)).view().reslice((1, 3))
        assert view.span == Span((1,), (2,))
        assert list(view) == [1, 2]

    def test_non_integer_bounds(self, tensor_3x4):
        with pytest.raises(InvalidIntervalError):
            tensor_3x4[0.5:2, :]
        with pytest.raises(InvalidIntervalError):
            tensor_3x4.view().reslice((0, 2.5), slice(None))

    def test_integer_keeps_axis(self, tensor_3x4):
        view = tensor_3x4[1, 0:4]
        assert view.dimensions == (1, 4)
        assert view[0, 3] == 7

    def test_slice_of_slice(self, tensor_3x4):
        outer = tensor_3x4[1:3, 1:4]
        inner = outer[0:2, 1:3]
        assert inner.span == Span((1, 2), (2, 2))
        for j in Span.zero_to(inner.dimensions):
            shifted = (j[0] + 0, j[1] + 1)
            assert inner.element_at(j) == outer.element_at(shifted)

    def test_reslice_is_associative(self, tensor_2x3x4):
        view = tensor_2x3x4.view()
        s1 = Span((1, 1, 0), (1, 2, 4))
        s2 = Span((0, 1, 1), (1, 1, 2))
        nested = view.reslice_span(s1).reslice_span(s2)
        direct = view.reslice_span(Span.compose(s1.start_index, s2))
        assert nested.span == direct.span
        assert nested == direct

    def test_three_dimensional(self, tensor_2x3x4):
        view = tensor_2x3x4[1, 0:2, 1:3]
        assert view.dimensions == (1, 2, 2)
        assert view[0, 1, 1] == tensor_2x3x4[1, 1, 2] == 18
        np.testing.assert_array_equal(
            view.numpy(), np.arange(24).reshape(2, 3, 4)[1:2, 0:2, 1:3]
        )

    def test_view_shares_storage(self, tensor_3x4):
        view = tensor_3x4[0:2, 2:4]
        tensor_3x4[1, 3] = -5
        assert view[1, 1] == -5

    @pytest.mark.parametrize(
        "key",
        [
            (slice(0, 3), slice(0, 2)),  # past the view on axis 0
            (slice(0, 1), 2),  # single index at the extent
            (slice(-1, 1), slice(0, 1)),  # negative start
        ],
    )
    def test_out_of_bounds(self, tensor_3x4, key):
        view = tensor_3x4[1:3, 0:2]
        with pytest.raises(InvalidIntervalError):
            view.reslice(key)

    def test_wrong_interval_count(self, tensor_3x4):
        with pytest.raises(InvalidIntervalError):
            tensor_3x4.view().reslice([slice(0, 1)])

    def test_reslice_span_rank_mismatch(self, tensor_3x4):
        with pytest.raises(RankMismatchError):
            tensor_3x4.view().reslice_span(Span((0,), (1,)))


class TestAssign:
    def test_copy_between_origins(self, tensor_3x4, reference):
        src = Tensor([[100, 101], [102, 103]])
        tensor_3x4[1:3, 2:4] = src.view()

        reference[1:3, 2:4] = [[100, 101], [102, 103]]
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_element_mapping(self, tensor_3x4):
        other = Tensor.full((3, 4), -1)
        source = tensor_3x4[0:2, 1:3]
        other[1:3, 2:4] = source
        assert other[1, 2] == source[0, 0]
        assert other[2, 3] == source[1, 1]
        assert other[1, 3] == source[0, 1]
        assert other[2, 2] == source[1, 0]
        assert other[0, 0] == -1

    def test_non_contiguous_source_and_target(self, tensor_3x4, reference):
        source = Tensor(np.arange(12).reshape(3, 4) + 100)
        tensor_3x4[1:3, 0:2] = source[0:2, 1:3]

        reference[1:3, 0:2] = (np.arange(12).reshape(3, 4) + 100)[0:2, 1:3]
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_overlapping_regions_copy(self, tensor_3x4, reference):
        tensor_3x4[0:2, 0:2] = tensor_3x4[1:3, 1:3]
        reference[0:2, 0:2] = reference[1:3, 1:3].copy()
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_overlapping_contiguous_rows(self, tensor_3x4, reference):
        tensor_3x4[0:2, :] = tensor_3x4[1:3, :]
        reference[0:2, :] = reference[1:3, :].copy()
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_assign_relative_to_view(self, tensor_3x4, reference):
        view = tensor_3x4[1:3, :]
        view.assign((0, slice(1, 3)), Tensor([[-1, -2]]))
        reference[1, 1:3] = [-1, -2]
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_assign_span(self, tensor_3x4, reference):
        view = tensor_3x4[1:3, 1:4]
        view.assign_span(Span((1, 1), (1, 2)), Tensor([[7, 7]]).view())
        reference[2, 2:4] = 7
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_scalar_fill(self, tensor_3x4, reference):
        tensor_3x4[0:2, 1:3] = 0
        reference[0:2, 1:3] = 0
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_shape_mismatch_leaves_tensor_unchanged(self, tensor_3x4, reference):
        with pytest.raises(ShapeMismatchError):
            tensor_3x4[0:2, 0:2] = tensor_3x4[0:2, 0:3]
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    @pytest.mark.parametrize(
        "source", [np.zeros((2, 4)), [[0] * 4] * 2, "0", None]
    )
    def test_rejects_non_scalar_source(self, tensor_3x4, reference, source):
        with pytest.raises(InvalidSourceError):
            tensor_3x4[1:3, :] = source
        with pytest.raises(TypeError):
            tensor_3x4.view().assign((slice(0, 2), slice(0, 2)), source)
        np.testing.assert_array_equal(tensor_3x4.numpy(), reference)

    def test_out_of_bounds_target(self, tensor_3x4):
        with pytest.raises(InvalidIntervalError):
            tensor_3x4[1:3, 0:2].assign((slice(0, 3), slice(0, 2)), 0)


class TestEquality:
    def test_equal_values_at_different_origins(self):
        t = Tensor([[1, 2, 1, 2], [3, 4, 3, 4]])
        assert t[:, 0:2] == t[:, 2:4]
        assert equal_values(t[:, 0:2], t[:, 2:4])

    def test_unequal_values(self, tensor_3x4):
        assert not (tensor_3x4[0:2, 0:2] == tensor_3x4[1:3, 0:2])
        assert tensor_3x4[0:2, 0:2] != tensor_3x4[1:3, 0:2]

    def test_reflexive_and_symmetric(self, tensor_3x4):
        a = tensor_3x4[0:2, 0:2]
        b = Tensor([[0, 1], [4, 5]]).view()
        assert a == a
        assert a == b and b == a

    def test_shape_mismatch_raises(self, tensor_3x4):
        with pytest.raises(ShapeMismatchError):
            tensor_3x4[0:2, 0:2] == tensor_3x4[0:2, 0:3]

    def test_matrix_comparison(self, tensor_3x4):
        view = tensor_3x4[1:3, 0:2]
        matrix = Matrix(2, 2, [4, 5, 8, 9])
        assert view == matrix
        assert matrix == view
        assert not (view == Matrix(2, 2, [4, 5, 9, 8]))

    def test_matrix_shape_mismatch(self, tensor_3x4):
        with pytest.raises(ShapeMismatchError):
            tensor_3x4[1:3, 0:2] == Matrix(1, 4, [4, 5, 8, 9])

    def test_unrelated_type(self, tensor_3x4):
        assert tensor_3x4.view() != "tensor"

    def test_same_shape(self, tensor_3x4):
        assert same_shape(tensor_3x4[0:2, 0:2], tensor_3x4[1:3, 2:4])
        assert tensor_3x4[0:2, 0:2].is_congruent(Matrix(2, 2))
        assert not same_shape(tensor_3x4[0:2, 0:2], tensor_3x4[0:2, 0:3])


class TestStorage:
    def test_storage_range(self, tensor_3x4):
        assert tensor_3x4.view().storage_range() == (0, 12)
        assert tensor_3x4[1:3, :].storage_range() == (4, 12)
        assert tensor_3x4[1, 1:3].storage_range() == (5, 7)

    def test_storage_range_requires_contiguity(self, tensor_3x4):
        with pytest.raises(NonContiguousError):
            tensor_3x4[0:2, 1:3].storage_range()

    def test_contiguous_data_aliases_tensor(self, tensor_3x4):
        data = tensor_3x4[1, 1:3].contiguous_data()
        assert torch.equal(data, torch.tensor([5.0, 6.0]))
        data[0] = 42
        assert tensor_3x4[1, 1] == 42

    def test_numpy_is_a_copy(self, tensor_3x4):
        array = tensor_3x4[1:3, :].numpy()
        array[0, 0] = -1
        assert tensor_3x4[1, 0] == 4

    def test_copy(self, tensor_3x4):
        copy = tensor_3x4[0:2, 1:3].copy()
        assert isinstance(copy, Tensor)
        assert copy.shape == (2, 2)
        assert copy.view() == tensor_3x4[0:2, 1:3]
        copy[0, 0] = 99
        assert tensor_3x4[0, 1] == 1
