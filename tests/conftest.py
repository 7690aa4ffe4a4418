import pytest

from tensorview import Tensor, set_config


@pytest.fixture(autouse=True)
def default_config():
    yield
    set_config(check_bounds=True, default_dtype="float32", device="cpu")


@pytest.fixture
def tensor_3x4():
    """3x4 tensor holding 0..11 in row-major order.

    [[ 0,  1,  2,  3],
     [ 4,  5,  6,  7],
     [ 8,  9, 10, 11]]
    """
    return Tensor.arange((3, 4))


@pytest.fixture
def tensor_2x3x4():
    return Tensor.arange((2, 3, 4))
