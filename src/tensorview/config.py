from pydantic import BaseModel, field_validator

from tensorview.core.dtype import DType, dtypes
from tensorview.utils import getenv_flag, validate_config


class TensorConfig(BaseModel):
    """Runtime configuration shared by tensors and views.

    Attributes:
        check_bounds: Validate every element read and write against the view
            and the owning tensor. Turning it off only skips the per-element
            checks; construction, re-slicing and assignment are always checked.
        default_dtype: Name of the dtype used when a tensor is created
            without an explicit one (e.g., "float32", "int64").
        device: torch device string for newly allocated storage.
    """

    check_bounds: bool = getenv_flag("TENSORVIEW_CHECK_BOUNDS", True)
    default_dtype: str = "float32"
    device: str = "cpu"

    @field_validator("default_dtype")
    @classmethod
    def _known_dtype(cls, v: str) -> str:
        dtypes.from_name(v)
        return v

    @field_validator("device")
    @classmethod
    def _lower_device(cls, v: str) -> str:
        return v.lower()

    @property
    def dtype(self) -> DType:
        return dtypes.from_name(self.default_dtype)

    def __str__(self):
        params = ", ".join(f"{k}={v}" for k, v in self.model_dump().items())
        return f"{self.__class__.__name__}({params})"


_config = TensorConfig()


def get_config() -> TensorConfig:
    return _config


def set_config(**kwargs) -> TensorConfig:
    """Replaces the active configuration, unknown keys are ignored with a warning."""
    global _config
    _config = validate_config(TensorConfig, **{**_config.model_dump(), **kwargs})
    return _config
