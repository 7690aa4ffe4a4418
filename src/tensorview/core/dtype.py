from dataclasses import dataclass

import numpy as np
import torch


@dataclass(frozen=True)
class DType:
    name: str

    def __repr__(self):
        return f"dtypes.{self.name}"

    @property
    def torch(self) -> torch.dtype:
        return getattr(torch, self.name)

    @property
    def numpy(self) -> np.dtype:
        return np.dtype(self.name)


class dtypes:
    float32 = DType("float32")
    float64 = DType("float64")
    int32 = DType("int32")
    int64 = DType("int64")
    bool = DType("bool")

    @staticmethod
    def from_name(name: str) -> DType:
        dtype = getattr(dtypes, name, None)
        if not isinstance(dtype, DType):
            raise ValueError(f"Unknown dtype {name!r}")
        return dtype

    @staticmethod
    def from_torch(dtype: torch.dtype) -> DType:
        # torch.float32 -> "float32"
        return dtypes.from_name(str(dtype).split(".")[-1])
