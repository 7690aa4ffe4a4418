from tensorview.utils.helpers import (
    DEBUG,
    add_indices,
    argfix,
    getenv,
    getenv_flag,
    normalize_slice,
    prod,
    row_major_strides,
)


def validate_config(config_cls, **kwargs):
    from tensorview.utils.logging import default_logger

    current_config = dict()
    for k, v in kwargs.items():
        if k in config_cls.model_fields:
            current_config[k] = v
        else:
            default_logger.warning(
                f"Ignoring unknown kwarg '{k}' during {config_cls.__name__} creation"
            )

    return config_cls(**current_config)


__all__ = [
    "DEBUG",
    "add_indices",
    "argfix",
    "getenv",
    "getenv_flag",
    "normalize_slice",
    "prod",
    "row_major_strides",
    "validate_config",
]
