import logging
from typing import Any, Type

from tensorview.utils.helpers import DEBUG


# Set up Logger
class Logger:  # noqa: D101
    def __init__(self, name: str = "tensorview"):
        """Initializes the Logger instance.

        Wraps a standard `logging.Logger` with a single console handler.
        The level follows the `DEBUG` environment variable.
        """
        self.base = logging.getLogger(name)
        self.base.propagate = False
        self.base.setLevel(logging.DEBUG if DEBUG >= 2 else logging.WARNING)

        if not self.base.handlers:
            logFormatter = logging.Formatter(
                "%(filename)s:%(lineno)d - [%(levelname)s]: %(message)s"
            )
            consoleHandler = logging.StreamHandler()
            consoleHandler.setFormatter(logFormatter)
            self.base.addHandler(consoleHandler)

    def debug(self, msg: str):
        self.base.debug(msg, stacklevel=2)

    def error(self, msg: str):
        self.base.error(msg, stacklevel=2)

    def warning(self, msg: str):
        self.base.warning(msg, stacklevel=2)

    def check_and_raise(self, msg: str, error_type: Type[Exception], condition: Any):
        if not condition:
            self.base.error(msg, stacklevel=2)
            raise error_type(msg)


default_logger = Logger()
