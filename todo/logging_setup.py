"""Logging configuration for todo-cli."""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[str, int]) -> int:
    """Turn a level name such as "debug" into its logging constant.

    Unknown names fall back to WARNING.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(level: Union[str, int] = logging.WARNING) -> None:
    """Send log records to stderr at ``level``.

    Call this once, before the first log call. Handlers already attached
    to the root logger are removed so repeated calls do not duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(level))

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    logging.captureWarnings(True)
