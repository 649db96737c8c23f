"""Errors raised by the todo-cli core.

Every error derives from TodoError so the CLI can catch them in one place,
and each also derives from the closest built-in exception so plain
``except IndexError`` / ``except OSError`` / ``except ValueError`` still work.
"""

from pathlib import Path
from typing import Union


class TodoError(Exception):
    """Base class for all todo-cli errors."""


class InvalidIndexError(TodoError, IndexError):
    """A 1-based task number outside the range [1, length]."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        if length:
            message = f"invalid todo number: {index} (expected 1-{length})"
        else:
            message = f"invalid todo number: {index} (the list is empty)"
        super().__init__(message)


class StorageError(TodoError, OSError):
    """Reading or writing the task file failed."""

    def __init__(self, message: str, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class DecodeError(TodoError, ValueError):
    """The task file exists but its content is not a valid task list."""

    def __init__(self, message: str, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")
