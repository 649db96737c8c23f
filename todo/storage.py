"""Storage layer for todo-cli.

This module provides an abstract storage interface and a JSON file
implementation for persisting the task list. The whole list is read or
written in one go; there is no locking, so two processes writing the same
file concurrently race and the last writer wins.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from todo.config import DEFAULT_TODO_FILE
from todo.exceptions import DecodeError, StorageError
from todo.models import Task

logger = logging.getLogger(__name__)

FILE_MODE = 0o600

# Older versions wrote an uncompleted timestamp as the zero time.
_ZERO_TIME_PREFIX = "0001-01-01T00:00:00"


class Storage(ABC):
    """Abstract base class for task list storage implementations."""

    @abstractmethod
    def save(self, tasks: List[Task]) -> None:
        """Replace the stored task list with ``tasks``.

        Args:
            tasks: Tasks in display order
        """
        pass

    @abstractmethod
    def load(self) -> Optional[List[Task]]:
        """Load the stored task list.

        Returns:
            Tasks in display order, or None if nothing has been stored yet
        """
        pass

    @abstractmethod
    def delete(self) -> None:
        """Delete all data from storage."""
        pass


def _encode_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _decode_time(raw: Any, field_name: str, position: int) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"record {position}: '{field_name}' must be a timestamp string")
    try:
        value = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"record {position}: bad '{field_name}' timestamp {raw!r}") from exc
    # Naive timestamps are taken as local time.
    return value if value.tzinfo is not None else value.astimezone()


def task_to_record(task: Task) -> Dict[str, Any]:
    """Convert a Task to its JSON record."""
    return {
        "task": task.description,
        "done": task.done,
        "created_at": _encode_time(task.created_at),
        "completed_at": _encode_time(task.completed_at),
    }


def task_from_record(record: Any, position: int) -> Task:
    """Convert one JSON record to a Task.

    Args:
        record: Decoded JSON value for a single task
        position: 1-based position of the record, used in error messages

    Raises:
        ValueError: If the record is not a well-formed task
    """
    if not isinstance(record, dict):
        raise ValueError(f"record {position}: expected an object")

    description = record.get("task")
    if not isinstance(description, str):
        raise ValueError(f"record {position}: 'task' must be a string")

    done = record.get("done", False)
    if not isinstance(done, bool):
        raise ValueError(f"record {position}: 'done' must be a boolean")

    created_at = _decode_time(record.get("created_at"), "created_at", position)

    completed_at = None
    raw_completed = record.get("completed_at")
    if raw_completed is not None and not (
        isinstance(raw_completed, str) and raw_completed.startswith(_ZERO_TIME_PREFIX)
    ):
        completed_at = _decode_time(raw_completed, "completed_at", position)

    return Task(
        description=description,
        done=done,
        created_at=created_at,
        completed_at=completed_at,
    )


class JsonStorage(Storage):
    """JSON file-based storage implementation.

    The file holds a JSON array with one object per task, in list order.

    Attributes:
        file_path: Path to the JSON storage file
    """

    def __init__(self, file_path: Optional[Union[str, Path]] = None):
        """Initialize JsonStorage with a file path.

        Args:
            file_path: Path to the JSON file for storage. If None, uses
                      the default file name in the working directory
        """
        if file_path is None:
            file_path = DEFAULT_TODO_FILE
        self.file_path = Path(file_path)

    def save(self, tasks: List[Task]) -> None:
        """Write ``tasks`` to the JSON file, replacing any prior content.

        The data goes to a temporary file in the same directory, which is
        then renamed over the target, so readers see either the old or the
        new list. The file is readable and writable by the owner only.

        Raises:
            StorageError: If the file could not be written
        """
        records = [task_to_record(task) for task in tasks]
        try:
            payload = (json.dumps(records, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
        except UnicodeError as exc:
            raise StorageError("failed to encode todo file", self.file_path) from exc

        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.file_path.parent,
                prefix=f".{self.file_path.name}.",
                suffix=".tmp",
            )
        except OSError as exc:
            raise StorageError("failed to write todo file", self.file_path) from exc

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, self.file_path)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError("failed to write todo file", self.file_path) from exc

        logger.debug("Saved %d task(s) to %s", len(records), self.file_path)

    def load(self) -> Optional[List[Task]]:
        """Load tasks from the JSON file.

        Returns:
            List of Task objects, or None if the file doesn't exist
            or is empty.

        Raises:
            StorageError: If the file exists but could not be read
            DecodeError: If the content is not a valid task list
        """
        try:
            content = self.file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No todo file at %s, starting empty", self.file_path)
            return None
        except UnicodeDecodeError as exc:
            raise DecodeError("file is not valid UTF-8", self.file_path) from exc
        except OSError as exc:
            raise StorageError("failed to read todo file", self.file_path) from exc

        if not content.strip():
            return None

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"invalid JSON ({exc.msg} at line {exc.lineno})", self.file_path) from exc
        except RecursionError as exc:
            raise DecodeError("invalid JSON (nesting too deep)", self.file_path) from exc

        if not isinstance(data, list):
            raise DecodeError("expected a JSON array of tasks", self.file_path)

        try:
            tasks = [task_from_record(record, i) for i, record in enumerate(data, start=1)]
        except ValueError as exc:
            raise DecodeError(str(exc), self.file_path) from exc

        logger.debug("Loaded %d task(s) from %s", len(tasks), self.file_path)
        return tasks

    def delete(self) -> None:
        """Delete the JSON storage file.

        If the file doesn't exist, this method does nothing.
        """
        if self.file_path.exists():
            self.file_path.unlink()
