"""Task store holding the ordered task list.

This module provides the TaskStore class: an in-memory, ordered list of
tasks with add, complete and delete operations, loaded from and written
back to a Storage backend. Tasks are addressed by their 1-based position
in the list. Positions are not stable identifiers: deleting task #2
renumbers every task after it.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple, Union

from todo.exceptions import InvalidIndexError
from todo.models import Task, local_now
from todo.storage import JsonStorage, Storage

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TaskStore:
    """Ordered task list with file persistence.

    A process typically calls load() once, applies at most one of add(),
    complete() or delete(), calls store() if something changed, then reads
    the tasks for display.

    Attributes:
        storage: Storage backend for persisting tasks
        tasks: Tasks in display order
    """

    def __init__(self, storage: Optional[Storage] = None, clock: Optional[Clock] = None):
        """Initialize TaskStore with a storage backend.

        Args:
            storage: Storage implementation to use. If None, uses JsonStorage
                    with the default file path.
            clock: Callable returning the current aware datetime. If None,
                  uses local time.
        """
        self.storage = storage or JsonStorage()
        self.tasks: List[Task] = []
        self._clock = clock or local_now

    @classmethod
    def from_path(cls, path: Union[str, Path], clock: Optional[Clock] = None) -> "TaskStore":
        """Create a TaskStore backed by a JSON file at ``path``."""
        return cls(JsonStorage(path), clock=clock)

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def _position(self, index: int) -> int:
        """Convert a 1-based task number to a list position.

        Raises:
            InvalidIndexError: If index is outside [1, len(self)]
        """
        if index <= 0 or index > len(self.tasks):
            raise InvalidIndexError(index, len(self.tasks))
        return index - 1

    def get(self, index: int) -> Task:
        """Return the task with the given 1-based number."""
        return self.tasks[self._position(index)]

    def add(self, description: str) -> Task:
        """Append a new pending task.

        No validation of the description is done here; rejecting empty
        text is up to the caller.

        Returns:
            The created Task
        """
        task = Task(description=description, created_at=self._clock())
        self.tasks.append(task)
        logger.debug("Added task #%d", len(self.tasks))
        return task

    def complete(self, index: int) -> Task:
        """Mark the task with the given 1-based number as done.

        Returns:
            The completed Task

        Raises:
            InvalidIndexError: If index is outside [1, len(self)]
        """
        task = self.tasks[self._position(index)]
        task.mark_done(self._clock())
        logger.debug("Completed task #%d", index)
        return task

    def delete(self, index: int) -> Task:
        """Remove the task with the given 1-based number.

        Every later task moves down one position.

        Returns:
            The removed Task

        Raises:
            InvalidIndexError: If index is outside [1, len(self)]
        """
        task = self.tasks.pop(self._position(index))
        logger.debug("Deleted task #%d", index)
        return task

    def counts(self) -> Tuple[int, int, int]:
        """Return (total, completed, pending) task counts."""
        completed = sum(1 for task in self.tasks if task.done)
        return len(self.tasks), completed, len(self.tasks) - completed

    def load(self) -> None:
        """Replace the in-memory list with the stored one.

        A missing or empty file leaves the list unchanged. If the file
        cannot be read or decoded the error propagates and the list is
        left unchanged.

        Raises:
            StorageError: If the file exists but could not be read
            DecodeError: If the file content is not a valid task list
        """
        loaded = self.storage.load()
        if loaded is not None:
            self.tasks = loaded

    def store(self) -> None:
        """Write the full task list to storage, replacing prior content.

        Raises:
            StorageError: If the file could not be written
        """
        self.storage.save(list(self.tasks))
