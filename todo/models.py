"""Core models for todo-cli.

This module defines the core data structure for the task list:
- Task: A dataclass representing one user-entered item
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


def local_now() -> datetime:
    """Return the current local time as a timezone-aware datetime."""
    return datetime.now().astimezone()


def is_zero_time(value: datetime) -> bool:
    """Return True for the 0001-01-01 00:00 placeholder older files use for "unset"."""
    return value.replace(tzinfo=None) == datetime.min


@dataclass
class Task:
    """Task model representing a single todo item.

    Attributes:
        description: Text supplied by the user
        done: Whether the task has been completed
        created_at: Timestamp when the task was created
        completed_at: Timestamp when the task was completed, None while pending
    """

    description: str
    done: bool = False
    created_at: datetime = field(default_factory=local_now)
    completed_at: Optional[datetime] = None

    def mark_done(self, when: datetime) -> None:
        """Mark the task as done at ``when``.

        A task that is already done keeps its original completion time.
        The completion time is never earlier than the creation time.
        """
        if self.done and self.completed_at is not None:
            return
        self.done = True
        self.completed_at = max(when, self.created_at)
