# src/taskpad/tasks/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for task store / query errors."""


class ValidationError(TaskError, ValueError):
    """A draft failed field checks. `errors` maps field name -> message."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors)) or "draft"
        super().__init__(f"Invalid task fields: {fields}")


class NotFoundError(TaskError, KeyError):
    """A mutation targeted an id that is not in the collection (stale view)."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(task_id)

    def __str__(self) -> str:
        return f"Task not found: {self.task_id}"


class PersistenceError(TaskError):
    """The backing store is unreachable or rejected the write. Safe to retry."""
