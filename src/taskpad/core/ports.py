# src/taskpad/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage and the user-facing shell swappable and makes testing easier.
"""

from datetime import datetime
from typing import Any, Protocol

from ..tasks.task_models import Task, TaskFields


class TaskBackend(Protocol):
    """
    Persistence collaborator for TaskStore.

    Implementations raise on transport/storage failure and return False when
    the backend answers but refuses an update/delete. The store turns both
    into PersistenceError.
    """

    async def load_all(self) -> list[Task]: ...

    async def create(self, fields: TaskFields, *, now: datetime) -> Task: ...

    async def update(self, task_id: str, changes: dict[str, Any], *, now: datetime) -> bool: ...

    async def delete(self, task_id: str) -> bool: ...

    async def aclose(self) -> None: ...


class Notifier(Protocol):
    """User-visible success/error notices (toast-like)."""

    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
