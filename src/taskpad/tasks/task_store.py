# src/taskpad/tasks/task_store.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import TaskBackend
from .errors import NotFoundError, PersistenceError, ValidationError
from .task_codec import parse_due_date, utc_now
from .task_models import (
    MUTABLE_FIELDS,
    Category,
    Priority,
    Task,
    TaskDraft,
    TaskFields,
    TaskStats,
)
from .task_query import (
    INVALID_DATE,
    TITLE_REQUIRED,
    UNKNOWN_CATEGORY,
    UNKNOWN_PRIORITY,
    normalize_draft,
)

logger = logging.getLogger(__name__)

NOT_A_FLAG = "Must be true or false"


class TaskStore:
    """
    Session-owned task collection backed by an injected TaskBackend.

    Mutations are all-or-nothing:
    - the backend write happens first,
    - the in-memory collection changes only after the backend accepted it.

    Backend exceptions and refusals surface as PersistenceError; the previous
    collection is left untouched so the caller can retry.
    """

    def __init__(self, backend: TaskBackend) -> None:
        self._backend = backend
        self._tasks: list[Task] = []

    # ---- reads ----

    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    def stats(self) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        high = sum(1 for t in self._tasks if t.priority == Priority.HIGH)
        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            high_priority=high,
        )

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(task_id)

    @staticmethod
    def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
        unknown = set(changes) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update task fields: {', '.join(sorted(unknown))}")

        out: dict[str, Any] = {}
        errors: dict[str, str] = {}
        for name, value in changes.items():
            if name == "title":
                title = str(value or "").strip()
                if not title:
                    errors["title"] = TITLE_REQUIRED
                out[name] = title
            elif name == "description":
                out[name] = str(value or "").strip()
            elif name == "due_date":
                try:
                    out[name] = parse_due_date(value)
                except ValueError:
                    errors["due_date"] = INVALID_DATE
            elif name == "priority":
                try:
                    out[name] = Priority(str(value).strip().lower())
                except ValueError:
                    errors["priority"] = UNKNOWN_PRIORITY
            elif name == "category":
                try:
                    out[name] = Category(str(value).strip().lower())
                except ValueError:
                    errors["category"] = UNKNOWN_CATEGORY
            elif isinstance(value, bool):
                out[name] = value
            else:
                errors["completed"] = NOT_A_FLAG
        if errors:
            raise ValidationError(errors)
        return out

    # ---- public API ----

    async def load(self) -> list[Task]:
        """Replace the collection with the backend's. Keeps the old one on failure."""
        try:
            loaded = await self._backend.load_all()
        except PersistenceError:
            logger.warning("Task load failed; keeping %d tasks in memory", len(self._tasks))
            raise
        except Exception as e:
            logger.exception("Task load failed")
            raise PersistenceError(f"Could not load tasks: {e}") from e

        self._tasks = list(loaded)
        logger.info("Loaded %d tasks", len(self._tasks))
        return self.tasks()

    async def add(self, draft: TaskDraft | TaskFields) -> Task:
        fields = normalize_draft(draft) if isinstance(draft, TaskDraft) else draft
        if not fields.title.strip():
            raise ValidationError({"title": TITLE_REQUIRED})

        try:
            task = await self._backend.create(fields, now=utc_now())
        except PersistenceError:
            raise
        except Exception as e:
            logger.exception("Task create failed title=%r", fields.title)
            raise PersistenceError(f"Could not save task: {e}") from e

        self._tasks.append(task)
        logger.debug("Task added id=%s priority=%s due=%s", task.id, task.priority, task.due_date)
        return task

    async def update(self, task_id: str, **changes: Any) -> Task:
        self._index_of(task_id)
        clean = self._normalize_changes(changes)
        now = utc_now()

        try:
            ok = await self._backend.update(task_id, clean, now=now)
        except PersistenceError:
            raise
        except Exception as e:
            logger.exception("Task update failed id=%s", task_id)
            raise PersistenceError(f"Could not update task: {e}") from e
        if not ok:
            raise PersistenceError("The task store rejected the update.")

        # Re-resolve the index: the collection may have been reloaded while we awaited.
        idx = self._index_of(task_id)
        updated = self._tasks[idx].with_changes(**clean, updated_at=now)
        self._tasks[idx] = updated
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(clean))
        return updated

    async def toggle_complete(self, task_id: str) -> Task:
        task = self._tasks[self._index_of(task_id)]
        return await self.update(task_id, completed=not task.completed)

    async def remove(self, task_id: str) -> None:
        self._index_of(task_id)

        try:
            ok = await self._backend.delete(task_id)
        except PersistenceError:
            raise
        except Exception as e:
            logger.exception("Task delete failed id=%s", task_id)
            raise PersistenceError(f"Could not delete task: {e}") from e
        if not ok:
            raise PersistenceError("The task store rejected the delete.")

        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.debug("Task removed id=%s", task_id)

    async def close(self) -> None:
        await self._backend.aclose()
