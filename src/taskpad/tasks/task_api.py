# src/taskpad/tasks/task_api.py

"""
User intents on top of TaskStore.

Each helper validates, calls the store, and reports the outcome through
state.notifier. Failures never raise to the shell: the caller keeps its
draft/filter/search untouched and the user can simply retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..core.state import AppState
from .errors import NotFoundError, PersistenceError, ValidationError
from .task_models import Task, TaskDraft
from .task_query import draft_from_task, normalize_draft, query_tasks, validate_draft

logger = logging.getLogger(__name__)

FORM_ERRORS_NOTICE = "Please fix the errors in the form"


@dataclass(slots=True)
class SubmitResult:
    task: Task | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.task is not None


def visible_tasks(state: AppState) -> list[Task]:
    return query_tasks(state.store.tasks(), state.query, search_scope=state.search_scope)


async def refresh_tasks(state: AppState) -> bool:
    try:
        await state.store.load()
    except PersistenceError as e:
        state.notifier.error(f"Could not load tasks: {e}")
        return False
    return True


async def _on_stale(state: AppState, e: NotFoundError) -> None:
    logger.info("Stale task id=%s; refreshing", e.task_id)
    state.notifier.error(f"{e}. The list was refreshed.")
    await refresh_tasks(state)


def start_edit(state: AppState, task_id: str) -> TaskDraft | None:
    """Put the shell into edit mode for task_id; returns the pre-filled draft."""
    task = state.store.get(task_id)
    if task is None:
        state.notifier.error(f"Task not found: {task_id}")
        return None
    state.editing_task_id = task.id
    return draft_from_task(task)


def cancel_edit(state: AppState) -> None:
    state.editing_task_id = None


async def submit_draft(state: AppState, draft: TaskDraft) -> SubmitResult:
    """
    Add a new task, or update the one being edited.

    Validation errors are returned per field (and announced once); the
    store is not touched in that case.
    """
    errors = validate_draft(draft)
    if errors:
        state.notifier.error(FORM_ERRORS_NOTICE)
        return SubmitResult(errors=errors)

    fields = normalize_draft(draft)
    editing_id = state.editing_task_id

    try:
        if editing_id:
            task = await state.store.update(editing_id, **fields.as_changes())
            state.notifier.success("Task updated successfully!")
        else:
            task = await state.store.add(fields)
            state.notifier.success("Task added successfully!")
    except ValidationError as e:
        state.notifier.error(FORM_ERRORS_NOTICE)
        return SubmitResult(errors=e.errors)
    except NotFoundError as e:
        state.editing_task_id = None
        await _on_stale(state, e)
        return SubmitResult()
    except PersistenceError as e:
        state.notifier.error(str(e))
        return SubmitResult()

    state.editing_task_id = None
    return SubmitResult(task=task)


async def toggle_task(state: AppState, task_id: str) -> Task | None:
    try:
        task = await state.store.toggle_complete(task_id)
    except NotFoundError as e:
        await _on_stale(state, e)
        return None
    except PersistenceError as e:
        state.notifier.error(str(e))
        return None
    state.notifier.success("Task updated successfully!")
    return task


async def delete_task(state: AppState, task_id: str) -> bool:
    try:
        await state.store.remove(task_id)
    except NotFoundError as e:
        await _on_stale(state, e)
        return False
    except PersistenceError as e:
        state.notifier.error(str(e))
        return False
    if state.editing_task_id == task_id:
        state.editing_task_id = None
    state.notifier.success("Task deleted successfully!")
    return True
