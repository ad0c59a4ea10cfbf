# src/taskpad/tasks/task_query.py

"""
Read-only view over the task collection.

Everything here is a pure function of its inputs: filtering, searching,
sorting, and validation/normalisation of form drafts. Nothing mutates a
Task or talks to storage.
"""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date

from .errors import ValidationError
from .task_codec import parse_due_date
from .task_models import (
    Category,
    Priority,
    SearchScope,
    SortKey,
    Task,
    TaskDraft,
    TaskFields,
    TaskFilter,
)

TITLE_REQUIRED = "Title is required"
INVALID_DATE = "Please enter a valid date"
UNKNOWN_PRIORITY = "Unknown priority"
UNKNOWN_CATEGORY = "Unknown category"

__all__ = [
    "TaskQuery",
    "describe_view",
    "draft_from_task",
    "filter_tasks",
    "matches_search",
    "normalize_draft",
    "parse_due_date",
    "query_tasks",
    "sort_tasks",
    "validate_draft",
]


@dataclass(frozen=True, slots=True)
class TaskQuery:
    """Transient UI controls that shape the visible list."""

    task_filter: TaskFilter = TaskFilter.ALL
    sort_key: SortKey = SortKey.DATE_CREATED
    search: str = ""

    def with_changes(self, **changes) -> TaskQuery:
        return replace(self, **changes)


# ---- filtering ----


def matches_search(task: Task, search: str) -> bool:
    """Case-insensitive substring match on title or description."""
    needle = search.strip().casefold()
    if not needle:
        return True
    if needle in task.title.casefold():
        return True
    return bool(task.description) and needle in task.description.casefold()


def _matches_filter(task: Task, task_filter: TaskFilter) -> bool:
    if task_filter == TaskFilter.ACTIVE:
        return not task.completed
    if task_filter == TaskFilter.COMPLETED:
        return task.completed
    if task_filter == TaskFilter.HIGH_PRIORITY:
        return task.priority == Priority.HIGH
    return True


def filter_tasks(
    tasks: Iterable[Task],
    task_filter: TaskFilter | str = TaskFilter.ALL,
    search: str = "",
    *,
    search_scope: SearchScope = SearchScope.ALL_FILTERS,
) -> list[Task]:
    task_filter = TaskFilter(task_filter)
    apply_search = bool(search.strip()) and (
        search_scope == SearchScope.ALL_FILTERS or task_filter == TaskFilter.ALL
    )
    out: list[Task] = []
    for task in tasks:
        if not _matches_filter(task, task_filter):
            continue
        if apply_search and not matches_search(task, search):
            continue
        out.append(task)
    return out


# ---- sorting ----


def _base_letters(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _title_key(task: Task) -> tuple[str, str, str]:
    # accents and case only break ties, so "Émile" sorts with "emile"
    folded = task.title.casefold()
    return (locale.strxfrm(_base_letters(folded)), locale.strxfrm(folded), task.title)


def _due_key(task: Task) -> tuple[bool, date]:
    # undated tasks go last
    return (task.due_date is None, task.due_date or date.min)


def sort_tasks(tasks: Iterable[Task], sort_key: SortKey | str = SortKey.DATE_CREATED) -> list[Task]:
    """Stable sort; ties keep their input order."""
    sort_key = SortKey(sort_key)
    items = list(tasks)
    if sort_key == SortKey.TITLE:
        return sorted(items, key=_title_key)
    if sort_key == SortKey.PRIORITY:
        return sorted(items, key=lambda t: t.priority.rank)
    if sort_key == SortKey.DUE_DATE:
        return sorted(items, key=_due_key)
    # newest first
    return sorted(items, key=lambda t: t.created_at, reverse=True)


def query_tasks(
    tasks: Iterable[Task],
    query: TaskQuery | None = None,
    *,
    search_scope: SearchScope = SearchScope.ALL_FILTERS,
) -> list[Task]:
    """Filter, search and sort in one pass. Returns a new list."""
    query = query or TaskQuery()
    visible = filter_tasks(tasks, query.task_filter, query.search, search_scope=search_scope)
    return sort_tasks(visible, query.sort_key)


def describe_view(visible: list[Task], query: TaskQuery) -> str:
    n = len(visible)
    text = f"Showing {n} task{'' if n == 1 else 's'}"
    if query.task_filter != TaskFilter.ALL:
        text += f" ({query.task_filter.value})"
    if query.search.strip():
        text += f' matching "{query.search}"'
    return text


# ---- form drafts ----


def validate_draft(draft: TaskDraft) -> dict[str, str]:
    """
    Check a draft and return field -> message for every failing field.

    An empty dict means the draft is valid. Never raises.
    """
    errors: dict[str, str] = {}

    if not (draft.title or "").strip():
        errors["title"] = TITLE_REQUIRED

    if (draft.due_date or "").strip():
        try:
            parse_due_date(draft.due_date)
        except ValueError:
            errors["due_date"] = INVALID_DATE

    priority = (draft.priority or "").strip().lower()
    if priority and priority not in {p.value for p in Priority}:
        errors["priority"] = UNKNOWN_PRIORITY

    category = (draft.category or "").strip().lower()
    if category and category not in {c.value for c in Category}:
        errors["category"] = UNKNOWN_CATEGORY

    return errors


def normalize_draft(draft: TaskDraft) -> TaskFields:
    """Validated, trimmed, typed fields. Raises ValidationError on bad input."""
    errors = validate_draft(draft)
    if errors:
        raise ValidationError(errors)

    return TaskFields(
        title=draft.title.strip(),
        description=(draft.description or "").strip(),
        due_date=parse_due_date(draft.due_date),
        priority=Priority.from_raw(draft.priority),
        category=Category.from_raw(draft.category),
    )


def draft_from_task(task: Task) -> TaskDraft:
    """Pre-fill the edit form from an existing task."""
    return TaskDraft(
        title=task.title,
        description=task.description or "",
        due_date=task.due_date.isoformat() if task.due_date else "",
        priority=task.priority.value,
        category=task.category.value,
    )
