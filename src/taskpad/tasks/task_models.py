# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import StrEnum


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: object) -> Priority:
        """Lenient read for stored values: unknown -> MEDIUM."""
        if isinstance(raw, cls):
            return raw
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM

    @property
    def rank(self) -> int:
        # high sorts first
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 1, Priority.MEDIUM: 2, Priority.LOW: 3}


class Category(StrEnum):
    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    OTHER = "other"

    @classmethod
    def from_raw(cls, raw: object) -> Category:
        """Lenient read for stored values: unknown -> PERSONAL."""
        if isinstance(raw, cls):
            return raw
        if not raw:
            return cls.PERSONAL
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.PERSONAL


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    HIGH_PRIORITY = "high-priority"


class SortKey(StrEnum):
    DATE_CREATED = "dateCreated"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    TITLE = "title"


class SearchScope(StrEnum):
    """
    Where free-text search applies.

    - ALL_FILTERS: search is intersected with every filter.
    - ALL_ONLY: search only narrows the "all" filter (legacy behaviour).
    """

    ALL_FILTERS = "all-filters"
    ALL_ONLY = "all-only"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    due_date: date | None
    priority: Priority
    category: Category
    completed: bool
    created_at: datetime
    updated_at: datetime

    def with_changes(self, **changes) -> Task:
        return replace(self, **changes)


@dataclass(slots=True)
class TaskDraft:
    """
    Raw form input, exactly as typed by the user.

    All values are strings; nothing here is validated.
    """

    title: str = ""
    description: str = ""
    due_date: str = ""
    priority: str = Priority.MEDIUM.value
    category: str = Category.PERSONAL.value


@dataclass(frozen=True, slots=True)
class TaskFields:
    """A draft that passed validation, with typed values."""

    title: str
    description: str = ""
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    category: Category = Category.PERSONAL
    completed: bool = False

    def as_changes(self) -> dict[str, object]:
        return {
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date,
            "priority": self.priority,
            "category": self.category,
        }


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int = 0
    completed: int = 0
    pending: int = 0
    high_priority: int = 0


# Fields a caller may change through TaskStore.update().
MUTABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "due_date", "priority", "category", "completed"}
)

