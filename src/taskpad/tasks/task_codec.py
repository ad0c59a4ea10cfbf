# src/taskpad/tasks/task_codec.py

"""
Mapping between Task objects and stored records.

Both backends store the same camelCase field surface:
  id/Id, title, description, dueDate, priority, category,
  completed, createdAt, updatedAt

The remote record store names the identifier "Id" and keeps it numeric;
Task.id is always its string form.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any

from .task_models import Category, Priority, Task, TaskFields

RECORD_FIELDS: tuple[str, ...] = (
    "Id",
    "title",
    "description",
    "dueDate",
    "priority",
    "category",
    "completed",
    "createdAt",
    "updatedAt",
)

# Task attribute -> record field
_FIELD_NAMES: dict[str, str] = {
    "title": "title",
    "description": "description",
    "due_date": "dueDate",
    "priority": "priority",
    "category": "category",
    "completed": "completed",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_due_date(raw: object) -> date | None:
    """
    Parse a due date.

    Accepts a date, a datetime, an ISO calendar date ("2026-10-18") or an
    ISO datetime ("2026-10-18T09:30:00Z"). Blank -> None.
    Raises ValueError for anything else.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    s = str(raw).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError:
        return datetime.fromisoformat(s).date()


def parse_timestamp(raw: object) -> datetime | None:
    """ISO string or epoch seconds -> aware UTC datetime. Blank -> None."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, int | float) and not isinstance(raw, bool):
        return datetime.fromtimestamp(float(raw), tz=UTC)
    else:
        dt = datetime.fromisoformat(str(raw).strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_timestamp(dt: datetime) -> str:
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _format_value(attr: str, value: Any) -> Any:
    if value is None:
        return None
    if attr == "due_date":
        return value.isoformat()
    if attr in ("created_at", "updated_at"):
        return format_timestamp(value)
    if attr in ("priority", "category"):
        return str(value)
    return value


def task_from_record(raw: Mapping[str, Any], *, id_key: str = "id") -> Task:
    """
    Build a Task from a stored record.

    Lenient about optional fields (defaults for priority/category, empty
    description, updatedAt falls back to createdAt) but raises ValueError
    when the identifier, title or creation time is missing or unparsable.
    """
    raw_id = raw.get(id_key)
    if raw_id is None or str(raw_id).strip() == "":
        raise ValueError(f"record without {id_key}")

    title = raw.get("title")
    if title is None:
        raise ValueError(f"record {raw_id} without title")

    created_at = parse_timestamp(raw.get("createdAt"))
    if created_at is None:
        raise ValueError(f"record {raw_id} without createdAt")
    updated_at = parse_timestamp(raw.get("updatedAt")) or created_at

    return Task(
        id=str(raw_id),
        title=str(title),
        description=str(raw.get("description") or ""),
        due_date=parse_due_date(raw.get("dueDate")),
        priority=Priority.from_raw(raw.get("priority")),
        category=Category.from_raw(raw.get("category")),
        completed=bool(raw.get("completed") or False),
        created_at=created_at,
        updated_at=updated_at,
    )


def task_to_record(task: Task, *, id_key: str = "id") -> dict[str, Any]:
    out: dict[str, Any] = {id_key: task.id}
    for attr, name in _FIELD_NAMES.items():
        out[name] = _format_value(attr, getattr(task, attr))
    return out


def fields_to_record(fields: TaskFields, *, now: datetime) -> dict[str, Any]:
    """Record body for a create call (no identifier yet)."""
    return {
        "title": fields.title,
        "description": fields.description,
        "dueDate": _format_value("due_date", fields.due_date),
        "priority": str(fields.priority),
        "category": str(fields.category),
        "completed": bool(fields.completed),
        "createdAt": format_timestamp(now),
    }


def changes_to_record(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Task attribute changes -> record field changes."""
    out: dict[str, Any] = {}
    for attr, value in changes.items():
        name = _FIELD_NAMES.get(attr)
        if name is None:
            raise ValueError(f"unknown task field: {attr}")
        out[name] = _format_value(attr, value)
    return out
