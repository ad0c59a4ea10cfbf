# src/taskpad/backends/local_backend.py

"""
Local-device persistence: the whole collection lives in one JSON blob.

File layout:
  { "<store key>": [ {id, title, description, dueDate, ...}, ... ] }

Every write replaces the whole blob (temp file + os.replace), so there are
no partial writes and the last save wins. Calls never suspend: the file
I/O happens synchronously inside the awaited method.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from ..tasks.errors import PersistenceError
from ..tasks.task_codec import (
    changes_to_record,
    format_timestamp,
    task_from_record,
    task_to_record,
)
from ..tasks.task_models import Task, TaskFields

logger = logging.getLogger(__name__)

DEFAULT_STORE_KEY = "tasks"


class LocalTaskBackend:
    def __init__(self, path: str | Path, *, key: str = DEFAULT_STORE_KEY) -> None:
        self._path = Path(path)
        self._key = key or DEFAULT_STORE_KEY
        logger.info("LocalTaskBackend ready path=%s key=%s", self._path, self._key)

    @property
    def path(self) -> Path:
        return self._path

    # ---- blob I/O ----

    def _read_blob(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected content in {self._path}: expected a JSON object")
        return data

    def _raw_records(self, blob: dict[str, Any]) -> list[Any]:
        raw_tasks = blob.get(self._key) or []
        if not isinstance(raw_tasks, list):
            raise PersistenceError(f"Unexpected value under {self._key!r} in {self._path}")
        return raw_tasks

    def _write_blob(self, blob: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(blob, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise PersistenceError(f"Could not write {self._path}: {e}") from e
        with contextlib.suppress(Exception):
            # Best-effort: task notes are personal data, keep the file private.
            os.chmod(self._path, 0o600)

    def load_all_sync(self) -> list[Task]:
        out: list[Task] = []
        for raw in self._raw_records(self._read_blob()):
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object stored task: %r", raw)
                continue
            try:
                out.append(task_from_record(raw))
            except ValueError:
                logger.warning("Skipping malformed stored task: %r", raw.get("id"))
        return out

    def save_all_sync(self, tasks: list[Task]) -> None:
        """Replace the stored collection wholesale."""
        blob = self._read_blob()
        blob[self._key] = [task_to_record(t) for t in tasks]
        self._write_blob(blob)
        logger.debug("Saved %d tasks to %s", len(tasks), self._path)

    # ---- TaskBackend ----
    #
    # Mutations edit the raw record list: entries that fail to parse are
    # written back untouched.

    async def load_all(self) -> list[Task]:
        return self.load_all_sync()

    async def save_all(self, tasks: list[Task]) -> None:
        self.save_all_sync(tasks)

    async def create(self, fields: TaskFields, *, now: datetime) -> Task:
        blob = self._read_blob()
        records = self._raw_records(blob)
        task = Task(
            id=uuid.uuid4().hex,
            title=fields.title,
            description=fields.description,
            due_date=fields.due_date,
            priority=fields.priority,
            category=fields.category,
            completed=fields.completed,
            created_at=now,
            updated_at=now,
        )
        blob[self._key] = [*records, task_to_record(task)]
        self._write_blob(blob)
        logger.debug("Stored task id=%s in %s", task.id, self._path)
        return task

    async def update(self, task_id: str, changes: dict[str, Any], *, now: datetime) -> bool:
        blob = self._read_blob()
        records = self._raw_records(blob)
        for i, raw in enumerate(records):
            if _matches_id(raw, task_id):
                records[i] = {
                    **raw,
                    **changes_to_record(changes),
                    "updatedAt": format_timestamp(now),
                }
                blob[self._key] = records
                self._write_blob(blob)
                return True
        return False

    async def delete(self, task_id: str) -> bool:
        blob = self._read_blob()
        records = self._raw_records(blob)
        kept = [raw for raw in records if not _matches_id(raw, task_id)]
        if len(kept) == len(records):
            return False
        blob[self._key] = kept
        self._write_blob(blob)
        return True

    async def aclose(self) -> None:
        return


def _matches_id(raw: Any, task_id: str) -> bool:
    return isinstance(raw, dict) and raw.get("id") is not None and str(raw["id"]) == task_id
