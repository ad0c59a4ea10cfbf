# src/taskpad/backends/remote_backend.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..tasks.errors import PersistenceError
from ..tasks.task_codec import (
    RECORD_FIELDS,
    changes_to_record,
    fields_to_record,
    format_timestamp,
    task_from_record,
)
from ..tasks.task_models import SortKey, Task, TaskFields, TaskFilter
from .record_client import RecordStoreClient

logger = logging.getLogger(__name__)

TASK_TABLE = "task"

_FILTER_CONDITIONS: dict[TaskFilter, dict[str, Any]] = {
    TaskFilter.COMPLETED: {"fieldName": "completed", "operator": "ExactMatch", "values": [True]},
    TaskFilter.ACTIVE: {"fieldName": "completed", "operator": "ExactMatch", "values": [False]},
    TaskFilter.HIGH_PRIORITY: {"fieldName": "priority", "operator": "ExactMatch", "values": ["high"]},
}

_ORDER_BY: dict[SortKey, dict[str, str]] = {
    SortKey.TITLE: {"fieldName": "title", "SortType": "ASC"},
    SortKey.PRIORITY: {"fieldName": "priority", "SortType": "ASC"},
    SortKey.DUE_DATE: {"fieldName": "dueDate", "SortType": "ASC"},
    SortKey.DATE_CREATED: {"fieldName": "createdAt", "SortType": "DESC"},
}


def _record_id(task_id: str) -> int:
    try:
        return int(task_id)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Invalid record id: {task_id!r}") from e


class RemoteTaskBackend:
    """
    TaskBackend over the hosted record store ("task" table).

    The server assigns Id; Task.id is its string form. Server-side filter and
    sort mirror the query engine's semantics, but the store always loads the
    full collection and does its own filtering.
    """

    def __init__(self, client: RecordStoreClient, *, page_size: int = 100) -> None:
        self._client = client
        self._page_size = max(1, int(page_size))

    def _query_params(
        self, task_filter: TaskFilter | None, sort_key: SortKey | None, offset: int
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "fields": list(RECORD_FIELDS),
            "pagingInfo": {"limit": self._page_size, "offset": offset},
        }
        if task_filter is not None:
            cond = _FILTER_CONDITIONS.get(TaskFilter(task_filter))
            if cond is not None:
                params["where"] = [cond]
        key = SortKey(sort_key) if sort_key is not None else SortKey.DATE_CREATED
        params["orderBy"] = [_ORDER_BY[key]]
        return params

    async def list_tasks(
        self,
        task_filter: TaskFilter | None = None,
        sort_key: SortKey | None = None,
    ) -> list[Task]:
        out: list[Task] = []
        offset = 0
        while True:
            resp = await self._client.fetch_records(
                TASK_TABLE, self._query_params(task_filter, sort_key, offset)
            )
            rows = resp.get("data") or []
            if not isinstance(rows, list):
                rows = []
            for row in rows:
                if not isinstance(row, dict):
                    continue
                try:
                    out.append(task_from_record(row, id_key="Id"))
                except ValueError:
                    logger.warning("Skipping malformed task record Id=%r", row.get("Id"))
            if len(rows) < self._page_size:
                break
            offset += self._page_size
        logger.debug("Fetched %d task records", len(out))
        return out

    # ---- TaskBackend ----

    async def load_all(self) -> list[Task]:
        return await self.list_tasks()

    async def create(self, fields: TaskFields, *, now: datetime) -> Task:
        record = fields_to_record(fields, now=now)
        resp = await self._client.create_record(TASK_TABLE, {"records": [record]})

        results = resp.get("results") or []
        first = results[0] if results and isinstance(results[0], dict) else {}
        if not (resp.get("success") and first.get("success")):
            raise PersistenceError(str(first.get("message") or "Failed to create task"))

        data = first.get("data") or {}
        try:
            return task_from_record({**record, **data}, id_key="Id")
        except ValueError as e:
            raise PersistenceError(f"Record store returned an invalid task: {e}") from e

    async def update(self, task_id: str, changes: dict[str, Any], *, now: datetime) -> bool:
        record = {
            "Id": _record_id(task_id),
            **changes_to_record(changes),
            "updatedAt": format_timestamp(now),
        }
        resp = await self._client.update_record(TASK_TABLE, {"records": [record]})
        return bool(resp.get("success"))

    async def delete(self, task_id: str) -> bool:
        resp = await self._client.delete_record(TASK_TABLE, {"RecordIds": [_record_id(task_id)]})
        return bool(resp.get("success"))

    async def aclose(self) -> None:
        await self._client.aclose()
