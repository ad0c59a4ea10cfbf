# tests/test_remote_backend.py

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from taskpad.backends.record_client import RecordStoreClient
from taskpad.backends.remote_backend import RemoteTaskBackend
from taskpad.tasks.errors import PersistenceError
from taskpad.tasks.task_models import Priority, SortKey, TaskDraft, TaskFilter
from taskpad.tasks.task_store import TaskStore

BASE_URL = "https://records.example.test/api"


def _record(record_id: int, title: str, **extra) -> dict:
    rec = {
        "Id": record_id,
        "title": title,
        "description": "",
        "dueDate": None,
        "priority": "medium",
        "category": "personal",
        "completed": False,
        "createdAt": "2026-01-01T10:00:00Z",
        "updatedAt": "2026-01-01T10:00:00Z",
    }
    rec.update(extra)
    return rec


class FakeRecordService:
    """
    Minimal in-memory record store behind httpx.MockTransport.

    Records every request (method, path, json body) for assertions.
    """

    def __init__(self, records: list[dict] | None = None) -> None:
        self.records = {r["Id"]: r for r in records or []}
        self.requests: list[tuple[str, str, dict]] = []
        self.next_id = 100
        self.fail_with: int | None = None
        self.update_success = True

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        path = request.url.path.removeprefix("/api")
        self.requests.append((request.method, path, body))

        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"message": "boom"})

        if request.method == "POST" and path == "/tables/task/records/query":
            paging = body["pagingInfo"]
            rows = list(self.records.values())
            page = rows[paging["offset"] : paging["offset"] + paging["limit"]]
            return httpx.Response(200, json={"data": page})

        if request.method == "POST" and path == "/tables/task/records":
            rec = dict(body["records"][0])
            rec["Id"] = self.next_id
            self.next_id += 1
            self.records[rec["Id"]] = rec
            return httpx.Response(
                200, json={"success": True, "results": [{"success": True, "data": rec}]}
            )

        if request.method == "PATCH" and path == "/tables/task/records":
            rec = body["records"][0]
            if self.update_success:
                self.records[rec["Id"]].update(rec)
            return httpx.Response(200, json={"success": self.update_success})

        if request.method == "DELETE" and path == "/tables/task/records":
            for rid in body["RecordIds"]:
                self.records.pop(rid, None)
            return httpx.Response(200, json={"success": True})

        return httpx.Response(404)


def _backend(service: FakeRecordService, page_size: int = 100) -> RemoteTaskBackend:
    client = RecordStoreClient(
        BASE_URL,
        project_id="proj-1",
        public_key="pk-1",
        transport=httpx.MockTransport(service),
    )
    return RemoteTaskBackend(client, page_size=page_size)


@pytest.mark.asyncio
async def test_load_maps_records_to_tasks() -> None:
    service = FakeRecordService(
        [_record(7, "Buy cat food", dueDate="2026-10-20", priority="high", completed=True)]
    )
    backend = _backend(service)

    tasks = await backend.load_all()

    assert len(tasks) == 1
    task = tasks[0]
    assert task.id == "7"
    assert task.due_date == date(2026, 10, 20)
    assert task.priority is Priority.HIGH
    assert task.completed is True

    method, path, body = service.requests[0]
    assert (method, path) == ("POST", "/tables/task/records/query")
    assert body["fields"][0] == "Id"
    assert body["orderBy"] == [{"fieldName": "createdAt", "SortType": "DESC"}]
    assert "where" not in body
    await backend.aclose()


@pytest.mark.asyncio
async def test_list_pages_until_short_page() -> None:
    service = FakeRecordService([_record(i, f"t{i}") for i in range(1, 6)])
    backend = _backend(service, page_size=2)

    tasks = await backend.list_tasks()

    assert [t.id for t in tasks] == ["1", "2", "3", "4", "5"]
    offsets = [body["pagingInfo"]["offset"] for _, _, body in service.requests]
    assert offsets == [0, 2, 4]


@pytest.mark.asyncio
async def test_server_side_filter_and_sort_params() -> None:
    service = FakeRecordService()
    backend = _backend(service)

    await backend.list_tasks(TaskFilter.HIGH_PRIORITY, SortKey.DUE_DATE)
    await backend.list_tasks(TaskFilter.ACTIVE, SortKey.TITLE)

    first, second = service.requests[0][2], service.requests[1][2]
    assert first["where"] == [{"fieldName": "priority", "operator": "ExactMatch", "values": ["high"]}]
    assert first["orderBy"] == [{"fieldName": "dueDate", "SortType": "ASC"}]
    assert second["where"] == [{"fieldName": "completed", "operator": "ExactMatch", "values": [False]}]
    assert second["orderBy"] == [{"fieldName": "title", "SortType": "ASC"}]


@pytest.mark.asyncio
async def test_missing_data_means_empty_list() -> None:
    backend = RemoteTaskBackend(
        RecordStoreClient(
            BASE_URL,
            project_id="p",
            public_key="k",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})),
        )
    )
    assert await backend.load_all() == []


@pytest.mark.asyncio
async def test_store_crud_over_remote_backend() -> None:
    service = FakeRecordService()
    store = TaskStore(_backend(service))

    task = await store.add(TaskDraft(title="Walk dog", priority="low"))
    assert task.id == "100"
    assert service.records[100]["createdAt"].endswith("Z")

    await store.update(task.id, completed=True)
    _, _, body = service.requests[-1]
    assert body["records"][0]["Id"] == 100
    assert body["records"][0]["completed"] is True
    assert "updatedAt" in body["records"][0]

    await store.remove(task.id)
    assert service.requests[-1][2] == {"RecordIds": [100]}
    assert service.records == {}
    assert len(store) == 0


@pytest.mark.asyncio
async def test_headers_are_sent() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    client = RecordStoreClient(
        BASE_URL, project_id="proj-1", public_key="pk-1", transport=httpx.MockTransport(handler)
    )
    await RemoteTaskBackend(client).load_all()

    assert seen[0].headers["X-Project-Id"] == "proj-1"
    assert seen[0].headers["X-Public-Key"] == "pk-1"


@pytest.mark.asyncio
async def test_http_errors_become_persistence_errors() -> None:
    service = FakeRecordService([_record(1, "x")])
    store = TaskStore(_backend(service))
    await store.load()

    service.fail_with = 503
    with pytest.raises(PersistenceError):
        await store.add(TaskDraft(title="y"))
    with pytest.raises(PersistenceError):
        await store.load()
    assert [t.id for t in store.tasks()] == ["1"]


@pytest.mark.asyncio
async def test_refused_update_becomes_persistence_error() -> None:
    service = FakeRecordService([_record(1, "x")])
    store = TaskStore(_backend(service))
    await store.load()

    service.update_success = False
    with pytest.raises(PersistenceError):
        await store.update("1", completed=True)
    assert store.get("1").completed is False


@pytest.mark.asyncio
async def test_failed_create_result_carries_server_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"success": True, "results": [{"success": False, "message": "title too long"}]},
        )

    client = RecordStoreClient(BASE_URL, project_id="p", public_key="k", transport=httpx.MockTransport(handler))
    store = TaskStore(RemoteTaskBackend(client))

    with pytest.raises(PersistenceError, match="title too long"):
        await store.add(TaskDraft(title="y"))
    assert len(store) == 0


@pytest.mark.asyncio
async def test_network_error_becomes_persistence_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    client = RecordStoreClient(BASE_URL, project_id="p", public_key="k", transport=httpx.MockTransport(handler))

    with pytest.raises(PersistenceError):
        await RemoteTaskBackend(client).load_all()
