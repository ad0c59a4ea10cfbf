# tests/test_task_store.py

from __future__ import annotations

from datetime import date

import pytest

from taskpad.tasks.errors import NotFoundError, PersistenceError, ValidationError
from taskpad.tasks.task_models import Category, Priority, TaskDraft, TaskStats
from taskpad.tasks.task_store import TaskStore

from .fakes import FakeTaskBackend, make_task


@pytest.mark.asyncio
async def test_add_then_load_round_trip(store: TaskStore) -> None:
    draft = TaskDraft(
        title="Buy cat food",
        description="the good one",
        due_date="2026-10-20",
        priority="high",
        category="shopping",
    )
    created = await store.add(draft)

    assert created.completed is False
    assert created.created_at == created.updated_at

    loaded = await store.load()
    assert len(loaded) == 1
    task = loaded[0]
    assert task.id == created.id
    assert task.title == "Buy cat food"
    assert task.description == "the good one"
    assert task.due_date == date(2026, 10, 20)
    assert task.priority is Priority.HIGH
    assert task.category is Category.SHOPPING
    assert task.completed is False
    assert task.created_at == created.created_at


@pytest.mark.asyncio
async def test_blank_title_is_rejected_before_backend(store: TaskStore, backend: FakeTaskBackend) -> None:
    await store.add(TaskDraft(title="keep me"))
    before = len(store)

    with pytest.raises(ValidationError) as exc:
        await store.add(TaskDraft(title="   "))

    assert "title" in exc.value.errors
    assert len(store) == before
    assert sum(1 for name, _ in backend.calls if name == "create") == 1


@pytest.mark.asyncio
async def test_complete_and_remove_update_stats(backend: FakeTaskBackend) -> None:
    backend.tasks = {
        "1": make_task("1", "urgent", priority=Priority.HIGH),
        "2": make_task("2", "later", priority=Priority.LOW),
    }
    store = TaskStore(backend)
    await store.load()

    before = store.stats()
    assert before == TaskStats(total=2, completed=0, pending=2, high_priority=1)

    await store.update("1", completed=True)
    after_complete = store.stats()
    assert after_complete.pending == before.pending - 1
    assert after_complete.high_priority == before.high_priority

    await store.remove("1")
    after_remove = store.stats()
    assert after_remove.total == after_complete.total - 1
    assert after_remove.high_priority == after_complete.high_priority - 1


@pytest.mark.asyncio
async def test_update_normalizes_values_and_refreshes_updated_at(store: TaskStore) -> None:
    task = await store.add(TaskDraft(title="Draft"))

    updated = await store.update(task.id, title="  Final ", priority="high", due_date="2026-12-01")

    assert updated.title == "Final"
    assert updated.priority is Priority.HIGH
    assert updated.due_date == date(2026, 12, 1)
    assert updated.created_at == task.created_at
    assert updated.updated_at >= task.updated_at
    assert store.get(task.id) == updated


@pytest.mark.asyncio
async def test_update_can_clear_due_date(store: TaskStore) -> None:
    task = await store.add(TaskDraft(title="x", due_date="2026-12-01"))
    updated = await store.update(task.id, due_date=None)
    assert updated.due_date is None


@pytest.mark.asyncio
async def test_update_rejects_blank_title_and_unknown_fields(store: TaskStore) -> None:
    task = await store.add(TaskDraft(title="x"))

    with pytest.raises(ValidationError):
        await store.update(task.id, title=" ")
    with pytest.raises(ValueError):
        await store.update(task.id, created_at=None)

    assert store.get(task.id) == task


@pytest.mark.asyncio
async def test_update_reports_bad_priority_category_and_flag_per_field(
    store: TaskStore, backend: FakeTaskBackend
) -> None:
    task = await store.add(TaskDraft(title="x"))
    backend.calls.clear()

    with pytest.raises(ValidationError) as exc:
        await store.update(task.id, priority="urgent", category="misc", completed="false")

    assert exc.value.errors == {
        "priority": "Unknown priority",
        "category": "Unknown category",
        "completed": "Must be true or false",
    }
    assert backend.calls == []
    assert store.get(task.id).completed is False


@pytest.mark.asyncio
async def test_toggle_complete_flips_state(store: TaskStore) -> None:
    task = await store.add(TaskDraft(title="x"))
    assert (await store.toggle_complete(task.id)).completed is True
    assert (await store.toggle_complete(task.id)).completed is False


@pytest.mark.asyncio
async def test_missing_id_raises_not_found(store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        await store.update("nope", completed=True)
    with pytest.raises(NotFoundError):
        await store.remove("nope")
    with pytest.raises(NotFoundError):
        await store.toggle_complete("nope")


@pytest.mark.asyncio
async def test_failed_writes_leave_collection_unchanged(store: TaskStore, backend: FakeTaskBackend) -> None:
    task = await store.add(TaskDraft(title="x"))
    snapshot = store.tasks()

    backend.fail_next = OSError("disk full")
    with pytest.raises(PersistenceError):
        await store.add(TaskDraft(title="y"))
    assert store.tasks() == snapshot

    backend.fail_next = ConnectionError("offline")
    with pytest.raises(PersistenceError):
        await store.update(task.id, completed=True)
    assert store.tasks() == snapshot

    backend.reject_writes = True
    with pytest.raises(PersistenceError):
        await store.update(task.id, completed=True)
    with pytest.raises(PersistenceError):
        await store.remove(task.id)
    assert store.tasks() == snapshot


@pytest.mark.asyncio
async def test_failed_load_keeps_previous_collection(store: TaskStore, backend: FakeTaskBackend) -> None:
    await store.add(TaskDraft(title="x"))
    snapshot = store.tasks()

    backend.fail_load = TimeoutError("slow")
    with pytest.raises(PersistenceError):
        await store.load()

    assert store.tasks() == snapshot


@pytest.mark.asyncio
async def test_ids_are_unique_and_not_reused(store: TaskStore) -> None:
    a = await store.add(TaskDraft(title="a"))
    await store.remove(a.id)
    b = await store.add(TaskDraft(title="b"))
    c = await store.add(TaskDraft(title="c"))
    assert len({a.id, b.id, c.id}) == 3


def test_stats_on_empty_store(store: TaskStore) -> None:
    assert store.stats() == TaskStats()


@pytest.mark.asyncio
async def test_close_closes_backend(store: TaskStore, backend: FakeTaskBackend) -> None:
    await store.close()
    assert backend.closed is True
