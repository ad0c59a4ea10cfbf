# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.cli.bootstrap import create_initial_state
from taskpad.config import StorageBackend
from taskpad.core.state import AppState
from taskpad.tasks.task_models import SearchScope, SortKey, TaskFilter
from taskpad.tasks.task_store import TaskStore

from .fakes import FakeTaskBackend, RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment/.env.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        storage_backend=StorageBackend.LOCAL,
        data_dir=tmp_path / "data",
        local_store_path=tmp_path / "data" / "tasks.json",
        local_store_key="tasks",
        remote_base_url="",
        remote_project_id="",
        remote_public_key="",
        remote_timeout_seconds=5.0,
        remote_page_size=100,
        default_filter=TaskFilter.ALL,
        default_sort=SortKey.DATE_CREATED,
        search_scope=SearchScope.ALL_FILTERS,
    )


@pytest.fixture()
def backend() -> FakeTaskBackend:
    return FakeTaskBackend()


@pytest.fixture()
def store(backend: FakeTaskBackend) -> TaskStore:
    return TaskStore(backend)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, backend: FakeTaskBackend, notifier: RecordingNotifier) -> AppState:
    """AppState wired with the in-memory backend and a recording notifier."""
    return create_initial_state(settings=settings, backend=backend, notifier=notifier)
