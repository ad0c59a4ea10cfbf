# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the persistence backend (local JSON blob or remote record store),
- wires the store, notifier and view defaults into AppState.
"""

from __future__ import annotations

import logging

from ..backends.local_backend import LocalTaskBackend
from ..backends.record_client import RecordStoreClient
from ..backends.remote_backend import RemoteTaskBackend
from ..config import StorageBackend, get_settings
from ..connectors.console_connector import ConsoleNotifier
from ..core.ports import Notifier, TaskBackend
from ..core.state import AppState
from ..tasks.task_query import TaskQuery
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.local_store_path.parent.mkdir(parents=True, exist_ok=True)


def build_backend(settings) -> TaskBackend:
    if settings.storage_backend == StorageBackend.REMOTE:
        client = RecordStoreClient(
            settings.remote_base_url,
            project_id=settings.remote_project_id,
            public_key=settings.remote_public_key,
            timeout=settings.remote_timeout_seconds,
        )
        logger.info("Using remote task storage at %s", settings.remote_base_url)
        return RemoteTaskBackend(client, page_size=settings.remote_page_size)

    return LocalTaskBackend(settings.local_store_path, key=settings.local_store_key)


def create_initial_state(
    *,
    settings=None,
    backend: TaskBackend | None = None,
    notifier: Notifier | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/backend injectable makes the app easier to test and avoids
    hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        store=TaskStore(backend or build_backend(settings)),
        notifier=notifier or ConsoleNotifier(),
        query=TaskQuery(task_filter=settings.default_filter, sort_key=settings.default_sort),
        search_scope=settings.search_scope,
    )
