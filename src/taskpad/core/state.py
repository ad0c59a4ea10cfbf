# src/taskpad/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import SearchScope
from ..tasks.task_query import TaskQuery
from ..tasks.task_store import TaskStore
from .ports import Notifier


@dataclass
class AppState:
    """
    Per-session application state, passed by reference to the shell.

    The store owns the task collection; everything else here is transient
    UI state (current filter/sort/search and the task being edited).
    """

    # Settings object (taskpad.config.Settings or a test stand-in).
    settings: Any

    store: TaskStore
    notifier: Notifier

    query: TaskQuery = field(default_factory=TaskQuery)
    search_scope: SearchScope = SearchScope.ALL_FILTERS
    editing_task_id: str | None = None
