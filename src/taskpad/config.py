# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Bad values fall back to defaults instead of failing at startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TypeVar

from .tasks.task_models import SearchScope, SortKey, TaskFilter

ENV_PREFIX = "TASKPAD"

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=StrEnum)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, enum_cls: type[E], default: E) -> E:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return enum_cls(raw.strip())
    except ValueError:
        return default


class StorageBackend(StrEnum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    storage_backend: StorageBackend
    data_dir: Path
    local_store_path: Path
    local_store_key: str

    # ---- Remote record store ----
    remote_base_url: str
    remote_project_id: str
    remote_public_key: str
    remote_timeout_seconds: float
    remote_page_size: int

    # ---- View defaults ----
    default_filter: TaskFilter
    default_sort: SortKey
    search_scope: SearchScope

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        local_store_path = _env_path(_k("LOCAL_STORE_PATH"), data_dir / "tasks.json")
        local_store_key = _env(_k("LOCAL_STORE_KEY"), "tasks").strip() or "tasks"

        remote_base_url = _env(_k("REMOTE_BASE_URL"), "").strip()
        remote_project_id = _env(_k("REMOTE_PROJECT_ID"), "").strip()
        remote_public_key = _env(_k("REMOTE_PUBLIC_KEY"), "").strip()
        remote_timeout_seconds = max(1.0, _env_float(_k("REMOTE_TIMEOUT_SECONDS"), 15.0))
        remote_page_size = max(1, _env_int(_k("REMOTE_PAGE_SIZE"), 100))

        storage_backend = _env_choice(_k("STORAGE_BACKEND"), StorageBackend, StorageBackend.LOCAL)
        if storage_backend == StorageBackend.REMOTE and not remote_base_url:
            logger.warning(
                "%s is remote but %s is empty; using local storage.",
                _k("STORAGE_BACKEND"),
                _k("REMOTE_BASE_URL"),
            )
            storage_backend = StorageBackend.LOCAL

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage_backend=storage_backend,
            data_dir=data_dir,
            local_store_path=local_store_path,
            local_store_key=local_store_key,
            remote_base_url=remote_base_url,
            remote_project_id=remote_project_id,
            remote_public_key=remote_public_key,
            remote_timeout_seconds=remote_timeout_seconds,
            remote_page_size=remote_page_size,
            default_filter=_env_choice(_k("DEFAULT_FILTER"), TaskFilter, TaskFilter.ALL),
            default_sort=_env_choice(_k("DEFAULT_SORT"), SortKey, SortKey.DATE_CREATED),
            search_scope=_env_choice(_k("SEARCH_SCOPE"), SearchScope, SearchScope.ALL_FILTERS),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Settings are read once, on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
