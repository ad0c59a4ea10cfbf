# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real keys. Use .env (local, gitignored); see .env.example.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKPAD_DATA_DIR": "Local data directory for the task blob and log file (default: .local/taskpad).",
    # Storage
    "TASKPAD_STORAGE_BACKEND": "local | remote (default: local). remote without a base URL falls back to local.",
    "TASKPAD_LOCAL_STORE_PATH": "JSON blob path for local storage (default: <data_dir>/tasks.json).",
    "TASKPAD_LOCAL_STORE_KEY": "Key holding the task list inside the blob (default: tasks).",
    # Remote record store
    "TASKPAD_REMOTE_BASE_URL": "Record store base URL (required for remote storage).",
    "TASKPAD_REMOTE_PROJECT_ID": "Project id sent as X-Project-Id.",
    "TASKPAD_REMOTE_PUBLIC_KEY": "Public key sent as X-Public-Key.",
    "TASKPAD_REMOTE_TIMEOUT_SECONDS": "HTTP timeout per request (default: 15).",
    "TASKPAD_REMOTE_PAGE_SIZE": "Records fetched per page (default: 100).",
    # View defaults
    "TASKPAD_DEFAULT_FILTER": "all | active | completed | high-priority (default: all).",
    "TASKPAD_DEFAULT_SORT": "dateCreated | dueDate | priority | title (default: dateCreated).",
    "TASKPAD_SEARCH_SCOPE": (
        "all-filters (search narrows every filter, default) | "
        "all-only (search only narrows the 'all' filter)."
    ),
}
