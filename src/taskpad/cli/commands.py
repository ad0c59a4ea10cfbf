# src/taskpad/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import (
    cancel_edit,
    delete_task,
    refresh_tasks,
    start_edit,
    submit_draft,
    toggle_task,
    visible_tasks,
)
from ..tasks.task_models import SortKey, Task, TaskDraft, TaskFilter
from ..tasks.task_query import describe_view

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[
    [AppState, list[str], CommandEmitter | None], Awaitable[str] | str
]

logger = logging.getLogger(__name__)

SHORT_ID_LEN = 8

# key=value names accepted by /add and /edit -> TaskDraft attribute
FORM_KEYS: dict[str, str] = {
    "title": "title",
    "desc": "description",
    "description": "description",
    "due": "due_date",
    "due_date": "due_date",
    "priority": "priority",
    "p": "priority",
    "category": "category",
    "cat": "category",
}


class CommandRegistry:
    """Slash-command registry used by the console shell (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        result = handler(state, args, emit)
        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    details = [task.priority.value, task.category.value]
    if task.due_date:
        details.append(f"due {task.due_date.isoformat()}")
    line = f"[{mark}] {task.id[:SHORT_ID_LEN]}  {task.title}  ({', '.join(details)})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def format_errors(errors: dict[str, str]) -> str:
    lines = ["Form errors:"]
    for name, msg in errors.items():
        lines.append(f"  {name}: {msg}")
    return "\n".join(lines)


def resolve_task_id(state: AppState, raw: str) -> str | None:
    """Exact id, or a unique id prefix."""
    if state.store.get(raw) is not None:
        return raw
    matches = [t.id for t in state.store.tasks() if t.id.startswith(raw)]
    return matches[0] if len(matches) == 1 else None


def apply_form_args(draft: TaskDraft, args: list[str]) -> TaskDraft:
    """
    Overlay "key=value" args on a draft. Bare words become the title.

    Unknown keys are treated as part of the title, so "/add 2+2=4" works.
    """
    title_words: list[str] = []
    for arg in args:
        key, sep, value = arg.partition("=")
        attr = FORM_KEYS.get(key.lower()) if sep else None
        if attr is None:
            title_words.append(arg)
            continue
        setattr(draft, attr, value)
    if title_words:
        draft.title = " ".join(title_words)
    return draft


# ---- commands ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    tasks = visible_tasks(state)
    q = state.query
    header = f"{describe_view(tasks, q)}. Sort: {q.sort_key.value}."
    if not tasks:
        return header + "\n  (no tasks)"
    return "\n".join([header, *(format_task(t) for t in tasks)])


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /add <title> [desc=..] [due=YYYY-MM-DD] [priority=low|medium|high] [category=..]"

    cancel_edit(state)
    result = await submit_draft(state, apply_form_args(TaskDraft(), args))
    if result.errors:
        return format_errors(result.errors)
    if result.task is None:
        return "Task was not added."
    return format_task(result.task)


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <id> [title words] [key=value ...]

    Unspecified fields keep their current values.
    """
    if not args:
        return "Usage: /edit <id> [title] [desc=..] [due=..] [priority=..] [category=..]"

    task_id = resolve_task_id(state, args[0])
    if task_id is None:
        return f"No task matches id {args[0]!r}."

    draft = start_edit(state, task_id)
    if draft is None:
        return "Task was not found."

    try:
        result = await submit_draft(state, apply_form_args(draft, args[1:]))
    finally:
        cancel_edit(state)

    if result.errors:
        return format_errors(result.errors)
    if result.task is None:
        return "Task was not updated."
    return format_task(result.task)


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /done <id>"
    task_id = resolve_task_id(state, args[0])
    if task_id is None:
        return f"No task matches id {args[0]!r}."
    task = await toggle_task(state, task_id)
    if task is None:
        return "Task was not updated."
    return format_task(task)


async def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /rm <id>"
    task_id = resolve_task_id(state, args[0])
    if task_id is None:
        return f"No task matches id {args[0]!r}."
    if await delete_task(state, task_id):
        return f"Deleted {task_id[:SHORT_ID_LEN]}."
    return "Task was not deleted."


def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    choices = " | ".join(f.value for f in TaskFilter)
    if not args:
        return f"Filter is {state.query.task_filter.value}. Use /filter {choices}."
    try:
        task_filter = TaskFilter(args[0].lower())
    except ValueError:
        return f"Unknown filter {args[0]!r}. Use /filter {choices}."
    state.query = state.query.with_changes(task_filter=task_filter)
    return cmd_list(state, [])


def cmd_sort(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    choices = " | ".join(k.value for k in SortKey)
    if not args:
        return f"Sort is {state.query.sort_key.value}. Use /sort {choices}."
    by_lower = {k.value.lower(): k for k in SortKey}
    sort_key = by_lower.get(args[0].lower())
    if sort_key is None:
        return f"Unknown sort key {args[0]!r}. Use /sort {choices}."
    state.query = state.query.with_changes(sort_key=sort_key)
    return cmd_list(state, [])


def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /search text  -> set search text
    /search       -> clear search
    """
    state.query = state.query.with_changes(search=" ".join(args))
    return cmd_list(state, [])


def cmd_stats(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    s = state.store.stats()
    return (
        "Stats:\n"
        f"  Total: {s.total}\n"
        f"  Completed: {s.completed}\n"
        f"  Pending: {s.pending}\n"
        f"  High priority: {s.high_priority}"
    )


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Reloading tasks...")
    if await refresh_tasks(state):
        return f"Loaded {len(state.store)} tasks."
    return "Reload failed; showing the last loaded tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the current filter/sort/search.", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [desc=..] [due=YYYY-MM-DD] [priority=..] [category=..].",
    aliases=["new"],
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> [title] [key=value ...].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del", "delete"])
registry.register("filter", cmd_filter, help_text="Filter: /filter all | active | completed | high-priority.")
registry.register("sort", cmd_sort, help_text="Sort: /sort dateCreated | dueDate | priority | title.")
registry.register("search", cmd_search, help_text="Search title/description: /search <text> (empty clears).")
registry.register("stats", cmd_stats, help_text="Show totals.")
registry.register("reload", cmd_reload, help_text="Reload tasks from storage.")
