# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import shlex
import sys
from datetime import datetime

from ..cli.commands import cmd_list
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Prints toast-like notices to the terminal."""

    def __init__(self, stream=None) -> None:
        self._stream = stream

    def _write(self, text: str) -> None:
        print(f"[{_ts_local()}] {text}", file=self._stream or sys.stdout, flush=True)

    def success(self, message: str) -> None:
        self._write(f"[ok] {message}")

    def error(self, message: str) -> None:
        self._write(f"[error] {message}")


async def run_console_loop(state: AppState) -> None:
    logger.info("Console shell started (tasks=%d).", len(state.store))
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskpad"))
    _print_ts(f"[{app_name}] Type /help for commands, /exit to quit.\n")
    print(cmd_list(state, []), flush=True)

    while True:
        try:
            line = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            # Plain text is a shortcut for "/add <title>".
            line = "/add " + shlex.quote(line)

        try:
            reply = await command_registry.handle(state, line, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply, flush=True)

    logger.info("Console shell finished.")
