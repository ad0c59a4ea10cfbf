# src/taskpad/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the task collection, then runs
the console shell until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import locale
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_api import refresh_tasks

logger = logging.getLogger(__name__)


async def _run(state) -> None:
    try:
        # A failed first load is reported by refresh_tasks; the shell still starts empty.
        await refresh_tasks(state)
        await run_console_loop(state)
    finally:
        try:
            await state.store.close()
        except Exception:
            logger.debug("Store close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    try:
        # title sorting collates with the user's locale
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("System locale is unavailable; title sort ignores its collation rules.")

    logger.info("Starting %s (storage=%s)...", settings.app_name, settings.storage_backend.value)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
