# src/task_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit", "/0")


def run_console_loop(
    state: AppState,
    *,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """
    Read slash commands until /exit, EOF or Ctrl+C.

    `read` and `write` default to input/print and are injectable for tests.
    Saving on the way out is the caller's job (see cli/main.py).
    """
    logger.info("Console connector started (tasks=%d).", len(state.tasks))
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "task-tracker"))
    write(f"[{app_name}] {len(state.tasks)} tasks loaded. Use /help for commands, /exit to quit.\n")

    while True:
        try:
            user_input = read(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list available commands."
        write(reply + "\n")

    logger.info("Console connector finished.")
