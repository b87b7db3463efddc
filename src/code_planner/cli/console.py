# src/code_planner/cli/console.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.state import AppState
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def route_plain_text(state: AppState, text: str) -> str:
    """Plain input generates a plan when the list is empty and updates it otherwise."""
    if state.task_store.load():
        return f"/update {text}"
    return f"/generate {text}"


def run_console_loop(state: AppState) -> None:
    logger.info("Console started.")
    _print_ts(
        "[CONSOLE] Describe your project to generate tasks, or new requirements to update them.\n"
        "          Use /help for commands. Use /exit to quit.\n"
    )

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        line = user_input if user_input.startswith("/") else route_plain_text(state, user_input)

        try:
            response = command_registry.handle(state, line, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)

    logger.info("Console finished.")
