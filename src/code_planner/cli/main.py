# src/code_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL on one
shared event loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..logging_setup import setup_logging
from .console import run_console_loop

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    runner = getattr(state, "runner", None)
    aclose = getattr(state.llm, "aclose", None)
    if runner is None or aclose is None:
        return
    try:
        runner.run(aclose())
    except Exception:
        logger.debug("LLM client close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (full log: %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    with asyncio.Runner() as runner:
        state.runner = runner
        try:
            run_console_loop(state)
        finally:
            _shutdown(state)
            state.runner = None
            logger.info("Bye.")


if __name__ == "__main__":
    main()
