# src/code_planner/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "code_planner.log"

# Chatty at INFO/DEBUG; the file handler still gets their WARNING+ records.
QUIET_LOGGERS = ("httpx", "httpcore", "openai")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while a planner call is running.

    Records from the code_planner package pass at any level. Everything else,
    including captured warnings ('py.warnings') and SDK chatter, needs
    `foreign_level` or higher.
    """

    def __init__(self, package: str = "code_planner", foreign_level: int = logging.ERROR) -> None:
        super().__init__()
        self.package = package
        self.foreign_level = foreign_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self.package or name.startswith(self.package + "."):
            return True
        return record.levelno >= self.foreign_level


def setup_logging(
    *,
    log_dir: str | Path = ".local/code_planner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to a filtered stderr console and a full log file.

    Call this once at startup, before the first task is generated. Returns the
    log file path so the console can mention it.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Re-running setup (tests, repeated main()) must not stack handlers.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
