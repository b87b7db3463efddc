# src/code_planner/core/state.py

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_store import TaskStore
from .ports import LLMClient


@dataclass
class AppState:
    # Settings object (config.Settings or a test double with the same attributes).
    settings: Any

    llm: LLMClient
    task_store: TaskStore

    # Held while a generate/update call runs; overlapping calls are rejected.
    busy: threading.Lock = field(default_factory=threading.Lock)

    # Event loop shared by console commands so the SDK's HTTP pool stays on one loop.
    runner: asyncio.Runner | None = None
