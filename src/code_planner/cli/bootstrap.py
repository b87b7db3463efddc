# src/code_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the LLM client and storage backend into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.client import OpenAILLMClient
from ..llm.offline import OfflineLLMClient
from ..storage.backends import create_storage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.storage_backend == "sqlite":
        settings.storage_path.parent.mkdir(parents=True, exist_ok=True)
    elif settings.storage_backend == "file":
        settings.storage_path.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    llm_client: LLMClient
    if settings.offline_mode:
        logger.info("Offline demo mode: using the deterministic offline LLM client.")
        llm_client = OfflineLLMClient()
    else:
        llm_client = OpenAILLMClient(settings)
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY is not set; /generate and /update will fail until it is.")

    storage = create_storage(settings.storage_backend, settings.storage_path)

    return AppState(
        settings=settings,
        llm=llm_client,
        task_store=TaskStore(storage, settings.storage_key),
    )
