# tests/conftest.py

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from code_planner.core.state import AppState
from code_planner.storage.backends import MemoryStorage
from code_planner.tasks.task_models import TaskRecord
from code_planner.tasks.task_store import TaskStore

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="code-planner-test",
        log_level="DEBUG",
        # LLM
        openai_api_key=None,
        openai_base_url=None,
        llm_model="test-model",
        llm_temperature=0.7,
        generate_max_tokens=4000,
        update_max_tokens=1500,
        llm_timeout_seconds=None,
        offline_mode=False,
        # Storage (tmp per test run)
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "storage",
        storage_key="todos",
    )


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage: MemoryStorage) -> TaskStore:
    return TaskStore(storage, "todos")


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture()
def state(settings: SimpleNamespace, llm: FakeLLMClient, store: TaskStore) -> AppState:
    """AppState wired with a fake LLM and an in-memory task store."""
    return AppState(settings=settings, llm=llm, task_store=store)


def make_task(task_id: str, title: str = "", **kw) -> TaskRecord:
    return TaskRecord(
        id=task_id,
        title=title or f"Task {task_id}",
        description=kw.pop("description", f"Description of {task_id}"),
        implementation=kw.pop("implementation", ""),
        code_snippet=kw.pop("code_snippet", ""),
        completed=kw.pop("completed", False),
        created_at=kw.pop("created_at", "2024-01-01T00:00:00Z"),
        updated_at=kw.pop("updated_at", None),
    )


def update_reply(implementation: str, code: str) -> str:
    return json.dumps({"implementation": implementation, "codeSnippet": code})
