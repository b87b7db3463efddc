# src/code_planner/tasks/task_store.py

from __future__ import annotations

import json
import logging
from dataclasses import replace

from ..core.ports import KeyValueStorage
from ..errors import ValidationError
from .task_models import TaskRecord, tasks_from_dicts, tasks_to_dicts, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todos"


class TaskStore:
    """
    Authoritative task list kept in one named storage slot.

    Every mutation reads the full list, applies the change, writes the full
    list back and returns it. Storage errors are logged and never raised, so
    the returned list may be ahead of what is on disk.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    # ---- load / save ----

    def load(self) -> list[TaskRecord]:
        try:
            raw = self._storage.get(self._key)
        except Exception:
            logger.exception("Failed to read task list slot=%s", self._key)
            return []

        if raw is None or not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.exception("Stored task list is not valid JSON slot=%s; ignoring it.", self._key)
            return []

        if not isinstance(data, list):
            logger.error("Stored task list is not a list slot=%s (got %s); ignoring it.", self._key, type(data).__name__)
            return []

        tasks, skipped = tasks_from_dicts(data)
        if skipped:
            logger.warning("Dropped %d malformed task record(s) from slot=%s", skipped, self._key)
        return tasks

    def save(self, tasks: list[TaskRecord]) -> None:
        try:
            payload = json.dumps(tasks_to_dicts(tasks), ensure_ascii=False)
            self._storage.set(self._key, payload)
            logger.debug("Saved %d task(s) to slot=%s", len(tasks), self._key)
        except Exception:
            logger.exception("Failed to save task list slot=%s", self._key)

    def clear(self) -> None:
        try:
            self._storage.delete(self._key)
        except Exception:
            logger.exception("Failed to clear task list slot=%s", self._key)

    # ---- queries ----

    def get(self, task_id: str) -> TaskRecord | None:
        for t in self.load():
            if t.id == task_id:
                return t
        return None

    def completed_ids(self) -> set[str]:
        return {t.id for t in self.load() if t.completed}

    # ---- mutations ----

    def toggle_completed(self, task_id: str) -> list[TaskRecord]:
        tasks = self.load()
        found = False
        out: list[TaskRecord] = []
        for t in tasks:
            if t.id == task_id:
                found = True
                t = replace(t, completed=not t.completed)
            out.append(t)
        if not found:
            logger.warning("toggle_completed: no task with id=%s", task_id)
        self.save(out)
        return out

    def delete(self, task_id: str) -> list[TaskRecord]:
        tasks = self.load()
        out = [t for t in tasks if t.id != task_id]
        if len(out) == len(tasks):
            logger.warning("delete: no task with id=%s", task_id)
        self.save(out)
        return out

    def edit(self, task_id: str, title: str, description: str) -> list[TaskRecord]:
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Task title must be a non-empty string")
        if not isinstance(description, str):
            raise ValidationError("Task description must be a string")

        tasks = self.load()
        found = False
        out: list[TaskRecord] = []
        for t in tasks:
            if t.id == task_id:
                found = True
                t = replace(t, title=title, description=description, updated_at=utc_now_iso())
            out.append(t)
        if not found:
            logger.warning("edit: no task with id=%s", task_id)
        self.save(out)
        return out
