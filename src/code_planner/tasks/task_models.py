# src/code_planner/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

UNTITLED_TASK = "Untitled Task"
NO_DESCRIPTION = "No description provided"


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_task_id() -> str:
    return str(uuid.uuid4())


def is_iso_timestamp(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        datetime.fromisoformat(raw)
    except ValueError:
        return False
    return True


def text_or(value: Any, default: str) -> str:
    """Return value if it is a non-empty string, else default."""
    if isinstance(value, str) and value != "":
        return value
    return default


def coerce_id(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    return None


@dataclass(slots=True)
class TaskRecord:
    """
    One unit of planned work.

    Serialized with camelCase keys (codeSnippet, createdAt, updatedAt) so stored
    lists and request/response bodies share one format.
    """

    id: str
    title: str
    description: str
    implementation: str = ""
    code_snippet: str = ""
    completed: bool = False
    created_at: str = ""
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "implementation": self.implementation,
            "codeSnippet": self.code_snippet,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.updated_at is not None:
            out["updatedAt"] = self.updated_at
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TaskRecord | None:
        """
        Rebuild a record that was stored or sent back by a client.

        Keeps the caller's values (including completed) and fills only what is
        missing. Returns None when there is no usable id.
        """
        task_id = coerce_id(raw.get("id"))
        if task_id is None:
            return None

        updated_at = raw.get("updatedAt")
        return cls(
            id=task_id,
            title=text_or(raw.get("title"), UNTITLED_TASK),
            description=text_or(raw.get("description"), NO_DESCRIPTION),
            implementation=text_or(raw.get("implementation"), ""),
            code_snippet=text_or(raw.get("codeSnippet"), ""),
            completed=raw.get("completed") is True,
            created_at=text_or(raw.get("createdAt"), "") or utc_now_iso(),
            updated_at=updated_at if isinstance(updated_at, str) and updated_at else None,
        )

    @classmethod
    def from_upstream(cls, raw: dict[str, Any], *, now: str | None = None) -> TaskRecord:
        """
        Build a fresh record from model output.

        The model is untrusted: every field is coerced, completed is always False
        and a bad or missing createdAt becomes the current time.
        """
        created_at = raw.get("createdAt")
        if not is_iso_timestamp(created_at):
            created_at = now or utc_now_iso()

        return cls(
            id=coerce_id(raw.get("id")) or new_task_id(),
            title=text_or(raw.get("title"), UNTITLED_TASK),
            description=text_or(raw.get("description"), NO_DESCRIPTION),
            implementation=text_or(raw.get("implementation"), ""),
            code_snippet=text_or(raw.get("codeSnippet"), ""),
            completed=False,
            created_at=created_at,
        )


def tasks_to_dicts(tasks: list[TaskRecord]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in tasks]


def tasks_from_dicts(items: list[Any]) -> tuple[list[TaskRecord], int]:
    """Parse a list of client/stored dicts. Returns (records, skipped_count)."""
    out: list[TaskRecord] = []
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        rec = TaskRecord.from_dict(item)
        if rec is None:
            skipped += 1
            continue
        out.append(rec)
    return out, skipped
