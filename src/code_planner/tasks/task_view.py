# src/code_planner/tasks/task_view.py

from __future__ import annotations

from enum import StrEnum

from .task_models import TaskRecord


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str | None) -> SortOrder:
        if not raw:
            return cls.ASC
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ASC


def select_tasks(
    tasks: list[TaskRecord],
    *,
    status: TaskFilter = TaskFilter.ALL,
    query: str = "",
    order: SortOrder = SortOrder.ASC,
) -> list[TaskRecord]:
    """Filter by status and search text, then order by createdAt."""
    q = (query or "").strip().lower()

    out: list[TaskRecord] = []
    for t in tasks:
        if status == TaskFilter.COMPLETED and not t.completed:
            continue
        if status == TaskFilter.ACTIVE and t.completed:
            continue
        if q and q not in t.title.lower() and q not in t.description.lower():
            continue
        out.append(t)

    # ISO-8601 strings in the same format sort chronologically.
    out.sort(key=lambda t: t.created_at, reverse=(order == SortOrder.DESC))
    return out


def progress_percent(tasks: list[TaskRecord]) -> int:
    if not tasks:
        return 0
    done = sum(1 for t in tasks if t.completed)
    return int(done * 100 / len(tasks) + 0.5)


def find_by_prefix(tasks: list[TaskRecord], prefix: str) -> TaskRecord | None:
    """Exact id match first, else the single task whose id starts with prefix."""
    prefix = (prefix or "").strip()
    if not prefix:
        return None
    for t in tasks:
        if t.id == prefix:
            return t
    matches = [t for t in tasks if t.id.startswith(prefix)]
    return matches[0] if len(matches) == 1 else None
