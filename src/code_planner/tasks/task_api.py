# src/code_planner/tasks/task_api.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator

from ..core.state import AppState
from ..errors import PlannerBusyError
from .generator import generate_tasks as _generate
from .task_models import TaskRecord
from .updater import UpdateResult
from .updater import update_tasks as _update

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _single_flight(state: AppState) -> Iterator[None]:
    """Reject (rather than queue) a generate/update that overlaps a running one."""
    if not state.busy.acquire(blocking=False):
        raise PlannerBusyError()
    try:
        yield
    finally:
        state.busy.release()


async def generate_tasks(state: AppState, description: str) -> list[TaskRecord]:
    """Generate a fresh task list and replace the stored one with it."""
    with _single_flight(state):
        tasks = await _generate(state.llm, description, settings=state.settings)
        state.task_store.save(tasks)
        logger.info("Stored %d generated task(s).", len(tasks))
        return tasks


async def update_tasks(state: AppState, requirements: str) -> UpdateResult:
    """Regenerate guidance for the stored incomplete tasks and store the result."""
    with _single_flight(state):
        existing = state.task_store.load()
        completed = {t.id for t in existing if t.completed}
        result = await _update(
            state.llm,
            existing,
            completed,
            requirements,
            settings=state.settings,
        )
        state.task_store.save(result.tasks)
        logger.info(
            "Stored update result: updated=%d failed=%d",
            len(result.updated_ids),
            len(result.failed_ids),
        )
        return result
