# src/code_planner/api/handlers.py

from __future__ import annotations

"""
JSON request/response adapters for the two external operations.

Each handler takes a decoded JSON body and returns (status_code, payload) so it
can be mounted in any web framework or called directly. Nothing is persisted
here: the caller owns the task list.
"""

import logging
from typing import Any

from ..core.ports import LLMClient
from ..errors import ConfigurationError, PlannerError, ValidationError
from ..tasks.generator import generate_tasks
from ..tasks.task_models import TaskRecord, tasks_from_dicts, tasks_to_dicts
from ..tasks.updater import update_tasks

logger = logging.getLogger(__name__)

Response = tuple[int, dict[str, Any]]


def _error(status: int, message: str) -> Response:
    return status, {"error": message}


def _planner_error(err: PlannerError) -> Response:
    if isinstance(err, ConfigurationError):
        return _error(err.status_code, ConfigurationError.public_message)
    return _error(err.status_code, str(err))


async def handle_generate(llm: LLMClient, body: Any, *, settings: Any = None) -> Response:
    """POST {prompt} -> 200 {tasks} | 400/500 {error}."""
    if not isinstance(body, dict):
        return _error(400, "Invalid request body: expected a JSON object")

    try:
        tasks = await generate_tasks(llm, body.get("prompt"), settings=settings)
    except PlannerError as e:
        if not isinstance(e, ValidationError):
            logger.error("Error generating tasks: %s", e)
        return _planner_error(e)
    except Exception as e:
        logger.exception("Unexpected error generating tasks.")
        return _error(500, f"Failed to generate tasks: {e}")

    return 200, {"tasks": tasks_to_dicts(tasks)}


async def handle_update(llm: LLMClient, body: Any, *, settings: Any = None) -> Response:
    """POST {existingTasks, completedTaskIds, requirements} -> 200 {message, tasks} | 400/500 {error}."""
    if not isinstance(body, dict):
        return _error(400, "Invalid request body: expected a JSON object")

    raw_tasks = body.get("existingTasks")
    requirements = body.get("requirements")
    if raw_tasks is None or not requirements:
        return _error(400, "Missing required fields: existingTasks or requirements")
    if not isinstance(raw_tasks, list):
        return _error(400, "Invalid existingTasks: must be an array")

    existing, skipped = tasks_from_dicts(raw_tasks)
    if skipped:
        return _error(400, f"Invalid existingTasks: {skipped} item(s) are not task objects with an id")

    raw_ids = body.get("completedTaskIds") or []
    if not isinstance(raw_ids, list):
        return _error(400, "Invalid completedTaskIds: must be an array")

    try:
        result = await update_tasks(
            llm,
            existing,
            [str(i) for i in raw_ids],
            requirements,
            settings=settings,
        )
    except PlannerError as e:
        if not isinstance(e, ValidationError):
            logger.error("Error updating tasks: %s", e)
        return _planner_error(e)
    except Exception as e:
        logger.exception("Unexpected error updating tasks.")
        return _error(500, f"Failed to update tasks: {e}")

    return 200, {"message": result.message, "tasks": _merge_raw(raw_tasks, existing, result.tasks)}


def _merge_raw(raw_tasks: list[dict[str, Any]], parsed: list[TaskRecord], updated: list[TaskRecord]) -> list[dict[str, Any]]:
    # The updater keeps order and length; untouched records are the same objects.
    return [
        raw if new is old else {**raw, "implementation": new.implementation, "codeSnippet": new.code_snippet}
        for raw, old, new in zip(raw_tasks, parsed, updated)
    ]
