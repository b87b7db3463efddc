# src/code_planner/tasks/updater.py

from __future__ import annotations

"""
Task updater.

Regenerates the implementation guide and code snippet of every task that is
not completed, given new requirement text.

Per-task calls run concurrently and are joined before returning. A failing task
keeps its previous value; only a missing credential aborts the whole batch.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from ..core.ports import LLMClient
from ..errors import ConfigurationError, ValidationError
from .parsing import parse_model_json
from .task_models import TaskRecord

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_MAX_TOKENS = 1500

MSG_NOTHING_TO_UPDATE = "No incomplete tasks to update"
MSG_UPDATED = "Tasks updated successfully"


@dataclass(slots=True)
class UpdateResult:
    message: str
    tasks: list[TaskRecord]
    updated_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)


def build_update_prompt(task: TaskRecord, requirements: str) -> str:
    lines = [
        "You are a senior developer helping update a task within a larger project.",
        "Given the task details below, please update the implementation guide and code snippet",
        "to incorporate the new requirements without changing the core purpose of the task.",
        "",
        "TASK DETAILS:",
        f"Title: {task.title}",
        f"Description: {task.description}",
    ]
    if task.implementation:
        lines.append(f"Current Implementation: {task.implementation}")
    if task.code_snippet:
        lines.append(f"Current Code Snippet: {task.code_snippet}")

    lines += [
        "",
        "NEW REQUIREMENTS TO INCORPORATE:",
        requirements,
        "",
        "Please provide:",
        "1. An updated, detailed implementation guide that explains how to complete this task with the new requirements.",
        "2. A practical code snippet that demonstrates the implementation.",
        "",
        "IMPORTANT: Your response must maintain JSON format with ONLY two fields:",
        "{",
        '  "implementation": "Step-by-step implementation details incorporating the new requirements...",',
        '  "codeSnippet": "// Code example that implements the solution with new requirements..."',
        "}",
    ]
    return "\n".join(lines)


def apply_update_response(task: TaskRecord, raw: str) -> TaskRecord:
    """
    Merge a model reply into a copy of task.

    Raises ValueError if the reply is not a JSON object. Missing or empty
    fields keep the task's previous value.
    """
    parsed = parse_model_json(raw)
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")

    implementation = parsed.get("implementation")
    code_snippet = parsed.get("codeSnippet")

    return replace(
        task,
        implementation=implementation if isinstance(implementation, str) and implementation else task.implementation,
        code_snippet=code_snippet if isinstance(code_snippet, str) and code_snippet else task.code_snippet,
    )


async def _update_one(
        llm: LLMClient,
        task: TaskRecord,
        requirements: str,
        max_tokens: int,
) -> tuple[TaskRecord, bool]:
    """Returns (task, ok). On failure the original task object is returned."""
    try:
        raw = await llm.complete(
            [{"role": "user", "content": build_update_prompt(task, requirements)}],
            max_tokens=max_tokens,
        )
        return apply_update_response(task, raw), True
    except ConfigurationError:
        raise
    except Exception:
        logger.exception("Failed to update task id=%s; keeping previous content.", task.id)
        return task, False


async def update_tasks(
        llm: LLMClient,
        existing: list[TaskRecord] | None,
        completed_ids: Iterable[str] | None,
        requirements: Any,
        *,
        settings: Any = None,
) -> UpdateResult:
    """
    Regenerate guidance for incomplete tasks.

    Raises:
        ValidationError: existing or requirements is missing.
        ConfigurationError: the LLM credential is missing (only when there is work to do).
    """
    if existing is None or not isinstance(requirements, str) or not requirements.strip():
        raise ValidationError("Missing required fields: existingTasks or requirements")

    done = {str(i) for i in (completed_ids or [])}
    incomplete = [t for t in existing if t.id not in done]

    if not incomplete:
        logger.info("Update requested but all %d task(s) are completed.", len(existing))
        return UpdateResult(message=MSG_NOTHING_TO_UPDATE, tasks=list(existing))

    max_tokens = int(getattr(settings, "update_max_tokens", DEFAULT_UPDATE_MAX_TOKENS))

    logger.info("Updating %d of %d task(s)", len(incomplete), len(existing))

    outcomes = await asyncio.gather(
        *(_update_one(llm, t, requirements, max_tokens) for t in incomplete)
    )

    # Keyed by position in `incomplete`, so duplicate ids still map one-to-one.
    outcome_iter = iter(outcomes)
    final: list[TaskRecord] = []
    updated_ids: list[str] = []
    failed_ids: list[str] = []

    for t in existing:
        if t.id in done:
            final.append(t)
            continue
        new_task, ok = next(outcome_iter)
        final.append(new_task)
        (updated_ids if ok else failed_ids).append(t.id)

    if failed_ids:
        logger.warning("Task update failed for %d task(s): %s", len(failed_ids), ", ".join(failed_ids))

    return UpdateResult(
        message=MSG_UPDATED,
        tasks=final,
        updated_ids=updated_ids,
        failed_ids=failed_ids,
    )
