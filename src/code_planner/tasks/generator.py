# src/code_planner/tasks/generator.py

from __future__ import annotations

"""
Task generator.

Turns a free-text project description into an initial task list:
- one system + one user message to the model,
- one JSON parse of the reply (must be an array),
- every element coerced into a complete TaskRecord.

No retries: any failure is terminal for the call.
"""

import logging
from typing import Any

from ..core.ports import LLMClient
from ..errors import ConfigurationError, UpstreamError, ValidationError
from .parsing import parse_model_json
from .task_models import TaskRecord, new_task_id, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_GENERATE_MAX_TOKENS = 4000

GENERATE_SYSTEM_PROMPT = """
You are an expert software architect and developer. Your task is to break down a project description
into specific, actionable tasks with implementation guides and code examples.

For the given project description, please provide a JSON array of tasks where each task includes:
1. A clear, specific title
2. A detailed description of what needs to be accomplished
3. A comprehensive step-by-step implementation guide
4. A code snippet example showing how to implement the task

The tasks should:
- Cover all key aspects of the project
- Be logically ordered from foundation to advanced features
- Be specific enough that each task can be completed in 1-3 hours
- Include both frontend and backend tasks as appropriate
- Consider best practices, security, and performance
- Start with infrastructure/setup tasks before feature implementation

IMPORTANT: Your response must be ONLY a valid JSON array of objects with these exact fields:
[
  {
    "id": "unique-id-string",
    "title": "Task title",
    "description": "Detailed task description",
    "implementation": "Step-by-step implementation guide",
    "codeSnippet": "// Code example for this task",
    "completed": false,
    "createdAt": "ISO date string"
  },
  ...
]
""".strip()


def build_generate_messages(description: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": GENERATE_SYSTEM_PROMPT},
        {"role": "user", "content": description},
    ]


def coerce_generated_tasks(items: list[Any]) -> list[TaskRecord]:
    """Coerce parsed model output into TaskRecords with unique ids."""
    now = utc_now_iso()
    seen: set[str] = set()
    out: list[TaskRecord] = []

    for i, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning("Skipping non-object task at index %d (%s)", i, type(item).__name__)
            continue

        rec = TaskRecord.from_upstream(item, now=now)
        if rec.id in seen:
            rec.id = new_task_id()
        seen.add(rec.id)
        out.append(rec)

    return out


async def generate_tasks(
        llm: LLMClient,
        description: Any,
        *,
        settings: Any = None,
) -> list[TaskRecord]:
    """
    Generate a task list for a project description.

    Raises:
        ValidationError: description is not a non-empty string.
        ConfigurationError: the LLM credential is missing.
        UpstreamError: the call failed or the reply is not a JSON array.
    """
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("Invalid prompt: must be a non-empty string")

    max_tokens = int(getattr(settings, "generate_max_tokens", DEFAULT_GENERATE_MAX_TOKENS))

    logger.info("Generating tasks (description_len=%d)", len(description))

    try:
        content = await llm.complete(build_generate_messages(description), max_tokens=max_tokens)
    except ConfigurationError:
        raise
    except Exception as e:
        raise UpstreamError(f"Failed to generate tasks: {e}") from e

    if not content or not content.strip():
        raise UpstreamError("Failed to generate tasks: no content returned from the model")

    try:
        parsed = parse_model_json(content)
    except ValueError as e:
        logger.error("Failed to parse model response as JSON: %s raw=%r", e, content[:2000])
        raise UpstreamError(f"Failed to parse task data: {e}") from e

    if not isinstance(parsed, list):
        raise UpstreamError("Failed to parse task data: Response is not an array")

    tasks = coerce_generated_tasks(parsed)
    logger.info("Generated %d task(s)", len(tasks))
    return tasks
