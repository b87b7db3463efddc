# src/code_planner/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any, TypeVar, cast

from ..core.state import AppState
from ..errors import PlannerError
from ..llm.client import friendly_llm_error_message
from ..tasks import task_api
from ..tasks.language import detect_language, extension_for
from ..tasks.task_models import TaskRecord
from ..tasks.task_view import SortOrder, TaskFilter, find_by_prefix, progress_percent, select_tasks

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

T = TypeVar("T")

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /generate, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def run_async(state: AppState, coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine on the console's event loop (or a fresh one in tests)."""
    runner = getattr(state, "runner", None)
    if runner is not None:
        return runner.run(coro)
    return asyncio.run(coro)


def format_task_line(t: TaskRecord) -> str:
    mark = "x" if t.completed else " "
    return f"[{mark}] {t.id[:8]}  {t.title}"


def format_task_list(tasks: list[TaskRecord], *, total: int | None = None) -> str:
    if not tasks:
        return "No tasks."
    lines = [format_task_line(t) for t in tasks]
    all_count = len(tasks) if total is None else total
    lines.append(f"({len(tasks)} of {all_count} shown)")
    return "\n".join(lines)


def _resolve(state: AppState, args: list[str]) -> TaskRecord | None:
    if not args:
        return None
    return find_by_prefix(state.task_store.load(), args[0])


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    tasks = state.task_store.load()
    offline = "ON" if getattr(settings, "offline_mode", False) else "OFF"
    return (
        "Status:\n"
        f"  Model: {getattr(settings, 'llm_model', '?')}\n"
        f"  Offline demo: {offline}\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} ({getattr(settings, 'storage_path', '?')})\n"
        f"  Tasks: {len(tasks)} ({progress_percent(tasks)}% complete)"
    )


def cmd_generate(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    description = " ".join(args).strip()
    if not description:
        return "Usage: /generate <project description>"

    if emit:
        emit("Generating tasks...")

    try:
        tasks = run_async(state, task_api.generate_tasks(state, description))
    except PlannerError as e:
        return f"Error: {friendly_llm_error_message(e)}"

    return f"Generated {len(tasks)} task(s).\n" + format_task_list(tasks)


def cmd_update(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    requirements = " ".join(args).strip()
    if not requirements:
        return "Usage: /update <new requirements>"

    if emit:
        emit("Updating incomplete tasks...")

    try:
        result = run_async(state, task_api.update_tasks(state, requirements))
    except PlannerError as e:
        return f"Error: {friendly_llm_error_message(e)}"

    lines = [result.message]
    if result.updated_ids:
        lines.append(f"  updated: {len(result.updated_ids)}")
    if result.failed_ids:
        lines.append(f"  unchanged after errors: {len(result.failed_ids)} (see log)")
    return "\n".join(lines)


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                      -> all tasks, oldest first
    /list active|completed     -> filter by status
    /list all desc             -> newest first
    """
    status = TaskFilter.ALL
    order = SortOrder.ASC
    for a in args:
        a = a.lower()
        if a in {f.value for f in TaskFilter}:
            status = TaskFilter(a)
        elif a in {o.value for o in SortOrder}:
            order = SortOrder(a)

    tasks = state.task_store.load()
    shown = select_tasks(tasks, status=status, order=order)
    return format_task_list(shown, total=len(tasks))


def cmd_search(state: AppState, args: list[str]) -> str:
    query = " ".join(args).strip()
    if not query:
        return "Usage: /search <text>"
    tasks = state.task_store.load()
    return format_task_list(select_tasks(tasks, query=query), total=len(tasks))


def cmd_show(state: AppState, args: list[str]) -> str:
    t = _resolve(state, args)
    if t is None:
        return "Usage: /show <task id or unique prefix>"

    lines = [
        f"{t.title}  [{'done' if t.completed else 'open'}]",
        f"id: {t.id}",
        f"created: {t.created_at}" + (f"  updated: {t.updated_at}" if t.updated_at else ""),
        "",
        t.description,
    ]
    if t.implementation:
        lines += ["", "Implementation:", t.implementation]
    if t.code_snippet:
        lines += ["", f"Code ({detect_language(t.code_snippet)}):", t.code_snippet]
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    t = _resolve(state, args)
    if t is None:
        return "Usage: /done <task id or unique prefix>"
    tasks = state.task_store.toggle_completed(t.id)
    return f"{'Completed' if not t.completed else 'Reopened'}: {t.title} ({progress_percent(tasks)}% complete)"


def cmd_delete(state: AppState, args: list[str]) -> str:
    t = _resolve(state, args)
    if t is None:
        return "Usage: /delete <task id or unique prefix>"
    tasks = state.task_store.delete(t.id)
    return f"Deleted: {t.title} ({len(tasks)} task(s) left)"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> <title> | <description>"""
    t = _resolve(state, args)
    if t is None:
        return "Usage: /edit <task id> <title> | <description>"

    rest = " ".join(args[1:])
    title, sep, description = rest.partition("|")
    title = title.strip()
    description = description.strip() if sep else t.description

    try:
        state.task_store.edit(t.id, title, description)
    except PlannerError as e:
        return f"Error: {e}"
    return f"Saved: {title}"


def cmd_export(state: AppState, args: list[str]) -> str:
    """/export <id> [path]  (default: <id prefix>.<ext> in the current directory)"""
    t = _resolve(state, args)
    if t is None:
        return "Usage: /export <task id> [path]"
    if not t.code_snippet:
        return f"No code snippet for: {t.title}"

    if len(args) > 1:
        path = Path(" ".join(args[1:]))
        language = detect_language(t.code_snippet, filename=path.name)
    else:
        language = detect_language(t.code_snippet)
        path = Path(f"{t.id[:8]}.{extension_for(language)}")

    try:
        path.write_text(t.code_snippet, encoding="utf-8")
    except OSError as e:
        logger.error("Export of task %s to %s failed: %s", t.id, path, e)
        return f"Error: {e}"
    return f"Exported {language} snippet to {path}"


def cmd_progress(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.load()
    done = sum(1 for t in tasks if t.completed)
    pct = progress_percent(tasks)
    bar = "#" * (pct // 5) + "-" * (20 - pct // 5)
    return f"[{bar}] {pct}% ({done}/{len(tasks)} tasks)"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show model, storage and task totals.")
registry.register("generate", cmd_generate, help_text="Generate a new task list: /generate <description>.", aliases=["gen"])
registry.register("update", cmd_update, help_text="Update incomplete tasks: /update <requirements>.")
registry.register("list", cmd_list, help_text="List tasks: /list [all|active|completed] [asc|desc].", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search titles and descriptions: /search <text>.")
registry.register("show", cmd_show, help_text="Show one task with guide and code: /show <id>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> | <description>.")
registry.register("progress", cmd_progress, help_text="Show completion progress.")
registry.register("export", cmd_export, help_text="Save a task's code snippet to a file: /export <id> [path].", aliases=["save"])
