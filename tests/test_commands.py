# tests/test_commands.py

from __future__ import annotations

import json

from code_planner.cli.commands import CommandRegistry, registry
from code_planner.cli.console import route_plain_text
from code_planner.errors import ConfigurationError

from .conftest import make_task, update_reply


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    notes: list[str] = []
    assert reg.handle(state, "/a x y") == "h2:x,y"
    assert reg.handle(state, "/BEE y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_help_lists_task_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("generate", "update", "list", "done", "delete", "edit", "show"):
        assert f"/{name}" in text


def test_generate_list_done_flow(state, llm) -> None:
    llm.next_text = json.dumps(
        [
            {"id": "aaaa1111", "title": "Setup", "createdAt": "2024-01-01T00:00:00Z"},
            {"id": "bbbb2222", "title": "Feature", "createdAt": "2024-01-02T00:00:00Z"},
        ]
    )
    notes: list[str] = []

    out = registry.handle(state, "/generate A todo app", emit=notes.append) or ""
    assert "Generated 2 task(s)" in out
    assert notes == ["Generating tasks..."]

    assert "Completed: Setup" in (registry.handle(state, "/done aaaa") or "")
    assert "50%" in (registry.handle(state, "/progress") or "")

    active = registry.handle(state, "/list active") or ""
    assert "Feature" in active
    assert "Setup" not in active


def test_generate_reports_configuration_error(state, llm) -> None:
    llm.error = ConfigurationError("OpenAI API key not configured")

    out = registry.handle(state, "/generate A todo app") or ""

    assert out == f"Error: {ConfigurationError.public_message}"
    assert not state.busy.locked()


def test_update_command(state, llm) -> None:
    state.task_store.save([make_task("1", completed=True), make_task("2")])
    llm.next_text = update_reply("new", "new()")

    out = registry.handle(state, "/update add auth") or ""

    assert out.startswith("Tasks updated successfully")
    assert state.task_store.get("2").implementation == "new"


def test_edit_show_delete(state) -> None:
    state.task_store.save([make_task("abc", "Old", code_snippet="def f():\n    return 1")])

    assert registry.handle(state, "/edit abc New title | New description") == "Saved: New title"
    shown = registry.handle(state, "/show abc") or ""
    assert "New title" in shown
    assert "New description" in shown
    assert "Code (python):" in shown

    assert "Error" in (registry.handle(state, "/edit abc | only description") or "")

    assert "Deleted: New title" in (registry.handle(state, "/delete abc") or "")
    assert state.task_store.load() == []
    assert (registry.handle(state, "/show abc") or "").startswith("Usage")


def test_plain_text_routes_to_generate_then_update(state) -> None:
    assert route_plain_text(state, "a blog") == "/generate a blog"
    state.task_store.save([make_task("1")])
    assert route_plain_text(state, "add tags") == "/update add tags"


def test_export_writes_snippet_with_detected_extension(state, tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    state.task_store.save([make_task("abc", "Py", code_snippet="def f():\n    return 1"), make_task("def", "Empty")])

    assert registry.handle(state, "/export abc") == "Exported python snippet to abc.py"
    assert (tmp_path / "abc.py").read_text(encoding="utf-8") == "def f():\n    return 1"

    target = tmp_path / "snippet.ts"
    assert registry.handle(state, f"/export abc {target}") == f"Exported typescript snippet to {target}"
    assert target.read_text(encoding="utf-8").startswith("def f():")

    assert registry.handle(state, "/export def") == "No code snippet for: Empty"
    assert (registry.handle(state, "/export") or "").startswith("Usage")
    assert "Error" in (registry.handle(state, f"/export abc {tmp_path / 'missing' / 'x.py'}") or "")
