# tests/test_updater.py

from __future__ import annotations

import asyncio
import json

import pytest

from code_planner.errors import ConfigurationError, ValidationError
from code_planner.tasks.updater import (
    MSG_NOTHING_TO_UPDATE,
    MSG_UPDATED,
    build_update_prompt,
    update_tasks,
)

from .conftest import make_task, update_reply
from .fakes import BarrierLLMClient, FakeLLMClient


def _by_title(replies: dict[str, str | Exception]):
    def responder(messages):
        prompt = messages[-1]["content"]
        for title, reply in replies.items():
            if f"Title: {title}\n" in prompt:
                return reply
        raise AssertionError(f"unexpected prompt: {prompt[:200]}")

    return responder


@pytest.mark.asyncio
async def test_update_single_task_example() -> None:
    existing = [
        make_task("1", "Setup DB", description="...", created_at="2024-01-01T00:00:00Z"),
    ]
    llm = FakeLLMClient(update_reply("Install Postgres and configure the pool", "pool = create_pool()"))

    result = await update_tasks(llm, existing, [], "add Postgres support")

    assert result.message == MSG_UPDATED
    assert len(result.tasks) == 1
    t = result.tasks[0]
    assert t.id == "1"
    assert t.implementation == "Install Postgres and configure the pool"
    assert t.code_snippet == "pool = create_pool()"
    assert t.completed is False
    assert t.created_at == "2024-01-01T00:00:00Z"
    assert result.updated_ids == ["1"]
    assert llm.calls[0].max_tokens == 1500
    assert llm.calls[0].messages[0]["role"] == "user"


@pytest.mark.asyncio
async def test_update_all_completed_returns_input_without_calls() -> None:
    existing = [make_task("1", completed=True), make_task("2")]
    llm = FakeLLMClient(error=ConfigurationError("no key"))

    result = await update_tasks(llm, existing, ["1", "2"], "anything")

    assert result.message == MSG_NOTHING_TO_UPDATE
    assert result.tasks == existing
    assert llm.calls == []


@pytest.mark.asyncio
async def test_update_empty_list_short_circuits() -> None:
    result = await update_tasks(FakeLLMClient(), [], [], "anything")

    assert result.message == MSG_NOTHING_TO_UPDATE
    assert result.tasks == []


@pytest.mark.asyncio
async def test_update_isolates_per_task_failures_and_keeps_order() -> None:
    a = make_task("a", "Alpha", implementation="old a", code_snippet="a()")
    b = make_task("b", "Beta", implementation="old b", code_snippet="b()")
    c = make_task("c", "Gamma", completed=True, implementation="old c")
    d = make_task("d", "Delta")
    e = make_task("e", "Epsilon", implementation="old e")
    existing = [a, b, c, d, e]

    llm = FakeLLMClient(
        responder=_by_title(
            {
                "Alpha": update_reply("new a", "A()"),
                "Beta": RuntimeError("network down"),
                "Delta": "this is not json",
                "Epsilon": json.dumps(["not", "an", "object"]),
            }
        )
    )

    result = await update_tasks(llm, existing, {"c"}, "use async IO")

    assert [t.id for t in result.tasks] == ["a", "b", "c", "d", "e"]
    assert len(result.tasks) == len(existing)

    assert result.tasks[0].implementation == "new a"
    assert result.tasks[0].code_snippet == "A()"
    assert result.tasks[1] is b
    assert result.tasks[2] is c
    assert result.tasks[3] is d
    assert result.tasks[4] is e

    assert result.updated_ids == ["a"]
    assert sorted(result.failed_ids) == ["b", "d", "e"]
    assert len(llm.calls) == 4
    # input records are never mutated
    assert a.implementation == "old a"


@pytest.mark.asyncio
async def test_update_missing_fields_fall_back_to_previous_values() -> None:
    existing = [make_task("1", "One", implementation="keep me", code_snippet="keep()")]
    llm = FakeLLMClient(json.dumps({"implementation": "", "codeSnippet": "fresh()"}))

    result = await update_tasks(llm, existing, [], "more tests")

    assert result.tasks[0].implementation == "keep me"
    assert result.tasks[0].code_snippet == "fresh()"


@pytest.mark.asyncio
async def test_update_calls_run_concurrently() -> None:
    existing = [make_task(str(i)) for i in range(4)]
    llm = BarrierLLMClient(expected=4, next_text=update_reply("impl", "code"))

    result = await asyncio.wait_for(update_tasks(llm, existing, [], "parallel"), timeout=2.0)

    assert llm.peak == 4
    assert result.updated_ids == ["0", "1", "2", "3"]


@pytest.mark.asyncio
async def test_update_missing_credential_aborts() -> None:
    llm = FakeLLMClient(error=ConfigurationError("OpenAI API key not configured"))

    with pytest.raises(ConfigurationError):
        await update_tasks(llm, [make_task("1")], [], "anything")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("existing", "requirements"),
    [(None, "req"), ([], ""), ([], None), ([], "   ")],
)
async def test_update_rejects_missing_input(existing, requirements) -> None:
    with pytest.raises(ValidationError):
        await update_tasks(FakeLLMClient(), existing, [], requirements)


def test_update_prompt_only_mentions_non_empty_fields() -> None:
    bare = build_update_prompt(make_task("1", "Setup DB"), "add Postgres")
    assert "Title: Setup DB" in bare
    assert "Current Implementation" not in bare
    assert "Current Code Snippet" not in bare
    assert "NEW REQUIREMENTS TO INCORPORATE:\nadd Postgres" in bare

    full = build_update_prompt(
        make_task("1", "Setup DB", implementation="step 1", code_snippet="x = 1"),
        "add Postgres",
    )
    assert "Current Implementation: step 1" in full
    assert "Current Code Snippet: x = 1" in full
