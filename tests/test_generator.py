# tests/test_generator.py

from __future__ import annotations

import json

import pytest

from code_planner.errors import ConfigurationError, UpstreamError, ValidationError
from code_planner.tasks.generator import GENERATE_SYSTEM_PROMPT, generate_tasks
from code_planner.tasks.task_models import NO_DESCRIPTION, UNTITLED_TASK, is_iso_timestamp

from .fakes import FakeLLMClient


def _assert_well_formed(tasks) -> None:
    ids = [t.id for t in tasks]
    assert len(ids) == len(set(ids))
    for t in tasks:
        assert t.id
        assert t.title
        assert t.description
        assert is_iso_timestamp(t.created_at)
        assert t.completed is False
        assert isinstance(t.implementation, str)
        assert isinstance(t.code_snippet, str)


@pytest.mark.asyncio
async def test_generate_sends_system_and_user_messages() -> None:
    llm = FakeLLMClient(json.dumps([{"id": "a", "title": "Setup", "description": "Init repo"}]))

    tasks = await generate_tasks(llm, "Build a blog")

    assert len(llm.calls) == 1
    call = llm.calls[0]
    assert call.messages == [
        {"role": "system", "content": GENERATE_SYSTEM_PROMPT},
        {"role": "user", "content": "Build a blog"},
    ]
    assert call.max_tokens == 4000
    assert [t.id for t in tasks] == ["a"]
    _assert_well_formed(tasks)


@pytest.mark.asyncio
async def test_generate_fills_missing_fields_and_forces_incomplete() -> None:
    llm = FakeLLMClient(
        json.dumps(
            [
                {"title": "", "completed": True, "createdAt": "yesterday"},
                {"id": 7, "title": "Auth", "description": "Login", "implementation": "Use sessions",
                 "codeSnippet": "login()", "completed": True, "createdAt": "2024-03-01T10:00:00Z"},
            ]
        )
    )

    tasks = await generate_tasks(llm, "Build a blog")

    first, second = tasks
    assert first.title == UNTITLED_TASK
    assert first.description == NO_DESCRIPTION
    assert first.implementation == ""
    assert first.code_snippet == ""
    assert first.id
    assert first.created_at != "yesterday"

    assert second.id == "7"
    assert second.implementation == "Use sessions"
    assert second.code_snippet == "login()"
    assert second.created_at == "2024-03-01T10:00:00Z"
    _assert_well_formed(tasks)


@pytest.mark.asyncio
async def test_generate_replaces_duplicate_ids_and_skips_non_objects() -> None:
    llm = FakeLLMClient(json.dumps([{"id": "x", "title": "A"}, "junk", {"id": "x", "title": "B"}]))

    tasks = await generate_tasks(llm, "Something")

    assert [t.title for t in tasks] == ["A", "B"]
    assert tasks[0].id == "x"
    assert tasks[1].id != "x"
    _assert_well_formed(tasks)


@pytest.mark.asyncio
async def test_generate_accepts_fenced_json() -> None:
    llm = FakeLLMClient('```json\n[{"id": "1", "title": "Fenced"}]\n```')

    tasks = await generate_tasks(llm, "Something")

    assert [t.title for t in tasks] == ["Fenced"]


@pytest.mark.asyncio
async def test_generate_two_calls_each_well_formed() -> None:
    replies = iter(
        [
            json.dumps([{"title": "One"}]),
            json.dumps([{"title": "Two"}, {"title": "Three"}]),
        ]
    )
    llm = FakeLLMClient(responder=lambda _messages: next(replies))

    first = await generate_tasks(llm, "Same description")
    second = await generate_tasks(llm, "Same description")

    assert len(first) == 1
    assert len(second) == 2
    _assert_well_formed(first)
    _assert_well_formed(second)


@pytest.mark.asyncio
@pytest.mark.parametrize("description", ["", "   ", None, 42, ["text"]])
async def test_generate_rejects_invalid_description(description) -> None:
    llm = FakeLLMClient()

    with pytest.raises(ValidationError):
        await generate_tasks(llm, description)

    assert llm.calls == []


@pytest.mark.asyncio
async def test_generate_rejects_non_array_reply() -> None:
    llm = FakeLLMClient(json.dumps({"tasks": []}))

    with pytest.raises(UpstreamError, match="not an array"):
        await generate_tasks(llm, "Build a blog")


@pytest.mark.asyncio
async def test_generate_embeds_parser_message() -> None:
    llm = FakeLLMClient("Sure! Here are your tasks: [")

    with pytest.raises(UpstreamError, match="Failed to parse task data: Expecting value"):
        await generate_tasks(llm, "Build a blog")

    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_generate_empty_reply_is_upstream_error() -> None:
    llm = FakeLLMClient("")

    with pytest.raises(UpstreamError):
        await generate_tasks(llm, "Build a blog")


@pytest.mark.asyncio
async def test_generate_wraps_transport_errors() -> None:
    llm = FakeLLMClient(error=ConnectionError("connection reset"))

    with pytest.raises(UpstreamError, match="Failed to generate tasks: connection reset"):
        await generate_tasks(llm, "Build a blog")


@pytest.mark.asyncio
async def test_generate_propagates_configuration_error() -> None:
    llm = FakeLLMClient(error=ConfigurationError("OpenAI API key not configured"))

    with pytest.raises(ConfigurationError):
        await generate_tasks(llm, "Build a blog")
