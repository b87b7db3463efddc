# src/code_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The generator/updater and the task store depend on Protocols instead of concrete
implementations. This keeps the LLM provider and the persistence backend
swappable and makes testing easier.
"""

from typing import Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Single-shot chat completion client (OpenAI-compatible)."""

    async def complete(
            self,
            messages: list[ChatMessage],
            *,
            max_tokens: int | None = None,
            temperature: float | None = None,
    ) -> str: ...


class KeyValueStorage(Protocol):
    """
    Named-slot persistence (the role localStorage plays in a browser).

    get() returns None for a missing slot. set() overwrites the slot wholesale.
    Implementations may raise on I/O failure; TaskStore handles that.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
