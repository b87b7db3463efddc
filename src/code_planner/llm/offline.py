# src/code_planner/llm/offline.py

from __future__ import annotations

import json

from ..core.ports import ChatMessage


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Behavior:
    - Task generation prompts -> a small fixed plan built around the user's text
    - Task update prompts -> an {implementation, codeSnippet} object echoing the requirements
    """

    async def complete(
            self,
            messages: list[ChatMessage],
            *,
            max_tokens: int | None = None,
            temperature: float | None = None,
    ) -> str:
        system = next((m["content"] for m in messages if m["role"] == "system"), "")
        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        if "JSON array of tasks" in system:
            return json.dumps(self._plan(user_text))

        if "NEW REQUIREMENTS TO INCORPORATE:" in user_text:
            req = user_text.split("NEW REQUIREMENTS TO INCORPORATE:", 1)[1]
            req = req.split("Please provide:", 1)[0].strip()
            return json.dumps(
                {
                    "implementation": (
                        "Offline demo mode: no external LLM is configured.\n"
                        f"1. Review the task against the new requirements: {req}\n"
                        "2. Adjust the implementation and tests accordingly."
                    ),
                    "codeSnippet": f"# offline demo, requirement:\n# {req}",
                }
            )

        return json.dumps({"implementation": "", "codeSnippet": ""})

    @staticmethod
    def _plan(description: str) -> list[dict[str, object]]:
        topic = " ".join(description.split())[:80] or "the project"
        steps = [
            ("Set up the project", f"Create the repository, tooling and CI for {topic}."),
            ("Model the data", f"Define the core entities and storage for {topic}."),
            ("Build the main feature", f"Implement the primary user flow for {topic}."),
        ]
        return [
            {
                "id": f"offline-{i}",
                "title": title,
                "description": desc,
                "implementation": "Offline demo mode: set OPENAI_API_KEY to get real guidance.",
                "codeSnippet": "",
                "completed": False,
            }
            for i, (title, desc) in enumerate(steps, start=1)
        ]
