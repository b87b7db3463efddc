# src/code_planner/tasks/parsing.py

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*\s*\n(?P<body>.*?)\n?```$", re.DOTALL)


def strip_code_fence(raw: str) -> str:
    """Remove a single surrounding Markdown code fence (```json ... ```), if present."""
    raw = (raw or "").strip()
    m = _FENCE_RE.match(raw)
    if m:
        return m.group("body").strip()
    return raw


def parse_model_json(raw: str) -> Any:
    """
    Parse model output as JSON in one attempt.

    Raises ValueError (json.JSONDecodeError) with the parser's message on failure.
    """
    return json.loads(strip_code_fence(raw))
