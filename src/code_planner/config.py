# src/code_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the API key is checked on first LLM call).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "PLANNER"

STORAGE_BACKENDS = ("sqlite", "file", "memory")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- LLM / OpenAI ----
    openai_api_key: Optional[str]
    openai_base_url: Optional[str]
    llm_model: str
    llm_temperature: float
    generate_max_tokens: int
    update_max_tokens: int
    llm_timeout_seconds: Optional[float]
    offline_mode: bool

    # ---- Local data (ignored by git) ----
    data_dir: Path
    storage_backend: str
    storage_path: Path
    storage_key: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "code-planner") or "code-planner"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _first_env(_k("OPENAI_BASE_URL"), "OPENAI_BASE_URL", default=None)
        llm_model = _env(_k("LLM_MODEL"), "gpt-4o").strip() or "gpt-4o"
        llm_temperature = _env_float(_k("LLM_TEMPERATURE"), 0.7)
        generate_max_tokens = _env_int(_k("GENERATE_MAX_TOKENS"), 4000)
        update_max_tokens = _env_int(_k("UPDATE_MAX_TOKENS"), 1500)
        llm_timeout_seconds = _env_float(_k("LLM_TIMEOUT_SECONDS"), None)
        offline_mode = _env_bool(_k("OFFLINE"), False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/code_planner"))

        storage_backend = _env(_k("STORAGE_BACKEND"), "sqlite").strip().lower()
        if storage_backend not in STORAGE_BACKENDS:
            storage_backend = "sqlite"

        default_storage = data_dir / ("planner.sqlite3" if storage_backend == "sqlite" else "storage")
        storage_path = _env_path(_k("STORAGE_PATH"), default_storage)
        storage_key = _env(_k("STORAGE_KEY"), "todos").strip() or "todos"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            llm_model=llm_model,
            llm_temperature=0.7 if llm_temperature is None else llm_temperature,
            generate_max_tokens=generate_max_tokens,
            update_max_tokens=update_max_tokens,
            llm_timeout_seconds=llm_timeout_seconds,
            offline_mode=offline_mode,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_path=storage_path,
            storage_key=storage_key,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
