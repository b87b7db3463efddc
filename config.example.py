# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name (default: code-planner).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: INFO).",
    # LLM / OpenAI
    "OPENAI_API_KEY": "OpenAI API key (PLANNER_OPENAI_API_KEY takes precedence).",
    "PLANNER_OPENAI_BASE_URL": "Optional OpenAI-compatible base URL.",
    "PLANNER_LLM_MODEL": "Chat model used for generate/update (default: gpt-4o).",
    "PLANNER_LLM_TEMPERATURE": "Sampling temperature (default: 0.7).",
    "PLANNER_GENERATE_MAX_TOKENS": "Max tokens for task generation (default: 4000).",
    "PLANNER_UPDATE_MAX_TOKENS": "Max tokens per task update (default: 1500).",
    "PLANNER_LLM_TIMEOUT_SECONDS": "Request timeout; unset uses the SDK default.",
    "PLANNER_OFFLINE": "Use the deterministic offline client (true/false).",
    # Storage
    "PLANNER_DATA_DIR": "Local data directory (default: .local/code_planner).",
    "PLANNER_STORAGE_BACKEND": "sqlite | file | memory (default: sqlite).",
    "PLANNER_STORAGE_PATH": "SQLite file or slot directory (default: under PLANNER_DATA_DIR).",
    "PLANNER_STORAGE_KEY": "Slot name holding the task list (default: todos).",
}
