# src/code_planner/tasks/language.py

from __future__ import annotations

from collections.abc import Callable

DEFAULT_LANGUAGE = "typescript"

EXTENSION_LANGUAGES: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "jsx": "jsx",
    "tsx": "tsx",
    "py": "python",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "h": "c",
    "hpp": "cpp",
    "cs": "csharp",
    "php": "php",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "xml": "xml",
    "md": "markdown",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "sh": "bash",
    "sql": "sql",
}


def _has(*needles: str) -> Callable[[str], bool]:
    return lambda code: any(n in code for n in needles)


def _has_all(*needles: str) -> Callable[[str], bool]:
    return lambda code: all(n in code for n in needles)


# First match wins; order matters (e.g. jsx before json).
CONTENT_RULES: list[tuple[str, Callable[[str], bool]]] = [
    ("jsx", _has("import React", "useState", "export default", "function Component")),
    ("tsx", lambda c: ".tsx" in c or _has_all("<", ">", ":")(c)),
    ("python", lambda c: _has_all("def ", ":")(c) and "{" not in c),
    ("rust", lambda c: _has("let mut", "impl ")(c) or _has_all("fn ", "->")(c)),
    ("go", lambda c: "package main" in c or _has_all("func ", "interface {}")(c)),
    ("java", _has("public class", "public static void main")),
    ("bash", _has("npm ", "yarn ", "$", "bash")),
    ("json", lambda c: _has_all("{", "}", ":")(c) and "function" not in c),
    ("css", _has(".css", "@media", ":hover")),
    ("markdown", _has("##", "```")),
    ("sql", lambda c: _has_all("SELECT ", "FROM ")(c) and _has("WHERE ", "JOIN ")(c)),
]


def detect_language(code: str, filename: str | None = None) -> str:
    """Guess a highlight language: file extension first, then content rules."""
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        lang = EXTENSION_LANGUAGES.get(ext)
        if lang:
            return lang

    if code:
        for lang, matches in CONTENT_RULES:
            if matches(code):
                return lang

    return DEFAULT_LANGUAGE


def extension_for(language: str) -> str:
    """File extension for a language name; the first matching entry wins, "txt" otherwise."""
    for ext, lang in EXTENSION_LANGUAGES.items():
        if lang == language:
            return ext
    return "txt"
