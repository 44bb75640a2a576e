"""Centralised configuration and constants."""

from __future__ import annotations

import os
from pathlib import Path

from gitfame.exceptions import ConfigurationError

# ── Paths ───────────────────────────────────────────────────────────────────
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
DATA_DIR: Path = PROJECT_ROOT / "data"
PROCESSED_DIR: Path = DATA_DIR / "processed"

# ── Repository target ──────────────────────────────────────────────────────
DEFAULT_REPOSITORY: str = os.getenv("GITFAME_REPOSITORY", ".")
DEFAULT_REVISION: str = os.getenv("GITFAME_REVISION", "HEAD")

# ── Ranking & output ───────────────────────────────────────────────────────
ORDER_KEYS: tuple[str, ...] = ("lines", "commits", "files")
DEFAULT_ORDER_BY: str = "lines"
OUTPUT_FORMATS: tuple[str, ...] = ("tabular", "csv", "json", "json-lines")
DEFAULT_FORMAT: str = "tabular"

# ── Blame parsing ──────────────────────────────────────────────────────────
AUTHOR_PREFIX: str = "author "
COMMITTER_PREFIX: str = "committer "

# ── Worker pool ────────────────────────────────────────────────────────────
WORKERS_ENV: str = "GITFAME_WORKERS"
DEFAULT_WORKERS: int = min(8, os.cpu_count() or 1)
PROGRESS_EVERY: int = 50  # files between progress log lines

# ── Language → extensions map (used by --languages) ───────────────────────
LANGUAGE_EXTENSIONS: dict[str, list[str]] = {
    "c": [".c", ".h"],
    "c++": [".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx"],
    "c#": [".cs"],
    "css": [".css", ".scss", ".sass", ".less"],
    "go": [".go"],
    "html": [".html", ".htm"],
    "java": [".java"],
    "javascript": [".js", ".mjs", ".cjs", ".jsx"],
    "json": [".json"],
    "kotlin": [".kt", ".kts"],
    "markdown": [".md", ".markdown"],
    "php": [".php"],
    "python": [".py", ".pyi"],
    "ruby": [".rb"],
    "rust": [".rs"],
    "shell": [".sh", ".bash", ".zsh"],
    "sql": [".sql"],
    "swift": [".swift"],
    "typescript": [".ts", ".tsx"],
    "yaml": [".yml", ".yaml"],
}


def workers_from_env() -> int:
    """Worker count from ``GITFAME_WORKERS``, else ``DEFAULT_WORKERS``."""
    raw = os.getenv(WORKERS_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_WORKERS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{WORKERS_ENV} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigurationError(f"{WORKERS_ENV} must be at least 1, got {value}")
    return value
