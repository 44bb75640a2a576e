"""Smoke tests for gitfame packaging and models."""

from __future__ import annotations

import os
import subprocess
import sys

import pytest

from gitfame.config import DEFAULT_WORKERS, WORKERS_ENV, workers_from_env
from gitfame.exceptions import ConfigurationError
from gitfame.models import FileBlame, RankedAuthor, Statistics


def test_module_entry_point() -> None:
    """``python -m gitfame --version`` exits 0 and prints version info."""
    result = subprocess.run(
        [sys.executable, "-m", "gitfame", "--version"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "gitfame" in result.stdout


def test_imports() -> None:
    """All package modules are importable."""
    from gitfame import __version__
    from gitfame.aggregate import Aggregator  # noqa: F401
    from gitfame.blame import parse_porcelain  # noqa: F401
    from gitfame.cli import main  # noqa: F401
    from gitfame.config import LANGUAGE_EXTENSIONS, ORDER_KEYS, OUTPUT_FORMATS
    from gitfame.formatters import render  # noqa: F401
    from gitfame.git import GitRepository  # noqa: F401
    from gitfame.pipeline import collect_statistics  # noqa: F401
    from gitfame.ranking import rank_authors  # noqa: F401

    assert isinstance(__version__, str)
    assert ORDER_KEYS == ("lines", "commits", "files")
    assert "json-lines" in OUTPUT_FORMATS
    assert all(ext.startswith(".") for exts in LANGUAGE_EXTENSIONS.values() for ext in exts)


# ── Model tests ─────────────────────────────────────────────────────────────


def test_ranked_author_to_dict_field_order() -> None:
    author = RankedAuthor("Alice", Statistics(lines=15, commits=1, files=2))
    assert list(author.to_dict()) == ["name", "lines", "commits", "files"]
    assert author.to_dict() == {"name": "Alice", "lines": 15, "commits": 1, "files": 2}


def test_file_blame_total_lines() -> None:
    blame = FileBlame("a.py", lines={"c1": 3, "c2": 4})
    assert blame.total_lines == 7


def test_file_blame_from_last_commit() -> None:
    blame = FileBlame.from_last_commit("empty.txt", "c3", "Carol")
    assert blame.lines == {"c3": 0}
    assert blame.authors == {"c3": "Carol"}
    assert blame.total_lines == 0


# ── Config tests ────────────────────────────────────────────────────────────


def test_workers_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(WORKERS_ENV, raising=False)
    assert workers_from_env() == DEFAULT_WORKERS >= 1

    monkeypatch.setenv(WORKERS_ENV, "3")
    assert workers_from_env() == 3


@pytest.mark.parametrize("value", ["abc", "2.5", "0", "-1"])
def test_bad_workers_env_is_a_configuration_error(
    monkeypatch: pytest.MonkeyPatch, value: str
) -> None:
    monkeypatch.setenv(WORKERS_ENV, value)
    with pytest.raises(ConfigurationError, match=WORKERS_ENV):
        workers_from_env()


def test_bad_workers_env_does_not_break_startup() -> None:
    """The package imports and ``--version`` still works with a junk value."""
    result = subprocess.run(
        [sys.executable, "-m", "gitfame", "--version"],
        capture_output=True,
        text=True,
        env={**os.environ, WORKERS_ENV: "lots"},
    )
    assert result.returncode == 0, result.stderr
