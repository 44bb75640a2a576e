"""Selection of the files to blame: extension, language and glob filters."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable, Sequence

from gitfame.config import LANGUAGE_EXTENSIONS
from gitfame.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# ── Pattern validation ─────────────────────────────────────────────────────

def validate_pattern(pattern: str) -> str:
    """Reject empty globs and globs with an unclosed ``[`` class."""
    if not pattern:
        raise ConfigurationError("empty glob pattern")
    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            j = i + 1
            if j < len(pattern) and pattern[j] in "!^":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                raise ConfigurationError(f"malformed glob pattern {pattern!r}: unclosed '['")
            i = close
        i += 1
    return pattern


def validate_patterns(patterns: Iterable[str]) -> list[str]:
    return [validate_pattern(p) for p in patterns]


# ── Extensions & languages ─────────────────────────────────────────────────

def _normalise_extension(ext: str) -> str:
    ext = ext.strip()
    return ext if ext.startswith(".") else f".{ext}"


def language_extensions(languages: Iterable[str]) -> list[str]:
    """Extensions for the named languages (case-insensitive).

    Unknown languages are skipped with a warning.
    """
    result: list[str] = []
    for lang in languages:
        exts = LANGUAGE_EXTENSIONS.get(lang.strip().lower())
        if exts is None:
            logger.warning("Unknown language %r ignored", lang)
            continue
        result.extend(exts)
    return result


def filter_by_extension(files: Iterable[str], extensions: Iterable[str]) -> list[str]:
    """Keep files whose final suffix is one of *extensions*."""
    wanted = {_normalise_extension(e) for e in extensions if e.strip()}
    return [f for f in files if os.path.splitext(f)[1] in wanted]


# ── Globs ──────────────────────────────────────────────────────────────────

def match_path(pattern: str, path: str) -> bool:
    """Shell-style match where wildcards never cross a '/'.

    ``*`` and ``?`` stay inside one path segment, so ``vendor/*`` matches
    ``vendor/x.go`` but not ``vendor/lib/y.go``.
    """
    pattern_parts = pattern.split("/")
    path_parts = path.split("/")
    if len(pattern_parts) != len(path_parts):
        return False
    return all(fnmatch.fnmatchcase(p, pat) for p, pat in zip(path_parts, pattern_parts))


def _matches_any(path: str, patterns: Sequence[str]) -> bool:
    return any(match_path(p, path) for p in patterns)


def exclude(files: Iterable[str], patterns: Sequence[str]) -> list[str]:
    """Drop files matching any of *patterns*."""
    return [f for f in files if not _matches_any(f, patterns)]


def restrict_to(files: Iterable[str], patterns: Sequence[str]) -> list[str]:
    """Keep only files matching at least one of *patterns*."""
    return [f for f in files if _matches_any(f, patterns)]


# ── Orchestrator ───────────────────────────────────────────────────────────

def select_files(
    files: Iterable[str],
    extensions: Sequence[str] = (),
    languages: Sequence[str] = (),
    exclude_patterns: Sequence[str] = (),
    restrict_patterns: Sequence[str] = (),
) -> list[str]:
    """Apply extension/language, exclude and restrict-to filters in that order.

    When any extension or language was asked for, extension filtering
    applies even if the languages were all unknown, which selects nothing
    rather than everything.
    """
    selected = list(files)

    if extensions or languages:
        wanted = list(extensions) + language_extensions(languages)
        selected = filter_by_extension(selected, wanted)

    if exclude_patterns:
        selected = exclude(selected, validate_patterns(exclude_patterns))

    if restrict_patterns:
        selected = restrict_to(selected, validate_patterns(restrict_patterns))

    return selected
