"""Domain models for gitfame."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Statistics:
    """Final per-author counts."""

    lines: int
    commits: int
    files: int


@dataclass(frozen=True)
class RankedAuthor:
    """One row of the final report."""

    name: str
    statistics: Statistics

    def to_dict(self) -> dict:
        """Flat record with ``name, lines, commits, files`` in that order."""
        return {
            "name": self.name,
            "lines": self.statistics.lines,
            "commits": self.statistics.commits,
            "files": self.statistics.files,
        }


@dataclass
class FileBlame:
    """Ownership facts parsed from one file's blame output.

    ``lines`` maps commit → lines currently attributed to it in this file.
    ``authors`` maps commit → identity, only for the commits whose identity
    header was present in this file's record stream.
    """

    path: str
    lines: dict[str, int] = field(default_factory=dict)
    authors: dict[str, str] = field(default_factory=dict)

    @property
    def total_lines(self) -> int:
        """Sum of attributed lines; equals the file's line count."""
        return sum(self.lines.values())

    @classmethod
    def from_last_commit(cls, path: str, commit: str, name: str) -> FileBlame:
        """Zero-line attribution for a file blame had nothing to say about."""
        return cls(path=path, lines={commit: 0}, authors={commit: name})
