"""Cross-file aggregation and the final statistics reduction.

``lines`` is a true sum over every chunk of every file, while ``commits``
and ``files`` are set cardinalities: a commit seen in five files counts
once, and a file counts once per author no matter how many chunks they own.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from gitfame.exceptions import MalformedBlameError
from gitfame.models import FileBlame, RankedAuthor, Statistics

logger = logging.getLogger(__name__)


@dataclass
class _PendingFile:
    """Commits of an already-merged file still waiting for an identity."""

    path: str
    commits: set[str]
    counted_authors: set[str] = field(default_factory=set)


class Aggregator:
    """Run-scoped owner of the three aggregation tables.

    :meth:`merge` is the only mutation point.  It validates a file's facts
    before touching any table, so a file is either applied in full or not
    at all.  Callers must merge each file exactly once.
    """

    def __init__(self) -> None:
        self.author_commits: dict[str, set[str]] = defaultdict(set)
        self.commit_lines: dict[str, int] = defaultdict(int)
        self.author_files: dict[str, int] = defaultdict(int)
        self._identity: dict[str, str] = {}
        self._pending: list[_PendingFile] = []
        self.files_merged = 0

    @property
    def unresolved(self) -> set[str]:
        """Commits with lines attributed but no identity seen yet."""
        return {c for p in self._pending for c in p.commits}

    def merge(self, blame: FileBlame) -> None:
        """Fold one file's facts into the run totals."""
        new_identities: dict[str, str] = {}
        for commit, name in blame.authors.items():
            known = self._identity.get(commit, new_identities.get(commit))
            if known is not None and known != name:
                raise MalformedBlameError(
                    f"{blame.path}: commit {commit} resolved to {name!r}, "
                    f"previously {known!r}"
                )
            if known is None:
                new_identities[commit] = name

        self._identity.update(new_identities)

        counted: set[str] = set()
        unresolved: set[str] = set()
        for commit, count in blame.lines.items():
            self.commit_lines[commit] += count
            name = self._identity.get(commit)
            if name is None:
                unresolved.add(commit)
                continue
            self.author_commits[name].add(commit)
            counted.add(name)

        for name in counted:
            self.author_files[name] += 1

        if unresolved:
            logger.debug("%s: %d commit(s) awaiting identity", blame.path, len(unresolved))
            self._pending.append(_PendingFile(blame.path, unresolved, counted))
        if new_identities and self._pending:
            self._settle()

        self.files_merged += 1

    def _settle(self) -> None:
        """Attribute pending commits whose identity is now known."""
        still_pending: list[_PendingFile] = []
        for pending in self._pending:
            for commit in list(pending.commits):
                name = self._identity.get(commit)
                if name is None:
                    continue
                pending.commits.discard(commit)
                self.author_commits[name].add(commit)
                if name not in pending.counted_authors:
                    pending.counted_authors.add(name)
                    self.author_files[name] += 1
            if pending.commits:
                still_pending.append(pending)
        self._pending = still_pending

    def statistics(self) -> list[RankedAuthor]:
        """Reduce the tables to one :class:`RankedAuthor` per author (unordered)."""
        missing = self.unresolved
        if missing:
            raise MalformedBlameError(
                f"{self._pending[0].path}: no identity found for commit(s) "
                f"{', '.join(sorted(missing))}"
            )
        return reduce_statistics(self.author_commits, self.commit_lines, self.author_files)


def reduce_statistics(
    author_commits: dict[str, set[str]],
    commit_lines: dict[str, int],
    author_files: dict[str, int],
) -> list[RankedAuthor]:
    """Pure reduction of the aggregation tables into per-author statistics."""
    return [
        RankedAuthor(
            name=name,
            statistics=Statistics(
                lines=sum(commit_lines.get(c, 0) for c in commits),
                commits=len(commits),
                files=author_files.get(name, 0),
            ),
        )
        for name, commits in author_commits.items()
    ]
